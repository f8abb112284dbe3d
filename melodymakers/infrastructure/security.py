from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from ..config import settings


def create_access_token(email: str, claims: dict | None = None, minutes: int | None = None) -> str:
    minutes = minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    exp = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    payload = dict(claims or {})
    payload.update({"sub": email, "email": email, "exp": exp})
    return jwt.encode(payload, settings.ACCESS_TOKEN_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> str:
    """Returns the email claim of a valid token or raises JWTError."""
    payload = jwt.decode(token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.JWT_ALGORITHM])
    email = payload.get("email") or payload.get("sub")
    if not email:
        raise JWTError("No email claim")
    return email
