from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from ...domain.entities import Role, authorize
from ...domain.errors import Forbidden, Unauthenticated
from ...infrastructure.db import get_db
from ...infrastructure.repositories import UserRepository
from ...infrastructure.security import decode_token

bearer = HTTPBearer(auto_error=False)


def get_user_email(creds: HTTPAuthorizationCredentials | None = Depends(bearer)) -> str:
    if creds is None:
        raise Unauthenticated("unauthorized access")
    try:
        return decode_token(creds.credentials)
    except JWTError:
        raise Unauthenticated("unauthorized access")


def require_role(role: Role):
    """Dependency that denies the request before the handler runs."""

    def _check(email: str = Depends(get_user_email), db: Session = Depends(get_db)) -> str:
        user = UserRepository(db).get_by_email(email)
        if not authorize(user, role):
            raise Forbidden("forbidden access")
        return email

    _check.__name__ = f"require_{role.value}"
    return _check


require_admin = require_role(Role.ADMIN)
require_instructor = require_role(Role.INSTRUCTOR)
require_student = require_role(Role.STUDENT)


def ensure_self(caller_email: str, path_email: str) -> None:
    if caller_email.lower() != path_email.lower():
        raise Forbidden("forbidden access")
