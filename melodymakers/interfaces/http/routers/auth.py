from fastapi import APIRouter, Request

from ....config import settings
from ....infrastructure.security import create_access_token
from ..limits import limiter
from ..schemas import TokenReq, TokenResp

router = APIRouter(tags=["auth"])


@router.post("/jwt", response_model=TokenResp)
@limiter.limit(lambda: settings.JWT_RATE_LIMIT)
def issue_token(request: Request, payload: TokenReq):
    claims = payload.model_dump(exclude_none=True, exclude={"email"})
    token = create_access_token(email=payload.email, claims=claims)
    return TokenResp(token=token)
