import structlog
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ....application.use_cases.register_user import RegisterUser
from ....domain.entities import Role, classify
from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ..authz import get_user_email, require_admin
from ..schemas import RoleClassification, UpdateResp, UserCreate, UserCreateResp, UserOut

logger = structlog.get_logger()

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut], dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    return UserRepository(db).list_all()


@router.get("/instructors", response_model=list[UserOut])
def list_instructors(db: Session = Depends(get_db)):
    return UserRepository(db).list_by_role(Role.INSTRUCTOR)


@router.post("", response_model=UserCreateResp)
def create_user(payload: UserCreate, response: Response, db: Session = Depends(get_db)):
    user, created = RegisterUser(repo=UserRepository(db)).execute(
        payload.email, name=payload.name, photo_url=payload.photo_url
    )
    if not created:
        return UserCreateResp(acknowledged=False, message="user already exists")
    response.status_code = status.HTTP_201_CREATED
    return UserCreateResp(inserted_id=user.id)


@router.patch("/change-role", response_model=UpdateResp)
def change_role(
    email: str = Query(...),
    role: Role = Query(...),
    admin_email: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    result = UserRepository(db).set_role(email, role)
    logger.info("user_role_changed", email=email, role=role.value,
                changed_by=admin_email, matched=result.matched_count)
    return UpdateResp(matched_count=result.matched_count, modified_count=result.modified_count)


@router.get("/role/{email}", response_model=RoleClassification)
def role_of(email: str, caller: str = Depends(get_user_email), db: Session = Depends(get_db)):
    # a mismatched email answers all-false without looking the target up
    if caller.lower() != email.lower():
        return RoleClassification()
    return RoleClassification(**classify(UserRepository(db).get_by_email(caller)))
