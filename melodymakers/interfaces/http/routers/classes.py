import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ....domain.entities import ClassStatus
from ....infrastructure.cache import APPROVED_CLASSES_KEY, get_cache, set_cache, invalidate_approved_classes
from ....infrastructure.db import get_db
from ....infrastructure.metrics import cache_hits_total, cache_misses_total
from ....infrastructure.repositories import ClassRepository
from ..authz import ensure_self, require_admin, require_instructor
from ..schemas import ClassCreate, ClassOut, FeedbackReq, InsertResp, UpdateResp

logger = structlog.get_logger()

router = APIRouter(tags=["classes"])


@router.get("/classes", response_model=list[ClassOut], dependencies=[Depends(require_admin)])
def list_classes(db: Session = Depends(get_db)):
    return ClassRepository(db).list_all()


@router.get("/approved-classes", response_model=list[ClassOut])
def approved_classes(db: Session = Depends(get_db)):
    cached = get_cache(APPROVED_CLASSES_KEY)
    if cached is not None:
        cache_hits_total.inc()
        return cached

    cache_misses_total.inc()
    rows = ClassRepository(db).list_approved()
    result = [ClassOut.model_validate(row) for row in rows]
    set_cache(APPROVED_CLASSES_KEY, [r.model_dump(mode="json") for r in result])
    return result


@router.get("/classes/{email}", response_model=list[ClassOut])
def instructor_classes(email: str, caller: str = Depends(require_instructor), db: Session = Depends(get_db)):
    ensure_self(caller, email)
    return ClassRepository(db).list_by_instructor(caller)


@router.post("/classes", response_model=InsertResp, status_code=status.HTTP_201_CREATED)
def create_class(payload: ClassCreate, caller: str = Depends(require_instructor), db: Session = Depends(get_db)):
    result = ClassRepository(db).create(instructor_email=caller, **payload.model_dump())
    logger.info("class_created", class_id=result.inserted_id, instructor_email=caller)
    invalidate_approved_classes()
    return InsertResp(inserted_id=result.inserted_id)


# --- Admin moderation:

@router.patch("/classes/status", response_model=UpdateResp, dependencies=[Depends(require_admin)])
def set_class_status(
    id: int = Query(...),
    status: ClassStatus = Query(...),
    db: Session = Depends(get_db),
):
    result = ClassRepository(db).set_status(id, status)
    logger.info("class_status_changed", class_id=id, status=status.value, matched=result.matched_count)
    invalidate_approved_classes()
    return UpdateResp(matched_count=result.matched_count, modified_count=result.modified_count)


@router.patch("/classes/feedback/{class_id}", response_model=UpdateResp, dependencies=[Depends(require_admin)])
def set_class_feedback(class_id: int, payload: FeedbackReq, db: Session = Depends(get_db)):
    result = ClassRepository(db).set_feedback(class_id, payload.feedback)
    invalidate_approved_classes()
    return UpdateResp(matched_count=result.matched_count, modified_count=result.modified_count)
