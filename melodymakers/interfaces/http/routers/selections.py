from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ....application.use_cases.select_class import SelectClass
from ....infrastructure.db import get_db
from ....infrastructure.repositories import ClassRepository, SelectionRepository
from ..authz import ensure_self, require_student
from ..schemas import DeleteResp, InsertResp, SelectionCreate, SelectionOut

router = APIRouter(prefix="/my-classes", tags=["selections"])


@router.get("/{email}", response_model=list[SelectionOut])
def my_classes(email: str, caller: str = Depends(require_student), db: Session = Depends(get_db)):
    ensure_self(caller, email)
    return SelectionRepository(db).list_for_student(caller)


@router.post("", response_model=InsertResp, status_code=status.HTTP_201_CREATED)
def select_class(payload: SelectionCreate, caller: str = Depends(require_student), db: Session = Depends(get_db)):
    uc = SelectClass(classes=ClassRepository(db), selections=SelectionRepository(db))
    result = uc.execute(caller, payload.class_id)
    return InsertResp(inserted_id=result.inserted_id)


@router.delete("/{selection_id}", response_model=DeleteResp)
def remove_selection(selection_id: int, caller: str = Depends(require_student), db: Session = Depends(get_db)):
    # only the caller's own selections can match
    result = SelectionRepository(db).delete(selection_id, caller)
    return DeleteResp(deleted_count=result.deleted_count)
