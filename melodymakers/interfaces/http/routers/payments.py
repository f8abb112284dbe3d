from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ....application.dto import PaymentInput
from ....application.use_cases.finalize_enrollment import FinalizeEnrollment
from ....domain.errors import AppError
from ....infrastructure.cache import invalidate_approved_classes
from ....infrastructure.db import get_db
from ....infrastructure.metrics import enrollments_finalized_total, enrollments_rejected_total
from ....infrastructure.payments import StripeGateway, get_payment_gateway
from ....infrastructure.repositories import EnrollmentStore, PaymentRepository
from ..authz import ensure_self, get_user_email, require_student
from ..schemas import (
    DeleteResp,
    EnrollmentResp,
    InsertResp,
    PaymentIntentReq,
    PaymentIntentResp,
    PaymentOut,
    PaymentReq,
    UpdateResp,
)

router = APIRouter(tags=["payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResp)
def create_payment_intent(
    payload: PaymentIntentReq,
    _: str = Depends(get_user_email),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    return PaymentIntentResp(client_secret=gateway.create_intent(payload.price))


@router.post("/payments", response_model=EnrollmentResp, status_code=status.HTTP_201_CREATED)
def finalize_payment(payload: PaymentReq, caller: str = Depends(get_user_email), db: Session = Depends(get_db)):
    uc = FinalizeEnrollment(store=EnrollmentStore(db), on_committed=invalidate_approved_classes)
    try:
        outcome = uc.execute(PaymentInput(student_email=caller, **payload.model_dump()))
    except AppError as exc:
        enrollments_rejected_total.labels(kind=exc.kind.value).inc()
        raise
    enrollments_finalized_total.inc()
    return EnrollmentResp(
        insert_result=InsertResp(inserted_id=outcome.payment.inserted_id),
        delete_result=DeleteResp(deleted_count=outcome.selection.deleted_count),
        update_result=UpdateResp(
            matched_count=outcome.seats.matched_count,
            modified_count=outcome.seats.modified_count,
        ),
    )


@router.get("/payments/{email}", response_model=list[PaymentOut])
def payment_history(email: str, caller: str = Depends(require_student), db: Session = Depends(get_db)):
    ensure_self(caller, email)
    return PaymentRepository(db).list_for_student(caller)
