"""Enrollment finalization.

Converts a paid selection into a confirmed enrollment. The three writes
(payment insert, selection delete, seat/enrollment counter update) run in a
single store transaction: either all of them commit or none do. The
provider's transaction id is the idempotency key, a replay is rejected
before any counter is touched.
"""
import structlog

from ..dto import DeleteResult, EnrollmentOutcome, InsertResult, PaymentInput, UpdateResult
from ...domain.errors import AppError, ClassFull, NotFound

logger = structlog.get_logger()


class IEnrollmentStore:
    def add_payment(self, payment: PaymentInput) -> int:
        """Inserts the payment, raises DuplicatePayment for a known transaction id."""
    def remove_selection(self, selection_id: int, student_email: str, class_id: int) -> int: ...
    def take_seat(self, class_id: int) -> int: ...
    def class_exists(self, class_id: int) -> bool: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class FinalizeEnrollment:
    def __init__(self, store: IEnrollmentStore, on_committed=None):
        self.store = store
        self.on_committed = on_committed

    def execute(self, payment: PaymentInput) -> EnrollmentOutcome:
        try:
            payment_id = self.store.add_payment(payment)

            deleted = self.store.remove_selection(
                payment.selected_class_id, payment.student_email, payment.class_id
            )
            if deleted != 1:
                raise NotFound("selected class not found")

            updated = self.store.take_seat(payment.class_id)
            if updated != 1:
                raise ClassFull("no seats left in this class")

            self.store.commit()
        except AppError as exc:
            self.store.rollback()
            logger.warning(
                "enrollment_rejected",
                kind=exc.kind.value,
                transaction_id=payment.transaction_id,
                class_id=payment.class_id,
            )
            if isinstance(exc, ClassFull) and not self.store.class_exists(payment.class_id):
                raise NotFound("class not found") from exc
            raise
        except Exception:
            self.store.rollback()
            raise

        logger.info(
            "enrollment_finalized",
            payment_id=payment_id,
            student_email=payment.student_email,
            class_id=payment.class_id,
            selected_class_id=payment.selected_class_id,
        )
        if self.on_committed:
            self.on_committed()
        return EnrollmentOutcome(
            payment=InsertResult(inserted_id=payment_id),
            selection=DeleteResult(deleted_count=deleted),
            seats=UpdateResult(matched_count=updated, modified_count=updated),
        )
