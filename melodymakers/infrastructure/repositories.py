from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .models import ClassORM, PaymentORM, SelectedClassORM, UserORM
from ..application.dto import DeleteResult, InsertResult, PaymentInput, UpdateResult
from ..application.use_cases.finalize_enrollment import IEnrollmentStore
from ..application.use_cases.register_user import IUserRepository
from ..application.use_cases.select_class import IClassReader, ISelectionRepository
from ..domain.entities import ClassStatus, Role, User
from ..domain.errors import Conflict, DuplicatePayment


def to_domain(u: UserORM) -> User:
    return User(id=u.id, email=u.email, name=u.name, photo_url=u.photo_url, role=Role(u.role))


def _update_changed(db: Session, model, criterion, column, value) -> UpdateResult:
    """Matched rows satisfy ``criterion``; modified rows are those whose value actually changed."""
    matched = db.execute(select(func.count()).select_from(model).where(criterion)).scalar_one()
    result = db.execute(
        update(model)
        .where(criterion, column.is_distinct_from(value))
        .values({column: value})
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return UpdateResult(matched_count=matched, modified_count=result.rowcount)


class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def get_by_email(self, email: str) -> User | None:
        row = self.db.query(UserORM).filter(UserORM.email == email).first()
        return to_domain(row) if row else None

    def create(self, email: str, name: str | None = None, photo_url: str | None = None) -> User:
        row = UserORM(email=email, name=name, photo_url=photo_url, role=Role.UNASSIGNED.value)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("user already exists")
        self.db.refresh(row)
        return to_domain(row)

    def list_all(self) -> list[UserORM]:
        return self.db.query(UserORM).order_by(UserORM.id).all()

    def list_by_role(self, role: Role) -> list[UserORM]:
        return self.db.query(UserORM).filter(UserORM.role == role.value).order_by(UserORM.id).all()

    def set_role(self, email: str, role: Role) -> UpdateResult:
        return _update_changed(self.db, UserORM, UserORM.email == email, UserORM.role, role.value)


class ClassRepository(IClassReader):
    def __init__(self, db: Session): self.db = db

    def get(self, class_id: int) -> ClassORM | None:
        return self.db.get(ClassORM, class_id)

    def list_all(self) -> list[ClassORM]:
        return self.db.query(ClassORM).order_by(ClassORM.id).all()

    def list_approved(self) -> list[ClassORM]:
        return (self.db.query(ClassORM)
                .filter(ClassORM.status == ClassStatus.APPROVED.value)
                .order_by(ClassORM.total_enrolled.desc(), ClassORM.id)
                .all())

    def list_by_instructor(self, email: str) -> list[ClassORM]:
        return (self.db.query(ClassORM)
                .filter(ClassORM.instructor_email == email)
                .order_by(ClassORM.id)
                .all())

    def create(self, instructor_email: str, **fields) -> InsertResult:
        row = ClassORM(
            instructor_email=instructor_email,
            status=ClassStatus.PENDING.value,
            total_enrolled=0,
            **fields,
        )
        self.db.add(row); self.db.commit(); self.db.refresh(row)
        return InsertResult(inserted_id=row.id)

    def set_status(self, class_id: int, status: ClassStatus) -> UpdateResult:
        return _update_changed(self.db, ClassORM, ClassORM.id == class_id, ClassORM.status, status.value)

    def set_feedback(self, class_id: int, feedback: str) -> UpdateResult:
        return _update_changed(self.db, ClassORM, ClassORM.id == class_id, ClassORM.feedback, feedback)


class SelectionRepository(ISelectionRepository):
    def __init__(self, db: Session): self.db = db

    def list_for_student(self, email: str) -> list[SelectedClassORM]:
        return (self.db.query(SelectedClassORM)
                .filter(SelectedClassORM.student_email == email)
                .order_by(SelectedClassORM.id)
                .all())

    def exists(self, student_email: str, class_id: int) -> bool:
        q = select(SelectedClassORM.id).where(
            SelectedClassORM.student_email == student_email,
            SelectedClassORM.class_id == class_id,
        )
        return self.db.execute(q).first() is not None

    def create(self, student_email: str, class_id: int, price: float) -> InsertResult:
        row = SelectedClassORM(student_email=student_email, class_id=class_id, price=price)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("class already selected")
        self.db.refresh(row)
        return InsertResult(inserted_id=row.id)

    def delete(self, selection_id: int, student_email: str) -> DeleteResult:
        result = self.db.execute(
            delete(SelectedClassORM)
            .where(SelectedClassORM.id == selection_id,
                   SelectedClassORM.student_email == student_email)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return DeleteResult(deleted_count=result.rowcount)


class PaymentRepository:
    def __init__(self, db: Session): self.db = db

    def list_for_student(self, email: str) -> list[PaymentORM]:
        return (self.db.query(PaymentORM)
                .filter(PaymentORM.student_email == email)
                .order_by(PaymentORM.created_at.desc(), PaymentORM.id.desc())
                .all())


class EnrollmentStore(IEnrollmentStore):
    """Finalization writes sharing one session transaction.

    Only write statements are issued before ``commit`` so that the first one
    opens the transaction and no read lock is held ahead of it.
    """

    def __init__(self, db: Session): self.db = db

    def add_payment(self, payment: PaymentInput) -> int:
        row = PaymentORM(
            student_email=payment.student_email,
            selected_class_id=payment.selected_class_id,
            class_id=payment.class_id,
            price=payment.price,
            transaction_id=payment.transaction_id,
        )
        self.db.add(row)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise DuplicatePayment("payment already processed")
        return row.id

    def remove_selection(self, selection_id: int, student_email: str, class_id: int) -> int:
        result = self.db.execute(
            delete(SelectedClassORM)
            .where(SelectedClassORM.id == selection_id,
                   SelectedClassORM.student_email == student_email,
                   SelectedClassORM.class_id == class_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def take_seat(self, class_id: int) -> int:
        result = self.db.execute(
            update(ClassORM)
            .where(ClassORM.id == class_id, ClassORM.seats > 0)
            .values(seats=ClassORM.seats - 1, total_enrolled=ClassORM.total_enrolled + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def class_exists(self, class_id: int) -> bool:
        return self.db.execute(select(ClassORM.id).where(ClassORM.id == class_id)).first() is not None

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
