from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base
from ..domain.entities import ClassStatus, Role


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserORM(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=Role.UNASSIGNED.value, index=True)

    def __repr__(self) -> str:
        return f"UserORM(id={self.id!r}, email={self.email!r}, role={self.role!r})"


class ClassORM(Base):
    __tablename__ = "classes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    instructor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    instructor_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    seats: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_enrolled: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ClassStatus.PENDING.value, index=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("seats >= 0", name="ck_classes_seats_non_negative"),
        CheckConstraint("total_enrolled >= 0", name="ck_classes_enrolled_non_negative"),
    )

    def __repr__(self) -> str:
        return f"ClassORM(id={self.id!r}, name={self.name!r}, status={self.status!r})"


class SelectedClassORM(Base):
    __tablename__ = "selected_classes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    class_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (UniqueConstraint("student_email", "class_id", name="uq_student_class"),)


class PaymentORM(Base):
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    selected_class_id: Mapped[int] = mapped_column(Integer, nullable=False)
    class_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    transaction_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


User = UserORM
Class = ClassORM
SelectedClass = SelectedClassORM
Payment = PaymentORM

__all__ = [
    "Base",
    "UserORM",
    "ClassORM",
    "SelectedClassORM",
    "PaymentORM",
    "User",
    "Class",
    "SelectedClass",
    "Payment",
]
