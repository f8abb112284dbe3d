from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STUDENT = "student"
    UNASSIGNED = "unassigned"


class ClassStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


@dataclass(frozen=True)
class User:
    id: int | None
    email: str
    name: str | None = None
    photo_url: str | None = None
    role: Role = Role.UNASSIGNED


def authorize(user: User | None, required: Role) -> bool:
    """Strict allow/deny: unknown users and role mismatches are denied."""
    if user is None:
        return False
    return user.role == required


def classify(user: User | None) -> dict[str, bool]:
    role = user.role if user else None
    return {
        "admin": role == Role.ADMIN,
        "instructor": role == Role.INSTRUCTOR,
        "student": role == Role.STUDENT,
    }
