from dataclasses import dataclass


@dataclass
class InsertResult:
    inserted_id: int
    acknowledged: bool = True


@dataclass
class UpdateResult:
    matched_count: int
    modified_count: int
    acknowledged: bool = True


@dataclass
class DeleteResult:
    deleted_count: int
    acknowledged: bool = True


@dataclass
class PaymentInput:
    student_email: str
    selected_class_id: int
    class_id: int
    price: float
    transaction_id: str


@dataclass
class EnrollmentOutcome:
    payment: InsertResult
    selection: DeleteResult
    seats: UpdateResult
