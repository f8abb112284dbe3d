from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ...domain.entities import ClassStatus, Role


class TokenReq(BaseModel):
    email: EmailStr
    name: str | None = None
    photo_url: str | None = None

class TokenResp(BaseModel):
    token: str
    token_type: str = "bearer"


class UserCreate(BaseModel):
    email: EmailStr
    name: str | None = None
    photo_url: str | None = None

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    email: EmailStr
    name: str | None = None
    photo_url: str | None = None
    role: Role

class UserCreateResp(BaseModel):
    acknowledged: bool = True
    inserted_id: int | None = None
    message: str | None = None

class RoleClassification(BaseModel):
    admin: bool = False
    instructor: bool = False
    student: bool = False


class ClassCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    image_url: str | None = None
    instructor_name: str | None = None
    price: float = Field(ge=0)
    seats: int = Field(ge=0)

class ClassOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    image_url: str | None = None
    instructor_name: str | None = None
    instructor_email: str
    price: float
    seats: int
    total_enrolled: int
    status: ClassStatus
    feedback: str | None = None

class FeedbackReq(BaseModel):
    feedback: str


class SelectionCreate(BaseModel):
    class_id: int

class SelectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    student_email: str
    class_id: int
    price: float
    created_at: datetime | None = None


class PaymentIntentReq(BaseModel):
    price: float = Field(gt=0)

class PaymentIntentResp(BaseModel):
    client_secret: str

class PaymentReq(BaseModel):
    selected_class_id: int
    class_id: int
    price: float = Field(ge=0)
    transaction_id: str = Field(min_length=1, max_length=255)

class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    student_email: str
    selected_class_id: int
    class_id: int
    price: float
    transaction_id: str
    created_at: datetime | None = None


class InsertResp(BaseModel):
    acknowledged: bool = True
    inserted_id: int

class UpdateResp(BaseModel):
    acknowledged: bool = True
    matched_count: int
    modified_count: int

class DeleteResp(BaseModel):
    acknowledged: bool = True
    deleted_count: int

class EnrollmentResp(BaseModel):
    insert_result: InsertResp
    delete_result: DeleteResp
    update_result: UpdateResp


class ErrorResp(BaseModel):
    error: bool = True
    kind: str
    message: str
