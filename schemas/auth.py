"""
Request schemas for the /auth endpoints.

Profile fields are trimmed before they are matched, and each rule carries the
exact message the mobile client shows to the user.
"""
import re
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, StringConstraints, model_validator

from models import UserRole


def _trim(v):
    return v.strip() if isinstance(v, str) else v


def _pattern(pattern: str, message: str):
    compiled = re.compile(pattern)

    def check(v: str) -> str:
        if not compiled.fullmatch(v):
            raise ValueError(message)
        return v

    return check


def _required(message: str):
    def check(v: str) -> str:
        if not v:
            raise ValueError(message)
        return v

    return check


Name = Annotated[
    str,
    BeforeValidator(_trim),
    AfterValidator(_required("Name is required")),
    AfterValidator(_pattern(r"[A-Za-z .'-]{2,60}", "Name can contain letters and basic punctuation only")),
]
Phone = Annotated[str, BeforeValidator(_trim), AfterValidator(_pattern(r"[0-9]{10}", "Phone must be exactly 10 digits"))]
RegNo = Annotated[
    str,
    BeforeValidator(_trim),
    AfterValidator(_pattern(r"[A-Za-z0-9\-/]{5,20}", "Invalid registration number format")),
]
Year = Annotated[str, BeforeValidator(_trim), AfterValidator(_pattern(r"[1-4]", "Year must be 1, 2, 3, or 4"))]
Branch = Annotated[
    str,
    BeforeValidator(_trim),
    AfterValidator(_pattern(r"[A-Za-z&. ]{2,30}", "Branch should be alphabetic (2-30 chars)")),
]
Department = Annotated[
    str,
    BeforeValidator(_trim),
    AfterValidator(_pattern(r"[A-Za-z&. ]{2,40}", "Department should be alphabetic (2-40 chars)")),
]
Section = Annotated[
    str,
    BeforeValidator(_trim),
    AfterValidator(_pattern(r"[A-Z]", "Section must be a single uppercase letter (A-Z)")),
]
Pin = Annotated[str, BeforeValidator(_trim), AfterValidator(_pattern(r"[0-9]{4}", "PIN must be 4 digits"))]
Password = Annotated[str, StringConstraints(min_length=6)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ----------------------------------------
# Registration
# ----------------------------------------
class StudentProfileSchema(_CamelModel):
    reg_no: RegNo = Field(..., alias="regNo")
    name: Name
    phone: Phone
    year: Year
    branch: Branch
    section: Section


class FacultyProfileSchema(_CamelModel):
    name: Name
    department: Department


class RegisterSchema(_CamelModel):
    email: EmailStr = Field(..., description="Valid email address")
    password: Password = Field(..., description="Password (min 6 characters)")
    role: UserRole = UserRole.STUDENT
    student: Optional[StudentProfileSchema] = None
    faculty: Optional[FacultyProfileSchema] = None


# ----------------------------------------
# Login: email+password or regNo+phone
# ----------------------------------------
LOGIN_SHAPE_MESSAGE = "Provide email+password or regNo+phone"


class LoginSchema(_CamelModel):
    email: Optional[EmailStr] = None
    password: Optional[Password] = None
    reg_no: Optional[RegNo] = Field(None, alias="regNo")
    phone: Optional[Phone] = None

    @property
    def uses_email(self) -> bool:
        return bool(self.email and self.password)

    @property
    def uses_reg_no(self) -> bool:
        return bool(self.reg_no and self.phone)

    @model_validator(mode="after")
    def one_credential_pair(self):
        if self.uses_email == self.uses_reg_no:
            raise ValueError(LOGIN_SHAPE_MESSAGE)
        return self


class ResetPasswordSchema(_CamelModel):
    reg_no: RegNo = Field(..., alias="regNo")
    phone: Phone
    new_password: Password = Field(..., alias="newPassword")


class VerifyPinSchema(_CamelModel):
    reg_no: RegNo = Field(..., alias="regNo")
    pin: Pin


class RefreshSchema(_CamelModel):
    refresh_token: Optional[str] = Field(None, alias="refreshToken")
