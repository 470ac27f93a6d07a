import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from models import Faculties, Students, UserRole, Users
from schemas.auth import (
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    ResetPasswordSchema,
    VerifyPinSchema,
)
from utils.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter()
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def serialize_student(student: Optional[Students]):
    if student is None:
        return None
    return {
        "id": student.id,
        "userId": student.user_id,
        "regNo": student.reg_no,
        "name": student.name,
        "phone": student.phone,
        "year": student.year,
        "branch": student.branch,
        "section": student.section,
    }


def serialize_faculty(faculty: Optional[Faculties]):
    if faculty is None:
        return None
    return {
        "id": faculty.id,
        "userId": faculty.user_id,
        "name": faculty.name,
        "department": faculty.department,
    }


def serialize_user(user: Users) -> dict:
    """Public view of a user: never includes the password hash."""
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role.value,
        "student": serialize_student(user.student),
        "faculty": serialize_faculty(user.faculty),
    }


# ------------------------------------------------------------------------
# Registration
# ------------------------------------------------------------------------
@router.post(
    "/register",
    summary="Register a user together with its role-matched profile",
)
def register(data: RegisterSchema, db: Session = Depends(get_db)):
    """
    1) Reject a duplicate email.
    2) Hash the password.
    3) Create the user and its profile in one transaction.
    """
    if db.query(Users).filter_by(email=data.email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = Users(email=data.email, password_hash=hash_password(data.password), role=data.role)
    try:
        db.add(user)
        db.flush()
        if data.role == UserRole.STUDENT and data.student:
            db.add(Students(user_id=user.id, **data.student.model_dump()))
        if data.role == UserRole.FACULTY and data.faculty:
            db.add(Faculties(user_id=user.id, **data.faculty.model_dump()))
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Registration for %s rejected by a uniqueness constraint", data.email)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Registration conflicts with an existing record",
        )
    db.refresh(user)

    logger.info("Registered user %s with role %s", user.id, user.role.value)
    return {"id": user.id, "email": user.email, "role": user.role.value}


# ------------------------------------------------------------------------
# Login
# ------------------------------------------------------------------------
def _invalid_credentials():
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
    )


@router.post("/login", summary="Login with email+password or regNo+phone")
def login(data: LoginSchema, db: Session = Depends(get_db)):
    if data.uses_email:
        user = db.query(Users).filter_by(email=data.email).first()
        if not user or not verify_password(data.password, user.password_hash):
            logger.warning("Failed email login")
            raise _invalid_credentials()
    else:
        student = db.query(Students).filter_by(reg_no=data.reg_no).first()
        if not student or student.phone != data.phone:
            logger.warning("Failed registration-number login")
            raise _invalid_credentials()
        user = student.user

    logger.info("User %s logged in", user.id)
    return {
        "accessToken": create_access_token(user.id, user.role.value),
        "refreshToken": create_refresh_token(user.id, user.role.value),
        "user": serialize_user(user),
    }


# ------------------------------------------------------------------------
# Password reset using regNo + phone
# ------------------------------------------------------------------------
@router.post("/reset-password", summary="Reset a student's password")
def reset_password(data: ResetPasswordSchema, db: Session = Depends(get_db)):
    student = db.query(Students).filter_by(reg_no=data.reg_no).first()
    # Unknown regNo and wrong phone share one answer.
    if not student or student.phone != data.phone:
        logger.warning("Password reset verification failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Verification failed",
        )

    student.user.password_hash = hash_password(data.new_password)
    db.commit()

    logger.info("Password reset for user %s", student.user_id)
    return {"ok": True}


# ------------------------------------------------------------------------
# PIN: last four digits of the stored phone number
# ------------------------------------------------------------------------
@router.post("/verify-pin", summary="Verify the 4-digit PIN for a student")
def verify_pin(data: VerifyPinSchema, db: Session = Depends(get_db)):
    """
    The PIN is derived from the phone number rather than stored on its own, so
    it is a weak second step on top of login, not a secret.
    """
    student = db.query(Students).filter_by(reg_no=data.reg_no).first()
    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )
    if student.phone[-4:] != data.pin:
        logger.warning("Invalid PIN for student %s", student.id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid PIN",
        )
    return {"ok": True}


# ------------------------------------------------------------------------
# Access-token refresh
# ------------------------------------------------------------------------
@router.post("/refresh", summary="Exchange a refresh token for a new access token")
def refresh(data: Optional[RefreshSchema] = None):
    if data is None or not data.refresh_token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing refreshToken",
        )
    payload = decode_refresh_token(data.refresh_token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )
    return {"accessToken": create_access_token(payload["userId"], payload["role"])}


# ------------------------------------------------------------------------
# Current user
# ------------------------------------------------------------------------
def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Users:
    "Validate the access token and return its user."
    payload = decode_access_token(token) if token else None
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = db.get(Users, payload["userId"])
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


@router.get("/me", summary="Return the user behind the access token")
def me(current_user: Users = Depends(get_current_user)):
    return serialize_user(current_user)
