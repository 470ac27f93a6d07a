import enum

from database import Base
from sqlalchemy import Column, Integer, BigInteger, String, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship

# SQLite only autoincrements INTEGER primary keys
PrimaryKey = BigInteger().with_variant(Integer, "sqlite")


class UserRole(str, enum.Enum):
    STUDENT = "STUDENT"
    FACULTY = "FACULTY"
    ADMIN = "ADMIN"


class Users(Base):
    __tablename__ = "users"

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.STUDENT)
    created_at = Column(
        DateTime,
        nullable=False,
        default=func.now(),
        server_default=func.now()
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=func.now(),
        server_default=func.now(),
        onupdate=func.now()
    )

    student = relationship("Students", back_populates="user", uselist=False)
    faculty = relationship("Faculties", back_populates="user", uselist=False)


class Students(Base):
    __tablename__ = "students"

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    user_id = Column(PrimaryKey, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    reg_no = Column(String(20), nullable=False, unique=True, index=True)
    name = Column(String(60), nullable=False)
    phone = Column(String(10), nullable=False)
    year = Column(String(1), nullable=False)
    branch = Column(String(30), nullable=False)
    section = Column(String(1), nullable=False)
    created_at = Column(
        DateTime,
        nullable=False,
        default=func.now(),
        server_default=func.now()
    )

    user = relationship("Users", back_populates="student")


class Faculties(Base):
    __tablename__ = "faculties"

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    user_id = Column(PrimaryKey, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    name = Column(String(60), nullable=False)
    department = Column(String(40), nullable=False)
    created_at = Column(
        DateTime,
        nullable=False,
        default=func.now(),
        server_default=func.now()
    )

    user = relationship("Users", back_populates="faculty")
