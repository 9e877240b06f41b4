from datetime import datetime, UTC
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel

class UserRole(str, Enum):
    principal = "principal"
    student = "student"


class User(SQLModel, table=True):
    """User model represents a principal or a student."""
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    password: str = Field(exclude=True)
    role: UserRole = Field(default=UserRole.student)
    # student_id and section are only set for students
    student_id: Optional[str] = Field(default=None, unique=True)
    section: Optional[str] = Field(default=None, foreign_key="section.name", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
