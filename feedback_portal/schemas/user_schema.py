from typing import Optional

from pydantic import BaseModel

from feedback_portal.models import UserRole, User


class StudentCreateRequest(BaseModel):
    email: str
    password: str
    student_id: str
    section: str


class UserResponse(BaseModel):
    id: int
    email: str
    role: UserRole
    student_id: Optional[str] = None
    section: Optional[str] = None

    @staticmethod
    def from_user(user: User | None) -> Optional['UserResponse']:
        if user is None:
            return None
        return UserResponse.model_validate(user.model_dump())


class StudentSummary(BaseModel):
    """What a principal sees about a student who has not responded yet."""
    email: str
    student_id: Optional[str] = None
