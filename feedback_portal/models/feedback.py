from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

from feedback_portal.models.subject import Subject
from feedback_portal.models.user import User

COMMENT_MAX_LENGTH = 500


class Feedback(SQLModel, table=True):
    # one submission per (student, subject, section); the database is the final guard
    __table_args__ = (UniqueConstraint("user_id", "subject_id", "section", name="uq_feedback_student_subject_section"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    subject_id: int = Field(foreign_key="subject.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    section: str
    teaching_rating: int
    knowledge_rating: int
    behavior_rating: int
    comment: Optional[str] = Field(default=None, max_length=COMMENT_MAX_LENGTH)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    subject: Optional[Subject] = Relationship()
    user: Optional[User] = Relationship()
