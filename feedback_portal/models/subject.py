from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

class Subject(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("name", "section", name="uq_subject_name_section"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    section: str = Field(foreign_key="section.name", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
