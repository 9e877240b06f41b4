from datetime import datetime, UTC
from typing import Optional

from sqlmodel import SQLModel, Field

class Section(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)  # trimmed, upper-case
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
