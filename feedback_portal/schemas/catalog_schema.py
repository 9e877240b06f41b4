from datetime import datetime

from pydantic import BaseModel


class SectionCreateRequest(BaseModel):
    name: str


class SectionResponse(BaseModel):
    id: int
    name: str
    message: str | None = None


class SubjectCreateRequest(BaseModel):
    name: str
    section: str


class SubjectResponse(BaseModel):
    id: int
    name: str
    section: str
    created_at: datetime
