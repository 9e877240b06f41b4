from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, StrictInt

from feedback_portal.schemas.user_schema import StudentSummary
from feedback_portal.utils.utils import MAX_DB_ID


class FeedbackCreateRequest(BaseModel):
    subject_id: int = Field(ge=1, le=MAX_DB_ID)
    # strict: JSON true or 4.0 are not ratings
    teaching_rating: StrictInt
    knowledge_rating: StrictInt
    behavior_rating: StrictInt
    comment: Optional[str] = None


class Ratings(BaseModel):
    teaching: int
    knowledge: int
    behavior: int


class FeedbackCreatedResponse(BaseModel):
    id: int
    subject_id: int
    section: str
    ratings: Ratings
    comment: Optional[str] = None
    created_at: datetime
    message: str = "Feedback submitted successfully"


class MyFeedbackEntry(BaseModel):
    id: int
    subject_id: int
    subject_name: str
    section: str
    ratings: Ratings
    comment: Optional[str] = None
    created_at: datetime


class FeedbackDetail(BaseModel):
    id: int
    student: StudentSummary
    section: str
    ratings: Ratings
    comment: Optional[str] = None
    created_at: datetime


class SentimentCounts(BaseModel):
    positive: int = 0
    neutral: int = 0
    negative: int = 0


class AverageRatings(BaseModel):
    # "N/A" when nobody has answered yet
    teaching: str
    knowledge: str
    behavior: str


class Analysis(BaseModel):
    overall_sentiment: SentimentCounts
    comment_sentiment: SentimentCounts
    average_ratings: AverageRatings
    unsubmitted_students: List[StudentSummary]


class AnalysisReport(BaseModel):
    subject_id: int
    subject_name: str
    section: str
    total_feedback_entries: int
    feedback_details: List[FeedbackDetail]
    analysis: Analysis
