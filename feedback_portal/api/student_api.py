from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from feedback_portal.auth.auth_handler import require_student
from feedback_portal.configs.database import get_db
from feedback_portal.exceptions import InvalidInputError
from feedback_portal.models import User
from feedback_portal.schemas.catalog_schema import SubjectResponse
from feedback_portal.schemas.feedback_schema import (
    FeedbackCreateRequest,
    FeedbackCreatedResponse,
    MyFeedbackEntry,
    Ratings,
)
from feedback_portal.services import catalog_service, feedback_service

router = APIRouter(prefix="/student", tags=["Student"])


def _ratings(feedback) -> Ratings:
    return Ratings(teaching=feedback.teaching_rating, knowledge=feedback.knowledge_rating,
                   behavior=feedback.behavior_rating)


@router.post("/submit-feedback", response_model=FeedbackCreatedResponse, status_code=status.HTTP_201_CREATED)
def submit_feedback(
        feedback_req: FeedbackCreateRequest,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_student),
):
    feedback = feedback_service.submit_feedback(
        db,
        student=current_user,
        subject_id=feedback_req.subject_id,
        teaching_rating=feedback_req.teaching_rating,
        knowledge_rating=feedback_req.knowledge_rating,
        behavior_rating=feedback_req.behavior_rating,
        comment=feedback_req.comment,
    )
    return FeedbackCreatedResponse(
        id=feedback.id,
        subject_id=feedback.subject_id,
        section=feedback.section,
        ratings=_ratings(feedback),
        comment=feedback.comment,
        created_at=feedback.created_at,
    )


@router.get("/my-feedback", response_model=List[MyFeedbackEntry])
def my_feedback(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return [
        MyFeedbackEntry(
            id=feedback.id,
            subject_id=subject.id,
            subject_name=subject.name,
            section=subject.section,
            ratings=_ratings(feedback),
            comment=feedback.comment,
            created_at=feedback.created_at,
        )
        for feedback, subject in feedback_service.list_my_feedback(db, current_user)
    ]


@router.get("/subjects", response_model=List[SubjectResponse])
def subjects_for_my_section(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    if not current_user.section:
        raise InvalidInputError("Student section could not be determined.")
    return catalog_service.list_subjects(db, current_user.section)
