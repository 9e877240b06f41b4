"""Per-subject feedback analysis for principals.

Everything here only reads. The arithmetic helpers are kept free of the
database so the bucketing boundaries can be checked in isolation.
"""
import logging
from enum import Enum
from typing import Iterable, Optional

from sqlmodel import Session

from feedback_portal.exceptions import NotFoundError
from feedback_portal.models import Feedback
from feedback_portal.schemas.feedback_schema import (
    Analysis,
    AnalysisReport,
    AverageRatings,
    FeedbackDetail,
    Ratings,
    SentimentCounts,
)
from feedback_portal.schemas.user_schema import StudentSummary
from feedback_portal.services import catalog_service, feedback_service, user_service

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

POSITIVE_THRESHOLD = 3.5
NEGATIVE_THRESHOLD = 2.5

POSITIVE_WORDS = ['great', 'excellent', 'good', 'fantastic', 'amazing', 'helpful', 'clear', 'engaging', 'well',
                  'best', 'love', 'enjoy', 'impressed', 'strong', 'effective']
NEGATIVE_WORDS = ['poor', 'bad', 'weak', 'confusing', 'boring', 'unhelpful', 'terrible', 'worst', 'disappointed',
                  'struggle', 'lack', 'issues', 'difficult']
NEGATED_POSITIVES = ['not good', 'not clear', 'not helpful']
NEGATED_NEGATIVES = ['no issues', 'not bad']


class Sentiment(str, Enum):
    positive = "positive"
    neutral = "neutral"
    negative = "negative"


def rating_mean(feedback: Feedback) -> float:
    return (feedback.teaching_rating + feedback.knowledge_rating + feedback.behavior_rating) / 3


def classify_rating_mean(mean: float) -> Sentiment:
    """3.5 and above is positive, 2.5 and below is negative, anything between is neutral."""
    if mean >= POSITIVE_THRESHOLD:
        return Sentiment.positive
    if mean <= NEGATIVE_THRESHOLD:
        return Sentiment.negative
    return Sentiment.neutral


def count_sentiments(sentiments: Iterable[Sentiment]) -> SentimentCounts:
    counts = SentimentCounts()
    for sentiment in sentiments:
        setattr(counts, sentiment.value, getattr(counts, sentiment.value) + 1)
    return counts


def bucket_sentiments(means: Iterable[float]) -> SentimentCounts:
    return count_sentiments(classify_rating_mean(mean) for mean in means)


def format_average(total: int, count: int) -> str:
    if count == 0:
        return NOT_AVAILABLE
    return f"{total / count:.2f}"


def analyze_comment_sentiment(comment: Optional[str]) -> Sentiment:
    """Keyword counter over a free-text comment.

    Each listed word found anywhere in the lower-cased comment scores one
    point for its side; a handful of negated phrases move a point across.
    """
    if not comment or not comment.strip():
        return Sentiment.neutral

    lower_comment = comment.lower()
    positive_score = sum(1 for word in POSITIVE_WORDS if word in lower_comment)
    negative_score = sum(1 for word in NEGATIVE_WORDS if word in lower_comment)

    if any(phrase in lower_comment for phrase in NEGATED_POSITIVES):
        negative_score += 1
        positive_score -= 1
    if any(phrase in lower_comment for phrase in NEGATED_NEGATIVES):
        positive_score += 1
        negative_score -= 1

    if positive_score > negative_score:
        return Sentiment.positive
    if negative_score > positive_score:
        return Sentiment.negative
    return Sentiment.neutral


def get_subject_analysis(db: Session, subject_id: int) -> AnalysisReport:
    subject = catalog_service.get_subject(db, subject_id)
    if not subject:
        raise NotFoundError("Subject not found")

    entries = feedback_service.list_by_subject(db, subject.id)
    roster = user_service.list_students(db, subject.section)

    submitted_ids = {author.id for _, author in entries}
    unsubmitted = [StudentSummary(email=s.email, student_id=s.student_id)
                   for s in roster if s.id not in submitted_ids]

    total = len(entries)
    feedbacks = [feedback for feedback, _ in entries]
    averages = AverageRatings(
        teaching=format_average(sum(f.teaching_rating for f in feedbacks), total),
        knowledge=format_average(sum(f.knowledge_rating for f in feedbacks), total),
        behavior=format_average(sum(f.behavior_rating for f in feedbacks), total),
    )

    details = [
        FeedbackDetail(
            id=feedback.id,
            student=StudentSummary(email=author.email, student_id=author.student_id),
            section=feedback.section,
            ratings=Ratings(teaching=feedback.teaching_rating, knowledge=feedback.knowledge_rating,
                            behavior=feedback.behavior_rating),
            comment=feedback.comment,
            created_at=feedback.created_at,
        )
        for feedback, author in entries
    ]

    logger.info(f"Analysed subject {subject.id}: {total} responses, {len(unsubmitted)} outstanding")
    return AnalysisReport(
        subject_id=subject.id,
        subject_name=subject.name,
        section=subject.section,
        total_feedback_entries=total,
        feedback_details=details,
        analysis=Analysis(
            overall_sentiment=bucket_sentiments(rating_mean(f) for f in feedbacks),
            comment_sentiment=count_sentiments(analyze_comment_sentiment(f.comment) for f in feedbacks),
            average_ratings=averages,
            unsubmitted_students=unsubmitted,
        ),
    )
