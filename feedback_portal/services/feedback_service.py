import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, col

from feedback_portal.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from feedback_portal.models import COMMENT_MAX_LENGTH, Feedback, Subject, User
from feedback_portal.services import catalog_service
from feedback_portal.utils.utils import clean_text

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

DUPLICATE_MESSAGE = "You have already submitted feedback for this subject."


def _is_valid_rating(value) -> bool:
    # bool is an int subclass, but True is not a rating
    return isinstance(value, int) and not isinstance(value, bool) and MIN_RATING <= value <= MAX_RATING


def validate_ratings(teaching_rating, knowledge_rating, behavior_rating) -> None:
    if not all(_is_valid_rating(r) for r in (teaching_rating, knowledge_rating, behavior_rating)):
        raise InvalidInputError(f"All ratings must be whole numbers between {MIN_RATING} and {MAX_RATING}.")


def get_feedback(db: Session, user_id: int, subject_id: int, section: str) -> Optional[Feedback]:
    statement = select(Feedback).where(
        (Feedback.user_id == user_id) & (Feedback.subject_id == subject_id) & (Feedback.section == section)
    )
    return db.exec(statement).first()


def submit_feedback(
        db: Session,
        student: User,
        subject_id: int,
        teaching_rating: int,
        knowledge_rating: int,
        behavior_rating: int,
        comment: Optional[str] = None,
) -> Feedback:
    validate_ratings(teaching_rating, knowledge_rating, behavior_rating)
    comment = clean_text(comment) or None
    if comment and len(comment) > COMMENT_MAX_LENGTH:
        raise InvalidInputError(f"Comment must be at most {COMMENT_MAX_LENGTH} characters.")

    if not student.section:
        raise InvalidInputError("Could not determine student section.")

    subject = catalog_service.get_subject(db, subject_id)
    if not subject:
        raise NotFoundError("Subject not found.")
    if subject.section != student.section:
        raise ForbiddenError("You can only submit feedback for subjects in your section.")

    if get_feedback(db, student.id, subject.id, student.section):
        raise ConflictError(DUPLICATE_MESSAGE)

    feedback = Feedback(
        subject_id=subject.id,
        user_id=student.id,
        section=student.section,
        teaching_rating=teaching_rating,
        knowledge_rating=knowledge_rating,
        behavior_rating=behavior_rating,
        comment=comment,
    )
    db.add(feedback)
    try:
        db.commit()
    except IntegrityError:
        # another request for the same triple won the race
        db.rollback()
        logger.warning(f"Duplicate feedback from user {student.id} for subject {subject.id} rejected by storage")
        raise ConflictError(DUPLICATE_MESSAGE)
    db.refresh(feedback)
    logger.info(f"Stored feedback {feedback.id} from user {student.id} for subject {subject.id}")
    return feedback


def list_my_feedback(db: Session, student: User) -> List[Tuple[Feedback, Subject]]:
    statement = (
        select(Feedback, Subject)
        .join(Subject, Feedback.subject_id == Subject.id)
        .where(Feedback.user_id == student.id)
        .order_by(col(Feedback.created_at).desc(), col(Feedback.id).desc())
    )
    return list(db.exec(statement).all())


def list_by_subject(db: Session, subject_id: int) -> List[Tuple[Feedback, User]]:
    statement = (
        select(Feedback, User)
        .join(User, Feedback.user_id == User.id)
        .where(Feedback.subject_id == subject_id)
        .order_by(col(Feedback.created_at).desc(), col(Feedback.id).desc())
    )
    return list(db.exec(statement).all())
