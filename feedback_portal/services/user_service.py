import logging
from typing import Optional, List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, or_

from feedback_portal.auth.auth_handler import get_password_hash, pwd_context, verify_password
from feedback_portal.exceptions import ConflictError, InvalidCredentialsError, InvalidInputError, NotFoundError
from feedback_portal.models import Section, User, UserRole
from feedback_portal.utils.utils import clean_text, normalize_section_name

logger = logging.getLogger(__name__)


def create_student(db: Session, email: str, password: str, student_id: str, section_name: str) -> User:
    email = clean_text(email)
    student_id = clean_text(student_id)
    section_name = normalize_section_name(section_name)
    if not email or not password or not student_id or not section_name:
        raise InvalidInputError("Please enter all student fields (email, password, student_id, section)")

    statement = select(User).where(or_(User.email == email, User.student_id == student_id))
    if db.exec(statement).first():
        raise ConflictError("Student with this email or Student ID already exists")

    if not db.exec(select(Section).where(Section.name == section_name)).first():
        raise NotFoundError(f"Section '{section_name}' does not exist. Please add it first.")

    user = User(
        email=email,
        password=get_password_hash(password),
        role=UserRole.student,
        student_id=student_id,
        section=section_name,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent insert rejected for student {email} / {student_id}")
        raise ConflictError("Student with this email or Student ID already exists")
    db.refresh(user)
    logger.info(f"Created student {user.id} ({user.student_id}) in section {user.section}")
    return user


def create_principal(db: Session, email: str, password: str) -> User:
    email = clean_text(email)
    if not email or not password:
        raise InvalidInputError("Principal email and password are required")
    if get_user_by_email(db, email):
        raise ConflictError(f"User '{email}' already exists")
    user = User(email=email, password=get_password_hash(password), role=UserRole.principal)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created principal {user.id} ({user.email})")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    statement = select(User).where(User.email == email)
    return db.exec(statement).first()


def list_students(db: Session, section_name: Optional[str] = None) -> List[User]:
    statement = select(User).where(User.role == UserRole.student)
    if section_name:
        statement = statement.where(User.section == normalize_section_name(section_name))
    return db.exec(statement.order_by(User.id)).all()


def authenticate(db: Session, email: str, password: str) -> User:
    # unknown email and wrong password must be indistinguishable to the caller
    user = get_user_by_email(db, clean_text(email))
    if not user:
        # burn the same bcrypt time as a real check
        pwd_context.dummy_verify()
    if not user or not password or not verify_password(password, user.password):
        logger.warning("Rejected login attempt")
        raise InvalidCredentialsError("Invalid credentials")
    return user
