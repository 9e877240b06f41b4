import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from feedback_portal.exceptions import ConflictError, InvalidInputError, NotFoundError
from feedback_portal.models import Section, Subject
from feedback_portal.utils.utils import MAX_DB_ID, clean_text, normalize_section_name

logger = logging.getLogger(__name__)


def get_section(db: Session, name: str) -> Optional[Section]:
    statement = select(Section).where(Section.name == normalize_section_name(name))
    return db.exec(statement).first()


def create_section(db: Session, name: str) -> Section:
    formatted_name = normalize_section_name(name)
    if not formatted_name:
        raise InvalidInputError("Please enter section name.")
    if get_section(db, formatted_name):
        raise ConflictError(f"Section '{formatted_name}' already exists.")

    section = Section(name=formatted_name)
    db.add(section)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Section '{formatted_name}' already exists.")
    db.refresh(section)
    logger.info(f"Created section {section.name}")
    return section


def list_sections(db: Session) -> List[str]:
    statement = select(Section.name).order_by(Section.id)
    return list(db.exec(statement).all())


def create_subject(db: Session, name: str, section_name: str) -> Subject:
    name = clean_text(name)
    section_name = normalize_section_name(section_name)
    if not name or not section_name:
        raise InvalidInputError("Please enter subject name and section")

    if not get_section(db, section_name):
        raise NotFoundError(f"Section '{section_name}' does not exist. Please add it first.")

    statement = select(Subject).where((Subject.name == name) & (Subject.section == section_name))
    if db.exec(statement).first():
        raise ConflictError("Subject with this name already exists in this section")

    subject = Subject(name=name, section=section_name)
    db.add(subject)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Subject with this name already exists in this section")
    db.refresh(subject)
    logger.info(f"Created subject {subject.id} '{subject.name}' in section {subject.section}")
    return subject


def get_subject(db: Session, subject_id: int) -> Optional[Subject]:
    if not 1 <= subject_id <= MAX_DB_ID:
        return None
    return db.get(Subject, subject_id)


def list_subjects(db: Session, section_name: Optional[str] = None) -> List[Subject]:
    statement = select(Subject)
    if section_name is not None:
        statement = statement.where(Subject.section == normalize_section_name(section_name))
    return db.exec(statement.order_by(Subject.id)).all()
