from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlmodel import Session

from feedback_portal.auth.auth_handler import require_principal
from feedback_portal.configs.database import get_db
from feedback_portal.schemas.catalog_schema import (
    SectionCreateRequest,
    SectionResponse,
    SubjectCreateRequest,
    SubjectResponse,
)
from feedback_portal.schemas.feedback_schema import AnalysisReport
from feedback_portal.schemas.user_schema import StudentCreateRequest, UserResponse
from feedback_portal.services import analysis_service, catalog_service, user_service
from feedback_portal.utils.utils import MAX_DB_ID

router = APIRouter(prefix="/principal", tags=["Principal"], dependencies=[Depends(require_principal)])


@router.post("/add-student", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def add_student(student_req: StudentCreateRequest, db: Session = Depends(get_db)):
    student = user_service.create_student(
        db,
        email=student_req.email,
        password=student_req.password,
        student_id=student_req.student_id,
        section_name=student_req.section,
    )
    return UserResponse.from_user(student)


@router.get("/students", response_model=List[UserResponse])
def list_students(section: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return [UserResponse.from_user(s) for s in user_service.list_students(db, section)]


@router.post("/add-subject", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
def add_subject(subject_req: SubjectCreateRequest, db: Session = Depends(get_db)):
    return catalog_service.create_subject(db, subject_req.name, subject_req.section)


@router.get("/subjects-by-section", response_model=List[SubjectResponse])
def list_subjects_by_section(section: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return catalog_service.list_subjects(db, section)


@router.post("/add-section", response_model=SectionResponse, status_code=status.HTTP_201_CREATED)
def add_section(section_req: SectionCreateRequest, db: Session = Depends(get_db)):
    section = catalog_service.create_section(db, section_req.name)
    return SectionResponse(id=section.id, name=section.name,
                           message=f"Section '{section.name}' added successfully.")


@router.get("/feedback/{subject_id}", response_model=AnalysisReport)
def get_subject_feedback(subject_id: int = Path(..., ge=1, le=MAX_DB_ID), db: Session = Depends(get_db)):
    return analysis_service.get_subject_analysis(db, subject_id)
