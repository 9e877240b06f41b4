from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from feedback_portal.auth.auth_handler import get_current_user
from feedback_portal.configs.database import get_db
from feedback_portal.schemas.catalog_schema import SubjectResponse
from feedback_portal.services import catalog_service

# readable by principals and students alike
router = APIRouter(tags=["Catalog"], dependencies=[Depends(get_current_user)])


@router.get("/subjects", response_model=List[SubjectResponse])
def list_all_subjects(db: Session = Depends(get_db)):
    return catalog_service.list_subjects(db)


@router.get("/sections", response_model=List[str])
def list_sections(db: Session = Depends(get_db)):
    return catalog_service.list_sections(db)
