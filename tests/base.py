import unittest

from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from feedback_portal.auth.auth_handler import create_access_token
from feedback_portal.configs.database import get_db, make_engine
from feedback_portal.main import app
from feedback_portal.services import catalog_service, feedback_service, user_service

PRINCIPAL_EMAIL = "principal@school.edu"
PRINCIPAL_PASSWORD = "principal-pass"


class PortalTestCase(unittest.TestCase):
    """Fresh in-memory database and API client for every test."""

    def setUp(self):
        self.engine = make_engine("sqlite://")
        SQLModel.metadata.create_all(self.engine)

        def override_get_db():
            with Session(self.engine) as session:
                yield session

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

        self.principal = self.create_principal()
        self.principal_headers = self.auth_headers(self.principal)

    def tearDown(self):
        app.dependency_overrides.clear()
        SQLModel.metadata.drop_all(self.engine)
        self.engine.dispose()

    # --- helpers -------------------------------------------------------

    def session(self) -> Session:
        return Session(self.engine)

    def auth_headers(self, user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    def create_principal(self, email=PRINCIPAL_EMAIL, password=PRINCIPAL_PASSWORD):
        with self.session() as db:
            return user_service.create_principal(db, email, password)

    def create_section(self, name):
        with self.session() as db:
            return catalog_service.create_section(db, name)

    def create_subject(self, name, section):
        with self.session() as db:
            return catalog_service.create_subject(db, name, section)

    def create_student(self, email, student_id, section, password="student-pass"):
        with self.session() as db:
            return user_service.create_student(db, email, password, student_id, section)

    def submit(self, student, subject, teaching=4, knowledge=4, behavior=4, comment=None):
        with self.session() as db:
            user = db.get(type(student), student.id)
            return feedback_service.submit_feedback(db, user, subject.id, teaching, knowledge, behavior, comment)
