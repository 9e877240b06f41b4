import unittest
from datetime import timedelta
from unittest.mock import patch

from jose import jwt

from feedback_portal.auth.auth_handler import (
    ALGORITHM,
    create_access_token,
    create_refresh_token,
    pwd_context,
    require_role,
    resolve_identity,
)
from feedback_portal.exceptions import ForbiddenError, InvalidCredentialsError, UnauthenticatedError
from feedback_portal.models import User, UserRole
from feedback_portal.services import user_service
from tests.base import PortalTestCase, PRINCIPAL_EMAIL, PRINCIPAL_PASSWORD


class TestLogin(PortalTestCase):

    def test_login_returns_tokens(self):
        response = self.client.post("/auth/login", json={"email": PRINCIPAL_EMAIL, "password": PRINCIPAL_PASSWORD})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["email"], PRINCIPAL_EMAIL)
        self.assertEqual(data["role"], "principal")
        self.assertEqual(data["token_type"], "bearer")

        me = self.client.get("/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["email"], PRINCIPAL_EMAIL)
        self.assertNotIn("password", me.json())

    def test_wrong_password_and_unknown_email_look_the_same(self):
        wrong_password = self.client.post("/auth/login", json={"email": PRINCIPAL_EMAIL, "password": "nope"})
        unknown_email = self.client.post("/auth/login", json={"email": "ghost@school.edu", "password": "nope"})
        self.assertEqual(wrong_password.status_code, 400)
        self.assertEqual(wrong_password.status_code, unknown_email.status_code)
        self.assertEqual(wrong_password.json(), unknown_email.json())
        self.assertEqual(wrong_password.json(), {"message": "Invalid credentials"})

    def test_authenticate_service_raises_same_error(self):
        with self.session() as db:
            with self.assertRaises(InvalidCredentialsError) as wrong:
                user_service.authenticate(db, PRINCIPAL_EMAIL, "nope")
            with self.assertRaises(InvalidCredentialsError) as unknown:
                user_service.authenticate(db, "ghost@school.edu", "nope")
        self.assertEqual(wrong.exception.message, unknown.exception.message)

    def test_unknown_email_still_pays_for_a_hash_check(self):
        with patch.object(pwd_context, "dummy_verify") as dummy_verify:
            with self.session() as db:
                with self.assertRaises(InvalidCredentialsError):
                    user_service.authenticate(db, "ghost@school.edu", "nope")
                dummy_verify.assert_called_once()
                with self.assertRaises(InvalidCredentialsError):
                    user_service.authenticate(db, PRINCIPAL_EMAIL, "nope")
                # a known email runs the real verify instead
                dummy_verify.assert_called_once()

    def test_password_is_hashed(self):
        with self.session() as db:
            stored = user_service.get_user_by_email(db, PRINCIPAL_EMAIL)
            self.assertNotEqual(stored.password, PRINCIPAL_PASSWORD)
            self.assertTrue(stored.password.startswith("$2"))

    def test_student_profile(self):
        self.create_section("A")
        student = self.create_student("s1@school.edu", "S1", "a")
        me = self.client.get("/auth/me", headers=self.auth_headers(student))
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["student_id"], "S1")
        self.assertEqual(me.json()["section"], "A")
        self.assertEqual(me.json()["role"], "student")


class TestResolveIdentity(PortalTestCase):

    def test_missing_token(self):
        response = self.client.get("/auth/me")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers.get("www-authenticate"), "Bearer")
        self.assertIn("no token", response.json()["message"])

    def test_malformed_token(self):
        response = self.client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(response.status_code, 401)

    def test_expired_token(self):
        token = create_access_token(self.principal, expires_delta=timedelta(minutes=-1))
        response = self.client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)

    def test_token_signed_with_other_secret(self):
        token = jwt.encode({"sub": str(self.principal.id)}, "someone-else", algorithm=ALGORITHM)
        response = self.client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)

    def test_token_for_unknown_user(self):
        ghost = User(id=999, email="ghost@school.edu", password="x", role=UserRole.principal)
        with self.session() as db:
            with self.assertRaises(UnauthenticatedError):
                resolve_identity(create_access_token(ghost), db)

    def test_resolves_stored_user(self):
        with self.session() as db:
            user = resolve_identity(create_access_token(self.principal), db)
        self.assertEqual(user.id, self.principal.id)


class TestRequireRole(unittest.TestCase):

    def test_allowed(self):
        user = User(id=1, email="p@school.edu", password="x", role=UserRole.principal)
        require_role(user, {UserRole.principal})
        require_role(user, {UserRole.principal, UserRole.student})

    def test_denied(self):
        user = User(id=2, email="s@school.edu", password="x", role=UserRole.student)
        with self.assertRaises(ForbiddenError):
            require_role(user, {UserRole.principal})


class TestRouteGating(PortalTestCase):

    def setUp(self):
        super().setUp()
        self.create_section("A")
        self.student = self.create_student("s1@school.edu", "S1", "A")
        self.student_headers = self.auth_headers(self.student)

    def test_student_cannot_use_principal_routes(self):
        response = self.client.post("/principal/add-section", json={"name": "B"}, headers=self.student_headers)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.client.get("/sections", headers=self.student_headers).json(), ["A"])

    def test_principal_cannot_use_student_routes(self):
        response = self.client.get("/student/my-feedback", headers=self.principal_headers)
        self.assertEqual(response.status_code, 403)

    def test_shared_routes_need_a_token(self):
        self.assertEqual(self.client.get("/subjects").status_code, 401)
        self.assertEqual(self.client.get("/sections").status_code, 401)
        self.assertEqual(self.client.get("/subjects", headers=self.student_headers).status_code, 200)


class TestRefresh(PortalTestCase):

    def test_refresh_issues_working_access_token(self):
        response = self.client.post("/auth/refresh", json={"refresh_token": create_refresh_token(self.principal)})
        self.assertEqual(response.status_code, 200)
        token = response.json()["access_token"]
        me = self.client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(me.json()["id"], self.principal.id)

    def test_access_token_is_not_a_refresh_token(self):
        response = self.client.post("/auth/refresh", json={"refresh_token": create_access_token(self.principal)})
        self.assertEqual(response.status_code, 401)


if __name__ == '__main__':
    unittest.main()
