"""Tests for service-error to HTTP mapping and the create_user CLI."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from bloghub.api.v1.errors import http_error, status_for
from bloghub.core.roles import Role
from bloghub.models import User
from bloghub.scripts import create_user as create_user_script
from bloghub.services.errors import (
    BlogServiceError,
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationFailedError,
)
from tests._db import fast_bcrypt, make_session_factory


class TestStatusMapping(unittest.TestCase):
    def test_each_error_maps_to_its_status(self) -> None:
        cases = [
            (ValidationFailedError("x"), 400),
            (UnauthorizedError("x"), 401),
            (InvalidCredentialsError("x"), 401),
            (ForbiddenError("x"), 403),
            (NotFoundError("x"), 404),
            (ConflictError("x"), 400),
            (UpstreamUnavailableError("x"), 503),
            (BlogServiceError("x"), 500),
        ]
        for error, expected in cases:
            with self.subTest(error=type(error).__name__):
                self.assertEqual(status_for(error), expected)

    def test_unauthorized_carries_bearer_challenge(self) -> None:
        exc = http_error(UnauthorizedError("Invalid token"))
        self.assertEqual(exc.status_code, 401)
        self.assertEqual(exc.detail, "Invalid token")
        self.assertEqual(exc.headers, {"WWW-Authenticate": "Bearer"})

    def test_other_errors_have_no_headers(self) -> None:
        self.assertIsNone(http_error(ForbiddenError("nope")).headers)


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        patcher = fast_bcrypt()
        patcher.start()
        self.addCleanup(patcher.stop)
        self.SessionLocal = make_session_factory()
        session_patcher = patch.object(create_user_script, "SessionLocal", self.SessionLocal)
        session_patcher.start()
        self.addCleanup(session_patcher.stop)

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = create_user_script.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_admin(self) -> None:
        code, out, _ = self._run("root", "root@example.com", "a-long-password", "admin")
        self.assertEqual(code, 0)
        self.assertIn("role 'admin'", out)
        db = self.SessionLocal()
        try:
            user = db.query(User).one()
            self.assertEqual(user.role, Role.ADMIN)
        finally:
            db.close()

    def test_duplicate_email_fails(self) -> None:
        self._run("root", "root@example.com", "a-long-password")
        code, _, err = self._run("root2", "root@example.com", "a-long-password")
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)

    def test_short_password_fails(self) -> None:
        code, _, err = self._run("root", "root@example.com", "short")
        self.assertEqual(code, 1)
        self.assertIn("Password", err)


if __name__ == "__main__":
    unittest.main()
