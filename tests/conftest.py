# Purchase Order API Test Suite - Shared Configuration and Fixtures
#
# This module provides:
# - An in-process app on a fresh in-memory database (httpx over WSGI)
# - Authentication helpers (cookie-based sessions)
# - Failure message formatting

import os
from typing import Dict, Optional

import httpx
import pytest

from po_api import create_app
from po_api.config import Config
from po_api.extensions import db
from po_api.services.schema_service import seed_admin_user


# =============================================================================
# CONFIGURATION
# =============================================================================

class EndToEndConfig(Config):
    """App settings for the end-to-end suite."""
    TESTING = True
    APP_ENV = "testing"
    SECRET_KEY = "e2e-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SESSION_COOKIE_SECURE = False
    BCRYPT_ROUNDS = 4
    # Exercise the real startup path: tables and admin are created by create_app
    AUTO_INIT_DB = True
    LOGIN_REQUIRED = True

    ADMIN_USERNAME = "admin"
    ADMIN_PASSWORD = "admin123"

    request_timeout = float(os.environ.get("TEST_REQUEST_TIMEOUT", "30"))


# =============================================================================
# FAILURE MESSAGE HELPER
# =============================================================================

class TestFailure(Exception):
    """
    Custom exception with detailed, human-readable failure messages.

    Structure:
    1. Scenario: What was being tested
    2. Expected: What should have happened
    3. Actual: What actually happened
    4. Likely Cause: Most probable reason for failure
    5. Code Location: Where to look in the codebase
    """
    __test__ = False

    def __init__(
        self,
        scenario: str,
        expected: str,
        actual: str,
        likely_cause: str,
        code_location: str,
        response: Optional[httpx.Response] = None,
    ):
        self.scenario = scenario
        self.expected = expected
        self.actual = actual
        self.likely_cause = likely_cause
        self.code_location = code_location
        self.response = response

        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [
            "",
            "=" * 80,
            "TEST FAILURE DETAILS",
            "=" * 80,
            f"SCENARIO: {self.scenario}",
            "-" * 80,
            f"EXPECTED: {self.expected}",
            f"ACTUAL: {self.actual}",
            "-" * 80,
            f"LIKELY CAUSE: {self.likely_cause}",
            f"CODE LOCATION: {self.code_location}",
        ]

        if self.response is not None:
            lines.extend([
                "-" * 80,
                f"HTTP STATUS: {self.response.status_code}",
                f"RESPONSE BODY: {self.response.text[:1000]}",
            ])

        lines.append("=" * 80)
        return "\n".join(lines)


def assert_response(
    response: httpx.Response,
    expected_status: int,
    scenario: str,
    code_location: str,
    expected_body_contains: Optional[str] = None
):
    """
    Assert HTTP status, the envelope's success flag, and optionally body content.
    Raises TestFailure with detailed message on failure.
    """
    if response.status_code != expected_status:
        raise TestFailure(
            scenario=scenario,
            expected=f"HTTP {expected_status}",
            actual=f"HTTP {response.status_code}",
            likely_cause=_infer_cause(response),
            code_location=code_location,
            response=response
        )

    body = response.json()
    if body.get("success") is not (expected_status < 400):
        raise TestFailure(
            scenario=scenario,
            expected=f"Envelope success={expected_status < 400}",
            actual=f"Envelope: {body}",
            likely_cause="Route returned a raw body instead of success()/failure()",
            code_location=code_location,
            response=response
        )

    if expected_body_contains and expected_body_contains not in response.text:
        raise TestFailure(
            scenario=scenario,
            expected=f"Response body contains: {expected_body_contains}",
            actual=f"Response body: {response.text[:500]}",
            likely_cause="Response format changed or wrong endpoint hit",
            code_location=code_location,
            response=response
        )


def _infer_cause(response: httpx.Response) -> str:
    """Infer likely cause from response status/body."""
    if response.status_code == 401:
        return "Authentication failed - session cookie missing, revoked or expired"
    elif response.status_code == 404:
        return "Resource not found - wrong ID or already deleted"
    elif response.status_code == 400:
        return "Invalid request - missing required field or validation failed"
    elif response.status_code == 409:
        return "Conflict - duplicate order number or username"
    elif response.status_code == 500:
        return "Server error - check backend logs for stack trace"
    elif response.status_code == 503:
        return "Database unreachable - check DATABASE_URL"
    else:
        return f"Unexpected status code {response.status_code}"


# =============================================================================
# HTTP CLIENT WITH AUTH HELPERS
# =============================================================================

class APIClient:
    """
    HTTP client wrapper with authentication and convenience methods.

    Requests go straight into the WSGI app; the session cookie is kept in
    the underlying httpx cookie jar.
    """

    def __init__(self, app, timeout: float = 30.0):
        self.client = httpx.Client(
            transport=httpx.WSGITransport(app=app),
            base_url="http://testserver",
            timeout=timeout,
        )
        self.current_user: Optional[Dict] = None

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return self.client.get(path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return self.client.post(path, json=json, **kwargs)

    def put(self, path: str, json: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return self.client.put(path, json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> httpx.Response:
        return self.client.delete(path, **kwargs)

    def login(self, username: str, password: str) -> bool:
        """Authenticate; the session cookie is stored by httpx."""
        response = self.post("/api/auth/login", json={
            "username": username,
            "password": password
        })
        if response.status_code == 200:
            self.current_user = response.json()["data"]
            return True
        return False

    def logout(self) -> bool:
        """Logout and forget the current user."""
        response = self.post("/api/auth/logout")
        if response.status_code == 200:
            self.current_user = None
            return True
        return False

    def is_authenticated(self) -> bool:
        response = self.get("/api/auth/status")
        return response.status_code == 200 and response.json()["data"]["authenticated"]

    def close(self):
        """Close the HTTP client."""
        self.client.close()


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def e2e_app():
    """Application built through the normal startup path."""
    return create_app(EndToEndConfig)


@pytest.fixture
def clean_db(e2e_app):
    """Empty every table, then put the default administrator back."""
    with e2e_app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        seed_admin_user()
        db.session.remove()


@pytest.fixture
def client(e2e_app, clean_db):
    """Unauthenticated client."""
    api = APIClient(e2e_app, timeout=EndToEndConfig.request_timeout)
    yield api
    api.close()


@pytest.fixture
def admin_client(client):
    """Client logged in as the seeded administrator."""
    if not client.login(EndToEndConfig.ADMIN_USERNAME, EndToEndConfig.ADMIN_PASSWORD):
        raise TestFailure(
            scenario="Log in as the seeded administrator",
            expected="HTTP 200 from /api/auth/login",
            actual="Login rejected",
            likely_cause="seed_admin_user did not run or ADMIN_PASSWORD differs",
            code_location="backend/po_api/services/schema_service.py:seed_admin_user",
        )
    return client


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "smoke: Quick smoke tests for critical paths")
    config.addinivalue_line("markers", "auth: Authentication tests")
    config.addinivalue_line("markers", "purchase_orders: Purchase order tests")
    config.addinivalue_line("markers", "company: Company profile tests")
