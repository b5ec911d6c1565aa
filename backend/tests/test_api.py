"""
HTTP tests for the admissions API.

The workflow service is overridden with the in-memory one from conftest,
so no MongoDB is required.
"""

import pytest
from fastapi.testclient import TestClient

from admissions.api.deps import get_workflow_service
from admissions.domain.enums import ApplicationStatus, Role
from admissions.main import app


@pytest.fixture
def client(service):
    app.dependency_overrides[get_workflow_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(store):
    """One applicant plus staff accounts."""
    store.add("SUB-APP", status=ApplicationStatus.APPLICANT)
    store.add("SUB-OTHER", status=ApplicationStatus.APPLICANT)
    store.add("SUB-REGISTRAR", role=Role.REGISTRAR)
    store.add("SUB-ADMIN", role=Role.SUPER_ADMIN)
    store.add("SUB-GONE", status=ApplicationStatus.STUDENT, active=False)
    return store


def as_subject(subject_id):
    return {"X-Subject-Id": subject_id}


class TestRegistration:
    """Tests for POST /subjects."""

    def test_self_registration_as_student(self, client):
        response = client.post("/api/v1/subjects", json={"display_name": "Ada"})

        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "student"
        assert body["status"] == "applicant"

    def test_staff_registration_requires_super_admin(self, client, seeded):
        response = client.post(
            "/api/v1/subjects", json={"role": "registrar"}, headers=as_subject("SUB-APP")
        )
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_super_admin_registers_staff(self, client, seeded):
        response = client.post(
            "/api/v1/subjects", json={"role": "accountant"}, headers=as_subject("SUB-ADMIN")
        )
        assert response.status_code == 201
        assert response.json()["status"] is None


class TestTransitions:
    """Tests for transitions and events."""

    def test_student_books_own_consultation(self, client, seeded):
        response = client.post(
            "/api/v1/subjects/SUB-APP/events/consultation_booked", headers=as_subject("SUB-APP")
        )

        assert response.status_code == 200
        assert response.json()["to_status"] == "consultation_pending"
        assert seeded.stored_status("SUB-APP") == ApplicationStatus.CONSULTATION_PENDING

    def test_illegal_transition_returns_409(self, client, seeded):
        response = client.post(
            "/api/v1/subjects/SUB-APP/transitions",
            json={"target_status": "student"},
            headers=as_subject("SUB-REGISTRAR"),
        )

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "INVALID_TRANSITION"
        assert error["details"]["from"] == "applicant"
        assert error["details"]["to"] == "student"
        assert seeded.writes == []

    def test_student_cannot_move_another_student(self, client, seeded):
        response = client.post(
            "/api/v1/subjects/SUB-OTHER/transitions",
            json={"target_status": "consultation_pending"},
            headers=as_subject("SUB-APP"),
        )
        assert response.status_code == 403

    def test_unknown_target_status_rejected(self, client, seeded):
        response = client.post(
            "/api/v1/subjects/SUB-APP/transitions",
            json={"target_status": "graduated"},
            headers=as_subject("SUB-REGISTRAR"),
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_subject_returns_404(self, client, seeded):
        response = client.post(
            "/api/v1/subjects/SUB-NOPE/transitions",
            json={"target_status": "consultation_pending"},
            headers=as_subject("SUB-REGISTRAR"),
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SUBJECT_NOT_FOUND"

    def test_missing_identity_returns_401(self, client, seeded):
        response = client.post(
            "/api/v1/subjects/SUB-APP/transitions", json={"target_status": "consultation_pending"}
        )
        assert response.status_code == 401

    def test_archived_caller_rejected(self, client, seeded):
        response = client.get("/api/v1/subjects/SUB-GONE", headers=as_subject("SUB-GONE"))
        assert response.status_code == 401

    def test_correlation_id_echoed(self, client, seeded):
        response = client.get(
            "/api/v1/subjects/SUB-APP",
            headers={**as_subject("SUB-APP"), "X-Correlation-Id": "COR-test"},
        )
        assert response.headers["X-Correlation-Id"] == "COR-test"


class TestQueries:
    """Tests for overview, history, actions and listing."""

    def test_overview(self, client, seeded):
        response = client.get("/api/v1/subjects/SUB-APP", headers=as_subject("SUB-APP"))

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "applicant"
        assert body["home_area"] == "/applicant-dashboard"
        assert body["permitted_actions"] == ["book_consultation"]

    def test_students_cannot_view_others(self, client, seeded):
        response = client.get("/api/v1/subjects/SUB-OTHER", headers=as_subject("SUB-APP"))
        assert response.status_code == 403

    def test_history_after_transition(self, client, seeded):
        client.post("/api/v1/subjects/SUB-APP/events/consultation_booked", headers=as_subject("SUB-APP"))

        response = client.get("/api/v1/subjects/SUB-APP/history", headers=as_subject("SUB-REGISTRAR"))

        assert response.status_code == 200
        events = response.json()
        assert len(events) == 1
        assert events[0]["actor_id"] == "SUB-APP"
        assert events[0]["to_status"] == "consultation_pending"

    def test_action_check(self, client, seeded):
        response = client.get(
            "/api/v1/subjects/SUB-APP/actions/book_consultation", headers=as_subject("SUB-APP")
        )
        assert response.json() == {"action": "book_consultation", "status": "applicant", "permitted": True}

    def test_action_check_for_staff_subject(self, client, seeded):
        response = client.get(
            "/api/v1/subjects/SUB-REGISTRAR/actions/book_consultation", headers=as_subject("SUB-REGISTRAR")
        )
        assert response.json()["permitted"] is False

    def test_listing_filtered_by_status(self, client, seeded):
        response = client.get(
            "/api/v1/subjects",
            params={"role": "student", "status": "applicant"},
            headers=as_subject("SUB-REGISTRAR"),
        )

        assert response.status_code == 200
        assert sorted(s["subject_id"] for s in response.json()) == ["SUB-APP", "SUB-OTHER"]

    def test_listing_requires_staff(self, client, seeded):
        response = client.get("/api/v1/subjects", headers=as_subject("SUB-APP"))
        assert response.status_code == 403


class TestArchive:
    """Tests for archive/restore."""

    def test_registrar_archives_and_restores(self, client, seeded):
        archived = client.post("/api/v1/subjects/SUB-APP/archive", headers=as_subject("SUB-REGISTRAR"))
        assert archived.json()["active"] is False

        restored = client.post("/api/v1/subjects/SUB-APP/restore", headers=as_subject("SUB-REGISTRAR"))
        assert restored.json()["active"] is True

    def test_student_cannot_archive(self, client, seeded):
        response = client.post("/api/v1/subjects/SUB-OTHER/archive", headers=as_subject("SUB-APP"))
        assert response.status_code == 403


class TestGuard:
    """Tests for GET /access/guard."""

    def test_anonymous_redirected_to_sign_in(self, client):
        response = client.get("/api/v1/access/guard", params={"area": "/billing"})

        assert response.json() == {"allowed": False, "redirect_to": "/auth", "resume_to": "/billing"}

    def test_applicant_allowed_to_book(self, client, seeded):
        response = client.get(
            "/api/v1/access/guard", params={"area": "/book-consultation"}, headers=as_subject("SUB-APP")
        )
        assert response.json()["allowed"] is True

    def test_archived_subject_redirected_home(self, client, seeded):
        response = client.get(
            "/api/v1/access/guard", params={"area": "/student-dashboard"}, headers=as_subject("SUB-GONE")
        )
        assert response.json()["redirect_to"] == "/"

    def test_unknown_identity(self, client, seeded):
        response = client.get(
            "/api/v1/access/guard", params={"area": "/billing"}, headers=as_subject("SUB-NOPE")
        )
        assert response.status_code == 401
