"""
Unit tests for the access policy and area registry.

These tests cover:
- Action predicates
- Reachable and home areas per role and status
- Archived subjects
- Transition authority
- Area registry validation and file loading
"""

import json

import pytest

from admissions.config.areas import AreaGrant, AreaRegistry, default_area_registry, load_area_registry
from admissions.domain.enums import Action, ApplicationStatus, Role
from admissions.domain.errors import AreaRegistryError, ValidationError
from admissions.domain.models import ActorContext, SubjectState
from admissions.engine.access_policy import (
    can_access_enrollment,
    can_perform,
    has_completed_payment,
    permitted_actions,
)


def student(status=None, active=True):
    return SubjectState(role=Role.STUDENT, status=status, active=active)


class TestActionPredicates:
    """Tests for named action predicates."""

    @pytest.mark.parametrize("status", list(ApplicationStatus))
    def test_book_consultation_only_for_applicants(self, status):
        expected = status == ApplicationStatus.APPLICANT
        assert can_perform(Action.BOOK_CONSULTATION, status) is expected

    def test_book_consultation_with_absent_status(self):
        assert can_perform(Action.BOOK_CONSULTATION, None) is True

    def test_make_payment_only_when_payment_pending(self):
        assert can_perform(Action.MAKE_PAYMENT, ApplicationStatus.PAYMENT_PENDING)
        assert not can_perform(Action.MAKE_PAYMENT, ApplicationStatus.CONSULTATION_COMPLETED)

    def test_enrollment_access(self):
        assert can_perform(Action.ACCESS_ENROLLMENT, ApplicationStatus.ENROLLMENT_SUBMITTED)
        assert can_perform(Action.ACCESS_ENROLLMENT, ApplicationStatus.STUDENT)
        assert not can_perform(Action.ACCESS_ENROLLMENT, ApplicationStatus.PAYMENT_PENDING)

    def test_enrollment_access_follows_completed_payment(self):
        for status in ApplicationStatus:
            assert can_access_enrollment(status) == has_completed_payment(status)

    def test_student_features_only_for_students(self):
        assert can_perform("access_student_features", "student")
        assert not can_perform("access_student_features", "enrollment_submitted")

    def test_unknown_action_raises(self):
        with pytest.raises(ValidationError):
            can_perform("fly_to_moon", ApplicationStatus.APPLICANT)

    def test_permitted_actions_for_applicant(self):
        assert permitted_actions(ApplicationStatus.APPLICANT) == [Action.BOOK_CONSULTATION]


class TestReachableAreas:
    """Tests for AccessPolicy area reachability."""

    def test_applicant_can_book_consultation(self, policy):
        areas = policy.reachable_areas(student(ApplicationStatus.APPLICANT))
        assert "/book-consultation" in areas
        assert "/billing" not in areas

    def test_payment_pending_reaches_billing(self, policy):
        subject = student(ApplicationStatus.PAYMENT_PENDING)
        assert policy.can_access(subject, "/billing")
        assert policy.home_area(subject) == "/billing"

    def test_student_reaches_student_dashboard(self, policy):
        subject = student(ApplicationStatus.STUDENT)
        assert policy.can_access(subject, "/student-dashboard")
        assert not policy.can_access(subject, "/book-consultation")

    def test_staff_role_uses_role_grant(self, policy):
        registrar = SubjectState(role=Role.REGISTRAR)
        assert policy.home_area(registrar) == "/registrar-dashboard"
        assert policy.can_access(registrar, "/profile")
        assert not policy.can_access(registrar, "/admin-dashboard")

    def test_inactive_subject_only_reaches_public_areas(self, policy, registry):
        subject = student(ApplicationStatus.STUDENT, active=False)
        assert policy.reachable_areas(subject) == frozenset(registry.public_areas)
        assert policy.home_area(subject) == registry.inactive_home
        assert not policy.can_access(subject, "/profile")

    @pytest.mark.parametrize("role", [r for r in Role if r != Role.STUDENT])
    def test_home_reachable_for_every_role(self, policy, role):
        subject = SubjectState(role=role)
        assert policy.home_area(subject) in policy.reachable_areas(subject)

    @pytest.mark.parametrize("status", list(ApplicationStatus))
    def test_home_reachable_for_every_status(self, policy, status):
        subject = student(status)
        assert policy.home_area(subject) in policy.reachable_areas(subject)


class TestTransitionAuthority:
    """Tests for which actors may request which targets."""

    def test_student_may_book_own_consultation(self, policy):
        actor = ActorContext(subject_id="SUB-1", role=Role.STUDENT)
        assert policy.can_request_transition(actor, "SUB-1", ApplicationStatus.CONSULTATION_PENDING)

    def test_student_may_not_move_someone_else(self, policy):
        actor = ActorContext(subject_id="SUB-1", role=Role.STUDENT)
        assert not policy.can_request_transition(actor, "SUB-2", ApplicationStatus.CONSULTATION_PENDING)

    def test_student_may_not_approve_self(self, policy):
        actor = ActorContext(subject_id="SUB-1", role=Role.STUDENT)
        assert not policy.can_request_transition(actor, "SUB-1", ApplicationStatus.STUDENT)

    def test_accountant_requests_payment_only(self, policy):
        actor = ActorContext(subject_id="SUB-ACC", role=Role.ACCOUNTANT)
        assert policy.can_request_transition(actor, "SUB-1", ApplicationStatus.PAYMENT_PENDING)
        assert not policy.can_request_transition(actor, "SUB-1", ApplicationStatus.STUDENT)

    def test_nobody_requests_applicant(self, policy):
        actor = ActorContext(subject_id="SUB-ADMIN", role=Role.SUPER_ADMIN)
        assert not policy.can_request_transition(actor, "SUB-1", ApplicationStatus.APPLICANT)


class TestAreaRegistry:
    """Tests for area registry validation and loading."""

    def test_missing_status_grant_rejected(self, registry):
        data = registry.model_dump(mode="json")
        del data["status_grants"]["payment_pending"]
        with pytest.raises(AreaRegistryError) as exc_info:
            AreaRegistry.model_validate(data)
        assert exc_info.value.details == {"statuses": ["payment_pending"]}

    def test_missing_role_grant_rejected(self, registry):
        data = registry.model_dump(mode="json")
        del data["role_grants"]["accountant"]
        with pytest.raises(AreaRegistryError):
            AreaRegistry.model_validate(data)

    def test_unreachable_home_rejected(self, registry):
        grants = dict(registry.status_grants)
        grants[ApplicationStatus.STUDENT] = AreaGrant(home="/nowhere", areas=["/student-dashboard"])
        with pytest.raises(AreaRegistryError) as exc_info:
            AreaRegistry(
                sign_in_area=registry.sign_in_area,
                public_areas=registry.public_areas,
                common_areas=registry.common_areas,
                inactive_home=registry.inactive_home,
                role_grants=registry.role_grants,
                status_grants=grants,
            )
        assert exc_info.value.details["home"] == "/nowhere"

    def test_inactive_home_must_be_public(self, registry):
        data = registry.model_dump(mode="json")
        data["inactive_home"] = "/profile"
        with pytest.raises(AreaRegistryError):
            AreaRegistry.model_validate(data)

    def test_load_from_json_file(self, tmp_path, registry):
        data = registry.model_dump(mode="json")
        data["sign_in_area"] = "/login"
        data["role_grants"]["teacher"]["areas"].append("/gradebook")
        path = tmp_path / "areas.json"
        path.write_text(json.dumps(data), encoding="utf-8")

        loaded = load_area_registry(str(path))

        assert loaded.sign_in_area == "/login"
        assert "/gradebook" in loaded.role_grants[Role.TEACHER].areas

    def test_sign_in_area_override(self):
        assert default_area_registry(sign_in_area="/login").sign_in_area == "/login"
