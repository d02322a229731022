"""Tests for the admin endpoints."""

from datetime import datetime, timezone

import pytest

from app.core.enums import ApprovalStatus, BookingKind, BookingStatus, CourseStatus

ADMIN = "/api/v1/admin"


@pytest.mark.parametrize(
    "path",
    ["/dashboard", "/users", "/consultants/pending", "/courses", "/consultations", "/analytics/revenue"],
)
def test_non_admins_are_forbidden(client, auth_headers_student, path):
    assert client.get(f"{ADMIN}{path}", headers=auth_headers_student).status_code == 403
    assert client.get(f"{ADMIN}{path}").status_code == 401


def test_dashboard(client, auth_headers_admin, student, service, make_booking, at):
    make_booking(
        student, service, at(10), status=BookingStatus.COMPLETED, completed_at=datetime.now(timezone.utc)
    )

    response = client.get(f"{ADMIN}/dashboard", headers=auth_headers_admin)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["overview"]["totalConsultations"] == 1
    assert data["overview"]["totalServices"] == 1
    assert data["revenue"]["consultationRevenue"] == 100.0
    assert data["consultationStatus"] == {"completed": 1}


class TestUsers:
    def test_list_with_role_filter(self, client, auth_headers_admin, student, instructor):
        data = client.get(f"{ADMIN}/users?role=instructor", headers=auth_headers_admin).json()["data"]
        assert [u["id"] for u in data["users"]] == [instructor.id]
        assert data["pagination"]["totalUsers"] == 1

    def test_status_message(self, client, auth_headers_admin, student):
        response = client.put(
            f"{ADMIN}/users/{student.id}/status", json={"isActive": False}, headers=auth_headers_admin
        )
        assert response.status_code == 200
        assert response.json()["message"] == "User account deactivated successfully"
        assert response.json()["data"]["isActive"] is False

    def test_deactivated_user_loses_access(self, client, auth_headers_admin, auth_headers_student, student):
        client.put(
            f"{ADMIN}/users/{student.id}/status", json={"isActive": False}, headers=auth_headers_admin
        )
        assert client.get("/api/v1/users/me", headers=auth_headers_student).status_code == 401

    def test_role_change(self, client, auth_headers_admin, student):
        response = client.put(
            f"{ADMIN}/users/{student.id}/role", json={"role": "instructor"}, headers=auth_headers_admin
        )
        assert response.json()["message"] == "User role updated to instructor successfully"

    def test_self_deactivation_blocked(self, client, auth_headers_admin, admin_user):
        response = client.put(
            f"{ADMIN}/users/{admin_user.id}/status", json={"isActive": False}, headers=auth_headers_admin
        )
        assert response.status_code == 400


class TestConsultantReview:
    def test_pending_list_and_approval(self, client, auth_headers_admin, make_consultant):
        pending = make_consultant(approval_status=ApprovalStatus.PENDING)

        listed = client.get(f"{ADMIN}/consultants/pending", headers=auth_headers_admin).json()["data"]
        assert [c["id"] for c in listed["consultants"]] == [pending.id]

        response = client.put(
            f"{ADMIN}/consultants/{pending.id}/approval",
            json={"action": "approve"},
            headers=auth_headers_admin,
        )
        assert response.json()["message"] == "Consultant application approved successfully"
        assert response.json()["data"]["approvalStatus"] == "approved"
        assert client.get(f"/api/v1/consultants/{pending.id}").status_code == 200

    def test_rejection_needs_reason(self, client, auth_headers_admin, make_consultant):
        pending = make_consultant(approval_status=ApprovalStatus.PENDING)
        response = client.put(
            f"{ADMIN}/consultants/{pending.id}/approval",
            json={"action": "reject"},
            headers=auth_headers_admin,
        )
        assert response.status_code == 400


def test_course_status(client, auth_headers_admin, make_course, instructor):
    draft = make_course(instructor, status=CourseStatus.DRAFT)

    listed = client.get(f"{ADMIN}/courses?status=draft", headers=auth_headers_admin).json()["data"]
    assert [c["id"] for c in listed["courses"]] == [draft.id]

    response = client.put(
        f"{ADMIN}/courses/{draft.id}/status", json={"status": "published"}, headers=auth_headers_admin
    )
    assert response.json()["message"] == "Course status updated to published successfully"
    assert client.get(f"/api/v1/courses/{draft.id}").status_code == 200


def test_bookings_of_both_kinds(client, auth_headers_admin, student, service, make_booking, at):
    make_booking(student, service, at(9))
    make_booking(student, service, at(12), kind=BookingKind.SERVICE_BOOKING)

    data = client.get(f"{ADMIN}/consultations", headers=auth_headers_admin).json()["data"]
    assert data["pagination"]["totalConsultations"] == 2

    only_services = client.get(
        f"{ADMIN}/consultations?type=service-booking", headers=auth_headers_admin
    ).json()["data"]
    assert [b["type"] for b in only_services["consultations"]] == ["service-booking"]


def test_revenue_period(client, auth_headers_admin):
    response = client.get(f"{ADMIN}/analytics/revenue?period=7d", headers=auth_headers_admin)
    assert response.status_code == 200
    assert response.json()["data"]["period"]["key"] == "7d"
    assert response.json()["data"]["totals"]["totalRevenue"] == 0.0

    assert client.get(f"{ADMIN}/analytics/revenue?period=2w", headers=auth_headers_admin).status_code == 400
