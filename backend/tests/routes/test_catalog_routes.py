"""Tests for the service, consultant, category and partner endpoints."""

from app.core.enums import ApprovalStatus

SERVICES = "/api/v1/services"
CONSULTANTS = "/api/v1/consultants"
CATEGORIES = "/api/v1/categories"
PARTNERS = "/api/v1/partners"

NEW_SERVICE = {
    "title": "Interview practice",
    "description": "Mock interviews with detailed written feedback.",
    "price": 75,
    "duration": 45,
}


class TestServices:
    def test_public_listing(self, client, consultant, service, make_service):
        make_service(consultant, title="Retired offer", is_active=False)

        response = client.get(SERVICES)

        assert response.status_code == 200
        data = response.json()["data"]
        assert [s["id"] for s in data["services"]] == [service.id]
        assert data["services"][0]["price"] == 100.0
        assert data["services"][0]["consultant"]["id"] == consultant.id
        assert data["pagination"]["totalServices"] == 1

    def test_consultant_creates_service(self, client, auth_headers_consultant):
        response = client.post(SERVICES, json=NEW_SERVICE, headers=auth_headers_consultant)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Service created successfully"
        assert body["data"]["isActive"] is True
        assert body["data"]["duration"] == 45

        duplicate = client.post(SERVICES, json=NEW_SERVICE, headers=auth_headers_consultant)
        assert duplicate.status_code == 409

    def test_student_cannot_create(self, client, auth_headers_student):
        response = client.post(SERVICES, json=NEW_SERVICE, headers=auth_headers_student)
        assert response.status_code == 403

    def test_duration_out_of_range(self, client, auth_headers_consultant):
        body = {**NEW_SERVICE, "duration": 10}
        response = client.post(SERVICES, json=body, headers=auth_headers_consultant)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "duration"

    def test_toggle_and_my_services(self, client, service, auth_headers_consultant):
        toggled = client.post(
            f"{SERVICES}/{service.id}/toggle-active", headers=auth_headers_consultant
        )
        assert toggled.json()["message"] == "Service deactivated successfully"
        assert toggled.json()["data"]["isActive"] is False

        inactive = client.get(
            f"{SERVICES}/consultant/my-services?status=inactive", headers=auth_headers_consultant
        ).json()["data"]
        assert [s["id"] for s in inactive["services"]] == [service.id]

        assert client.get(f"{SERVICES}/{service.id}").status_code == 404

    def test_delete_is_soft(self, client, service, auth_headers_consultant):
        response = client.delete(f"{SERVICES}/{service.id}", headers=auth_headers_consultant)
        assert response.status_code == 200
        assert response.json()["message"] == "Service deleted successfully"
        owner_view = client.get(f"{SERVICES}/{service.id}", headers=auth_headers_consultant)
        assert owner_view.json()["data"]["isActive"] is False

    def test_services_of_a_consultant(self, client, consultant, service):
        data = client.get(f"{SERVICES}/consultant/{consultant.id}").json()["data"]
        assert [s["id"] for s in data["services"]] == [service.id]


class TestConsultants:
    def test_listing_shows_approved_only(self, client, consultant, make_consultant):
        make_consultant(approval_status=ApprovalStatus.PENDING)
        data = client.get(CONSULTANTS).json()["data"]
        assert [c["id"] for c in data["consultants"]] == [consultant.id]
        assert data["pagination"]["totalConsultants"] == 1

    def test_apply_and_read_own_profile(self, client, auth_headers_student, student):
        missing = client.get(f"{CONSULTANTS}/me", headers=auth_headers_student)
        assert missing.status_code == 404

        response = client.post(
            f"{CONSULTANTS}/apply",
            json={"specialization": "Data careers", "bio": "Former analyst."},
            headers=auth_headers_student,
        )
        assert response.status_code == 201
        assert response.json()["message"] == "Consultant application submitted successfully"
        assert response.json()["data"]["approvalStatus"] == "pending"

        mine = client.get(f"{CONSULTANTS}/me", headers=auth_headers_student).json()["data"]
        assert mine["userId"] == student.id

        # Not public until approved
        assert client.get(f"{CONSULTANTS}/{mine['id']}").status_code == 404

    def test_apply_requires_login(self, client):
        response = client.post(f"{CONSULTANTS}/apply", json={"specialization": "Data careers"})
        assert response.status_code == 401


class TestCategories:
    def test_admin_only_create(self, client, auth_headers_student, auth_headers_admin):
        body = {"name": "Web Development", "type": "course"}
        assert client.post(CATEGORIES, json=body, headers=auth_headers_student).status_code == 403

        response = client.post(CATEGORIES, json=body, headers=auth_headers_admin)
        assert response.status_code == 201
        assert response.json()["message"] == "Category created successfully"
        assert response.json()["data"]["slug"] == "web-development"

    def test_list_by_type(self, client, auth_headers_admin):
        client.post(CATEGORIES, json={"name": "Design", "type": "course"}, headers=auth_headers_admin)
        client.post(CATEGORIES, json={"name": "Career", "type": "service"}, headers=auth_headers_admin)

        data = client.get(f"{CATEGORIES}?type=service").json()["data"]
        assert [c["name"] for c in data["categories"]] == ["Career"]


class TestPartners:
    def test_admin_creates_and_public_lists(self, client, auth_headers_admin, auth_headers_student):
        body = {"name": "Acme Corp", "type": "corporate", "partnershipLevel": "gold"}
        assert client.post(PARTNERS, json=body, headers=auth_headers_student).status_code == 403

        created = client.post(PARTNERS, json=body, headers=auth_headers_admin)
        assert created.status_code == 201
        assert created.json()["message"] == "Partner created successfully"
        partner_id = created.json()["data"]["id"]

        listed = client.get(PARTNERS).json()["data"]
        assert [p["name"] for p in listed["partners"]] == ["Acme Corp"]
        assert listed["pagination"]["totalPartners"] == 1

        client.delete(f"{PARTNERS}/{partner_id}", headers=auth_headers_admin)
        assert client.get(PARTNERS).json()["data"]["partners"] == []
        # includeInactive only widens the view for admins
        assert client.get(f"{PARTNERS}?includeInactive=true").json()["data"]["partners"] == []
        admin_view = client.get(f"{PARTNERS}?includeInactive=true", headers=auth_headers_admin)
        assert len(admin_view.json()["data"]["partners"]) == 1

    def test_invalid_website(self, client, auth_headers_admin):
        body = {"name": "Acme Corp", "type": "corporate", "website": "acme.example"}
        response = client.post(PARTNERS, json=body, headers=auth_headers_admin)
        assert response.status_code == 400
