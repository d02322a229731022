"""
Tests for the consultation and service-booking endpoints.

Both routers share one implementation; the service-booking router is
exercised where its behaviour differs (list key and kind scoping).
"""

from app.core.enums import BookingKind, BookingStatus

CONSULTATIONS = "/api/v1/consultations"
SERVICE_BOOKINGS = "/api/v1/service-bookings"


def _payload(service, start, /, **extra):
    body = {
        "service": service.id,
        "consultant": service.consultant_id,
        "scheduledDate": start.isoformat(),
        "timeSlot": start.strftime("%H:%M"),
    }
    body.update(extra)
    return body


class TestCreate:
    def test_books_a_consultation(self, client, auth_headers_student, service, at):
        response = client.post(
            CONSULTATIONS, json=_payload(service, at(10), notes="First call"), headers=auth_headers_student
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Consultation booked successfully"
        data = body["data"]
        assert data["status"] == "scheduled"
        assert data["type"] == "consultation"
        assert data["amount"] == 100.0
        assert data["duration"] == 60
        assert data["timeSlot"] == "10:00"
        assert data["service"]["title"] == service.title
        assert data["consultant"]["id"] == service.consultant_id
        assert data["rescheduleHistory"] == []

    def test_overlapping_request_is_a_conflict(
        self, client, auth_headers_student, auth_headers_other_student, service, at
    ):
        first = client.post(CONSULTATIONS, json=_payload(service, at(10)), headers=auth_headers_student)
        assert first.status_code == 201

        clash = client.post(
            CONSULTATIONS, json=_payload(service, at(10, 30)), headers=auth_headers_other_student
        )
        assert clash.status_code == 409
        assert clash.json() == {
            "success": False,
            "message": "Consultant is not available at this time. Please choose another time slot.",
            "code": "BOOKING_CONFLICT",
        }

        adjacent = client.post(
            CONSULTATIONS, json=_payload(service, at(11)), headers=auth_headers_other_student
        )
        assert adjacent.status_code == 201

    def test_requires_authentication(self, client, service, at):
        response = client.post(CONSULTATIONS, json=_payload(service, at(10)))
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_validation_errors_use_envelope(self, client, auth_headers_student):
        response = client.post(CONSULTATIONS, json={"service": "x"}, headers=auth_headers_student)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        fields = {error["field"] for error in body["errors"]}
        assert {"consultant", "scheduledDate", "timeSlot"} <= fields

    def test_unknown_service(self, client, auth_headers_student, service, at):
        body = _payload(service, at(10), service="01J00000000000000000000000")
        response = client.post(CONSULTATIONS, json=body, headers=auth_headers_student)
        assert response.status_code == 404

    def test_service_booking_router_sets_kind(self, client, auth_headers_student, service, at):
        response = client.post(SERVICE_BOOKINGS, json=_payload(service, at(10)), headers=auth_headers_student)
        assert response.status_code == 201
        assert response.json()["data"]["type"] == "service-booking"
        assert response.json()["message"] == "Service booking booked successfully"


class TestList:
    def test_pagination_block(self, client, auth_headers_student, student, service, make_booking, at):
        for hour in (9, 11, 13):
            make_booking(student, service, at(hour))

        response = client.get(f"{CONSULTATIONS}?limit=2", headers=auth_headers_student)

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["consultations"]) == 2
        assert data["pagination"] == {
            "currentPage": 1,
            "totalPages": 2,
            "totalConsultations": 3,
            "hasNext": True,
            "hasPrev": False,
        }

    def test_status_filter(self, client, auth_headers_student, student, service, make_booking, at):
        make_booking(student, service, at(9))
        make_booking(student, service, at(11), status=BookingStatus.CANCELLED)
        response = client.get(f"{CONSULTATIONS}?status=cancelled", headers=auth_headers_student)
        assert [b["status"] for b in response.json()["data"]["consultations"]] == ["cancelled"]

    def test_service_bookings_list_only_its_kind(
        self, client, auth_headers_student, student, service, make_booking, at
    ):
        make_booking(student, service, at(9))
        make_booking(student, service, at(11), kind=BookingKind.SERVICE_BOOKING)
        data = client.get(SERVICE_BOOKINGS, headers=auth_headers_student).json()["data"]
        assert len(data["serviceBookings"]) == 1
        assert data["pagination"]["totalServiceBookings"] == 1

    def test_consultations_view_covers_both_kinds(
        self, client, auth_headers_student, student, service, make_booking, at
    ):
        make_booking(student, service, at(9))
        make_booking(student, service, at(11), kind=BookingKind.SERVICE_BOOKING)

        everything = client.get(CONSULTATIONS, headers=auth_headers_student).json()["data"]
        assert everything["pagination"]["totalConsultations"] == 2

        filtered = client.get(
            f"{CONSULTATIONS}?type=service-booking", headers=auth_headers_student
        ).json()["data"]
        assert [b["type"] for b in filtered["consultations"]] == ["service-booking"]

    def test_invalid_sort_field(self, client, auth_headers_student):
        response = client.get(f"{CONSULTATIONS}?sortBy=nonsense", headers=auth_headers_student)
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "INVALID_SORT_FIELD"
        assert body["errors"] == [{"field": "sortBy", "message": "Invalid sort field: nonsense"}]


class TestLifecycle:
    def test_get_by_outsider_is_forbidden(
        self, client, auth_headers_other_student, student, service, make_booking, at
    ):
        booking = make_booking(student, service, at(9))
        response = client.get(f"{CONSULTATIONS}/{booking.id}", headers=auth_headers_other_student)
        assert response.status_code == 403

    def test_malformed_id(self, client, auth_headers_student):
        response = client.get(f"{CONSULTATIONS}/not-an-id", headers=auth_headers_student)
        assert response.status_code == 400

    def test_missing_booking(self, client, auth_headers_student):
        response = client.get(f"{CONSULTATIONS}/01J00000000000000000000000", headers=auth_headers_student)
        assert response.status_code == 404
        assert response.json()["code"] == "BOOKING_NOT_FOUND"

    def test_status_matrix(
        self,
        client,
        auth_headers_student,
        auth_headers_consultant,
        student,
        service,
        make_booking,
        at,
    ):
        booking = make_booking(student, service, at(9))
        url = f"{CONSULTATIONS}/{booking.id}/status"

        # Client may not confirm
        forbidden = client.put(url, json={"status": "confirmed"}, headers=auth_headers_student)
        assert forbidden.status_code == 403

        # scheduled -> completed skips confirmation
        illegal = client.put(url, json={"status": "completed"}, headers=auth_headers_consultant)
        assert illegal.status_code == 400
        assert illegal.json()["message"] == "Cannot change status from scheduled to completed"

        confirmed = client.put(url, json={"status": "confirmed"}, headers=auth_headers_consultant)
        assert confirmed.status_code == 200
        assert confirmed.json()["message"] == "Consultation confirmed successfully"

        completed = client.put(url, json={"status": "completed"}, headers=auth_headers_consultant)
        assert completed.json()["data"]["status"] == "completed"

        again = client.put(url, json={"status": "cancelled"}, headers=auth_headers_student)
        assert again.status_code == 400

    def test_rescheduled_is_not_a_status_update_target(
        self, client, auth_headers_student, student, service, make_booking, at
    ):
        booking = make_booking(student, service, at(9))
        response = client.put(
            f"{CONSULTATIONS}/{booking.id}/status",
            json={"status": "rescheduled"},
            headers=auth_headers_student,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_reschedule_records_history(
        self, client, auth_headers_student, student, service, make_booking, at
    ):
        booking = make_booking(student, service, at(9))
        response = client.put(
            f"{CONSULTATIONS}/{booking.id}/reschedule",
            json={"scheduledDate": at(15).isoformat(), "timeSlot": "15:00", "reason": "Clash"},
            headers=auth_headers_student,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "rescheduled"
        assert len(data["rescheduleHistory"]) == 1
        assert data["rescheduleHistory"][0]["reason"] == "Clash"
        assert data["rescheduleHistory"][0]["newTimeSlot"] == "15:00"

    def test_feedback_flow(
        self, client, auth_headers_student, student, consultant, service, make_booking, at
    ):
        booking = make_booking(student, service, at(9), status=BookingStatus.COMPLETED)
        url = f"{CONSULTATIONS}/{booking.id}/feedback"

        first = client.post(url, json={"rating": 5, "feedback": "Great"}, headers=auth_headers_student)
        assert first.status_code == 200
        assert first.json()["data"]["feedbackProvided"] is True

        second = client.post(url, json={"rating": 4}, headers=auth_headers_student)
        assert second.status_code == 400
        assert second.json()["code"] == "FEEDBACK_ALREADY_PROVIDED"

        out_of_range = client.post(url, json={"rating": 6}, headers=auth_headers_student)
        assert out_of_range.status_code == 400

    def test_wrong_kind_router_is_not_found(
        self, client, auth_headers_student, student, service, make_booking, at
    ):
        booking = make_booking(student, service, at(9))
        response = client.get(f"{SERVICE_BOOKINGS}/{booking.id}", headers=auth_headers_student)
        assert response.status_code == 404
        assert response.json()["message"] == "Service booking not found"


class TestAvailability:
    def test_slots_exclude_booked_interval(
        self, client, auth_headers_student, student, consultant, service, make_booking, at, future_day
    ):
        make_booking(student, service, at(10))
        response = client.get(
            f"{CONSULTATIONS}/consultant/availability",
            params={
                "consultantId": consultant.id,
                "date": future_day.date().isoformat(),
                "serviceId": service.id,
            },
            headers=auth_headers_student,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert "10:00" not in data["availableSlots"]
        assert "11:00" in data["availableSlots"]
        assert data["bookedConsultations"] == [{"time": "10:00", "duration": 60}]
