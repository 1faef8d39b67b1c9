"""HTTP contract for /api/v1/bookings."""

from datetime import timedelta

import pytest

from app.models.booking import BookingStatus

BASE = "/api/v1/bookings"


def _payload(teacher, start_at, **overrides):
    body = {
        "teacher_id": teacher.id,
        "skill": "Python",
        "start_at": start_at.isoformat(),
        "duration_minutes": 90,
    }
    body.update(overrides)
    return body


class TestAuthentication:
    def test_missing_token_is_401_problem(self, client):
        response = client.get(BASE)
        assert response.status_code == 401
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.headers["www-authenticate"] == "Bearer"
        body = response.json()
        assert body["status"] == 401
        assert body["code"] == "NOT_AUTHENTICATED"

    def test_garbage_token_is_401(self, client):
        response = client.get(BASE, headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"


class TestCreateBooking:
    def test_created_with_price_and_debit(self, client, auth_headers, student, teacher, slot_start):
        response = client.post(BASE, json=_payload(teacher, slot_start), headers=auth_headers(student))

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == BookingStatus.CONFIRMED.value
        assert data["price"] == 45.0
        assert data["student_id"] == student.id
        assert data["review_submitted"] is False

        wallet = client.get("/api/v1/wallet", headers=auth_headers(student)).json()
        assert wallet["balance"] == 55.0
        assert wallet["coins_spent"] == 45.0

    def test_overlap_is_409(self, client, auth_headers, make_user, student, teacher, slot_start):
        client.post(BASE, json=_payload(teacher, slot_start), headers=auth_headers(student))
        rival = make_user(name="Rival", balance="100.00")

        response = client.post(
            BASE,
            json=_payload(teacher, slot_start + timedelta(minutes=30)),
            headers=auth_headers(rival),
        )

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "BOOKING_CONFLICT"
        assert body["detail"] == "Teacher is not available at this time"

    def test_insufficient_funds_is_422(self, client, auth_headers, make_user, teacher, slot_start):
        poor = make_user(name="Poor", balance="1.00")
        response = client.post(BASE, json=_payload(teacher, slot_start), headers=auth_headers(poor))
        assert response.status_code == 422
        assert response.json()["code"] == "INSUFFICIENT_FUNDS"

    def test_unknown_teacher_is_404(self, client, auth_headers, student, slot_start):
        body = {"teacher_id": "01MISSINGTEACHER0000000000", "skill": "Python", "start_at": slot_start.isoformat()}
        response = client.post(BASE, json=body, headers=auth_headers(student))
        assert response.status_code == 404

    def test_bad_duration_is_400(self, client, auth_headers, student, teacher, slot_start):
        response = client.post(
            BASE, json=_payload(teacher, slot_start, duration_minutes=10), headers=auth_headers(student)
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_DURATION"

    def test_unexpected_field_is_422_validation_error(self, client, auth_headers, student, teacher, slot_start):
        response = client.post(
            BASE, json=_payload(teacher, slot_start, price=0), headers=auth_headers(student)
        )
        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "validation_error"
        assert body["errors"]


class TestBookingLifecycle:
    @pytest.fixture
    def booking_id(self, client, auth_headers, student, teacher, slot_start):
        response = client.post(BASE, json=_payload(teacher, slot_start), headers=auth_headers(student))
        return response.json()["id"]

    def test_get_booking(self, client, auth_headers, teacher, booking_id):
        response = client.get(f"{BASE}/{booking_id}", headers=auth_headers(teacher))
        assert response.status_code == 200
        assert response.json()["id"] == booking_id

    def test_outsider_gets_403(self, client, auth_headers, make_user, booking_id):
        outsider = make_user(name="Outsider")
        response = client.get(f"{BASE}/{booking_id}", headers=auth_headers(outsider))
        assert response.status_code == 403

    def test_complete_then_review(self, client, auth_headers, student, teacher, booking_id):
        done = client.put(
            f"{BASE}/{booking_id}/status", json={"status": "completed"}, headers=auth_headers(teacher)
        )
        assert done.status_code == 200
        assert done.json()["status"] == "completed"

        review = client.post(
            f"{BASE}/{booking_id}/review",
            json={"rating": 5, "comment": "Great session"},
            headers=auth_headers(student),
        )
        assert review.status_code == 200
        assert review.json()["rating"] == 5

        again = client.post(
            f"{BASE}/{booking_id}/review", json={"rating": 4}, headers=auth_headers(student)
        )
        assert again.status_code == 400
        assert again.json()["code"] == "REVIEW_ALREADY_SUBMITTED"

        profile = client.get(f"/api/v1/users/{teacher.id}", headers=auth_headers(student)).json()
        assert profile["average_rating"] == 5.0
        assert profile["total_reviews"] == 1
        assert profile["total_sessions"] == 1

    def test_review_rating_out_of_range_is_400(self, client, auth_headers, student, teacher, booking_id):
        client.put(f"{BASE}/{booking_id}/status", json={"status": "completed"}, headers=auth_headers(teacher))
        response = client.post(
            f"{BASE}/{booking_id}/review", json={"rating": 6}, headers=auth_headers(student)
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_RATING"

    def test_illegal_transition_is_400(self, client, auth_headers, teacher, booking_id):
        client.put(f"{BASE}/{booking_id}/status", json={"status": "no_show"}, headers=auth_headers(teacher))
        response = client.put(
            f"{BASE}/{booking_id}/status", json={"status": "completed"}, headers=auth_headers(teacher)
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_STATUS_TRANSITION"

    def test_student_cancel_refunds(self, client, auth_headers, student, booking_id):
        response = client.put(
            f"{BASE}/{booking_id}/status",
            json={"status": "cancelled", "cancellation_reason": "Conflict at work"},
            headers=auth_headers(student),
        )
        assert response.status_code == 200
        assert response.json()["cancelled_by_id"] == student.id
        wallet = client.get("/api/v1/wallet", headers=auth_headers(student)).json()
        assert wallet["balance"] == 100.0

    def test_list_with_perspective(self, client, auth_headers, student, teacher, booking_id):
        as_payee = client.get(BASE, params={"as": "payee"}, headers=auth_headers(teacher)).json()
        as_payer = client.get(BASE, params={"as": "payer"}, headers=auth_headers(teacher)).json()
        assert [b["id"] for b in as_payee] == [booking_id]
        assert as_payer == []

    def test_availability(self, client, auth_headers, student, teacher, slot_start, booking_id):
        response = client.get(
            f"{BASE}/availability/{teacher.id}",
            params={"date": slot_start.date().isoformat()},
            headers=auth_headers(student),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["day"] == slot_start.date().isoformat()
        assert [s["booking_id"] for s in data["booked_slots"]] == [booking_id]
        assert data["weekly_availability"] == teacher.weekly_availability
