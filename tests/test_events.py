import pytest

from cems import db
from cems.exceptions import AuthorizationError, InvalidStateError, NotFoundError
from cems.models import Event
from cems.models.enums import EventCategory, EventStatus
from cems.services import EventService, RegistrationService


class TestCreateEvent:
    def test_organizer_creates_pending_event(self, client, organizer, auth_headers, event_payload):
        response = client.post("/api/events", json=event_payload, headers=auth_headers(organizer))

        assert response.status_code == 201
        data = response.get_json()
        assert data["status"] == "PENDING"
        assert data["organizerId"] == organizer.id
        assert data["venueName"] == "Venue CS-101"
        assert data["registeredCount"] == 0

    def test_admin_can_create(self, client, admin, auth_headers, event_payload):
        response = client.post("/api/events", json=event_payload, headers=auth_headers(admin))

        assert response.status_code == 201

    def test_student_cannot_create(self, client, student, auth_headers, event_payload):
        response = client.post("/api/events", json=event_payload, headers=auth_headers(student))

        assert response.status_code == 403
        assert Event.query.count() == 0

    def test_requires_token(self, client, event_payload):
        response = client.post("/api/events", json=event_payload)

        assert response.status_code == 401

    def test_missing_fields(self, client, organizer, auth_headers, event_payload):
        del event_payload["capacity"]
        del event_payload["category"]

        response = client.post("/api/events", json=event_payload, headers=auth_headers(organizer))

        assert response.status_code == 400
        assert set(response.get_json()["missing_fields"]) == {"capacity", "category"}

    @pytest.mark.parametrize("capacity", [0, -5, "many", 2.5, True])
    def test_rejects_bad_capacity(self, client, organizer, auth_headers, event_payload, capacity):
        event_payload["capacity"] = capacity

        response = client.post("/api/events", json=event_payload, headers=auth_headers(organizer))

        assert response.status_code == 400

    def test_rejects_unknown_category(self, client, organizer, auth_headers, event_payload):
        event_payload["category"] = "cooking"

        response = client.post("/api/events", json=event_payload, headers=auth_headers(organizer))

        assert response.status_code == 400
        assert "Invalid category" in response.get_json()["message"]

    def test_rejects_bad_timestamp(self, client, organizer, auth_headers, event_payload):
        event_payload["startTime"] = "next tuesday"

        response = client.post("/api/events", json=event_payload, headers=auth_headers(organizer))

        assert response.status_code == 400

    def test_rejects_array_body(self, client, organizer, auth_headers, event_payload):
        response = client.post("/api/events", json=[event_payload], headers=auth_headers(organizer))

        assert response.status_code == 400
        assert response.get_json()["message"] == "No data provided"
        assert Event.query.count() == 0

    @pytest.mark.parametrize("field", ["title", "description"])
    def test_rejects_non_string_text(self, client, organizer, auth_headers, event_payload, field):
        event_payload[field] = {"text": "Hackathon"}

        response = client.post("/api/events", json=event_payload, headers=auth_headers(organizer))

        assert response.status_code == 400
        assert response.get_json()["message"] == f"{field} must be a string"

    def test_end_before_start_is_not_checked(self, organizer, event_payload):
        event_payload["startTime"], event_payload["endTime"] = (
            event_payload["endTime"],
            event_payload["startTime"],
        )

        event = EventService.create_event(organizer.id, event_payload)

        assert event.status == EventStatus.PENDING


class TestListEvents:
    def test_lists_with_live_counts(self, client, make_event, make_user):
        event = make_event(capacity=5)
        for _ in range(3):
            RegistrationService.register(event.id, make_user().id)

        response = client.get("/api/events")

        assert response.status_code == 200
        [listed] = response.get_json()
        assert listed["id"] == event.id
        assert listed["registeredCount"] == 3
        assert "isRegistered" not in listed

    def test_filters_by_status_and_category(self, client, make_event):
        approved_tech = make_event(status=EventStatus.APPROVED, category=EventCategory.TECHNOLOGY)
        make_event(status=EventStatus.PENDING, category=EventCategory.TECHNOLOGY)
        make_event(status=EventStatus.APPROVED, category=EventCategory.MUSIC)

        response = client.get("/api/events?status=APPROVED&category=technology")

        assert [e["id"] for e in response.get_json()] == [approved_tech.id]

    def test_newest_first(self, client, make_event):
        first = make_event()
        second = make_event()

        ids = [e["id"] for e in client.get("/api/events").get_json()]

        assert ids == [second.id, first.id]

    def test_invalid_status_filter(self, client):
        response = client.get("/api/events?status=ARCHIVED")

        assert response.status_code == 400

    def test_authenticated_caller_sees_own_registration(self, client, make_event, student, auth_headers):
        mine = make_event()
        other = make_event()
        RegistrationService.register(mine.id, student.id)

        response = client.get("/api/events", headers=auth_headers(student))

        flags = {e["id"]: e["isRegistered"] for e in response.get_json()}
        assert flags == {mine.id: True, other.id: False}

    def test_invalid_token_falls_back_to_anonymous(self, client, make_event):
        make_event()

        response = client.get("/api/events", headers={"Authorization": "Bearer broken"})

        assert response.status_code == 200
        assert "isRegistered" not in response.get_json()[0]


class TestGetEvent:
    def test_includes_registered_users(self, client, make_event, make_user):
        event = make_event()
        attendee = make_user(name="Ada Lovelace")
        RegistrationService.register(event.id, attendee.id)

        response = client.get(f"/api/events/{event.id}")

        assert response.status_code == 200
        data = response.get_json()
        assert data["registeredCount"] == 1
        assert data["registeredUsers"] == [
            {"id": attendee.id, "name": "Ada Lovelace", "email": attendee.email}
        ]

    def test_registered_users_lookup_failure_is_not_fatal(self, make_event, monkeypatch):
        from sqlalchemy.exc import OperationalError
        from cems.repositories import RegistrationRepository

        event = make_event()

        def broken(event_id):
            raise OperationalError("SELECT", {}, Exception("boom"))

        monkeypatch.setattr(RegistrationRepository, "find_registered_users", staticmethod(broken))

        data = EventService.get_event(event.id)

        assert data["registeredUsers"] == []
        assert data["id"] == event.id

    def test_unknown_event(self, client):
        response = client.get("/api/events/999")

        assert response.status_code == 404
        assert response.get_json()["message"] == "Event not found"


class TestApproveReject:
    def test_admin_approves_pending_event(self, client, admin, auth_headers, make_event):
        event = make_event(status=EventStatus.PENDING)

        response = client.post(f"/api/events/{event.id}/approve", headers=auth_headers(admin))

        assert response.status_code == 200
        assert client.get(f"/api/events/{event.id}").get_json()["status"] == "APPROVED"

    def test_admin_rejects_pending_event(self, client, admin, auth_headers, make_event):
        event = make_event(status=EventStatus.PENDING)

        response = client.post(f"/api/events/{event.id}/reject", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.get_json()["event"]["status"] == "REJECTED"

    @pytest.mark.parametrize("action", ["approve", "reject"])
    def test_non_admin_forbidden(self, client, organizer, student, auth_headers, make_event, action):
        event = make_event(status=EventStatus.PENDING, owner=organizer)

        for user in (organizer, student):
            response = client.post(f"/api/events/{event.id}/{action}", headers=auth_headers(user))
            assert response.status_code == 403

        assert client.get(f"/api/events/{event.id}").get_json()["status"] == "PENDING"

    def test_unknown_event(self, client, admin, auth_headers):
        response = client.post("/api/events/4242/approve", headers=auth_headers(admin))

        assert response.status_code == 404

    def test_service_checks_role_before_existence(self, student):
        with pytest.raises(AuthorizationError):
            EventService.approve_event(4242, student)

    def test_service_unknown_event(self, admin):
        with pytest.raises(NotFoundError):
            EventService.reject_event(4242, admin)

    def test_reapproving_is_idempotent(self, admin, make_event):
        event = make_event(status=EventStatus.PENDING)

        EventService.approve_event(event.id, admin)
        again = EventService.approve_event(event.id, admin)

        assert again.status == EventStatus.APPROVED

    @pytest.mark.parametrize(
        "start, action",
        [
            (EventStatus.APPROVED, "reject_event"),
            (EventStatus.REJECTED, "approve_event"),
            (EventStatus.CANCELLED, "approve_event"),
            (EventStatus.CANCELLED, "reject_event"),
        ],
    )
    def test_decided_events_never_change(self, admin, make_event, start, action):
        event = make_event(status=start)

        with pytest.raises(InvalidStateError):
            getattr(EventService, action)(event.id, admin)

        assert db.session.get(Event, event.id).status == start

    def test_reject_after_approve_over_http(self, client, admin, auth_headers, make_event):
        event = make_event(status=EventStatus.PENDING)
        client.post(f"/api/events/{event.id}/approve", headers=auth_headers(admin))

        response = client.post(f"/api/events/{event.id}/reject", headers=auth_headers(admin))

        assert response.status_code == 400
        assert client.get(f"/api/events/{event.id}").get_json()["status"] == "APPROVED"
