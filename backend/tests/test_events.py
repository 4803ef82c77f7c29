"""Event API tests: CRUD authorization, update fan-out, deletion policy, registration and check-in."""
from confhub.domain import Role
from confhub.models.notification import Notification
from tests.conftest import auth, create_test_event, create_test_profile, submit_mic_request


class TestEventCRUD:
    def test_create_and_get(self, client, db):
        organizer = create_test_profile(db, "Olga Organizer", Role.organizer)
        event = create_test_event(client, organizer, title="Tech Summit 2024")

        assert event["title"] == "Tech Summit 2024"
        assert event["status"] == "upcoming"
        assert event["created_by"] == organizer["id"]
        assert [s["name"] for s in event["speakers"]] == ["Ada Lovelace", "Alan Turing"]

        resp = client.get(f"/api/events/{event['id']}")
        assert resp.status_code == 200
        assert resp.json()["venue"] == "Hall A"

    def test_attendee_cannot_create(self, client, db):
        attendee = create_test_profile(db, "Jane Doe")
        resp = client.post(
            "/api/events/",
            json={"title": "X", "date": "2026-11-20", "time": "09:00:00", "venue": "Hall B"},
            headers=auth(attendee),
        )
        assert resp.status_code == 403

    def test_invalid_status_rejected(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        resp = client.post(
            "/api/events/",
            json={"title": "X", "date": "2026-11-20", "time": "09:00:00", "venue": "Hall B", "status": "cancelled"},
            headers=auth(admin),
        )
        assert resp.status_code == 422

    def test_only_owner_organizer_or_admin_may_update(self, client, db):
        owner = create_test_profile(db, "Olga Organizer", Role.organizer)
        other = create_test_profile(db, "Oscar Organizer", Role.organizer)
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        event = create_test_event(client, owner)

        resp = client.patch(f"/api/events/{event['id']}", json={"title": "Hijacked"}, headers=auth(other))
        assert resp.status_code == 403

        resp = client.patch(
            f"/api/events/{event['id']}",
            json={"title": "Tech Summit (Day 1)", "speakers": ["Grace Hopper"]},
            headers=auth(admin),
        )
        assert resp.status_code == 200
        assert resp.json()["title"] == "Tech Summit (Day 1)"
        assert [s["name"] for s in resp.json()["speakers"]] == ["Grace Hopper"]

    def test_list_filters(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        create_test_event(client, admin, title="Later", date="2026-12-01")
        create_test_event(client, admin, title="Sooner", date="2026-11-01")
        create_test_event(client, admin, title="Done", date="2025-01-01", status="completed")

        titles = [e["title"] for e in client.get("/api/events/").json()]
        assert titles == ["Done", "Sooner", "Later"]
        titles = [e["title"] for e in client.get("/api/events/?include_completed=false").json()]
        assert titles == ["Sooner", "Later"]
        titles = [e["title"] for e in client.get("/api/events/?status=completed").json()]
        assert titles == ["Done"]


class TestEventUpdateNotifications:
    def test_schedule_change_notifies_registered_attendees(self, client, db):
        organizer = create_test_profile(db, "Olga Organizer", Role.organizer)
        registered = create_test_profile(db, "Jane Doe")
        bystander = create_test_profile(db, "Bob Bystander")
        event = create_test_event(client, organizer)
        client.post(f"/api/events/{event['id']}/register", headers=auth(registered))

        resp = client.patch(f"/api/events/{event['id']}", json={"venue": "Hall B"}, headers=auth(organizer))
        assert resp.status_code == 200

        feed = client.get("/api/notifications/", headers=auth(registered)).json()
        assert len(feed) == 1
        assert feed[0]["title"] == "Event Update"
        assert feed[0]["type"] == "event_update"
        assert "Hall B" in feed[0]["message"]
        assert client.get("/api/notifications/", headers=auth(bystander)).json() == []

    def test_status_and_reschedule_in_one_update(self, client, db):
        organizer = create_test_profile(db, "Olga Organizer", Role.organizer)
        registered = create_test_profile(db, "Jane Doe")
        event = create_test_event(client, organizer, title="Tech Summit")
        client.post(f"/api/events/{event['id']}/register", headers=auth(registered))

        client.patch(
            f"/api/events/{event['id']}",
            json={"status": "ongoing", "venue": "Hall B", "time": "11:00:00"},
            headers=auth(organizer),
        )

        message = client.get("/api/notifications/", headers=auth(registered)).json()[0]["message"]
        assert '"Tech Summit" is now ongoing.' in message
        assert "rescheduled: 2026-11-20 11:00 at Hall B" in message

    def test_cosmetic_change_is_silent(self, client, db):
        organizer = create_test_profile(db, "Olga Organizer", Role.organizer)
        registered = create_test_profile(db, "Jane Doe")
        event = create_test_event(client, organizer)
        client.post(f"/api/events/{event['id']}/register", headers=auth(registered))

        client.patch(f"/api/events/{event['id']}", json={"description": "Now with lunch"}, headers=auth(organizer))

        assert db.query(Notification).filter(Notification.user_id == registered["id"]).count() == 0


class TestEventDeletion:
    def test_delete_unreferenced_event(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        event = create_test_event(client, admin)

        assert client.delete(f"/api/events/{event['id']}", headers=auth(admin)).status_code == 204
        assert client.get(f"/api/events/{event['id']}").status_code == 404

    def test_delete_blocked_while_requests_reference_event(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        attendee = create_test_profile(db, "Jane Doe")
        event = create_test_event(client, admin)
        submit_mic_request(client, attendee, event["id"])

        resp = client.delete(f"/api/events/{event['id']}", headers=auth(admin))
        assert resp.status_code == 409
        assert resp.json()["error"] == "conflict"
        assert client.get(f"/api/events/{event['id']}").status_code == 200


    def test_delete_blocked_while_feedback_references_event(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        attendee = create_test_profile(db, "Jane Doe")
        event = create_test_event(client, admin)
        resp = client.post("/api/feedback/", json={"rating": 4, "event_id": event["id"]}, headers=auth(attendee))
        assert resp.status_code == 201

        resp = client.delete(f"/api/events/{event['id']}", headers=auth(admin))
        assert resp.status_code == 409
        assert resp.json()["error"] == "conflict"
        assert client.get(f"/api/events/{event['id']}").status_code == 200


class TestRegistration:
    def test_capacity_cannot_shrink_below_registrations(self, client, db):
        organizer = create_test_profile(db, "Olga Organizer", Role.organizer)
        event = create_test_event(client, organizer, capacity=3)
        for name in ("Jane Doe", "John Roe", "Mary Major"):
            attendee = create_test_profile(db, name)
            assert client.post(f"/api/events/{event['id']}/register", headers=auth(attendee)).status_code == 201

        resp = client.patch(f"/api/events/{event['id']}", json={"capacity": 1}, headers=auth(organizer))
        assert resp.status_code == 409
        assert resp.json()["error"] == "conflict"
        assert client.get(f"/api/events/{event['id']}").json()["capacity"] == 3

        resp = client.patch(f"/api/events/{event['id']}", json={"capacity": 3}, headers=auth(organizer))
        assert resp.status_code == 200

    def test_register_and_check_in(self, client, db):
        organizer = create_test_profile(db, "Olga Organizer", Role.organizer)
        attendee = create_test_profile(db, "Jane Doe")
        event = create_test_event(client, organizer)

        resp = client.post(f"/api/events/{event['id']}/register", headers=auth(attendee))
        assert resp.status_code == 201
        code = resp.json()["check_in_code"]
        assert code

        mine = client.get("/api/events/registrations/mine", headers=auth(attendee)).json()
        assert [r["check_in_code"] for r in mine] == [code]

        resp = client.post(f"/api/events/{event['id']}/check-in", json={"code": code}, headers=auth(organizer))
        assert resp.status_code == 200
        assert resp.json()["checked_in"] is True
        first_check_in = resp.json()["checked_in_at"]

        # Scanning the same ticket twice is harmless
        resp = client.post(f"/api/events/{event['id']}/check-in", json={"code": code}, headers=auth(organizer))
        assert resp.json()["checked_in_at"] == first_check_in

        attendees = client.get(f"/api/events/{event['id']}/attendees", headers=auth(organizer)).json()
        assert attendees[0]["user_id"] == attendee["id"]
        assert "check_in_code" not in attendees[0]

    def test_unknown_code(self, client, db):
        organizer = create_test_profile(db, "Olga Organizer", Role.organizer)
        event = create_test_event(client, organizer)
        resp = client.post(f"/api/events/{event['id']}/check-in", json={"code": "forged"}, headers=auth(organizer))
        assert resp.status_code == 404

    def test_attendee_cannot_check_in_others(self, client, db):
        organizer = create_test_profile(db, "Olga Organizer", Role.organizer)
        attendee = create_test_profile(db, "Jane Doe")
        event = create_test_event(client, organizer)
        code = client.post(f"/api/events/{event['id']}/register", headers=auth(attendee)).json()["check_in_code"]

        resp = client.post(f"/api/events/{event['id']}/check-in", json={"code": code}, headers=auth(attendee))
        assert resp.status_code == 403

    def test_duplicate_registration(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        attendee = create_test_profile(db, "Jane Doe")
        event = create_test_event(client, admin)
        client.post(f"/api/events/{event['id']}/register", headers=auth(attendee))

        resp = client.post(f"/api/events/{event['id']}/register", headers=auth(attendee))
        assert resp.status_code == 409
        assert resp.json()["detail"] == "You're already registered for this event"

    def test_capacity_enforced(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        first = create_test_profile(db, "Jane Doe")
        second = create_test_profile(db, "John Roe")
        event = create_test_event(client, admin, capacity=1)

        assert client.post(f"/api/events/{event['id']}/register", headers=auth(first)).status_code == 201
        resp = client.post(f"/api/events/{event['id']}/register", headers=auth(second))
        assert resp.status_code == 409
        assert resp.json()["error"] == "conflict"

    def test_cancel_registration(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        attendee = create_test_profile(db, "Jane Doe")
        event = create_test_event(client, admin)
        client.post(f"/api/events/{event['id']}/register", headers=auth(attendee))

        assert client.delete(f"/api/events/{event['id']}/register", headers=auth(attendee)).status_code == 204
        assert client.delete(f"/api/events/{event['id']}/register", headers=auth(attendee)).status_code == 404

    def test_completed_event_closed(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        attendee = create_test_profile(db, "Jane Doe")
        event = create_test_event(client, admin, status="completed")
        assert client.post(f"/api/events/{event['id']}/register", headers=auth(attendee)).status_code == 422


class TestDashboard:
    def test_stats(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        attendee = create_test_profile(db, "Jane Doe")
        event = create_test_event(client, admin)
        create_test_event(client, admin, title="Old", status="completed")
        submit_mic_request(client, attendee, event["id"])

        stats = client.get("/api/dashboard/stats", headers=auth(admin)).json()
        assert stats == {
            "total_events": 2,
            "upcoming_events": 1,
            "total_profiles": 2,
            "pending_mic_requests": 1,
            "pending_complaints": 0,
        }
        assert client.get("/api/dashboard/stats", headers=auth(attendee)).status_code == 403
