"""Profile API tests: roles come from the database, never from the client."""
from confhub.domain import Role
from tests.conftest import auth, create_test_profile


class TestProfileSync:
    def test_first_profile_is_admin_then_attendees(self, client):
        first = client.post("/api/profiles/", json={"name": "Founder", "email": "founder@example.com"})
        assert first.status_code == 201
        assert first.json()["role"] == "admin"

        second = client.post(
            "/api/profiles/",
            json={"name": "Mallory", "email": "mallory@example.com", "role": "admin"},
        )
        assert second.status_code == 201
        assert second.json()["role"] == "attendee"

    def test_duplicate_email(self, client):
        client.post("/api/profiles/", json={"name": "A", "email": "a@example.com"})
        resp = client.post("/api/profiles/", json={"name": "B", "email": "a@example.com"})
        assert resp.status_code == 409

    def test_explicit_id_is_kept(self, client):
        resp = client.post("/api/profiles/", json={"id": "auth-123", "name": "Jane Doe"})
        assert resp.json()["id"] == "auth-123"
        me = client.get("/api/profiles/me", headers={"X-User-Id": "auth-123"})
        assert me.json()["name"] == "Jane Doe"


class TestRoleManagement:
    def test_admin_promotes_attendee(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        attendee = create_test_profile(db, "Jane Doe")

        resp = client.patch(f"/api/profiles/{attendee['id']}/role", json={"role": "organizer"}, headers=auth(admin))
        assert resp.status_code == 200
        assert resp.json()["role"] == "organizer"

        # The new role takes effect on the next request without any client-side claim
        assert client.get("/api/profiles/", headers=auth(attendee)).status_code == 200

    def test_non_admin_cannot_change_roles(self, client, db):
        organizer = create_test_profile(db, "Olga Organizer", Role.organizer)
        attendee = create_test_profile(db, "Jane Doe")
        resp = client.patch(f"/api/profiles/{attendee['id']}/role", json={"role": "admin"}, headers=auth(organizer))
        assert resp.status_code == 403

    def test_invalid_role(self, client, db):
        admin = create_test_profile(db, "Ada Admin", Role.admin)
        resp = client.patch(f"/api/profiles/{admin['id']}/role", json={"role": "root"}, headers=auth(admin))
        assert resp.status_code == 422

    def test_staff_directory_is_protected(self, client, db):
        attendee = create_test_profile(db, "Jane Doe")
        assert client.get("/api/profiles/").status_code == 401
        assert client.get("/api/profiles/", headers=auth(attendee)).status_code == 403
