"""Tests for admin authentication and the role gate."""

from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import Session

from app.models.admin import Admin
from app.models.role import Role
from app.models.user import User
from app.services.auth import get_auth_service
from app.services.credentials import get_credential_store
from app.services.passwords import get_password_hasher


class TestAdminLogin:
    def test_login_success(self, client: TestClient, make_admin, db_session: Session):
        admin, _ = make_admin("staff@example.com", Role.ADMIN, password="staffpass1")
        response = client.post("/api/v1/admin/login", json={"email": "STAFF@example.com", "password": "staffpass1"})
        assert response.status_code == 200
        data = response.json()
        assert data["admin"]["role"] == "admin"
        assert jwt.get_unverified_claims(data["token"])["role"] == "admin"

        db_session.expire_all()
        assert db_session.get(Admin, admin.id).last_login_at is not None

    def test_login_wrong_password(self, client: TestClient, make_admin):
        make_admin("staff@example.com", Role.ADMIN, password="staffpass1")
        response = client.post("/api/v1/admin/login", json={"email": "staff@example.com", "password": "nope-nope"})
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    def test_login_inactive_admin(self, client: TestClient, make_admin, db_session: Session):
        admin, _ = make_admin("staff@example.com", Role.ADMIN, password="staffpass1")
        get_credential_store().set_active(db_session, Admin, admin.id, False)
        response = client.post("/api/v1/admin/login", json={"email": "staff@example.com", "password": "staffpass1"})
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    def test_user_credentials_do_not_work_for_admin_login(self, client: TestClient, test_user: dict):
        response = client.post("/api/v1/admin/login", json={"email": "test@example.com", "password": "password123"})
        assert response.status_code == 401

    def test_me(self, client: TestClient, super_admin: dict):
        response = client.get("/api/v1/admin/me", headers={"Authorization": f"Bearer {super_admin['token']}"})
        assert response.status_code == 200
        assert response.json()["role"] == "super_admin"


class TestRoleGate:
    def test_user_token_forbidden_on_admin_routes(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/admin/users", headers={"Authorization": f"Bearer {test_user['token']}"})
        assert response.status_code == 403
        assert response.json() == {"message": "Insufficient permissions"}

    def test_no_token(self, client: TestClient):
        response = client.get("/api/v1/admin/users")
        assert response.status_code == 401
        assert response.json() == {"message": "No token provided"}

    def test_any_admin_role_can_list_users(self, client: TestClient, make_admin):
        _, token = make_admin("editor@example.com", Role.EDITOR)
        response = client.get("/api/v1/admin/users", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    def test_super_admin_only_route(self, client: TestClient, make_admin):
        target, _ = make_admin("target@example.com", Role.EDITOR)
        _, admin_token = make_admin("plain@example.com", Role.ADMIN)
        response = client.patch(
            f"/api/v1/admin/admins/{target.id}",
            json={"is_active": False},
            headers={"Authorization": f"Bearer {admin_token}"},
        )
        assert response.status_code == 403


class TestRevocation:
    def test_deactivation_revokes_admin_token(self, client: TestClient, make_admin, super_admin: dict):
        target, target_token = make_admin("target@example.com", Role.ADMIN)
        headers = {"Authorization": f"Bearer {target_token}"}
        assert client.get("/api/v1/admin/me", headers=headers).status_code == 200

        response = client.patch(
            f"/api/v1/admin/admins/{target.id}",
            json={"is_active": False},
            headers={"Authorization": f"Bearer {super_admin['token']}"},
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        revoked = client.get("/api/v1/admin/me", headers=headers)
        assert revoked.status_code == 401
        assert revoked.json() == {"message": "Invalid token or admin not found"}

        client.patch(
            f"/api/v1/admin/admins/{target.id}",
            json={"is_active": True},
            headers={"Authorization": f"Bearer {super_admin['token']}"},
        )
        assert client.get("/api/v1/admin/me", headers=headers).status_code == 200

    def test_cannot_deactivate_self(self, client: TestClient, super_admin: dict):
        response = client.patch(
            f"/api/v1/admin/admins/{super_admin['admin_id']}",
            json={"is_active": False},
            headers={"Authorization": f"Bearer {super_admin['token']}"},
        )
        assert response.status_code == 400

    def test_unknown_admin(self, client: TestClient, super_admin: dict):
        response = client.patch(
            "/api/v1/admin/admins/9999",
            json={"is_active": False},
            headers={"Authorization": f"Bearer {super_admin['token']}"},
        )
        assert response.status_code == 404


class TestUserListing:
    def _seed_users(self, db_session: Session, count: int) -> None:
        store = get_credential_store()
        password_hash = get_password_hasher().hash("password123")
        for i in range(count):
            store.create_user(
                db_session,
                f"learner{i}@example.com",
                password_hash,
                first_name=f"Learner{i}",
                last_name="Smith" if i % 2 else "Jones",
                mobile=f"98765{i:05d}",
            )

    def test_pagination(self, client: TestClient, db_session: Session, super_admin: dict):
        self._seed_users(db_session, 12)
        headers = {"Authorization": f"Bearer {super_admin['token']}"}

        first = client.get("/api/v1/admin/users?page=1&limit=5", headers=headers).json()
        assert first["total_users"] == 12
        assert first["total_pages"] == 3
        assert first["current_page"] == 1
        assert len(first["users"]) == 5
        assert first["recent_signups"] == 12
        assert "password_hash" not in first["users"][0]

        last = client.get("/api/v1/admin/users?page=3&limit=5", headers=headers).json()
        assert len(last["users"]) == 2

    def test_search(self, client: TestClient, db_session: Session, super_admin: dict):
        self._seed_users(db_session, 6)
        headers = {"Authorization": f"Bearer {super_admin['token']}"}

        by_name = client.get("/api/v1/admin/users?search=smith", headers=headers).json()
        assert by_name["total_users"] == 3

        by_email = client.get("/api/v1/admin/users?search=LEARNER4@", headers=headers).json()
        assert [u["email"] for u in by_email["users"]] == ["learner4@example.com"]

    def test_search_wildcards_are_literal(self, client: TestClient, db_session: Session, super_admin: dict):
        self._seed_users(db_session, 3)
        get_credential_store().create_user(
            db_session, "first_last@example.com", "x", first_name="Under", last_name="Score"
        )
        headers = {"Authorization": f"Bearer {super_admin['token']}"}

        underscore = client.get("/api/v1/admin/users?search=_", headers=headers).json()
        assert [u["email"] for u in underscore["users"]] == ["first_last@example.com"]

        percent = client.get("/api/v1/admin/users", params={"search": "%"}, headers=headers).json()
        assert percent["total_users"] == 0

    def test_recent_signups_window(self, client: TestClient, db_session: Session, super_admin: dict):
        self._seed_users(db_session, 2)
        old = db_session.query(User).filter(User.email == "learner0@example.com").first()
        old.created_at = datetime.utcnow() - timedelta(days=30)
        db_session.commit()

        data = client.get("/api/v1/admin/users", headers={"Authorization": f"Bearer {super_admin['token']}"}).json()
        assert data["total_users"] == 2
        assert data["recent_signups"] == 1

    def test_invalid_page(self, client: TestClient, super_admin: dict):
        response = client.get("/api/v1/admin/users?page=0", headers={"Authorization": f"Bearer {super_admin['token']}"})
        assert response.status_code == 400


class TestSeedAdmin:
    def test_ensure_default_admin_is_idempotent(self, db_session: Session):
        service = get_auth_service()
        admin, created = service.ensure_default_admin(db_session, "Seed@Example.com", "seedpass1", "Super Admin")
        assert created
        assert admin.role is Role.SUPER_ADMIN
        assert admin.email == "seed@example.com"

        again, created_again = service.ensure_default_admin(db_session, "seed@example.com", "otherpass", "Other")
        assert not created_again
        assert again.id == admin.id
        assert get_password_hasher().verify("seedpass1", again.password_hash)
