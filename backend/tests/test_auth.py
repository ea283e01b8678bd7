"""HTTP tests for legacy password sign in at /api/auth/signin."""

from __future__ import annotations

LOGIN_FAILURE = {"detail": "Wrong email and password combination"}


def _signin(client, email="bob@example.com", password="hunter22"):
    return client.post("/api/auth/signin", json={"email": email, "password": password})


class TestLegacySignin:
    def test_correct_password(self, client, legacy_user):
        resp = _signin(client)
        assert resp.status_code == 200
        data = resp.json()
        assert resp.cookies.get("id") == data["key"]
        assert isinstance(data["expires_at"], int)

    def test_session_resolves_to_user(self, client, legacy_user):
        key = _signin(client).json()["key"]
        client.cookies.clear()
        me = client.get("/api/classic/me", headers={"Authorization": f"Bearer {key}"})
        assert me.status_code == 200
        assert me.json()["user"]["name"] == "Bob"
        assert me.json()["user"]["legacy"] is True

    def test_wrong_password(self, client, legacy_user):
        resp = _signin(client, password="wrong")
        assert resp.status_code == 401
        assert resp.json() == LOGIN_FAILURE

    def test_unknown_email(self, client, legacy_user):
        resp = _signin(client, email="nobody@example.com")
        assert resp.status_code == 401
        assert resp.json() == LOGIN_FAILURE

    def test_missing_fields(self, client, legacy_user):
        assert client.post("/api/auth/signin", json={}).status_code == 401

    def test_classic_account_without_password(self, client, classic_user):
        resp = _signin(client, email="alice@example.com", password="k1")
        assert resp.status_code == 401
        assert resp.json() == LOGIN_FAILURE

    def test_unknown_email_with_empty_password(self, client, legacy_user):
        resp = _signin(client, email="nobody@example.com", password="")
        assert resp.status_code == 401
        assert resp.json() == LOGIN_FAILURE
