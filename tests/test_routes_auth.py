import jwt

from config import TestConfig
from models.audit_log import AuditLog
from tests.conftest import JOHN


def _login(client, user="johndoe", password="123456"):
    return client.post("/auth/login", json={"user": user, "password": password})


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"statusCode": 200, "message": "ok"}
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_register_hides_password_hash(client):
    resp = client.post("/auth/register", json=JOHN)
    assert resp.status_code == 201

    body = resp.get_json()
    assert body["statusCode"] == 201
    assert body["data"]["username"] == "johndoe"
    assert "password" not in body["data"]
    assert "password_hash" not in body["data"]
    assert AuditLog.query.filter_by(action="REGISTER_SUCCESS").count() == 1


def test_register_conflicts(client, john):
    resp = client.post("/auth/register", json={**JOHN, "email": "other@x.com"})
    assert resp.status_code == 409
    assert resp.get_json() == {"statusCode": 409, "message": "username already exists"}

    resp = client.post("/auth/register", json={**JOHN, "username": "other"})
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "email already exists"


def test_register_validation(client):
    resp = client.post("/auth/register", json={"username": "", "email": "", "password": ""})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "username is required"


def test_login_success(client, john):
    resp = _login(client)
    assert resp.status_code == 200

    data = resp.get_json()["data"]
    claims = jwt.decode(data["accessToken"], TestConfig.ACCESS_TOKEN_SECRET, algorithms=["HS256"])
    assert claims["subscriber"] == john.id
    assert data["refreshToken"]


def test_login_failures_look_the_same(client, john):
    wrong_password = _login(client, password="nope")
    wrong_user = _login(client, user="nobody")

    assert wrong_password.status_code == wrong_user.status_code == 403
    assert wrong_password.get_json() == wrong_user.get_json() == {"statusCode": 403, "message": "invalid credentials"}
    assert AuditLog.query.filter_by(action="LOGIN_FAIL").count() == 2


def test_login_with_numeric_password_is_a_bad_request(client, john):
    known = _login(client, password=123456)
    unknown = _login(client, user="nobody", password=123456)

    assert known.status_code == unknown.status_code == 400
    assert known.get_json() == unknown.get_json() == {"statusCode": 400, "message": "invalid payload"}


def test_register_rejects_non_string_fields(client):
    resp = client.post("/auth/register", json={**JOHN, "username": 123})
    assert resp.status_code == 400
    assert resp.get_json() == {"statusCode": 400, "message": "invalid payload", "data": {"field": "username"}}


def test_me_requires_token(client):
    resp = client.get("/auth/me")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "authentication required"

    resp = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


def test_me(client, auth_headers):
    resp = client.get("/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["email"] == "john@x.com"
    assert "password_hash" not in resp.get_json()["data"]


def test_logout_deletes_current_session(client, auth_headers):
    resp = client.post("/auth/logout", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"deletedCount": 1, "acknowledged": True}

    # access token still verifies on its own; its session is simply gone
    resp = client.post("/auth/logout", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"deletedCount": 0, "acknowledged": True}


def test_refresh_flow(client, john):
    tokens = _login(client).get_json()["data"]

    resp = client.post("/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["accessToken"]

    headers = {"Authorization": f"Bearer {tokens['accessToken']}"}
    client.post("/auth/logout", headers=headers)

    resp = client.post("/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "invalid refresh token"


def test_refresh_requires_token(client):
    resp = client.post("/auth/refresh", json={})
    assert resp.status_code == 401


def test_logout_all(client, john):
    _login(client)
    headers = {"Authorization": f"Bearer {_login(client).get_json()['data']['accessToken']}"}

    resp = client.post("/auth/logout_all", headers=headers)
    assert resp.get_json()["data"]["deletedCount"] == 2


def test_update_profile(client, auth_headers):
    resp = client.patch("/users/me", json={"name": "Johnny", "password_hash": "ignored"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["name"] == "Johnny"


def test_update_profile_rejects_non_string_email(client, auth_headers):
    resp = client.patch("/users/me", json={"email": 5, "name": "Johnny"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["data"] == {"field": "email"}

    # nothing from the rejected patch was kept
    me = client.get("/auth/me", headers=auth_headers).get_json()["data"]
    assert me["email"] == "john@x.com"
    assert me["name"] == "John Doe"


def test_delete_account(client, auth_headers, services, john):
    user_id = john.id
    resp = client.delete("/users/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"deletedCount": 1, "acknowledged": True}

    # token now names a user that no longer exists
    assert client.get("/auth/me", headers=auth_headers).status_code == 401
    assert services.sessions.delete_by_subscriber(user_id).deleted_count == 0


def test_unknown_route_uses_envelope(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.get_json()["statusCode"] == 404
