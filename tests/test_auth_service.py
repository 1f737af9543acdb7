import jwt
import pytest

from config import TestConfig
from errors import AppMessage, AuthenticationError, ConflictError, ForbiddenError, ValidationError
from models.session import Session
from tests.conftest import JOHN


def _claims(token):
    return jwt.decode(token, TestConfig.ACCESS_TOKEN_SECRET, algorithms=["HS256"])


def test_register_returns_user_with_hashed_password(services):
    user = services.auth.register(dict(JOHN))
    assert user.email == JOHN["email"]
    assert user.name == JOHN["name"]
    assert user.username == JOHN["username"]
    assert user.password_hash != JOHN["password"]


def test_register_duplicate_username(services, john):
    with pytest.raises(ConflictError) as exc:
        services.auth.register({**JOHN, "email": "xxx1@xx.com"})
    assert exc.value.message == AppMessage.USERNAME_ALREADY_EXISTS


def test_register_duplicate_email(services, john):
    with pytest.raises(ConflictError) as exc:
        services.auth.register({**JOHN, "username": "xxx1"})
    assert exc.value.message == AppMessage.EMAIL_ALREADY_EXISTS


def test_register_username_conflict_wins_over_email(services, john):
    with pytest.raises(ConflictError) as exc:
        services.auth.register(dict(JOHN))
    assert exc.value.message == AppMessage.USERNAME_ALREADY_EXISTS


def test_login_returns_valid_token_pair(services, john):
    pair = services.auth.login("johndoe", "123456")
    assert pair.access_token and pair.refresh_token

    claims = _claims(pair.access_token)
    assert claims["subscriber"] == john.id

    session = services.sessions.find_by_id(claims["session_id"])
    refresh_claims = jwt.decode(pair.refresh_token, session.rt_secret, algorithms=["HS256"])
    assert refresh_claims["subscriber"] == john.id


def test_login_with_email(services, john):
    pair = services.auth.login("john@x.com", "123456")
    assert _claims(pair.access_token)["subscriber"] == john.id


def test_bad_credentials_are_indistinguishable(services, john):
    with pytest.raises(ForbiddenError) as wrong_password:
        services.auth.login("johndoe", "wrong---password")
    with pytest.raises(ForbiddenError) as wrong_user:
        services.auth.login("wrong-username", "123456")

    assert wrong_password.value.message == AppMessage.INVALID_CREDENTIALS
    assert str(wrong_password.value) == str(wrong_user.value)
    assert wrong_password.value.message == wrong_user.value.message


@pytest.mark.parametrize("identifier, password", [
    ("johndoe", 123456),
    ("nobody", 123456),
    (123, "123456"),
    ("johndoe", None),
])
def test_login_rejects_non_string_input(services, john, identifier, password):
    with pytest.raises(ValidationError) as exc:
        services.auth.login(identifier, password)
    assert exc.value.message == AppMessage.INVALID_PAYLOAD
    assert Session.query.count() == 0


@pytest.mark.parametrize("field, value", [("username", 123), ("email", 5), ("name", ["John"])])
def test_register_rejects_non_string_fields(services, field, value):
    with pytest.raises(ValidationError) as exc:
        services.auth.register({**JOHN, field: value})
    assert exc.value.message == AppMessage.INVALID_PAYLOAD
    assert exc.value.context == {"field": field}


def test_each_login_opens_a_new_session(services, john):
    first = _claims(services.auth.login("johndoe", "123456").access_token)
    second = _claims(services.auth.login("johndoe", "123456").access_token)

    assert first["session_id"] != second["session_id"]
    assert Session.query.filter_by(subscriber=john.id).count() == 2
    secrets = {s.rt_secret for s in Session.query.filter_by(subscriber=john.id)}
    assert len(secrets) == 2


def test_register_login_logout_scenario(services):
    services.auth.register({"username": "johndoe", "email": "john@x.com", "password": "123456"})

    pair = services.auth.login("johndoe", "123456")
    assert pair.access_token is not None
    assert pair.refresh_token is not None

    session_id = _claims(pair.access_token)["session_id"]
    result = services.auth.logout(session_id)
    assert result.to_dict() == {"deletedCount": 1, "acknowledged": True}


def test_logout_unknown_session(services):
    result = services.auth.logout("62cd25d19278aeb09e0eab9f")
    assert result.acknowledged is True
    assert result.deleted_count == 0


def test_logout_only_revokes_that_session(services, john):
    keep = _claims(services.auth.login("johndoe", "123456").access_token)["session_id"]
    drop = _claims(services.auth.login("johndoe", "123456").access_token)["session_id"]

    services.auth.logout(drop)
    assert services.sessions.find_by_id(keep) is not None
    assert services.sessions.find_by_id(drop) is None


def test_logout_all(services, john):
    services.auth.login("johndoe", "123456")
    services.auth.login("johndoe", "123456")
    assert services.auth.logout_all(john.id).deleted_count == 2


def test_refresh_reissues_for_same_session(services, john):
    pair = services.auth.login("johndoe", "123456")
    session_id = _claims(pair.access_token)["session_id"]

    refreshed = services.auth.refresh(pair.refresh_token)
    claims = _claims(refreshed.access_token)
    assert claims["subscriber"] == john.id
    assert claims["session_id"] == session_id


def test_refresh_fails_after_logout(services, john):
    pair = services.auth.login("johndoe", "123456")
    services.auth.logout(_claims(pair.access_token)["session_id"])

    with pytest.raises(AuthenticationError) as exc:
        services.auth.refresh(pair.refresh_token)
    assert exc.value.message == AppMessage.INVALID_REFRESH_TOKEN


def test_refresh_rejects_token_for_another_session(services, john):
    first = services.auth.login("johndoe", "123456")
    second = services.auth.login("johndoe", "123456")
    second_session = _claims(second.access_token)["session_id"]

    # first session's token relabelled as the second session
    header_swapped = jwt.encode(
        jwt.decode(first.refresh_token, options={"verify_signature": False}),
        "wrong-secret-0123456789abcdefghijklmn",
        algorithm="HS256",
        headers={"kid": second_session},
    )
    with pytest.raises(AuthenticationError):
        services.auth.refresh(header_swapped)
