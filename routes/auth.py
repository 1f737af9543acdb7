from flask import Blueprint, g

from errors import AppMessage, AuthenticationError, ForbiddenError
from services import get_services
from utils.audit import log_event
from utils.auth_context import login_required
from utils.params import json_body
from utils.responses import app_response
from utils.serializers import serialize_user


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.post("/register")
def register():
    data = json_body()
    payload = {
        "name": data.get("name"),
        "username": data.get("username"),
        "email": data.get("email"),
        "password": data.get("password"),
    }

    user = get_services().auth.register(payload)
    log_event("REGISTER_SUCCESS", user_id=user.id, entity="user", entity_id=user.id)

    return app_response(201, message="Registered successfully", data=serialize_user(user))


@auth_bp.post("/login")
def login():
    data = json_body()
    # "user" accepts a username or an email
    identifier = data.get("user") or data.get("username") or data.get("email") or ""
    password = data.get("password") or ""

    try:
        tokens = get_services().auth.login(identifier, password)
    except ForbiddenError:
        log_event("LOGIN_FAIL", metadata={"identifier": identifier})
        raise

    claims = get_services().tokens.decode_access_token(tokens.access_token)
    log_event("LOGIN_SUCCESS", user_id=claims["subscriber"], entity="session", entity_id=claims["session_id"])
    return app_response(200, message="Login OK", data=tokens.to_dict())


@auth_bp.post("/refresh")
def refresh():
    data = json_body()
    refresh_token = data.get("refreshToken") or ""
    if not refresh_token:
        raise AuthenticationError(AppMessage.INVALID_REFRESH_TOKEN)

    tokens = get_services().auth.refresh(refresh_token)
    log_event("TOKEN_REFRESH")
    return app_response(200, data=tokens.to_dict())


@auth_bp.get("/me")
@login_required
def me():
    return app_response(200, data=serialize_user(g.user))


@auth_bp.post("/logout")
@login_required
def logout():
    result = get_services().auth.logout(g.session_id)
    log_event("LOGOUT", user_id=g.user.id, entity="session", entity_id=g.session_id)
    return app_response(200, message="Logged out", data=result.to_dict())


@auth_bp.post("/logout_all")
@login_required
def logout_all():
    result = get_services().auth.logout_all(g.user.id)
    log_event("LOGOUT_ALL", user_id=g.user.id, metadata={"revoked_sessions": result.deleted_count})
    return app_response(200, message="Logged out everywhere", data=result.to_dict())
