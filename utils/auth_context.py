from functools import wraps

from flask import g, jsonify, request

from errors import AppMessage, AuthenticationError
from stores.users import UserFilter
from services import get_services

BEARER_PREFIX = "bearer "


def _bearer_token():
    header = request.headers.get("Authorization") or ""
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX):].strip() or None


def load_current_user():
    """
    Verifies the bearer access token (signature and expiry only, no session
    lookup) and loads the user it names. Anything invalid leaves g.user unset.
    """
    g.user = None
    g.subscriber = None
    g.session_id = None

    token = _bearer_token()
    if not token:
        return

    services = get_services()
    try:
        claims = services.tokens.decode_access_token(token)
    except AuthenticationError:
        return

    user = services.users.find(UserFilter(id=claims["subscriber"]))
    if user is None:
        return

    g.user = user
    g.subscriber = claims["subscriber"]
    g.session_id = claims["session_id"]


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "user", None) is None:
            return jsonify(statusCode=401, message=str(AppMessage.AUTHENTICATION_REQUIRED)), 401
        return fn(*args, **kwargs)
    return wrapper
