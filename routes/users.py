from flask import Blueprint, g

from services import get_services
from stores.users import PATCHABLE_FIELDS, UserFilter
from utils.audit import log_event
from utils.auth_context import login_required
from utils.params import json_body
from utils.responses import app_response
from utils.serializers import serialize_user

users_bp = Blueprint("users", __name__, url_prefix="/users")


@users_bp.patch("/me")
@login_required
def update_me():
    data = json_body()
    patch = {k: data[k] for k in PATCHABLE_FIELDS if k in data}

    user = get_services().users.update(UserFilter(id=g.user.id), patch)
    log_event("PROFILE_UPDATE", user_id=user.id, metadata={"fields": sorted(patch)})
    return app_response(200, message="Profile updated", data=serialize_user(user))


@users_bp.delete("/me")
@login_required
def delete_me():
    services = get_services()
    user_id = g.user.id

    services.auth.logout_all(user_id)
    result = services.users.delete(UserFilter(id=user_id))
    log_event("ACCOUNT_DELETE", user_id=user_id, entity="user", entity_id=user_id)
    return app_response(200, message="Account deleted", data=result.to_dict())
