from flask import Blueprint

from utils.responses import app_response

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health():
    return app_response(200, message="ok")
