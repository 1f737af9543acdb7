from datetime import datetime, timezone

from flask import current_app, request

from errors import AppMessage, ValidationError


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(AppMessage.INVALID_PAYLOAD)
    return data


def parse_iso(value, field: str) -> datetime:
    # Expect ISO format like "2026-01-20T18:00:00"; stored naive, in UTC
    if not isinstance(value, str) or not value:
        raise ValidationError(AppMessage.INVALID_DATE, context={"field": field})
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(AppMessage.INVALID_DATE, context={"field": field})
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def page_args() -> tuple:
    """Reads ?page=&limit=; unparsable values fall back to the defaults."""
    default_limit = current_app.config.get("PAGINATION_DEFAULT_LIMIT", 10)
    page = request.args.get("page", default=1, type=int)
    limit = request.args.get("limit", default=default_limit, type=int)
    return page, limit
