from flask import g, has_request_context, request
from loguru import logger

from models import db
from models.audit_log import AuditLog


def _client_ip():
    return request.headers.get("X-Forwarded-For", request.remote_addr)


def log_event(action: str, user_id=None, entity=None, entity_id=None, metadata=None):
    """
    Writes one AuditLog row. Never pass secrets, tokens or passwords in metadata.
    Outside a request (CLI) the ip/user agent columns stay empty.
    """
    ip = user_agent = session_id = None
    if has_request_context():
        ip = _client_ip()
        user_agent = (request.headers.get("User-Agent") or "")[:255] or None
        session_id = getattr(g, "session_id", None)

    row = AuditLog(
        actor_id=user_id,
        session_id=session_id,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        ip=ip,
        user_agent=user_agent,
        details=metadata or None,
    )
    db.session.add(row)
    db.session.commit()
    logger.debug("audit {} user={} {}={}", action, user_id, entity, entity_id)
