from datetime import datetime
from models.db import db

class AuditLog(db.Model):
    """Append-only trail of security and booking events."""

    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)

    # both empty for anonymous events (failed login, register)
    actor_id = db.Column(db.String(32), nullable=True, index=True)
    session_id = db.Column(db.String(32), nullable=True)

    action = db.Column(db.String(80), nullable=False)  # LOGIN_FAIL, BOOKING_RETURN, ...
    entity = db.Column(db.String(40), nullable=True)
    entity_id = db.Column(db.String(32), nullable=True)

    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    details = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
