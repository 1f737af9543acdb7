from datetime import datetime
from models.db import db
from models.user import new_id

class Session(db.Model):
    __tablename__ = "sessions"

    id = db.Column(db.String(32), primary_key=True, default=new_id)

    # owning user id; several sessions per user are allowed
    subscriber = db.Column(db.String(32), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # signs this session's refresh tokens, never shared with another session
    rt_secret = db.Column(db.String(128), unique=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
