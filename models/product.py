from datetime import datetime
from models.db import db
from models.user import new_id

class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(120), nullable=False)
    code = db.Column(db.String(64), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)

    price = db.Column(db.Integer, nullable=False, default=0)  # store smallest unit
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
