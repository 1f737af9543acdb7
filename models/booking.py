import enum
from datetime import datetime
from models.db import db
from models.user import new_id


class BookingStatus(str, enum.Enum):
    CONSUMING = "CONSUMING"
    RETURNED = "RETURNED"


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.String(32), primary_key=True, default=new_id)

    product_id = db.Column(db.String(32), db.ForeignKey("products.id"), nullable=False, index=True)
    user_id = db.Column(db.String(32), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=BookingStatus.CONSUMING.value)
    start_date = db.Column(db.DateTime, nullable=False)
    estimated_end_date = db.Column(db.DateTime, nullable=False)

    # tracked apart from status: returning does not change status
    returned = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    product = db.relationship("Product", lazy="joined")

    __table_args__ = (
        # Hard business-rule: one CONSUMING booking per (product, user)
        db.Index(
            "uq_booking_consuming_once",
            "product_id",
            "user_id",
            unique=True,
            sqlite_where=db.text("status = 'CONSUMING'"),
            postgresql_where=db.text("status = 'CONSUMING'"),
        ),
    )
