from .db import db
from .user import User
from .audit_log import AuditLog
from .session import Session
from .product import Product
from .booking import Booking, BookingStatus
