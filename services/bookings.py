from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError

from errors import AppMessage, ForbiddenError, NotFoundError, ValidationError
from models.booking import Booking, BookingStatus
from stores.common import Page, paginate
from stores.products import ProductStore


@dataclass(frozen=True)
class BookingListFilter:
    status: Optional[BookingStatus] = None
    page: int = 1
    limit: int = 10


class BookingService:
    """
    Booking lifecycle. At most one CONSUMING booking per (product, user):
    checked up front, and enforced by the uq_booking_consuming_once index
    for requests that race past the check.
    """

    def __init__(self, session, products: ProductStore, max_limit: int = 100):
        self.session = session
        self.products = products
        self.max_limit = max_limit

    def _consuming(self, product_id: str, user_id: str) -> Optional[Booking]:
        return (
            self.session.query(Booking)
            .filter_by(product_id=product_id, user_id=user_id, status=BookingStatus.CONSUMING.value)
            .first()
        )

    def create(self, product_id: str, user_id: str, start_date: datetime, estimated_end_date: datetime) -> Booking:
        if not self.products.find_one(product_id):
            raise NotFoundError(AppMessage.PRODUCT_NOT_FOUND)
        if estimated_end_date < start_date:
            raise ValidationError(AppMessage.INVALID_BOOKING_DATES)

        if self._consuming(product_id, user_id):
            raise ForbiddenError(AppMessage.PRODUCT_ALREADY_BOOKED)

        booking = Booking(
            product_id=product_id,
            user_id=user_id,
            status=BookingStatus.CONSUMING.value,
            start_date=start_date,
            estimated_end_date=estimated_end_date,
        )
        self.session.add(booking)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.warning("Concurrent booking of product {} by {} rejected", product_id, user_id)
            raise ForbiddenError(AppMessage.PRODUCT_ALREADY_BOOKED)

        return booking

    def my_booking_find_one(self, booking_id: str, user_id: str) -> Optional[Booking]:
        # scoped by owner: another user's id reads as not found
        return (
            self.session.query(Booking)
            .filter_by(id=booking_id, user_id=user_id)
            .first()
        )

    def my_bookings(self, booking_filter: BookingListFilter, user_id: str) -> Page:
        q = self.session.query(Booking).filter_by(user_id=user_id)
        if booking_filter.status:
            q = q.filter_by(status=BookingStatus(booking_filter.status).value)
        q = q.order_by(Booking.created_at.desc(), Booking.id)
        return paginate(q, booking_filter.page, booking_filter.limit, self.max_limit)

    def return_booking(self, product_id: str, user_id: str) -> Booking:
        """Marks the booking returned. `status` is left as it is."""
        booking = (
            self.session.query(Booking)
            .filter_by(product_id=product_id, user_id=user_id, returned=False)
            .order_by(Booking.created_at.desc())
            .first()
        )
        if not booking:
            raise NotFoundError(AppMessage.BOOKING_NOT_FOUND)

        booking.returned = True
        self.session.commit()
        return booking
