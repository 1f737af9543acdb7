from flask import Blueprint, g, request

from errors import AppMessage, ForbiddenError, NotFoundError, ValidationError
from models.booking import BookingStatus
from services import BookingListFilter, get_services
from utils.audit import log_event
from utils.auth_context import login_required
from utils.params import json_body, page_args, parse_iso
from utils.responses import app_response
from utils.serializers import serialize_booking, serialize_page

booking_bp = Blueprint("booking", __name__, url_prefix="/bookings")


def _product_id(data: dict) -> str:
    product_id = data.get("product")
    if not isinstance(product_id, str) or not product_id.strip():
        raise ValidationError(AppMessage.INVALID_PAYLOAD, context={"field": "product"})
    return product_id.strip()


# ---------- book a product (one CONSUMING booking per product) ----------
@booking_bp.post("")
@login_required
def create_booking():
    data = json_body()
    product_id = _product_id(data)
    start_date = parse_iso(data.get("start_date"), "start_date")
    estimated_end_date = parse_iso(data.get("estimated_end_date"), "estimated_end_date")

    try:
        booking = get_services().bookings.create(product_id, g.user.id, start_date, estimated_end_date)
    except ForbiddenError:
        log_event("BOOKING_FAIL_ALREADY_BOOKED", user_id=g.user.id, entity="product", entity_id=product_id)
        raise

    log_event("BOOKING_CREATE", user_id=g.user.id, entity="booking", entity_id=booking.id, metadata={"product": product_id})
    return app_response(201, message="Booking created", data=serialize_booking(booking))


# ---------- my bookings ----------
@booking_bp.get("/me")
@login_required
def my_bookings():
    page, limit = page_args()
    status = request.args.get("status")  # CONSUMING/RETURNED
    if status and status not in BookingStatus.__members__:
        raise ValidationError(AppMessage.INVALID_BOOKING_STATUS)

    booking_filter = BookingListFilter(
        status=BookingStatus(status) if status else None,
        page=page,
        limit=limit,
    )
    result = get_services().bookings.my_bookings(booking_filter, g.user.id)
    return app_response(200, data=serialize_page(result, serialize_booking))


@booking_bp.get("/me/<booking_id>")
@login_required
def my_booking(booking_id: str):
    booking = get_services().bookings.my_booking_find_one(booking_id, g.user.id)
    if not booking:
        raise NotFoundError(AppMessage.BOOKING_NOT_FOUND)
    return app_response(200, data=serialize_booking(booking, with_product=True))


# ---------- return ----------
@booking_bp.post("/return")
@login_required
def return_booking():
    data = json_body()
    product_id = _product_id(data)

    booking = get_services().bookings.return_booking(product_id, g.user.id)
    log_event("BOOKING_RETURN", user_id=g.user.id, entity="booking", entity_id=booking.id)
    return app_response(200, message="Booking returned", data=serialize_booking(booking))
