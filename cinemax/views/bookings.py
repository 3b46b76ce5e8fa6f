from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from .. import bookings
from ..bookings import serialize_booking
from ..errors import ForbiddenError, NotFoundError, ValidationError
from . import json_body

bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


@bp.post("")
@login_required
def create():
    booking = bookings.create_booking(current_user.id, json_body())
    return jsonify({"success": True, "message": "Booking created successfully",
                    "booking": serialize_booking(booking)}), 201


@bp.get("")
@login_required
def list_bookings():
    rows = bookings.get_user_bookings(current_user.id)
    return jsonify({"success": True, "count": len(rows), "bookings": [serialize_booking(b) for b in rows]})


@bp.get("/<int:booking_id>")
@login_required
def get_booking(booking_id):
    booking = bookings.get_booking_by_id(booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.user_id != current_user.id and not current_user.is_admin:
        raise ForbiddenError("Unauthorized access to this booking")
    return jsonify({"success": True, "booking": serialize_booking(booking)})


@bp.put("/<int:booking_id>/cancel")
@login_required
def cancel(booking_id):
    booking = bookings.cancel_booking(booking_id, current_user.id)
    return jsonify({"success": True, "message": "Booking cancelled successfully",
                    "booking": serialize_booking(booking)})


@bp.post("/<int:booking_id>/pay")
@login_required
def pay(booking_id):
    method = json_body().get("paymentMethod")
    if not method:
        raise ValidationError("paymentMethod is required")
    booking, payment = bookings.pay_booking(booking_id, current_user.id, method)
    return jsonify({"success": True, "message": "Payment successful",
                    "booking": serialize_booking(booking), "payment": payment.to_dict()})
