from flask import current_app
from sqlalchemy import func

from . import pricing
from .bookings import BOOKING_STATUSES, get_booking_by_id, update_booking_status
from .errors import ForbiddenError, NotFoundError, ValidationError
from .events import broadcast_seats_released
from .extensions import db
from .models import Booking, Movie, User

ROLES = ("user", "admin")


def is_admin(user_id):
    user = db.session.get(User, user_id)
    return bool(user and user.is_admin)


def get_user_by_id(user_id):
    return db.session.get(User, user_id)


def _require_user(user_id):
    user = get_user_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def set_user_as_admin(user_id):
    return update_user_role(user_id, "admin")


def get_all_users():
    return User.query.order_by(User.created_at.desc(), User.id.desc()).all()


def update_user_role(user_id, role):
    if role not in ROLES:
        raise ValidationError('Invalid role. Must be "user" or "admin"')
    user = _require_user(user_id)
    user.role = role
    db.session.commit()
    current_app.logger.info("User %s role set to %s", user_id, role)
    return user


def delete_user(user_id, acting_user_id=None):
    user = _require_user(user_id)
    if acting_user_id is not None and user.id == acting_user_id:
        raise ForbiddenError("You cannot delete your own account")
    released = [(b.showtime_id, b.seat_ids) for b in user.bookings if b.status != "cancelled"]
    db.session.delete(user)
    db.session.commit()
    for showtime_id, seats in released:
        broadcast_seats_released(showtime_id, seats)
    current_app.logger.info("User %s deleted", user_id)


def get_all_bookings():
    return Booking.query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def update_booking_status_admin(booking_id, status):
    if status not in BOOKING_STATUSES:
        raise ValidationError("Invalid status. Must be pending, confirmed, or cancelled")
    booking = update_booking_status(booking_id, status)
    if not booking:
        raise NotFoundError("Booking not found")
    current_app.logger.info("Booking %s status set to %s by admin", booking.booking_code, status)
    return booking


def delete_booking(booking_id):
    booking = get_booking_by_id(booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    was_active = booking.status != "cancelled"
    showtime_id, seats, code = booking.showtime_id, booking.seat_ids, booking.booking_code
    db.session.delete(booking)
    db.session.commit()
    if was_active:
        broadcast_seats_released(showtime_id, seats)
    current_app.logger.info("Booking %s deleted", code)


def get_pricing_config():
    return pricing.get_all_pricing()


def update_pricing_config(key, value):
    return pricing.update_pricing(key, value)


def update_multiple_pricing_config(pricing_data):
    return pricing.update_multiple_pricing(pricing_data)


def _count(model, *criteria):
    return db.session.query(func.count(model.id)).filter(*criteria).scalar()


def get_dashboard_stats():
    total_users = _count(User)
    admins = _count(User, User.role == "admin")
    revenue = db.session.query(func.sum(Booking.total_price)).filter(Booking.status == "confirmed").scalar()
    return {
        "users": {"total": total_users, "admins": admins, "regular": total_users - admins},
        "bookings": {
            "total": _count(Booking),
            "confirmed": _count(Booking, Booking.status == "confirmed"),
            "pending": _count(Booking, Booking.status == "pending"),
            "cancelled": _count(Booking, Booking.status == "cancelled"),
        },
        "revenue": {"total": revenue or 0, "currency": current_app.config["CURRENCY"]},
        "movies": {
            "total": _count(Movie),
            "nowShowing": _count(Movie, Movie.is_now_showing.is_(True)),
            "comingSoon": _count(Movie, Movie.is_coming_soon.is_(True)),
        },
    }
