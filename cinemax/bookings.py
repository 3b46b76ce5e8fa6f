import random
from datetime import timedelta

from flask import current_app

from .errors import ConflictError, NotFoundError, ValidationError
from .events import broadcast_seats_booked, broadcast_seats_released
from .extensions import db, socketio
from .models import Booking, Movie, utcnow
from .payments import PAYMENT_METHODS, process_payment
from .pricing import get_service_fee
from .rooms import get_room
from .seats import get_occupied_seats, parse_seat_id, seat_lookup
from .showtimes import calculate_end_time, parse_showtime_id

BOOKING_STATUSES = ("pending", "confirmed", "cancelled")


def generate_booking_code():
    prefix = current_app.config["BOOKING_CODE_PREFIX"]
    return f"{prefix}-{utcnow().year}-{random.randint(0, 99999):05d}"


def _unique_booking_code(attempts=10):
    for _ in range(attempts):
        code = generate_booking_code()
        if not Booking.query.filter_by(booking_code=code).first():
            return code
    raise ConflictError("Could not allocate a booking code, try again")


def _showtime_info(showtime_id):
    try:
        _, _, date, slot = parse_showtime_id(showtime_id)
    except ValidationError:
        return None
    start = current_app.config["SHOWTIME_SLOTS"][slot]
    return {"date": date, "startTime": start,
            "endTime": calculate_end_time(start, current_app.config["SHOWTIME_DURATION_MINUTES"])}


def serialize_booking(b):
    return {
        "id": str(b.id),
        "userId": b.user_id,
        "movieId": b.movie_id,
        "showtimeId": b.showtime_id,
        "roomId": b.room_id,
        "showtime": _showtime_info(b.showtime_id),
        "seats": b.seats,
        "totalPrice": b.total_price,
        "status": b.status,
        "paymentMethod": b.payment_method,
        "transactionId": b.transaction_id,
        "bookingCode": b.booking_code,
        "createdAt": b.created_at.isoformat(timespec="seconds"),
        "updatedAt": b.updated_at.isoformat(timespec="seconds"),
    }


def _seat_ids(seats):
    ids = []
    for item in seats:
        raw = item.get("id") if isinstance(item, dict) else item
        if not isinstance(raw, str) or not parse_seat_id(raw):
            raise ValidationError(f"Invalid seat: {raw!r}")
        ids.append(raw.strip().upper())
    return ids


def create_booking(user_id, data):
    movie_id = data.get("movieId")
    showtime_id = data.get("showtimeId")
    room_id = data.get("roomId")
    seats = data.get("seats")
    if (not movie_id or not isinstance(showtime_id, str) or not showtime_id or not isinstance(room_id, str)
            or not room_id or not isinstance(seats, list) or not seats):
        raise ValidationError("Missing required booking information")
    movie_id = str(movie_id)

    st_movie, st_room, _, _ = parse_showtime_id(showtime_id)
    if st_movie != movie_id or st_room != room_id:
        raise ValidationError("Showtime does not match the selected movie and room")
    if not db.session.get(Movie, movie_id):
        raise NotFoundError("Movie not found")
    room = get_room(room_id)

    seat_ids = _seat_ids(seats)
    if len(seat_ids) > current_app.config["MAX_SEATS_PER_BOOKING"]:
        raise ValidationError(f"A booking is limited to {current_app.config['MAX_SEATS_PER_BOOKING']} seats")
    if len(set(seat_ids)) != len(seat_ids):
        raise ValidationError("Duplicate seats in booking")
    lookup = seat_lookup(room)
    for s in seat_ids:
        if s not in lookup:
            raise ValidationError(f"Seat {s} does not exist in {room['name']}")
    taken = get_occupied_seats(showtime_id).intersection(seat_ids)
    if taken:
        raise ConflictError(f"Seats already taken: {', '.join(sorted(taken))}")

    booked_seats = [dict(lookup[s], status="occupied") for s in seat_ids]
    total = sum(s["price"] for s in booked_seats) + get_service_fee()

    requested = data.get("status")
    if requested is not None and requested not in ("pending", "confirmed"):
        raise ValidationError("Invalid booking status")
    method = data.get("paymentMethod")
    if method is not None and method not in PAYMENT_METHODS:
        raise ValidationError(f"Unsupported payment method: {method}")

    booking = Booking(user_id=user_id, movie_id=movie_id, showtime_id=showtime_id, room_id=room_id,
                      seats=booked_seats, total_price=total, status="pending", payment_method=method,
                      booking_code=_unique_booking_code())
    if method and requested != "pending":
        payment = process_payment(method, total)
        booking.status = "confirmed"
        booking.transaction_id = payment.transaction_id

    db.session.add(booking)
    db.session.commit()
    current_app.logger.info("Booking %s created by user %s (%s, %d seats, %s)",
                            booking.booking_code, user_id, showtime_id, len(seat_ids), booking.status)
    broadcast_seats_booked(booking.showtime_id, booking.seat_ids)
    return booking


def get_booking_by_id(booking_id):
    return db.session.get(Booking, booking_id)


def get_user_bookings(user_id):
    return Booking.query.filter_by(user_id=user_id).order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def update_booking_status(booking_id, status):
    booking = get_booking_by_id(booking_id)
    if not booking:
        return None
    previous = booking.status
    reactivated = previous == "cancelled" and status != "cancelled"
    if reactivated:
        taken = get_occupied_seats(booking.showtime_id).intersection(booking.seat_ids)
        if taken:
            raise ConflictError(f"Seats already taken: {', '.join(sorted(taken))}")
    booking.status = status
    db.session.commit()
    if status == "cancelled" and previous != "cancelled":
        broadcast_seats_released(booking.showtime_id, booking.seat_ids)
    elif reactivated:
        broadcast_seats_booked(booking.showtime_id, booking.seat_ids)
    return booking


def cancel_booking(booking_id, user_id):
    booking = get_booking_by_id(booking_id)
    if not booking or booking.user_id != user_id:
        raise ValidationError("Booking not found or unauthorized")
    booking = update_booking_status(booking_id, "cancelled")
    current_app.logger.info("Booking %s cancelled by user %s", booking.booking_code, user_id)
    return booking


def pay_booking(booking_id, user_id, method):
    booking = get_booking_by_id(booking_id)
    if not booking or booking.user_id != user_id:
        raise NotFoundError("Booking not found")
    if booking.status != "pending":
        raise ConflictError(f"Booking is already {booking.status}")
    payment = process_payment(method, booking.total_price)
    booking.status = "confirmed"
    booking.payment_method = method
    booking.transaction_id = payment.transaction_id
    db.session.commit()
    current_app.logger.info("Booking %s paid (%s)", booking.booking_code, payment.transaction_id)
    return booking, payment


def expire_pending_bookings(ttl_seconds):
    cutoff = utcnow() - timedelta(seconds=ttl_seconds)
    expired = Booking.query.filter(Booking.status == "pending", Booking.created_at <= cutoff).all()
    for b in expired:
        b.status = "cancelled"
    if expired:
        db.session.commit()
        for b in expired:
            broadcast_seats_released(b.showtime_id, b.seat_ids)
        current_app.logger.info("Expired %d unpaid bookings", len(expired))
    return expired


def booking_sweeper(app):
    """Background loop: cancel pending bookings whose payment window has lapsed."""
    while True:
        socketio.sleep(app.config["BOOKING_SWEEP_INTERVAL"])
        with app.app_context():
            try:
                expire_pending_bookings(app.config["PENDING_BOOKING_TTL"])
            except Exception:
                db.session.rollback()
                app.logger.exception("Booking sweep failed")
