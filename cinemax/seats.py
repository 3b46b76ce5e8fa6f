import re

from .models import Booking
from .pricing import get_premium_seat_surcharge, get_room_price, round_half_up

SEAT_ID_RE = re.compile(r"^([A-Z])(\d{1,2})$")


def row_label(index):
    return chr(65 + index)


def parse_seat_id(seat_id):
    """'D7' -> ('D', 7), or None when it isn't a seat id."""
    m = SEAT_ID_RE.match(str(seat_id).strip().upper())
    if not m:
        return None
    return m.group(1), int(m.group(2))


def _seat_type_and_price(room, row, number, room_price, surcharge):
    room_type = room["type"]
    if room_type == "vip":
        return "vip", room_price
    if room_type == "premium":
        if row < 2:
            return "premium", room_price
        return "standard", room_price - surcharge
    if room_type == "basic" and 3 <= row <= 5 and 4 <= number <= 9:
        # centre block of a basic hall
        return "premium", room_price + surcharge
    return "standard", room_price


def generate_seats(room):
    """Seat grid for a room without any booking status: list of rows."""
    room_price = get_room_price(room["type"])
    surcharge = round_half_up(get_premium_seat_surcharge())
    grid = []
    for r in range(room["rows"]):
        label = row_label(r)
        row = []
        for c in range(1, room["seatsPerRow"] + 1):
            seat_type, price = _seat_type_and_price(room, r, c, room_price, surcharge)
            row.append({"id": f"{label}{c}", "row": label, "number": c, "type": seat_type, "price": price})
        grid.append(row)
    return grid


def seat_lookup(room):
    return {seat["id"]: seat for row in generate_seats(room) for seat in row}


def build_seat_map(room, occupied=()):
    occupied = set(occupied)
    grid = generate_seats(room)
    for row in grid:
        for seat in row:
            seat["status"] = "occupied" if seat["id"] in occupied else "available"
    return grid


def get_occupied_seats(showtime_id):
    """Seat ids held by pending or confirmed bookings of a showtime."""
    bookings = Booking.query.filter(Booking.showtime_id == showtime_id,
                                    Booking.status != "cancelled").all()
    occupied = set()
    for b in bookings:
        occupied.update(b.seat_ids)
    return occupied
