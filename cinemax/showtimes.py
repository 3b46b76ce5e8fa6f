import re
from datetime import date as date_cls

from flask import current_app

from .errors import ValidationError
from .pricing import get_room_price
from .rooms import VIEWING_ROOMS, get_room
from .seats import get_occupied_seats

# <movieId>-<roomId>-<YYYY-MM-DD>-<slot>; movie ids may contain dashes themselves
SHOWTIME_ID_RE = re.compile(r"^(?P<movie>.+)-(?P<room>room-\d+)-(?P<date>\d{4}-\d{2}-\d{2})-(?P<slot>\d+)$")


def calculate_end_time(start_time, duration_minutes):
    hours, minutes = (int(x) for x in start_time.split(":"))
    total = hours * 60 + minutes + duration_minutes
    return f"{(total // 60) % 24:02d}:{total % 60:02d}"


def parse_date(value):
    if not value:
        return date_cls.today().isoformat()
    try:
        return date_cls.fromisoformat(value).isoformat()
    except ValueError:
        raise ValidationError("date must be YYYY-MM-DD")


def parse_showtime_id(showtime_id):
    m = SHOWTIME_ID_RE.match(showtime_id) if isinstance(showtime_id, str) else None
    if not m:
        raise ValidationError("Invalid showtime id")
    slot = int(m.group("slot"))
    if slot >= len(current_app.config["SHOWTIME_SLOTS"]):
        raise ValidationError("Invalid showtime id")
    return m.group("movie"), m.group("room"), parse_date(m.group("date")), slot


def build_showtime(movie_id, room, date, slot):
    start = current_app.config["SHOWTIME_SLOTS"][slot]
    showtime_id = f"{movie_id}-{room['id']}-{date}-{slot}"
    return {
        "id": showtime_id,
        "movieId": movie_id,
        "roomId": room["id"],
        "startTime": start,
        "endTime": calculate_end_time(start, current_app.config["SHOWTIME_DURATION_MINUTES"]),
        "date": date,
        "price": get_room_price(room["type"]),
        "availableSeats": max(room["capacity"] - len(get_occupied_seats(showtime_id)), 0),
    }


def generate_showtimes(movie_id, room_id, date=None):
    room = get_room(room_id)
    date = parse_date(date)
    return [build_showtime(movie_id, room, date, slot)
            for slot in range(len(current_app.config["SHOWTIME_SLOTS"]))]


def generate_all_showtimes(movie_id, date=None):
    showtimes = []
    for room in VIEWING_ROOMS:
        showtimes.extend(generate_showtimes(movie_id, room["id"], date))
    return showtimes


def get_showtime(showtime_id):
    movie_id, room_id, date, slot = parse_showtime_id(showtime_id)
    return build_showtime(movie_id, get_room(room_id), date, slot)
