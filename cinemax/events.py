from flask_socketio import emit, join_room, leave_room

from .extensions import socketio
from .seats import get_occupied_seats


def showtime_room(showtime_id):
    return f"showtime_{showtime_id}"


def broadcast_seats_booked(showtime_id, seats):
    socketio.emit("seats_booked", {"showtimeId": showtime_id, "seats": list(seats)},
                  room=showtime_room(showtime_id))


def broadcast_seats_released(showtime_id, seats):
    socketio.emit("seats_released", {"showtimeId": showtime_id, "seats": list(seats)},
                  room=showtime_room(showtime_id))


@socketio.on("join_showtime")
def on_join(data):
    showtime_id = (data or {}).get("showtimeId")
    if not showtime_id:
        return
    join_room(showtime_room(showtime_id))
    emit("seat_map", {"showtimeId": showtime_id, "occupied": sorted(get_occupied_seats(showtime_id))})


@socketio.on("leave_showtime")
def on_leave(data):
    showtime_id = (data or {}).get("showtimeId")
    if showtime_id:
        leave_room(showtime_room(showtime_id))

