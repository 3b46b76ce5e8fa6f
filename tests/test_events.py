from cinemax.extensions import socketio

from .conftest import auth_header, book, showtime_id


def _events(sio, name):
    return [e["args"][0] for e in sio.get_received() if e["name"] == name]


def test_join_showtime_sends_seat_map(app, client, movie, user_token):
    book(client, user_token, ["B2", "A1"])
    sio = socketio.test_client(app, flask_test_client=client)
    sio.emit("join_showtime", {"showtimeId": showtime_id()})
    seat_maps = _events(sio, "seat_map")
    assert seat_maps == [{"showtimeId": showtime_id(), "occupied": ["A1", "B2"]}]
    sio.disconnect()


def test_booking_and_cancel_broadcast(app, client, movie, user_token):
    sio = socketio.test_client(app, flask_test_client=client)
    sio.emit("join_showtime", {"showtimeId": showtime_id()})
    sio.get_received()

    booking = book(client, user_token, ["C1", "C2"]).get_json()["booking"]
    assert _events(sio, "seats_booked") == [{"showtimeId": showtime_id(), "seats": ["C1", "C2"]}]

    client.put(f"/api/bookings/{booking['id']}/cancel", headers=auth_header(user_token))
    assert _events(sio, "seats_released") == [{"showtimeId": showtime_id(), "seats": ["C1", "C2"]}]
    sio.disconnect()


def test_other_showtimes_are_not_notified(app, client, movie, user_token):
    sio = socketio.test_client(app, flask_test_client=client)
    sio.emit("join_showtime", {"showtimeId": showtime_id(slot=2)})
    sio.get_received()
    book(client, user_token, ["C1"])
    assert _events(sio, "seats_booked") == []

    sio.emit("leave_showtime", {"showtimeId": showtime_id(slot=2)})
    book(client, user_token, ["C1"], slot=2)
    assert _events(sio, "seats_booked") == []
    sio.disconnect()
