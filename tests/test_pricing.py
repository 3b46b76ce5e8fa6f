import pytest

from cinemax import pricing
from cinemax.errors import NotFoundError, ValidationError
from cinemax.rooms import get_room
from cinemax.seats import build_seat_map, parse_seat_id, seat_lookup


def test_defaults_are_seeded(app):
    with app.app_context():
        config = pricing.get_all_pricing()
        assert config["base_price"]["value"] == 250
        assert config["room_vip_multiplier"]["value"] == 2.5
        assert config["service_fee"]["value"] == 50
        assert pricing.seed_pricing() == 0


@pytest.mark.parametrize("room_type,price", [("basic", 250), ("3d", 325), ("premium", 450), ("vip", 625),
                                             ("imax", 250)])
def test_room_price(app, room_type, price):
    with app.app_context():
        assert pricing.get_room_price(room_type) == price


def test_update_pricing_changes_room_price(app):
    with app.app_context():
        pricing.update_pricing("base_price", 300)
        assert pricing.get_base_price() == 300
        assert pricing.get_room_price("3d") == 390


@pytest.mark.parametrize("value", [-1, "abc", None, True])
def test_update_pricing_rejects_bad_values(app, value):
    with app.app_context():
        with pytest.raises(ValidationError):
            pricing.update_pricing("base_price", value)


def test_update_pricing_unknown_key(app):
    with app.app_context():
        with pytest.raises(NotFoundError):
            pricing.update_pricing("popcorn_price", 10)


def test_update_multiple_partial_success(app):
    with app.app_context():
        result = pricing.update_multiple_pricing({"service_fee": 40, "base_price": -5, "nope": 1})
        assert result["results"] == {"service_fee": 40}
        assert len(result["errors"]) == 2
        assert pricing.get_service_fee() == 40
        assert pricing.get_base_price() == 250


def test_parse_seat_id():
    assert parse_seat_id("D7") == ("D", 7)
    assert parse_seat_id("d12") == ("D", 12)
    assert parse_seat_id("7D") is None
    assert parse_seat_id("") is None


def test_basic_room_grid(app):
    with app.app_context():
        room = get_room("room-1")
        seats = seat_lookup(room)
        assert len(seats) == 120
        assert seats["A1"]["type"] == "standard" and seats["A1"]["price"] == 250
        assert seats["D4"]["type"] == "premium" and seats["D4"]["price"] == 300
        assert seats["F9"]["type"] == "premium"
        assert seats["F10"]["type"] == "standard"
        assert seats["G5"]["type"] == "standard"
        assert "J12" in seats and "K1" not in seats and "A13" not in seats


def test_premium_room_rows(app):
    with app.app_context():
        seats = seat_lookup(get_room("room-3"))
        assert seats["A1"]["type"] == "premium" and seats["A1"]["price"] == 450
        assert seats["B10"]["type"] == "premium"
        assert seats["C1"]["type"] == "standard" and seats["C1"]["price"] == 400


def test_vip_and_3d_rooms(app):
    with app.app_context():
        vip = seat_lookup(get_room("room-4"))
        assert len(vip) == 24
        assert {s["type"] for s in vip.values()} == {"vip"}
        assert {s["price"] for s in vip.values()} == {625}
        three_d = seat_lookup(get_room("room-2"))
        assert {s["price"] for s in three_d.values()} == {325}


def test_seat_map_marks_occupied(app):
    with app.app_context():
        grid = build_seat_map(get_room("room-4"), {"A1", "B2"})
        assert len(grid) == 4 and len(grid[0]) == 6
        status = {s["id"]: s["status"] for row in grid for s in row}
        assert status["A1"] == "occupied"
        assert status["B2"] == "occupied"
        assert status["A2"] == "available"


def test_rooms_endpoint(client):
    resp = client.get("/api/rooms")
    assert resp.status_code == 200
    rooms = resp.get_json()["rooms"]
    assert [r["id"] for r in rooms] == ["room-1", "room-2", "room-3", "room-4"]
    assert [r["price"] for r in rooms] == [250, 325, 450, 625]
    assert rooms[3]["capacity"] == 24


def test_room_detail_not_found(client):
    resp = client.get("/api/rooms/room-9")
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Room not found"


def test_room_price_rounds_half_up(app):
    with app.app_context():
        pricing.update_pricing("base_price", 5)
        assert pricing.get_room_price("vip") == 13
        assert pricing.get_room_price("basic") == 5
        assert pricing.round_half_up(2.5) == 3
        assert pricing.round_half_up(324.5) == 325


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_update_pricing_rejects_non_finite(app, value):
    with app.app_context():
        with pytest.raises(ValidationError):
            pricing.update_pricing("base_price", value)
        assert pricing.get_base_price() == 250


def test_nan_pricing_over_http(client, admin_token):
    resp = client.put("/api/admin/pricing/base_price", data='{"value": NaN}',
                      content_type="application/json", headers={"Authorization": f"Bearer {admin_token}"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid pricing value. Must be a positive number."
