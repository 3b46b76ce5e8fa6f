import pytest

from cinemax import create_app
from cinemax.config import TestingConfig
from cinemax.extensions import db
from cinemax.models import User

SHOW_DATE = "2030-01-15"


@pytest.fixture
def app(tmp_path):
    app = create_app(TestingConfig, SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'test.db'}")
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, email="alice@example.com", password="secret123", **extra):
    body = {"email": email, "password": password, **extra}
    resp = client.post("/api/auth/register", json=body)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.fixture
def user_token(client):
    return register(client)["token"]


@pytest.fixture
def admin_token(app, client):
    data = register(client, email="admin@example.com", password="adminpass")
    with app.app_context():
        user = db.session.get(User, data["user"]["id"])
        user.role = "admin"
        db.session.commit()
    return data["token"]


@pytest.fixture
def movie(client, admin_token):
    resp = client.post("/api/admin/movies", headers=auth_header(admin_token), json={
        "id": "1",
        "title": "Dune: Part Two",
        "rating": 8.8,
        "genre": ["Sci-Fi", "Adventure"],
        "releaseDate": "2024-03-01",
        "isNowShowing": True,
        "isFeatured": True,
    })
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["movie"]


def showtime_id(movie_id="1", room_id="room-1", date=SHOW_DATE, slot=0):
    return f"{movie_id}-{room_id}-{date}-{slot}"


def book(client, token, seats, room_id="room-1", slot=0, **extra):
    body = {
        "movieId": "1",
        "showtimeId": showtime_id(room_id=room_id, slot=slot),
        "roomId": room_id,
        "seats": seats,
        **extra,
    }
    return client.post("/api/bookings", headers=auth_header(token), json=body)
