from datetime import date

import pytest

from cinemax.errors import CinemaxError
from cinemax.extensions import db
from cinemax.models import Movie
from cinemax.movies import save_movies
from cinemax.tmdb import convert_tmdb_movie, fetch_and_store_movies

from .conftest import auth_header

TODAY = date(2025, 6, 1)


class FakeTMDB:
    api_key = "key"
    access_token = None
    image_base_url = "https://image.tmdb.org/t/p"

    def __init__(self, lists):
        self.lists = lists
        self.detail_calls = []

    def list_movies(self, endpoint, page=1):
        return self.lists.get(endpoint, [])

    def movie_details(self, movie_id):
        self.detail_calls.append(movie_id)
        return None


def _tmdb(movie_id, title, release, vote=6.0, popularity=10):
    return {"id": movie_id, "title": title, "release_date": release, "vote_average": vote,
            "popularity": popularity, "overview": f"{title} overview", "poster_path": "/p.jpg",
            "genre_ids": [18]}


def test_convert_now_showing_and_images():
    movie = convert_tmdb_movie(_tmdb(10, "Recent", "2025-03-01", vote=7.8), today=TODAY)
    assert movie["id"] == "10"
    assert movie["isNowShowing"] is True
    assert movie["isComingSoon"] is False
    assert movie["isFeatured"] is True
    assert movie["poster"] == "https://image.tmdb.org/t/p/w500/p.jpg"
    assert movie["backdrop"] == ""
    assert movie["duration"] == 120


def test_convert_coming_soon_and_old():
    soon = convert_tmdb_movie(_tmdb(11, "Soon", "2025-09-01"), today=TODAY)
    assert soon["isComingSoon"] is True and soon["isNowShowing"] is False
    old = convert_tmdb_movie(_tmdb(12, "Old", "2020-01-01", popularity=80), today=TODAY)
    assert old["isNowShowing"] is False and old["isComingSoon"] is False
    assert old["isFeatured"] is True


def test_convert_uses_details():
    details = {
        "id": 13, "title": "Detailed", "release_date": "2025-05-20", "runtime": 142, "vote_average": 6.44,
        "genres": [{"id": 1, "name": "Action"}, {"id": 2, "name": "Thriller"}],
        "director": "Jane Doe", "cast": ["A", "B", "C", "D"], "imdb_id": "tt0000013",
        "backdrop_path": "/b.jpg",
    }
    movie = convert_tmdb_movie({"id": 13}, details, today=TODAY)
    assert movie["genre"] == ["Action", "Thriller"]
    assert movie["duration"] == 142
    assert movie["rating"] == 6.4
    assert movie["director"] == "Jane Doe"
    assert movie["backdrop"] == "https://image.tmdb.org/t/p/w1280/b.jpg"
    assert movie["imdbId"] == "tt0000013"


def test_fetch_dedupes_and_replaces(app):
    fake = FakeTMDB({
        "popular": [_tmdb(1, "One", "2025-01-01"), _tmdb(2, "Two", "2025-02-01")],
        "now_playing": [_tmdb(2, "Two", "2025-02-01")],
        "upcoming": [_tmdb(3, "Three", "2030-01-01")],
    })
    with app.app_context():
        save_movies([{"id": "old", "title": "Old Catalog"}])
        results = fetch_and_store_movies(client=fake)
        assert results["success"] == 3 and results["failed"] == 0
        assert fake.detail_calls == [1, 2, 3]
        assert sorted(m.id for m in Movie.query.all()) == ["1", "2", "3"]


def test_fetch_append_skips_known_ids(app):
    fake = FakeTMDB({"popular": [_tmdb(1, "One", "2025-01-01"), _tmdb(4, "Four", "2025-01-01")]})
    with app.app_context():
        save_movies([{"id": "1", "title": "Kept Title"}])
        results = fetch_and_store_movies(append=True, client=fake)
        assert results["success"] == 1
        assert fake.detail_calls == [4]
        assert db.session.get(Movie, "1").title == "Kept Title"
        assert Movie.query.count() == 2


def test_fetch_without_credentials(app):
    fake = FakeTMDB({})
    fake.api_key = None
    with app.app_context():
        with pytest.raises(CinemaxError) as exc:
            fetch_and_store_movies(client=fake)
        assert exc.value.status_code == 503


def test_fetch_endpoint_is_admin_only(client, user_token):
    assert client.post("/api/movies/fetch", headers=auth_header(user_token)).status_code == 403


def test_fetch_endpoint(client, admin_token, monkeypatch):
    calls = []

    def fake_fetch(append=False):
        calls.append(append)
        return {"success": 2, "failed": 0, "movies": []}

    monkeypatch.setattr("cinemax.views.catalog.fetch_and_store_movies", fake_fetch)
    resp = client.post("/api/movies/fetch?append=true", headers=auth_header(admin_token))
    assert resp.status_code == 200
    assert resp.get_json()["results"]["success"] == 2
    assert calls == [True]
