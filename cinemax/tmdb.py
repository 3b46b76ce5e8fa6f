"""Catalog import from The Movie Database (TMDB) v3 API."""
import time
from datetime import date

import requests
from flask import current_app

from .errors import CinemaxError
from .movies import get_all_movies, save_movies

LIST_ENDPOINTS = ("popular", "now_playing", "upcoming", "top_rated")


class TMDBClient:
    def __init__(self, api_key=None, access_token=None, base_url=None, image_base_url=None, timeout=None):
        cfg = current_app.config
        self.api_key = api_key or cfg.get("TMDB_API_KEY")
        self.access_token = access_token or cfg.get("TMDB_ACCESS_TOKEN")
        self.base_url = (base_url or cfg["TMDB_BASE_URL"]).rstrip("/")
        self.image_base_url = (image_base_url or cfg["TMDB_IMAGE_BASE_URL"]).rstrip("/")
        self.timeout = timeout or cfg.get("TMDB_TIMEOUT", 10)
        self.session = requests.Session()
        self.session.headers["Accept"] = "application/json"
        if self.access_token:
            self.session.headers["Authorization"] = f"Bearer {self.access_token}"

    def get(self, path, **params):
        if self.api_key:
            params["api_key"] = self.api_key
        response = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def list_movies(self, endpoint, page=1):
        try:
            return self.get(f"/movie/{endpoint}", page=page, language="en-US").get("results", [])
        except requests.RequestException as e:
            current_app.logger.error("TMDB %s failed: %s", endpoint, e)
            return []

    def best_images(self, movie_id):
        try:
            images = self.get(f"/movie/{movie_id}/images", include_image_language="en,null")
        except requests.RequestException as e:
            current_app.logger.warning("No images for TMDB movie %s: %s", movie_id, e)
            return None, None

        def best(items):
            if not items:
                return None
            top = max(items, key=lambda i: (i.get("vote_average") or 0, i.get("vote_count") or 0))
            return top.get("file_path")

        return best(images.get("posters")), best(images.get("backdrops"))

    def movie_details(self, movie_id):
        try:
            movie = self.get(f"/movie/{movie_id}", append_to_response="credits")
        except requests.RequestException as e:
            current_app.logger.error("TMDB details for %s failed: %s", movie_id, e)
            return None
        credits = movie.get("credits") or {}
        director = next((p.get("name") for p in credits.get("crew", []) if p.get("job") == "Director"), None)
        cast = [a.get("name") for a in credits.get("cast", [])[:4]]
        poster, backdrop = self.best_images(movie_id)
        movie["director"] = director or "Unknown"
        movie["cast"] = cast or ["Unknown"]
        movie["poster_path"] = poster or movie.get("poster_path")
        movie["backdrop_path"] = backdrop or movie.get("backdrop_path")
        return movie


def _months_ago(today, months):
    month = today.month - months
    year = today.year
    while month <= 0:
        month += 12
        year -= 1
    # clamp to the last valid day (e.g. Aug 31 -> Feb 28)
    for day in (today.day, 30, 29, 28):
        try:
            return today.replace(year=year, month=month, day=day)
        except ValueError:
            continue


def convert_tmdb_movie(tmdb_movie, details=None, image_base_url="https://image.tmdb.org/t/p", today=None):
    movie = details or tmdb_movie
    today = today or date.today()
    release_str = movie.get("release_date") or movie.get("first_air_date")
    release = None
    if release_str:
        try:
            release = date.fromisoformat(release_str)
        except ValueError:
            release = None

    is_now_showing = bool(release and _months_ago(today, 6) <= release <= today)
    is_coming_soon = bool(release and release > today)
    vote = movie.get("vote_average") or 0
    is_featured = vote >= 7.5 or (movie.get("popularity") or 0) > 50

    genres = movie.get("genres")
    if isinstance(genres, list):
        genre = [g.get("name") for g in genres if g.get("name")]
    else:
        genre = [] if movie.get("genre_ids") else ["Drama"]

    cast = movie.get("cast")
    cast = [a.get("name") if isinstance(a, dict) else a for a in cast[:4]] if isinstance(cast, list) else ["Unknown"]

    return {
        "id": str(movie["id"]),
        "title": movie.get("title") or movie.get("name"),
        "poster": f"{image_base_url}/w500{movie['poster_path']}" if movie.get("poster_path") else "",
        "backdrop": f"{image_base_url}/w1280{movie['backdrop_path']}" if movie.get("backdrop_path") else "",
        "synopsis": movie.get("overview") or "No synopsis available.",
        "duration": movie.get("runtime") or 120,
        "rating": round(float(vote), 1),
        "genre": genre,
        "releaseDate": release_str or today.isoformat(),
        "director": movie.get("director") or "Unknown",
        "cast": cast,
        "imdbId": movie.get("imdb_id"),
        "isNowShowing": is_now_showing,
        "isComingSoon": is_coming_soon,
        "isFeatured": is_featured,
    }


def fetch_and_store_movies(append=False, client=None):
    client = client or TMDBClient()
    if not client.api_key and not client.access_token:
        raise CinemaxError("TMDB credentials are not configured", 503)
    log = current_app.logger
    delay = current_app.config.get("TMDB_REQUEST_DELAY", 0)

    existing_ids = {m.id for m in get_all_movies()} if append else set()
    seen, candidates = set(), []
    for endpoint in LIST_ENDPOINTS:
        for movie in client.list_movies(endpoint):
            if movie.get("id") is not None and movie["id"] not in seen:
                seen.add(movie["id"])
                candidates.append(movie)
    log.info("Fetched %d unique movies from TMDB", len(candidates))

    results = {"success": 0, "failed": 0, "movies": []}
    for i, tmdb_movie in enumerate(candidates):
        if str(tmdb_movie["id"]) in existing_ids:
            continue
        try:
            details = client.movie_details(tmdb_movie["id"])
            results["movies"].append(convert_tmdb_movie(tmdb_movie, details, client.image_base_url))
            results["success"] += 1
        except (KeyError, TypeError, ValueError) as e:
            results["failed"] += 1
            log.error("Could not convert TMDB movie %s: %s", tmdb_movie.get("id"), e)
        # TMDB allows roughly 40 requests per 10 seconds
        if delay and i < len(candidates) - 1:
            time.sleep(delay)

    save_movies(results["movies"], append=append)
    log.info("TMDB import finished: %d ok, %d failed", results["success"], results["failed"])
    return results
