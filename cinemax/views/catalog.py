from flask import Blueprint, jsonify, request

from .. import movies as catalog
from ..auth import admin_required
from ..errors import NotFoundError, ValidationError
from ..rooms import get_room, list_rooms, room_with_price
from ..seats import build_seat_map, get_occupied_seats
from ..showtimes import generate_all_showtimes, generate_showtimes, get_showtime
from ..tmdb import fetch_and_store_movies

bp = Blueprint("catalog", __name__, url_prefix="/api")


def _flag(name):
    value = request.args.get(name)
    if value is None:
        return None
    return value.lower() in ("true", "1")


def _movie_list(movies):
    return jsonify({"success": True, "count": len(movies), "movies": [m.to_dict() for m in movies]})


@bp.get("/health")
def health():
    return jsonify({"status": "ok", "message": "Server is running"})


# Movies
@bp.get("/movies")
def list_movies():
    return _movie_list(catalog.get_all_movies())


@bp.get("/movies/filter")
def filter_movies():
    return _movie_list(catalog.get_movies_by_filter(isNowShowing=_flag("isNowShowing"),
                                                    isComingSoon=_flag("isComingSoon"),
                                                    isFeatured=_flag("isFeatured")))


@bp.get("/movies/popular")
def popular_movies():
    return _movie_list(catalog.get_popular_movies())


@bp.get("/movies/now-showing")
def now_showing():
    return _movie_list(catalog.get_movies_by_filter(isNowShowing=True))


@bp.get("/movies/coming-soon")
def coming_soon():
    return _movie_list(catalog.get_movies_by_filter(isComingSoon=True))


@bp.get("/movies/featured")
def featured():
    return _movie_list(catalog.get_movies_by_filter(isFeatured=True))


@bp.post("/movies/fetch")
@admin_required
def fetch_movies():
    append = request.args.get("append") in ("true", "1")
    results = fetch_and_store_movies(append=append)
    message = ("Movies fetched and appended successfully" if append
               else "Movies fetched and stored successfully")
    return jsonify({"success": True, "message": message, "results": results})


@bp.get("/movies/<movie_id>")
def get_movie(movie_id):
    movie = catalog.get_movie_by_id(movie_id)
    if not movie:
        raise NotFoundError("Movie not found")
    return jsonify({"success": True, "movie": movie.to_dict()})


# Rooms and showtimes
@bp.get("/rooms")
def rooms():
    return jsonify({"success": True, "rooms": list_rooms()})


@bp.get("/rooms/<room_id>")
def room_detail(room_id):
    return jsonify({"success": True, "room": room_with_price(get_room(room_id))})


@bp.get("/movies/<movie_id>/showtimes")
def movie_showtimes(movie_id):
    if not catalog.get_movie_by_id(movie_id):
        raise NotFoundError("Movie not found")
    room_id = request.args.get("roomId")
    date = request.args.get("date")
    if room_id:
        showtimes = generate_showtimes(movie_id, room_id, date)
    else:
        showtimes = generate_all_showtimes(movie_id, date)
    return jsonify({"success": True, "count": len(showtimes), "showtimes": showtimes})


@bp.get("/showtimes/<showtime_id>")
def showtime_detail(showtime_id):
    showtime = get_showtime(showtime_id)
    if not catalog.get_movie_by_id(showtime["movieId"]):
        raise NotFoundError("Movie not found")
    return jsonify({"success": True, "showtime": showtime})


@bp.get("/showtimes/<showtime_id>/seats")
def showtime_seats(showtime_id):
    showtime = get_showtime(showtime_id)
    room = get_room(showtime["roomId"])
    occupied = get_occupied_seats(showtime_id)
    if len(occupied) > room["capacity"]:
        raise ValidationError("Seat data is inconsistent")
    return jsonify({
        "success": True,
        "showtime": showtime,
        "room": room_with_price(room),
        "seats": build_seat_map(room, occupied),
        "occupiedSeats": sorted(occupied),
    })
