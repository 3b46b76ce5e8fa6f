from flask import Blueprint, jsonify
from flask_login import current_user

from .. import admin, movies
from ..auth import admin_required
from ..bookings import serialize_booking
from ..errors import NotFoundError, ValidationError
from . import json_body

bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@bp.get("/stats")
@admin_required
def stats():
    return jsonify({"success": True, "stats": admin.get_dashboard_stats()})


# Users
@bp.get("/users")
@admin_required
def list_users():
    users = admin.get_all_users()
    return jsonify({"success": True, "count": len(users), "users": [u.to_dict() for u in users]})


@bp.get("/users/<int:user_id>")
@admin_required
def get_user(user_id):
    user = admin.get_user_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return jsonify({"success": True, "user": user.to_dict()})


@bp.put("/users/<int:user_id>/role")
@admin_required
def set_role(user_id):
    user = admin.update_user_role(user_id, json_body().get("role"))
    return jsonify({"success": True, "message": "User role updated successfully", "user": user.to_dict()})


@bp.delete("/users/<int:user_id>")
@admin_required
def delete_user(user_id):
    admin.delete_user(user_id, acting_user_id=current_user.id)
    return jsonify({"success": True, "message": "User deleted successfully"})


# Movies
@bp.post("/movies")
@admin_required
def create_movie():
    movie = movies.create_movie(json_body())
    return jsonify({"success": True, "message": "Movie created successfully", "movie": movie.to_dict()}), 201


@bp.put("/movies/<movie_id>")
@admin_required
def update_movie(movie_id):
    movie = movies.update_movie(movie_id, json_body())
    return jsonify({"success": True, "message": "Movie updated successfully", "movie": movie.to_dict()})


@bp.delete("/movies/<movie_id>")
@admin_required
def delete_movie(movie_id):
    movies.delete_movie(movie_id)
    return jsonify({"success": True, "message": "Movie deleted successfully"})


# Bookings
@bp.get("/bookings")
@admin_required
def list_bookings():
    rows = admin.get_all_bookings()
    return jsonify({"success": True, "count": len(rows), "bookings": [serialize_booking(b) for b in rows]})


@bp.put("/bookings/<int:booking_id>/status")
@admin_required
def set_booking_status(booking_id):
    booking = admin.update_booking_status_admin(booking_id, json_body().get("status"))
    return jsonify({"success": True, "message": "Booking status updated successfully",
                    "booking": serialize_booking(booking)})


@bp.delete("/bookings/<int:booking_id>")
@admin_required
def delete_booking(booking_id):
    admin.delete_booking(booking_id)
    return jsonify({"success": True, "message": "Booking deleted successfully"})


# Pricing
@bp.get("/pricing")
@admin_required
def get_pricing():
    return jsonify({"success": True, "pricing": admin.get_pricing_config()})


@bp.put("/pricing")
@admin_required
def update_pricing():
    data = json_body().get("pricing")
    if not isinstance(data, dict) or not data:
        raise ValidationError("pricing must be an object of key/value pairs")
    result = admin.update_multiple_pricing_config(data)
    return jsonify({"success": True, "message": "Pricing updated", **result,
                    "pricing": admin.get_pricing_config()})


@bp.put("/pricing/<key>")
@admin_required
def update_pricing_key(key):
    data = json_body()
    if "value" not in data:
        raise ValidationError("value is required")
    item = admin.update_pricing_config(key, data["value"])
    return jsonify({"success": True, "message": "Pricing updated successfully", "key": key, "value": item})
