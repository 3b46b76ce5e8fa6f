from datetime import timedelta

from flask import Blueprint, current_app, g, jsonify
from flask_login import current_user, login_required

from .. import auth
from ..models import utcnow
from . import json_body

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/register")
def register():
    data = json_body()
    user, token = auth.register_user(data.get("email"), data.get("password"), data.get("firstName"),
                                     data.get("lastName"), data.get("phone"))
    return jsonify({"success": True, "message": "User registered successfully",
                    "user": user.to_dict(), "token": token}), 201


@bp.post("/login")
def login():
    data = json_body()
    if not data.get("email") or not data.get("password"):
        return jsonify({"success": False, "message": "Email and password are required"}), 400
    user, token = auth.login_user(data["email"], data["password"])
    return jsonify({"success": True, "message": "Login successful", "user": user.to_dict(), "token": token})


@bp.post("/logout")
@login_required
def logout():
    expires_at = utcnow() + timedelta(days=current_app.config["JWT_EXPIRES_DAYS"])
    auth.blacklist_token(g.auth_token, expires_at)
    current_app.logger.info("User %s logged out", current_user.id)
    return jsonify({"success": True, "message": "Logout successful"})


@bp.get("/me")
@login_required
def me():
    return jsonify({"success": True, "user": current_user.to_dict()})


@bp.put("/profile")
@login_required
def update_profile():
    user = auth.update_user(current_user.id, json_body())
    return jsonify({"success": True, "message": "Profile updated successfully", "user": user.to_dict()})
