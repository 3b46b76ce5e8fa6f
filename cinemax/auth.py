import uuid
from datetime import timedelta
from functools import wraps

import jwt
from flask import current_app, g, request
from flask_login import current_user, login_required
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import AuthError, ForbiddenError, ValidationError, error_response
from .extensions import db, login_manager
from .models import RevokedToken, User, utcnow

PROFILE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "phone": "phone",
    "emailNotifications": "email_notifications",
    "smsNotifications": "sms_notifications",
}


def hash_password(password):
    return generate_password_hash(password)


def verify_password(password, password_hash):
    return check_password_hash(password_hash, password)


def generate_token(user_id):
    now = utcnow()
    payload = {
        "userId": user_id,
        "iat": now,
        "exp": now + timedelta(days=current_app.config["JWT_EXPIRES_DAYS"]),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, current_app.config["JWT_SECRET"],
                      algorithm=current_app.config["JWT_ALGORITHM"])


def verify_token(token):
    """Decoded claims, or None for a bad, tampered or expired token."""
    try:
        return jwt.decode(token, current_app.config["JWT_SECRET"],
                          algorithms=[current_app.config["JWT_ALGORITHM"]])
    except jwt.PyJWTError:
        return None


def normalize_email(email):
    return (email or "").strip().lower()


def register_user(email, password, first_name=None, last_name=None, phone=None):
    email = normalize_email(email)
    if not email or not password:
        raise ValidationError("Email and password are required")
    if User.query.filter_by(email=email).first():
        raise ValidationError("User with this email already exists")

    user = User(email=email, password_hash=hash_password(password),
                first_name=first_name or None, last_name=last_name or None, phone=phone or None)
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("Registered user %s (id=%s)", user.email, user.id)
    return user, generate_token(user.id)


def login_user(email, password):
    user = User.query.filter_by(email=normalize_email(email)).first()
    if not user or not verify_password(password or "", user.password_hash):
        current_app.logger.warning("Failed login for %s", email)
        raise AuthError("Invalid email or password")
    current_app.logger.info("User %s logged in", user.id)
    return user, generate_token(user.id)


def get_user_by_id(user_id):
    return db.session.get(User, user_id)


def update_user(user_id, updates):
    user = get_user_by_id(user_id)
    if not user:
        raise AuthError("User not found")
    changed = False
    for key, attr in PROFILE_FIELDS.items():
        if key in (updates or {}) and updates[key] is not None:
            value = updates[key]
            if attr.endswith("_notifications"):
                value = bool(value)
            setattr(user, attr, value)
            changed = True
    if not changed:
        raise ValidationError("No valid fields to update")
    db.session.commit()
    return user


def blacklist_token(token, expires_at):
    claims = verify_token(token)
    if not claims:
        return False
    db.session.add(RevokedToken(user_id=claims["userId"], token=token, expires_at=expires_at))
    db.session.commit()
    return True


def is_token_blacklisted(token):
    return db.session.query(RevokedToken.id).filter(
        RevokedToken.token == token, RevokedToken.expires_at > utcnow()
    ).first() is not None


def bearer_token():
    header = request.headers.get("Authorization", "")
    parts = header.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1].strip():
        return parts[1].strip()
    return None


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.request_loader
def load_user_from_request(req):
    token = bearer_token()
    if not token:
        g.auth_error = "Access token required"
        return None
    if is_token_blacklisted(token):
        g.auth_error = "Token has been invalidated"
        return None
    claims = verify_token(token)
    if not claims:
        g.auth_error = "Invalid or expired token"
        return None
    user = db.session.get(User, claims.get("userId"))
    if not user:
        g.auth_error = "Invalid or expired token"
        return None
    g.auth_token = token
    return user


@login_manager.unauthorized_handler
def unauthorized():
    return error_response(g.get("auth_error", "Access token required"), 401)


def admin_required(f):
    @wraps(f)
    @login_required
    def decorated(*args, **kwargs):
        if not current_user.is_admin:
            raise ForbiddenError("Admin access required")
        return f(*args, **kwargs)
    return decorated
