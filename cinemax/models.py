from datetime import datetime, timezone

from flask_login import UserMixin

from .extensions import db


def utcnow():
    # SQLite drops tzinfo on the way back, so everything is stored as naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat(timespec="seconds") if value else None


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    phone = db.Column(db.String(40))
    role = db.Column(db.String(10), nullable=False, default="user")
    email_notifications = db.Column(db.Boolean, nullable=False, default=True)
    sms_notifications = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    bookings = db.relationship("Booking", backref="user", cascade="all, delete-orphan")
    revoked_tokens = db.relationship("RevokedToken", backref="user", cascade="all, delete-orphan")

    @property
    def is_admin(self):
        return self.role == "admin"

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phone": self.phone,
            "role": self.role,
            "emailNotifications": self.email_notifications,
            "smsNotifications": self.sms_notifications,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class RevokedToken(db.Model):
    __tablename__ = "revoked_tokens"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token = db.Column(db.Text, nullable=False, index=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)


class Movie(db.Model):
    __tablename__ = "movies"

    id = db.Column(db.String(64), primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    poster = db.Column(db.String(500), default="")
    backdrop = db.Column(db.String(500), default="")
    synopsis = db.Column(db.Text, default="No synopsis available.")
    duration = db.Column(db.Integer, default=120)  # minutes
    rating = db.Column(db.Float, default=0)  # out of 10
    genre = db.Column(db.JSON, default=list)
    release_date = db.Column(db.String(10))
    director = db.Column(db.String(255), default="Unknown")
    cast = db.Column(db.JSON, default=list)
    trailer_url = db.Column(db.String(500))
    imdb_id = db.Column(db.String(20))
    is_now_showing = db.Column(db.Boolean, nullable=False, default=False)
    is_coming_soon = db.Column(db.Boolean, nullable=False, default=False)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "poster": self.poster or "",
            "backdrop": self.backdrop or "",
            "synopsis": self.synopsis,
            "duration": self.duration,
            "rating": self.rating,
            "genre": list(self.genre or []),
            "releaseDate": self.release_date,
            "director": self.director,
            "cast": list(self.cast or []),
            "trailerUrl": self.trailer_url,
            "imdbId": self.imdb_id,
            "year": self.release_date.split("-")[0] if self.release_date else None,
            "isNowShowing": self.is_now_showing,
            "isComingSoon": self.is_coming_soon,
            "isFeatured": self.is_featured,
        }


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
                        index=True)
    movie_id = db.Column(db.String(64), nullable=False)
    showtime_id = db.Column(db.String(128), nullable=False, index=True)
    room_id = db.Column(db.String(20), nullable=False)
    seats = db.Column(db.JSON, nullable=False)
    total_price = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(10), nullable=False, default="pending")
    payment_method = db.Column(db.String(20))
    transaction_id = db.Column(db.String(40))
    booking_code = db.Column(db.String(20), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def seat_ids(self):
        return [s["id"] for s in self.seats or []]


class PricingConfig(db.Model):
    __tablename__ = "pricing_config"

    id = db.Column(db.Integer, primary_key=True)
    config_key = db.Column(db.String(64), unique=True, nullable=False)
    config_value = db.Column(db.Float, nullable=False)
    description = db.Column(db.String(255))
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
