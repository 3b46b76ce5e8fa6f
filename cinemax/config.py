import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev_secret")
    JWT_SECRET = os.environ.get("JWT_SECRET") or SECRET_KEY
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRES_DAYS = int(os.environ.get("JWT_EXPIRES_DAYS", 7))

    # None means "cinemax.db inside the instance folder", resolved in create_app
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    TMDB_API_KEY = os.environ.get("TMDB_API_KEY")
    TMDB_ACCESS_TOKEN = os.environ.get("TMDB_ACCESS_TOKEN")
    TMDB_BASE_URL = os.environ.get("TMDB_BASE_URL", "https://api.themoviedb.org/3")
    TMDB_IMAGE_BASE_URL = os.environ.get("TMDB_IMAGE_BASE_URL", "https://image.tmdb.org/t/p")
    TMDB_REQUEST_DELAY = float(os.environ.get("TMDB_REQUEST_DELAY", 0.25))
    TMDB_TIMEOUT = 10

    BOOKING_CODE_PREFIX = "CMX"
    MAX_SEATS_PER_BOOKING = 10
    SHOWTIME_SLOTS = ("10:00", "13:00", "16:00", "19:00", "22:00")
    SHOWTIME_DURATION_MINUTES = 150
    CURRENCY = os.environ.get("CURRENCY", "PHP")

    PENDING_BOOKING_TTL = int(os.environ.get("PENDING_BOOKING_TTL", 900))  # seconds
    BOOKING_SWEEP_INTERVAL = int(os.environ.get("BOOKING_SWEEP_INTERVAL", 30))
    BOOKING_SWEEPER_ENABLED = _env_bool("BOOKING_SWEEPER_ENABLED", True)

    PAYMENT_DELAY_SECONDS = float(os.environ.get("PAYMENT_DELAY_SECONDS", 0))


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test_secret"
    JWT_SECRET = "test_secret"
    BOOKING_SWEEPER_ENABLED = False
    PAYMENT_DELAY_SECONDS = 0
    TMDB_REQUEST_DELAY = 0
    LOG_LEVEL = "WARNING"
