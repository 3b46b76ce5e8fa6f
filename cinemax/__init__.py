import os
import sqlite3
import threading

from flask import Flask
from sqlalchemy import event
from sqlalchemy.engine import Engine

from .config import Config
from .extensions import cors, db, login_manager, socketio


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_app(config_object=None, **overrides):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)
    app.config.update(overrides)
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        os.makedirs(app.instance_path, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(app.instance_path, 'cinemax.db')}"
    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    login_manager.init_app(app)
    socketio.init_app(app, cors_allowed_origins=app.config["CORS_ORIGINS"], async_mode="threading")
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    # loaders and socket handlers register themselves on import
    from . import auth, events  # noqa: F401
    from .cli import register_commands
    from .errors import register_error_handlers
    from .pricing import seed_pricing
    from .views import register_blueprints

    register_error_handlers(app)
    register_blueprints(app)
    register_commands(app)

    with app.app_context():
        db.create_all()
        seed_pricing()

    if app.config["BOOKING_SWEEPER_ENABLED"]:
        from .bookings import booking_sweeper
        threading.Thread(target=booking_sweeper, args=(app,), daemon=True).start()

    app.logger.info("Cinemax app ready (db=%s)", app.config["SQLALCHEMY_DATABASE_URI"])
    return app
