from flask import request

from ..errors import ValidationError


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register_blueprints(app):
    from .admin import bp as admin_bp
    from .auth import bp as auth_bp
    from .bookings import bp as bookings_bp
    from .catalog import bp as catalog_bp

    for bp in (auth_bp, catalog_bp, bookings_bp, admin_bp):
        app.register_blueprint(bp)
