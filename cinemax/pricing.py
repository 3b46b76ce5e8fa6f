import math
from decimal import ROUND_HALF_UP, Decimal

from flask import current_app

from .errors import NotFoundError, ValidationError
from .extensions import db
from .models import PricingConfig

DEFAULT_BASE_PRICE = 250
DEFAULT_MULTIPLIERS = {"basic": 1.0, "3d": 1.3, "premium": 1.8, "vip": 2.5}

DEFAULT_PRICING = [
    ("base_price", 250, "Base ticket price for a standard seat"),
    ("room_basic_multiplier", 1.0, "Price multiplier for basic rooms"),
    ("room_3d_multiplier", 1.3, "Price multiplier for 3D rooms"),
    ("room_premium_multiplier", 1.8, "Price multiplier for premium rooms"),
    ("room_vip_multiplier", 2.5, "Price multiplier for VIP rooms"),
    ("premium_seat_surcharge", 50, "Difference between premium and standard seats in a room"),
    ("service_fee", 50, "Flat service fee added to every booking"),
]


def seed_pricing():
    """Insert any missing default keys. Existing values are left alone."""
    existing = {key for (key,) in db.session.query(PricingConfig.config_key).all()}
    added = 0
    for key, value, description in DEFAULT_PRICING:
        if key not in existing:
            db.session.add(PricingConfig(config_key=key, config_value=value, description=description))
            added += 1
    if added:
        db.session.commit()
    return added


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def round_half_up(value):
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def get_all_pricing():
    rows = PricingConfig.query.order_by(PricingConfig.config_key).all()
    return {r.config_key: {"value": r.config_value, "description": r.description, "id": r.id} for r in rows}


def get_pricing(key):
    row = PricingConfig.query.filter_by(config_key=key).first()
    return row.config_value if row else None


def update_pricing(key, value):
    if not _is_number(value) or value < 0:
        raise ValidationError("Invalid pricing value. Must be a positive number.")
    row = PricingConfig.query.filter_by(config_key=key).first()
    if not row:
        raise NotFoundError(f'Pricing key "{key}" not found')
    row.config_value = float(value)
    db.session.commit()
    current_app.logger.info("Pricing %s set to %s", key, value)
    return row.config_value


def update_multiple_pricing(pricing_data):
    results, errors = {}, []
    for key, value in pricing_data.items():
        if not _is_number(value) or value < 0:
            errors.append(f"Invalid value for {key}: must be a positive number")
            continue
        try:
            update_pricing(key, value)
        except NotFoundError as e:
            errors.append(f"Error updating {key}: {e.message}")
            continue
        results[key] = value
    return {"results": results, "errors": errors}


def _value_or(key, default):
    value = get_pricing(key)
    return default if value is None else value


def get_base_price():
    return _value_or("base_price", DEFAULT_BASE_PRICE)


def get_room_multipliers():
    return {room_type: _value_or(f"room_{room_type}_multiplier", default)
            for room_type, default in DEFAULT_MULTIPLIERS.items()}


def get_room_price(room_type):
    multiplier = get_room_multipliers().get(room_type, 1.0)
    return round_half_up(get_base_price() * multiplier)


def get_service_fee():
    return _value_or("service_fee", 50)


def get_premium_seat_surcharge():
    return _value_or("premium_seat_surcharge", 50)
