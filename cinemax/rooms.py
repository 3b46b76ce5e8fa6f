from .errors import NotFoundError
from .pricing import get_room_multipliers, get_room_price

VIEWING_ROOMS = [
    {
        "id": "room-1",
        "name": "Cinema Hall 1",
        "type": "basic",
        "capacity": 120,
        "rows": 10,
        "seatsPerRow": 12,
        "priceMultiplier": 1.0,
        "amenities": ["Standard Screen", "Dolby Surround", "Air Conditioned"],
        "description": "Our classic cinema experience with crystal-clear visuals and immersive sound.",
    },
    {
        "id": "room-2",
        "name": "3D Experience",
        "type": "3d",
        "capacity": 80,
        "rows": 8,
        "seatsPerRow": 10,
        "priceMultiplier": 1.3,
        "amenities": ["3D Glasses Included", "RealD 3D", "Dolby Atmos", "Reclining Seats"],
        "description": "Step into the action with state-of-the-art 3D projection and enhanced audio.",
    },
    {
        "id": "room-3",
        "name": "ULTRAMAX Premium",
        "type": "premium",
        "capacity": 60,
        "rows": 6,
        "seatsPerRow": 10,
        "priceMultiplier": 1.8,
        "amenities": ["Giant Screen", "Dolby Atmos", "Laser Projection", "Premium Recliners", "Extra Legroom"],
        "description": "Our largest screen with premium comfort.",
    },
    {
        "id": "room-4",
        "name": "VIP Lounge",
        "type": "vip",
        "capacity": 24,
        "rows": 4,
        "seatsPerRow": 6,
        "priceMultiplier": 2.5,
        "amenities": ["Private Lounge", "In-Seat Service", "Complimentary Snacks", "Blankets",
                      "Butler Service", "Exclusive Bar Access"],
        "description": "An exclusive lounge with personalized service.",
    },
]

_ROOMS_BY_ID = {r["id"]: r for r in VIEWING_ROOMS}


def find_room(room_id):
    return _ROOMS_BY_ID.get(room_id)


def get_room(room_id):
    room = find_room(room_id)
    if not room:
        raise NotFoundError("Room not found")
    return room


def room_with_price(room):
    # multipliers above are defaults; live values come from pricing_config
    data = dict(room, amenities=list(room["amenities"]))
    data["priceMultiplier"] = get_room_multipliers().get(room["type"], 1.0)
    data["price"] = get_room_price(room["type"])
    return data


def list_rooms():
    return [room_with_price(r) for r in VIEWING_ROOMS]
