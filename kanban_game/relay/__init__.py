# ABOUTME: Relay server package: in-memory rooms and the FastAPI WebSocket endpoint.
# ABOUTME: Exposes RoomRegistry, RelayServer and create_app.

from kanban_game.relay.exceptions import WrongPassword
from kanban_game.relay.rooms import Room, RoomRegistry
from kanban_game.relay.server import WRONG_PASSWORD_MESSAGE, RelayServer, create_app

__all__ = [
    "Room",
    "RoomRegistry",
    "RelayServer",
    "create_app",
    "WrongPassword",
    "WRONG_PASSWORD_MESSAGE",
]
