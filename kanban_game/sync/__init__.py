# ABOUTME: Client-side synchronization: relay connector with reconnection and the multiplayer session.
# ABOUTME: Exposes RelayClient, MultiplayerSession and the user-facing connection-lost message.

from kanban_game.sync.client import CONNECTION_LOST_MESSAGE, RelayClient
from kanban_game.sync.exceptions import ConnectionDropped
from kanban_game.sync.session import MultiplayerSession

__all__ = [
    "RelayClient",
    "MultiplayerSession",
    "CONNECTION_LOST_MESSAGE",
    "ConnectionDropped",
]
