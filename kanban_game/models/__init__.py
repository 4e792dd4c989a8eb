"""Data models for the Kanban Flow Game"""

from .game_state import (
    MAX_ROUNDS,
    SESSION_COLLABORATIVE,
    SESSION_INDIVIDUAL,
    GameState,
    HistoryEntry,
    Player,
)
from .messages import (
    ErrorMessage,
    JoinedMessage,
    JoinMessage,
    PlayersMessage,
    StateMessage,
    UpdateMessage,
    WireMessage,
    encode_message,
    parse_message,
)
from .ticket import (
    BLOCKER_THRESHOLD,
    IN_PROGRESS_STATUSES,
    MAX_PHASE_POINTS,
    Ticket,
    TicketPoints,
    TicketStatus,
    TicketType,
)

__all__ = [
    # Ticket models
    "TicketType",
    "TicketStatus",
    "TicketPoints",
    "Ticket",
    "MAX_PHASE_POINTS",
    "BLOCKER_THRESHOLD",
    "IN_PROGRESS_STATUSES",
    # Game state models
    "Player",
    "GameState",
    "HistoryEntry",
    "MAX_ROUNDS",
    "SESSION_INDIVIDUAL",
    "SESSION_COLLABORATIVE",
    # Wire messages
    "JoinMessage",
    "JoinedMessage",
    "ErrorMessage",
    "UpdateMessage",
    "StateMessage",
    "PlayersMessage",
    "WireMessage",
    "parse_message",
    "encode_message",
]
