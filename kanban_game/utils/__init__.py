# ABOUTME: Utility module exports for dice rolling and structured logging.
# ABOUTME: Provides dice.py (d6 and the injectable random source) and logging.py (loguru config).

from kanban_game.utils.dice import create_random_source, roll_d6, validate_die_value
from kanban_game.utils.logging import log_game_event, setup_logging

__all__ = [
    "create_random_source",
    "roll_d6",
    "validate_die_value",
    "setup_logging",
    "log_game_event",
]
