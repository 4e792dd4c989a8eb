# ABOUTME: Exception definitions for game engine errors.
# ABOUTME: Rejected player actions are silent no-ops; these cover programming and wire-data errors only.


class InvalidCapacity(ValueError):
    """Raised when a die capacity outside 1-6 is offered for allocation"""

    pass


class InvalidSnapshot(Exception):
    """Raised when a received state snapshot does not describe a valid game"""

    pass
