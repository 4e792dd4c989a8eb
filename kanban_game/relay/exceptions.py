# ABOUTME: Exception definitions for relay room errors.
# ABOUTME: Defines error types raised by RoomRegistry and translated to wire messages by the server.


class WrongPassword(Exception):
    """Raised when a join names an existing room with a different password"""

    pass
