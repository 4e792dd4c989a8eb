# ABOUTME: Exception definitions for the relay client connector.
# ABOUTME: Used internally to drive reconnection; users see failures through the on_error callback.


class ConnectionDropped(Exception):
    """Raised when an established relay connection closes without close() being called"""

    pass
