# ABOUTME: Async WebSocket connector to the relay with linear-backoff reconnection via tenacity.
# ABOUTME: Parses inbound frames into wire messages and reports terminal failures through on_error.

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger
from pydantic import BaseModel
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake

from kanban_game.config.settings import get_settings
from kanban_game.models.messages import encode_message, parse_message
from kanban_game.sync.exceptions import ConnectionDropped

CONNECTION_LOST_MESSAGE = "Connection lost. Please refresh the page."

# Failures worth another connection attempt
RECONNECTABLE_ERRORS = (OSError, InvalidHandshake, ConnectionDropped)

Callback = Callable[..., Awaitable[None] | None]


async def _emit(callback: Callback | None, *args: Any) -> None:
    """Invoke a sync or async callback"""
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class RelayClient:
    """
    One client connection to the relay.

    Reconnection: after a failed connect or a dropped connection the client
    waits reconnect_delay x attempt seconds and tries again, up to
    max_reconnect_attempts times. A successful connect resets the count.
    When attempts run out on_error receives CONNECTION_LOST_MESSAGE and run()
    returns.

    Usage:
        >>> client = RelayClient("ws://localhost:8080", on_message=handle)
        >>> task = asyncio.create_task(client.run())
        >>> await client.send(JoinMessage(room="r1", password="pw", name="Alice"))
        >>> await client.close()
    """

    def __init__(
        self,
        url: str | None = None,
        on_message: Callback | None = None,
        on_connect: Callback | None = None,
        on_disconnect: Callback | None = None,
        on_error: Callback | None = None,
        reconnect_delay: float | None = None,
        max_reconnect_attempts: int | None = None,
    ):
        """
        Args:
            url: Relay WebSocket URL (Settings.relay_url if omitted)
            on_message: Called with each parsed WireMessage
            on_connect: Called after every successful (re)connect
            on_disconnect: Called when an established connection drops
            on_error: Called with a user-facing error string
            reconnect_delay: Base delay in seconds (Settings.reconnect_delay_seconds)
            max_reconnect_attempts: Attempts before giving up (Settings.max_reconnect_attempts)
        """
        settings = get_settings()
        self.url = url or settings.relay_url
        self.on_message = on_message
        self.on_connect = on_connect
        self.on_disconnect = on_disconnect
        self.on_error = on_error
        self.reconnect_delay = (
            reconnect_delay if reconnect_delay is not None else settings.reconnect_delay_seconds
        )
        self.max_reconnect_attempts = (
            max_reconnect_attempts
            if max_reconnect_attempts is not None
            else settings.max_reconnect_attempts
        )

        self._ws: ClientConnection | None = None
        self._closing = False
        self._attempts = 0

    @property
    def is_connected(self) -> bool:
        return self._ws is not None

    @property
    def reconnect_attempts(self) -> int:
        """Reconnect attempts made since the last successful connect"""
        return self._attempts

    # tenacity hooks: stop and wait only read the counter, before_sleep bumps it

    def _out_of_attempts(self, retry_state: RetryCallState) -> bool:
        return self._closing or self._attempts >= self.max_reconnect_attempts

    def _next_delay(self, retry_state: RetryCallState) -> float:
        return self.reconnect_delay * (self._attempts + 1)

    def _before_reconnect(self, retry_state: RetryCallState) -> None:
        self._attempts += 1
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"Relay connection unavailable ({type(error).__name__}); "
            f"reconnect attempt {self._attempts}/{self.max_reconnect_attempts} "
            f"in {self.reconnect_delay * self._attempts:.1f}s"
        )

    async def run(self) -> None:
        """Connect and keep the connection alive until close() or attempts run out"""
        self._closing = False
        self._attempts = 0
        retrying = AsyncRetrying(
            stop=self._out_of_attempts,
            wait=self._next_delay,
            retry=retry_if_exception_type(RECONNECTABLE_ERRORS),
            before_sleep=self._before_reconnect,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    await self._connect_once()
        except RECONNECTABLE_ERRORS as e:
            if self._closing:
                return
            logger.error(f"Giving up on relay {self.url}: {type(e).__name__}: {e}")
            await _emit(self.on_error, CONNECTION_LOST_MESSAGE)

    async def _connect_once(self) -> None:
        """Hold one connection open; raises ConnectionDropped if it closes unexpectedly"""
        if self._closing:
            return
        async with connect(self.url) as ws:
            self._ws = ws
            self._attempts = 0
            logger.info(f"Connected to relay {self.url}")
            try:
                await _emit(self.on_connect)
                async for raw in ws:
                    await self._dispatch(raw)
            except ConnectionClosed as e:
                logger.debug(f"Relay connection closed: {e}")
            finally:
                self._ws = None

        if self._closing:
            logger.info("Relay connection closed")
            return
        logger.warning("Relay connection dropped")
        await _emit(self.on_disconnect)
        raise ConnectionDropped(f"Connection to {self.url} dropped")

    async def _dispatch(self, raw: str | bytes) -> None:
        message = parse_message(raw)
        if message is None:
            logger.warning(f"Ignoring unparseable relay message: {raw!r:.200}")
            return
        await _emit(self.on_message, message)

    async def send(self, message: BaseModel) -> bool:
        """
        Send a wire message.

        Returns:
            True if sent; False (after reporting CONNECTION_LOST_MESSAGE via
            on_error) when there is no open connection
        """
        ws = self._ws
        if ws is None:
            logger.warning(f"Cannot send {getattr(message, 'type', 'message')}: not connected")
            await _emit(self.on_error, CONNECTION_LOST_MESSAGE)
            return False
        try:
            await ws.send(encode_message(message))
        except ConnectionClosed as e:
            logger.warning(f"Send failed, connection closed: {e}")
            await _emit(self.on_error, CONNECTION_LOST_MESSAGE)
            return False
        return True

    async def close(self) -> None:
        """Close the connection and stop reconnecting"""
        self._closing = True
        ws = self._ws
        if ws is not None:
            await ws.close()
