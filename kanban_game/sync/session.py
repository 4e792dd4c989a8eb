# ABOUTME: Multiplayer session binding a GameEngine to a relay room over a RelayClient.
# ABOUTME: Joins on every (re)connect, replaces local state from inbound snapshots and pushes updates.

import asyncio

from loguru import logger

from kanban_game.engine.exceptions import InvalidSnapshot
from kanban_game.engine.game import GameEngine
from kanban_game.models.messages import (
    ErrorMessage,
    JoinedMessage,
    JoinMessage,
    PlayersMessage,
    StateMessage,
    UpdateMessage,
    WireMessage,
)
from kanban_game.sync.client import RelayClient


class MultiplayerSession:
    """
    Keeps one engine in step with a relay room.

    Sync is whole-state last-write-wins: every inbound snapshot replaces the
    engine's state, and push() sends the full local state to everyone.
    """

    def __init__(
        self,
        engine: GameEngine,
        room: str,
        password: str,
        name: str,
        url: str | None = None,
        reconnect_delay: float | None = None,
        max_reconnect_attempts: int | None = None,
    ):
        self.engine = engine
        self.room = room
        self.password = password
        self.name = name

        self.player_count = 0
        self.last_error: str | None = None
        self.joined = asyncio.Event()

        self.client = RelayClient(
            url=url,
            on_message=self._on_message,
            on_connect=self._on_connect,
            on_disconnect=self._on_disconnect,
            on_error=self._on_error,
            reconnect_delay=reconnect_delay,
            max_reconnect_attempts=max_reconnect_attempts,
        )

    async def _on_connect(self) -> None:
        self.joined.clear()
        await self.client.send(JoinMessage(room=self.room, password=self.password, name=self.name))

    def _on_disconnect(self) -> None:
        self.joined.clear()

    def _on_error(self, message: str) -> None:
        self.last_error = message

    def _apply_snapshot(self, snapshot: dict) -> None:
        try:
            self.engine.load_snapshot(snapshot)
        except InvalidSnapshot as e:
            logger.bind(room=self.room).warning(f"Ignoring invalid snapshot from relay: {e}")
            self.last_error = str(e)

    def _on_message(self, message: WireMessage) -> None:
        if isinstance(message, JoinedMessage):
            logger.bind(room=self.room).info(f"Joined room as {self.name}")
            self.last_error = None
            if message.state is not None:
                self._apply_snapshot(message.state)
            self.joined.set()
        elif isinstance(message, StateMessage):
            self._apply_snapshot(message.state)
        elif isinstance(message, PlayersMessage):
            self.player_count = message.count
        elif isinstance(message, ErrorMessage):
            logger.bind(room=self.room).warning(f"Relay error: {message.message}")
            self.last_error = message.message

    async def push(self) -> bool:
        """Send the engine's full state to the room"""
        return await self.client.send(UpdateMessage(state=self.engine.snapshot()))

    async def run(self) -> None:
        """Run the connection until close() or the relay is lost for good"""
        await self.client.run()

    async def close(self) -> None:
        await self.client.close()
