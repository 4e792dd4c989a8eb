# ABOUTME: In-memory room registry for the relay: per-room password, last snapshot and member list.
# ABOUTME: Pure bookkeeping with no I/O; the server decides who to notify from the return values.

from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from kanban_game.relay.exceptions import WrongPassword


@dataclass
class Room:
    """A named room. Its state is whatever snapshot was pushed last (None before any)."""

    name: str
    password: str
    state: dict[str, Any] | None = None
    clients: list[Any] = field(default_factory=list)

    @property
    def member_count(self) -> int:
        return len(self.clients)


class RoomRegistry:
    """
    Rooms keyed by name, plus the room each client connection is in.

    Clients are opaque connection handles (WebSocket objects in the server).
    Rooms live for the lifetime of the registry, even when empty.
    """

    def __init__(self) -> None:
        self._rooms: dict[str, Room] = {}
        self._membership: dict[Any, str] = {}

    def get(self, room_name: str) -> Room | None:
        return self._rooms.get(room_name)

    def room_of(self, client: Any) -> Room | None:
        """Room the client has joined, if any"""
        room_name = self._membership.get(client)
        return self._rooms.get(room_name) if room_name is not None else None

    @property
    def room_count(self) -> int:
        return len(self._rooms)

    def member_count(self, room_name: str) -> int:
        room = self._rooms.get(room_name)
        return room.member_count if room is not None else 0

    def join(self, room_name: str, password: str, client: Any) -> tuple[Room, Room | None]:
        """
        Admit a client to a room, creating it with this password if it is new.

        A client already in a different room leaves that room first.

        Args:
            room_name: Room to join
            password: Shared passphrase
            client: Connection handle

        Returns:
            Tuple of (joined room, room that was left or None)

        Raises:
            WrongPassword: If the room exists with a different password
        """
        room = self._rooms.get(room_name)
        if room is None:
            room = Room(name=room_name, password=password)
            self._rooms[room_name] = room
            logger.info(f"Room {room_name} created")
        elif room.password != password:
            raise WrongPassword(f"Wrong password for room {room_name}")

        left = None
        current = self.room_of(client)
        if current is not None and current is not room:
            left = self.leave(client)

        if client not in room.clients:
            room.clients.append(client)
        self._membership[client] = room_name
        return room, left

    def update(self, client: Any, state: dict[str, Any]) -> list[Any]:
        """
        Store a pushed snapshot verbatim for the client's room.

        Returns:
            Clients to receive the new state (every member, sender included),
            or an empty list if the client has not joined a room
        """
        room = self.room_of(client)
        if room is None:
            return []
        room.state = state
        return list(room.clients)

    def leave(self, client: Any) -> Room | None:
        """
        Remove a client from its room.

        Returns:
            The room it left (whose remaining members should be told the new
            count), or None if it was not in a room
        """
        room_name = self._membership.pop(client, None)
        if room_name is None:
            return None
        room = self._rooms[room_name]
        if client in room.clients:
            room.clients.remove(client)
        return room
