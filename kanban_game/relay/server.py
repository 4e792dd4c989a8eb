# ABOUTME: FastAPI relay server: WebSocket rooms that store and rebroadcast whole game snapshots.
# ABOUTME: Replies joined/error, broadcasts players counts and state updates, drops malformed frames.

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import PlainTextResponse
from loguru import logger
from pydantic import BaseModel

from kanban_game.models.messages import (
    ErrorMessage,
    JoinedMessage,
    JoinMessage,
    PlayersMessage,
    StateMessage,
    UpdateMessage,
    encode_message,
    parse_message,
)
from kanban_game.relay.exceptions import WrongPassword
from kanban_game.relay.rooms import Room, RoomRegistry

WRONG_PASSWORD_MESSAGE = "Wrong password"


class RelayServer:
    """
    Socket I/O around a RoomRegistry.

    One instance serves every connection of the app; broadcasts iterate over a
    copy of the member list and a member whose send fails is dropped.
    """

    def __init__(self, registry: RoomRegistry | None = None):
        self.registry = registry if registry is not None else RoomRegistry()

    async def send(self, ws: WebSocket, message: BaseModel) -> bool:
        """Send one message; on failure the connection is removed from its room"""
        try:
            await ws.send_text(encode_message(message))
            return True
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.warning(f"Dropping client after failed send: {e}")
            self.registry.leave(ws)
            return False

    async def broadcast(self, room: Room, message: BaseModel) -> int:
        """Send to every current member of a room, returning how many succeeded"""
        delivered = 0
        for client in list(room.clients):
            if await self.send(client, message):
                delivered += 1
        return delivered

    async def handle_join(self, ws: WebSocket, message: JoinMessage) -> None:
        try:
            room, left = self.registry.join(message.room, message.password, ws)
        except WrongPassword:
            logger.bind(room=message.room).warning(f"Join rejected for {message.name}: wrong password")
            await self.send(ws, ErrorMessage(message=WRONG_PASSWORD_MESSAGE))
            return

        if left is not None:
            await self.broadcast(left, PlayersMessage(count=left.member_count))

        logger.bind(room=room.name).info(f"{message.name or 'Anonymous'} joined ({room.member_count} connected)")
        await self.send(ws, JoinedMessage(state=room.state))
        await self.broadcast(room, PlayersMessage(count=room.member_count))

    async def handle_update(self, ws: WebSocket, message: UpdateMessage) -> None:
        recipients = self.registry.update(ws, message.state)
        if not recipients:
            logger.debug("Update ignored: client has not joined a room")
            return
        outgoing = StateMessage(state=message.state)
        for client in recipients:
            await self.send(client, outgoing)

    async def handle_disconnect(self, ws: WebSocket) -> None:
        room = self.registry.leave(ws)
        if room is None:
            return
        logger.bind(room=room.name).info(f"Client disconnected ({room.member_count} connected)")
        await self.broadcast(room, PlayersMessage(count=room.member_count))

    async def serve(self, ws: WebSocket) -> None:
        """Receive loop for one connection"""
        await ws.accept()
        try:
            while True:
                frame = await ws.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000))
                message = parse_message(frame.get("text") or frame.get("bytes") or "")
                if isinstance(message, JoinMessage):
                    await self.handle_join(ws, message)
                elif isinstance(message, UpdateMessage):
                    await self.handle_update(ws, message)
                else:
                    logger.debug("Dropped malformed or unexpected frame")
        except WebSocketDisconnect:
            pass
        finally:
            await self.handle_disconnect(ws)


def create_app(registry: RoomRegistry | None = None) -> FastAPI:
    """
    Build the relay application.

    Args:
        registry: Room registry to serve (a fresh one if omitted)

    Returns:
        FastAPI app with the WebSocket relay on "/" and GET "/" and "/health"
    """
    relay = RelayServer(registry)
    app = FastAPI(title="Kanban Flow Game Relay")
    app.state.relay = relay

    @app.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return "Kanban game relay is running"

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "rooms": relay.registry.room_count}

    @app.websocket("/")
    async def relay_endpoint(ws: WebSocket) -> None:
        await relay.serve(ws)

    return app
