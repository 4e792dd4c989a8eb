# ABOUTME: Pydantic models for the relay wire protocol (join/joined/error/update/state/players).
# ABOUTME: Inbound frames are parsed through a discriminated union keyed on the "type" tag.

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError


class JoinMessage(BaseModel):
    """Create-or-join a room"""

    type: Literal["join"] = "join"
    room: str = Field(min_length=1)
    password: str
    name: str | None = None


class JoinedMessage(BaseModel):
    """Join accepted; carries the room's current snapshot (None before the first update)"""

    type: Literal["joined"] = "joined"
    state: dict[str, Any] | None = None


class ErrorMessage(BaseModel):
    """Join rejected or send failed"""

    type: Literal["error"] = "error"
    message: str


class UpdateMessage(BaseModel):
    """Replace the room's authoritative state with a full snapshot"""

    type: Literal["update"] = "update"
    state: dict[str, Any]


class StateMessage(BaseModel):
    """Broadcast of the new authoritative state"""

    type: Literal["state"] = "state"
    state: dict[str, Any]


class PlayersMessage(BaseModel):
    """Room membership count changed"""

    type: Literal["players"] = "players"
    count: int = Field(ge=0)


WireMessage = Annotated[
    JoinMessage | JoinedMessage | ErrorMessage | UpdateMessage | StateMessage | PlayersMessage,
    Field(discriminator="type"),
]

_WIRE_ADAPTER: TypeAdapter[WireMessage] = TypeAdapter(WireMessage)


def parse_message(raw: str | bytes) -> WireMessage | None:
    """
    Parse a raw frame into a typed wire message.

    Args:
        raw: Text or bytes received on the socket

    Returns:
        The typed message, or None when the frame is not valid JSON, carries an
        unknown type tag, or misses required fields
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    try:
        return _WIRE_ADAPTER.validate_python(data)
    except ValidationError:
        return None


def encode_message(message: BaseModel) -> str:
    """Serialize a wire message to compact JSON text"""
    return message.model_dump_json()
