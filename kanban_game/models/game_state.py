# ABOUTME: Pydantic models for the authoritative game aggregate: players, tickets, dice pool, archives.
# ABOUTME: Also defines the per-player history entry captured before undoable actions.

from typing import Any

from pydantic import Field

from kanban_game.models.ticket import Ticket, WireModel

MAX_ROUNDS = 10
SESSION_INDIVIDUAL = 1
SESSION_COLLABORATIVE = 2


class Player(WireModel):
    """A seat at the table"""

    id: int = Field(ge=1, description="1-based id, stable for the lifetime of the game")
    name: str
    current_dice_roll: int | None = Field(default=None, ge=1, le=6)
    current_ticket: str | None = Field(
        default=None,
        description="Ticket this player was last assigned to as primary"
    )
    is_host: bool = False
    has_rolled_this_round: bool = False


class GameState(WireModel):
    """
    Single authoritative aggregate for one game.

    Tickets and players are owned by the state. The archived session ticket
    lists are copies taken when a session ends and are only cleared when the
    game returns to the lobby.
    """

    round: int = Field(default=1, ge=1, le=MAX_ROUNDS)
    session: int = Field(default=SESSION_INDIVIDUAL, ge=SESSION_INDIVIDUAL, le=SESSION_COLLABORATIVE)
    players: list[Player] = Field(default_factory=list)
    tickets: list[Ticket] = Field(default_factory=list)
    is_game_started: bool = False
    host_id: int = 1
    dice_values: dict[int, int] = Field(
        default_factory=dict,
        description="Dice pool: player id -> remaining capacity of the rolled die"
    )
    session1_tickets: list[Ticket] | None = None
    session2_tickets: list[Ticket] | None = None

    def find_ticket(self, ticket_id: str) -> Ticket | None:
        """Return the live ticket with this id, if any"""
        for ticket in self.tickets:
            if ticket.id == ticket_id:
                return ticket
        return None

    def find_player(self, player_id: int) -> Player | None:
        """Return the player with this id, if any"""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    @property
    def is_collaborative(self) -> bool:
        """Session 2 enables helpers and elides the check stage"""
        return self.session == SESSION_COLLABORATIVE

    def to_snapshot(self) -> dict[str, Any]:
        """Serialize to the camelCase snapshot shape exchanged with the relay"""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_snapshot(cls, snapshot: dict[str, Any]) -> "GameState":
        """Build a state from a snapshot received over the wire"""
        return cls.model_validate(snapshot)


class HistoryEntry(WireModel):
    """Deep copy of the shared state an undo restores, plus the acting player's row"""

    tickets: list[Ticket]
    dice_values: dict[int, int]
    player: Player
