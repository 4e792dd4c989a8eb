# ABOUTME: GameEngine facade owning one GameState, per-player undo history, ticket ids and randomness.
# ABOUTME: Every player-attributed action saves that player's history before the rule function runs.

import random
from typing import Any

from loguru import logger
from pydantic import ValidationError

from kanban_game.config.settings import get_settings
from kanban_game.engine import scheduler, workflow
from kanban_game.engine.allocation import AllocationOutcome, AllocationResult, allocate_points
from kanban_game.engine.exceptions import InvalidSnapshot
from kanban_game.engine.history import PlayerHistory
from kanban_game.models.game_state import SESSION_COLLABORATIVE, SESSION_INDIVIDUAL, GameState, Player
from kanban_game.models.ticket import Ticket, TicketStatus, TicketType
from kanban_game.utils.dice import create_random_source, roll_d6, validate_die_value
from kanban_game.utils.logging import log_game_event


def _highest_ticket_number(state: GameState) -> int:
    """Largest numeric ticket id across live and archived tickets (0 if none)"""
    tickets = list(state.tickets)
    tickets.extend(state.session1_tickets or [])
    tickets.extend(state.session2_tickets or [])
    numbers = [int(ticket.id) for ticket in tickets if ticket.id.isdigit()]
    return max(numbers, default=0)


class GameEngine:
    """
    Single owner of a game's state.

    Rule functions in workflow/allocation/scheduler are pure; the engine feeds
    them the current state, keeps the result, and records undo history for the
    acting player.

    Usage:
        >>> engine = GameEngine(rng=random.Random(42))
        >>> alice = engine.add_player("Alice")
        >>> engine.start_game()
        >>> ticket = engine.add_ticket()
        >>> engine.place_ticket(ticket.id, TicketStatus.PHASE1, alice.id)
        >>> engine.roll_dice(alice.id)
        >>> engine.spend_die(ticket.id, alice.id)
    """

    def __init__(self, state: GameState | None = None, rng: random.Random | None = None):
        """
        Args:
            state: Initial state (a fresh lobby if omitted)
            rng: Random source for dice and blocker placement
                (seeded from Settings.random_seed if omitted)
        """
        self._state = state if state is not None else GameState()
        self._rng = rng if rng is not None else create_random_source(get_settings().random_seed)
        self._history = PlayerHistory()
        self._next_ticket_number = _highest_ticket_number(self._state) + 1

    @property
    def state(self) -> GameState:
        """Current authoritative state"""
        return self._state

    @property
    def history(self) -> PlayerHistory:
        return self._history

    def _issue_ticket_id(self) -> str:
        ticket_id = str(self._next_ticket_number)
        self._next_ticket_number += 1
        return ticket_id

    def _log(self, message: str, player_id: int | None = None, level: str = "INFO", **extra: Any) -> None:
        log_game_event(
            message,
            session=self._state.session,
            round_number=self._state.round,
            player_id=player_id,
            level=level,
            **extra
        )

    # ------------------------------------------------------------------
    # Lobby and lifecycle
    # ------------------------------------------------------------------

    def add_player(self, name: str) -> Player:
        """
        Seat a new player. The first player to join hosts the game.

        Args:
            name: Display name

        Returns:
            The created player
        """
        player_id = max((p.id for p in self._state.players), default=0) + 1
        is_first = not self._state.players
        player = Player(id=player_id, name=name, is_host=is_first)

        new_state = self._state.model_copy(deep=True)
        new_state.players.append(player)
        if is_first:
            new_state.host_id = player_id
        self._state = new_state

        self._log(f"Player {name} joined", player_id=player_id, host=is_first)
        return player

    def remove_player(self, player_id: int) -> None:
        """Remove a player; a departing host is replaced by the lowest remaining id"""
        if self._state.find_player(player_id) is None:
            logger.debug(f"Remove ignored: player {player_id} unknown")
            return

        new_state = self._state.model_copy(deep=True)
        new_state.players = [p for p in new_state.players if p.id != player_id]
        new_state.dice_values.pop(player_id, None)

        if new_state.host_id == player_id and new_state.players:
            new_host = min(p.id for p in new_state.players)
            new_state.host_id = new_host
            for player in new_state.players:
                player.is_host = player.id == new_host
            self._log(f"Host passed to player {new_host}", player_id=new_host)

        self._state = new_state
        self._log("Player removed", player_id=player_id)

    def is_host(self, player_id: int) -> bool:
        return self._state.host_id == player_id

    def start_game(self) -> None:
        """Leave the lobby and start session play"""
        self._state = self._state.model_copy(update={"is_game_started": True}, deep=True)
        self._log("Game started", players=len(self._state.players))

    def skip_to_session2(self) -> None:
        """Jump straight into a fresh collaborative session, discarding both session archives"""
        new_state = self._state.model_copy(deep=True)
        new_state.session = SESSION_COLLABORATIVE
        new_state.round = 1
        new_state.is_game_started = True
        new_state.tickets = []
        new_state.session1_tickets = None
        new_state.session2_tickets = None
        new_state.dice_values = {}
        for player in new_state.players:
            player.has_rolled_this_round = False
            player.current_dice_roll = None
            player.current_ticket = None
        self._state = new_state
        self._log("Skipped to session 2")

    def go_home(self) -> None:
        """Return to the lobby: players, tickets, archives, history and ids all reset"""
        self._state = GameState(session=SESSION_INDIVIDUAL, round=1)
        self._history.clear()
        self._next_ticket_number = 1
        self._log("Returned to lobby")

    def next_round(self) -> None:
        """Advance to the next round (see scheduler.advance_round)"""
        self._state = scheduler.advance_round(self._state, self._rng, self._issue_ticket_id)

    def is_run_complete(self) -> bool:
        return scheduler.is_run_complete(self._state)

    # ------------------------------------------------------------------
    # Dice
    # ------------------------------------------------------------------

    def roll_dice(self, player_id: int, value: int | None = None) -> int | None:
        """
        Roll the player's die for this round.

        Args:
            player_id: Rolling player
            value: Face value of a physical roll; rolled from the engine's
                random source when omitted

        Returns:
            The rolled value, or None if the player is unknown or has already
            rolled this round

        Raises:
            ValueError: If value is given and is outside 1-6
        """
        if value is not None:
            validate_die_value(value)

        self._history.save(self._state, player_id)

        player = self._state.find_player(player_id)
        if player is None:
            logger.debug(f"Roll ignored: player {player_id} unknown")
            return None
        if player.has_rolled_this_round:
            self._log("Roll ignored: already rolled this round", player_id=player_id, level="DEBUG")
            return None

        rolled = value if value is not None else roll_d6(self._rng)
        new_state = self._state.model_copy(deep=True)
        roller = new_state.find_player(player_id)
        roller.current_dice_roll = rolled
        roller.has_rolled_this_round = True
        new_state.dice_values[player_id] = rolled
        self._state = new_state

        self._log(f"Rolled {rolled}", player_id=player_id)
        return rolled

    def set_dice_value(self, player_id: int, value: int) -> None:
        """Put a die with the given remaining capacity in the pool"""
        validate_die_value(value)
        new_state = self._state.model_copy(deep=True)
        new_state.dice_values[player_id] = value
        self._state = new_state

    def remove_dice_value(self, player_id: int) -> None:
        """Take a player's die out of the pool"""
        if player_id not in self._state.dice_values:
            return
        new_state = self._state.model_copy(deep=True)
        del new_state.dice_values[player_id]
        self._state = new_state

    def spend_die(self, ticket_id: str, player_id: int) -> AllocationResult:
        """
        Spend the player's pooled die on a ticket.

        Args:
            ticket_id: Ticket receiving the work
            player_id: Player whose die is spent

        Returns:
            AllocationResult describing what happened
        """
        capacity = self._state.dice_values.get(player_id, 0)
        if capacity <= 0:
            logger.debug(f"Spend ignored: player {player_id} has no die in the pool")
            return AllocationResult(
                outcome=AllocationOutcome.REJECTED,
                effective_capacity=0,
                remaining=0,
            )

        self._history.save(self._state, player_id)
        self._state, result = allocate_points(self._state, ticket_id, capacity, player_id)
        if result.consumed:
            self._log(
                f"Die spent on ticket {ticket_id}",
                player_id=player_id,
                outcome=result.outcome.value,
                applied=result.applied,
                remaining=result.remaining,
            )
        return result

    # ------------------------------------------------------------------
    # Tickets
    # ------------------------------------------------------------------

    def add_ticket(self, ticket_type: TicketType = TicketType.NORMAL) -> Ticket:
        """Add a new ticket to todo"""
        ticket = Ticket(
            id=self._issue_ticket_id(),
            type=ticket_type,
            status=TicketStatus.TODO,
            created_round=self._state.round,
        )
        new_state = self._state.model_copy(deep=True)
        new_state.tickets.append(ticket)
        self._state = new_state

        self._log(f"Ticket {ticket.id} added", ticket_type=ticket_type.value)
        return ticket

    def assign_ticket(self, ticket_id: str, player_id: int) -> None:
        self._history.save(self._state, player_id)
        self._state = workflow.assign_ticket(self._state, ticket_id, player_id)

    def assign_helper(self, ticket_id: str, player_id: int) -> None:
        self._history.save(self._state, player_id)
        self._state = workflow.assign_helper(self._state, ticket_id, player_id)

    def _save_for_move(self, ticket_id: str, player_id: int | None) -> None:
        actor = player_id
        if actor is None:
            ticket = self._state.find_ticket(ticket_id)
            actor = ticket.assigned_to if ticket is not None else None
        if actor is not None:
            self._history.save(self._state, actor)

    def move_ticket(
        self,
        ticket_id: str,
        target: TicketStatus | str,
        player_id: int | None = None
    ) -> None:
        """
        Request a status transition.

        Args:
            ticket_id: Ticket to move
            target: Requested status
            player_id: Player making the move (defaults to the ticket's assignee
                for history purposes)
        """
        self._save_for_move(ticket_id, player_id)
        self._state = workflow.move_ticket(self._state, ticket_id, target)

    def advance_ticket(self, ticket_id: str, player_id: int | None = None) -> None:
        """Move a ticket one stage along the session pipeline"""
        self._save_for_move(ticket_id, player_id)
        self._state = workflow.advance_ticket(self._state, ticket_id)

    def place_ticket(self, ticket_id: str, target: TicketStatus | str, player_id: int) -> None:
        """Drop a ticket on a player's row at the given column"""
        self._history.save(self._state, player_id)
        self._state = workflow.place_ticket(self._state, ticket_id, target, player_id)

    def player_has_todo_ticket(self, player_id: int) -> bool:
        return workflow.player_has_todo_ticket(self._state, player_id)

    # ------------------------------------------------------------------
    # Undo and sync
    # ------------------------------------------------------------------

    def undo(self, player_id: int) -> None:
        """Roll the board back to before the player's last action"""
        self._state = self._history.undo(self._state, player_id)

    def snapshot(self) -> dict[str, Any]:
        """Wire snapshot of the current state"""
        return self._state.to_snapshot()

    def load_snapshot(self, snapshot: dict[str, Any]) -> None:
        """
        Replace the state wholesale with one received from the relay.

        Args:
            snapshot: camelCase state snapshot

        Raises:
            InvalidSnapshot: If the snapshot does not describe a valid game
        """
        try:
            state = GameState.from_snapshot(snapshot)
        except ValidationError as e:
            raise InvalidSnapshot(f"Received state is invalid: {e.error_count()} error(s)") from e

        self._state = state
        self._next_ticket_number = max(self._next_ticket_number, _highest_ticket_number(state) + 1)
        logger.debug(
            f"Loaded snapshot: session {state.session}, round {state.round}, "
            f"{len(state.tickets)} ticket(s)"
        )
