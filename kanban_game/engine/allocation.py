# ABOUTME: Point allocation engine converting remaining die capacity into phase progress or blocker work.
# ABOUTME: Implements the blocker gate (4+), the 6-point phase caps and the session-2 helper discount.

from enum import Enum
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field

from kanban_game.engine.exceptions import InvalidCapacity
from kanban_game.models.game_state import GameState
from kanban_game.models.ticket import BLOCKER_THRESHOLD, MAX_PHASE_POINTS, Ticket
from kanban_game.utils.dice import validate_die_value

# Smallest die value that does anything against a blocker
MIN_BLOCKER_DIE = 4


class AllocationOutcome(str, Enum):
    """What an allocation attempt did"""
    PROGRESS = "progress"  # phase points added
    BLOCKER_CLEARED = "blocker_cleared"  # blocker removed, die used up
    REJECTED = "rejected"  # nothing changed, die kept


class AllocationResult(BaseModel):
    """Outcome of spending die capacity on one ticket"""

    outcome: AllocationOutcome
    target: Literal["phase1", "phase2", "blocker"] | None = None
    effective_capacity: int = Field(ge=0, description="Capacity after the helper discount")
    applied: int = Field(default=0, ge=0, description="Points added to the target")
    remaining: int = Field(ge=0, description="Capacity left on the die afterwards")
    helper_recorded: bool = False

    @property
    def consumed(self) -> bool:
        """Whether the die was (at least partly) used"""
        return self.outcome != AllocationOutcome.REJECTED


def is_helping(state: GameState, ticket: Ticket, player_id: int) -> bool:
    """Session-2 rule: working on a ticket someone else owns"""
    return (
        state.is_collaborative
        and ticket.assigned_to is not None
        and ticket.assigned_to != player_id
    )


def effective_capacity(state: GameState, ticket: Ticket, capacity: int, player_id: int) -> int:
    """Capacity that reaches the ticket: halved (rounding down) for a session-2 helper"""
    if is_helping(state, ticket, player_id):
        return capacity // 2
    return capacity


def _settle_die(state: GameState, player_id: int, remaining: int) -> None:
    """Write leftover capacity back to the pool, removing the die once it is spent"""
    if remaining <= 0:
        state.dice_values.pop(player_id, None)
    else:
        state.dice_values[player_id] = remaining


def _rejected(capacity: int) -> AllocationResult:
    return AllocationResult(
        outcome=AllocationOutcome.REJECTED,
        effective_capacity=capacity,
        remaining=capacity,
    )


def allocate_points(
    state: GameState,
    ticket_id: str,
    capacity: int,
    player_id: int
) -> tuple[GameState, AllocationResult]:
    """
    Spend a player's die capacity on a ticket.

    Rules:
    - Blocked ticket: only 4, 5 or 6 count. They add to the blocker points and
      clear the blocker once 4 is reached; the die is used up. Lower values are
      rejected without consuming anything. No helper discount applies here.
    - Unblocked ticket: points go to phase1 until it holds 6, then to phase2.
      Applied amount is min(effective capacity, 6 - current phase points).
    - Session 2 helper (ticket owned by someone else): capacity is halved
      before use and the helper is recorded as assigned_to2 if that slot is free.
    - Leftover capacity stays in the dice pool; a spent die leaves it.

    Args:
        state: Current game state
        ticket_id: Ticket receiving the work
        capacity: Remaining value of the player's die (1-6)
        player_id: Acting player

    Returns:
        Tuple of (new state, AllocationResult). Rejected attempts return the
        original state object.

    Raises:
        InvalidCapacity: If capacity is outside 1-6
    """
    try:
        validate_die_value(capacity)
    except ValueError as e:
        raise InvalidCapacity(str(e)) from e

    ticket = state.find_ticket(ticket_id)
    if ticket is None:
        logger.debug(f"Allocation ignored: ticket {ticket_id} not found")
        return state, _rejected(capacity)

    helping = is_helping(state, ticket, player_id)

    if ticket.has_blocker:
        if capacity < MIN_BLOCKER_DIE:
            logger.debug(
                f"Blocker on ticket {ticket_id} needs a 4+, player {player_id} offered {capacity}"
            )
            return state, _rejected(capacity)

        new_state = state.model_copy(deep=True)
        target = new_state.find_ticket(ticket_id)
        total = target.blocker_points + capacity
        if total >= BLOCKER_THRESHOLD:
            target.has_blocker = False
            target.blocker_points = 0
            outcome = AllocationOutcome.BLOCKER_CLEARED
        else:
            target.blocker_points = total
            outcome = AllocationOutcome.PROGRESS

        helper_recorded = helping and target.assigned_to2 is None
        if helper_recorded:
            target.assigned_to2 = player_id

        _settle_die(new_state, player_id, 0)
        logger.info(f"Player {player_id} spent {capacity} on blocker of ticket {ticket_id}")
        return new_state, AllocationResult(
            outcome=outcome,
            target="blocker",
            effective_capacity=capacity,
            applied=capacity,
            remaining=0,
            helper_recorded=helper_recorded,
        )

    effective = effective_capacity(state, ticket, capacity, player_id)
    if ticket.points.phase1 < MAX_PHASE_POINTS:
        phase = "phase1"
    elif ticket.points.phase2 < MAX_PHASE_POINTS:
        phase = "phase2"
    else:
        logger.debug(f"Allocation ignored: ticket {ticket_id} has no points left to earn")
        return state, _rejected(capacity)

    current = getattr(ticket.points, phase)
    applied = min(effective, MAX_PHASE_POINTS - current)
    if applied <= 0:
        logger.debug(
            f"Allocation ignored: player {player_id} has no effective capacity for ticket {ticket_id}"
        )
        return state, _rejected(capacity)

    new_state = state.model_copy(deep=True)
    target = new_state.find_ticket(ticket_id)
    setattr(target.points, phase, current + applied)

    helper_recorded = helping and target.assigned_to2 is None
    if helper_recorded:
        target.assigned_to2 = player_id

    remaining = effective - applied
    _settle_die(new_state, player_id, remaining)

    logger.info(
        f"Player {player_id} added {applied} to {phase} of ticket {ticket_id} "
        f"(effective {effective}, remaining {max(remaining, 0)})"
    )
    return new_state, AllocationResult(
        outcome=AllocationOutcome.PROGRESS,
        target=phase,
        effective_capacity=effective,
        applied=applied,
        remaining=max(remaining, 0),
        helper_recorded=helper_recorded,
    )
