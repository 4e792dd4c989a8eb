# ABOUTME: Round and session scheduler: round advance, scripted blockers and tickets, session rollover.
# ABOUTME: Randomness comes only from the injected random.Random so runs are reproducible.

import math
import random
from collections.abc import Callable
from fractions import Fraction

from kanban_game.models.game_state import MAX_ROUNDS, SESSION_COLLABORATIVE, GameState
from kanban_game.models.ticket import Ticket, TicketStatus, TicketType
from kanban_game.utils.logging import log_game_event

# Rounds whose start places blockers, with the share of eligible tickets hit
BLOCKER_FRACTIONS: dict[int, Fraction] = {
    3: Fraction(3, 10),
    6: Fraction(4, 10),
    8: Fraction(3, 10),
}

# Rounds whose start injects scripted tickets
SCRIPTED_TICKET_TYPES: dict[int, TicketType] = {
    4: TicketType.URGENT,
    5: TicketType.FIXED_DATE,
}

SCRIPTED_TICKET_SHARE = Fraction(2, 3)

# Only tickets actively being worked on can become blocked
BLOCKABLE_STATUSES = frozenset({TicketStatus.PHASE1, TicketStatus.PHASE2})


def blocker_fraction(round_number: int) -> Fraction | None:
    """Share of eligible tickets blocked on entering this round, or None"""
    return BLOCKER_FRACTIONS.get(round_number)


def blocker_count(eligible_count: int, fraction: Fraction) -> int:
    """ceil(eligible_count x fraction) computed without float error"""
    return math.ceil(Fraction(eligible_count) * fraction)


def scripted_ticket_count(player_count: int) -> int:
    """Number of urgent/fixed-date tickets created: ceil(players x 2/3)"""
    return math.ceil(Fraction(player_count) * SCRIPTED_TICKET_SHARE)


def is_run_complete(state: GameState) -> bool:
    """A run ends once session 2 has been archived"""
    return state.session == SESSION_COLLABORATIVE and state.session2_tickets is not None


def _reset_round_inputs(state: GameState) -> None:
    for player in state.players:
        player.has_rolled_this_round = False
        player.current_dice_roll = None
    state.dice_values = {}


def _place_blockers(state: GameState, rng: random.Random, fraction: Fraction) -> list[str]:
    eligible = [
        ticket for ticket in state.tickets
        if ticket.status in BLOCKABLE_STATUSES and not ticket.has_blocker
    ]
    count = blocker_count(len(eligible), fraction)
    chosen = rng.sample(eligible, count)
    for ticket in chosen:
        ticket.has_blocker = True
        ticket.blocker_points = 0
    return [ticket.id for ticket in chosen]


def _create_scripted_tickets(
    state: GameState,
    ticket_type: TicketType,
    created_round: int,
    issue_ticket_id: Callable[[], str]
) -> list[str]:
    created = []
    for _ in range(scripted_ticket_count(len(state.players))):
        ticket = Ticket(
            id=issue_ticket_id(),
            type=ticket_type,
            status=TicketStatus.TODO,
            created_round=created_round,
        )
        state.tickets.append(ticket)
        created.append(ticket.id)
    return created


def _end_session(state: GameState) -> GameState:
    new_state = state.model_copy(deep=True)
    archive = [ticket.model_copy(deep=True) for ticket in new_state.tickets]
    ended_session = new_state.session

    if ended_session == SESSION_COLLABORATIVE:
        new_state.session2_tickets = archive
    else:
        new_state.session1_tickets = archive
        new_state.session = SESSION_COLLABORATIVE

    new_state.round = 1
    new_state.tickets = []
    _reset_round_inputs(new_state)
    for player in new_state.players:
        player.current_ticket = None

    log_game_event(
        f"Session {ended_session} ended",
        session=ended_session,
        round_number=MAX_ROUNDS,
        archived_tickets=len(archive),
    )
    return new_state


def advance_round(
    state: GameState,
    rng: random.Random,
    issue_ticket_id: Callable[[], str]
) -> GameState:
    """
    Move the game to its next round, running the scripted events of the round entered.

    Scripted events:
    - Entering 3, 6 or 8: ceil(eligible x p) unblocked phase1/phase2 tickets
      are blocked, chosen uniformly without replacement (p = 30%, 40%, 30%)
    - Entering 4: ceil(players x 2/3) urgent tickets appear in todo
    - Entering 5: ceil(players x 2/3) fixed-date tickets appear in todo

    Finishing round 10 archives the session's tickets. Session 1 rolls over to
    session 2; finishing session 2 completes the run, after which this is a no-op.

    Args:
        state: Current game state
        rng: Random source used for blocker placement
        issue_ticket_id: Produces a fresh ticket id for each scripted ticket

    Returns:
        New game state
    """
    if is_run_complete(state):
        log_game_event(
            "Round advance ignored: run complete",
            session=state.session,
            round_number=state.round,
            level="DEBUG",
        )
        return state

    if state.round >= MAX_ROUNDS:
        return _end_session(state)

    left_round = state.round
    new_state = state.model_copy(deep=True)
    new_state.round = left_round + 1
    _reset_round_inputs(new_state)

    fraction = blocker_fraction(new_state.round)
    if fraction is not None:
        blocked = _place_blockers(new_state, rng, fraction)
        log_game_event(
            f"Blockers placed on {len(blocked)} ticket(s)",
            session=new_state.session,
            round_number=new_state.round,
            ticket_ids=blocked,
        )

    ticket_type = SCRIPTED_TICKET_TYPES.get(new_state.round)
    if ticket_type is not None:
        created = _create_scripted_tickets(new_state, ticket_type, left_round, issue_ticket_id)
        log_game_event(
            f"Created {len(created)} {ticket_type.value} ticket(s)",
            session=new_state.session,
            round_number=new_state.round,
            ticket_ids=created,
        )

    log_game_event(
        f"Round {new_state.round} started",
        session=new_state.session,
        round_number=new_state.round,
        level="DEBUG",
    )
    return new_state
