# ABOUTME: Ticket workflow state machine: explicit status transitions, assignment and helper attachment.
# ABOUTME: Pure functions over GameState; rejected requests return the state unchanged.

from loguru import logger

from kanban_game.models.game_state import GameState
from kanban_game.models.ticket import IN_PROGRESS_STATUSES, TicketStatus

# Full pipeline order, used to tell forward moves from backward ones
STATUS_ORDER: tuple[TicketStatus, ...] = tuple(TicketStatus)

SESSION1_PIPELINE: tuple[TicketStatus, ...] = (
    TicketStatus.TODO,
    TicketStatus.PHASE1,
    TicketStatus.CHECK,
    TicketStatus.PHASE2,
    TicketStatus.DONE,
)

# Session 2 has no check stage
SESSION2_PIPELINE: tuple[TicketStatus, ...] = (
    TicketStatus.TODO,
    TicketStatus.PHASE1,
    TicketStatus.PHASE2,
    TicketStatus.DONE,
)


def pipeline_for(session: int) -> tuple[TicketStatus, ...]:
    """Return the ordered stages a ticket passes through in the given session"""
    return SESSION2_PIPELINE if session == 2 else SESSION1_PIPELINE


def resolve_target(session: int, target: TicketStatus) -> TicketStatus:
    """
    Map a requested status onto one that exists in the session.

    In session 2 nothing is ever placed at check; such requests land in phase2.
    """
    if session == 2 and target == TicketStatus.CHECK:
        return TicketStatus.PHASE2
    return target


def _following(session: int, status: TicketStatus) -> TicketStatus | None:
    """Stage directly after status in the session pipeline (None after done)"""
    pipeline = pipeline_for(session)
    if status not in pipeline:
        # A check ticket carried into session 2 continues in phase2
        return resolve_target(session, status)
    index = pipeline.index(status)
    if index + 1 >= len(pipeline):
        return None
    return pipeline[index + 1]


def next_status(session: int, status: TicketStatus) -> TicketStatus | None:
    """
    Stage an "advance" click moves a ticket to.

    Tickets are not pulled out of todo by clicking, and done is terminal.

    Args:
        session: Current session (1 or 2)
        status: Current ticket status

    Returns:
        The next status, or None when clicking has no effect
    """
    if status == TicketStatus.TODO:
        return None
    return _following(session, status)


def is_allowed_move(session: int, current: TicketStatus, target: TicketStatus) -> bool:
    """
    Whether a transition request from current to target is accepted.

    Forward moves advance exactly one stage of the session pipeline; backward
    and same-stage moves are always accepted.
    """
    if STATUS_ORDER.index(target) <= STATUS_ORDER.index(current):
        return True
    return target == _following(session, current)


def move_ticket(state: GameState, ticket_id: str, target: TicketStatus | str) -> GameState:
    """
    Apply an explicit status transition request.

    Args:
        state: Current game state
        ticket_id: Ticket to move
        target: Requested status

    Returns:
        New state with the ticket moved, or the same state when the request is
        rejected (unknown ticket, blocked ticket, or a forward move that skips a stage)
    """
    ticket = state.find_ticket(ticket_id)
    if ticket is None:
        logger.debug(f"Move ignored: ticket {ticket_id} not found")
        return state
    if ticket.has_blocker:
        logger.debug(f"Move ignored: ticket {ticket_id} is blocked")
        return state

    target = resolve_target(state.session, TicketStatus(target))
    if not is_allowed_move(state.session, ticket.status, target):
        logger.debug(
            f"Move ignored: ticket {ticket_id} cannot go {ticket.status.value} -> {target.value}"
        )
        return state

    new_state = state.model_copy(deep=True)
    moved = new_state.find_ticket(ticket_id)
    moved.status = target

    if target == TicketStatus.DONE and moved.completed_round is None:
        moved.completed_round = new_state.round
    if target in IN_PROGRESS_STATUSES and moved.in_progress_entered_round is None:
        moved.in_progress_entered_round = new_state.round

    logger.info(f"Ticket {ticket_id} moved {ticket.status.value} -> {target.value}")
    return new_state


def advance_ticket(state: GameState, ticket_id: str) -> GameState:
    """Move a ticket to the stage its "advance" click leads to"""
    ticket = state.find_ticket(ticket_id)
    if ticket is None:
        return state
    target = next_status(state.session, ticket.status)
    if target is None:
        return state
    return move_ticket(state, ticket_id, target)


def assign_ticket(state: GameState, ticket_id: str, player_id: int) -> GameState:
    """
    Make a player the primary assignee of a ticket.

    The player's current_ticket follows the ticket: whoever held it before
    loses it. A helper who becomes primary stops being the helper.

    Returns:
        New state, or the same state for unknown ids or a blocked ticket
    """
    ticket = state.find_ticket(ticket_id)
    if ticket is None or state.find_player(player_id) is None:
        logger.debug(f"Assign ignored: ticket {ticket_id} / player {player_id} unknown")
        return state
    if ticket.has_blocker:
        logger.debug(f"Assign ignored: ticket {ticket_id} is blocked")
        return state

    new_state = state.model_copy(deep=True)
    for player in new_state.players:
        if player.current_ticket == ticket_id:
            player.current_ticket = None
    new_state.find_player(player_id).current_ticket = ticket_id

    assigned = new_state.find_ticket(ticket_id)
    assigned.assigned_to = player_id
    if assigned.assigned_to2 == player_id:
        assigned.assigned_to2 = None

    logger.info(f"Ticket {ticket_id} assigned to player {player_id}")
    return new_state


def assign_helper(state: GameState, ticket_id: str, player_id: int) -> GameState:
    """
    Attach a session-2 helper to a ticket that already has a primary assignee.

    Returns:
        New state with assigned_to2 set, or the same state outside session 2,
        for unknown ids, a blocked ticket, a ticket with no primary, or when the
        helper is the primary
    """
    if not state.is_collaborative:
        return state
    ticket = state.find_ticket(ticket_id)
    if ticket is None or state.find_player(player_id) is None:
        return state
    if ticket.has_blocker or ticket.assigned_to is None or ticket.assigned_to == player_id:
        return state

    new_state = state.model_copy(deep=True)
    new_state.find_ticket(ticket_id).assigned_to2 = player_id
    logger.info(f"Player {player_id} helps on ticket {ticket_id}")
    return new_state


def place_ticket(
    state: GameState,
    ticket_id: str,
    target: TicketStatus | str,
    player_id: int | None = None
) -> GameState:
    """
    Drop a ticket on a board cell: optional (re)assignment, then a move.

    In session 2 dropping another player's ticket in your row makes you its
    helper instead of taking it over.
    """
    if player_id is not None:
        ticket = state.find_ticket(ticket_id)
        if (
            ticket is not None
            and state.is_collaborative
            and ticket.assigned_to is not None
            and ticket.assigned_to != player_id
        ):
            state = assign_helper(state, ticket_id, player_id)
        else:
            state = assign_ticket(state, ticket_id, player_id)
    return move_ticket(state, ticket_id, target)


def player_has_todo_ticket(state: GameState, player_id: int) -> bool:
    """
    Session-2 capacity check: does this player already own a ticket still in todo.

    Enforcement belongs to the caller; the engine only answers the question.
    """
    return any(
        ticket.assigned_to == player_id and ticket.status == TicketStatus.TODO
        for ticket in state.tickets
    )
