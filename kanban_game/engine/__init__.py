# ABOUTME: Game rules engine: workflow, allocation, scheduler, undo history, metrics and the GameEngine facade.
# ABOUTME: Rule modules are pure functions over GameState; GameEngine owns the live state.

from kanban_game.engine.allocation import (
    MIN_BLOCKER_DIE,
    AllocationOutcome,
    AllocationResult,
    allocate_points,
)
from kanban_game.engine.exceptions import InvalidCapacity, InvalidSnapshot
from kanban_game.engine.game import GameEngine
from kanban_game.engine.history import PlayerHistory
from kanban_game.engine.metrics import (
    CumulativeFlowPoint,
    FlowMetrics,
    SessionComparison,
    ThroughputPoint,
    compare_sessions,
    compute_flow_metrics,
)
from kanban_game.engine.scheduler import (
    advance_round,
    blocker_count,
    blocker_fraction,
    is_run_complete,
    scripted_ticket_count,
)
from kanban_game.engine.workflow import (
    advance_ticket,
    assign_helper,
    assign_ticket,
    is_allowed_move,
    move_ticket,
    next_status,
    place_ticket,
    player_has_todo_ticket,
)

__all__ = [
    # Facade
    "GameEngine",
    "PlayerHistory",
    # Workflow
    "move_ticket",
    "advance_ticket",
    "assign_ticket",
    "assign_helper",
    "place_ticket",
    "next_status",
    "is_allowed_move",
    "player_has_todo_ticket",
    # Allocation
    "allocate_points",
    "AllocationOutcome",
    "AllocationResult",
    "MIN_BLOCKER_DIE",
    # Scheduler
    "advance_round",
    "blocker_count",
    "blocker_fraction",
    "scripted_ticket_count",
    "is_run_complete",
    # Metrics
    "compute_flow_metrics",
    "compare_sessions",
    "FlowMetrics",
    "ThroughputPoint",
    "CumulativeFlowPoint",
    "SessionComparison",
    # Exceptions
    "InvalidCapacity",
    "InvalidSnapshot",
]
