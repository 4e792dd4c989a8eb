# ABOUTME: Pydantic models for kanban tickets: type, pipeline status, phase points and blockers.
# ABOUTME: Python attributes are snake_case; snapshots use the camelCase wire aliases.

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_PHASE_POINTS = 6
BLOCKER_THRESHOLD = 4


class TicketType(str, Enum):
    """Closed set of ticket kinds; drives the scheduler's scripted ticket creation"""
    NORMAL = "normal"
    URGENT = "urgent"
    FIXED_DATE = "fixed-date"


class TicketStatus(str, Enum):
    """Pipeline position of a ticket, declared in pipeline order"""
    TODO = "todo"
    PHASE1 = "phase1"
    CHECK = "check"
    PHASE2 = "phase2"
    DONE = "done"


# Statuses that count as "work started" for flow metrics
IN_PROGRESS_STATUSES = frozenset({TicketStatus.PHASE1, TicketStatus.CHECK, TicketStatus.PHASE2})


class WireModel(BaseModel):
    """Base for every model that travels inside a state snapshot"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )


class TicketPoints(WireModel):
    """Progress counters for the two work phases, each capped at 6"""

    phase1: int = Field(default=0, ge=0, le=MAX_PHASE_POINTS)
    phase2: int = Field(default=0, ge=0, le=MAX_PHASE_POINTS)


class Ticket(WireModel):
    """
    A unit of work moving through the board.

    Invariants:
    - points.phase1 / points.phase2 never exceed 6
    - blocker_points never reaches 4 while stored (it clears the blocker instead)
    - completed_round and in_progress_entered_round are written at most once
    """

    id: str = Field(description="Unique ticket id, never reused within a run")
    type: TicketType = Field(
        default=TicketType.NORMAL,
        frozen=True,
        description="Ticket kind, immutable after creation"
    )
    status: TicketStatus = TicketStatus.TODO
    points: TicketPoints = Field(default_factory=TicketPoints)
    has_blocker: bool = False
    blocker_points: int = Field(default=0, ge=0, le=BLOCKER_THRESHOLD)
    assigned_to: int | None = Field(default=None, description="Primary assignee player id")
    assigned_to2: int | None = Field(default=None, description="Session-2 helper player id")
    created_round: int = Field(default=1, ge=1)
    completed_round: int | None = None
    in_progress_entered_round: int | None = None

    @field_validator("status", mode="before")
    @classmethod
    def repair_legacy_backlog(cls, value):
        """Older snapshots used 'backlog' for the todo column"""
        if value == "backlog":
            return TicketStatus.TODO
        return value

    @property
    def is_done(self) -> bool:
        """Whether the ticket has reached the end of the pipeline"""
        return self.status == TicketStatus.DONE
