# ABOUTME: Flow metrics over a ticket list: throughput, lead time, predictability and cumulative flow.
# ABOUTME: Pure data for the post-session evaluation; rendering is left to the caller.

import statistics
from collections.abc import Sequence

from pydantic import BaseModel, Field

from kanban_game.models.game_state import MAX_ROUNDS, GameState
from kanban_game.models.ticket import Ticket


class ThroughputPoint(BaseModel):
    """Tickets finished by the end of a round"""

    round: int = Field(ge=1)
    finished: int = Field(ge=0)


class CumulativeFlowPoint(BaseModel):
    """Cumulative counts of tickets that started and finished by a round"""

    round: int = Field(ge=1)
    in_progress: int = Field(ge=0, description="Tickets that entered work by this round")
    done: int = Field(ge=0, description="Tickets completed by this round")


class FlowMetrics(BaseModel):
    """Evaluation numbers for one session's tickets"""

    throughput: list[ThroughputPoint]
    lead_times: list[int]
    average_lead_time: float
    predictability: float = Field(description="Sample standard deviation of lead times")
    cumulative_flow: list[CumulativeFlowPoint]

    @property
    def finished_count(self) -> int:
        return len(self.lead_times)


class SessionComparison(BaseModel):
    """Metrics for both archived sessions, where available"""

    session1: FlowMetrics | None = None
    session2: FlowMetrics | None = None


def compute_flow_metrics(tickets: Sequence[Ticket], rounds: int = MAX_ROUNDS) -> FlowMetrics:
    """
    Compute flow metrics for a set of tickets.

    Lead time is completed_round - created_round for every done ticket that
    has both rounds recorded. Predictability is the sample standard deviation
    of those lead times (0 with fewer than two).

    Args:
        tickets: Tickets to evaluate (live or archived)
        rounds: Number of rounds to report per-round series for

    Returns:
        FlowMetrics
    """
    finished = [t for t in tickets if t.is_done and t.completed_round is not None]
    lead_times = [t.completed_round - t.created_round for t in finished]

    average = statistics.fmean(lead_times) if lead_times else 0.0
    spread = statistics.stdev(lead_times) if len(lead_times) > 1 else 0.0

    throughput = []
    cumulative_flow = []
    for r in range(1, rounds + 1):
        throughput.append(ThroughputPoint(
            round=r,
            finished=sum(1 for t in finished if t.completed_round <= r),
        ))
        cumulative_flow.append(CumulativeFlowPoint(
            round=r,
            in_progress=sum(
                1 for t in tickets
                if t.in_progress_entered_round is not None and t.in_progress_entered_round <= r
            ),
            done=sum(
                1 for t in tickets
                if t.completed_round is not None and t.completed_round <= r
            ),
        ))

    return FlowMetrics(
        throughput=throughput,
        lead_times=lead_times,
        average_lead_time=average,
        predictability=spread,
        cumulative_flow=cumulative_flow,
    )


def compare_sessions(state: GameState, rounds: int = MAX_ROUNDS) -> SessionComparison:
    """Metrics for each archived session present in the state"""
    return SessionComparison(
        session1=(
            compute_flow_metrics(state.session1_tickets, rounds)
            if state.session1_tickets is not None else None
        ),
        session2=(
            compute_flow_metrics(state.session2_tickets, rounds)
            if state.session2_tickets is not None else None
        ),
    )
