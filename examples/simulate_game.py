#!/usr/bin/env python3
# ABOUTME: Demo script playing both sessions of the flow game with simple bot players.
# ABOUTME: Prints the per-session flow metrics so the individual and collaborative runs can be compared.

"""
Demo of the Kanban Flow Game engine

Four bots play ten rounds of individual work followed by ten rounds of
collaborative work, without a relay. Each bot keeps one ticket, spends its die
on it and pushes it along the pipeline; in session 2 a bot without work of its
own helps the oldest ticket in progress.
"""

import random
import sys

from kanban_game.engine import GameEngine, compare_sessions
from kanban_game.engine.metrics import FlowMetrics
from kanban_game.models.ticket import MAX_PHASE_POINTS, Ticket, TicketStatus
from kanban_game.utils.logging import setup_logging

BOT_NAMES = ["Ada", "Grace", "Linus", "Barbara"]


def _own_ticket(engine: GameEngine, player_id: int) -> Ticket | None:
    for ticket in engine.state.tickets:
        if ticket.assigned_to == player_id and not ticket.is_done:
            return ticket
    return None


def _pick_up_work(engine: GameEngine, player_id: int) -> Ticket | None:
    """Claim an unassigned todo ticket, or open a new one"""
    for ticket in engine.state.tickets:
        if ticket.status == TicketStatus.TODO and ticket.assigned_to is None:
            break
    else:
        ticket = engine.add_ticket()
    engine.place_ticket(ticket.id, TicketStatus.PHASE1, player_id)
    return engine.state.find_ticket(ticket.id)


def _oldest_in_progress(engine: GameEngine, player_id: int) -> Ticket | None:
    candidates = [
        t for t in engine.state.tickets
        if t.assigned_to not in (None, player_id) and not t.is_done and t.status != TicketStatus.TODO
    ]
    return min(candidates, key=lambda t: t.created_round, default=None)


def _push_along(engine: GameEngine, ticket_id: str, player_id: int) -> None:
    """Advance a ticket while the points for its current phase are complete"""
    while True:
        ticket = engine.state.find_ticket(ticket_id)
        if ticket is None or ticket.is_done or ticket.has_blocker:
            return
        if ticket.status == TicketStatus.PHASE1 and ticket.points.phase1 < MAX_PHASE_POINTS:
            return
        if ticket.status == TicketStatus.PHASE2 and ticket.points.phase2 < MAX_PHASE_POINTS:
            return
        before = ticket.status
        engine.advance_ticket(ticket_id, player_id)
        if engine.state.find_ticket(ticket_id).status == before:
            return


def play_turn(engine: GameEngine, player_id: int) -> None:
    """One bot's turn: get a ticket, roll, spend the die, move the ticket on"""
    ticket = _own_ticket(engine, player_id)
    if ticket is None and engine.state.is_collaborative:
        ticket = _oldest_in_progress(engine, player_id)
        if ticket is not None:
            engine.assign_helper(ticket.id, player_id)
    if ticket is None:
        ticket = _pick_up_work(engine, player_id)

    if engine.roll_dice(player_id) is None:
        return
    result = engine.spend_die(ticket.id, player_id)
    if result.consumed:
        _push_along(engine, ticket.id, player_id)


def play_run(seed: int) -> GameEngine:
    engine = GameEngine(rng=random.Random(seed))
    for name in BOT_NAMES:
        engine.add_player(name)
    engine.start_game()

    while not engine.is_run_complete():
        for player in list(engine.state.players):
            play_turn(engine, player.id)
        engine.next_round()
    return engine


def print_metrics(title: str, metrics: FlowMetrics | None) -> None:
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)
    if metrics is None:
        print("  (not played)")
        return
    print(f"  Finished tickets:     {metrics.finished_count}")
    print(f"  Average lead time:    {metrics.average_lead_time:.2f} rounds")
    print(f"  Predictability (sd):  {metrics.predictability:.2f}")
    print("  Round  Finished  In progress  Done")
    for point, flow in zip(metrics.throughput, metrics.cumulative_flow):
        print(f"  {point.round:>5}  {point.finished:>8}  {flow.in_progress:>11}  {flow.done:>4}")


def main() -> int:
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 7
    setup_logging(log_level="WARNING")

    engine = play_run(seed)
    comparison = compare_sessions(engine.state)
    print_metrics("SESSION 1: individual work", comparison.session1)
    print_metrics("SESSION 2: collaborative work", comparison.session2)
    return 0


if __name__ == "__main__":
    sys.exit(main())
