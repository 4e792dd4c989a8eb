# ABOUTME: Shared pytest fixtures for all test modules (unit, integration, contract).
# ABOUTME: Provides seeded random sources, engines with seated players, and state builders.

import itertools
import random
from collections.abc import Callable

import pytest

from kanban_game.config.settings import reset_settings
from kanban_game.engine.game import GameEngine
from kanban_game.models.game_state import GameState, Player
from kanban_game.models.ticket import Ticket, TicketStatus


# --- Helper Functions ---

def make_players(count: int) -> list[Player]:
    """Players 1..count; player 1 hosts"""
    return [
        Player(id=i, name=f"Player {i}", is_host=(i == 1))
        for i in range(1, count + 1)
    ]


def make_state(
    tickets: list[Ticket] | None = None,
    players: int = 2,
    session: int = 1,
    round_number: int = 1,
    dice: dict[int, int] | None = None,
) -> GameState:
    """Started game state with the given tickets and seated players"""
    return GameState(
        round=round_number,
        session=session,
        players=make_players(players),
        tickets=tickets or [],
        is_game_started=True,
        dice_values=dice or {},
    )


def id_issuer(start: int = 100) -> Callable[[], str]:
    """Ticket id source for scheduler calls"""
    counter = itertools.count(start)
    return lambda: str(next(counter))


# --- Settings ---

@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from its own environment"""
    reset_settings()
    yield
    reset_settings()


# --- Randomness ---

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so scenarios are reproducible"""
    return random.Random(20240601)


# --- Engines ---

@pytest.fixture
def engine(rng: random.Random) -> GameEngine:
    """Empty lobby engine"""
    return GameEngine(rng=rng)


@pytest.fixture
def four_player_engine(rng: random.Random) -> GameEngine:
    """Started engine with four seated players"""
    game = GameEngine(rng=rng)
    for name in ["Alice", "Bob", "Carol", "Dave"]:
        game.add_player(name)
    game.start_game()
    return game


@pytest.fixture
def in_progress_ticket() -> Ticket:
    """Ticket in phase1 owned by player 1"""
    return Ticket(
        id="1",
        status=TicketStatus.PHASE1,
        assigned_to=1,
        in_progress_entered_round=1,
    )
