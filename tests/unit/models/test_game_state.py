# ABOUTME: Unit tests for the GameState aggregate, Player and HistoryEntry models.
# ABOUTME: Tests round/session bounds, lookups and snapshot round-tripping through JSON.

import json

import pytest
from pydantic import ValidationError

from kanban_game.models.game_state import MAX_ROUNDS, GameState, HistoryEntry, Player
from kanban_game.models.ticket import Ticket, TicketStatus


class TestPlayer:
    """Test suite for Player model"""

    def test_defaults(self):
        """Test a new player has no die, ticket or roll"""
        player = Player(id=1, name="Alice")
        assert player.current_dice_roll is None
        assert player.current_ticket is None
        assert player.is_host is False
        assert player.has_rolled_this_round is False

    def test_ids_are_one_based(self):
        """Test player id 0 is rejected"""
        with pytest.raises(ValidationError):
            Player(id=0, name="Nobody")

    def test_dice_roll_bounds(self):
        """Test die face must be 1-6"""
        with pytest.raises(ValidationError):
            Player(id=1, name="Alice", current_dice_roll=7)


class TestGameState:
    """Test suite for GameState aggregate"""

    def test_defaults(self):
        """Test a fresh state is the session 1 lobby"""
        state = GameState()
        assert state.round == 1
        assert state.session == 1
        assert state.players == []
        assert state.tickets == []
        assert state.is_game_started is False
        assert state.host_id == 1
        assert state.dice_values == {}
        assert state.session1_tickets is None
        assert state.session2_tickets is None

    def test_round_bounds(self):
        """Test round must stay within 1-10"""
        with pytest.raises(ValidationError):
            GameState(round=MAX_ROUNDS + 1)
        with pytest.raises(ValidationError):
            GameState(round=0)

    def test_session_bounds(self):
        """Test there is no session 3"""
        with pytest.raises(ValidationError):
            GameState(session=3)

    def test_round_validated_on_assignment(self):
        """Test assignment outside bounds is rejected"""
        state = GameState()
        with pytest.raises(ValidationError):
            state.round = 11

    def test_find_ticket_and_player(self):
        """Test lookups by id"""
        state = GameState(
            players=[Player(id=1, name="Alice"), Player(id=3, name="Carol")],
            tickets=[Ticket(id="1"), Ticket(id="2")],
        )
        assert state.find_ticket("2").id == "2"
        assert state.find_ticket("99") is None
        assert state.find_player(3).name == "Carol"
        assert state.find_player(2) is None

    def test_is_collaborative(self):
        """Test session 2 is the collaborative session"""
        assert GameState(session=2).is_collaborative
        assert not GameState(session=1).is_collaborative

    def test_snapshot_top_level_keys(self):
        """Test snapshot uses the camelCase wire shape"""
        snapshot = GameState().to_snapshot()
        assert set(snapshot) == {
            "round",
            "session",
            "players",
            "tickets",
            "isGameStarted",
            "hostId",
            "diceValues",
            "session1Tickets",
            "session2Tickets",
        }

    def test_snapshot_survives_json_transport(self):
        """Test a snapshot sent as JSON reads back to an equal state"""
        state = GameState(
            round=4,
            players=[Player(id=1, name="Alice", is_host=True, has_rolled_this_round=True)],
            tickets=[Ticket(id="1", status=TicketStatus.PHASE1, assigned_to=1)],
            is_game_started=True,
            dice_values={1: 4},
        )
        received = json.loads(json.dumps(state.to_snapshot()))
        restored = GameState.from_snapshot(received)
        assert restored == state
        assert restored.dice_values == {1: 4}


class TestHistoryEntry:
    """Test suite for HistoryEntry model"""

    def test_holds_board_and_player_row(self):
        """Test entry carries tickets, dice pool and one player"""
        entry = HistoryEntry(
            tickets=[Ticket(id="1")],
            dice_values={1: 3},
            player=Player(id=1, name="Alice"),
        )
        assert entry.tickets[0].id == "1"
        assert entry.dice_values == {1: 3}
        assert entry.player.name == "Alice"
