# ABOUTME: Unit tests for per-player undo history.
# ABOUTME: Tests snapshot capture, one-step restore, row isolation and empty-history behaviour.

from kanban_game.engine.history import PlayerHistory
from kanban_game.models.ticket import Ticket, TicketStatus
from tests.conftest import make_state


class TestPlayerHistory:
    """Test suite for PlayerHistory"""

    def test_save_unknown_player_ignored(self):
        """Test nothing is stored for players not in the game"""
        history = PlayerHistory()
        assert history.save(make_state(), 42) is False
        assert history.depth(42) == 0

    def test_undo_with_empty_history_returns_same_state(self):
        """Test empty undo is idempotent"""
        history = PlayerHistory()
        state = make_state([Ticket(id="1")])
        assert history.undo(state, 1) is state

    def test_undo_restores_board_and_dice(self):
        """Test undo is the inverse of one action"""
        history = PlayerHistory()
        before = make_state([Ticket(id="1", status=TicketStatus.PHASE1)], dice={1: 5})
        history.save(before, 1)

        after = before.model_copy(deep=True)
        after.find_ticket("1").points.phase1 = 5
        after.dice_values = {}
        after.find_player(1).has_rolled_this_round = True

        restored = history.undo(after, 1)

        assert restored.tickets == before.tickets
        assert restored.dice_values == {1: 5}
        assert restored.find_player(1) == before.find_player(1)
        assert history.depth(1) == 0

    def test_undo_leaves_other_player_rows(self):
        """Test only the undoing player's row is restored"""
        history = PlayerHistory()
        before = make_state()
        history.save(before, 1)

        after = before.model_copy(deep=True)
        after.find_player(2).current_dice_roll = 6

        restored = history.undo(after, 1)
        assert restored.find_player(2).current_dice_roll == 6

    def test_undo_for_removed_player_restores_no_row(self):
        """Test a removed player is not brought back"""
        history = PlayerHistory()
        before = make_state([Ticket(id="1")])
        history.save(before, 2)

        after = before.model_copy(deep=True)
        after.players = [p for p in after.players if p.id != 2]

        restored = history.undo(after, 2)
        assert restored.find_player(2) is None
        assert restored.tickets == before.tickets

    def test_snapshot_is_deep(self):
        """Test later edits to the live state do not leak into history"""
        history = PlayerHistory()
        state = make_state([Ticket(id="1", status=TicketStatus.PHASE1)])
        history.save(state, 1)
        state.find_ticket("1").points.phase1 = 3

        restored = history.undo(state, 1)
        assert restored.find_ticket("1").points.phase1 == 0

    def test_stacks_are_per_player(self):
        """Test depth is tracked separately and clear empties all"""
        history = PlayerHistory()
        state = make_state()
        history.save(state, 1)
        history.save(state, 1)
        history.save(state, 2)

        assert history.depth(1) == 2
        assert history.depth(2) == 1

        history.clear()
        assert history.depth(1) == 0
        assert history.depth(2) == 0
