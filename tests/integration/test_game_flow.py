# ABOUTME: Integration tests playing whole games through the GameEngine facade.
# ABOUTME: Covers the four-player session 1 run with scripted events, session 2 helping, blockers and undo.

from kanban_game.engine.allocation import AllocationOutcome
from kanban_game.engine.metrics import compare_sessions
from kanban_game.models.game_state import MAX_ROUNDS
from kanban_game.models.ticket import Ticket, TicketStatus, TicketType


class TestFourPlayerRun:
    """Integration tests for a complete four-player session 1"""

    def test_session1_to_session2(self, four_player_engine):
        """
        Test a full session 1:
        - Each player finishes one ticket in rounds 1-2
        - Round 4 brings 3 urgent tickets, round 5 brings 3 fixed-date tickets
        - Finishing round 10 archives the board and starts session 2
        """
        game = four_player_engine
        tickets = [game.add_ticket() for _ in range(4)]
        players = [1, 2, 3, 4]

        # Round 1: start work and fill phase1
        for player_id, ticket in zip(players, tickets):
            game.place_ticket(ticket.id, TicketStatus.PHASE1, player_id)
            assert game.roll_dice(player_id, 6) == 6
            result = game.spend_die(ticket.id, player_id)
            assert result.applied == 6
            game.advance_ticket(ticket.id, player_id)
            game.advance_ticket(ticket.id, player_id)
            assert game.state.find_ticket(ticket.id).status == TicketStatus.PHASE2

        # Round 2: finish phase2
        game.next_round()
        for player_id, ticket in zip(players, tickets):
            game.roll_dice(player_id, 6)
            result = game.spend_die(ticket.id, player_id)
            assert result.target == "phase2"
            game.advance_ticket(ticket.id, player_id)

        for ticket in tickets:
            finished = game.state.find_ticket(ticket.id)
            assert finished.status == TicketStatus.DONE
            assert finished.completed_round == 2

        # Round 3: nothing in work, so nothing to block
        game.next_round()
        assert not any(t.has_blocker for t in game.state.tickets)

        game.next_round()
        urgent = [t for t in game.state.tickets if t.type == TicketType.URGENT]
        assert [t.id for t in urgent] == ["5", "6", "7"]
        assert all(t.created_round == 3 for t in urgent)

        game.next_round()
        fixed = [t for t in game.state.tickets if t.type == TicketType.FIXED_DATE]
        assert len(fixed) == 3
        assert all(t.created_round == 4 for t in fixed)

        while game.state.round < MAX_ROUNDS:
            game.next_round()
        board = [t.model_copy(deep=True) for t in game.state.tickets]

        game.next_round()

        state = game.state
        assert state.session == 2
        assert state.round == 1
        assert state.tickets == []
        assert state.session1_tickets == board
        assert all(not p.has_rolled_this_round for p in state.players)

        session1 = compare_sessions(state).session1
        assert session1.lead_times == [1, 1, 1, 1]
        assert session1.throughput[-1].finished == 4

    def test_blockers_appear_on_work_in_progress(self, four_player_engine):
        """Test round 3 blocks ceil(30%) of tickets in phase1/phase2"""
        game = four_player_engine
        for player_id in [1, 2, 3, 4]:
            ticket = game.add_ticket()
            game.place_ticket(ticket.id, TicketStatus.PHASE1, player_id)

        game.next_round()
        game.next_round()

        blocked = [t for t in game.state.tickets if t.has_blocker]
        assert len(blocked) == 2


class TestCollaborativeSession:
    """Integration tests for session 2 helping and undo"""

    def test_helper_and_owner_share_a_ticket(self, four_player_engine):
        """
        Test session 2 collaboration:
        - Player 2 joins player 1's ticket as helper; a 5 is worth 2
        - Player 1's 6 fills phase1 with 2 left over
        - The ticket goes straight from phase1 to phase2
        - Undo reverts player 1's last spend only
        """
        game = four_player_engine
        game.skip_to_session2()
        ticket = game.add_ticket()

        game.place_ticket(ticket.id, TicketStatus.PHASE1, 1)
        game.place_ticket(ticket.id, TicketStatus.PHASE1, 2)
        assert game.state.find_ticket(ticket.id).assigned_to2 == 2

        game.roll_dice(2, 5)
        helper_result = game.spend_die(ticket.id, 2)
        assert helper_result.effective_capacity == 2
        assert game.state.find_ticket(ticket.id).points.phase1 == 2

        game.roll_dice(1, 6)
        owner_result = game.spend_die(ticket.id, 1)
        assert owner_result.applied == 4
        assert game.state.dice_values[1] == 2

        game.advance_ticket(ticket.id, 1)
        assert game.state.find_ticket(ticket.id).status == TicketStatus.PHASE2

        game.spend_die(ticket.id, 1)
        assert game.state.find_ticket(ticket.id).points.phase2 == 2
        assert 1 not in game.state.dice_values

        game.undo(1)
        assert game.state.find_ticket(ticket.id).points.phase2 == 0
        assert game.state.dice_values[1] == 2

    def test_blocked_ticket_needs_a_four(self, four_player_engine):
        """Test a 3 bounces off a blocker and a 4 clears it"""
        game = four_player_engine
        game.state.tickets.append(
            Ticket(id="20", status=TicketStatus.PHASE1, assigned_to=1, has_blocker=True)
        )

        game.set_dice_value(1, 3)
        assert game.spend_die("20", 1).outcome == AllocationOutcome.REJECTED
        game.move_ticket("20", TicketStatus.CHECK, 1)
        assert game.state.find_ticket("20").status == TicketStatus.PHASE1

        game.set_dice_value(1, 4)
        assert game.spend_die("20", 1).outcome == AllocationOutcome.BLOCKER_CLEARED
        assert game.state.find_ticket("20").points.phase1 == 0
        assert 1 not in game.state.dice_values

        game.move_ticket("20", TicketStatus.CHECK, 1)
        assert game.state.find_ticket("20").status == TicketStatus.CHECK

    def test_undo_single_actor_is_exact_inverse(self, four_player_engine):
        """Test a run of actions by one player unwinds step by step"""
        game = four_player_engine
        ticket = game.add_ticket()
        states = [game.state.model_copy(deep=True)]

        game.place_ticket(ticket.id, TicketStatus.PHASE1, 1)
        states.append(game.state.model_copy(deep=True))
        game.roll_dice(1, 3)
        states.append(game.state.model_copy(deep=True))
        game.spend_die(ticket.id, 1)

        for expected in reversed(states):
            game.undo(1)
            assert game.state == expected

        game.undo(1)
        assert game.state == states[0]
