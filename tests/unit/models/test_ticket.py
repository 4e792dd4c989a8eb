# ABOUTME: Unit tests for ticket models: enums, point bounds, frozen type and camelCase aliases.
# ABOUTME: Also covers the legacy 'backlog' status repair applied when reading snapshots.

import pytest
from pydantic import ValidationError

from kanban_game.models.ticket import (
    BLOCKER_THRESHOLD,
    IN_PROGRESS_STATUSES,
    MAX_PHASE_POINTS,
    Ticket,
    TicketPoints,
    TicketStatus,
    TicketType,
)


class TestTicketEnums:
    """Test suite for TicketType and TicketStatus enums"""

    def test_ticket_type_values(self):
        """Test ticket type wire values"""
        assert TicketType.NORMAL.value == "normal"
        assert TicketType.URGENT.value == "urgent"
        assert TicketType("fixed-date") == TicketType.FIXED_DATE

    def test_status_declared_in_pipeline_order(self):
        """Test statuses iterate in pipeline order"""
        assert [s.value for s in TicketStatus] == ["todo", "phase1", "check", "phase2", "done"]

    def test_in_progress_statuses(self):
        """Test which statuses count as work started"""
        assert IN_PROGRESS_STATUSES == {TicketStatus.PHASE1, TicketStatus.CHECK, TicketStatus.PHASE2}

    def test_invalid_status_raises_error(self):
        """Test unknown status value raises error"""
        with pytest.raises(ValueError):
            TicketStatus("review")


class TestTicketPoints:
    """Test suite for TicketPoints bounds"""

    def test_defaults_to_zero(self):
        """Test fresh points are empty"""
        points = TicketPoints()
        assert points.phase1 == 0
        assert points.phase2 == 0

    def test_points_cannot_exceed_max(self):
        """Test phase points are capped at 6 on construction"""
        with pytest.raises(ValidationError):
            TicketPoints(phase1=MAX_PHASE_POINTS + 1)

    def test_points_validated_on_assignment(self):
        """Test assignment past the cap is rejected"""
        points = TicketPoints()
        with pytest.raises(ValidationError):
            points.phase2 = 7


class TestTicket:
    """Test suite for Ticket model"""

    def test_defaults(self):
        """Test a minimal ticket starts in todo, unblocked and unassigned"""
        ticket = Ticket(id="1")
        assert ticket.type == TicketType.NORMAL
        assert ticket.status == TicketStatus.TODO
        assert ticket.has_blocker is False
        assert ticket.blocker_points == 0
        assert ticket.assigned_to is None
        assert ticket.assigned_to2 is None
        assert ticket.created_round == 1
        assert ticket.completed_round is None
        assert ticket.in_progress_entered_round is None

    def test_type_is_immutable(self):
        """Test ticket type cannot change after creation"""
        ticket = Ticket(id="1", type=TicketType.URGENT)
        with pytest.raises(ValidationError):
            ticket.type = TicketType.NORMAL

    def test_blocker_points_bounded(self):
        """Test blocker points above the threshold are rejected"""
        with pytest.raises(ValidationError):
            Ticket(id="1", blocker_points=BLOCKER_THRESHOLD + 1)

    def test_accepts_camel_case_input(self):
        """Test wire aliases populate snake_case attributes"""
        ticket = Ticket.model_validate({
            "id": "3",
            "type": "fixed-date",
            "status": "phase2",
            "points": {"phase1": 6, "phase2": 2},
            "hasBlocker": True,
            "blockerPoints": 0,
            "assignedTo": 1,
            "assignedTo2": 2,
            "createdRound": 5,
        })
        assert ticket.type == TicketType.FIXED_DATE
        assert ticket.has_blocker is True
        assert ticket.assigned_to2 == 2
        assert ticket.points.phase1 == 6
        assert ticket.created_round == 5

    def test_accepts_snake_case_input(self):
        """Test field names are accepted alongside aliases"""
        ticket = Ticket(id="1", has_blocker=True, assigned_to=4)
        assert ticket.has_blocker is True
        assert ticket.assigned_to == 4

    def test_legacy_backlog_status_read_as_todo(self):
        """Test 'backlog' from older snapshots maps to todo"""
        ticket = Ticket.model_validate({"id": "9", "status": "backlog"})
        assert ticket.status == TicketStatus.TODO

    def test_is_done(self):
        """Test is_done property"""
        assert Ticket(id="1", status=TicketStatus.DONE).is_done
        assert not Ticket(id="1", status=TicketStatus.PHASE2).is_done

    def test_serializes_with_camel_case_keys(self):
        """Test dump by alias uses wire names"""
        data = Ticket(id="1", in_progress_entered_round=2).model_dump(by_alias=True, mode="json")
        assert data["inProgressEnteredRound"] == 2
        assert "assignedTo2" in data
        assert "in_progress_entered_round" not in data
