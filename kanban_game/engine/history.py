# ABOUTME: Per-player undo stacks holding deep copies of the board taken before undoable actions.
# ABOUTME: Undo restores the shared tickets and dice pool plus only the acting player's own row.

from loguru import logger

from kanban_game.models.game_state import GameState, HistoryEntry


class PlayerHistory:
    """
    Undo history keyed by player id.

    Each entry is a whole-board snapshot, so undoing one player's action can
    also discard changes other players made after it was taken.
    """

    def __init__(self) -> None:
        self._stacks: dict[int, list[HistoryEntry]] = {}

    def save(self, state: GameState, player_id: int) -> bool:
        """
        Push a snapshot of the current board for a player.

        Args:
            state: State before the action
            player_id: Player performing the action

        Returns:
            True if saved, False if the player is unknown
        """
        player = state.find_player(player_id)
        if player is None:
            logger.debug(f"History not saved: player {player_id} unknown")
            return False

        entry = HistoryEntry(
            tickets=[ticket.model_copy(deep=True) for ticket in state.tickets],
            dice_values=dict(state.dice_values),
            player=player.model_copy(deep=True),
        )
        self._stacks.setdefault(player_id, []).append(entry)
        return True

    def undo(self, state: GameState, player_id: int) -> GameState:
        """
        Pop the player's latest snapshot and restore it.

        Args:
            state: Current state
            player_id: Player undoing their last action

        Returns:
            Restored state, or the same state when the player has no history
        """
        stack = self._stacks.get(player_id)
        if not stack:
            logger.debug(f"Undo ignored: no history for player {player_id}")
            return state

        entry = stack.pop()
        new_state = state.model_copy(deep=True)
        new_state.tickets = [ticket.model_copy(deep=True) for ticket in entry.tickets]
        new_state.dice_values = dict(entry.dice_values)
        new_state.players = [
            entry.player.model_copy(deep=True) if player.id == player_id else player
            for player in new_state.players
        ]

        logger.info(f"Player {player_id} undid their last action ({len(stack)} left)")
        return new_state

    def depth(self, player_id: int) -> int:
        """Number of undo steps available to a player"""
        return len(self._stacks.get(player_id, []))

    def clear(self) -> None:
        """Forget every player's history"""
        self._stacks.clear()
