# =========================================================
# --- core_undo.py ---
# =========================================================

from collections import deque

from .state import GameState

# =========================================================

class Undo:
    """
    Snapshot-based undo manager for Backgammon.

    Keeps a linear stack of committed states for the current turn. The
    stack is cleared on every new roll, so undo never crosses a turn.
    """

    def __init__(self, max_snapshots: int = 8) -> None:
        """
        Initialize the Undo manager.

        Args:
            max_snapshots: Maximum number of states to keep (a turn has at most 4 moves).
        """
        self.snapshots: deque[GameState] = deque(maxlen=max_snapshots)

    def __len__(self) -> int:
        return len(self.snapshots)

    def record_snapshot(self, state: GameState) -> None:
        """
        Record a full snapshot of the current state.

        Args:
            state: The GameState to snapshot.
        """
        self.snapshots.append(state.copy())

    def undo_last_snapshot(self, state: GameState) -> GameState:
        """
        Revert the state in place to the last recorded snapshot.

        Args:
            state: The GameState to revert.

        Returns:
            The snapshot that was restored.

        Raises:
            ValueError: If no snapshots are available.
        """
        if not self.snapshots:
            raise ValueError("Nothing to undo")

        snapshot: GameState = self.snapshots.pop()
        state.restore(snapshot)
        return snapshot

    def clear(self) -> None:
        """Forget every snapshot."""
        self.snapshots.clear()
