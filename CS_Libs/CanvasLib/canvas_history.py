"""
Linear undo history for the drawing canvas.

The history is an owned list of immutable full-resolution snapshots plus a
cursor. The snapshot at the cursor always matches the live surface.
Committing while the cursor is behind the end drops the redo tail first.
The list is capped; once the cap is exceeded the oldest snapshot is evicted.

Classes:
    HistorySnapshot: Immutable copy of surface pixels
    CanvasHistory: Snapshot list with cursor
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from CS_Libs.constants import MAX_HISTORY_ENTRIES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistorySnapshot:
    """Pixel content of a surface at one point in time.

    Attributes:
        pixels: Raw pixel buffer (as returned by PIL Image.tobytes())
        size: (width, height) of the buffer
        mode: PIL image mode of the buffer
        label: What produced the snapshot ('initial', 'stroke', 'clear')
    """
    pixels: bytes
    size: Tuple[int, int]
    mode: str
    label: str = ""


class CanvasHistory:
    """
    Ordered snapshots with a cursor for undo and redo.

    Example:
        >>> history = CanvasHistory(max_entries=50)
        >>> history.commit(surface.snapshot("initial"))
        >>> history.commit(surface.snapshot("stroke"))
        >>> previous = history.undo()
        >>> surface.restore(previous)
    """

    def __init__(self, max_entries: int = MAX_HISTORY_ENTRIES):
        if int(max_entries) < 2:
            raise ValueError(f"max_entries must be at least 2, got {max_entries}")
        self._max_entries = int(max_entries)
        self._entries: List[HistorySnapshot] = []
        self._cursor = -1

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> Optional[HistorySnapshot]:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return 0 <= self._cursor < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> HistorySnapshot:
        return self._entries[index]

    def commit(self, snapshot: HistorySnapshot) -> None:
        """
        Append a snapshot after the cursor and move the cursor onto it.

        Entries after the cursor are discarded first. If the list grows past
        max_entries the oldest entry is evicted.
        """
        dropped = len(self._entries) - (self._cursor + 1)
        if dropped > 0:
            del self._entries[self._cursor + 1:]
            logger.debug(f"Discarded {dropped} redo entries")

        self._entries.append(snapshot)

        overflow = len(self._entries) - self._max_entries
        if overflow > 0:
            del self._entries[:overflow]
            logger.debug(f"Evicted {overflow} oldest history entries")

        self._cursor = len(self._entries) - 1
        logger.debug(
            f"Committed '{snapshot.label}' snapshot "
            f"({self._cursor + 1}/{len(self._entries)})"
        )

    def undo(self) -> Optional[HistorySnapshot]:
        """
        Step the cursor back one entry.

        Returns:
            The snapshot now at the cursor, or None if already at the first entry
        """
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> Optional[HistorySnapshot]:
        """
        Step the cursor forward one entry.

        Returns:
            The snapshot now at the cursor, or None if already at the last entry
        """
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    def reset(self, snapshot: HistorySnapshot) -> None:
        """Drop every entry and start over from a single snapshot."""
        self._entries = [snapshot]
        self._cursor = 0

    def clear(self) -> None:
        self._entries = []
        self._cursor = -1
