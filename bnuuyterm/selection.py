"""Mouse text selection over the displayed terminal rows."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bnuuyterm.geometry import GridPos, normalize_selection
from bnuuyterm.geometry import Selection as SelectionSpan

if TYPE_CHECKING:
    from bnuuyterm.terminal import TerminalState


def selected_text(term: TerminalState, start: GridPos, end: GridPos) -> str | None:
    """Return the text between two ``(col, row)`` points of the displayed screen.

    The end column is exclusive. Rows are joined with newlines and every row
    but the last loses its trailing whitespace. Returns None when nothing
    was selected.
    """
    (start_col, start_row), (end_col, end_row) = normalize_selection(start, end)
    grid = term.grid()
    parts: list[str] = []

    for y in range(start_row, end_row + 1):
        if y > start_row:
            parts.append("\n")
        row = grid.get_display_row(y, term.scroll_offset)
        if row is None:
            continue
        line_start = start_col if y == start_row else 0
        line_end = end_col if y == end_row else grid.cols
        text = "".join(cell.ch for cell in row.cells[line_start:max(line_end, line_start)])
        parts.append(text.rstrip() if y < end_row else text)

    result = "".join(parts)
    return result or None


class Selection:
    """Tracks a click-and-drag selection between a press and a release."""

    def __init__(self) -> None:
        self.start: GridPos | None = None
        self.end: GridPos | None = None
        self.dragging = False

    def press(self, pos: GridPos) -> None:
        """Start a new selection at ``pos``."""
        self.dragging = True
        self.start = pos
        self.end = pos

    def drag(self, pos: GridPos) -> bool:
        """Extend the selection to ``pos`` while dragging; return whether it was extended."""
        if not self.dragging:
            return False
        self.end = pos
        return True

    def release(self, term: TerminalState) -> str | None:
        """Stop dragging and return the selected text, if any."""
        self.dragging = False
        span = self.span()
        if span is None:
            return None
        return selected_text(term, *span)

    def span(self) -> SelectionSpan | None:
        """Return the selection's two end points, or None before any press."""
        if self.start is None or self.end is None:
            return None
        return self.start, self.end