"""Character-cell screen model: cells, rows and a scrolling grid with scrollback."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, NamedTuple


class CellFlags(enum.IntFlag):
    """Styles that affect a rendered cell."""

    BOLD = 0b0000_0001
    ITALIC = 0b0000_0010
    UNDERLINE = 0b0000_0100
    INVERSE = 0b0000_1000
    FAINT = 0b0001_0000
    UNDERCURL = 0b0010_0000


class Rgb(NamedTuple):
    """24-bit RGB colour."""

    r: int
    g: int
    b: int


_DEFAULT_FG = Rgb(0xC0, 0xC0, 0xC0)
_DEFAULT_BG = Rgb(0x00, 0x00, 0x00)


@dataclass(frozen=True, slots=True)
class Cell:
    """One printable cell on the screen."""

    ch: str = " "
    fg: Rgb = _DEFAULT_FG
    bg: Rgb = _DEFAULT_BG
    flags: CellFlags = CellFlags(0)
    link_id: int | None = None

    def __hash__(self) -> int:
        # The character is left out: the hash describes how the cell is styled.
        return hash((self.fg, self.bg, int(self.flags), self.link_id))


@dataclass(eq=False)
class Row:
    """A line of cells plus its dirty flag and an optional cached rendering."""

    cells: list[Cell] = field(default_factory=list)
    is_dirty: bool = True
    render_cache: Any = None

    def __hash__(self) -> int:
        return hash(tuple(self.cells))

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def mark_dirty(self) -> None:
        self.is_dirty = True

    def text(self) -> str:
        return "".join(cell.ch for cell in self.cells)


def blank_row(cols: int, fg: Rgb, bg: Rgb) -> Row:
    """Return a dirty row of ``cols`` blank cells in the given colours."""
    blank = Cell(fg=fg, bg=bg)
    return Row(cells=[blank] * cols, is_dirty=True)


class ScreenGrid:
    """The visible screen plus scrollback, stored as one sequence of rows.

    ``lines`` holds the scrollback rows followed by the ``rows`` visible rows.
    Rows scrolled out of the scroll region are pushed onto the front of
    ``lines`` and the front is trimmed to the scrollback capacity.
    """

    def __init__(
        self,
        cols: int,
        rows: int,
        scrollback: int,
        default_fg: Rgb,
        default_bg: Rgb,
    ) -> None:
        if rows < 1:
            raise ValueError("a grid needs at least one row")
        self.cols = cols
        self.rows = rows
        self.lines: deque[Row] = deque(blank_row(cols, default_fg, default_bg) for _ in range(rows))
        self.cur_x = 0
        self.cur_y = 0
        self.scroll_top = 0
        self.scroll_bottom = rows - 1
        self.full_redraw_needed = True
        self._scrollback_capacity = scrollback
        self._default_fg = default_fg
        self._default_bg = default_bg
        self._deferred_wrap = False

    def _blank_cell(self) -> Cell:
        return Cell(fg=self._default_fg, bg=self._default_bg)

    def _blank_row(self) -> Row:
        return blank_row(self.cols, self._default_fg, self._default_bg)

    def _set_visible_row(self, y: int, row: Row) -> None:
        index = self.scrollback_len() + y
        if 0 <= y and index < len(self.lines):
            self.lines[index] = row

    def clear_all_dirty_flags(self) -> None:
        self.full_redraw_needed = False
        for row in self.lines:
            row.is_dirty = False

    def put_char_ex(
        self,
        ch: str,
        fg: Rgb,
        bg: Rgb,
        flags: CellFlags = CellFlags(0),
        link_id: int | None = None,
    ) -> None:
        """Write one glyph with its colours, flags and link at the cursor."""
        if self._deferred_wrap:
            self.line_feed()
            self.cur_x = 0
            self._deferred_wrap = False

        x, y = self.cur_x, self.cur_y
        if x < self.cols:
            row = self.visible_row(y)
            if row is not None:
                row.cells[x] = Cell(ch, fg, bg, flags, link_id)
                row.mark_dirty()

        self._advance_cursor()

    def resize(self, cols: int, rows: int) -> None:
        """Clear everything and allocate blank rows for the new size."""
        if self.cols == cols and self.rows == rows:
            return
        if rows < 1:
            raise ValueError("a grid needs at least one row")

        self.cols = cols
        self.rows = rows
        self.lines.clear()
        self.lines.extend(self._blank_row() for _ in range(rows))

        self.cur_x = 0
        self.cur_y = 0
        self.scroll_top = 0
        self.scroll_bottom = rows - 1
        self._deferred_wrap = False
        self.full_redraw_needed = True

    def set_cursor_pos(self, x: int, y: int) -> None:
        """Move the cursor, clamped to the visible area."""
        row = self.visible_row(self.cur_y)
        if row is not None:
            row.is_dirty = True

        self._deferred_wrap = False
        self.cur_x = min(x, max(self.cols - 1, 0))
        self.cur_y = min(y, self.rows - 1)

        row = self.visible_row(self.cur_y)
        if row is not None:
            row.is_dirty = True

    def clear_line(self) -> None:
        """Clear the entire line the cursor is on."""
        self._deferred_wrap = False
        if self.visible_row(self.cur_y) is not None:
            self._set_visible_row(self.cur_y, self._blank_row())

    def clear_line_to_cursor(self) -> None:
        """Erase from the start of the line up to and including the cursor."""
        self._deferred_wrap = False
        row = self.visible_row(self.cur_y)
        if row is None:
            return
        blank = self._blank_cell()
        end = min(self.cur_x + 1, self.cols)
        row.cells[:end] = [blank] * end
        row.mark_dirty()

    def clear_line_from_cursor(self) -> None:
        """Erase from the cursor to the end of the line."""
        self._deferred_wrap = False
        row = self.visible_row(self.cur_y)
        if row is None:
            return
        blank = self._blank_cell()
        for x in range(self.cur_x, self.cols):
            row.cells[x] = blank
        row.mark_dirty()

    def clear_to_cursor(self) -> None:
        """Erase from the top of the scroll region to the cursor."""
        self._deferred_wrap = False
        for y in range(self.scroll_top, self.cur_y):
            if self.visible_row(y) is not None:
                self._set_visible_row(y, self._blank_row())
        self.clear_line_to_cursor()

    def clear_from_cursor(self) -> None:
        """Erase from the cursor to the bottom of the scroll region."""
        self._deferred_wrap = False
        self.clear_line_from_cursor()
        for y in range(self.cur_y + 1, self.scroll_bottom + 1):
            if self.visible_row(y) is not None:
                self._set_visible_row(y, self._blank_row())

    def clear_all(self) -> None:
        """Blank the scroll region and home the cursor to its top."""
        for y in range(self.scroll_top, self.scroll_bottom + 1):
            if self.visible_row(y) is not None:
                self._set_visible_row(y, self._blank_row())

        self.set_cursor_pos(0, self.scroll_top)
        self._deferred_wrap = False
        self.full_redraw_needed = True

    def _region_bounds(self, n: int) -> tuple[int, int, int] | None:
        y = self.cur_y
        if y < self.scroll_top or y > self.scroll_bottom:
            return None
        n = min(n, self.scroll_bottom - y + 1)
        if n == 0:
            return None
        start = self.scrollback_len() + y
        end = self.scrollback_len() + self.scroll_bottom
        if end >= len(self.lines):
            return None
        return start, end, n

    def insert_lines(self, n: int) -> None:
        """Insert ``n`` blank lines at the cursor row, within the scroll region."""
        self._deferred_wrap = False
        bounds = self._region_bounds(n)
        if bounds is None:
            return
        start, end, n = bounds
        region = [self.lines[i] for i in range(start, end + 1)]
        region = [self._blank_row() for _ in range(n)] + region[: len(region) - n]
        for offset, row in enumerate(region):
            row.is_dirty = True
            self.lines[start + offset] = row

    def delete_lines(self, n: int) -> None:
        """Delete ``n`` lines at the cursor row, filling the region bottom with blanks."""
        self._deferred_wrap = False
        bounds = self._region_bounds(n)
        if bounds is None:
            return
        start, end, n = bounds
        region = [self.lines[i] for i in range(start, end + 1)]
        region = region[n:] + [self._blank_row() for _ in range(n)]
        for offset, row in enumerate(region):
            row.is_dirty = True
            self.lines[start + offset] = row

    def insert_chars(self, n: int) -> None:
        """Insert ``n`` blank cells at the cursor, shifting the rest right."""
        self._deferred_wrap = False
        row = self.visible_row(self.cur_y)
        if row is None:
            return
        x = self.cur_x
        if x < self.cols and n > 0:
            row.cells[x:x] = [self._blank_cell()] * n
            del row.cells[self.cols :]
        row.mark_dirty()

    def delete_chars(self, n: int) -> None:
        """Delete ``n`` cells at the cursor, padding the line end with blanks."""
        self._deferred_wrap = False
        row = self.visible_row(self.cur_y)
        if row is None:
            return
        x = self.cur_x
        if n > 0:
            del row.cells[x : x + n]
        missing = self.cols - len(row.cells)
        if missing > 0:
            row.cells.extend([self._blank_cell()] * missing)
        row.mark_dirty()

    def line_feed(self) -> None:
        """Handle a line feed; a pending wrap is consumed instead of moving."""
        if self._deferred_wrap:
            self._deferred_wrap = False
            return

        if self.cur_y == self.scroll_bottom:
            self.scroll_up(1)
        else:
            self.cur_y += 1

    def scroll_up(self, n: int) -> None:
        """Scroll the scroll region up by ``n`` lines."""
        n = min(n, max(self.scroll_bottom - self.scroll_top, 0) + 1)
        if n <= 0:
            return

        top_idx = self.scrollback_len() + self.scroll_top
        scrolled_off: list[Row] = []
        if len(self.lines) >= top_idx + n:
            for _ in range(n):
                scrolled_off.append(self.lines[top_idx])
                del self.lines[top_idx]

        for _ in range(n):
            bottom_idx = self.scrollback_len() + self.scroll_bottom + 1
            self.lines.insert(min(bottom_idx, len(self.lines)), self._blank_row())

        if self._scrollback_capacity > 0:
            for row in scrolled_off:
                self._push_scrollback(row)

    def _advance_cursor(self) -> None:
        if self.cur_x + 1 >= self.cols:
            self._deferred_wrap = True
        else:
            self.cur_x += 1

    def visible_row(self, y: int) -> Row | None:
        """Return visible row ``y`` (0 is the top of the screen), if present."""
        index = self.scrollback_len() + y
        if y < 0 or index >= len(self.lines):
            return None
        return self.lines[index]

    def scrollback_len(self) -> int:
        return max(len(self.lines) - self.rows, 0)

    def get_display_row(self, y: int, offset: int) -> Row | None:
        """Return screen row ``y`` when the view is scrolled back by ``offset`` lines."""
        top_visible = max(len(self.lines) - self.rows, 0)
        index = max(top_visible - offset, 0) + y
        if y < 0 or index >= len(self.lines):
            return None
        return self.lines[index]

    def _push_scrollback(self, row: Row) -> None:
        self.lines.appendleft(row)
        while len(self.lines) > self.rows + self._scrollback_capacity:
            self.lines.popleft()