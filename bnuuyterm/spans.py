"""Styled text spans for a row and the choice of which dirty rows to lay out next."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from bnuuyterm.grid import Cell, CellFlags, Rgb, Row

if TYPE_CHECKING:
    from bnuuyterm.config import Config
    from bnuuyterm.terminal import TerminalState

FallbackLookup = Union[Mapping[str, bool], Callable[[str], bool], None]


@dataclass(frozen=True, slots=True)
class TextSpan:
    """A run of a row's text drawn with one style.

    ``start`` and ``end`` are byte offsets into the UTF-8 encoding of the row
    text. ``fallback`` is set when the run's characters are missing from the
    primary monospace font and must be drawn with a generic font instead.
    """

    start: int
    end: int
    color: Rgb
    bold: bool = False
    italic: bool = False
    fallback: bool = False


def _fallback_test(needs_fallback: FallbackLookup) -> Callable[[str], bool]:
    if needs_fallback is None:
        return lambda ch: False
    if isinstance(needs_fallback, Mapping):
        return lambda ch: bool(needs_fallback.get(ch, False))
    return needs_fallback


def _same_style(a: Cell, b: Cell) -> bool:
    return a.fg == b.fg and a.bg == b.bg and a.flags == b.flags


def style_spans(
    row: Row,
    config: Config,
    cursor_x: int | None = None,
    needs_fallback: FallbackLookup = None,
) -> list[TextSpan]:
    """Split ``row`` into runs of equal style.

    A run breaks where the colours or flags change, where the cursor cell
    starts or ends (``cursor_x`` is the cursor column on this row, or None),
    and where characters switch between the primary and the fallback font.
    """
    cells = row.cells
    if not cells:
        return []

    uses_fallback = _fallback_test(needs_fallback)
    cursor_text = Rgb(*config.colors.cursor_text)

    def make_span(start: int, end: int, cell: Cell, is_cursor: bool) -> TextSpan:
        if is_cursor:
            color = cursor_text
        elif cell.flags & CellFlags.INVERSE:
            color = cell.bg
        else:
            color = cell.fg
        return TextSpan(
            start=start,
            end=end,
            color=color,
            bold=bool(cell.flags & CellFlags.BOLD),
            italic=bool(cell.flags & CellFlags.ITALIC),
            fallback=uses_fallback(cell.ch),
        )

    spans: list[TextSpan] = []
    run_cell = cells[0]
    run_cursor = cursor_x == 0
    run_start = 0
    offset = 0

    for x, cell in enumerate(cells):
        is_cursor = cursor_x == x
        if (
            not _same_style(cell, run_cell)
            or is_cursor != run_cursor
            or uses_fallback(cell.ch) != uses_fallback(run_cell.ch)
        ):
            if offset > run_start:
                spans.append(make_span(run_start, offset, run_cell, run_cursor))
            run_start = offset
            run_cell = cell
            run_cursor = is_cursor
        offset += len(cell.ch.encode("utf-8"))

    if offset > run_start:
        spans.append(make_span(run_start, offset, run_cell, run_cursor))
    return spans


def _priority_order(scrollback_len: int, total: int) -> Iterator[int]:
    yield from range(scrollback_len, total)


def dirty_rows_budgeted(term: TerminalState, line_budget: int) -> tuple[list[int], bool]:
    """Pick at most ``line_budget`` dirty lines of the active grid to lay out.

    Visible lines come first, top to bottom, then scrollback from the newest
    line backwards. Returns the indices into ``grid.lines`` and whether a
    dirty line was found that did not fit in the budget. Scrollback is only
    looked at when the visible lines left some budget over.
    """
    grid = term.grid()
    lines = grid.lines
    viewport_start = grid.scrollback_len()
    chosen: list[int] = []

    for index in _priority_order(viewport_start, len(lines)):
        if lines[index].is_dirty:
            if len(chosen) >= line_budget:
                return chosen, True
            chosen.append(index)

    if len(chosen) < line_budget:
        for index in reversed(range(viewport_start)):
            if lines[index].is_dirty:
                if len(chosen) >= line_budget:
                    return chosen, True
                chosen.append(index)

    return chosen, False