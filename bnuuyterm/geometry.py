"""Pixel and cell geometry: grid sizing, hit testing, clear colour and selection quads."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from bnuuyterm.config import Config
    from bnuuyterm.terminal import TerminalState

GridPos = tuple[int, int]
Selection = tuple[GridPos, GridPos]

SELECTION_COLOR = (120, 120, 120, 128)


class Instance(NamedTuple):
    """One coloured cell-sized quad: top-left corner in pixels and RGBA colour."""

    position: tuple[float, float]
    color: tuple[int, int, int, int]


def normalize_selection(start: GridPos, end: GridPos) -> Selection:
    """Order two ``(col, row)`` points so the first comes first in reading order."""
    if start[1] < end[1] or (start[1] == end[1] and start[0] <= end[0]):
        return start, end
    return end, start


def _check_cell_size(cell_size: tuple[float, float]) -> None:
    if cell_size[0] <= 0 or cell_size[1] <= 0:
        raise ValueError(f"cell size must be positive, got {cell_size!r}")


def grid_size(
    surface_size: tuple[int, int],
    cell_size: tuple[float, float],
    top_padding: float = 0.0,
) -> tuple[int, int]:
    """Return how many whole ``(cols, rows)`` cells fit on the surface.

    Cell dimensions are rounded up to whole pixels before dividing.
    """
    _check_cell_size(cell_size)
    width, height = surface_size
    cell_w = math.ceil(cell_size[0])
    cell_h = math.ceil(cell_size[1])
    available_height = height - top_padding
    cols = max(int(width), 0) // cell_w
    rows = max(int(available_height / cell_h), 0)
    return cols, rows


def pixels_to_grid(
    pos: tuple[float, float],
    cell_size: tuple[float, float],
    surface_size: tuple[int, int],
    top_padding: float = 0.0,
) -> GridPos:
    """Map a pixel position to a ``(col, row)`` cell; the column is clamped to the grid."""
    _check_cell_size(cell_size)
    cell_w, cell_h = cell_size
    col = max(math.floor(pos[0] / cell_w), 0)
    row = max(math.floor((pos[1] - top_padding) / cell_h), 0)
    grid_cols, _ = grid_size(surface_size, cell_size, top_padding)
    return min(col, max(grid_cols - 1, 0)), row


def clear_color(config: Config) -> tuple[float, float, float, float]:
    """Return the linear-space RGBA colour used to clear the window."""
    r, g, b = config.colors.background

    def to_linear(component: int) -> float:
        return (component / 255.0) ** 2.2

    return to_linear(r), to_linear(g), to_linear(b), float(config.background_opacity)


def selection_instances(
    selection: Selection | None,
    term: TerminalState,
    cell_size: tuple[float, float],
    top_padding: float = 0.0,
) -> list[Instance]:
    """Return one highlight quad for every selected cell on a displayed row."""
    if selection is None:
        return []
    (start_col, start_row), (end_col, end_row) = normalize_selection(*selection)
    cell_w, cell_h = cell_size
    grid = term.grid()

    instances: list[Instance] = []
    for y in range(start_row, end_row + 1):
        if grid.get_display_row(y, term.scroll_offset) is None:
            continue
        line_start = start_col if y == start_row else 0
        line_end = end_col if y == end_row else grid.cols
        top = y * cell_h + top_padding
        instances.extend(
            Instance((x * cell_w, top), SELECTION_COLOR) for x in range(line_start, line_end)
        )
    return instances