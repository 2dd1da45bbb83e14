"""Per-frame cell decorations: backgrounds, cursor block, underlines and undercurls."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, Hashable, TypeVar

from bnuuyterm.geometry import Instance, Selection, selection_instances
from bnuuyterm.grid import CellFlags, Rgb, Row

if TYPE_CHECKING:
    from bnuuyterm.config import Config
    from bnuuyterm.terminal import TerminalState

BG_CACHE_SIZE = 15_000
UNDERLINE_CACHE_SIZE = 12_000
UNDERCURL_CACHE_SIZE = 12_000

TITLEBAR_COLOR = (0, 0, 0, 77)

_K = TypeVar("_K", bound=Hashable)
_V = TypeVar("_V")


class _LruCache(Generic[_K, _V]):
    """A bounded mapping that forgets its least recently used entry first."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("cache capacity must be positive")
        self._capacity = capacity
        self._items: OrderedDict[_K, _V] = OrderedDict()

    def get(self, key: _K) -> _V | None:
        try:
            value = self._items[key]
        except KeyError:
            return None
        self._items.move_to_end(key)
        return value

    def put(self, key: _K, value: _V) -> None:
        self._items[key] = value
        self._items.move_to_end(key)
        while len(self._items) > self._capacity:
            self._items.popitem(last=False)

    def __len__(self) -> int:
        return len(self._items)


@dataclass
class Decorations:
    """Quads to draw for one frame, in drawing order within each layer."""

    bg: list[Instance] = field(default_factory=list)
    underline: list[Instance] = field(default_factory=list)
    undercurl: list[Instance] = field(default_factory=list)


# Cached instances keep only their x position; the row's y is filled in on use.
_RowXs = list[tuple[float, tuple[int, int, int, int]]]


def _place(cached: _RowXs, y_pos: float) -> list[Instance]:
    return [Instance((x, y_pos), color) for x, color in cached]


class DecorationBuilder:
    """Builds frame decorations, reusing the work done for identically styled rows."""

    def __init__(self, config: Config, cell_size: tuple[float, float]) -> None:
        if cell_size[0] <= 0 or cell_size[1] <= 0:
            raise ValueError(f"cell size must be positive, got {cell_size!r}")
        self._config = config
        self._cell_size = cell_size
        self._default_bg = Rgb(*config.colors.background)
        self._bg_cache: _LruCache[Hashable, _RowXs] = _LruCache(BG_CACHE_SIZE)
        self._underline_cache: _LruCache[Hashable, _RowXs] = _LruCache(UNDERLINE_CACHE_SIZE)
        self._undercurl_cache: _LruCache[Hashable, _RowXs] = _LruCache(UNDERCURL_CACHE_SIZE)

    def build(
        self,
        term: TerminalState,
        selection: Selection | None,
        hovered_link_id: int | None,
        rows: int,
        top_padding: float = 0.0,
    ) -> Decorations:
        """Return the decorations for the ``rows`` displayed rows of ``term``."""
        grid = term.grid()
        cursor_visible = term.cursor_visible and term.scroll_offset == 0
        cell_h = self._cell_size[1]
        out = Decorations()

        if top_padding > 0:
            out.bg.append(Instance((0.0, 0.0), TITLEBAR_COLOR))

        for y in range(rows):
            row = grid.get_display_row(y, term.scroll_offset)
            if row is None:
                continue

            cursor_x = grid.cur_x if cursor_visible and y == grid.cur_y else None
            row_hovered = (
                hovered_link_id
                if hovered_link_id is not None
                and any(cell.link_id == hovered_link_id for cell in row)
                else None
            )
            key = (
                tuple((cell.fg, cell.bg, int(cell.flags), cell.link_id) for cell in row),
                cursor_x,
                row_hovered,
            )
            y_pos = y * cell_h + top_padding

            cached_bgs = self._bg_cache.get(key)
            if cached_bgs is not None:
                out.bg.extend(_place(cached_bgs, y_pos))
                cached_underlines = self._underline_cache.get(key)
                if cached_underlines is not None:
                    out.underline.extend(_place(cached_underlines, y_pos))
                cached_undercurls = self._undercurl_cache.get(key)
                if cached_undercurls is not None:
                    out.undercurl.extend(_place(cached_undercurls, y_pos))
                continue

            row_bgs, row_underlines, row_undercurls = self._row_decorations(
                row, cursor_x, hovered_link_id
            )
            out.bg.extend(_place(row_bgs, y_pos))
            out.underline.extend(_place(row_underlines, y_pos))
            out.undercurl.extend(_place(row_undercurls, y_pos))
            self._bg_cache.put(key, row_bgs)
            self._underline_cache.put(key, row_underlines)
            self._undercurl_cache.put(key, row_undercurls)

        out.bg.extend(selection_instances(selection, term, self._cell_size, top_padding))
        return out

    def _row_decorations(
        self, row: Row, cursor_x: int | None, hovered_link_id: int | None
    ) -> tuple[_RowXs, _RowXs, _RowXs]:
        colors = self._config.colors
        cell_w = self._cell_size[0]
        bgs: _RowXs = []
        underlines: _RowXs = []
        undercurls: _RowXs = []

        for x, cell in enumerate(row):
            is_cursor = x == cursor_x
            fg, bg = cell.fg, cell.bg
            if cell.flags & CellFlags.INVERSE:
                fg, bg = bg, fg

            x_pos = x * cell_w
            if bg != self._default_bg:
                bgs.append((x_pos, (*bg, 255)))
            if is_cursor:
                bgs.append((x_pos, (*colors.cursor, 255)))

            decoration_fg = colors.cursor_text if is_cursor else fg
            color = (*decoration_fg, 255)

            if cell.flags & CellFlags.UNDERLINE:
                underlines.append((x_pos, color))
            is_hovered_link = hovered_link_id is not None and cell.link_id == hovered_link_id
            if cell.flags & CellFlags.UNDERCURL or is_hovered_link:
                undercurls.append((x_pos, color))

        return bgs, underlines, undercurls