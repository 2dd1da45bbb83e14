"""Terminal state: normal and alternate screens driven by a control-sequence parser."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from bnuuyterm.config import Config
from bnuuyterm.grid import Cell, CellFlags, Rgb, ScreenGrid
from bnuuyterm.vtparse import Parser, Perform

log = logging.getLogger(__name__)

_ANSI_BASE = (
    (0, 0, 0),
    (205, 0, 0),
    (0, 205, 0),
    (205, 205, 0),
    (0, 0, 238),
    (205, 0, 205),
    (0, 205, 205),
    (229, 229, 229),
)

_NORMAL_SCROLLBACK = 10_000


class ActiveScreen(enum.Enum):
    NORMAL = "normal"
    ALTERNATE = "alternate"


def ansi_16(idx: int, bright: bool) -> Rgb:
    """Return one of the eight base colours, brightened when ``bright`` is set."""
    r, g, b = _ANSI_BASE[idx]
    if bright:
        return Rgb(min(r + 50, 255), min(g + 50, 255), min(b + 50, 255))
    return Rgb(r, g, b)


def ansi_256_to_rgb(color_code: int) -> Rgb:
    """Map an xterm 256-colour index to RGB."""
    if not 0 <= color_code <= 255:
        raise ValueError(f"colour index out of range: {color_code}")
    if color_code <= 15:
        bright = color_code > 7
        return ansi_16(color_code - 8 if bright else color_code, bright)
    if color_code <= 231:
        code = color_code - 16
        return Rgb((code // 36) * 51, ((code % 36) // 6) * 51, (code % 6) * 51)
    gray = (color_code - 232) * 10 + 8
    return Rgb(gray, gray, gray)


@dataclass
class _Attrs:
    fg: Rgb
    bg: Rgb
    flags: CellFlags = CellFlags(0)

    @classmethod
    def from_config(cls, config: Config) -> _Attrs:
        return cls(fg=Rgb(*config.colors.foreground), bg=Rgb(*config.colors.background))


class TerminalState:
    """Screens, cursor visibility, scroll position and hyperlinks of one terminal."""

    def __init__(self, cols: int, rows: int, config: Config | None = None) -> None:
        self._config = config if config is not None else Config()
        self._attrs = _Attrs.from_config(self._config)
        fg, bg = self._attrs.fg, self._attrs.bg
        self.normal_grid = ScreenGrid(cols, rows, _NORMAL_SCROLLBACK, fg, bg)
        self.alternate_grid = ScreenGrid(cols, rows, 0, fg, bg)
        self.active_screen = ActiveScreen.NORMAL
        self.scroll_offset = 0
        self.cursor_visible = True
        self.links: dict[int, str] = {}
        self.is_dirty = True
        self._next_link_id = 1
        self._current_link_id: int | None = None
        self._parser = Parser()
        self._performer = _Performer(self)

    def grid(self) -> ScreenGrid:
        """Return the grid of the active screen."""
        if self.active_screen is ActiveScreen.ALTERNATE:
            return self.alternate_grid
        return self.normal_grid

    def scroll_viewport(self, delta: int) -> None:
        """Scroll the view; negative ``delta`` moves back into scrollback."""
        if self.active_screen is ActiveScreen.ALTERNATE:
            return
        new_offset = max(0, min(self.scroll_offset - delta, self.normal_grid.scrollback_len()))
        if new_offset != self.scroll_offset:
            self.scroll_offset = new_offset
            self.is_dirty = True

    def feed(self, data: bytes) -> None:
        """Parse output from the program running in the terminal."""
        if not data:
            return
        self.is_dirty = True
        if self.active_screen is ActiveScreen.NORMAL:
            self.scroll_offset = 0
        self._parser.advance(self._performer, data)

    def clear_dirty(self) -> None:
        self.is_dirty = False
        self.grid().clear_all_dirty_flags()

    def get_link_at(self, col: int, row: int) -> int | None:
        """Return the hyperlink id of the displayed cell at ``(col, row)``."""
        line = self.grid().get_display_row(row, self.scroll_offset)
        if line is None or not 0 <= col < len(line.cells):
            return None
        return line.cells[col].link_id


class _Performer(Perform):
    def __init__(self, term: TerminalState) -> None:
        self._term = term

    def _mark_cursor_row(self) -> None:
        grid = self._term.grid()
        row = grid.visible_row(grid.cur_y)
        if row is not None:
            row.is_dirty = True

    def print(self, c: str) -> None:
        attrs = self._term._attrs
        self._term.grid().put_char_ex(c, attrs.fg, attrs.bg, attrs.flags, self._term._current_link_id)

    def execute(self, byte: int) -> None:
        grid = self._term.grid()
        self._mark_cursor_row()
        if byte in (0x0A, 0x84):
            grid.line_feed()
        elif byte == 0x85:
            grid.line_feed()
            grid.cur_x = 0
        elif byte == 0x0D:
            grid.cur_x = 0
        elif byte == 0x08:
            grid.cur_x = max(grid.cur_x - 1, 0)
        self._mark_cursor_row()

    def osc_dispatch(self, params: list[bytes], bell_terminated: bool) -> None:
        if not params or params[0] != b"8" or len(params) < 3:
            return
        url = _decode(params[2])
        term = self._term
        if not url:
            term._current_link_id = None
            return
        link_id = next((key for key, value in term.links.items() if value == url), None)
        if link_id is None:
            link_id = term._next_link_id
            term.links[link_id] = url
            term._next_link_id += 1
        term._current_link_id = link_id

    def csi_dispatch(self, params, intermediates, ignore, final):
        term = self._term
        groups = iter(params)

        def get_param(default: int) -> int:
            group = next(groups, None)
            return default if group is None else group[0]

        if intermediates[:1] == b"?":
            if params and params[0][0] == 1049:
                if final == "h":
                    term.active_screen = ActiveScreen.ALTERNATE
                    term.grid().clear_all()
                elif final == "l":
                    term.active_screen = ActiveScreen.NORMAL
                    term.cursor_visible = True
                term.grid().full_redraw_needed = True
                return
            if final in ("h", "l") and get_param(0) == 25:
                term.cursor_visible = final == "h"
                self._mark_cursor_row()
            return

        grid = term.grid()
        match final:
            case "r":
                self._set_scroll_region(grid, params)
            case "m":
                self._select_graphic_rendition(params)
            case "A":
                grid.cur_y = max(grid.cur_y - (get_param(1) or 1), 0, grid.scroll_top)
            case "B":
                grid.cur_y = min(grid.cur_y + (get_param(1) or 1), grid.scroll_bottom)
            case "C":
                grid.cur_x = min(grid.cur_x + (get_param(1) or 1), max(grid.cols - 1, 0))
            case "D":
                grid.cur_x = max(grid.cur_x - (get_param(1) or 1), 0)
            case "H":
                row = max(get_param(1) - 1, 0)
                col = max(get_param(1) - 1, 0)
                grid.set_cursor_pos(col, row)
            case "J":
                mode = get_param(0)
                if mode == 0:
                    grid.clear_from_cursor()
                elif mode == 2:
                    grid.clear_all()
                elif mode != 1:
                    log.warning("Unhandled ED: %r", params)
            case "K":
                mode = get_param(0)
                if mode == 0:
                    grid.clear_line_from_cursor()
                elif mode == 2:
                    grid.clear_line()
                elif mode != 1:
                    log.warning("Unhandled EL: %r", params)
            case "X":
                attrs = term._attrs
                blank = Cell(" ", attrs.fg, attrs.bg, CellFlags(0), term._current_link_id)
                n = get_param(1)
                x = grid.cur_x
                row = grid.visible_row(grid.cur_y)
                if row is not None:
                    end = min(x + n, len(row.cells))
                    if end > x:
                        row.cells[x:end] = [blank] * (end - x)
                    row.is_dirty = True
            case "@":
                grid.insert_chars(get_param(1) or 1)
            case "L":
                grid.insert_lines(get_param(1) or 1)
            case "M":
                grid.delete_lines(get_param(1) or 1)
            case "P":
                grid.delete_chars(get_param(1) or 1)

    @staticmethod
    def _set_scroll_region(grid: ScreenGrid, params) -> None:
        if not params:
            grid.scroll_top = 0
            grid.scroll_bottom = max(grid.rows - 1, 0)
            return
        top = max((params[0][0] if len(params) > 0 else 1) - 1, 0)
        bottom = max((params[1][0] if len(params) > 1 else grid.rows) - 1, 0)
        if top < bottom < grid.rows:
            log.debug("DECSTBM: top=%d bottom=%d", top + 1, bottom + 1)
            grid.scroll_top = top
            grid.scroll_bottom = bottom
            grid.set_cursor_pos(0, 0)

    def _select_graphic_rendition(self, params) -> None:
        term = self._term
        defaults = _Attrs.from_config(term._config)
        if not params:
            term._attrs = defaults
            return

        attrs = term._attrs
        groups = iter(params)
        for p in groups:
            n = p[0]
            if n == 0:
                attrs = term._attrs = _Attrs.from_config(term._config)
            elif n == 1:
                attrs.flags |= CellFlags.BOLD
            elif n == 2:
                attrs.flags |= CellFlags.FAINT
            elif n == 3:
                attrs.flags |= CellFlags.ITALIC
            elif n == 4:
                attrs.flags &= ~(CellFlags.UNDERLINE | CellFlags.UNDERCURL)
                style = p[1] if len(p) > 1 else 1
                if style == 3:
                    attrs.flags |= CellFlags.UNDERCURL
                elif style != 0:
                    attrs.flags |= CellFlags.UNDERLINE
            elif n == 7:
                attrs.flags |= CellFlags.INVERSE
            elif n == 22:
                attrs.flags &= ~(CellFlags.BOLD | CellFlags.FAINT)
            elif n == 23:
                attrs.flags &= ~CellFlags.ITALIC
            elif n == 24:
                attrs.flags &= ~(CellFlags.UNDERLINE | CellFlags.UNDERCURL)
            elif n == 27:
                attrs.flags &= ~CellFlags.INVERSE
            elif 30 <= n <= 37:
                attrs.fg = ansi_16(n - 30, False)
            elif 90 <= n <= 97:
                attrs.fg = ansi_16(n - 90, True)
            elif n == 39:
                attrs.fg = defaults.fg
            elif 40 <= n <= 47:
                attrs.bg = ansi_16(n - 40, False)
            elif 100 <= n <= 107:
                attrs.bg = ansi_16(n - 100, True)
            elif n == 49:
                attrs.bg = defaults.bg
            elif n in (38, 48):
                color = _extended_color(groups)
                if color is not None:
                    if n == 38:
                        attrs.fg = color
                    else:
                        attrs.bg = color


def _extended_color(groups) -> Rgb | None:
    spec = next(groups, None)
    if spec is None:
        return None
    if spec[0] == 5:
        value = next(groups, None)
        return None if value is None else ansi_256_to_rgb(value[0] & 0xFF)
    if spec[0] == 2:
        parts = [next(groups, None) for _ in range(3)]
        if any(part is None for part in parts):
            return None
        return Rgb(*(part[0] & 0xFF for part in parts))
    return None


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return ""