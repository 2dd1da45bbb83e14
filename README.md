# bnuuyterm

The core of a small terminal emulator. It holds the terminal state that sits
between a shell's output and the screen, and prepares what a renderer needs
to draw it.

## Modules

- `bnuuyterm.grid`: `ScreenGrid` is a cell grid with scrollback. It has a
  scroll region, deferred wrapping at the right margin, and line and
  character insert and delete. Each `Cell` holds a character, foreground and
  background `Rgb` colours, style flags (`CellFlags`: bold, italic, underline,
  inverse, faint, undercurl) and an optional hyperlink id. Each `Row` keeps a
  dirty flag.
- `bnuuyterm.vtparse`: a byte-level escape-sequence `Parser`. It decodes
  UTF-8 text, C0 controls, CSI sequences (with `:` sub-parameters) and OSC
  strings. It calls `print`, `execute`, `csi_dispatch` and `osc_dispatch` on
  a `Perform` object. It reads other escape, DCS, SOS, PM and APC sequences
  and discards them.
- `bnuuyterm.terminal`: `TerminalState` joins the two. It has normal and
  alternate screens (mode `?1049`) and cursor visibility (mode `?25`). It
  handles SGR attributes and colours (16, 256 and 24-bit), cursor movement,
  erasing in the line and the display, and scroll regions. It also handles
  OSC 8 hyperlinks (`links`, `get_link_at`) and viewport scrolling
  (`scroll_viewport`). `ansi_16` and `ansi_256_to_rgb` give the colour
  palette.
- `bnuuyterm.config`: `Config` holds the font size, shell command, `Colors`
  and background opacity. `Config.load()` reads `config.toml` from the user's
  config directory (`default_config_path()`), or from a path you pass.
  Defaults fill in missing keys. Bad values raise `ConfigError`.
- `bnuuyterm.geometry`: `grid_size` gives how many cells fit on a surface.
  `pixels_to_grid` maps a mouse position to a cell. `clear_color` gives the
  linear-space clear colour. `normalize_selection` and
  `selection_instances` give the selection highlight quads.
- `bnuuyterm.decorations`: `DecorationBuilder.build` returns `Decorations`.
  These hold the background, cursor block, underline, undercurl and
  selection quads for the visible rows. Hovered links get an undercurl.
  Rows with the same styling are cached.
- `bnuuyterm.spans`: `style_spans` splits a row into `TextSpan` runs of one
  style, with UTF-8 byte offsets. `dirty_rows_budgeted` picks which dirty
  rows to lay out next, within a line budget.
- `bnuuyterm.selection`: `Selection` tracks a press, drag and release.
  `selected_text` pulls the chosen text out of the displayed rows.
- `bnuuyterm.keys`: `encode_key` gives the characters a key press sends.
  These are control codes, named `Key` sequences, back-tab, or plain text.
  `scroll_lines` turns a wheel movement into lines.
- `bnuuyterm.session`: `InputBuffer` holds the bytes a program has written.
  `drain_into` feeds them to a terminal in chunks, within a time budget.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from bnuuyterm.config import Config
from bnuuyterm.terminal import TerminalState

term = TerminalState(80, 24, Config())
term.feed(b"hello \x1b[1;31mworld\x1b[0m\r\n")
term.feed(b"\x1b]8;;https://example.com\x1b\\link\x1b]8;;\x1b\\")

row = term.grid().visible_row(0)
print(row.text().rstrip())        # hello world
print(term.get_link_at(0, 1))     # 1
print(term.links[1])              # https://example.com
```

## What it does not do

The package has no window, no GPU drawing and no font shaping. It prepares
colour quads and styled text spans, but something else must draw them. It
does not start a shell or open a pseudo-terminal. `Config.shell` is only
stored. Bytes must be given to `TerminalState.feed` (or to `InputBuffer`) by
the caller. Keyboard output from `encode_key` must be written to the program
by the caller. It does not open links or use the clipboard. It has no
command to run.