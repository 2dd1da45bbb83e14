"""Keyboard and mouse-wheel input translated into what the terminal program expects."""

from __future__ import annotations

import enum

PIXELS_PER_LINE = 16.0


class Key(enum.Enum):
    """Named keys that send a fixed sequence instead of their text."""

    ENTER = "enter"
    BACKSPACE = "backspace"
    ESCAPE = "escape"
    TAB = "tab"
    ARROW_UP = "arrow_up"
    ARROW_DOWN = "arrow_down"
    ARROW_RIGHT = "arrow_right"
    ARROW_LEFT = "arrow_left"


_SEQUENCES = {
    Key.ENTER: "\r",
    Key.BACKSPACE: "\x7f",
    Key.ESCAPE: "\x1b",
    Key.TAB: "\t",
    Key.ARROW_UP: "\x1b[A",
    Key.ARROW_DOWN: "\x1b[B",
    Key.ARROW_RIGHT: "\x1b[C",
    Key.ARROW_LEFT: "\x1b[D",
}

_BACK_TAB = "\x1b[Z"


def _control_code(text: str | None) -> str | None:
    if not text:
        return None
    ch = text.lower()[0]
    if "a" <= ch <= "z":
        return chr(ord(ch) - ord("a") + 1)
    return None


def encode_key(
    key: Key | None,
    text: str | None = None,
    control: bool = False,
    shift: bool = False,
) -> str | None:
    """Return the characters a key press sends to the terminal program, or None.

    Control on its own turns a letter into its control code. Named keys send
    their sequence; Shift+Tab sends back-tab. Anything else sends the text
    the key produced. Control together with Shift is the shortcut modifier
    and never produces a control code.
    """
    result: str | None = None
    if control and not shift:
        result = _control_code(text)

    if result is None and key is not None:
        if key is Key.TAB and shift:
            result = _BACK_TAB
        else:
            result = _SEQUENCES[key]

    if result is None:
        result = text

    return result or None


def scroll_lines(delta_y: float, in_pixels: bool = False) -> int:
    """Convert a wheel movement into whole lines, truncating toward zero."""
    if in_pixels:
        return int(delta_y / PIXELS_PER_LINE)
    return int(delta_y)