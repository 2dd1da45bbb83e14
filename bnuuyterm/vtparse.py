"""Byte-stream parser for terminal control sequences (DEC/ANSI state machine).

The parser decodes UTF-8 text, C0 controls, CSI sequences (with ``:`` sub
parameters) and OSC strings, and reports them to a :class:`Perform` object.
Other escape, DCS, SOS, PM and APC sequences are consumed and dropped.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence

MAX_PARAMS = 32
MAX_INTERMEDIATES = 2
MAX_OSC_PARAMS = 16
_PARAM_LIMIT = 0xFFFF
_REPLACEMENT = "\ufffd"


class Perform:
    """Receiver of parsed actions. Every action is ignored unless overridden."""

    def print(self, c: str) -> None:
        """A printable character was decoded."""

    def execute(self, byte: int) -> None:
        """A C0 control byte was received."""

    def osc_dispatch(self, params: list[bytes], bell_terminated: bool) -> None:
        """An OSC string ended; ``params`` are its ``;``-separated parts."""

    def csi_dispatch(
        self,
        params: tuple[tuple[int, ...], ...],
        intermediates: bytes,
        ignore: bool,
        final: str,
    ) -> None:
        """A CSI sequence ended with ``final``.

        Each entry of ``params`` is a parameter with its ``:`` sub-parameters.
        ``ignore`` is set when the sequence overflowed the parameter or
        intermediate limits.
        """


class _State(enum.Enum):
    GROUND = enum.auto()
    ESCAPE = enum.auto()
    ESCAPE_INTERMEDIATE = enum.auto()
    CSI_ENTRY = enum.auto()
    CSI_PARAM = enum.auto()
    CSI_INTERMEDIATE = enum.auto()
    CSI_IGNORE = enum.auto()
    OSC_STRING = enum.auto()
    IGNORED_STRING = enum.auto()


def _utf8_length(lead: int) -> int:
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


class Parser:
    """Incremental parser; state carries over between :meth:`advance` calls."""

    def __init__(self) -> None:
        self._state = _State.GROUND
        self._intermediates = bytearray()
        self._params: list[tuple[int, ...]] = []
        self._group: list[int] = []
        self._count = 0
        self._param = 0
        self._ignoring = False
        self._osc = bytearray()
        self._utf8 = bytearray()
        self._utf8_needed = 0

    def advance(self, performer: Perform, data: bytes | bytearray | memoryview | Sequence[int]) -> None:
        """Feed ``data`` through the state machine, calling ``performer``."""
        for byte in bytes(data):
            self._step(performer, byte)

    def _step(self, performer: Perform, byte: int) -> None:
        if self._utf8_needed:
            if 0x80 <= byte <= 0xBF:
                self._utf8.append(byte)
                if len(self._utf8) == self._utf8_needed:
                    text = bytes(self._utf8).decode("utf-8", "replace")
                    self._reset_utf8()
                    for ch in text:
                        performer.print(ch)
                return
            self._reset_utf8()
            performer.print(_REPLACEMENT)

        if byte in (0x18, 0x1A):
            self._leave_string(performer, bell=False)
            performer.execute(byte)
            self._state = _State.GROUND
            return
        if byte == 0x1B:
            self._leave_string(performer, bell=False)
            self._clear()
            self._state = _State.ESCAPE
            return

        match self._state:
            case _State.GROUND:
                self._ground(performer, byte)
            case _State.ESCAPE:
                self._escape(performer, byte)
            case _State.ESCAPE_INTERMEDIATE:
                self._escape_intermediate(performer, byte)
            case _State.CSI_ENTRY:
                self._csi_entry(performer, byte)
            case _State.CSI_PARAM:
                self._csi_param(performer, byte)
            case _State.CSI_INTERMEDIATE:
                self._csi_intermediate(performer, byte)
            case _State.CSI_IGNORE:
                self._csi_ignore(performer, byte)
            case _State.OSC_STRING:
                self._osc_string(performer, byte)
            case _State.IGNORED_STRING:
                pass

    def _reset_utf8(self) -> None:
        self._utf8.clear()
        self._utf8_needed = 0

    def _clear(self) -> None:
        self._intermediates.clear()
        self._params = []
        self._group = []
        self._count = 0
        self._param = 0
        self._ignoring = False

    def _leave_string(self, performer: Perform, bell: bool) -> None:
        if self._state is _State.OSC_STRING:
            self._osc_end(performer, bell)

    def _ground(self, performer: Perform, byte: int) -> None:
        if byte < 0x20:
            performer.execute(byte)
        elif byte < 0x7F:
            performer.print(chr(byte))
        elif byte >= 0x80:
            needed = _utf8_length(byte)
            if needed:
                self._utf8.append(byte)
                self._utf8_needed = needed
            else:
                performer.print(_REPLACEMENT)

    def _escape(self, performer: Perform, byte: int) -> None:
        if byte < 0x20:
            performer.execute(byte)
        elif byte <= 0x2F:
            self._collect(byte)
            self._state = _State.ESCAPE_INTERMEDIATE
        elif byte == 0x5B:
            self._clear()
            self._state = _State.CSI_ENTRY
        elif byte == 0x5D:
            self._osc.clear()
            self._state = _State.OSC_STRING
        elif byte in (0x50, 0x58, 0x5E, 0x5F):
            self._state = _State.IGNORED_STRING
        elif byte <= 0x7E:
            self._state = _State.GROUND

    def _escape_intermediate(self, performer: Perform, byte: int) -> None:
        if byte < 0x20:
            performer.execute(byte)
        elif byte <= 0x2F:
            self._collect(byte)
        elif byte <= 0x7E:
            self._state = _State.GROUND

    def _csi_entry(self, performer: Perform, byte: int) -> None:
        if byte < 0x20:
            performer.execute(byte)
        elif byte <= 0x2F:
            self._collect(byte)
            self._state = _State.CSI_INTERMEDIATE
        elif byte <= 0x3B:
            self._param_byte(byte)
            self._state = _State.CSI_PARAM
        elif byte <= 0x3F:
            self._collect(byte)
            self._state = _State.CSI_PARAM
        elif byte <= 0x7E:
            self._csi_dispatch(performer, byte)

    def _csi_param(self, performer: Perform, byte: int) -> None:
        if byte < 0x20:
            performer.execute(byte)
        elif byte <= 0x2F:
            self._collect(byte)
            self._state = _State.CSI_INTERMEDIATE
        elif byte <= 0x3B:
            self._param_byte(byte)
        elif byte <= 0x3F:
            self._state = _State.CSI_IGNORE
        elif byte <= 0x7E:
            self._csi_dispatch(performer, byte)

    def _csi_intermediate(self, performer: Perform, byte: int) -> None:
        if byte < 0x20:
            performer.execute(byte)
        elif byte <= 0x2F:
            self._collect(byte)
        elif byte <= 0x3F:
            self._state = _State.CSI_IGNORE
        elif byte <= 0x7E:
            self._csi_dispatch(performer, byte)

    def _csi_ignore(self, performer: Perform, byte: int) -> None:
        if byte < 0x20:
            performer.execute(byte)
        elif 0x40 <= byte <= 0x7E:
            self._state = _State.GROUND

    def _osc_string(self, performer: Perform, byte: int) -> None:
        if byte == 0x07:
            self._osc_end(performer, bell=True)
            self._state = _State.GROUND
        elif byte >= 0x20:
            self._osc.append(byte)

    def _collect(self, byte: int) -> None:
        if len(self._intermediates) == MAX_INTERMEDIATES:
            self._ignoring = True
        else:
            self._intermediates.append(byte)

    def _param_byte(self, byte: int) -> None:
        if self._count >= MAX_PARAMS:
            self._ignoring = True
            return
        if byte == 0x3B:
            self._group.append(self._param)
            self._params.append(tuple(self._group))
            self._group = []
            self._count += 1
            self._param = 0
        elif byte == 0x3A:
            self._group.append(self._param)
            self._count += 1
            self._param = 0
        else:
            self._param = min(self._param * 10 + (byte - 0x30), _PARAM_LIMIT)

    def _csi_dispatch(self, performer: Perform, byte: int) -> None:
        if self._count >= MAX_PARAMS:
            self._ignoring = True
        else:
            self._group.append(self._param)
            self._params.append(tuple(self._group))
        performer.csi_dispatch(
            tuple(self._params), bytes(self._intermediates), self._ignoring, chr(byte)
        )
        self._state = _State.GROUND

    def _osc_end(self, performer: Perform, bell: bool) -> None:
        parts = bytes(self._osc).split(b";")[:MAX_OSC_PARAMS]
        self._osc.clear()
        performer.osc_dispatch(parts, bell)