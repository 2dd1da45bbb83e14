import pytest

from bnuuyterm.vtparse import MAX_PARAMS, Parser, Perform


class Recorder(Perform):
    def __init__(self):
        self.events = []

    def print(self, c):
        self.events.append(("print", c))

    def execute(self, byte):
        self.events.append(("execute", byte))

    def osc_dispatch(self, params, bell_terminated):
        self.events.append(("osc", list(params), bell_terminated))

    def csi_dispatch(self, params, intermediates, ignore, final):
        self.events.append(("csi", params, intermediates, ignore, final))


def parse(*chunks):
    parser = Parser()
    rec = Recorder()
    for chunk in chunks:
        parser.advance(rec, chunk)
    return rec.events


def printed(events):
    return "".join(e[1] for e in events if e[0] == "print")


def test_prints_ascii():
    assert parse(b"abc") == [("print", "a"), ("print", "b"), ("print", "c")]


def test_executes_controls():
    assert parse(b"\r\n\x08") == [("execute", 0x0D), ("execute", 0x0A), ("execute", 0x08)]


def test_csi_with_params():
    assert parse(b"\x1b[1;31m") == [("csi", ((1,), (31,)), b"", False, "m")]


def test_csi_without_params_gets_zero():
    assert parse(b"\x1b[m") == [("csi", ((0,),), b"", False, "m")]


def test_csi_subparams():
    assert parse(b"\x1b[4:3m") == [("csi", ((4, 3),), b"", False, "m")]


def test_csi_private_marker_is_intermediate():
    assert parse(b"\x1b[?25l") == [("csi", ((25,),), b"?", False, "l")]


def test_csi_split_across_calls():
    assert parse(b"\x1b[3", b"1m") == parse(b"\x1b[31m")


def test_param_saturates():
    events = parse(b"\x1b[99999999m")
    assert events[0][1] == ((65535,),)


def test_too_many_params_sets_ignore():
    seq = b"\x1b[" + b";".join([b"1"] * (MAX_PARAMS + 1)) + b"m"
    (event,) = parse(seq)
    assert event[3] is True
    assert len(event[1]) == MAX_PARAMS


def test_too_many_intermediates_sets_ignore():
    (event,) = parse(b'\x1b[!"#p')
    assert event[2] == b'!"'
    assert event[3] is True


def test_osc_bell_terminated():
    events = parse(b"\x1b]8;;http://example.com\x07")
    assert events == [("osc", [b"8", b"", b"http://example.com"], True)]


def test_osc_string_terminator():
    events = parse(b"\x1b]8;id=1;http://example.com\x1b\\x")
    assert events[0] == ("osc", [b"8", b"id=1", b"http://example.com"], False)
    assert printed(events) == "x"


def test_utf8_split_across_calls():
    data = "é".encode()
    assert parse(data[:1], data[1:]) == [("print", "é")]


def test_utf8_multibyte_text():
    text = "héllo→ü"
    assert printed(parse(text.encode())) == text


def test_invalid_byte_replaced():
    assert parse(b"\xff") == [("print", "\ufffd")]


def test_truncated_utf8_then_ascii():
    assert parse(b"\xc3A") == [("print", "\ufffd"), ("print", "A")]


@pytest.mark.parametrize("seq", [b"\x1b7x", b"\x1b(Bx", b"\x1bPabc\x1b\\x", b"\x1b_apc\x07\x1b\\x"])
def test_other_sequences_are_consumed(seq):
    events = parse(seq)
    assert printed(events) == "x"
    assert not any(e[0] in ("csi", "osc") for e in events)


def test_cancel_aborts_csi():
    events = parse(b"\x1b[31\x18a")
    assert events == [("execute", 0x18), ("print", "a")]


def test_del_is_ignored_in_ground():
    assert parse(b"a\x7fb") == [("print", "a"), ("print", "b")]