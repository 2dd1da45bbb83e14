import pytest

from bnuuyterm.session import PARSE_CHUNK_SIZE, InputBuffer
from bnuuyterm.terminal import TerminalState


class Recorder:
    def __init__(self):
        self.chunks = []

    def feed(self, data):
        self.chunks.append(data)


def test_push_counts_bytes():
    buf = InputBuffer()
    buf.push(b"abc")
    buf.push(b"")
    buf.push(b"de")
    assert len(buf) == 5


def test_drain_feeds_terminal():
    term = TerminalState(10, 3)
    buf = InputBuffer()
    buf.push(b"hi")
    assert buf.drain_into(term) is False
    assert len(buf) == 0
    assert term.grid().visible_row(0).text().startswith("hi")


def test_chunks_preserve_order_and_size():
    rec = Recorder()
    buf = InputBuffer()
    payload = bytes(range(256)) * 3
    buf.push(payload)
    assert buf.drain_into(rec, chunk_size=100, budget=10.0) is False
    assert b"".join(rec.chunks) == payload
    assert all(len(chunk) <= 100 for chunk in rec.chunks)
    assert all(len(chunk) == 100 for chunk in rec.chunks[:-1])


def test_default_chunk_size_limits_chunks():
    rec = Recorder()
    buf = InputBuffer()
    buf.push(b"x" * (PARSE_CHUNK_SIZE + 1))
    buf.drain_into(rec, budget=10.0)
    assert [len(chunk) for chunk in rec.chunks] == [PARSE_CHUNK_SIZE, 1]


def test_split_utf8_across_chunks():
    term = TerminalState(10, 3)
    buf = InputBuffer()
    buf.push("é!".encode("utf-8"))
    buf.drain_into(term, chunk_size=1, budget=10.0)
    assert term.grid().visible_row(0).text().startswith("é!")


def test_zero_budget_leaves_data():
    rec = Recorder()
    buf = InputBuffer()
    buf.push(b"data")
    assert buf.drain_into(rec, budget=0.0) is True
    assert rec.chunks == []
    assert len(buf) == 4


def test_empty_buffer_feeds_nothing():
    rec = Recorder()
    assert InputBuffer().drain_into(rec) is False
    assert rec.chunks == []


def test_invalid_chunk_size():
    buf = InputBuffer()
    buf.push(b"x")
    with pytest.raises(ValueError):
        buf.drain_into(Recorder(), chunk_size=0)