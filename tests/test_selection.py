from bnuuyterm.selection import Selection, selected_text
from bnuuyterm.terminal import TerminalState


def make_term():
    term = TerminalState(10, 3)
    term.feed(b"hello\r\nworld")
    return term


def test_single_line_selection():
    assert selected_text(make_term(), (0, 0), (5, 0)) == "hello"


def test_end_column_is_exclusive():
    assert selected_text(make_term(), (1, 0), (4, 0)) == "hello"[1:4]


def test_multi_line_trims_all_but_last_line():
    assert selected_text(make_term(), (0, 0), (5, 1)) == "hello\nworld"


def test_last_line_keeps_trailing_spaces():
    assert selected_text(make_term(), (0, 0), (7, 0)) == "hello" + "  "


def test_reversed_points_give_same_text():
    term = make_term()
    assert selected_text(term, (5, 1), (0, 0)) == selected_text(term, (0, 0), (5, 1))


def test_empty_selection_is_none():
    assert selected_text(make_term(), (2, 0), (2, 0)) is None


def test_selection_starts_empty():
    sel = Selection()
    assert sel.span() is None
    assert sel.release(make_term()) is None


def test_drag_before_press_does_nothing():
    sel = Selection()
    assert sel.drag((3, 1)) is False
    assert sel.span() is None


def test_press_drag_release_copies_text():
    term = make_term()
    sel = Selection()
    sel.press((0, 0))
    assert sel.span() == ((0, 0), (0, 0))
    assert sel.drag((5, 1)) is True
    assert sel.span() == ((0, 0), (5, 1))
    assert sel.release(term) == "hello\nworld"
    assert sel.dragging is False


def test_drag_after_release_keeps_span():
    term = make_term()
    sel = Selection()
    sel.press((0, 0))
    sel.drag((5, 0))
    sel.release(term)
    assert sel.drag((2, 1)) is False
    assert sel.span() == ((0, 0), (5, 0))


def test_new_press_resets_selection():
    sel = Selection()
    sel.press((0, 0))
    sel.drag((4, 1))
    sel.press((2, 2))
    assert sel.span() == ((2, 2), (2, 2))