import pytest

from bnuuyterm.config import Colors, Config
from bnuuyterm.geometry import (
    Instance,
    clear_color,
    grid_size,
    normalize_selection,
    pixels_to_grid,
    selection_instances,
)
from bnuuyterm.terminal import TerminalState


def test_normalize_keeps_ordered_points():
    assert normalize_selection((3, 1), (2, 4)) == ((3, 1), (2, 4))
    assert normalize_selection((1, 2), (5, 2)) == ((1, 2), (5, 2))


def test_normalize_swaps_reversed_points():
    assert normalize_selection((2, 4), (3, 1)) == ((3, 1), (2, 4))
    assert normalize_selection((5, 2), (1, 2)) == ((1, 2), (5, 2))


def test_grid_size_exact_fit():
    assert grid_size((80 * 8, 24 * 16), (8.0, 16.0)) == (80, 24)


def test_grid_size_rounds_cell_up():
    assert grid_size((800, 600), (7.2, 15.0)) == grid_size((800, 600), (8.0, 15.0))


def test_grid_size_top_padding_reduces_rows():
    cols, rows = grid_size((80 * 8, 24 * 16), (8.0, 16.0), top_padding=16.0)
    assert (cols, rows) == (80, 23)


def test_grid_size_padding_larger_than_surface():
    assert grid_size((100, 10), (8.0, 16.0), top_padding=50.0)[1] == 0


def test_grid_size_rejects_zero_cell():
    with pytest.raises(ValueError):
        grid_size((100, 100), (0.0, 16.0))


@pytest.mark.parametrize("col,row", [(0, 0), (5, 3), (79, 23)])
def test_pixels_to_grid_round_trip(col, row):
    cell = (8.0, 16.0)
    surface = (80 * 8, 24 * 16)
    pos = (col * 8.0 + 4.0, row * 16.0 + 8.0 + 10.0)
    assert pixels_to_grid(pos, cell, surface, top_padding=10.0) == (col, row)


def test_pixels_to_grid_clamps_column():
    cell = (8.0, 16.0)
    surface = (80 * 8, 24 * 16)
    col, _ = pixels_to_grid((10_000.0, 0.0), cell, surface)
    assert col == grid_size(surface, cell)[0] - 1


def test_pixels_to_grid_negative_position():
    assert pixels_to_grid((-20.0, -20.0), (8.0, 16.0), (640, 384)) == (0, 0)


def test_clear_color_defaults():
    assert clear_color(Config()) == (0.0, 0.0, 0.0, 1.0)


def test_clear_color_white_with_opacity():
    config = Config(colors=Colors(background=(255, 255, 255)), background_opacity=0.5)
    assert clear_color(config) == (1.0, 1.0, 1.0, 0.5)


def test_clear_color_is_darker_than_srgb():
    config = Config(colors=Colors(background=(128, 128, 128)))
    r, g, b, _ = clear_color(config)
    assert r == g == b
    assert 0.0 < r < 128 / 255


def test_selection_none_is_empty():
    term = TerminalState(10, 4)
    assert selection_instances(None, term, (8.0, 16.0)) == []


def test_single_line_selection():
    term = TerminalState(10, 4)
    result = selection_instances(((2, 1), (5, 1)), term, (8.0, 16.0))
    assert [inst.position for inst in result] == [(16.0, 16.0), (24.0, 16.0), (32.0, 16.0)]
    assert all(inst.color == (120, 120, 120, 128) for inst in result)


def test_reversed_selection_matches_forward():
    term = TerminalState(10, 4)
    forward = selection_instances(((7, 0), (3, 2)), term, (8.0, 16.0))
    backward = selection_instances(((3, 2), (7, 0)), term, (8.0, 16.0))
    assert forward == backward


def test_multi_line_selection_covers_full_middle_rows():
    term = TerminalState(10, 4)
    result = selection_instances(((7, 0), (3, 2)), term, (8.0, 16.0), top_padding=5.0)
    rows = [inst.position[1] for inst in result]
    assert rows.count(0 * 16.0 + 5.0) == 10 - 7
    assert rows.count(1 * 16.0 + 5.0) == 10
    assert rows.count(2 * 16.0 + 5.0) == 3
    assert result[0] == Instance((7 * 8.0, 5.0), (120, 120, 120, 128))


def test_selection_skips_rows_beyond_screen():
    term = TerminalState(10, 4)
    within = selection_instances(((0, 3), (10, 3)), term, (8.0, 16.0))
    beyond = selection_instances(((0, 3), (10, 6)), term, (8.0, 16.0))
    assert len(within) == 10
    assert len(beyond) == len(within)