import random

import pytest

from divquant.colortable import calc_color_table, get_double_scale, map_colors_mps


def _sqdist(a, b):
    return sum(
        (((a >> s) & 0xFF) - ((b >> s) & 0xFF)) ** 2 for s in (0, 8, 16)
    )


def test_get_double_scale_is_reciprocal():
    assert get_double_scale(4) == 0.25
    assert get_double_scale(1) == 1.0


def test_get_double_scale_rejects_zero():
    with pytest.raises(ValueError):
        get_double_scale(0)


def test_calc_color_table_rejects_bad_decimation():
    with pytest.raises(ValueError):
        calc_color_table([0x112233], 1, 1, 0)


def test_calc_color_table_counts_duplicates():
    pixels = [0x00102030, 0x00102030, 0x00405060, 0x00102030]
    colors, weights = calc_color_table(pixels, 1, len(pixels), 1)
    table = dict(zip(colors, weights))
    assert table == {0x00102030: 0.75, 0x00405060: 0.25}


def test_calc_color_table_drops_alpha():
    colors, weights = calc_color_table([0xFF102030, 0x80102030], 1, 2, 1)
    assert colors == [0x00102030]
    assert weights == [1.0]


def test_calc_color_table_black_comes_first():
    colors, _ = calc_color_table([0x00FFFFFF, 0x00000000], 1, 2, 1)
    assert colors[0] == 0x00000000
    assert sorted(colors) == [0x00000000, 0x00FFFFFF]


def test_calc_color_table_decimation_samples_every_other():
    pixels = [0x000001, 0x000002, 0x000003, 0x000004]
    colors, weights = calc_color_table(pixels, 1, 4, 2)
    assert sorted(colors) == [0x000001, 0x000003]
    assert weights == [0.5, 0.5]


def test_calc_color_table_weights_sum_to_one():
    rng = random.Random(7)
    pixels = [rng.randrange(0, 1 << 24) & 0x0F0F0F for _ in range(500)]
    colors, weights = calc_color_table(pixels, 1, len(pixels), 1)
    assert len(colors) == len(set(colors)) == len(set(pixels))
    assert sum(weights) == pytest.approx(1.0)


def test_map_colors_rejects_empty_table():
    with pytest.raises(ValueError):
        map_colors_mps([0x123456], [])


def test_map_colors_single_entry():
    out = map_colors_mps([0x000000, 0xFFFFFF, 0x808080], [0x00404040])
    assert out == [0x00404040] * 3


def test_map_colors_exact_matches_map_to_themselves():
    table = [0x000000, 0xFF0000, 0x00FF00, 0x0000FF, 0xFFFFFF, 0x808080]
    assert map_colors_mps(table, table) == table


def test_map_colors_drops_alpha():
    out = map_colors_mps([0xFF0000FF], [0x000000FF, 0x00FF0000])
    assert out == [0x000000FF]


def test_map_colors_finds_nearest_distance():
    rng = random.Random(42)
    table = [rng.randrange(0, 1 << 24) for _ in range(32)]
    pixels = [rng.randrange(0, 1 << 24) for _ in range(300)]
    out = map_colors_mps(pixels, table)
    assert len(out) == len(pixels)
    for pixel, mapped in zip(pixels, out):
        assert mapped in table
        best = min(_sqdist(pixel, entry) for entry in table)
        assert _sqdist(pixel, mapped) == best