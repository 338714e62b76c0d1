import random

import pytest

from divquant.cluster import div_quant_cluster, init_mean_and_var
from divquant.colortable import map_colors_mps
from divquant.metrics import combined_mean_sqr_error


def _channels(pixel):
    return (pixel >> 16) & 0xFF, (pixel >> 8) & 0xFF, pixel & 0xFF


def test_init_mean_of_identical_points_is_that_colour():
    points = [0x102030] * 5
    mean, var = init_mean_and_var(points, 1 / 5)
    assert mean == pytest.approx((0x10, 0x20, 0x30))
    assert var == pytest.approx((0.0, 0.0, 0.0), abs=1e-9)


def test_init_mean_and_var_two_points_on_red():
    mean, var = init_mean_and_var([0x000000, 0x0A0000], 0.5)
    assert mean == pytest.approx((5.0, 0.0, 0.0))
    assert var == pytest.approx((25.0, 0.0, 0.0))


def test_init_weighted_matches_uniform_for_equal_weights():
    points = [0x102030, 0x405060, 0x708090, 0xA0B0C0]
    uniform = init_mean_and_var(points, 0.25)
    weighted = init_mean_and_var(points, None, [0.25] * 4)
    assert weighted == uniform


def test_init_variance_is_non_negative():
    rng = random.Random(7)
    points = [rng.randrange(0x1000000) for _ in range(50)]
    _, var = init_mean_and_var(points, 1 / 50)
    assert all(v >= 0.0 for v in var)


def test_init_rejects_empty_points():
    with pytest.raises(ValueError):
        init_mean_and_var([], 1.0)


def test_two_separated_groups_give_their_colours():
    points = [0x102030, 0x102030, 0xE0D0C0, 0xE0D0C0]
    result = div_quant_cluster(points, 2)
    assert sorted(result) == [0x102030, 0xE0D0C0]


def test_as_many_colours_as_distinct_points_recovers_them():
    points = [0x100000, 0x800000, 0xF00000]
    result = div_quant_cluster(points, 3)
    assert sorted(result) == sorted(points)


def test_single_cluster_is_never_computed():
    # With one colour no split happens and the untouched mean is emitted.
    assert div_quant_cluster([0x102030, 0x405060], 1) == [0]


def test_reduced_bit_depth_shifts_result_back_up():
    points = [0x010203, 0x0E0D0C]
    result = div_quant_cluster(points, 2, num_bits=4)
    assert sorted(result) == sorted(p << 4 for p in points)


def test_without_local_kmeans_splits_are_still_valid():
    points = [0x102030, 0x102030, 0xE0D0C0, 0xE0D0C0]
    result = div_quant_cluster(points, 2, max_iters=0)
    assert sorted(result) == [0x102030, 0xE0D0C0]


def test_weighted_matches_uniform_for_equal_weights():
    rng = random.Random(3)
    points = [rng.randrange(0x1000000) for _ in range(8)]
    uniform = div_quant_cluster(points, 4, data_weight=1 / 8)
    weighted = div_quant_cluster(points, 4, weights=[1 / 8] * 8)
    assert weighted == uniform


def test_result_size_and_channel_bounds():
    rng = random.Random(11)
    points = sorted({rng.randrange(0x1000000) for _ in range(300)})
    result = div_quant_cluster(points, 16)
    assert 1 <= len(result) <= 16
    channels = [_channels(p) for p in points]
    for pixel in result:
        for c, value in enumerate(_channels(pixel)):
            assert min(ch[c] for ch in channels) <= value <= max(ch[c] for ch in channels)


def test_more_colours_lower_the_error():
    points = [(r << 16) | (g << 8) | ((r + g) // 2) for r in range(0, 256, 16) for g in range(0, 256, 16)]
    few = div_quant_cluster(points, 2)
    many = div_quant_cluster(points, 8)
    err_few = combined_mean_sqr_error(points, map_colors_mps(points, few))
    err_many = combined_mean_sqr_error(points, map_colors_mps(points, many))
    assert err_many < err_few


@pytest.mark.parametrize(
    "kwargs",
    [
        {"points": [], "num_colors": 2},
        {"points": [0x102030], "num_colors": 0},
        {"points": [0x102030], "num_colors": 2, "num_bits": 9},
        {"points": [0x102030], "num_colors": 2, "num_bits": 0},
        {"points": [0x102030, 0x405060], "num_colors": 2, "weights": [1.0]},
        {"points": [0x102030], "num_colors": 2, "data_weight": 0.0},
    ],
)
def test_invalid_arguments_raise(kwargs):
    with pytest.raises(ValueError):
        div_quant_cluster(**kwargs)