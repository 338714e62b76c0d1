import pytest

from divquant.quantize import quant_varpart_fast


def _bounds(pixels):
    channels = [
        [(p >> shift) & 0xFF for p in pixels] for shift in (16, 8, 0)
    ]
    return [(min(c), max(c)) for c in channels]


def _within(pixel, bounds):
    values = [(pixel >> shift) & 0xFF for shift in (16, 8, 0)]
    return all(lo <= v <= hi for v, (lo, hi) in zip(values, bounds))


def test_single_repeated_colour_gives_that_colour_without_alpha():
    pixels = [0xFF102030] * 4
    table = quant_varpart_fast(pixels, 1, 4, 1)
    assert table == [0x102030]


def test_two_unique_colours_are_separated():
    pixels = [0x000000, 0xFFFFFF]
    table = quant_varpart_fast(pixels, 1, 2, 2, all_pixels_unique=True)
    assert sorted(table) == [0x000000, 0xFFFFFF]


def test_weighted_duplicates_are_separated():
    pixels = [0xFF000000, 0xFF000000, 0xFF000000, 0xFFFFFFFF]
    table = quant_varpart_fast(pixels, 1, 4, 2, all_pixels_unique=False)
    assert sorted(table) == [0x000000, 0xFFFFFF]


def test_cut_bits_clear_low_bits_of_every_entry():
    pixels = [0x000000, 0x123456, 0x7F7F7F, 0xABCDEF, 0xFFFFFF, 0x808080]
    table = quant_varpart_fast(
        pixels, 1, len(pixels), 3, num_bits=4, all_pixels_unique=True
    )
    assert 1 <= len(table) <= 3
    assert all(entry & 0x0F0F0F == 0 for entry in table)


def test_table_size_and_range_for_many_colours():
    pixels = [((i * 37) % 256) << 16 | ((i * 91) % 256) << 8 | (i * 13) % 256
              for i in range(64)]
    pixels = sorted(set(pixels))
    table = quant_varpart_fast(
        pixels, 1, len(pixels), 8, all_pixels_unique=True
    )
    bounds = _bounds(pixels)
    assert 1 <= len(table) <= 8
    assert all(_within(entry, bounds) for entry in table)
    assert all(entry >> 24 == 0 for entry in table)


def test_max_iters_zero_still_separates_colours():
    pixels = [0x000000, 0x0000FF]
    table = quant_varpart_fast(
        pixels, 1, 2, 2, max_iters=0, all_pixels_unique=True
    )
    assert sorted(table) == [0x000000, 0x0000FF]


@pytest.mark.parametrize("num_bits", [0, 9, -1])
def test_invalid_num_bits_rejected(num_bits):
    with pytest.raises(ValueError):
        quant_varpart_fast([0x010203], 1, 1, 1, num_bits=num_bits)


def test_non_positive_decimation_rejected():
    with pytest.raises(ValueError):
        quant_varpart_fast([0x010203, 0x040506], 1, 2, 2, dec_factor=0)


def test_non_positive_colour_count_rejected():
    with pytest.raises(ValueError):
        quant_varpart_fast([0x010203], 1, 1, 0, all_pixels_unique=True)


def test_empty_input_rejected():
    with pytest.raises(ValueError):
        quant_varpart_fast([], 1, 0, 1)