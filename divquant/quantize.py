"""Colour quantisation of a pixel buffer by divisive hierarchical clustering.

The input is prepared according to how much it can be trusted: unique,
full-precision pixels are clustered directly with a uniform weight, while
pixels that may repeat, be decimated or have their precision reduced are
first collapsed into a weighted table of distinct colours.
"""

from __future__ import annotations

from collections.abc import Sequence

from divquant.bits import cut_bits, validate_num_bits
from divquant.cluster import div_quant_cluster
from divquant.colortable import calc_color_table, get_double_scale


def quant_varpart_fast(
    pixels: Sequence[int],
    num_rows: int,
    num_cols: int,
    num_colors: int,
    num_bits: int = 8,
    dec_factor: int = 1,
    max_iters: int = 10,
    all_pixels_unique: bool = False,
) -> list[int]:
    """Compute a colour table of at most ``num_colors`` entries for ``pixels``.

    ``pixels`` holds an image of ``num_rows`` by ``num_cols`` packed pixels.
    When every pixel is unique, ``num_bits`` is 8 and ``dec_factor`` is 1 the
    pixels are clustered as they are, each with the same weight. Otherwise
    each channel is first cut to ``num_bits`` bits (when fewer than 8), the
    image is sampled every ``dec_factor`` rows and columns, and the distinct
    colours are clustered weighted by their frequency.

    Returns the cluster centres as packed 0x00RRGGBB pixels; empty clusters
    are left out, so the table may be shorter than ``num_colors``.
    """
    validate_num_bits(num_bits)
    pixels = list(pixels)
    if not pixels:
        raise ValueError("at least one pixel is required")

    if all_pixels_unique and num_bits == 8 and dec_factor == 1:
        return div_quant_cluster(
            pixels,
            num_colors,
            num_bits,
            max_iters,
            data_weight=get_double_scale(len(pixels)),
        )

    if num_bits == 8 and not all_pixels_unique:
        source = pixels
    else:
        source = cut_bits(pixels, num_bits, num_bits, num_bits)

    points, weights = calc_color_table(source, num_rows, num_cols, dec_factor)
    return div_quant_cluster(
        points,
        num_colors,
        num_bits,
        max_iters,
        weights=weights,
    )