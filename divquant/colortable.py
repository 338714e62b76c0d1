"""Colour tables: counting unique colours and mapping pixels onto a palette.

Pixels are packed 32-bit integers laid out as 0xAARRGGBB. Alpha is ignored
here and every pixel produced by this module carries a zero alpha byte.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

MAX_RGB = 255
HASH_SIZE = 20023


def _hash_color(red: int, green: int, blue: int) -> int:
    return ((red * 33023 + green * 30013 + blue * 27011) & 0x7FFFFFFF) % HASH_SIZE


def _unpack(pixel: int) -> tuple[int, int, int]:
    return (pixel >> 16) & 0xFF, (pixel >> 8) & 0xFF, pixel & 0xFF


def _pack(red: int, green: int, blue: int) -> int:
    return (red << 16) | (green << 8) | blue


def calc_color_table(
    pixels: Sequence[int],
    num_rows: int,
    num_cols: int,
    dec_factor: int,
) -> tuple[list[int], list[float]]:
    """Count the distinct colours of a (possibly decimated) image.

    Every ``dec_factor``-th row and column is sampled. The sample at row
    ``r`` and column ``c`` is read from ``pixels[c + r * num_rows]``.
    Returns the distinct colours, ordered by hash bucket and, within a
    bucket, most recently seen first, together with the probability of each
    colour among the sampled pixels.
    """
    if dec_factor <= 0:
        raise ValueError(f"Decimation factor ( {dec_factor} ) should be positive !")

    counts: dict[tuple[int, int, int], int] = {}
    for row in range(0, num_rows, dec_factor):
        for col in range(0, num_cols, dec_factor):
            color = _unpack(pixels[col + row * num_rows])
            counts[color] = counts.get(color, 0) + 1

    buckets: dict[int, list[tuple[int, int, int]]] = {}
    for color in counts:
        buckets.setdefault(_hash_color(*color), []).append(color)

    norm_factor = 1.0 / (
        math.ceil(num_rows / dec_factor) * math.ceil(num_cols / dec_factor)
    )

    colors: list[int] = []
    weights: list[float] = []
    for bucket in sorted(buckets):
        for color in reversed(buckets[bucket]):
            colors.append(_pack(*color))
            weights.append(norm_factor * counts[color])
    return colors, weights


def get_double_scale(num_pixels: int) -> float:
    """Uniform weight of one pixel among ``num_pixels`` pixels."""
    if num_pixels <= 0:
        raise ValueError("at least one pixel is required")
    return 1.0 / (math.ceil(1 / 1.0) * math.ceil(num_pixels / 1.0))


@dataclass(frozen=True)
class _PaletteEntry:
    red: int
    green: int
    blue: int

    @property
    def weight(self) -> int:
        return self.red + self.green + self.blue

    def distance(self, red: int, green: int, blue: int) -> int:
        return (
            (red - self.red) ** 2
            + (green - self.green) ** 2
            + (blue - self.blue) ** 2
        )


def _round_half(a: int, b: int) -> int:
    return int(0.5 * (a + b) + 0.5)


def map_colors_mps(pixels: Sequence[int], colortable: Sequence[int]) -> list[int]:
    """Replace each pixel by its nearest palette colour (squared Euclidean).

    The palette is sorted by component sum and searched outwards from a
    starting entry chosen by the pixel's component sum, stopping in each
    direction once the sum difference alone rules out a closer entry.
    """
    if not colortable:
        raise ValueError("colour table must hold at least one colour")

    cmap = sorted(
        (_PaletteEntry(*_unpack(pixel)) for pixel in colortable),
        key=lambda entry: entry.weight,
    )
    num_colors = len(cmap)
    max_sum = 3 * MAX_RGB

    # Lower bound on squared distance given a component-sum difference k.
    lut_ssd = [int((k * k) / 3.0) for k in range(max_sum + 1)]

    lut_init = [0] * (max_sum + 1)
    if num_colors >= 2:
        low = _round_half(cmap[0].weight, cmap[1].weight)
        high = _round_half(cmap[-2].weight, cmap[-1].weight)
    else:
        low = high = 1
    for k in range(low):
        lut_init[k] = 0
    for k in range(high, max_sum + 1):
        lut_init[k] = num_colors - 1
    for ic in range(1, num_colors - 1):
        start = _round_half(cmap[ic - 1].weight, cmap[ic].weight)
        stop = _round_half(cmap[ic].weight, cmap[ic + 1].weight)
        for k in range(start, stop):
            lut_init[k] = ic

    result: list[int] = []
    for pixel in pixels:
        red, green, blue = _unpack(pixel)
        total = red + green + blue

        index = lut_init[total]
        min_dist = cmap[index].distance(red, green, blue)

        up_index = down_index = index
        up = down = True
        while up or down:
            if up:
                up_index += 1
                if (
                    up_index > num_colors - 1
                    or lut_ssd[abs(total - cmap[up_index].weight)] >= min_dist
                ):
                    up = False
                else:
                    dist = cmap[up_index].distance(red, green, blue)
                    if dist < min_dist:
                        min_dist = dist
                        index = up_index
            if down:
                down_index -= 1
                if (
                    down_index < 0
                    or lut_ssd[abs(total - cmap[down_index].weight)] >= min_dist
                ):
                    down = False
                else:
                    dist = cmap[down_index].distance(red, green, blue)
                    if dist < min_dist:
                        min_dist = dist
                        index = down_index

        best = cmap[index]
        result.append(_pack(best.red, best.green, best.blue))
    return result