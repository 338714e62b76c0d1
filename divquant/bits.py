"""Reduction of per-channel precision for packed RGB pixels."""

from __future__ import annotations

from collections.abc import Iterable


def validate_num_bits(num_bits: int) -> None:
    """Raise ValueError unless ``num_bits`` lies in [1, 8]."""
    if not 0 < num_bits <= 8:
        raise ValueError(
            f"Number of bits per channel ( {num_bits} ) must be in [1,8] !"
        )


def cut_bits(
    pixels: Iterable[int],
    num_bits_red: int,
    num_bits_green: int,
    num_bits_blue: int,
) -> list[int]:
    """Keep the top bits of each channel, shifted down; alpha is dropped.

    Each channel keeps its ``num_bits_*`` most significant bits, moved into
    the low end of its byte, so a channel with ``n`` bits ranges over
    ``0 .. 2**n - 1``.
    """
    for num_bits in (num_bits_red, num_bits_green, num_bits_blue):
        validate_num_bits(num_bits)

    shift_red = 8 - num_bits_red
    shift_green = 8 - num_bits_green
    shift_blue = 8 - num_bits_blue

    def cut(pixel: int) -> int:
        red = ((pixel >> 16) & 0xFF) >> shift_red
        green = ((pixel >> 8) & 0xFF) >> shift_green
        blue = (pixel & 0xFF) >> shift_blue
        return (red << 16) | (green << 8) | blue

    return [cut(pixel) for pixel in pixels]