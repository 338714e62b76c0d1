"""Per-component error measures between two sequences of packed ARGB pixels.

Pixels are 32-bit integers laid out as 0xAARRGGBB. Component 0 is blue,
component 1 is green and component 2 is red.
"""

from __future__ import annotations

from collections.abc import Sequence

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _components(pixel: int) -> tuple[int, int, int, int]:
    """Return the four bytes of ``pixel`` as (c3, c2, c1, c0)."""
    return (
        (pixel >> 24) & 0xFF,
        (pixel >> 16) & 0xFF,
        (pixel >> 8) & 0xFF,
        pixel & 0xFF,
    )


def _as_int8(value: int) -> int:
    """Interpret the low byte of ``value`` as a signed 8-bit integer."""
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def component_addsub(prev: int, current: int, subtract: bool) -> int:
    """Add or subtract each byte of two pixels, wrapping every byte to 8 bits.

    With ``subtract`` the result holds ``current - prev`` per component,
    otherwise ``current + prev``.
    """
    pairs = zip(_components(prev), _components(current))
    if subtract:
        results = [c - p for p, c in pairs]
    else:
        results = [c + p for p, c in pairs]
    r3, r2, r1, r0 = (r & 0xFF for r in results)
    return (r3 << 24) | (r2 << 16) | (r1 << 8) | r0


def abs_error(p1: int, p2: int) -> int:
    """Absolute per-component difference of two pixels with alpha set to 0xFF.

    Each byte difference is read as a signed 8-bit value before taking its
    absolute value. A difference of exactly -128 stays -128 as a signed byte
    and, widened to 32 bits, sets every higher bit, just as the packed
    arithmetic this measure is defined by does.
    """
    delta = component_addsub(p1, p2, True)
    c2 = _as_int8(abs(_as_int8(delta >> 16)))
    c1 = _as_int8(abs(_as_int8(delta >> 8)))
    c0 = _as_int8(abs(_as_int8(delta)))
    c3 = _as_int8(0xFF)

    result = c0 & _MASK32
    result |= ((c1 & _MASK32) << 8) & _MASK32
    result |= ((c2 & _MASK32) << 16) & _MASK32
    result |= ((c3 & _MASK32) << 24) & _MASK32
    return result


def _error_components(actual: Sequence[int], approx: Sequence[int]):
    if len(actual) != len(approx):
        raise ValueError(
            f"pixel sequences differ in length: {len(actual)} != {len(approx)}"
        )
    for actual_pixel, approx_pixel in zip(actual, approx):
        err = abs_error(actual_pixel, approx_pixel)
        yield err & 0xFF, (err >> 8) & 0xFF, (err >> 16) & 0xFF


def sum_abs_error(actual: Sequence[int], approx: Sequence[int]) -> tuple[int, int, int]:
    """Sum of absolute errors per component, as (c0, c1, c2), each 32-bit."""
    s0 = s1 = s2 = 0
    for e0, e1, e2 in _error_components(actual, approx):
        s0 += e0
        s1 += e1
        s2 += e2
    return s0 & _MASK32, s1 & _MASK32, s2 & _MASK32


def sum_sqr_error(actual: Sequence[int], approx: Sequence[int]) -> tuple[int, int, int]:
    """Sum of squared errors per component, as (c0, c1, c2), each 64-bit."""
    s0 = s1 = s2 = 0
    for e0, e1, e2 in _error_components(actual, approx):
        s0 += e0 * e0
        s1 += e1 * e1
        s2 += e2 * e2
    return s0 & _MASK64, s1 & _MASK64, s2 & _MASK64


def _require_pixels(actual: Sequence[int]) -> int:
    count = len(actual)
    if count == 0:
        raise ValueError("at least one pixel is required")
    return count


def mean_abs_error(actual: Sequence[int], approx: Sequence[int]) -> tuple[int, int, int]:
    """Integer mean absolute error per component, as (c0, c1, c2)."""
    count = _require_pixels(actual)
    sums = sum_abs_error(actual, approx)
    return tuple(s // count for s in sums)  # type: ignore[return-value]


def combined_mean_abs_error(actual: Sequence[int], approx: Sequence[int]) -> float:
    """Sum of all component absolute errors divided by the pixel count."""
    count = _require_pixels(actual)
    return float(sum(sum_abs_error(actual, approx))) / count


def combined_mean_sqr_error(actual: Sequence[int], approx: Sequence[int]) -> float:
    """Sum of all component squared errors divided by the pixel count."""
    count = _require_pixels(actual)
    return float(sum(sum_sqr_error(actual, approx))) / count