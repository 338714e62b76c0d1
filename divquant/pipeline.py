"""Quantise a set of pixels to a colour table and map every pixel onto it."""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from divquant.colortable import map_colors_mps
from divquant.quantize import quant_varpart_fast

_MAX_ITERS = 10
_DEC_FACTOR = 1
_NUM_BITS = 8


@dataclass
class QuantResult:
    """Pixels mapped onto the colour table, and the table itself."""

    pixels: list[int] = field(default_factory=list)
    colortable: list[int] = field(default_factory=list)

    @property
    def num_clusters(self) -> int:
        """Number of distinct entries in the colour table."""
        return len(self.colortable)


def _report(label: str, start: float) -> None:
    elapsed_ms = int((time.process_time() - start) * 1000)
    print(f"{label} elapsed: {elapsed_ms} ms aka {elapsed_ms / 1000.0:0.2f} s")


def quant_recurse(
    pixels: Sequence[int],
    num_clusters: int,
    all_pixels_unique: bool = True,
) -> QuantResult:
    """Build a colour table of at most ``num_clusters`` colours for ``pixels``.

    The pixels are treated as one row of an image. Colour table entries that
    round to the same colour are merged, keeping the first occurrence, and
    each input pixel is replaced by its nearest table colour.
    """
    pixels = list(pixels)

    start = time.process_time()
    colortable = quant_varpart_fast(
        pixels,
        1,
        len(pixels),
        num_clusters,
        _NUM_BITS,
        _DEC_FACTOR,
        _MAX_ITERS,
        all_pixels_unique,
    )
    _report("quant_varpart_fast()", start)

    start = time.process_time()
    unique_table = list(dict.fromkeys(colortable))
    mapped = map_colors_mps(pixels, unique_table)
    _report("map_colors_mps()", start)

    return QuantResult(pixels=mapped, colortable=unique_table)