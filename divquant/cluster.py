"""Divisive hierarchical clustering of packed RGB pixels.

Starting from one cluster that holds every point, the cluster with the
largest total squared error is repeatedly cut in two along the channel of
greatest variance, at the channel mean. Each cut can be refined by a few
iterations of two-means restricted to the points of that cluster.

Pixels are packed integers laid out as 0x..RRGGBB; alpha is ignored.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence

from divquant.bits import validate_num_bits

_Triple = tuple[float, float, float]


def _rgb(pixel: int) -> tuple[int, int, int]:
    return (pixel >> 16) & 0xFF, (pixel >> 8) & 0xFF, pixel & 0xFF


def _div(numerator: float, denominator: float) -> float:
    """IEEE division: a zero denominator yields an infinity or NaN."""
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _to_byte(value: float) -> int:
    """Truncate to an integer and keep its low byte, as a narrowing cast does."""
    if not math.isfinite(value) or not -(2**31) <= value < 2**31:
        return 0
    return int(value) & 0xFF


def _resolve_weighting(
    count: int,
    data_weight: float | None,
    weights: Sequence[float] | None,
) -> tuple[float | None, list[float] | None]:
    if weights is None:
        if data_weight is None:
            data_weight = 1.0 / count
        if not data_weight > 0.0:
            raise ValueError(f"uniform data weight must be positive, got {data_weight}")
        return data_weight, None
    weights = list(weights)
    if len(weights) != count:
        raise ValueError(
            f"expected {count} weights, got {len(weights)}"
        )
    return data_weight, weights


def init_mean_and_var(
    points: Sequence[int],
    data_weight: float | None = None,
    weights: Sequence[float] | None = None,
) -> tuple[_Triple, _Triple]:
    """Weighted per-channel mean and variance of ``points``.

    Every point carries ``data_weight`` when ``weights`` is None, otherwise
    the matching entry of ``weights``. Returns ``(mean, var)``, each as a
    (red, green, blue) triple.
    """
    rgb = [_rgb(pixel) for pixel in points]
    if not rgb:
        raise ValueError("at least one point is required")
    data_weight, weights = _resolve_weighting(len(rgb), data_weight, weights)

    if weights is None:
        mean = [float(sum(p[c] for p in rgb)) * data_weight for c in range(3)]
        var = [float(sum(p[c] * p[c] for p in rgb)) * data_weight for c in range(3)]
    else:
        mean = [0.0, 0.0, 0.0]
        var = [0.0, 0.0, 0.0]
        for (red, green, blue), weight in zip(rgb, weights):
            for c, value in enumerate((red, green, blue)):
                mean[c] += weight * value
                var[c] += weight * (value * value)

    var = [var[c] - mean[c] * mean[c] for c in range(3)]
    return (mean[0], mean[1], mean[2]), (var[0], var[1], var[2])


def _accumulate(
    indices: Sequence[int],
    rgb: Sequence[tuple[int, int, int]],
    data_weight: float | None,
    weights: Sequence[float] | None,
    with_var: bool,
) -> tuple[list[float], list[float], float]:
    """Weighted channel sums, squared channel sums and total weight."""
    if weights is None:
        sums = [float(sum(rgb[i][c] for i in indices)) * data_weight for c in range(3)]
        if with_var:
            sq_sums = [
                float(sum(rgb[i][c] * rgb[i][c] for i in indices)) * data_weight
                for c in range(3)
            ]
        else:
            sq_sums = [0.0, 0.0, 0.0]
        return sums, sq_sums, len(indices) * data_weight

    sums = [0.0, 0.0, 0.0]
    sq_sums = [0.0, 0.0, 0.0]
    total = 0.0
    for i in indices:
        weight = weights[i]
        for c, value in enumerate(rgb[i]):
            sums[c] += weight * value
            if with_var:
                sq_sums[c] += weight * (value * value)
        total += weight
    return sums, sq_sums, total


def _combined_mean(
    total_weight: float,
    total_mean: Sequence[float],
    new_weight: float,
    new_mean: Sequence[float],
    old_weight: float,
) -> list[float]:
    return [
        _div(total_weight * total_mean[c] - new_weight * new_mean[c], old_weight)
        for c in range(3)
    ]


def div_quant_cluster(
    points: Sequence[int],
    num_colors: int,
    num_bits: int = 8,
    max_iters: int = 10,
    data_weight: float | None = None,
    weights: Sequence[float] | None = None,
) -> list[int]:
    """Split ``points`` into at most ``num_colors`` clusters.

    Returns the rounded cluster means as packed pixels, each channel shifted
    left by ``8 - num_bits``, in cluster order; empty clusters are left out,
    so the list may be shorter than ``num_colors``. With ``max_iters`` of
    zero each cut is final; otherwise that many local two-means iterations
    refine it.
    """
    rgb = [_rgb(pixel) for pixel in points]
    num_points = len(rgb)
    if num_points == 0:
        raise ValueError("at least one point is required")
    if num_colors <= 0:
        raise ValueError(f"number of colours must be positive, got {num_colors}")
    validate_num_bits(num_bits)
    data_weight, weights = _resolve_weighting(num_points, data_weight, weights)

    apply_lkm = max_iters > 0
    last_iter = max_iters - 1

    member = [0] * num_points
    weight = [0.0] * num_colors
    size = [0] * num_colors
    tse = [0.0] * num_colors
    mean = [[0.0, 0.0, 0.0] for _ in range(num_colors)]
    var = [[0.0, 0.0, 0.0] for _ in range(num_colors)]

    old_index = 0
    weight[old_index] = 1.0
    size[old_index] = num_points
    cluster = list(range(num_points))

    for new_index in range(1, num_colors):
        total_weight = weight[old_index]
        if new_index == 1:
            total_mean, total_var = init_mean_and_var(points, data_weight, weights)
        else:
            total_mean = tuple(mean[old_index])
            total_var = tuple(var[old_index])

        max_val = total_var[0]
        cut_axis = 0
        if max_val < total_var[1]:
            max_val = total_var[1]
            cut_axis = 1
        if max_val < total_var[2]:
            cut_axis = 2
        cut_pos = total_mean[cut_axis]

        above = [i for i in cluster if cut_pos < rgb[i][cut_axis]]
        sums, new_var_sums, new_weight = _accumulate(
            above, rgb, data_weight, weights, with_var=not apply_lkm
        )
        new_size = 0
        if not apply_lkm:
            for i in above:
                member[i] = new_index
            new_size = len(above)

        old_weight = total_weight - new_weight
        new_mean = [_div(s, new_weight) for s in sums]
        old_mean = _combined_mean(total_weight, total_mean, new_weight, new_mean, old_weight)

        for it in range(max_iters):
            lhs = 0.5 * (
                old_mean[0] * old_mean[0] - new_mean[0] * new_mean[0]
                + old_mean[1] * old_mean[1] - new_mean[1] * new_mean[1]
                + old_mean[2] * old_mean[2] - new_mean[2] * new_mean[2]
            )
            rhs = [old_mean[c] - new_mean[c] for c in range(3)]
            last = it == last_iter

            nearer_new = []
            for i in cluster:
                red, green, blue = rgb[i]
                if lhs < rhs[0] * red + rhs[1] * green + rhs[2] * blue:
                    if last:
                        member[i] = old_index
                else:
                    nearer_new.append(i)
                    if last:
                        member[i] = new_index

            sums, new_var_sums, new_weight = _accumulate(
                nearer_new, rgb, data_weight, weights, with_var=last
            )
            new_size = len(nearer_new)
            new_mean = [_div(s, new_weight) for s in sums]
            old_weight = total_weight - new_weight
            old_mean = _combined_mean(
                total_weight, total_mean, new_weight, new_mean, old_weight
            )

        mean[old_index] = old_mean
        mean[new_index] = new_mean
        size[old_index] = len(cluster) - new_size
        size[new_index] = new_size

        if new_index == num_colors - 1:
            break

        new_var = [
            _div(new_var_sums[c], new_weight) - new_mean[c] * new_mean[c]
            for c in range(3)
        ]
        old_var = []
        for c in range(3):
            new_dev = new_mean[c] - total_mean[c]
            old_dev = old_mean[c] - total_mean[c]
            old_var.append(
                _div(
                    total_weight * total_var[c]
                    - new_weight * (new_var[c] + new_dev * new_dev),
                    old_weight,
                )
                - old_dev * old_dev
            )
        var[old_index] = old_var
        var[new_index] = new_var

        weight[old_index] = old_weight
        weight[new_index] = new_weight
        tse[old_index] = old_weight * (old_var[0] + old_var[1] + old_var[2])
        tse[new_index] = new_weight * (new_var[0] + new_var[1] + new_var[2])

        # Split the cluster with the largest total squared error next.
        max_val = sys.float_info.min
        for ic in range(new_index + 1):
            if max_val < tse[ic]:
                max_val = tse[ic]
                old_index = ic

        cluster = [i for i in range(num_points) if member[i] == old_index]
        if len(cluster) != size[old_index]:
            raise RuntimeError(
                f"Cluster to be split is expected to be of size "
                f"{size[old_index]} not {len(cluster)} !"
            )

    shift = 8 - num_bits
    colortable = []
    num_empty = 0
    for ic in range(num_colors):
        if size[ic] > 0:
            red, green, blue = (_to_byte(m + 0.5) << shift for m in mean[ic])
            colortable.append(((red << 16) | (green << 8) | blue) & 0xFFFFFFFF)
        else:
            num_empty += 1

    if num_empty:
        print(f"# empty clusters: {num_empty}", file=sys.stderr)

    return colortable