"""Command line front end: cluster the colours of a PNG and write the results.

Given an input image and a cluster count, four images are written:

* ``centers.png``  one row holding the cluster centres in walk order,
* ``clusters.png`` 256 columns, every cluster padded out to whole rows,
* ``sorted.png``   every unique input colour, grouped by cluster,
* ``quant.png``    the input with each pixel replaced by its cluster centre,
  keeping the original alpha value.
"""

from __future__ import annotations

import math
import os
import re
import sys
from collections.abc import Sequence
from pathlib import Path

from divquant.metrics import combined_mean_abs_error, combined_mean_sqr_error
from divquant.pipeline import quant_recurse
from divquant.pngio import PngImage, read_png, write_png

_ROW_WIDTH = 256

CENTERS_FILENAME = "centers.png"
CLUSTERS_FILENAME = "clusters.png"
SORTED_FILENAME = "sorted.png"
QUANT_FILENAME = "quant.png"


def _rgb(pixel: int) -> tuple[int, int, int]:
    return (pixel >> 16) & 0xFF, (pixel >> 8) & 0xFF, pixel & 0xFF


def closest_to_pixel(pixels: Sequence[int], target: int) -> int:
    """Return the pixel of ``pixels`` nearest to ``target`` in RGB space.

    Distance is squared Euclidean over red, green and blue; alpha is
    ignored. On a tie the earliest pixel wins.
    """
    if not pixels:
        raise ValueError("at least one pixel is required")
    t_red, t_green, t_blue = _rgb(target)
    best = pixels[0]
    best_dist = None
    for pixel in pixels:
        red, green, blue = _rgb(pixel)
        dist = (t_red - red) ** 2 + (t_green - green) ** 2 + (t_blue - blue) ** 2
        if best_dist is None or dist < best_dist:
            best, best_dist = pixel, dist
            if dist == 0:
                break
    return best


def cluster_walk_order(centers: Sequence[int]) -> list[int]:
    """Order cluster indices by a nearest-neighbour walk over their centres.

    The walk starts at the centre closest to black and repeatedly moves to
    the closest centre not yet visited. Returns indices into ``centers``.
    """
    if not centers:
        raise ValueError("at least one cluster centre is required")
    if len(set(centers)) != len(centers):
        raise ValueError("cluster centres must be distinct")

    remaining = {center: index for index, center in enumerate(centers)}

    current = closest_to_pixel(centers, 0)
    order = [remaining.pop(current)]

    while remaining:
        following = closest_to_pixel(list(remaining), current)
        order.append(remaining.pop(following))
        current = following

    return order


def _report_colortable(colortable: Sequence[int]) -> None:
    print(f"numClusters {len(colortable):5d}")
    seen: dict[int, int] = {}
    for index, pixel in enumerate(colortable):
        if pixel in seen:
            print(f"cmap[{index:3d}] = 0x{pixel:08X} (DUP of {seen[pixel]})")
        else:
            print(f"cmap[{index:3d}] = 0x{pixel:08X}")
            seen[pixel] = index
    print(f"cmap contains {len(seen):3d} unique entries")
    if len(seen) != len(colortable):
        raise RuntimeError("colour table contains duplicate entries")


def _padded_rows(pixels: Sequence[int], width: int) -> tuple[list[int], int]:
    rows = math.ceil(len(pixels) / width)
    return list(pixels) + [0] * (rows * width - len(pixels)), rows


def process_image(
    image: PngImage,
    num_clusters: int,
    out_dir: str | os.PathLike[str] = ".",
) -> dict[str, Path]:
    """Cluster the colours of ``image`` and write the four result images.

    Returns the path written for each output file name.
    """
    out = Path(out_dir)
    written: dict[str, Path] = {}

    print(f"read  {len(image.pixels)} pixels from input image")

    unique_pixels = sorted(set(image.pixels))
    print(f"found {len(unique_pixels)} unique pixels in input image")

    result = quant_recurse(unique_pixels, num_clusters, True)

    print(f"combined MAE {combined_mean_abs_error(unique_pixels, result.pixels):0.8f}")
    print(f"combined MSE {combined_mean_sqr_error(unique_pixels, result.pixels):0.8f}")

    centers = list(result.colortable)
    _report_colortable(centers)

    groups: dict[int, list[int]] = {}
    quant_of: dict[int, int] = {}
    for orig, quant in zip(unique_pixels, result.pixels):
        groups.setdefault(quant, []).append(orig)
        quant_of[orig] = (quant & 0x00FFFFFF) | (orig & 0xFF000000)

    order = cluster_walk_order(centers)
    walk = [centers[index] for index in order]

    centers_image = image.blank_like(len(walk), 1)
    centers_image.pixels = list(walk)
    path = out / CENTERS_FILENAME
    write_png(path, centers_image)
    written[CENTERS_FILENAME] = path
    print(f"wrote {len(walk)} sorted cluster center pixels to {CENTERS_FILENAME}")

    cluster_pixels: list[int] = []
    for index, center in enumerate(walk):
        members = groups.get(center, [])
        print(f"cluster[{index:3d}]: contains {len(members):5d} pixels")
        # Every cluster ends with padding, a whole row of it when the
        # cluster exactly fills its rows.
        padding = _ROW_WIDTH - len(members) % _ROW_WIDTH
        cluster_pixels.extend(members)
        cluster_pixels.extend([0] * padding)

    num_rows = len(cluster_pixels) // _ROW_WIDTH
    clusters_image = image.blank_like(_ROW_WIDTH, num_rows)
    clusters_image.pixels = cluster_pixels
    path = out / CLUSTERS_FILENAME
    write_png(path, clusters_image)
    written[CLUSTERS_FILENAME] = path
    print(f"wrote {len(cluster_pixels)} cluster pixels to {CLUSTERS_FILENAME}")

    sorted_pixels = [pixel for center in walk for pixel in groups.get(center, [])]
    padded, num_rows = _padded_rows(sorted_pixels, _ROW_WIDTH)
    sorted_image = image.blank_like(_ROW_WIDTH, num_rows)
    sorted_image.pixels = padded
    path = out / SORTED_FILENAME
    write_png(path, sorted_image)
    written[SORTED_FILENAME] = path
    print(f"wrote {len(sorted_pixels)} total sorted pixels to {SORTED_FILENAME}")

    quant_image = image.blank_like(image.width, image.height)
    quant_image.pixels = [quant_of[pixel] for pixel in image.pixels]
    path = out / QUANT_FILENAME
    write_png(path, quant_image)
    written[QUANT_FILENAME] = path
    print(f"wrote quant replaced pixels to {QUANT_FILENAME}")

    return written


def _leading_int(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the clusterer: ``divquantcluster PNG numcolors``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print("usage divquantcluster PNG numcolors", file=sys.stderr)
        return 1

    try:
        image = read_png(args[0])
    except (OSError, ValueError) as error:
        print(error, file=sys.stderr)
        return 1

    num_clusters = _leading_int(args[1])
    if num_clusters <= 0:
        print(f"Invalid cluster count: '{args[1]}'", file=sys.stderr)
        return 1

    print(
        f"processing {image.width * image.height} pixels from image of "
        f"dimensions {image.width} x {image.height}"
    )
    process_image(image, num_clusters, Path.cwd())
    return 0


if __name__ == "__main__":
    sys.exit(main())