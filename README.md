# divquant

Color quantization of PNG images by divisive hierarchical clustering,
refined with local two-means iterations. The unique colors of an image are
split into at most N clusters. Each cluster is represented by the rounded
mean of its members, and every pixel is mapped to its closest cluster
center.

## Install

    pip install .

## Command line

    divquant IMAGE.png NUMCOLORS

The command reads a PNG of bit depth 8 or less. It reports how many unique
colors the image holds and prints the time spent clustering and mapping.
It then prints the combined mean absolute error and mean squared error of
the quantization and the resulting colormap. Last, it writes four images
into the current directory:

- `centers.png`: one row holding the cluster centers. They are ordered by a
  nearest-neighbour walk through RGB space that starts at the center
  closest to black.
- `clusters.png`: 256 pixels wide. It holds the unique colors of each
  cluster, in the same walk order. Each cluster is padded with zero pixels
  up to a full row, and a cluster that exactly fills its rows is followed
  by one whole row of padding.
- `sorted.png`: all unique input colors in cluster walk order, 256 per
  row. The last row is padded with zero pixels.
- `quant.png`: the input image with every pixel replaced by its cluster
  center. The original alpha value of each pixel is kept.

Images that have an alpha channel or a transparency chunk are written as
RGBA. All other images are written as RGB.

The command exits with status 1 in these cases:

- the number of arguments is wrong;
- the file cannot be read;
- the file is not a PNG;
- the file's bit depth is above 8;
- the cluster count does not start with a positive integer.

## Library

Pixels are integers packed as `0xAARRGGBB`.

```python
from divquant.pngio import read_png
from divquant.pipeline import quant_recurse
from divquant.metrics import combined_mean_abs_error

image = read_png("photo.png")
unique = sorted(set(image.pixels))
result = quant_recurse(unique, 16, True)

print(result.colortable)          # distinct cluster center pixels
print(result.num_clusters)
print(combined_mean_abs_error(unique, result.pixels))
```

`quant_recurse` prints its timings to standard output. It returns a
`QuantResult` with two fields:

- `pixels`: each input pixel mapped to its nearest center.
- `colortable`: the centers. Entries that round to the same color are
  merged, and the first occurrence is kept.

Modules:

- `divquant.pngio`: `read_png`, `write_png` and the `PngImage` dataclass
  (width, height, `ColorType`, pixels). `PngImage.blank_like` gives a
  zero-filled image that keeps whether the source has alpha.
- `divquant.cluster`:
  - `div_quant_cluster` runs the divisive clustering step. Points carry a
    uniform weight or a list of weights. Empty clusters are left out, so the
    table may be shorter than asked.
  - `init_mean_and_var` returns the weighted per-channel mean and variance.
- `divquant.quantize.quant_varpart_fast`: clustering with optional bit
  cutting, decimation and duplicate counting. Repeated colors are weighted
  by their frequency.
- `divquant.colortable`:
  - `calc_color_table` counts distinct colors with their probabilities.
  - `get_double_scale` gives the uniform weight of one pixel.
  - `map_colors_mps` maps pixels onto a palette by nearest color. It
    searches outwards through the palette sorted by component sum.
- `divquant.bits`: `cut_bits` reduces per-channel precision.
  `validate_num_bits` checks that a bit count lies in 1..8.
- `divquant.metrics`: per-component absolute and squared error sums, means
  and combined means between two pixel sequences.
- `divquant.cli`:
  - `closest_to_pixel` returns the nearest pixel in RGB space.
  - `cluster_walk_order` orders the clusters by a nearest-neighbour walk.
  - `process_image` runs the whole pipeline, writes the four images into a
    directory of your choice and returns their paths.

## Limitations

- The command always writes into the current working directory. It has no
  options for bit cutting, decimation or the number of two-means
  iterations: it uses full 8-bit precision, no decimation and 10
  iterations. These settings are available only through the library.
- PNGs with 16-bit channels are rejected.
- Everything is pure Python, so very large images with many unique colors
  take a long time to cluster.

## Tests

    pip install .[test]
    pytest