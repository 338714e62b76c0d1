"""Reading and writing 8-bit PNG images as packed 0xAARRGGBB pixels."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field

from PIL import Image

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_IHDR_BIT_DEPTH_OFFSET = 24


class ColorType(enum.Enum):
    """Pixel layout used when an image is written."""

    GRAY = "L"
    RGB = "RGB"
    RGBA = "RGBA"


@dataclass
class PngImage:
    """An image of ``width`` by ``height`` packed pixels in row order."""

    width: int
    height: int
    color_type: ColorType = ColorType.RGB
    pixels: list[int] = field(default_factory=list)

    @property
    def has_alpha(self) -> bool:
        return self.color_type is ColorType.RGBA

    def blank_like(self, width: int, height: int) -> "PngImage":
        """A zero-filled 8-bit image that keeps whether this one has alpha."""
        color_type = ColorType.RGBA if self.has_alpha else ColorType.RGB
        return PngImage(width, height, color_type, [0] * (width * height))


def _check_header(path: str | os.PathLike[str]) -> None:
    with open(path, "rb") as stream:
        header = stream.read(_IHDR_BIT_DEPTH_OFFSET + 1)
    if header[:8] != PNG_SIGNATURE:
        raise ValueError(f"File {os.fspath(path)} is not recognized as a PNG file")
    if len(header) <= _IHDR_BIT_DEPTH_OFFSET:
        raise ValueError(f"File {os.fspath(path)} has a truncated PNG header")
    if header[_IHDR_BIT_DEPTH_OFFSET] > 8:
        raise ValueError("PNG with bit depth larger than 8 not supported")


def read_png(path: str | os.PathLike[str]) -> PngImage:
    """Read a PNG of bit depth 8 or less into packed pixels.

    Images with an alpha channel or a transparency chunk are read as RGBA;
    all others as RGB with every alpha byte set to 0xFF.
    """
    _check_header(path)
    with Image.open(path) as image:
        image.load()
        has_alpha = "transparency" in image.info or image.mode in ("RGBA", "LA", "PA")
        width, height = image.size
        if has_alpha:
            data = image.convert("RGBA").tobytes()
            pixels = [
                (a << 24) | (r << 16) | (g << 8) | b
                for r, g, b, a in zip(data[0::4], data[1::4], data[2::4], data[3::4])
            ]
            color_type = ColorType.RGBA
        else:
            data = image.convert("RGB").tobytes()
            pixels = [
                0xFF000000 | (r << 16) | (g << 8) | b
                for r, g, b in zip(data[0::3], data[1::3], data[2::3])
            ]
            color_type = ColorType.RGB
    return PngImage(width, height, color_type, pixels)


def _encode(image: PngImage) -> bytes:
    if image.color_type is ColorType.GRAY:
        return bytes(pixel & 0xFF for pixel in image.pixels)
    if image.color_type is ColorType.RGBA:
        shifts = (16, 8, 0, 24)
    else:
        shifts = (16, 8, 0)
    return bytes(
        (pixel >> shift) & 0xFF for pixel in image.pixels for shift in shifts
    )


def write_png(path: str | os.PathLike[str], image: PngImage) -> None:
    """Write ``image`` as a non-interlaced 8-bit PNG.

    Gray images take the low byte of each pixel; RGB images drop alpha.
    """
    expected = image.width * image.height
    if len(image.pixels) != expected:
        raise ValueError(
            f"image of {image.width} x {image.height} needs {expected} pixels, "
            f"got {len(image.pixels)}"
        )
    if image.width <= 0 or image.height <= 0:
        raise ValueError(f"invalid image dimensions {image.width} x {image.height}")
    out = Image.frombytes(
        image.color_type.value, (image.width, image.height), _encode(image)
    )
    out.save(path, format="PNG")