"""Loading of plain-text (P3) PPM images used as polygon textures."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .vectors import Color

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_BLACK = Color(0, 0, 0)


class TextureFormatError(ValueError):
    """Raised when a texture file cannot be understood."""


@dataclass
class Texture:
    """A grid of texels stored row by row."""

    path: str
    width: int
    height: int
    texels: list[list[Color]] = field(default_factory=list)

    def texel(self, x: int, y: int) -> Color:
        """Colour at column ``x`` of row ``y``."""
        return self.texels[y][x]


def _leading_int(line: str) -> int | None:
    match = _LEADING_INT.match(line)
    return int(match.group(1)) if match else None


def _parse_dimensions(line: str, path: str) -> tuple[int, int]:
    parts = line.split()
    try:
        width, height = int(parts[0]), int(parts[1])
    except (IndexError, ValueError):
        raise TextureFormatError(f"{path}: bad image size line {line.strip()!r}") from None
    if width < 0 or height < 0:
        raise TextureFormatError(f"{path}: negative image size {width}x{height}")
    return width, height


def parse_ppm_texture(lines: Iterable[str], path: str) -> Texture:
    """Build a texture from the lines of a P3 PPM file.

    The layout expected is the one written by GIMP: the magic number, a
    comment line, the size, the maximum value, then one channel value per
    line. Comment lines count towards the header lines.
    """
    texture: Texture | None = None
    header_line = 0
    channels = [0, 0, 0]
    channel = 0
    next_x = next_y = 0

    for line in lines:
        if line.startswith("#"):
            header_line += 1
            continue
        if header_line == 0 and not line.startswith("P3"):
            raise TextureFormatError(f"Unsupported file {path} format (must be P3)")
        if header_line == 2:
            width, height = _parse_dimensions(line, path)
            texture = Texture(
                path=path,
                width=width,
                height=height,
                texels=[[_BLACK] * width for _ in range(height)],
            )
        if header_line < 4:
            header_line += 1
            continue

        if texture is None:
            raise TextureFormatError(f"{path}: pixel data before image size")
        value = _leading_int(line)
        if value is not None:
            channels[channel] = value
        channel += 1
        if channel < 3:
            continue
        channel = 0
        if next_y >= texture.height:
            raise TextureFormatError(f"{path}: more pixel data than the image size allows")
        texture.texels[next_y][next_x] = Color(*(c % 256 for c in channels))
        next_x += 1
        if next_x == texture.width:
            next_x = 0
            next_y += 1

    if texture is None:
        return Texture(path=path, width=0, height=0)
    return texture


def load_ppm_texture(path: str | Path) -> Texture:
    """Read a P3 PPM texture from ``path``."""
    with open(path, encoding="ascii", errors="replace") as handle:
        return parse_ppm_texture(handle, str(path))