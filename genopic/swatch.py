"""Palette preview images."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw

from .colors import RGB

BACKGROUND = (245, 245, 245, 255)


def make_swatch(
    colors: Sequence[RGB],
    chip_size: int = 64,
    columns: int = 12,
    gap: int = 8,
) -> Image.Image:
    """Lay colours out as rounded chips, row by row, in palette order."""
    if not colors:
        raise ValueError("No colours to draw")
    columns = max(1, min(columns, len(colors)))
    rows = math.ceil(len(colors) / columns)
    width = columns * chip_size + (columns + 1) * gap
    height = rows * chip_size + (rows + 1) * gap

    img = Image.new("RGBA", (width, height), BACKGROUND)
    d = ImageDraw.Draw(img)
    radius = max(1, int(chip_size * 0.18))
    for i, (r, g, b) in enumerate(colors):
        row, col = divmod(i, columns)
        x0 = gap + col * (chip_size + gap)
        y0 = gap + row * (chip_size + gap)
        d.rounded_rectangle(
            (x0, y0, x0 + chip_size - 1, y0 + chip_size - 1),
            radius=radius,
            fill=(r, g, b, 255),
        )
    return img


def write_swatch(colors: Sequence[RGB], output_path: str | Path, **kwargs) -> Path:
    output_path = Path(output_path)
    make_swatch(colors, **kwargs).save(output_path)
    print(f"Wrote {output_path}")
    return output_path
