"""
Grid layout for genotype cells.

Every item gets one square cell. The cell edge is chosen so that all cells
together fit the canvas area, and cells are placed in raster order: left to
right, wrapping onto the next row once a row reaches the canvas width.
"""

import math
import warnings
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .colors import GenopicWarning


class EmptyInputWarning(GenopicWarning):
    pass


class DegenerateLayoutWarning(GenopicWarning):
    pass


def cell_side(width: float, height: float, item_count: int) -> int:
    """Largest integer edge so that item_count squares fit in width * height."""
    return math.floor(math.sqrt((width * height) / item_count))


def iter_positions(width: float, side: int, item_count: int) -> Iterator[Tuple[int, int]]:
    """Yield the top-left corner of each cell in raster order."""
    x = 0
    y = 0
    for _ in range(item_count):
        yield x, y
        if x + side < width:
            x += side
        else:
            x = 0
            y += side


@dataclass
class GridLayout:
    """Uniform square cells tiling a width x height canvas."""
    width: float
    height: float
    item_count: int
    side: int

    @property
    def columns(self) -> int:
        """Cells per full row."""
        # A row keeps growing while x + side < width
        return max(1, math.ceil(self.width / self.side))

    @property
    def rows(self) -> int:
        return math.ceil(self.item_count / self.columns)

    @property
    def extent(self) -> int:
        """Bottom edge of the last row. Can run past the canvas height."""
        return self.rows * self.side

    def positions(self) -> Iterator[Tuple[int, int]]:
        return iter_positions(self.width, self.side, self.item_count)


def compute_layout(width: float, height: float, item_count: int) -> Optional[GridLayout]:
    """
    Work out the cell size for item_count cells on a width x height canvas.

    Parameters
    ----------
    width, height : float
        Canvas size in logical units
    item_count : int
        Number of cells to place

    Returns
    -------
    GridLayout or None
        None when there are no items, or when there are so many items that
        the cell edge rounds down to zero. A warning is emitted in both cases.
    """
    if item_count <= 0:
        warnings.warn(
            "No items to lay out, refusing to draw zero-area cells.",
            EmptyInputWarning,
            stacklevel=2,
        )
        return None

    side = cell_side(width, height, item_count)
    if side <= 0:
        warnings.warn(
            f"{item_count:,} items do not fit a {width} x {height} canvas.",
            DegenerateLayoutWarning,
            stacklevel=2,
        )
        return None

    return GridLayout(width=width, height=height, item_count=item_count, side=side)
