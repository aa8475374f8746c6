"""
Colour utilities for genotype grids.

Converts HSV colours to RGB and builds sets of well spaced colours by
sampling the HSV colour wheel.
"""

import math
import warnings
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np


RGB = Tuple[int, int, int]

# Saturation of 0.65 gives a more pastel feel
DEFAULT_SATURATION = 0.65
DEFAULT_VALUE = 0.95

PALETTE_METHODS = ("chroma_bisection", "equal_spacing")
MAX_PALETTE_SIZE = 360


class GenopicWarning(UserWarning):
    """Base category for non-fatal diagnostics."""


class InvalidColorComponentWarning(GenopicWarning):
    pass


class OutOfRangeWarning(GenopicWarning):
    pass


class UnknownMethodWarning(GenopicWarning):
    pass


def hsv_to_rgb(hue: float, saturation: float, value: float) -> RGB:
    """
    Convert an HSV colour to an integer RGB triple.

    Parameters
    ----------
    hue : float
        Angle on the colour wheel, nominally in [0, 360]
    saturation : float
        Colourfulness, nominally in [0, 1]
    value : float
        Brightness, nominally in [0, 1]

    Returns
    -------
    tuple of int
        (red, green, blue), each in [0, 255]

    Out of range components raise an InvalidColorComponentWarning but the
    conversion still runs on the numbers given.
    """
    if not 0.0 <= hue <= 360.0:
        warnings.warn(
            f"Invalid Hue component of HSV colour passed, with value: {hue}.",
            InvalidColorComponentWarning,
            stacklevel=2,
        )
    if not 0.0 <= saturation <= 1.0:
        warnings.warn(
            f"Invalid Saturation component of HSV colour passed, with value: {saturation}.",
            InvalidColorComponentWarning,
            stacklevel=2,
        )
    if not 0.0 <= value <= 1.0:
        warnings.warn(
            f"Invalid Value component of HSV colour passed, with value: {value}.",
            InvalidColorComponentWarning,
            stacklevel=2,
        )

    # No saturation means greyscale
    if saturation == 0:
        grey = math.floor(value * 255)
        return (grey, grey, grey)

    # Split the wheel into six 60 degree chroma sectors
    h = hue / 60.0
    sector = math.floor(h) % 6
    f = h - math.floor(h)

    p = value * (1 - saturation)
    q = value * (1 - saturation * f)
    t = value * (1 - saturation * (1 - f))

    if sector == 0:
        red, green, blue = value, t, p
    elif sector == 1:
        red, green, blue = q, value, p
    elif sector == 2:
        red, green, blue = p, value, t
    elif sector == 3:
        red, green, blue = p, q, value
    elif sector == 4:
        red, green, blue = t, p, value
    else:
        red, green, blue = value, p, q

    return (math.floor(red * 255), math.floor(green * 255), math.floor(blue * 255))


def rgb_to_hex(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


@dataclass
class Palette:
    """Colours keyed by the hue that produced them, in selection order."""
    method: str
    value: float
    entries: Dict[float, RGB] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[RGB]:
        return iter(self.entries.values())

    @property
    def hues(self) -> List[float]:
        return list(self.entries.keys())

    @property
    def colors(self) -> List[RGB]:
        return list(self.entries.values())

    def hex_colors(self) -> List[str]:
        return [rgb_to_hex(c) for c in self.entries.values()]


def _bisection_hues(cycle: int) -> List[float]:
    """Hues on the lines of bisection for one cycle, 360 folded onto 0."""
    steps = 6 * cycle
    return [(60 * j / cycle) % 360 for j in range(1, steps + 1)]


def generate_palette(
    count: int,
    method: str = "chroma_bisection",
    value: Optional[float] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> Optional[Palette]:
    """
    Grab a set of well spaced colours from the HSV colour wheel.

    Parameters
    ----------
    count : int
        Number of colours, must be in [1, 360]
    method : str
        'chroma_bisection' (default, best for around a dozen colours) or
        'equal_spacing' (scales better, garish at high counts)
    value : float, optional
        HSV value (brightness) for every colour, default 0.95
    rng : numpy.random.Generator, optional
        Random source used to shuffle hues after the second bisection cycle
    seed : int, optional
        Seed for a fresh generator when rng is not given

    Returns
    -------
    Palette or None
        None if count is out of bounds or the method is unknown; a warning
        is emitted in both cases.
    """
    if count <= 0 or count > MAX_PALETTE_SIZE:
        warnings.warn(
            f"Number of colours requested out of bounds: {count}.",
            OutOfRangeWarning,
            stacklevel=2,
        )
        return None
    if not method:
        method = "chroma_bisection"
    if value is None:
        value = DEFAULT_VALUE

    palette = Palette(method=method, value=value)

    if method == "chroma_bisection":
        if rng is None:
            rng = np.random.default_rng(seed)
        # Bisect each chroma segment so the first colours are well spaced.
        # Past the 12th colour neighbouring picks get easily confused, so
        # later cycles are sampled in random order.
        cycle = 1
        while len(palette) < count:
            hues = [h for h in _bisection_hues(cycle) if h not in palette.entries]
            if cycle > 2:
                hues = [hues[i] for i in rng.permutation(len(hues))]
            for hue in hues:
                if len(palette) == count:
                    break
                palette.entries[hue] = hsv_to_rgb(hue, DEFAULT_SATURATION, value)
            cycle += 1

    elif method == "equal_spacing":
        for i in range(1, count + 1):
            hue = (i * 360 / count) % 360
            palette.entries[hue] = hsv_to_rgb(hue, DEFAULT_SATURATION, value)

    else:
        warnings.warn(
            f"Colourset method {method!r} not known, use either 'equal_spacing' "
            "or for fewer colours 'chroma_bisection'.",
            UnknownMethodWarning,
            stacklevel=2,
        )
        return None

    return palette
