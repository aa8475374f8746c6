"""
genopic: draw raw genotype calls as a grid of coloured squares.
"""

from .colors import Palette, generate_palette, hsv_to_rgb, rgb_to_hex
from .data_loader import GenotypeDataset, read_23andme
from .exporter import RenderError, RenderOptions, category_palette, export_to_svg, render_svg
from .layout import GridLayout, compute_layout
from .rasterizer import RasterizeError, export_to_png, rasterize_svg

__all__ = [
    "Palette",
    "generate_palette",
    "hsv_to_rgb",
    "rgb_to_hex",
    "GenotypeDataset",
    "read_23andme",
    "RenderError",
    "RenderOptions",
    "category_palette",
    "export_to_svg",
    "render_svg",
    "GridLayout",
    "compute_layout",
    "RasterizeError",
    "export_to_png",
    "rasterize_svg",
]
