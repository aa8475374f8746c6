"""
PNG export for rendered SVG documents.

Conversion is handed to librsvg's ``rsvg-convert`` command line tool; the
SVG is written to a temporary file first so the tool gets a real path.
"""

import io
import os
import shutil
import subprocess
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Union

from PIL import Image

from .exporter import RenderOptions, render_svg

RSVG_CONVERT = "rsvg-convert"
PRINT_DPI = 300


class RasterizeError(RuntimeError):
    """Raised when the external rasterizer is missing or fails."""


def rsvg_command(
    svg_path: Union[str, Path],
    width: float,
    height: float,
    scale: float = 1.0,
    for_print: bool = False,
    executable: str = RSVG_CONVERT,
) -> List[str]:
    """Build the rsvg-convert invocation for one document."""
    if for_print:
        # Print quality: double the pixel size and raise the DPI
        px_width = width * scale * 2
        px_height = height * scale * 2
        cmd = [executable, "-d", str(PRINT_DPI), "-p", str(PRINT_DPI)]
    else:
        px_width = width * scale
        px_height = height * scale
        cmd = [executable]
    cmd += [
        "--format=png",
        "-w", str(int(px_width)),
        "-h", str(int(px_height)),
        str(svg_path),
    ]
    return cmd


def rasterize_svg(
    svg: str,
    width: float,
    height: float,
    scale: float = 1.0,
    for_print: bool = False,
    executable: Optional[str] = None,
) -> bytes:
    """
    Convert SVG text to PNG bytes.

    Parameters
    ----------
    svg : str
        Complete SVG document
    width, height : float
        Canvas size before scaling
    scale : float
        Scale factor applied to the canvas
    for_print : bool
        Render at twice the size and 300 DPI
    executable : str, optional
        Path to rsvg-convert, looked up on PATH by default

    Returns
    -------
    bytes
        PNG image data
    """
    if executable is None:
        executable = shutil.which(RSVG_CONVERT)
        if executable is None:
            raise RasterizeError(f"{RSVG_CONVERT} not found on PATH; install librsvg to export PNG")

    fd, svg_path = tempfile.mkstemp(prefix="genopic", suffix=".svg")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(svg)
        cmd = rsvg_command(svg_path, width, height, scale=scale, for_print=for_print, executable=executable)
        try:
            result = subprocess.run(cmd, check=True, capture_output=True)
        except subprocess.CalledProcessError as exc:
            stderr = exc.stderr.decode("utf-8", errors="replace").strip() if exc.stderr else ""
            raise RasterizeError(f"Couldn't convert to PNG: {stderr or exc}") from exc
    finally:
        Path(svg_path).unlink(missing_ok=True)

    png = result.stdout
    try:
        with Image.open(io.BytesIO(png)) as img:
            img.verify()
    except Exception as exc:
        raise RasterizeError(f"{RSVG_CONVERT} did not produce a valid PNG") from exc
    return png


def export_to_png(
    items,
    output_path: Union[str, Path],
    options: Optional[RenderOptions] = None,
    labels=None,
    executable: Optional[str] = None,
    palette=None,
) -> str:
    """
    Render items as a static SVG grid and write it out as a PNG file.

    Returns
    -------
    str
        Path to the created PNG file
    """
    if options is None:
        options = RenderOptions(force_png=True)
    elif not options.force_png:
        options = replace(options, force_png=True)

    svg = render_svg(items, options, labels=labels, palette=palette)
    png = rasterize_svg(
        svg,
        options.width,
        options.height,
        scale=options.scale,
        for_print=options.for_print,
        executable=executable,
    )

    output_path = str(Path(output_path).resolve())
    with open(output_path, "wb") as f:
        f.write(png)

    with Image.open(output_path) as img:
        print(f"Exported PNG to: {output_path} ({img.width} x {img.height} px)")
    return output_path
