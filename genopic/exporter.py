"""
Export genotype calls to a standalone SVG grid.

Creates self-contained SVG documents with one square per genotype call and,
for on-screen viewing, embedded ECMAScript for mouse-over tooltips.
"""

from dataclasses import dataclass
from html import escape
from pathlib import Path
from typing import Callable, Hashable, Iterator, List, Optional, Sequence, Tuple, Union

from .colors import RGB, Palette, generate_palette
from .data_loader import GenotypeDataset
from .layout import GridLayout, compute_layout


class RenderError(ValueError):
    """Raised when a document cannot be rendered in full."""


# A1 sheet in tenths of a millimetre
DEFAULT_WIDTH = 5940
DEFAULT_HEIGHT = 8410
DEFAULT_FILL: RGB = (0, 0, 255)

COLOR_MODES = ("fixed", "category")

SVG_HEADER_TEMPLATE = '''<?xml version="1.0" standalone="no"?>
<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN"
     "http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">
<svg xmlns="http://www.w3.org/2000/svg"
     xmlns:xlink="http://www.w3.org/1999/xlink"
     width="{width}" height="{height}"
     viewBox="0 0 {width} {height}"
     preserveAspectRatio="xMidYMid meet"{onload}>
'''

TOOLTIP_SCRIPT = '''  <script type="text/ecmascript"><![CDATA[
    var svg_document, tooltip, tip_box, tip_text, tip_title, tip_desc;

    function init(evt) {
      svg_document = evt.target.ownerDocument;
      tooltip = svg_document.getElementById('tooltip');
      tip_box = svg_document.getElementById('tip_box');
      tip_text = svg_document.getElementById('tip_text');
      tip_title = svg_document.getElementById('tip_title');
      tip_desc = svg_document.getElementById('tip_desc');
    }

    function child_text(node, tag) {
      var el = node.getElementsByTagName(tag).item(0);
      return el && el.firstChild ? el.firstChild.nodeValue : null;
    }

    function show_tip(evt) {
      var cell = evt.target;
      var title = child_text(cell, 'name');
      if (!title) {
        return false;
      }
      var x = evt.clientX + window.pageXOffset;
      var y = evt.clientY + window.pageYOffset;

      tip_title.firstChild.nodeValue = title;
      tip_title.setAttributeNS(null, 'display', 'inline');

      var desc = child_text(cell, 'desc');
      if (desc) {
        tip_desc.firstChild.nodeValue = desc;
        tip_desc.setAttributeNS(null, 'display', 'inline');
      } else {
        tip_desc.setAttributeNS(null, 'display', 'none');
      }

      var box = tip_text.getBBox();
      tip_box.setAttributeNS(null, 'width', Number(box.width) + 10);
      tip_box.setAttributeNS(null, 'height', Number(box.height) + 10);

      tooltip.setAttributeNS(null, 'transform', 'translate(' + x + ',' + y + ')');
      tooltip.setAttributeNS(null, 'visibility', 'visible');
    }

    function hide_tip(evt) {
      tooltip.setAttributeNS(null, 'visibility', 'hidden');
    }
  ]]></script>
'''

SVG_DEFS = '''  <defs>
    <linearGradient id="disorder" x1="0%" y1="0%" x2="0%" y2="100%" spreadMethod="pad">
      <stop offset="0%" stop-color="#cccccc" stop-opacity="0.6"/>
      <stop offset="100%" stop-color="#666666" stop-opacity="0.6"/>
    </linearGradient>
    <radialGradient id="radial-glow" fx="40%" fy="40%" r="55%" spreadMethod="pad">
      <stop offset="0%" stop-color="#cccccc" stop-opacity="0.5"/>
      <stop offset="100%" stop-color="#cccccc" stop-opacity="0.01"/>
    </radialGradient>
    <filter id="emboss">
      <feGaussianBlur in="SourceAlpha" stdDeviation="2" result="blur"/>
      <feSpecularLighting in="blur" surfaceScale="-3" style="lighting-color:white"
                          specularConstant="1" specularExponent="16" result="spec" kernelUnitLength="1">
        <feDistantLight azimuth="45" elevation="45"/>
      </feSpecularLighting>
      <feComposite in="spec" in2="SourceGraphic" operator="in" result="specOut"/>
    </filter>
    <pattern id="binding" x="0" y="0" width="5" height="5" patternUnits="userSpaceOnUse">
      <path d="M 0 0 Q .25 5 2.5 2.5 T 5 5" style="stroke: black; fill: none;"/>
    </pattern>
  </defs>
  <g transform="translate({xpad},{ypad}) scale({scale})">
'''

TOOLTIP_OVERLAY = '''  <g id="tooltip" opacity="0.8" visibility="hidden" pointer-events="none">
    <rect id="tip_box" x="0" y="5" width="88" height="20" rx="2" ry="2" fill="white" stroke="black"/>
    <text id="tip_text" x="5" y="20" font-family="Arial" font-size="10">
      <tspan id="tip_title" x="5" font-weight="bold" text-decoration="underline"><![CDATA[]]></tspan>
      <tspan id="tip_desc" x="5" dy="15" fill="blue"><![CDATA[]]></tspan>
    </text>
  </g>
'''


def _num(value: float) -> str:
    """Format a coordinate without a trailing '.0' for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass
class RenderOptions:
    """Settings for one rendered document."""
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    scale: float = 1.0
    for_print: bool = False
    force_png: bool = False
    xpad: float = 10
    ypad: float = 10
    fill: RGB = DEFAULT_FILL
    color_by: str = "fixed"
    palette_method: str = "chroma_bisection"
    palette_value: Optional[float] = None
    annotate: bool = False
    strict_palette: bool = False
    seed: Optional[int] = None

    @property
    def interactive(self) -> bool:
        """Tooltips only make sense for on-screen SVG."""
        return not (self.for_print or self.force_png)


def render_header(options: RenderOptions) -> str:
    """SVG preamble, tooltip script, static definitions and the opening group."""
    width = options.width * options.scale
    height = options.height * options.scale
    header = SVG_HEADER_TEMPLATE.format(
        width=_num(width),
        height=_num(height),
        onload=' onload="init(evt)"' if options.interactive else "",
    )
    if options.interactive:
        header += TOOLTIP_SCRIPT
    header += SVG_DEFS.format(
        xpad=_num(options.xpad),
        ypad=_num(options.ypad),
        scale=_num(options.scale),
    )
    return header


def render_footer(options: RenderOptions) -> str:
    footer = "  </g>\n"
    if options.interactive:
        footer += TOOLTIP_OVERLAY
    footer += "</svg>\n"
    return footer


def _rgb_style(rgb: RGB) -> str:
    return "fill:rgb({},{},{});".format(*rgb)


def category_palette(categories: Sequence[Hashable], options: RenderOptions) -> Optional[Palette]:
    """
    Build the palette for a run of distinct categories.

    Returns None (after a warning) when no palette can be generated, or
    raises RenderError instead when strict_palette is set.
    """
    palette = generate_palette(
        len(categories),
        method=options.palette_method,
        value=options.palette_value,
        seed=options.seed,
    )
    if palette is None and options.strict_palette:
        raise RenderError(
            f"Could not build a {options.palette_method!r} palette for "
            f"{len(categories)} categories"
        )
    return palette


def item_colorer(
    items: Sequence[Hashable],
    options: RenderOptions,
    palette: Optional[Palette] = None,
) -> Callable[[Hashable], RGB]:
    """
    Pick the fill colour function for a run of items.

    With color_by='category' each distinct item value gets its own palette
    colour, in order of first appearance. A palette built beforehand can be
    passed in so other outputs share the same colours. If no palette can be
    generated the fixed fill is used instead, unless strict_palette is set.
    """
    if options.color_by == "fixed":
        return lambda item: options.fill
    if options.color_by != "category":
        raise RenderError(
            f"Unknown color_by {options.color_by!r}, use one of {', '.join(COLOR_MODES)}"
        )

    categories = list(dict.fromkeys(items))
    if palette is None:
        palette = category_palette(categories, options)
    elif len(palette) < len(categories):
        raise RenderError(
            f"Palette has {len(palette)} colours for {len(categories)} categories"
        )
    if palette is None:
        print(
            f"  Warning: no palette for {len(categories)} categories; "
            f"using fixed fill {_rgb_style(options.fill)}"
        )
        return lambda item: options.fill

    lookup = dict(zip(categories, palette.colors))
    return lambda item: lookup[item]


def render_cells(
    items: Sequence[Hashable],
    layout: GridLayout,
    colorer: Callable[[Hashable], RGB],
    options: RenderOptions,
    labels: Optional[Sequence[str]] = None,
) -> Iterator[str]:
    """Yield one <rect> per item, in lockstep with the layout positions."""
    side = _num(layout.side)
    annotate = options.annotate and options.interactive
    for i, (item, (x, y)) in enumerate(zip(items, layout.positions())):
        style = _rgb_style(colorer(item))
        if not annotate:
            yield (
                f'    <rect x="{x}" y="{y}" width="{side}" height="{side}" '
                f'style="{style}"/>\n'
            )
            continue
        label = labels[i] if labels is not None else f"#{i + 1}"
        yield (
            f'    <rect x="{x}" y="{y}" width="{side}" height="{side}" style="{style}" '
            f'onmousemove="show_tip(evt)" onmouseout="hide_tip(evt)">'
            f'<name>{escape(str(label))}</name><desc>{escape(str(item))}</desc></rect>\n'
        )


def _render(
    items: Sequence[Hashable],
    options: RenderOptions,
    labels: Optional[Sequence[str]],
    palette: Optional[Palette],
) -> Tuple[GridLayout, str]:
    items = list(items)
    if labels is not None and len(labels) != len(items):
        raise RenderError(f"Got {len(labels)} labels for {len(items)} items")

    layout = compute_layout(options.width, options.height, len(items))
    if layout is None:
        raise RenderError(
            f"Cannot lay out {len(items):,} items on a "
            f"{_num(options.width)} x {_num(options.height)} canvas"
        )
    colorer = item_colorer(items, options, palette=palette)

    parts: List[str] = [render_header(options)]
    parts.extend(render_cells(items, layout, colorer, options, labels=labels))
    parts.append(render_footer(options))
    return layout, "".join(parts)


def render_svg(
    items: Sequence[Hashable],
    options: Optional[RenderOptions] = None,
    labels: Optional[Sequence[str]] = None,
    palette: Optional[Palette] = None,
) -> str:
    """
    Render items as a grid of squares in a standalone SVG document.

    Parameters
    ----------
    items : sequence
        Categorical values, one cell each, in drawing order
    options : RenderOptions, optional
        Canvas, mode and colouring settings
    labels : sequence of str, optional
        Tooltip titles, parallel to items (only used with annotate=True)
    palette : Palette, optional
        Colours for color_by='category', one per distinct item in order of
        first appearance. Generated from options when not given.

    Returns
    -------
    str
        The complete SVG text

    Raises
    ------
    RenderError
        If the items cannot be laid out or coloured. Nothing is emitted in
        that case.
    """
    if options is None:
        options = RenderOptions()
    return _render(items, options, labels, palette)[1]


def export_to_svg(
    data: Union[GenotypeDataset, Sequence[Hashable]],
    output_path: Union[str, Path],
    options: Optional[RenderOptions] = None,
    palette: Optional[Palette] = None,
) -> str:
    """
    Render genotype calls and write the SVG document.

    Parameters
    ----------
    data : GenotypeDataset or sequence
        Loaded genotype calls, or a plain sequence of item values
    output_path : str or Path
        Path for the output SVG file
    options : RenderOptions, optional
        Rendering settings
    palette : Palette, optional
        Pre-built category palette, see render_svg

    Returns
    -------
    str
        Path to the created SVG file
    """
    if options is None:
        options = RenderOptions()
    if isinstance(data, GenotypeDataset):
        items = data.genotypes
        labels = data.labels
    else:
        items = list(data)
        labels = None

    layout, svg = _render(items, options, labels, palette)

    output_path = str(Path(output_path).resolve())
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(svg)

    print(f"Exported SVG grid to: {output_path}")
    print(f"  - {len(items):,} cells")
    print(f"  - cell size {layout.side} ({layout.columns} per row, {layout.rows} rows)")
    if layout.extent > options.height:
        print(f"  - last row ends at {layout.extent}, past the canvas height {_num(options.height)}")

    return output_path
