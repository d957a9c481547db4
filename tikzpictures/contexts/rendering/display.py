"""
Inline SVG Display

Renders pictures to SVG markup for embedding in notebooks and HTML pages.
Several renders embedded in one page would otherwise share ids like "glyph0-1"
or "clip1", so every id and reference is suffixed with a counter value that
changes on each call.
"""

import tempfile
import threading
import time
import uuid
from pathlib import Path
from typing import List, Optional, Tuple

from tikzpictures.config import RenderConfig, get_config
from tikzpictures.contexts.picture import TikzPicture
from tikzpictures.contexts.rendering.pipeline import render_to_svg
from tikzpictures.contexts.rendering.targets import SVG


class SvgIdCounter:
    """
    Thread-safe monotonically increasing counter for SVG id suffixes.

    Seeded from the current time in microseconds so ids also differ from
    those produced by earlier processes writing into the same page.
    """

    def __init__(self, start: Optional[int] = None):
        if start is None:
            start = round(time.time() * 1e6)
        self._value = start
        self._lock = threading.Lock()

    def next(self) -> int:
        """Return the current value and advance the counter."""
        with self._lock:
            value = self._value
            self._value += 1
            return value


_default_counter = SvgIdCounter()


def id_rewrites(svg_id: int) -> List[Tuple[str, str]]:
    """
    Substitutions that make a rendered SVG's ids unique, applied in order.

    Covers glyph, clip-path, image and linear-gradient definitions and their
    url(#...)/href references, and marks raster images as pixelated.
    """
    return [
        ("glyph", f"glyph-{svg_id}-"),
        ('"clip', f'"clip-{svg_id}-'),
        ("#clip", f"#clip-{svg_id}-"),
        ('"image', f'"image-{svg_id}-'),
        ("#image", f"#image-{svg_id}-"),
        ('linearGradient id="linear', f'linearGradient id="linear-{svg_id}-'),
        ("#linear", f"#linear-{svg_id}-"),
        ('image id="', 'image style="image-rendering: pixelated;" id="'),
    ]


def make_ids_unique(svg: str, svg_id: int) -> str:
    """Apply id_rewrites() to SVG text."""
    for old, new in id_rewrites(svg_id):
        svg = svg.replace(old, new)
    return svg


def svg_markup(
    picture: TikzPicture,
    config: Optional[RenderConfig] = None,
    counter: Optional[SvgIdCounter] = None,
) -> str:
    """
    Render a picture to SVG markup safe to embed next to other renders.

    The SVG is written to a temporary file, read back with its ids rewritten,
    and the file is deleted afterwards (also on errors) unless the
    configuration keeps intermediate files.

    Args:
        picture: Picture to render
        config: Render configuration (defaults to the process-wide config)
        counter: Id counter (defaults to the process-wide counter)

    Returns:
        SVG document text
    """
    if config is None:
        config = get_config()
    if counter is None:
        counter = _default_counter

    filename = Path(tempfile.gettempdir()) / f"tikz_{uuid.uuid4().hex}"
    target = SVG(str(filename))

    try:
        render_to_svg(target, picture, config)
        svg = target.path.read_text(encoding="utf-8")
        return make_ids_unique(svg, counter.next())
    finally:
        if config.delete_intermediate:
            target.path.unlink(missing_ok=True)
