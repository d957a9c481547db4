"""Unit tests for inline SVG display."""

import re
import threading

import pytest

from tikzpictures.contexts.picture import TikzPicture
from tikzpictures.contexts.rendering import display
from tikzpictures.contexts.rendering.display import SvgIdCounter, make_ids_unique, svg_markup

RENDERED_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">
<defs>
<g>
<symbol overflow="visible" id="glyph0-1"><path d="M 1 1 L 2 2"/></symbol>
</g>
<clipPath id="clip1"><path d="M 0 0 L 10 10"/></clipPath>
<image id="image5" width="4" height="4" xlink:href="data:image/png;base64,AAAA"/>
<linearGradient id="linear0" x1="0" y1="0" x2="1" y2="1"><stop offset="0"/></linearGradient>
</defs>
<g clip-path="url(#clip1)"><use xlink:href="#glyph0-1" x="1" y="2"/></g>
<use xlink:href="#image5"/>
<path fill="url(#linear0)" d="M 0 0 L 1 1"/>
</svg>
"""


class FakeSvgRenderer:
    """Stand-in for render_to_svg that writes a fixed SVG to the target path."""

    def __init__(self, content=RENDERED_SVG):
        self.content = content
        self.targets = []

    def __call__(self, target, picture, config=None):
        self.targets.append(target)
        if isinstance(self.content, bytes):
            target.path.write_bytes(self.content)
        else:
            target.path.write_text(self.content, encoding="utf-8")


@pytest.fixture
def fake_renderer(monkeypatch):
    renderer = FakeSvgRenderer()
    monkeypatch.setattr(display, "render_to_svg", renderer)
    return renderer


def _ids(svg):
    return set(re.findall(r'id="([^"]+)"', svg))


class TestMakeIdsUnique:
    """Tests for make_ids_unique function."""

    @pytest.mark.unit
    def test_definitions_and_references_suffixed(self):
        """Test every id class and its references get the counter value."""
        svg = make_ids_unique(RENDERED_SVG, 42)

        assert 'id="glyph-42-0-1"' in svg
        assert 'xlink:href="#glyph-42-0-1"' in svg
        assert 'id="clip-42-1"' in svg
        assert "url(#clip-42-1)" in svg
        assert 'id="image-42-5"' in svg
        assert 'xlink:href="#image-42-5"' in svg
        assert 'linearGradient id="linear-42-0"' in svg
        assert "url(#linear-42-0)" in svg

    @pytest.mark.unit
    def test_images_marked_pixelated(self):
        """Test raster images get a pixelated rendering hint."""
        svg = make_ids_unique('<image id="image1" width="2"/>', 7)

        assert svg == '<image style="image-rendering: pixelated;" id="image-7-1" width="2"/>'

    @pytest.mark.unit
    def test_clip_path_element_name_untouched(self):
        """Test only quoted and referenced names are rewritten."""
        svg = make_ids_unique(RENDERED_SVG, 1)

        assert "<clipPath " in svg
        assert 'clip-path="url(#clip-1-1)"' in svg


class TestSvgIdCounter:
    """Tests for SvgIdCounter class."""

    @pytest.mark.unit
    def test_monotonic(self):
        """Test values increase by one per call."""
        counter = SvgIdCounter(start=10)

        assert counter.next() == 10
        assert counter.next() == 11
        assert counter.next() == 12

    @pytest.mark.unit
    def test_seeded_from_time(self):
        """Test the default seed is a microsecond timestamp."""
        assert SvgIdCounter().next() > 10**15

    @pytest.mark.unit
    def test_thread_safe(self):
        """Test concurrent callers never receive the same value."""
        counter = SvgIdCounter(start=0)
        seen = []
        lock = threading.Lock()

        def worker():
            for _ in range(200):
                value = counter.next()
                with lock:
                    seen.append(value)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(seen) == list(range(1600))


class TestSvgMarkup:
    """Tests for svg_markup function."""

    @pytest.mark.unit
    def test_two_renders_never_collide(self, scratch_root, fake_renderer, config):
        """Test ids of two embeddings in one process are disjoint."""
        counter = SvgIdCounter(start=100)
        picture = TikzPicture(r"\draw (0,0) -- (1,1);")

        first = svg_markup(picture, config, counter)
        second = svg_markup(picture, config, counter)

        assert _ids(first)
        assert _ids(first).isdisjoint(_ids(second))
        assert 'id="glyph-100-0-1"' in first
        assert 'id="glyph-101-0-1"' in second

    @pytest.mark.unit
    def test_temporary_svg_deleted(self, scratch_root, fake_renderer, config):
        """Test the temporary SVG is removed after reading."""
        svg_markup(TikzPicture("A;"), config, SvgIdCounter(start=0))

        target = fake_renderer.targets[0]
        assert target.path.parent == scratch_root
        assert not target.path.exists()

    @pytest.mark.unit
    def test_temporary_svg_deleted_on_read_error(self, scratch_root, fake_renderer, config):
        """Test cleanup also happens when the SVG can't be read."""
        fake_renderer.content = b"\xff\xfe not utf-8"

        with pytest.raises(UnicodeDecodeError):
            svg_markup(TikzPicture("A;"), config, SvgIdCounter(start=0))

        assert not fake_renderer.targets[0].path.exists()

    @pytest.mark.unit
    def test_render_error_propagates(self, scratch_root, monkeypatch, config):
        """Test pipeline errors reach the caller without a cleanup error."""

        def failing_render(target, picture, config=None):
            raise RuntimeError("engine failed")

        monkeypatch.setattr(display, "render_to_svg", failing_render)

        with pytest.raises(RuntimeError, match="engine failed"):
            svg_markup(TikzPicture("A;"), config, SvgIdCounter(start=0))

    @pytest.mark.unit
    def test_temporary_svg_kept_with_retention(self, scratch_root, fake_renderer, config):
        """Test retention keeps the temporary SVG."""
        config.delete_intermediate = False

        svg_markup(TikzPicture("A;"), config, SvgIdCounter(start=0))

        assert fake_renderer.targets[0].path.exists()

    @pytest.mark.unit
    def test_picture_repr_svg(self, scratch_root, fake_renderer, global_config):
        """Test notebook display hook renders through the default config."""
        svg = TikzPicture("A;")._repr_svg_()

        assert svg.startswith("<?xml")
        assert "glyph-" in svg
