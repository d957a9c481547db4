"""Shared fixtures: a scriptable fake toolchain and loguru capture."""

import tempfile
from pathlib import Path

import pytest
from loguru import logger

from tikzpictures.config import RenderConfig, get_config, set_config
from tikzpictures.contexts.rendering import pipeline
from tikzpictures.contexts.rendering.toolchain import ToolRun

FAKE_PDF = b"%PDF-1.5 fake"
FAKE_SVG = '<svg xmlns="http://www.w3.org/2000/svg"><g id="glyph0-1"/></svg>\n'


class FakeToolchain:
    """
    Stand-in for run_tool() that imitates lualatex, pdf2svg and dvisvgm.

    Engine calls consume `engine_results` and `engine_logs` in order (the last
    entry repeats). A successful engine call writes <job>.pdf, or <job>.dvi
    when --output-format=dvi is given.
    """

    def __init__(
        self,
        engine_results=(True,),
        engine_logs=("",),
        pdf2svg_ok=True,
        dvisvgm_ok=True,
        dvisvgm_writes_svg=True,
        engine_writes_output=True,
        pdf_bytes=FAKE_PDF,
    ):
        self.engine_results = list(engine_results)
        self.engine_logs = list(engine_logs)
        self.pdf2svg_ok = pdf2svg_ok
        self.dvisvgm_ok = dvisvgm_ok
        self.dvisvgm_writes_svg = dvisvgm_writes_svg
        self.engine_writes_output = engine_writes_output
        self.pdf_bytes = pdf_bytes

        self.calls = []
        self.workdirs = []
        self.sources = []

    @property
    def engine_calls(self):
        return [cmd for cmd in self.calls if cmd[0] not in ("pdf2svg", "dvisvgm")]

    def __call__(self, cmd, cwd, timeout=None):
        self.calls.append(list(cmd))
        self.workdirs.append(Path(cwd))
        cwd = Path(cwd)

        if cmd[0] == "pdf2svg":
            if self.pdf2svg_ok:
                (cwd / cmd[2]).write_text(FAKE_SVG)
            return ToolRun(command=cmd, returncode=0 if self.pdf2svg_ok else 1)

        if cmd[0] == "dvisvgm":
            if self.dvisvgm_writes_svg:
                (cwd / f"{Path(cmd[-1]).stem}.svg").write_text(FAKE_SVG)
            return ToolRun(command=cmd, returncode=0 if self.dvisvgm_ok else 1)

        index = len(self.engine_calls) - 1
        ok = self.engine_results[min(index, len(self.engine_results) - 1)]
        log = self.engine_logs[min(index, len(self.engine_logs) - 1)]

        source = cwd / cmd[-1]
        job = source.stem
        self.sources.append(source.read_text())
        (cwd / f"{job}.log").write_text(log)

        if ok and self.engine_writes_output:
            if "--output-format=dvi" in cmd:
                (cwd / f"{job}.dvi").write_bytes(b"dvi")
            else:
                (cwd / f"{job}.pdf").write_bytes(self.pdf_bytes)

        return ToolRun(command=cmd, returncode=0 if ok else 1, stdout="engine output")


@pytest.fixture
def fake_toolchain(monkeypatch):
    """Install a FakeToolchain in the pipeline; tests adjust its attributes."""
    fake = FakeToolchain()
    monkeypatch.setattr(pipeline, "run_tool", fake)
    return fake


@pytest.fixture
def scratch_root(tmp_path, monkeypatch):
    """Direct scratch directories into a per-test directory."""
    root = tmp_path / "scratch"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture
def config():
    """Fresh configuration built from packaged defaults only."""
    return RenderConfig()


@pytest.fixture
def global_config():
    """Swap in a fresh process-wide config and restore the original afterwards."""
    original = get_config()
    fresh = RenderConfig()
    set_config(fresh)
    yield fresh
    set_config(original)


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
