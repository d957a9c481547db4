"""
TikZ Render Pipeline

Turns pictures into PDF and SVG files by running the LaTeX toolchain in a
scratch directory and moving the finished artifact to the caller's path.

Each attempt:
1. Write <name>.tex into a fresh scratch directory
2. Run the engine; run it again if the log reports unresolved labels
3. On failure, enable the standalone workaround and retry once if the log
   shows the known standalone/lualatex incompatibility, otherwise raise
4. On success, convert if needed and move the artifact to its destination

The scratch directory is removed when the attempt ends, whatever the outcome,
unless the configuration keeps intermediate files.
"""

import shutil
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from tikzpictures.config import RenderConfig, get_config
from tikzpictures.contexts.picture import TikzDocument, TikzPicture
from tikzpictures.contexts.rendering.emitter import (
    emit_document_source,
    emit_picture_source,
    write_source,
)
from tikzpictures.contexts.rendering.exceptions import (
    ConversionError,
    EmptyDocumentError,
    LatexError,
)
from tikzpictures.contexts.rendering.log_parsing import (
    extract_error_block,
    find_signature,
    parse_latex_log,
    read_engine_log,
)
from tikzpictures.contexts.rendering.logger import (
    _log_debug,
    _log_error,
    _log_info,
    _log_warning,
    log_engine_failure,
    log_render_result,
    log_render_start,
)
from tikzpictures.contexts.rendering.targets import PDF, SVG, TEX, TIKZ, SaveTarget
from tikzpictures.contexts.rendering.toolchain import (
    ToolRun,
    dvisvgm_command,
    engine_command,
    pdf2svg_command,
    run_tool,
)
from tikzpictures.utils.pdf_processing import page_count

# Restarts allowed after enabling the standalone workaround
MAX_WORKAROUND_RETRIES = 1

# Intermediate formats written by --output-format=dvi (xelatex writes .xdv)
INTERMEDIATE_EXTENSIONS = [".dvi", ".xdv"]

DIRECT_SVG_FAILURE = "Direct output to SVG failed! Please consider using PDF2SVG"
DIRECT_SVG_HINT = "Call tikz_use_pdf2svg(True) or set use_pdf2svg=True in the RenderConfig"


@dataclass
class RenderResult:
    """
    Result of a successful render.

    Attributes:
        output_path: Absolute path of the produced artifact
        engine_runs: Number of engine invocations in the successful attempt
        warnings: LaTeX warnings parsed from the engine log
        page_count: Pages in the produced PDF (None for SVG or unreadable PDFs)
        workaround_enabled: Whether the standalone workaround was active
    """

    output_path: Path
    engine_runs: int = 1
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None
    workaround_enabled: bool = False


@dataclass
class EngineOutcome:
    """Final engine run of an attempt together with the log it left behind."""

    run: ToolRun
    log: str
    runs: int = 1

    @property
    def success(self) -> bool:
        return self.run.success


@contextmanager
def scratch_directory(config: RenderConfig, parent: Optional[Path] = None) -> Iterator[Path]:
    """
    Create a uniquely named scratch directory for one render attempt.

    The directory is removed on exit (including on exceptions) when
    config.delete_intermediate is set. A failed removal is logged and never
    replaces the outcome of the render itself.

    Args:
        config: Render configuration (retention policy)
        parent: Directory to create it in (defaults to the system temp dir)

    Yields:
        Path to the scratch directory
    """
    workdir = Path(tempfile.mkdtemp(prefix="tikz_", dir=parent))
    try:
        yield workdir
    finally:
        if config.delete_intermediate:
            try:
                shutil.rmtree(workdir)
            except OSError as e:
                _log_error(f"Your intermediate files are not being deleted. ({workdir}): {e}")
        else:
            _log_debug(f"Keeping intermediate files in {workdir}")


def move_artifact(source: Path, dest: Path, warn: bool = True) -> None:
    """
    Move a produced file to its destination, replacing whatever is there.

    Missing parent directories of the destination are created.

    Args:
        source: File in the scratch directory
        dest: Caller-visible destination
        warn: Log a warning when dest already exists
    """
    if warn and dest.is_file():
        _log_warning(f"File {dest} already exists, overwriting!")
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(dest))


def _run_engine(
    workdir: Path,
    basename: str,
    shell_escape: bool,
    config: RenderConfig,
    output_format: Optional[str] = None,
) -> EngineOutcome:
    """
    Run the engine on <basename>.tex, repeating once for unresolved labels.

    The status of the repeat run replaces the first one.
    """
    cmd = engine_command(
        config.latex_command,
        f"{basename}.tex",
        shell_escape=shell_escape,
        output_format=output_format,
    )

    run = run_tool(cmd, workdir, config.timeout)
    log_content = read_engine_log(workdir, basename)
    runs = 1

    if find_signature(log_content, config.rerun_signatures):
        _log_debug("Unresolved references, running engine again")
        run = run_tool(cmd, workdir, config.timeout)
        log_content = read_engine_log(workdir, basename)
        runs += 1

    return EngineOutcome(run=run, log=log_content, runs=runs)


def _needs_workaround(outcome: EngineOutcome, config: RenderConfig) -> bool:
    """Check whether a failed run should be retried with the standalone workaround."""
    if config.standalone_workaround:
        return False
    return find_signature(outcome.log, config.workaround_signatures) is not None


def _latex_failure(outcome: EngineOutcome) -> LatexError:
    """Log the engine's error block and build the exception to raise."""
    error_block = extract_error_block(outcome.log)
    errors, _ = parse_latex_log(outcome.log)
    log_engine_failure(outcome.run, error_block)
    return LatexError(
        "LaTeX error",
        error_block=error_block,
        command=outcome.run.command,
        stdout=outcome.run.stdout,
        errors=errors,
    )


def _render_picture(
    target: SaveTarget,
    picture: TikzPicture,
    config: RenderConfig,
    finish: Callable[[Path, str], Path],
    output_format: Optional[str] = None,
) -> RenderResult:
    """
    Run the attempt loop shared by PDF and SVG rendering.

    Args:
        target: Destination descriptor
        picture: Picture to render
        config: Render configuration (its workaround flag may be set here)
        finish: Called as finish(workdir, basename) after a successful engine run;
                returns the artifact to move to the destination
        output_format: Engine intermediate format (None for PDF)

    Returns:
        RenderResult of the successful attempt
    """
    for attempt in range(1, MAX_WORKAROUND_RETRIES + 2):
        dest = target.path.absolute()
        basename = target.basename
        start_time = time.time()

        with scratch_directory(config) as workdir:
            log_render_start(type(target).__name__, dest, workdir, attempt)

            source = emit_picture_source(
                picture,
                include_preamble=True,
                standalone_workaround=config.standalone_workaround,
            )
            (workdir / f"{basename}.tex").write_text(source, encoding="utf-8")
            outcome = _run_engine(
                workdir, basename, picture.enable_write18, config, output_format
            )

            if not outcome.success:
                if attempt <= MAX_WORKAROUND_RETRIES and _needs_workaround(outcome, config):
                    _log_info("Enabling standalone workaround.")
                    config.standalone_workaround = True
                    continue

                error = _latex_failure(outcome)
                if output_format is not None:
                    raise ConversionError(
                        DIRECT_SVG_FAILURE, tool=config.latex_command, hint=DIRECT_SVG_HINT
                    ) from error
                raise error

            artifact = finish(workdir, basename)
            move_artifact(artifact, dest)

        _, warnings = parse_latex_log(outcome.log)
        result = RenderResult(
            output_path=dest,
            engine_runs=outcome.runs,
            warnings=warnings,
            page_count=page_count(dest) if dest.suffix == ".pdf" else None,
            workaround_enabled=config.standalone_workaround,
        )
        log_render_result(result, time.time() - start_time)
        return result


def _pdf_artifact(workdir: Path, basename: str) -> Path:
    pdf_path = workdir / f"{basename}.pdf"
    if not pdf_path.exists():
        raise LatexError("PDF file was not generated")
    return pdf_path


def _render_document_pdf(target: PDF, document: TikzDocument, config: RenderConfig) -> RenderResult:
    """
    Render a captioned document to PDF with a single engine run.

    No workaround retry is attempted. Failures are logged with a warning and
    re-raised unchanged.
    """
    if not document.pictures:
        raise EmptyDocumentError("TikzDocument does not contain pictures")

    dest = target.path.absolute()
    basename = target.basename
    start_time = time.time()

    with scratch_directory(config) as workdir:
        try:
            log_render_start("PDF document", dest, workdir, attempt=1)
            source = emit_document_source(document, include_preamble=True)
            (workdir / f"{basename}.tex").write_text(source, encoding="utf-8")

            cmd = engine_command(
                config.latex_command,
                f"{basename}.tex",
                shell_escape=document.pictures[0].enable_write18,
            )
            run = run_tool(cmd, workdir, config.timeout)
            outcome = EngineOutcome(run=run, log=read_engine_log(workdir, basename))

            if not outcome.success:
                raise _latex_failure(outcome)

            move_artifact(_pdf_artifact(workdir, basename), dest)
        except Exception:
            _log_warning("Error saving as PDF.")
            raise

    _, warnings = parse_latex_log(outcome.log)
    result = RenderResult(
        output_path=dest,
        warnings=warnings,
        page_count=page_count(dest),
        workaround_enabled=config.standalone_workaround,
    )
    log_render_result(result, time.time() - start_time)
    return result


def render_to_pdf(
    target: PDF,
    item: Union[TikzPicture, TikzDocument],
    config: Optional[RenderConfig] = None,
) -> RenderResult:
    """
    Render a picture or captioned document to a PDF file.

    Args:
        target: PDF target naming the destination
        item: Picture or document to render
        config: Render configuration (defaults to the process-wide config)

    Returns:
        RenderResult describing the produced PDF

    Raises:
        LatexError: If the engine fails (after the workaround retry, if any)
        EmptyDocumentError: If a document without pictures is given
        ToolchainError: If the engine is missing or times out
    """
    if config is None:
        config = get_config()

    if isinstance(item, TikzDocument):
        return _render_document_pdf(target, item, config)

    return _render_picture(target, item, config, finish=_pdf_artifact)


def render_to_svg(
    target: SVG,
    picture: TikzPicture,
    config: Optional[RenderConfig] = None,
) -> RenderResult:
    """
    Render a picture to an SVG file.

    With config.use_pdf2svg (default) the engine writes a PDF that pdf2svg
    converts. Otherwise the engine writes DVI that dvisvgm converts directly;
    those tools can fail without a nonzero status, so the SVG is checked for.

    Args:
        target: SVG target naming the destination
        picture: Picture to render
        config: Render configuration (defaults to the process-wide config)

    Returns:
        RenderResult describing the produced SVG

    Raises:
        LatexError: If the engine fails on the PDF route
        ConversionError: If the converter fails, or the direct route yields no SVG
        ToolchainError: If a tool is missing or times out
        TypeError: If a TikzDocument is given
    """
    if config is None:
        config = get_config()

    if isinstance(picture, TikzDocument):
        raise TypeError("TikzDocument can only be saved as TEX or PDF")

    def via_pdf(workdir: Path, basename: str) -> Path:
        pdf_path = _pdf_artifact(workdir, basename)
        svg_path = workdir / f"{basename}.svg"
        run = run_tool(pdf2svg_command(pdf_path.name, svg_path.name), workdir, config.timeout)
        if not run.success:
            raise ConversionError("pdf2svg failure", tool="pdf2svg")
        return svg_path

    def via_dvi(workdir: Path, basename: str) -> Path:
        svg_path = workdir / f"{basename}.svg"
        intermediate = workdir / f"{basename}.dvi"
        for ext in INTERMEDIATE_EXTENSIONS:
            candidate = workdir / f"{basename}{ext}"
            if candidate.exists():
                intermediate = candidate
                break

        run = run_tool(dvisvgm_command(intermediate.name), workdir, config.timeout)
        if not run.success or not svg_path.exists():
            raise ConversionError(DIRECT_SVG_FAILURE, tool="dvisvgm", hint=DIRECT_SVG_HINT)
        return svg_path

    if config.use_pdf2svg:
        return _render_picture(target, picture, config, finish=via_pdf)
    return _render_picture(target, picture, config, finish=via_dvi, output_format="dvi")


def save(
    target: SaveTarget,
    item: Union[TikzPicture, TikzDocument],
    config: Optional[RenderConfig] = None,
) -> Union[Path, RenderResult]:
    """
    Save a picture or document to the given target.

    Examples:
        >>> picture = TikzPicture(r"\\draw (0,0) -- (1,1);")
        >>> save(TEX("figure"), picture)          # figure.tex, standalone document
        >>> save(TIKZ("figure"), picture)         # figure.tikz, bare tikzpicture
        >>> save(PDF("figure"), picture)          # figure.pdf
        >>> save(SVG("figure"), picture)          # figure.svg

    Args:
        target: TEX, TIKZ, PDF or SVG target
        item: Picture or document to save
        config: Render configuration (defaults to the process-wide config)

    Returns:
        Written path for source targets, RenderResult for PDF and SVG

    Raises:
        TypeError: For unsupported target/item combinations
    """
    if isinstance(target, (TEX, TIKZ)):
        return write_source(target, item, config)
    if isinstance(target, PDF):
        return render_to_pdf(target, item, config)
    if isinstance(target, SVG):
        return render_to_svg(target, item, config)
    raise TypeError(f"Unsupported save target: {type(target).__name__}")
