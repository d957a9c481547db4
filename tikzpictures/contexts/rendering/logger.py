"""
Rendering context logger.

Provides logging interface for rendering context with automatic [tikz] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[tikz]"


# Wrapper functions with automatic [tikz] prefix


def _log_info(message: str) -> None:
    """Log info message with [tikz] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [tikz] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [tikz] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [tikz] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [tikz] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(target_name: str, dest: Path, workdir: Path, attempt: int) -> None:
    """Log start of a render attempt with context."""
    _log_info(f"Rendering {target_name} -> {dest}")
    _log_debug(f"  Scratch directory: {workdir}")
    _log_debug(f"  Attempt: {attempt}")


def log_engine_failure(run, error_block: str) -> None:
    """
    Log a failed engine run with its error block and raw output.

    Args:
        run: ToolRun of the failed engine invocation
        error_block: Error text extracted from the engine log
    """
    _log_error(f"LaTeX error (exit status {run.returncode})")
    for line in error_block.splitlines():
        _log_error(f"  {line}")

    # Use opt(raw=True) to bypass format template and preserve original formatting
    if run.stdout:
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\nENGINE STDOUT:\n{'=' * 80}\n{run.stdout}\n"
        )
    if run.stderr:
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\nENGINE STDERR:\n{'=' * 80}\n{run.stderr}\n"
        )


def log_render_result(result, elapsed_time: float) -> None:
    """
    Log a successful render with diagnostics.

    Args:
        result: RenderResult from the pipeline
        elapsed_time: Time taken to render
    """
    _log_success(
        f"{result.output_path.name}: {result.engine_runs} engine run(s), "
        f"{len(result.warnings)} warnings ({elapsed_time:.2f}s)"
    )
    if result.page_count is not None:
        _log_debug(f"  Pages: {result.page_count}")

    warning_limit = 3
    for i, warn in enumerate(result.warnings[:warning_limit], 1):
        _log_debug(f"  Warning {i}: {warn}")
    if len(result.warnings) > warning_limit:
        _log_debug(f"  ... and {len(result.warnings) - warning_limit} more warnings")
