"""
External Toolchain

Builds command lines for the LaTeX engine and the SVG converters and runs them
as blocking subprocesses inside a scratch directory.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from tikzpictures.contexts.rendering.exceptions import ToolchainError
from tikzpictures.contexts.rendering.logger import _log_debug

SHELL_ESCAPE_FLAG = "--enable-write18"

PDF2SVG = "pdf2svg"
DVISVGM = "dvisvgm"


@dataclass
class ToolRun:
    """
    Outcome of one external tool invocation.

    Attributes:
        command: Command line that was run
        returncode: Process exit status
        stdout: Standard output
        stderr: Standard error
    """

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


def engine_command(
    latex_command: str,
    source_name: str,
    shell_escape: bool = False,
    output_format: Optional[str] = None,
) -> List[str]:
    """
    Build the LaTeX engine command line.

    Args:
        latex_command: Engine executable (e.g., "lualatex")
        source_name: Source file name relative to the working directory
        shell_escape: Add --enable-write18
        output_format: Intermediate format (e.g., "dvi"); None produces PDF

    Returns:
        Command as an argument list
    """
    cmd = [latex_command]
    if shell_escape:
        cmd.append(SHELL_ESCAPE_FLAG)
    if output_format is not None:
        cmd.append(f"--output-format={output_format}")
    cmd.append(source_name)
    return cmd


def pdf2svg_command(pdf_name: str, svg_name: str) -> List[str]:
    return [PDF2SVG, pdf_name, svg_name]


def dvisvgm_command(dvi_name: str) -> List[str]:
    # Glyphs are drawn as paths so the SVG doesn't depend on installed fonts
    return [DVISVGM, "--no-fonts", dvi_name]


def run_tool(cmd: List[str], cwd: Path, timeout: Optional[float] = None) -> ToolRun:
    """
    Run an external tool to completion.

    Stdin is closed so an engine that stops at an error prompt exits instead
    of waiting for input.

    Args:
        cmd: Command line
        cwd: Working directory (the scratch directory)
        timeout: Seconds to wait before giving up (None waits forever)

    Returns:
        ToolRun with exit status and captured output

    Raises:
        ToolchainError: If the executable is missing or the timeout expires
    """
    _log_debug(f"Running: {' '.join(cmd)} (in {cwd})")

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise ToolchainError(f"Executable not found: {cmd[0]}", command=cmd) from e
    except subprocess.TimeoutExpired as e:
        raise ToolchainError(f"{cmd[0]} timed out after {timeout}s", command=cmd) from e

    return ToolRun(
        command=cmd,
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )
