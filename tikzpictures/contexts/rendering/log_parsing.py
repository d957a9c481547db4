"""
LaTeX Log Inspection

Reads engine logs and looks for the signatures that drive the render pipeline:
- rerun signatures (unresolved labels need a second engine pass)
- workaround signatures (standalone class breaks under newer lualatex)
- the error block printed by the engine before it prompts for input
"""

import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

# Log written by the engine when it fails before the job name is known
DEFAULT_LOG_NAME = "texput.log"


def read_engine_log(workdir: Path, basename: str) -> str:
    """
    Read the engine log for a job, falling back to texput.log.

    Args:
        workdir: Directory the engine ran in
        basename: Job name (source file name without .tex)

    Returns:
        Log content, or an empty string if no log was written
    """
    for log_file in (workdir / f"{basename}.log", workdir / DEFAULT_LOG_NAME):
        if log_file.exists():
            # Engine logs may contain bytes from font metadata that aren't valid UTF-8
            return log_file.read_text(encoding="utf-8", errors="replace")
    return ""


def find_signature(log_content: str, signatures: Iterable[str]) -> Optional[str]:
    """Return the first signature found in the log, or None."""
    for signature in signatures:
        if signature in log_content:
            return signature
    return None


def extract_error_block(log_content: str) -> str:
    """
    Extract the engine's error report from a log.

    The block starts at the first line beginning with "!" and runs up to (not
    including) the next line beginning with "?", the engine's input prompt.

    Args:
        log_content: Content of the .log file

    Returns:
        Error lines joined with newlines, or an empty string if none found
    """
    lines = []
    in_error = False

    for line in log_content.split("\n"):
        if in_error:
            if line.startswith("?"):
                break
            lines.append(line)
        elif line.startswith("!"):
            lines.append(line)
            in_error = True

    return "\n".join(lines)


def parse_latex_log(log_content: str) -> Tuple[List[str], List[str]]:
    """
    Parse LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    # LaTeX error pattern: "! Error message"
    error_pattern = re.compile(r"^! (.+)$", re.MULTILINE)
    for match in error_pattern.finditer(log_content):
        errors.append(match.group(1).strip())

    # Common warning patterns
    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]

    for pattern in warning_patterns:
        compiled = re.compile(pattern, re.MULTILINE)
        for match in compiled.finditer(log_content):
            warnings.append(match.group(1).strip())

    return errors, warnings
