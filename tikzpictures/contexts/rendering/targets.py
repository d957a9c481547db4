"""
Save Targets

Typed descriptors for where and how a picture is saved. Each target owns a
canonical filename: the variant's extension is stripped from user input once
(case-insensitive) and re-appended when the path is built.

    >>> PDF("figure.PDF").filename
    'figure'
    >>> PDF("figure").path
    PosixPath('figure.pdf')
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar


def remove_extension(filename: str, extension: str) -> str:
    """
    Strip a trailing extension from a filename, ignoring case.

    Args:
        filename: User supplied filename (e.g., "plot.svg", "plot.SVG", "plot")
        extension: Extension including the dot (e.g., ".svg")

    Returns:
        Filename without the extension, or unchanged if it doesn't end with it
    """
    if filename.lower().endswith(extension.lower()):
        return filename[: -len(extension)]
    return filename


@dataclass
class SaveTarget:
    """
    Base class for save targets.

    Attributes:
        filename: Destination path without extension
    """

    extension: ClassVar[str] = ""

    filename: str

    def __post_init__(self):
        self.filename = remove_extension(str(self.filename), f".{self.extension}")

    @property
    def path(self) -> Path:
        """Destination path with the target's extension re-appended."""
        return Path(f"{self.filename}.{self.extension}")

    @property
    def basename(self) -> str:
        """Final path component of the filename, used to name scratch files."""
        return Path(self.filename).name


@dataclass
class TEX(SaveTarget):
    """LaTeX source file, complete with preamble unless include_preamble is False."""

    extension: ClassVar[str] = "tex"

    include_preamble: bool = True


@dataclass
class TIKZ(SaveTarget):
    """Bare tikzpicture source, for \\input into another document."""

    extension: ClassVar[str] = "tikz"

    include_preamble: bool = field(default=False, init=False)


@dataclass
class PDF(SaveTarget):
    extension: ClassVar[str] = "pdf"


@dataclass
class SVG(SaveTarget):
    extension: ClassVar[str] = "svg"
