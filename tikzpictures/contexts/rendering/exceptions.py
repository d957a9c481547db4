"""Custom exceptions for rendering context with toolchain diagnostics."""

from typing import List, Optional


class TikzRenderError(Exception):
    """Base class for failures while producing a TikZ artifact."""


class LatexError(TikzRenderError):
    """
    Exception raised when the LaTeX engine fails to produce output.

    Attributes:
        message: Error description
        error_block: Engine error text extracted from the log ("!" line up to the "?" prompt)
        command: Engine command line that failed
        stdout: Captured engine output
        errors: Error messages ("! ..." lines) parsed from the log
    """

    def __init__(
        self,
        message: str,
        error_block: Optional[str] = None,
        command: Optional[List[str]] = None,
        stdout: str = "",
        errors: Optional[List[str]] = None,
    ):
        self.message = message
        self.error_block = error_block
        self.command = command
        self.stdout = stdout
        self.errors = errors or []

        # Build enhanced error message
        parts = [message]

        if command:
            parts.append(f"Command: {' '.join(command)}")

        if error_block:
            parts.append(f"\nLaTeX output:\n{error_block}")

        super().__init__("\n".join(parts))


class ConversionError(TikzRenderError):
    """
    Exception raised when PDF/DVI to SVG conversion fails.

    Attributes:
        message: Error description
        tool: Converter that failed (e.g., "pdf2svg", "dvisvgm")
        hint: Suggested alternative (e.g., switching conversion strategy)
    """

    def __init__(self, message: str, tool: Optional[str] = None, hint: Optional[str] = None):
        self.message = message
        self.tool = tool
        self.hint = hint

        parts = [message]

        if tool:
            parts.append(f"Tool: {tool}")

        if hint:
            parts.append(f"Hint: {hint}")

        super().__init__("\n".join(parts))


class ToolchainError(TikzRenderError):
    """
    Exception raised when an external tool cannot be run at all.

    Covers missing executables and timeouts; a tool that runs and exits
    nonzero is reported through its status instead.
    """

    def __init__(self, message: str, command: Optional[List[str]] = None):
        self.message = message
        self.command = command

        if command:
            message = f"{message}\nCommand: {' '.join(command)}"

        super().__init__(message)


class EmptyDocumentError(ValueError):
    """
    Exception raised when a TikzDocument without pictures is saved.

    Raised before any file is written or any tool is started.
    """

    pass
