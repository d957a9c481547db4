"""
Rendering Context

Responsibilities:
- Serializes pictures and documents to LaTeX source
- Runs the LaTeX engine and SVG converters in scratch directories
- Retries once with the standalone workaround on the known lualatex failure
- Moves finished artifacts to caller paths
- Produces id-safe inline SVG for notebook display

Owns: LaTeX source emission, toolchain execution, artifact output
Never: Parses or validates TikZ markup
"""

from tikzpictures.contexts.rendering.display import SvgIdCounter, svg_markup
from tikzpictures.contexts.rendering.emitter import (
    emit_document_source,
    emit_picture_source,
    write_source,
)
from tikzpictures.contexts.rendering.exceptions import (
    ConversionError,
    EmptyDocumentError,
    LatexError,
    TikzRenderError,
    ToolchainError,
)
from tikzpictures.contexts.rendering.pipeline import (
    RenderResult,
    render_to_pdf,
    render_to_svg,
    save,
)
from tikzpictures.contexts.rendering.targets import PDF, SVG, TEX, TIKZ, SaveTarget

__all__ = [
    # Save targets
    "SaveTarget",
    "TEX",
    "TIKZ",
    "PDF",
    "SVG",
    # Source emission
    "emit_picture_source",
    "emit_document_source",
    "write_source",
    # Pipeline
    "save",
    "render_to_pdf",
    "render_to_svg",
    "RenderResult",
    # Inline display
    "svg_markup",
    "SvgIdCounter",
    # Errors
    "TikzRenderError",
    "LatexError",
    "ConversionError",
    "ToolchainError",
    "EmptyDocumentError",
]
