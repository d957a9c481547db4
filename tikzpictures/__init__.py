"""
tikzpictures - TikZ pictures rendered to PDF, SVG and LaTeX source

Builds standalone LaTeX documents around TikZ pictures and drives an external
toolchain (lualatex by default, pdf2svg or dvisvgm for SVG) to produce files
or inline SVG for notebooks.

Architecture:
- Picture Context: In-memory pictures and captioned documents
- Rendering Context: Source emission, toolchain pipeline, inline display
"""

from tikzpictures.config import (
    RenderConfig,
    get_config,
    reset_config,
    set_config,
    standalone_workaround,
    tikz_command,
    tikz_delete_intermediate,
    tikz_use_pdf2svg,
)
from tikzpictures.contexts.picture import TikzDocument, TikzPicture
from tikzpictures.contexts.rendering import (
    PDF,
    SVG,
    TEX,
    TIKZ,
    ConversionError,
    EmptyDocumentError,
    LatexError,
    RenderResult,
    TikzRenderError,
    ToolchainError,
    render_to_pdf,
    render_to_svg,
    save,
    svg_markup,
)

__version__ = "0.1.0"

__all__ = [
    "TikzPicture",
    "TikzDocument",
    "TEX",
    "TIKZ",
    "PDF",
    "SVG",
    "save",
    "render_to_pdf",
    "render_to_svg",
    "svg_markup",
    "RenderResult",
    "RenderConfig",
    "get_config",
    "set_config",
    "reset_config",
    "tikz_command",
    "tikz_delete_intermediate",
    "tikz_use_pdf2svg",
    "standalone_workaround",
    "TikzRenderError",
    "LatexError",
    "ConversionError",
    "ToolchainError",
    "EmptyDocumentError",
]
