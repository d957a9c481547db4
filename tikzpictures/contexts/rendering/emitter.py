"""
LaTeX Source Emitter

Serializes pictures and documents into LaTeX source text using Jinja2 templates
stored in templates/. The engine is sensitive to this exact structure, so the
templates preserve whitespace and every emitted line ends with a newline.

Templates use custom delimiters to avoid conflicts with LaTeX syntax:
- Variable: <<< var >>>
- Block: <%% block %%>
"""

from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from tikzpictures.config import RenderConfig, get_config
from tikzpictures.contexts.picture import TikzDocument, TikzPicture
from tikzpictures.contexts.rendering.exceptions import EmptyDocumentError
from tikzpictures.contexts.rendering.targets import TEX, TIKZ

TEMPLATES_PATH = Path(__file__).parent / "templates"

STANDALONE_TEMPLATE = "standalone.tex.jinja"
DOCUMENT_TEMPLATE = "document.tex.jinja"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_PATH)),
    # Catches silent failures
    undefined=StrictUndefined,
    # Custom delimiters to avoid LaTeX brace conflicts
    variable_start_string="<<<",
    variable_end_string=">>>",
    block_start_string="<%%",
    block_end_string="%%>",
    comment_start_string="<#",
    comment_end_string="#>",
    # Preserve whitespace (important for LaTeX)
    trim_blocks=False,
    lstrip_blocks=False,
    keep_trailing_newline=False,
    autoescape=False,
)


def emit_picture_source(
    picture: TikzPicture,
    include_preamble: bool = True,
    standalone_workaround: bool = False,
) -> str:
    """
    Produce LaTeX source for a single picture.

    Args:
        picture: Picture to serialize
        include_preamble: Wrap in a standalone document (documentclass, preamble, document env)
        standalone_workaround: Prepend \\RequirePackage{luatex85} before the document class

    Returns:
        Source text, one newline-terminated line per element
    """
    template = _env.get_template(STANDALONE_TEMPLATE)
    return template.render(
        picture=picture,
        include_preamble=include_preamble,
        standalone_workaround=standalone_workaround,
    )


def emit_document_source(document: TikzDocument, include_preamble: bool = True) -> str:
    """
    Produce LaTeX source for a captioned multi-picture article.

    Each picture is centered and followed by a figure caption and fixed vertical
    spacing, in append order. The preamble of the first picture is used for the
    whole document.

    Args:
        document: Document with at least one picture
        include_preamble: Wrap in an article document

    Returns:
        Source text

    Raises:
        EmptyDocumentError: If the document has no pictures
        ValueError: If pictures and captions differ in number
    """
    if not document.pictures:
        raise EmptyDocumentError("TikzDocument does not contain pictures")

    if len(document.pictures) != len(document.captions):
        raise ValueError(
            f"TikzDocument has {len(document.pictures)} pictures "
            f"but {len(document.captions)} captions"
        )

    template = _env.get_template(DOCUMENT_TEMPLATE)
    return template.render(
        entries=list(document),
        preamble=document.pictures[0].preamble,
        include_preamble=include_preamble,
    )


def write_source(
    target: Union[TEX, TIKZ],
    item: Union[TikzPicture, TikzDocument],
    config: Optional[RenderConfig] = None,
) -> Path:
    """
    Write picture or document source to the target's path.

    Args:
        target: TEX or TIKZ target
        item: Picture or document to serialize (documents only with TEX)
        config: Render configuration (defaults to the process-wide config)

    Returns:
        Path of the written file

    Raises:
        EmptyDocumentError: If a document without pictures is given
        TypeError: If a document is given with a TIKZ target
    """
    if config is None:
        config = get_config()

    if isinstance(item, TikzDocument):
        if isinstance(target, TIKZ):
            raise TypeError("TikzDocument can only be saved as TEX or PDF")
        source = emit_document_source(item, include_preamble=target.include_preamble)
    else:
        source = emit_picture_source(
            item,
            include_preamble=target.include_preamble,
            standalone_workaround=config.standalone_workaround,
        )

    path = target.path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path
