"""
Picture Context

Responsibilities:
- Represents single TikZ pictures and captioned multi-picture documents

Owns: Picture body, options, preamble and shell-escape permission
Never: Runs the LaTeX toolchain
"""

from tikzpictures.contexts.picture.picture_data_structure import TikzDocument, TikzPicture

__all__ = ["TikzPicture", "TikzDocument"]
