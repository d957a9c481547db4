"""
TikZ Picture Structure

Defines the in-memory representation of pictures handed to the rendering context.

Picture owns:
- The tikzpicture body, its options and any extra preamble markup
- Whether the engine may run shell commands (\\write18) while rendering it

Rendering only reads these objects; it never mutates them.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class TikzPicture:
    """
    A single tikzpicture environment.

    Attributes:
        body: TikZ commands placed inside the environment (e.g., "\\draw (0,0) -- (1,1);")
        options: Style options for the environment, without brackets (e.g., "scale=2")
        preamble: Extra preamble markup such as \\usetikzlibrary or \\usepackage lines
        enable_write18: Run the engine with --enable-write18 (shell escape)
    """

    body: str
    options: str = ""
    preamble: str = ""
    enable_write18: bool = True

    def _repr_svg_(self) -> str:
        """Inline SVG for notebook front ends (IPython display protocol)."""
        from tikzpictures.contexts.rendering.display import svg_markup

        return svg_markup(self)


@dataclass
class TikzDocument:
    """
    Ordered collection of captioned pictures rendered into one article.

    Pictures and captions are kept in parallel lists; append() grows both at once
    so their lengths stay equal.

    Attributes:
        pictures: Pictures in document order
        captions: Caption text for each picture (same index)
    """

    pictures: List[TikzPicture] = field(default_factory=list)
    captions: List[str] = field(default_factory=list)

    def append(self, picture: TikzPicture, caption: str = "") -> None:
        """Add a picture and its caption to the end of the document."""
        self.pictures.append(picture)
        self.captions.append(caption)

    def __len__(self) -> int:
        return len(self.pictures)

    def __iter__(self):
        return iter(zip(self.pictures, self.captions))
