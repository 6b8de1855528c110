"""Table Engine renderer collection.

Provides HTMLRenderer, LaTeXRenderer and RTFRenderer for text output and
ImageRenderer for PNG/PDF screenshots of the HTML document."""

from .base import BaseRenderer
from .html_renderer import HTMLRenderer
from .latex_renderer import (
    LaTeXRenderer,
    LatexOutput,
    LatexDependency,
    LatexDependencyTracker,
)
from .rtf_renderer import RTFRenderer, RenderMode, RawOutput
from .image_renderer import (
    ImageRenderer,
    PlaywrightScreenshotter,
    WeasyPrintScreenshotter,
)

__all__ = [
    "BaseRenderer",
    "HTMLRenderer",
    "LaTeXRenderer",
    "LatexOutput",
    "LatexDependency",
    "LatexDependencyTracker",
    "RTFRenderer",
    "RenderMode",
    "RawOutput",
    "ImageRenderer",
    "PlaywrightScreenshotter",
    "WeasyPrintScreenshotter",
]
