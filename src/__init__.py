"""
markweave - Markdown and slide-deck text conversion engine

Turns a constrained markdown dialect into typed blocks with inline
formatting spans, and a Title:/Body:/Notes: slide dialect into slide
field sets, ready for any rich-text or presentation renderer.
"""

__version__ = "1.0.0"

from .lib import (
    Segmenter,
    segment,
    InlineFormatter,
    inline_format,
    SlideExtractor,
    slides_extract,
    StructuralError,
    UnterminatedCodeFenceError,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "Segmenter",
    "segment",
    "InlineFormatter",
    "inline_format",
    "SlideExtractor",
    "slides_extract",
    "StructuralError",
    "UnterminatedCodeFenceError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
