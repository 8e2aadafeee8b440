"""
markweave - Markdown and slide-deck text conversion engine

Segments markdown-like text into typed blocks, extracts inline marks, and
parses the Title:/Body:/Notes: slide dialect into slide field sets.
"""

__version__ = "1.0.0"

from .segmenter import Segmenter, segment
from .inline import InlineFormatter, inline_format
from .slides import SlideExtractor, slides_extract, dialect_detect
from .errors import StructuralError, UnterminatedCodeFenceError
from .log import LOG, state_connectToLogger

__all__ = [
    "Segmenter",
    "segment",
    "InlineFormatter",
    "inline_format",
    "SlideExtractor",
    "slides_extract",
    "dialect_detect",
    "StructuralError",
    "UnterminatedCodeFenceError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
