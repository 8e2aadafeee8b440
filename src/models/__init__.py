"""
Models package for markweave

Contains data structures and type definitions for the conversion pipeline.
"""

from .state import ProgramState, pipeline
from .blocks import (
    Block,
    Heading,
    ListItem,
    CodeBlock,
    Blank,
    Paragraph,
    Mark,
    FormatSpan,
    FormattedText,
    DocumentResult,
    block_kind,
)
from .slides import SlideSection, SlideFields, SlideLayout, DeckResult

__all__ = [
    "ProgramState",
    "pipeline",
    "Block",
    "Heading",
    "ListItem",
    "CodeBlock",
    "Blank",
    "Paragraph",
    "Mark",
    "FormatSpan",
    "FormattedText",
    "DocumentResult",
    "block_kind",
    "SlideSection",
    "SlideFields",
    "SlideLayout",
    "DeckResult",
]
