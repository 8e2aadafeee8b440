"""
Slide dialect data models

Structures for the "Title:/Subtitle:/Body:/Notes:" slide-section dialect.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Tuple


class SlideLayout(Enum):
    """Layout a renderer should pick for a slide"""
    TITLE = "title"                    # title + subtitle
    TITLE_AND_BODY = "title_and_body"  # title + content
    TITLE_ONLY = "title_only"


@dataclass(frozen=True)
class SlideSection:
    """
    Raw text between two separator lines

    Attributes:
        index: Zero-based position of the section in the input
        label: Separator annotation ("--- [SLIDE 3] ---" → "SLIDE 3"), may be empty
        text: Section text, trimmed
    """
    index: int
    label: str
    text: str


@dataclass(frozen=True)
class SlideFields:
    """
    Cleaned fields of one slide

    Attributes:
        title: Title field; runs to the next field marker and may span lines
        subtitle: Subtitle field
        content: Body/Content field with bullets normalised
        speaker_notes: Everything after the first notes marker
        label: Separator annotation of the originating section
    """
    title: str = ""
    subtitle: str = ""
    content: str = ""
    speaker_notes: str = ""
    label: str = ""

    @property
    def usable(self) -> bool:
        """A slide needs a title or content to be kept"""
        return bool(self.title or self.content)

    @property
    def layout(self) -> SlideLayout:
        if self.subtitle:
            return SlideLayout.TITLE
        if self.content:
            return SlideLayout.TITLE_AND_BODY
        return SlideLayout.TITLE_ONLY


@dataclass(frozen=True)
class DeckResult:
    """
    Slides extracted from one input

    Attributes:
        slides: Usable slides in input order
        sections_total: Number of non-empty sections found between separators
        sections_dropped: Sections skipped (no field marker, or no title/content)
    """
    slides: Tuple[SlideFields, ...]
    sections_total: int = 0
    sections_dropped: int = 0

    @property
    def empty(self) -> bool:
        return not self.slides

    def __len__(self) -> int:
        return len(self.slides)
