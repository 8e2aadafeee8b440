"""
Slide-section extractor for the "Title:/Body:/Notes:" dialect

Input is split into sections on separator lines ('---', '--- [SLIDE 2] ---',
'--------'). Each section holding at least one field marker becomes a slide:

    --- [SLIDE 1] ---
    Title: Overview
    Subtitle: Where we are
    Body:
    * Point A
    * Point B

    Speaker Notes:
    Say hello.

The first notes marker ('Notes:' or 'Speaker Notes:', optionally wrapped in
'**') splits a section into a body region and a notes region before any
other field is read, so notes text never leaks into the title or content and
a 'Title:' quoted inside the notes is never taken as a field header.
"""

import re
from typing import Dict, List, Optional, Tuple

from ..config import appsettings
from ..models.slides import SlideSection, SlideFields, DeckResult
from .inline import InlineFormatter
from .log import LOG
from .segmenter import lines_split


SEPARATOR_PATTERN = re.compile(r'^[ \t]*-{3,}.*$')

FIELD_MARKER_PATTERN = re.compile(
    r'^[ \t]*(?:\*\*)?'
    r'(?P<label>Speaker[ \t]*Notes|Notes|Subtitle|Title|Body|Content)'
    r'(?::(?:\*\*)?|\*\*:?)[ \t]*',
    re.IGNORECASE | re.MULTILINE,
)

BULLET_PREFIX_PATTERN = re.compile(r'^\s*[*-]\s+')
NUMBERED_PREFIX_PATTERN = re.compile(r'^\s*\d+\.\s+')
BRACKET_PATTERN = re.compile(r'[\[\]]')

# Canonical field name per marker label
FIELD_NAMES: Dict[str, str] = {
    'title': 'title',
    'subtitle': 'subtitle',
    'body': 'content',
    'content': 'content',
    'notes': 'speaker_notes',
    'speakernotes': 'speaker_notes',
}


def field_name(label: str) -> str:
    """Map a marker label ("Speaker  Notes", "BODY") to its field name"""
    return FIELD_NAMES[re.sub(r'\s+', '', label).lower()]


def separator_is(line: str) -> bool:
    return bool(SEPARATOR_PATTERN.match(line))


def separatorLabel_extract(line: str) -> str:
    """
    Extract the annotation of a separator line

    Example:
        "--- [SLIDE 3] ---" → "SLIDE 3"
        "---"               → ""
    """
    label = line.strip().strip('-').strip()
    return BRACKET_PATTERN.sub('', label).strip()


def dialect_detect(text: str) -> str:
    """
    Guess the dialect of an input text

    Returns:
        "slides" if the text has a separator line and a field marker at a
        line start, otherwise "markdown"
    """
    has_separator = any(separator_is(line) for line in lines_split(text))
    if has_separator and FIELD_MARKER_PATTERN.search(text):
        return "slides"
    return "markdown"


class SlideExtractor:
    """
    Extracts slide field sets from slide-dialect text

    Handles:
    - Separator lines with or without annotations
    - Title/Subtitle/Body/Content fields anchored at line starts
    - Notes/Speaker Notes split ahead of field extraction
    - Bullet normalisation inside content
    - Silent dropping of sections that are not usable slides
    """

    def __init__(
        self,
        source: str,
        formatter: Optional[InlineFormatter] = None,
        bullet_glyph: Optional[str] = None,
        strip_ordered_labels: Optional[bool] = None,
    ):
        """
        Initialize extractor with source text

        Args:
            source: Raw slide-dialect text
            formatter: Inline formatter used to strip delimiters from values
            bullet_glyph: Replacement for '*'/'-' bullets; defaults to appsettings
            strip_ordered_labels: Remove "1. " labels in content; defaults to appsettings
        """
        self.source = source
        self.formatter = formatter or InlineFormatter()
        self.bullet_glyph = appsettings.bullet_glyph if bullet_glyph is None else bullet_glyph
        self.strip_ordered_labels = (
            appsettings.strip_ordered_labels if strip_ordered_labels is None else strip_ordered_labels
        )

    def extract(self) -> DeckResult:
        """
        Extract all usable slides

        Returns:
            DeckResult; an input without any usable slide gives an empty
            result rather than an exception
        """
        slides: List[SlideFields] = []
        sections = self.sections_split()
        dropped = 0

        for section in sections:
            fields = self.section_parse(section)
            if fields is None:
                LOG(f"Section {section.index} has no field markers, skipping", level=2)
                dropped += 1
                continue
            if not fields.usable:
                LOG(f"Section {section.index} has neither title nor content, skipping", level=2)
                dropped += 1
                continue
            slides.append(fields)

        LOG(f"Extracted {len(slides)} slide(s) from {len(sections)} section(s)", level=2)
        return DeckResult(slides=tuple(slides), sections_total=len(sections), sections_dropped=dropped)

    def sections_split(self) -> List[SlideSection]:
        """
        Split source into sections on separator lines

        Text before the first separator forms a section of its own.
        Whitespace-only sections are skipped.
        """
        sections: List[SlideSection] = []
        current: List[str] = []
        label = ""

        def section_flush() -> None:
            text = '\n'.join(current).strip()
            if text:
                sections.append(SlideSection(index=len(sections), label=label, text=text))

        for line in lines_split(self.source):
            if separator_is(line):
                section_flush()
                current = []
                label = separatorLabel_extract(line)
            else:
                current.append(line)
        section_flush()

        return sections

    def section_parse(self, section: SlideSection) -> Optional[SlideFields]:
        """
        Parse one section into fields

        Returns:
            SlideFields, or None if the section contains no field marker
        """
        if not FIELD_MARKER_PATTERN.search(section.text):
            return None

        body_region, notes_region = self.notes_split(section.text)
        raw = self.fields_extract(body_region)

        return SlideFields(
            title=self.text_clean(raw.get('title', '')),
            subtitle=self.text_clean(raw.get('subtitle', '')),
            content=self.content_clean(raw.get('content', '')),
            speaker_notes=self.text_clean(notes_region) if notes_region is not None else '',
            label=section.label,
        )

    def notes_split(self, text: str) -> Tuple[str, Optional[str]]:
        """
        Split section text at the first notes marker

        Returns:
            (body_region, notes_region); notes_region is None when the
            section has no notes marker

        Example:
            "Title: A\\nNotes: hi" → ("Title: A\\n", "hi")
        """
        for marker in FIELD_MARKER_PATTERN.finditer(text):
            if field_name(marker.group('label')) == 'speaker_notes':
                return text[:marker.start()], text[marker.end():]
        return text, None

    def fields_extract(self, body_region: str) -> Dict[str, str]:
        """
        Capture raw field values from the body region

        Each value runs from its marker to the next marker or the end of the
        region. The first occurrence of a field wins; 'Body:' and 'Content:'
        fill the same field.
        """
        markers = list(FIELD_MARKER_PATTERN.finditer(body_region))
        values: Dict[str, str] = {}

        for i, marker in enumerate(markers):
            name = field_name(marker.group('label'))
            end = markers[i + 1].start() if i + 1 < len(markers) else len(body_region)
            if name not in values:
                values[name] = body_region[marker.end():end]

        return values

    def line_clean(self, line: str) -> str:
        """Strip inline delimiters and brackets from one line"""
        return BRACKET_PATTERN.sub('', self.formatter.clean(line)).rstrip()

    def text_clean(self, text: str) -> str:
        """Clean a title, subtitle or notes value"""
        return '\n'.join(self.line_clean(line) for line in lines_split(text.strip())).strip()

    def content_clean(self, text: str) -> str:
        """
        Clean a Body/Content value

        Bullet markers become the bullet glyph; numbered labels are kept
        unless strip_ordered_labels is set.

        Example:
            "* Point A\\n- Point B\\n1. Step" → "• Point A\\n• Point B\\n1. Step"
        """
        cleaned: List[str] = []
        for line in lines_split(text.strip()):
            bullet = BULLET_PREFIX_PATTERN.match(line)
            if bullet:
                cleaned.append(self.bullet_glyph + self.line_clean(line[bullet.end():]))
                continue
            numbered = NUMBERED_PREFIX_PATTERN.match(line)
            if numbered and self.strip_ordered_labels:
                cleaned.append(self.line_clean(line[numbered.end():]))
                continue
            cleaned.append(self.line_clean(line.strip()))
        return '\n'.join(cleaned).strip()


def slides_extract(text: str) -> DeckResult:
    """Extract slides with the configured policies"""
    return SlideExtractor(text).extract()
