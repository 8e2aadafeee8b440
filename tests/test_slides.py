"""
Slide extractor tests - sections, field markers and the notes split

Tests separator handling, the body/notes split that keeps notes out of
the other fields, value cleaning, and the dropping of unusable sections.
"""

import pytest

from markweave.lib.slides import (
    SlideExtractor,
    slides_extract,
    dialect_detect,
    separatorLabel_extract,
    field_name,
)
from markweave.models.slides import SlideFields, SlideLayout


REFERENCE_DECK = """--- [SLIDE 1] ---
Title: Overview
Body:
* Point A
* Point B

Notes:
Say hello.
"""


class TestReferenceDeck:
    """The canonical one-slide example"""

    def test_single_slide(self):
        result = slides_extract(REFERENCE_DECK)

        assert len(result.slides) == 1

    def test_fields(self):
        slide = slides_extract(REFERENCE_DECK).slides[0]

        assert slide.title == "Overview"
        assert slide.content == "• Point A\n• Point B"
        assert slide.speaker_notes == "Say hello."
        assert slide.subtitle == ""
        assert slide.label == "SLIDE 1"

    def test_notes_do_not_leak_into_content(self):
        slide = slides_extract(REFERENCE_DECK).slides[0]

        assert "Say hello." not in slide.content
        assert "Notes" not in slide.content


class TestSections:
    """Separator handling"""

    def test_multiple_slides_in_order(self):
        source = "---\nTitle: One\n---\nTitle: Two\n--------\nTitle: Three"
        result = slides_extract(source)

        assert [s.title for s in result.slides] == ["One", "Two", "Three"]

    def test_text_before_first_separator_is_a_section(self):
        source = "Title: Preface\n--- [SLIDE 2] ---\nTitle: Second"
        result = slides_extract(source)

        assert [s.title for s in result.slides] == ["Preface", "Second"]
        assert [s.label for s in result.slides] == ["", "SLIDE 2"]

    def test_section_without_markers_dropped(self):
        """Free text between separators is not a slide"""
        source = "Just an intro paragraph\n---\nTitle: Real slide"
        result = slides_extract(source)

        assert [s.title for s in result.slides] == ["Real slide"]
        assert result.sections_total == 2
        assert result.sections_dropped == 1

    def test_empty_sections_ignored(self):
        source = "---\n\n---\n   \n---\nTitle: Only"
        result = slides_extract(source)

        assert len(result.slides) == 1
        assert result.sections_total == 1

    @pytest.mark.parametrize("line,label", [
        ("---", ""),
        ("--- [SLIDE 4] ---", "SLIDE 4"),
        ("---------", ""),
        ("  --- Intro", "Intro"),
    ])
    def test_separator_labels(self, line, label):
        assert separatorLabel_extract(line) == label

    def test_no_slides_is_empty_result(self):
        """Input without usable slides is an empty result, not an error"""
        result = slides_extract("nothing here\n---\nstill nothing")

        assert result.empty
        assert result.slides == ()

    def test_empty_input(self):
        result = slides_extract("")

        assert result.empty
        assert result.sections_total == 0


class TestFieldMarkers:
    """Marker recognition and value capture"""

    def test_subtitle_not_mistaken_for_title(self):
        slide = slides_extract("---\nSubtitle: Small\nTitle: Big").slides[0]

        assert slide.title == "Big"
        assert slide.subtitle == "Small"

    def test_content_alias(self):
        slide = slides_extract("---\nTitle: T\nContent: Some words").slides[0]

        assert slide.content == "Some words"

    def test_case_insensitive_markers(self):
        slide = slides_extract("---\nTITLE: Loud\nbody: quiet").slides[0]

        assert slide.title == "Loud"
        assert slide.content == "quiet"

    def test_bold_decorated_markers(self):
        source = "---\n**Title:** Decorated\n**Body**: text\n**Speaker Notes:** remember"
        slide = slides_extract(source).slides[0]

        assert slide.title == "Decorated"
        assert slide.content == "text"
        assert slide.speaker_notes == "remember"

    def test_speaker_notes_marker(self):
        source = "---\nTitle: T\nBody: b\n\nSpeaker Notes:\nBy the end of this session..."
        slide = slides_extract(source).slides[0]

        assert slide.speaker_notes == "By the end of this session..."
        assert slide.content == "b"

    def test_value_runs_to_next_marker(self):
        source = "---\nBody:\nline one\nline two\nTitle: After"
        slide = slides_extract(source).slides[0]

        assert slide.content == "line one\nline two"
        assert slide.title == "After"

    def test_title_spans_lines(self):
        slide = slides_extract("---\nTitle: First line\nsecond line\nBody: b").slides[0]

        assert slide.title == "First line\nsecond line"
        assert slide.content == "b"

    def test_first_occurrence_wins(self):
        slide = slides_extract("---\nTitle: First\nTitle: Second").slides[0]

        assert slide.title == "First"

    def test_marker_mid_line_not_recognised(self):
        """Markers must start a line"""
        slide = slides_extract("---\nTitle: Says Body: inline").slides[0]

        assert slide.title == "Says Body: inline"
        assert slide.content == ""

    @pytest.mark.parametrize("label,name", [
        ("Title", "title"),
        ("BODY", "content"),
        ("Content", "content"),
        ("Speaker  Notes", "speaker_notes"),
        ("notes", "speaker_notes"),
    ])
    def test_field_names(self, label, name):
        assert field_name(label) == name


class TestNotesSplit:
    """Notes are split off before any field is read"""

    def test_title_inside_notes_ignored(self):
        source = "---\nTitle: Real\nBody: b\nNotes: She said:\nTitle: Fake\nBody: also fake"
        slide = slides_extract(source).slides[0]

        assert slide.title == "Real"
        assert slide.content == "b"
        assert slide.speaker_notes == "She said:\nTitle: Fake\nBody: also fake"

    def test_notes_only_section_dropped(self):
        result = slides_extract("---\nNotes: something")

        assert result.empty
        assert result.sections_dropped == 1

    def test_second_notes_marker_stays_in_notes(self):
        slide = slides_extract("---\nTitle: T\nNotes: one\nNotes: two").slides[0]

        assert slide.speaker_notes == "one\nNotes: two"


class TestValueCleaning:
    """Delimiters, brackets and bullets"""

    def test_title_delimiters_stripped(self):
        slide = slides_extract("---\nTitle: **Bold** *and* `code` [draft]").slides[0]

        assert slide.title == "Bold and code draft"

    def test_dash_bullets_normalised(self):
        slide = slides_extract("---\nTitle: T\nBody:\n- one\n  - two").slides[0]

        assert slide.content == "• one\n• two"

    def test_numbered_items_untouched(self):
        source = "---\nTitle: Workshop Objectives\nBody:\n1. Understand GKE Fleets\n2. Define Platform Tenants"
        slide = slides_extract(source).slides[0]

        assert slide.content == "1. Understand GKE Fleets\n2. Define Platform Tenants"

    def test_numbered_items_stripped_when_configured(self):
        source = "---\nTitle: T\nBody:\n1. First\n2. Second"
        slide = SlideExtractor(source, strip_ordered_labels=True).extract().slides[0]

        assert slide.content == "First\nSecond"

    def test_bold_inside_bullet(self):
        slide = slides_extract("---\nTitle: T\nBody:\n* **Key** point").slides[0]

        assert slide.content == "• Key point"

    def test_custom_bullet_glyph(self):
        source = "---\nTitle: T\nBody:\n* item"
        slide = SlideExtractor(source, bullet_glyph="- ").extract().slides[0]

        assert slide.content == "- item"

    def test_unterminated_marker_kept(self):
        slide = slides_extract("---\nTitle: 5 * 3").slides[0]

        assert slide.title == "5 * 3"

    def test_crossing_markers_cleaned(self):
        """Markers that cross each other do not abort extraction"""
        slide = SlideExtractor("---\nTitle: Glob *`* matches `all`\n").extract().slides[0]

        assert slide.title == "Glob  matches all`"


class TestSlideFields:
    """Usability and layout"""

    def test_title_only_is_usable(self):
        assert SlideFields(title="T").usable

    def test_content_only_is_usable(self):
        assert SlideFields(content="c").usable

    def test_subtitle_and_notes_not_usable(self):
        assert not SlideFields(subtitle="s", speaker_notes="n").usable

    @pytest.mark.parametrize("fields,layout", [
        (SlideFields(title="T", subtitle="S", content="C"), SlideLayout.TITLE),
        (SlideFields(title="T", content="C"), SlideLayout.TITLE_AND_BODY),
        (SlideFields(title="T"), SlideLayout.TITLE_ONLY),
    ])
    def test_layout(self, fields, layout):
        assert fields.layout is layout


class TestDialectDetection:
    """Auto-detection between markdown and slides"""

    def test_slide_deck_detected(self):
        assert dialect_detect(REFERENCE_DECK) == "slides"

    def test_markdown_detected(self):
        assert dialect_detect("# Heading\n\n* item\n") == "markdown"

    def test_separator_without_markers_is_markdown(self):
        assert dialect_detect("Intro\n---\nMore text") == "markdown"
