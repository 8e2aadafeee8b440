"""
Inline formatter tests - delimiter stripping and span offsets

Spans are checked against the clean text they index into, so every
assertion is also a check that no character was dropped or duplicated.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from markweave.lib.inline import InlineFormatter, inline_format, match_next, DELIMITER_RULES
from markweave.models.blocks import FormatSpan, FormattedText, Mark


def spans_of(formatted: FormattedText):
    return [(s.start, s.end, s.mark) for s in formatted.spans]


class TestPlainText:
    """Text without delimiters passes through unchanged"""

    def test_no_delimiters(self):
        """Plain text returns itself and no spans"""
        formatted = inline_format("Nothing to see here.")

        assert formatted.text == "Nothing to see here."
        assert formatted.spans == ()

    def test_empty_string(self):
        formatted = inline_format("")

        assert formatted == FormattedText(text="", spans=())

    def test_idempotent_on_clean_text(self):
        """Formatting already-clean output changes nothing"""
        first = inline_format("**bold** and *italic* and `code`")
        second = inline_format(first.text)

        assert second.text == first.text
        assert second.spans == ()


class TestSingleMarks:
    """One kind of mark at a time"""

    def test_bold(self):
        formatted = inline_format("a **b** c")

        assert formatted.text == "a b c"
        assert spans_of(formatted) == [(2, 3, Mark.BOLD)]

    def test_italic(self):
        formatted = inline_format("an *emphasised* word")

        assert formatted.text == "an emphasised word"
        assert spans_of(formatted) == [(3, 13, Mark.ITALIC)]
        assert formatted.substring(formatted.spans[0]) == "emphasised"

    def test_code(self):
        formatted = inline_format("run `make test` now")

        assert formatted.text == "run make test now"
        assert formatted.substring(formatted.spans[0]) == "make test"
        assert formatted.spans[0].mark is Mark.CODE

    def test_multiple_bold_spans(self):
        """Offsets account for delimiters removed earlier in the same pass"""
        formatted = inline_format("**one** two **three** four **five**")

        assert formatted.text == "one two three four five"
        assert [formatted.substring(s) for s in formatted.spans] == ["one", "three", "five"]

    def test_adjacent_bold_spans(self):
        formatted = inline_format("**a****b**")

        assert formatted.text == "ab"
        assert spans_of(formatted) == [(0, 1, Mark.BOLD), (1, 2, Mark.BOLD)]


class TestMixedMarks:
    """Bold, italic and code in one string"""

    def test_reference_example(self):
        """All three marks land at their final offsets"""
        formatted = inline_format("**bold** and *italic* and `code`")

        assert formatted.text == "bold and italic and code"
        assert spans_of(formatted) == [
            (0, 4, Mark.BOLD),
            (9, 15, Mark.ITALIC),
            (20, 24, Mark.CODE),
        ]

    def test_bold_not_reread_as_italic(self):
        """A '**' pair is consumed by the bold pass only"""
        formatted = inline_format("**strong** then *soft*")

        assert formatted.text == "strong then soft"
        assert formatted.spans_byMark(Mark.BOLD) == (FormatSpan(0, 6, Mark.BOLD),)
        assert formatted.spans_byMark(Mark.ITALIC) == (FormatSpan(12, 16, Mark.ITALIC),)

    def test_earlier_spans_shift_after_later_passes(self):
        """Bold span after italic and code text moves left as they are stripped"""
        formatted = inline_format("*i* `c` **b**")

        assert formatted.text == "i c b"
        assert {formatted.substring(s): s.mark for s in formatted.spans} == {
            "i": Mark.ITALIC,
            "c": Mark.CODE,
            "b": Mark.BOLD,
        }

    def test_italic_inside_bold_shrinks_bold(self):
        """Delimiters removed inside a bold span shrink it"""
        formatted = inline_format("**a `b` c**")

        assert formatted.text == "a b c"
        assert formatted.spans_byMark(Mark.BOLD) == (FormatSpan(0, 5, Mark.BOLD),)
        assert formatted.spans_byMark(Mark.CODE) == (FormatSpan(2, 3, Mark.CODE),)

    def test_every_span_fits_clean_text(self):
        """Spans stay within 0 <= start < end <= len(text)"""
        formatted = inline_format("x **y** *z* `w` **v** *u* `t`")

        for span in formatted.spans:
            assert 0 <= span.start < span.end <= len(formatted.text)
        assert formatted.text == "x y z w v u t"

    def test_spans_sorted_by_start(self):
        formatted = inline_format("`c` *i* **b**")

        starts = [s.start for s in formatted.spans]
        assert starts == sorted(starts)


class TestMalformedDelimiters:
    """Unterminated markers stay verbatim and produce no span"""

    @pytest.mark.parametrize("text", [
        "an **unterminated bold",
        "an *unterminated italic",
        "an `unterminated code",
        "lonely * star",
        "two ** stars",
    ])
    def test_unterminated_kept_verbatim(self, text):
        formatted = inline_format(text)

        assert formatted.text == text
        assert formatted.spans == ()

    def test_unterminated_after_valid_span(self):
        """A valid span is stripped, a trailing open marker is kept"""
        formatted = inline_format("**ok** and `broken")

        assert formatted.text == "ok and `broken"
        assert spans_of(formatted) == [(0, 2, Mark.BOLD)]

    def test_empty_delimiters_not_spans(self):
        """'****' and '``' have no inner text and are left alone"""
        formatted = inline_format("a `` b")

        assert formatted.text == "a `` b"
        assert formatted.spans == ()


class TestCrossingDelimiters:
    """A span whose inner text is consumed by a later pass is dropped"""

    def test_italic_around_code_marker(self):
        formatted = inline_format("*`* a`")

        assert formatted.text == " a"
        assert spans_of(formatted) == [(0, 2, Mark.CODE)]

    def test_bold_around_code_marker(self):
        formatted = inline_format("**`** x `y`")

        assert formatted.text == " x y`"
        assert spans_of(formatted) == [(0, 3, Mark.CODE)]

    def test_surviving_spans_kept(self):
        """Only the collapsed span goes; its neighbours still line up"""
        formatted = inline_format("**ok** *`* a`")

        assert formatted.text == "ok  a"
        assert spans_of(formatted) == [(0, 2, Mark.BOLD), (3, 5, Mark.CODE)]

    @settings(max_examples=300)
    @given(st.text(alphabet="ab *`", max_size=24))
    def test_spans_always_valid(self, text):
        formatted = inline_format(text)

        for span in formatted.spans:
            assert 0 <= span.start < span.end <= len(formatted.text)


class TestStatelessMatching:
    """The match helper takes and returns explicit positions"""

    def test_match_next_returns_resume_position(self):
        bold = DELIMITER_RULES[0].pattern
        match, position = match_next(bold, "x **a** **b**", 0)

        assert (match.start, match.end, match.inner) == (2, 7, "a")
        assert position == 7

        match, position = match_next(bold, "x **a** **b**", position)
        assert match.inner == "b"

        match, position = match_next(bold, "x **a** **b**", position)
        assert match is None

    def test_formatter_reusable(self):
        """The same formatter gives the same answer on repeated calls"""
        formatter = InlineFormatter()

        assert formatter.format("*a* b") == formatter.format("*a* b")
        assert formatter.clean("**x**") == "x"


class TestFormatSpan:
    """FormatSpan validation"""

    def test_empty_span_rejected(self):
        with pytest.raises(ValueError):
            FormatSpan(3, 3, Mark.BOLD)

    def test_negative_start_rejected(self):
        with pytest.raises(ValueError):
            FormatSpan(-1, 2, Mark.ITALIC)
