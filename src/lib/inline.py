"""
Inline formatter for bold, italic and code spans

Turns a block's raw text into clean text plus formatting spans. Each mark
is handled by one pass over an immutable string:

1. Scan: collect every delimited match in the current text without touching it
2. Rebuild: join the segments between delimiters into the next text, placing
   each inner span at its new offset and remembering where delimiters were
   removed
3. Translate: shift spans recorded by earlier passes past the delimiters this
   pass removed

Passes run in order bold (**), italic (*), code (`). The italic pass scans
the text the bold pass produced, so a '**' pair is never re-read as two
italic markers. Unterminated delimiters produce no span and stay verbatim.

Example:
    >>> formatted = InlineFormatter().format("**bold** and *italic* and `code`")
    >>> formatted.text
    'bold and italic and code'
    >>> [(s.start, s.end, s.mark.value) for s in formatted.spans]
    [(0, 4, 'bold'), (9, 15, 'italic'), (20, 24, 'code')]
"""

import re
from bisect import bisect_left
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

from ..models.blocks import FormatSpan, FormattedText, Mark


@dataclass(frozen=True)
class DelimiterRule:
    """
    How one mark is written in source text

    Attributes:
        mark: Mark applied to the inner text
        pattern: Regex whose group 1 is the inner text
        width: Length of each delimiter (2 for '**', 1 for '*' and '`')
    """
    mark: Mark
    pattern: Pattern[str]
    width: int


@dataclass(frozen=True)
class SpanMatch:
    """
    One delimited match in original coordinates

    Attributes:
        start: Offset of the opening delimiter
        end: Offset one past the closing delimiter
        inner: Text between the delimiters
    """
    start: int
    end: int
    inner: str


DELIMITER_RULES: Tuple[DelimiterRule, ...] = (
    DelimiterRule(Mark.BOLD, re.compile(r'\*\*([^*]+)\*\*'), 2),
    DelimiterRule(Mark.ITALIC, re.compile(r'\*([^*]+)\*'), 1),
    DelimiterRule(Mark.CODE, re.compile(r'`([^`]+)`'), 1),
)


def match_next(pattern: Pattern[str], text: str, position: int) -> Tuple[Optional[SpanMatch], int]:
    """
    Find the next delimited match at or after position

    Stateless: the search start is passed in and the resume position is
    returned, so no cursor lives on the compiled pattern.

    Returns:
        (match, next_position); match is None when nothing is left
    """
    found = pattern.search(text, position)
    if not found:
        return None, len(text)
    return SpanMatch(start=found.start(), end=found.end(), inner=found.group(1)), found.end()


def offset_translate(offset: int, removed: List[int]) -> int:
    """Map an offset to the text left after deleting the sorted positions in removed"""
    return offset - bisect_left(removed, offset)


class InlineFormatter:
    """
    Extracts inline marks from text and returns clean text with spans

    Stateless apart from its rule table; one instance may format any
    number of strings, from any number of threads.
    """

    def __init__(self, rules: Tuple[DelimiterRule, ...] = DELIMITER_RULES):
        self.rules = rules

    def format(self, raw_text: str) -> FormattedText:
        """
        Format raw text into clean text and spans

        Args:
            raw_text: Text of one block or field, possibly containing markers

        Returns:
            FormattedText with delimiters removed and spans in final coordinates
        """
        text = raw_text
        spans: List[FormatSpan] = []

        for rule in self.rules:
            text, found, removed = self.pass_apply(text, rule)
            if removed:
                translated = (self.span_translate(span, removed) for span in spans)
                spans = [span for span in translated if span is not None]
            spans.extend(found)

        spans.sort(key=lambda span: (span.start, span.mark.order))
        return FormattedText(text=text, spans=tuple(spans))

    def clean(self, raw_text: str) -> str:
        """Strip matched delimiters, discarding the spans"""
        return self.format(raw_text).text

    def matches_scan(self, text: str, rule: DelimiterRule) -> List[SpanMatch]:
        """Collect every match of rule in text, left to right, without overlap"""
        matches: List[SpanMatch] = []
        position = 0
        while position < len(text):
            match, position = match_next(rule.pattern, text, position)
            if match is None:
                break
            matches.append(match)
        return matches

    def pass_apply(
        self, text: str, rule: DelimiterRule
    ) -> Tuple[str, List[FormatSpan], List[int]]:
        """
        Run one mark pass over immutable text

        Args:
            text: Text produced by the previous pass
            rule: Delimiter rule for this pass

        Returns:
            (new_text, spans for this mark in new_text coordinates,
             sorted offsets in text of every removed delimiter character)

        Example:
            text="a **b** c", rule=bold
            → ("a b c", [FormatSpan(2, 3, BOLD)], [2, 3, 5, 6])
        """
        matches = self.matches_scan(text, rule)
        if not matches:
            return text, [], []

        segments: List[str] = []
        spans: List[FormatSpan] = []
        removed: List[int] = []
        cursor = 0
        removed_count = 0

        for match in matches:
            segments.append(text[cursor:match.start])
            segments.append(match.inner)

            inner_start = match.start + rule.width
            new_start = match.start - removed_count
            spans.append(FormatSpan(new_start, new_start + len(match.inner), rule.mark))

            removed.extend(range(match.start, inner_start))
            removed.extend(range(match.end - rule.width, match.end))
            removed_count += 2 * rule.width
            cursor = match.end

        segments.append(text[cursor:])
        return ''.join(segments), spans, removed

    def span_translate(self, span: FormatSpan, removed: List[int]) -> Optional[FormatSpan]:
        """
        Shift a span from an earlier pass past delimiters removed by a later one

        A removed character inside the span shrinks it; the start moves by the
        number of removals before it, the end by the number before the end.
        A span whose every character was a later delimiter (crossing markers,
        e.g. "*`* a`") collapses and is dropped, returning None.
        """
        start = offset_translate(span.start, removed)
        end = offset_translate(span.end, removed)
        if start >= end:
            return None
        return FormatSpan(start, end, span.mark)


_default_formatter = InlineFormatter()


def inline_format(raw_text: str) -> FormattedText:
    """Format text with the default delimiter rules"""
    return _default_formatter.format(raw_text)
