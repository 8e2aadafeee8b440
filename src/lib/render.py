"""
Renderer adapter: feeds segmented blocks and slides into output sinks

The conversion core never touches a sink. This module takes a complete
DocumentResult or DeckResult and drives a sink through its append-only
interface: one append per block, then one mark_apply per inline span on
the reference the append returned.

Two concrete sinks produce standalone HTML pages. Code blocks are
highlighted with Pygments; inline spans become <strong>, <em> and <code>.
"""

import html
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from pygments import highlight
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, TextLexer
from pygments.formatters import HtmlFormatter
from pygments.util import ClassNotFound

from ..config import appsettings
from ..models.blocks import (
    Heading,
    ListItem,
    CodeBlock,
    Blank,
    Paragraph,
    DocumentResult,
    FormatSpan,
    Mark,
    block_kind,
)
from ..models.slides import SlideFields, DeckResult
from .inline import InlineFormatter
from .lexer import SlideDeckLexer
from .log import LOG


class DocumentSink(Protocol):
    """Append-only rich document keyed by block kind"""

    def heading_append(self, text: str, level: int) -> Any: ...

    def listItem_append(self, text: str, ordered: bool) -> Any: ...

    def codeBlock_append(self, text: str, language: Optional[str]) -> Any: ...

    def blank_append(self) -> Any: ...

    def paragraph_append(self, text: str) -> Any: ...

    def mark_apply(self, ref: Any, span: FormatSpan) -> None: ...


class SlideSink(Protocol):
    """Presentation that creates one slide per field set"""

    def slide_create(self, fields: SlideFields) -> Any: ...


def document_render(
    result: DocumentResult, sink: DocumentSink, formatter: Optional[InlineFormatter] = None
) -> int:
    """
    Drive a document sink with every block of a result

    Headings, list items and paragraphs are inline-formatted; code blocks
    are passed through untouched.

    Args:
        result: Segmented document
        sink: Target sink
        formatter: Inline formatter (default rules if omitted)

    Returns:
        Number of blocks appended
    """
    formatter = formatter or InlineFormatter()
    appended = 0

    for block in result.blocks:
        spans: Tuple[FormatSpan, ...] = ()
        match block:
            case Heading(level=level, text=text):
                formatted = formatter.format(text)
                ref = sink.heading_append(formatted.text, level)
                spans = formatted.spans
            case ListItem(ordered=ordered, text=text):
                formatted = formatter.format(text)
                ref = sink.listItem_append(formatted.text, ordered)
                spans = formatted.spans
            case CodeBlock(text=text, language=language):
                ref = sink.codeBlock_append(text, language)
            case Blank():
                ref = sink.blank_append()
            case Paragraph(text=text):
                formatted = formatter.format(text)
                ref = sink.paragraph_append(formatted.text)
                spans = formatted.spans
            case _:
                raise TypeError(f"Not a block: {block!r}")

        for span in spans:
            sink.mark_apply(ref, span)
        appended += 1

    LOG(f"Rendered {appended} block(s)", level=2)
    return appended


def slides_render(result: DeckResult, sink: SlideSink) -> List[Any]:
    """
    Create one slide per usable field set

    Returns:
        Slide handles in input order
    """
    handles = [sink.slide_create(fields) for fields in result.slides]
    LOG(f"Rendered {len(handles)} slide(s)", level=2)
    return handles


def lexer_get(language: Optional[str]) -> Lexer:
    """
    Get a Pygments lexer for a fence language

    Unknown or missing languages fall back to plain text.
    """
    if not language:
        return TextLexer()
    if language.lower() in SlideDeckLexer.aliases:
        return SlideDeckLexer()
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        return TextLexer()


def spans_toHtml(text: str, spans: List[FormatSpan]) -> str:
    """
    Render clean text with spans as escaped HTML

    Tags are opened and closed at span boundaries; spans of different
    marks that overlap without nesting are split so the output stays
    well-formed.

    Example:
        ("bold and code", [FormatSpan(0, 4, BOLD), FormatSpan(9, 13, CODE)])
        → "<strong>bold</strong> and <code>code</code>"
    """
    tags = {Mark.BOLD: "strong", Mark.ITALIC: "em", Mark.CODE: "code"}
    boundaries = sorted({0, len(text)} | {s.start for s in spans} | {s.end for s in spans})

    parts: List[str] = []
    for start, end in zip(boundaries, boundaries[1:]):
        chunk = html.escape(text[start:end])
        active = sorted(
            {s.mark for s in spans if s.start <= start and end <= s.end},
            key=lambda mark: mark.order,
        )
        for mark in reversed(active):
            chunk = f"<{tags[mark]}>{chunk}</{tags[mark]}>"
        parts.append(chunk)
    return ''.join(parts)


@dataclass
class HtmlBlock:
    """One appended block awaiting marks"""
    kind: str
    text: str
    level: int = 0
    ordered: bool = False
    language: Optional[str] = None
    spans: List[FormatSpan] = field(default_factory=list)


def page_build(title: str, body: str) -> str:
    """Wrap body HTML in a standalone page"""
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{html.escape(title)}</title>
</head>
<body>
{body}
</body>
</html>
"""


class HtmlDocumentSink:
    """
    DocumentSink that builds an HTML page

    Block references are indices into the appended block list; marks are
    stored on the block and rendered when html_build() is called.
    Consecutive list items of the same kind share one <ul>/<ol>.
    """

    def __init__(self, title: str = "Document", pygments_style: Optional[str] = None):
        self.title = title
        self.pygments_style = pygments_style or appsettings.pygments_style
        self.blocks: List[HtmlBlock] = []

    def block_add(self, block: HtmlBlock) -> int:
        self.blocks.append(block)
        return len(self.blocks) - 1

    def heading_append(self, text: str, level: int) -> int:
        return self.block_add(HtmlBlock(kind="heading", text=text, level=level))

    def listItem_append(self, text: str, ordered: bool) -> int:
        return self.block_add(HtmlBlock(kind="list_item", text=text, ordered=ordered))

    def codeBlock_append(self, text: str, language: Optional[str]) -> int:
        return self.block_add(HtmlBlock(kind="code_block", text=text, language=language))

    def blank_append(self) -> int:
        return self.block_add(HtmlBlock(kind="blank", text=""))

    def paragraph_append(self, text: str) -> int:
        return self.block_add(HtmlBlock(kind="paragraph", text=text))

    def mark_apply(self, ref: int, span: FormatSpan) -> None:
        block = self.blocks[ref]
        if span.end > len(block.text):
            raise ValueError(
                f"Span [{span.start}, {span.end}) exceeds block {ref} of length {len(block.text)}"
            )
        block.spans.append(span)

    def code_highlight(self, block: HtmlBlock) -> str:
        formatter = HtmlFormatter(style=self.pygments_style, noclasses=True)
        return highlight(block.text, lexer_get(block.language), formatter)

    def body_build(self) -> str:
        parts: List[str] = []
        open_list: Optional[str] = None

        for block in self.blocks:
            list_tag = ("ol" if block.ordered else "ul") if block.kind == "list_item" else None
            if open_list and open_list != list_tag:
                parts.append(f"</{open_list}>")
                open_list = None
            if list_tag and open_list is None:
                parts.append(f"<{list_tag}>")
                open_list = list_tag

            inline = spans_toHtml(block.text, block.spans)
            if block.kind == "heading":
                parts.append(f"<h{block.level}>{inline}</h{block.level}>")
            elif block.kind == "list_item":
                parts.append(f"<li>{inline}</li>")
            elif block.kind == "code_block":
                parts.append(self.code_highlight(block))
            elif block.kind == "blank":
                parts.append("<br>")
            else:
                parts.append(f"<p>{inline}</p>")

        if open_list:
            parts.append(f"</{open_list}>")
        return '\n'.join(parts)

    def html_build(self) -> str:
        return page_build(self.title, self.body_build())


class HtmlSlideSink:
    """
    SlideSink that builds an HTML page with one <section> per slide

    The slide layout picks the classes; speaker notes go into an
    <aside class="notes"> inside the slide.
    """

    def __init__(self, title: str = "Presentation"):
        self.title = title
        self.slides: List[str] = []

    def slide_create(self, fields: SlideFields) -> int:
        number = len(self.slides) + 1
        parts = [f'<section class="slide layout-{fields.layout.value}" id="slide-{number}">']
        if fields.title:
            parts.append(f"    <h1>{html.escape(fields.title)}</h1>")
        if fields.subtitle:
            parts.append(f"    <h2>{html.escape(fields.subtitle)}</h2>")
        if fields.content:
            lines = "<br>\n".join(html.escape(line) for line in fields.content.split("\n"))
            parts.append(f'    <div class="content">{lines}</div>')
        if fields.speaker_notes:
            parts.append(f'    <aside class="notes">{html.escape(fields.speaker_notes)}</aside>')
        parts.append("</section>")
        self.slides.append('\n'.join(parts))
        return number

    def html_build(self) -> str:
        return page_build(self.title, '\n'.join(self.slides))


def result_toDict(result: Any, formatter: Optional[InlineFormatter] = None) -> Dict[str, Any]:
    """
    Serialise a DocumentResult or DeckResult for JSON output

    Document blocks carry their kind and, except for code and blank blocks,
    the formatted text and spans.
    """
    if isinstance(result, DeckResult):
        return {
            "dialect": "slides",
            "sections_total": result.sections_total,
            "sections_dropped": result.sections_dropped,
            "slides": [
                {**asdict(fields), "layout": fields.layout.value} for fields in result.slides
            ],
        }

    formatter = formatter or InlineFormatter()
    blocks = []
    for block in result.blocks:
        entry: Dict[str, Any] = {"kind": block_kind(block), **asdict(block)}
        if isinstance(block, (Heading, ListItem, Paragraph)):
            formatted = formatter.format(block.raw_text)
            entry["clean_text"] = formatted.text
            entry["spans"] = [
                {"start": s.start, "end": s.end, "mark": s.mark.value} for s in formatted.spans
            ]
        blocks.append(entry)
    return {"dialect": "markdown", "blocks": blocks}
