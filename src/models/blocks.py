"""
Block and inline-format data models

Type-safe structures produced by the segmenter and the inline formatter.
A Block is a tagged union of frozen dataclasses; consumers dispatch on the
variant class with a match statement.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Heading:
    """
    A heading line ('# ', '## ' or '### ')

    Attributes:
        level: Number of leading '#' characters (1..3)
        text: Heading text with the marker stripped
        line_number: Source line number (1-based)

    Example:
        "## Setup" → Heading(level=2, text="Setup", line_number=1)
    """
    level: int
    text: str
    line_number: int = 0

    @property
    def raw_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class ListItem:
    """
    A bullet ('* ', '- ') or numbered ('1. ') list item

    Attributes:
        ordered: True for numbered items
        text: Item text. Bullet markers are stripped; numeric labels are kept
              unless strip_ordered_labels is enabled
        number: Parsed numeric label for ordered items, None for bullets
        line_number: Source line number (1-based)
    """
    ordered: bool
    text: str
    number: Optional[int] = None
    line_number: int = 0

    @property
    def raw_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class CodeBlock:
    """
    Fenced code block content, never interpreted as markup

    Attributes:
        text: Lines between the fences joined by newline
        language: Info string of the opening fence, if any
        line_number: Line number of the opening fence
    """
    text: str
    language: Optional[str] = None
    line_number: int = 0

    @property
    def raw_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class Blank:
    """An all-whitespace line outside a code block"""
    line_number: int = 0

    @property
    def raw_text(self) -> str:
        return ""


@dataclass(frozen=True)
class Paragraph:
    """Any other non-blank line, kept in full"""
    text: str
    line_number: int = 0

    @property
    def raw_text(self) -> str:
        return self.text


Block = Union[Heading, ListItem, CodeBlock, Blank, Paragraph]


def block_kind(block: Block) -> str:
    """Short lowercase kind name used in serialised output"""
    match block:
        case Heading():
            return "heading"
        case ListItem():
            return "list_item"
        case CodeBlock():
            return "code_block"
        case Blank():
            return "blank"
        case Paragraph():
            return "paragraph"
    raise TypeError(f"Not a block: {block!r}")


class Mark(Enum):
    """Inline marks, in the order the formatter extracts them"""
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"

    @property
    def order(self) -> int:
        return list(Mark).index(self)


@dataclass(frozen=True)
class FormatSpan:
    """
    Half-open range [start, end) over clean (delimiter-free) text

    Attributes:
        start: First formatted character offset
        end: Offset one past the last formatted character
        mark: Mark applied to the range

    Raises:
        ValueError: If the range is empty or negative
    """
    start: int
    end: int
    mark: Mark

    def __post_init__(self) -> None:
        if not 0 <= self.start < self.end:
            raise ValueError(f"Invalid span [{self.start}, {self.end}) for {self.mark.value}")


@dataclass(frozen=True)
class FormattedText:
    """
    Result of inline formatting

    Attributes:
        text: Clean text with matched delimiters removed
        spans: Spans over text, sorted by start offset then mark order

    Example:
        Input: "**bold** and `code`"
        Result: FormattedText(
            text="bold and code",
            spans=(FormatSpan(0, 4, Mark.BOLD), FormatSpan(9, 13, Mark.CODE))
        )
    """
    text: str
    spans: Tuple[FormatSpan, ...] = field(default_factory=tuple)

    def spans_byMark(self, mark: Mark) -> Tuple[FormatSpan, ...]:
        return tuple(span for span in self.spans if span.mark is mark)

    def substring(self, span: FormatSpan) -> str:
        return self.text[span.start:span.end]


@dataclass(frozen=True)
class DocumentResult:
    """
    Ordered block sequence produced from one markdown document

    An empty result is a normal outcome; callers decide whether to warn or abort.
    """
    blocks: Tuple[Block, ...]

    @property
    def empty(self) -> bool:
        return not any(not isinstance(block, Blank) for block in self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)
