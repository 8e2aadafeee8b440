"""
Block segmenter for the markdown dialect

Splits raw text into an ordered sequence of typed blocks, one block per
source line except for fenced code blocks, which collect every line between
their fences.

Recognised line forms (outside code fences):
- Blank line               → Blank
- '# ', '## ', '### '      → Heading(level)
- '* item', '- item'       → ListItem(ordered=False)
- '1. item'                → ListItem(ordered=True)
- anything else            → Paragraph

Example:
    >>> blocks = Segmenter("# Title\\n\\nSome *text*").segment()
    >>> [type(block).__name__ for block in blocks]
    ['Heading', 'Blank', 'Paragraph']
"""

import re
from typing import List, Optional

from ..config import appsettings
from ..models.blocks import Block, Heading, ListItem, CodeBlock, Blank, Paragraph, DocumentResult
from .errors import UnterminatedCodeFenceError
from .log import LOG, WARN


HEADING_PATTERN = re.compile(r'^(#{1,3})\s+(.*)$')
BULLET_PATTERN = re.compile(r'^\s*[*-]\s+(.*)$')
ORDERED_PATTERN = re.compile(r'^\s*(\d+)\.\s+(.*)$')


def lines_split(text: str) -> List[str]:
    """
    Split text into lines on "\\n" only

    A trailing "\\r" is removed from each line and a final newline does not
    start an extra empty line. Unlike str.splitlines, form feeds, "\\x1c"
    and "\\u2028" stay inside the line they appear in.

    Example:
        "a\\r\\nb\\x0cc\\n" → ["a", "b\\x0cc"]
    """
    lines = text.split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]


class Segmenter:
    """
    Line-oriented segmenter for the markdown dialect

    Handles:
    - Headings (levels 1-3)
    - Bullet and numbered list items
    - Fenced code blocks (content kept verbatim)
    - Blank lines (one Blank block each, never merged)
    """

    def __init__(
        self,
        source: str,
        unterminated_fence: Optional[str] = None,
        strip_ordered_labels: Optional[bool] = None,
    ):
        """
        Initialize segmenter with source text

        Args:
            source: Raw markdown text
            unterminated_fence: "flush" or "error"; defaults to appsettings
            strip_ordered_labels: Remove "1. " labels from ordered items;
                                  defaults to appsettings

        Attributes:
            lines: Source split into lines
            line_number: Current 1-based line number while scanning
            in_code_block: True between an opening and closing fence
            code_lines: Accumulated lines of the open code block
            code_language: Info string of the open code block
            code_start: Line number of the opening fence
        """
        self.source = source
        self.lines: List[str] = lines_split(source)
        self.unterminated_fence = unterminated_fence or appsettings.unterminated_fence
        self.strip_ordered_labels = (
            appsettings.strip_ordered_labels if strip_ordered_labels is None else strip_ordered_labels
        )

        self.line_number = 0
        self.in_code_block = False
        self.code_lines: List[str] = []
        self.code_language: Optional[str] = None
        self.code_start = 0

    def segment(self) -> List[Block]:
        """
        Segment source text into blocks

        Returns:
            Blocks in document order. Empty list for empty source.

        Raises:
            UnterminatedCodeFenceError: If a fence is still open at end of
                input and the policy is "error"
        """
        blocks: List[Block] = []
        self.line_number = 0
        self.in_code_block = False
        self.code_lines = []

        for line in self.lines:
            self.line_number += 1

            if appsettings.fence_is(line):
                if not self.in_code_block:
                    self.fence_open(line)
                else:
                    blocks.append(self.fence_close())
                continue

            if self.in_code_block:
                self.code_lines.append(line)
                continue

            block = self.line_classify(line, self.line_number)
            LOG(f"Line {self.line_number} → {type(block).__name__}", level=3)
            blocks.append(block)

        if self.in_code_block:
            blocks.append(self.fence_unterminated())

        return blocks

    def document_build(self) -> DocumentResult:
        """Segment and wrap the blocks in a DocumentResult"""
        return DocumentResult(blocks=tuple(self.segment()))

    def fence_open(self, line: str) -> None:
        """Enter code-block mode and start an empty accumulator"""
        self.in_code_block = True
        self.code_lines = []
        self.code_language = appsettings.fenceLanguage_extract(line)
        self.code_start = self.line_number
        LOG(f"Code fence opened at line {self.line_number} ({self.code_language or 'no language'})", level=3)

    def fence_close(self) -> CodeBlock:
        """Leave code-block mode and flush the accumulator into one CodeBlock"""
        block = CodeBlock(
            text='\n'.join(self.code_lines),
            language=self.code_language,
            line_number=self.code_start,
        )
        self.in_code_block = False
        self.code_lines = []
        self.code_language = None
        return block

    def fence_unterminated(self) -> CodeBlock:
        """
        Apply the unterminated-fence policy at end of input

        Returns:
            Best-effort CodeBlock holding the accumulated lines ("flush")

        Raises:
            UnterminatedCodeFenceError: When the policy is "error"
        """
        if self.unterminated_fence == "error":
            raise UnterminatedCodeFenceError(self.code_start, self.lines)

        WARN(
            f"Code fence opened at line {self.code_start} is never closed; "
            f"flushing {len(self.code_lines)} line(s) as a code block"
        )
        return self.fence_close()

    def line_classify(self, line: str, line_number: int) -> Block:
        """
        Map one line outside a code fence to exactly one block

        Args:
            line: Source line
            line_number: 1-based line number

        Returns:
            Blank, Heading, ListItem or Paragraph

        Example:
            "### Deep"   → Heading(level=3, text="Deep")
            "- item"     → ListItem(ordered=False, text="item")
            "2. second"  → ListItem(ordered=True, text="2. second", number=2)
            "#### four"  → Paragraph("#### four")
        """
        if not line.strip():
            return Blank(line_number=line_number)

        heading = HEADING_PATTERN.match(line)
        if heading:
            return Heading(
                level=len(heading.group(1)),
                text=heading.group(2).strip(),
                line_number=line_number,
            )

        bullet = BULLET_PATTERN.match(line)
        if bullet:
            return ListItem(ordered=False, text=bullet.group(1).strip(), line_number=line_number)

        ordered = ORDERED_PATTERN.match(line)
        if ordered:
            text = ordered.group(2).strip() if self.strip_ordered_labels else line.strip()
            return ListItem(
                ordered=True,
                text=text,
                number=int(ordered.group(1)),
                line_number=line_number,
            )

        return Paragraph(text=line, line_number=line_number)


def segment(text: str) -> List[Block]:
    """Segment text with the configured policies"""
    return Segmenter(text).segment()
