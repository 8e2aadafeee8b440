"""
Structural errors raised by the conversion engine

Malformed inline delimiters and empty results are never errors; the only
fatal condition is a code fence left open at end of input when the
'error' policy is configured.
"""

from typing import List


class StructuralError(SyntaxError):
    """
    Raised when document structure cannot be resolved

    Attributes:
        line_number: Source line (1-based) the error refers to
        context: Source excerpt shown in the message
    """

    def __init__(self, message: str, line_number: int, lines: List[str]):
        self.line_number = line_number
        self.context = context_render(lines, line_number)
        super().__init__(
            f"\n{message}\n"
            f"Line {line_number}\n"
            f"{self.context}"
        )


class UnterminatedCodeFenceError(StructuralError):
    """A code fence was opened but never closed"""

    def __init__(self, line_number: int, lines: List[str]):
        super().__init__(
            f"Code fence opened at line {line_number} is never closed",
            line_number,
            lines,
        )


def context_render(lines: List[str], line_number: int, radius: int = 1) -> str:
    """
    Render source lines around line_number with a caret under the target line

    Example output:
        Context:   3 | Some text
                   4 | ```python
                       ^
    """
    if not lines:
        return "Context: <empty input>"

    index = min(max(line_number - 1, 0), len(lines) - 1)
    first = max(0, index - radius)
    last = min(len(lines), index + radius + 1)
    width = len(str(last))

    rendered = []
    for i in range(first, last):
        prefix = "Context: " if i == first else "         "
        rendered.append(f"{prefix}{i + 1:>{width}} | {lines[i]}")
        if i == index:
            indent = len(lines[i]) - len(lines[i].lstrip())
            rendered.append(f"         {' ' * width}   {' ' * indent}^")
    return "\n".join(rendered)
