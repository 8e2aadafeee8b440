"""
Custom Pygments lexer for the slide-deck dialect

Highlights slide sources quoted inside fenced code blocks (```slides).

Token types:
- Generic.Heading: Separator lines (--- [SLIDE n] ---)
- Keyword.Declaration: Field markers (Title:, Subtitle:, Body:, Content:)
- Comment.Special: Notes markers and the notes text that follows
- Generic.Strong / Generic.Emph: **bold** and *italic* spans
- String.Backtick: `code` spans
- Punctuation: Bullet markers
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Whitespace,
    Punctuation,
    Keyword,
    String,
    Comment,
    Generic,
)


class SlideDeckLexer(RegexLexer):
    """
    Lexer for the Title:/Body:/Notes: slide dialect

    Example:
        --- [SLIDE 1] ---
        Title: Hello
        Body:
        * **Bold** point

    Tokens:
        --- [SLIDE 1] --- → Generic.Heading
        Title:            → Keyword.Declaration
        *                 → Punctuation
        **Bold**          → Generic.Strong
    """

    name = 'SlideDeck'
    aliases = ['slides', 'deck', 'slidedeck']
    filenames = ['*.slides']

    tokens = {
        'root': [
            # Separator lines
            (r'^[ \t]*-{3,}.*\n?', Generic.Heading),

            # Notes marker: everything up to the next separator is notes text
            (r'(?i)^([ \t]*)((?:\*\*)?(?:Speaker[ \t]*)?Notes(?::(?:\*\*)?|\*\*:?))',
             bygroups(Whitespace, Comment.Special), 'notes'),

            # Field markers
            (r'(?i)^([ \t]*)((?:\*\*)?(?:Title|Subtitle|Body|Content)(?::(?:\*\*)?|\*\*:?))',
             bygroups(Whitespace, Keyword.Declaration)),

            # Bullets and numbered labels
            (r'^([ \t]*)([*-])([ \t]+)', bygroups(Whitespace, Punctuation, Whitespace)),
            (r'^([ \t]*)(\d+\.)([ \t]+)', bygroups(Whitespace, Punctuation, Whitespace)),

            # Inline spans
            (r'\*\*[^*\n]+\*\*', Generic.Strong),
            (r'\*[^*\n]+\*', Generic.Emph),
            (r'`[^`\n]+`', String.Backtick),

            # Everything else is text
            (r'[^*`\n]+', Text),
            (r'\n', Whitespace),
            (r'.', Text),
        ],

        'notes': [
            # A separator ends the notes region
            (r'^[ \t]*-{3,}.*\n?', Generic.Heading, '#pop'),
            (r'[^\n]+', Comment.Special),
            (r'\n', Whitespace),
        ],
    }
