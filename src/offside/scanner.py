"""
Scanner
=======

Recognizes the lexeme at the current input position.

Rule Table
----------
Every lexical category is a regular-expression rule in ``RULES``. At each
position all rules are tried; the longest match wins, and when two rules
match the same length the one listed first wins. Keyword rules come before
the identifier rule, so:

| Input   | Longest match     | Result     |
|---------|-------------------|------------|
| if      | keyword = ident   | IF         |
| iffy    | ident (4) > if (2)| IDENTIFIER |
| True    | keyword = ident   | TRUE       |
| 3.14    | float (4) > int(1)| FLOAT      |
| ==      | eq (2) > assign(1)| EQ         |

Rules with no token type (inter-token whitespace, comments) are consumed
silently. Blank and comment-only lines are removed before any rule runs by
``skip_blank_line``, and the leading whitespace of a statement line is
measured separately by ``scan_indent``.

Example Usage
-------------
>>> scanner = Scanner("x = 1\\n")
>>> scanner.scan_indent()
Lexeme(text='', line=1, column=1)
>>> [scanner.next_token() for _ in range(4)]
[Token(IDENTIFIER, 'x', 1:1), Token(ASSIGN, '=', 1:3), Token(NUMBER, '1', 1:5), Token(NEWLINE, '\\n', 1:6)]
"""

import re
from dataclasses import dataclass
from typing import Optional

from offside.errors import LexicalError, SourceLocation
from offside.tokens import KEYWORDS, OPERATORS, Lexeme, Token, TokenType


# =============================================================================
# Scanning Rules
# =============================================================================

@dataclass(frozen=True)
class Rule:
    """
    One lexical category.

    Attributes:
        name: Rule name, used in debugging output
        pattern: Compiled regular expression anchored by ``match``
        token_type: Kind produced, or None for text that is skipped
    """
    name: str
    pattern: re.Pattern
    token_type: Optional[TokenType]


def _literal(spelling: str, token_type: TokenType) -> Rule:
    return Rule(spelling, re.compile(re.escape(spelling)), token_type)


RULES: tuple[Rule, ...] = (
    # Keywords must precede IDENTIFIER so equal-length matches resolve to them
    *(_literal(spelling, token_type) for spelling, token_type in KEYWORDS.items()),
    Rule("identifier", re.compile(r"[A-Za-z_][A-Za-z0-9_]*"), TokenType.IDENTIFIER),
    Rule("float", re.compile(r"[0-9]*\.[0-9]+"), TokenType.FLOAT),
    Rule("number", re.compile(r"[0-9]+"), TokenType.NUMBER),
    *(_literal(spelling, token_type) for spelling, token_type in OPERATORS.items()),
    Rule("newline", re.compile(r"\r?\n"), TokenType.NEWLINE),
    Rule("whitespace", re.compile(r"[ \t]+"), None),
    # Only \n or \r\n ends a comment; a lone \r is part of its text
    Rule("comment", re.compile(r"#(?:[^\r\n]|\r(?!\n))*"), None),
)

# A line holding nothing but spaces, tabs and an optional comment
BLANK_LINE = re.compile(r"[ \t]*(?:#(?:[^\r\n]|\r(?!\n))*)?(?:\r?\n|\Z)")

# The leading whitespace run of a statement line
INDENT_RUN = re.compile(r"[ \t]*")

LINE_BREAK = re.compile(r"\r?\n")


# =============================================================================
# Scanner Implementation
# =============================================================================

class Scanner:
    """
    Splits source text into lexemes, one call at a time.

    The scanner never looks further ahead than the lexeme it is matching,
    so a caller can stop consuming at any token and the rest of the input
    is simply never read.

    Usage:
        scanner = Scanner(source_text, filename)
        while not scanner.at_end():
            if scanner.skip_blank_line():
                continue
            indent = scanner.scan_indent()
            ...
            token = scanner.next_token()

    Attributes:
        source: The source code being scanned
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, source: str, filename: str = "<input>", rules: tuple[Rule, ...] = RULES):
        self.source = source
        self.filename = filename
        self.rules = rules

        self._pos = 0
        self._line = 1
        self._line_start_pos = 0
        self._lines: Optional[list[str]] = None

    # =========================================================================
    # Position
    # =========================================================================

    @property
    def line(self) -> int:
        """Current 1-based line number."""
        return self._line

    @property
    def column(self) -> int:
        """Current 1-based column number."""
        return self._pos - self._line_start_pos + 1

    def at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def at_line_start(self) -> bool:
        return self._pos == self._line_start_pos

    def _consume(self, end: int) -> None:
        self._pos = end

    def _start_new_line(self) -> None:
        self._line += 1
        self._line_start_pos = self._pos

    # =========================================================================
    # Line-Level Scanning
    # =========================================================================

    def skip_blank_line(self) -> bool:
        """
        Consume the current line if it is blank or holds only a comment.

        Must be called at the start of a line. The line terminator, if
        any, is consumed with it.

        Returns:
            True if a line was skipped
        """
        if self.at_end():
            return False

        match = BLANK_LINE.match(self.source, self._pos)
        if match is None:
            return False

        self._consume(match.end())
        if match.group().endswith("\n"):
            self._start_new_line()
        return True

    def scan_indent(self) -> Lexeme:
        """
        Consume the leading whitespace run of the current line.

        Tabs and spaces are not distinguished; the width of the run is
        simply ``len(lexeme.text)``. A line that starts with a non-blank
        character yields an empty lexeme.
        """
        match = INDENT_RUN.match(self.source, self._pos)
        lexeme = Lexeme(match.group(), self._line, self.column)
        self._consume(match.end())
        return lexeme

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def next_token(self) -> Optional[Token]:
        """
        Scan the next token on the current line.

        Inter-token whitespace and a trailing comment are skipped. A line
        terminator is returned as a NEWLINE token and moves the scanner to
        the next line.

        Returns:
            The next Token, or None at the physical end of input

        Raises:
            LexicalError: If no rule matches the current character
        """
        while not self.at_end():
            found = self._longest_match()
            if found is None:
                raise self._invalid_character()

            rule, match = found
            lexeme = Lexeme(match.group(), self._line, self.column)
            self._consume(match.end())

            if rule.token_type is None:
                continue
            if rule.token_type is TokenType.NEWLINE:
                self._start_new_line()
            return Token.from_lexeme(rule.token_type, lexeme)

        return None

    def _longest_match(self) -> Optional[tuple[Rule, re.Match]]:
        """Try every rule here; longest wins, earliest rule breaks ties."""
        best: Optional[tuple[Rule, re.Match]] = None
        best_length = 0

        for rule in self.rules:
            match = rule.pattern.match(self.source, self._pos)
            if match is None:
                continue
            length = match.end() - match.start()
            if length > best_length:
                best = (rule, match)
                best_length = length

        return best

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def _invalid_character(self) -> LexicalError:
        return LexicalError(
            self.source[self._pos],
            SourceLocation(self.filename, self._line, self.column),
            self.source_line(self._line),
        )

    def source_line(self, line: int) -> str:
        """Return the text of a 1-based source line, without its terminator."""
        if self._lines is None:
            self._lines = LINE_BREAK.split(self.source)
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1]
        return ""
