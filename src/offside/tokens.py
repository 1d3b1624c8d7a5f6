"""
Token Definitions
=================

Token types, keyword spellings and the immutable records that flow from
the scanner to the parser.

Token Categories
----------------
- Structural: INDENT, DEDENT, NEWLINE, EOF (no fixed spelling)
- Keywords: and break def elif else if not or return while True False
- Identifiers: [A-Za-z_][A-Za-z0-9_]*
- Numbers: 42 (NUMBER), 3.14 and .5 (FLOAT)
- Operators: = + - * / == != > >= < <= ( ) , :
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from offside.errors import SourceLocation


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token kinds delivered to the parser."""

    # === Structural Tokens ===
    INDENT = auto()         # block opens (leading whitespace grew)
    DEDENT = auto()         # block closes (leading whitespace shrank)
    NEWLINE = auto()        # end of a logical line
    EOF = auto()            # end of stream

    # === Keywords ===
    AND = auto()            # and
    BREAK = auto()          # break
    DEF = auto()            # def
    ELIF = auto()           # elif
    ELSE = auto()           # else
    IF = auto()             # if
    NOT = auto()            # not
    OR = auto()             # or
    RETURN = auto()         # return
    WHILE = auto()          # while
    TRUE = auto()           # True
    FALSE = auto()          # False

    # === Identifiers and Literals ===
    IDENTIFIER = auto()
    NUMBER = auto()         # 42
    FLOAT = auto()          # 3.14, .5

    # === Operators ===
    ASSIGN = auto()         # =
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /
    EQ = auto()             # ==
    NE = auto()             # !=
    GT = auto()             # >
    GE = auto()             # >=
    LT = auto()             # <
    LE = auto()             # <=

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    COMMA = auto()          # ,
    COLON = auto()          # :


# =============================================================================
# Literal Spellings
# =============================================================================

KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "break": TokenType.BREAK,
    "def": TokenType.DEF,
    "elif": TokenType.ELIF,
    "else": TokenType.ELSE,
    "if": TokenType.IF,
    "not": TokenType.NOT,
    "or": TokenType.OR,
    "return": TokenType.RETURN,
    "while": TokenType.WHILE,
    "True": TokenType.TRUE,
    "False": TokenType.FALSE,
}

OPERATORS: dict[str, TokenType] = {
    "==": TokenType.EQ,
    "!=": TokenType.NE,
    ">=": TokenType.GE,
    "<=": TokenType.LE,
    "=": TokenType.ASSIGN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    ">": TokenType.GT,
    "<": TokenType.LT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
}

STRUCTURAL = frozenset({
    TokenType.INDENT,
    TokenType.DEDENT,
    TokenType.NEWLINE,
    TokenType.EOF,
})


# =============================================================================
# Lexeme and Token Records
# =============================================================================

@dataclass(frozen=True)
class Lexeme:
    """
    A raw slice of source text and where it started.

    Attributes:
        text: The exact characters matched (may be empty for a zero-width
            indentation run)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    text: str
    line: int
    column: int = 1


@dataclass(frozen=True)
class Token:
    """
    A classified lexeme, ready for delivery to the parser.

    For INDENT and DEDENT the value is the leading whitespace of the line
    that triggered them; it carries no meaning beyond diagnostics.

    Attributes:
        type: The TokenType classification
        value: Payload text
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
    """
    type: TokenType
    value: str
    line: int
    column: int = 1

    @classmethod
    def from_lexeme(cls, token_type: TokenType, lexeme: Lexeme) -> "Token":
        return cls(token_type, lexeme.text, lexeme.line, lexeme.column)

    def __iter__(self) -> Iterator:
        """Unpack as the (kind, value) pair handed to the parser."""
        yield self.type
        yield self.value

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def is_structural(self) -> bool:
        """Return True for INDENT, DEDENT, NEWLINE and EOF."""
        return self.type in STRUCTURAL

    def location(self, filename: str = "<input>") -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(filename, self.line, self.column)
