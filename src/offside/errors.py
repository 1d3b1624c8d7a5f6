"""
offside Error Hierarchy
=======================

This module defines the exception hierarchy for the offside lexer.
All exceptions inherit from OffsideError, allowing callers to catch every
lexer-related error with a single except clause if desired.

Exception Hierarchy
-------------------
OffsideError (base)
├── LexError (located diagnostics, terminal for a session)
│   ├── LexicalError - no scanning rule matches the current character
│   ├── IndentationError - dedent to a width that was never opened
│   └── ParserError - the incremental parser rejected the token stream
└── SessionStateError - a finished session or tracker was used again

Error messages follow this format:
    filename:line:column: error: category: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)

Note that ``IndentationError`` deliberately shares its name with the Python
builtin; the package root re-exports it as ``OffsideIndentationError``.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from offside.tokens import Token


# =============================================================================
# Base Exception Class
# =============================================================================

class OffsideError(Exception):
    """
    Base exception for all offside errors.

        try:
            tokens = offside.tokenize(source)
        except OffsideError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source text.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Session-Terminating Errors
# =============================================================================

class LexError(OffsideError):
    """
    Base exception for errors that end a lexing session.

    Every subclass names a diagnostic ``category`` that is printed in the
    message, so a reader can tell a bad character from a bad dedent or a
    parser rejection without looking at the exception type.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    category = "error"

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> Optional[int]:
        """The 1-based line of the error, if known."""
        return self.location.line if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            demo.off:3:5: error: lexical error: unexpected character '@'
                x = @y
                    ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.category}: {self.message}")
        else:
            parts.append(f"error: {self.category}: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexicalError(LexError):
    """
    No scanning rule matches the character at the current position.

    Examples:
        - ``@`` or ``$`` anywhere in source
        - a lone carriage return not followed by a line feed
        - a trailing ``.`` after digits, as in ``3.``
    """

    category = "lexical error"

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unexpected character {char!r} (0x{ord(char):02X})",
            location=location,
            source_line=source_line,
        )


class IndentationError(LexError):
    """
    A line dedents to a width that is not on the indentation stack.

    Example:
        if x:
            y = 1
          z = 2     # 2 columns: no block was ever opened at this width
    """

    category = "indentation error"

    def __init__(
        self,
        width: int,
        levels: tuple[int, ...],
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.width = width
        self.levels = levels
        open_levels = ", ".join(str(level) for level in levels)
        super().__init__(
            f"unindent to width {width} does not match any outer indentation level",
            location=location,
            hint=f"open indentation levels are {open_levels}",
            source_line=source_line,
        )


class ParserError(LexError):
    """
    The incremental parser rejected the token stream.

    The parser's own diagnostic is forwarded verbatim as the message; the
    location is that of the token that was rejected.
    """

    category = "parse error"

    def __init__(
        self,
        diagnostic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        token: Optional["Token"] = None,
    ):
        self.diagnostic = diagnostic
        self.token = token
        super().__init__(diagnostic, location=location, source_line=source_line)


# =============================================================================
# Usage Errors
# =============================================================================

class SessionStateError(OffsideError):
    """
    A session, or its indentation tracker, was used after it finished.

    Sessions are single-use: the indentation stack and the parser handle
    are torn down exactly once.
    """
    pass
