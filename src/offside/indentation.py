"""
Indentation Tracker
===================

Turns changes in leading-whitespace width into INDENT and DEDENT tokens.

The tracker keeps a stack of open widths, shallowest at the bottom. The
bottom is always the sentinel ``0``, and widths grow strictly upward.

Algorithm
---------
For each statement line with leading width ``W`` (a raw character count,
tab and space both count as one):

1. ``W`` greater than the top of the stack: push ``W``, emit one INDENT.
2. Otherwise pop while the top differs from ``W``, one DEDENT per pop.
   If the stack runs out before ``W`` is found, the line dedents to a
   width that was never opened: IndentationError.

A line that starts in column 1 has ``W = 0`` and goes through step 2
like any other. At end of input every level above the sentinel is
popped with one DEDENT each; that can never fail.

Example
-------
    if x:           W=0  stack [0]
        y = 1       W=4  stack [0, 4]       INDENT
    z = 2           W=0  stack [0]          DEDENT
"""

import logging
from typing import Optional

from offside.errors import IndentationError, SessionStateError, SourceLocation
from offside.tokens import Lexeme, Token, TokenType

logger = logging.getLogger(__name__)


class IndentationTracker:
    """
    Stack of open indentation widths for one lexing session.

    The stack is created on first use and drained by ``flush``; after
    that, or after an indentation error, the tracker refuses further work.

    Attributes:
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, filename: str = "<input>"):
        self.filename = filename
        self._stack: Optional[list[int]] = None
        self._closed = False

    # =========================================================================
    # State
    # =========================================================================

    @property
    def initialized(self) -> bool:
        return self._stack is not None

    @property
    def levels(self) -> tuple[int, ...]:
        """Snapshot of the open widths, bottom first."""
        if self._stack is None:
            return ()
        return tuple(self._stack)

    @property
    def depth(self) -> int:
        """Number of open blocks above the sentinel."""
        if not self._stack:
            return 0
        return len(self._stack) - 1

    def _ensure_stack(self) -> list[int]:
        if self._closed:
            raise SessionStateError("indentation tracker has already been flushed")
        if self._stack is None:
            self._stack = [0]
        return self._stack

    # =========================================================================
    # Transitions
    # =========================================================================

    def resolve(self, width: int, lexeme: Lexeme, source_line: Optional[str] = None) -> list[Token]:
        """
        Compute the boundary tokens owed before a statement line.

        Args:
            width: Width of the line's leading whitespace
            lexeme: The leading whitespace itself, used as token payload
            source_line: Text of the line, for the error message

        Returns:
            Zero or more INDENT or DEDENT tokens, in delivery order

        Raises:
            IndentationError: If ``width`` is below the top of the stack
                and matches no open level
        """
        stack = self._ensure_stack()

        if width > stack[-1]:
            stack.append(width)
            logger.debug(f"line {lexeme.line}: indent to {width}, levels {stack}")
            return [Token.from_lexeme(TokenType.INDENT, lexeme)]

        levels = tuple(stack)
        tokens = []
        while stack and stack[-1] != width:
            stack.pop()
            tokens.append(Token.from_lexeme(TokenType.DEDENT, lexeme))

        if not stack:
            self._closed = True
            raise IndentationError(
                width,
                levels,
                SourceLocation(self.filename, lexeme.line, lexeme.column + width),
                source_line,
            )

        if tokens:
            logger.debug(f"line {lexeme.line}: dedent {len(tokens)} level(s) to {width}")
        return tokens

    def flush(self, line: int) -> list[Token]:
        """
        Close every open block at end of input.

        One DEDENT is returned per level above the sentinel, then the
        sentinel itself is dropped, leaving the stack empty.

        Args:
            line: Line number recorded on the DEDENT tokens
        """
        stack = self._ensure_stack()
        lexeme = Lexeme("", line, 1)

        tokens = []
        while len(stack) > 1:
            stack.pop()
            tokens.append(Token.from_lexeme(TokenType.DEDENT, lexeme))

        stack.pop()
        self._closed = True
        logger.debug(f"end of input: closed {len(tokens)} open level(s)")
        return tokens
