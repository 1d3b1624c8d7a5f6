"""
Incremental Parser Protocol
===========================

The lexer feeds its tokens to a push-style parser, one call per token.
Grammar, parse trees and semantics belong to the parser; the lexer only
sees the answer to each call:

| Answer    | Meaning                     | Session reaction             |
|-----------|-----------------------------|------------------------------|
| MORE      | token taken, keep going     | scan the next token          |
| ACCEPTED  | parse finished successfully | release parser, succeed      |
| REJECTED  | stream is not well formed   | release parser, ParserError  |

``TokenRecorder`` is a parser that accepts any stream; it backs
``offside.tokenize`` and the ``offside tokens`` command.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from offside.tokens import TokenType

logger = logging.getLogger(__name__)


class ParseStatus(Enum):
    """The three answers an incremental parser can give."""
    MORE = "more"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class IncrementalParser(ABC):
    """
    Abstract base class for parsers driven by the lexer.

    Implementations keep their own state between calls. After answering
    REJECTED a parser should leave a human-readable reason in
    ``diagnostic``; the session forwards it unchanged.
    """

    diagnostic: Optional[str] = None

    @abstractmethod
    def accept(self, kind: TokenType, value: str) -> ParseStatus:
        """
        Take one token.

        Args:
            kind: The token type
            value: The token's payload text
        """
        pass

    @abstractmethod
    def release(self) -> None:
        """Free any resources held by the parser. Called exactly once."""
        pass


class TokenRecorder(IncrementalParser):
    """
    Parser that records every token and accepts at end of stream.

    Example:
        recorder = TokenRecorder()
        LexSession("x = 1\\n", recorder).run()
        recorder.kinds   # [IDENTIFIER, ASSIGN, NUMBER, NEWLINE, EOF]
    """

    def __init__(self):
        self.tokens: list[tuple[TokenType, str]] = []
        self.released = False

    @property
    def kinds(self) -> list[TokenType]:
        return [kind for kind, _ in self.tokens]

    def accept(self, kind: TokenType, value: str) -> ParseStatus:
        self.tokens.append((kind, value))
        if kind is TokenType.EOF:
            return ParseStatus.ACCEPTED
        return ParseStatus.MORE

    def release(self) -> None:
        logger.debug(f"token recorder released after {len(self.tokens)} tokens")
        self.released = True
