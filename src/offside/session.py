"""
Lexing Session
==============

One session runs the lexer over one input and feeds every token to an
incremental parser:

    Source → Scanner → Indentation Tracker → Parser
                                   ↑
                 end of input → Finalizer

Per-Line Processing
-------------------
Each physical line is handled in two phases:

1. Blank and comment-only lines are skipped outright. Otherwise the
   leading whitespace is measured (width 0 if there is none) and the
   indentation tracker decides which INDENT/DEDENT tokens are owed.
2. The rest of the line is scanned token by token, up to and including
   its NEWLINE.

Every token is handed to the parser before the scanner moves on, so the
first ACCEPTED or REJECTED answer stops the session with the remaining
input unread. At physical end of input the finalizer closes all open
blocks and sends EOF.

Error Handling
--------------
Lexical errors, indentation errors and parser rejections are raised as
exceptions inside the session and converted into a ``SessionResult`` at
``run()``, which is the single exit point. The parser is released
exactly once on every path.

Usage
-----
>>> from offside import LexSession, TokenRecorder
>>> result = LexSession("if x:\\n    y = 1\\n", TokenRecorder()).run()
>>> result.ok, result.token_count
(True, 11)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from offside.errors import (
    IndentationError,
    LexError,
    LexicalError,
    ParserError,
    SessionStateError,
    SourceLocation,
)
from offside.indentation import IndentationTracker
from offside.parser import IncrementalParser, ParseStatus, TokenRecorder
from offside.scanner import Scanner
from offside.tokens import Token, TokenType

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration and Results
# =============================================================================

@dataclass
class LexerOptions:
    """
    Session configuration.

    Attributes:
        filename: Source name used in diagnostics
        trace_tokens: Log every delivered token at DEBUG level
    """
    filename: str = "<input>"
    trace_tokens: bool = False


class SessionStatus(Enum):
    """How a session ended."""
    ACCEPTED = "accepted"
    LEXICAL_ERROR = "lexical error"
    INDENTATION_ERROR = "indentation error"
    PARSER_ERROR = "parse error"


_STATUS_BY_ERROR = (
    (LexicalError, SessionStatus.LEXICAL_ERROR),
    (IndentationError, SessionStatus.INDENTATION_ERROR),
    (ParserError, SessionStatus.PARSER_ERROR),
)


@dataclass
class SessionResult:
    """
    Outcome of one session.

    Attributes:
        status: How the session ended
        filename: Source filename
        token_count: Number of tokens delivered to the parser
        error: The terminating error, None on success
    """
    status: SessionStatus
    filename: str = "<input>"
    token_count: int = 0
    error: Optional[LexError] = None

    @property
    def ok(self) -> bool:
        return self.status is SessionStatus.ACCEPTED

    @property
    def exit_code(self) -> int:
        """Process status: 0 on acceptance, 1 otherwise."""
        return 0 if self.ok else 1

    def raise_for_status(self) -> None:
        """Re-raise the terminating error, if there was one."""
        if self.error is not None:
            raise self.error


# =============================================================================
# Session
# =============================================================================

class LexSession:
    """
    Drives one input through the scanner, the tracker and a parser.

    A session is single-use: the tracker's stack and the parser handle
    belong to it alone and are torn down when ``run`` returns.

    Example:
        recorder = TokenRecorder()
        result = LexSession(source, recorder, LexerOptions("demo.off")).run()
        if not result.ok:
            print(result.error)

    Attributes:
        parser: The incremental parser receiving the tokens
        options: Session configuration
    """

    def __init__(
        self,
        source: str,
        parser: IncrementalParser,
        options: Optional[LexerOptions] = None,
        observer: Optional[Callable[[Token], None]] = None,
    ):
        """
        Args:
            source: Text to tokenize
            parser: Receives each token through ``accept``
            options: Session configuration (uses defaults if None)
            observer: Called with each token just before it is delivered
        """
        self.parser = parser
        self.options = options or LexerOptions()
        self._observer = observer

        self._scanner = Scanner(source, self.options.filename)
        self._tracker = IndentationTracker(self.options.filename)
        self._token_count = 0
        self._started = False
        self._released = False

    @property
    def token_count(self) -> int:
        return self._token_count

    def run(self) -> SessionResult:
        """
        Run the session to completion.

        Returns:
            SessionResult describing acceptance or the first fatal error

        Raises:
            SessionStateError: If the session has already run
        """
        if self._started:
            raise SessionStateError("a lexing session can only run once")
        self._started = True

        filename = self.options.filename
        try:
            self._drive()
        except LexError as error:
            logger.debug(f"{filename}: session aborted: {error.category} at line {error.line}")
            return SessionResult(
                self._status_for(error),
                filename=filename,
                token_count=self._token_count,
                error=error,
            )
        finally:
            self._release()

        logger.info(f"{filename}: accepted after {self._token_count} tokens")
        return SessionResult(
            SessionStatus.ACCEPTED,
            filename=filename,
            token_count=self._token_count,
        )

    @staticmethod
    def _status_for(error: LexError) -> SessionStatus:
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(error, error_type):
                return status
        raise error

    # =========================================================================
    # Driver
    # =========================================================================

    def _drive(self) -> None:
        """Process lines until the parser finishes or input runs out."""
        scanner = self._scanner

        while not scanner.at_end():
            if scanner.skip_blank_line():
                continue

            indent = scanner.scan_indent()
            boundary = self._tracker.resolve(
                len(indent.text),
                indent,
                scanner.source_line(indent.line),
            )
            for token in boundary:
                if self._deliver(token):
                    return

            while True:
                token = scanner.next_token()
                if token is None:
                    break
                if self._deliver(token):
                    return
                if token.type is TokenType.NEWLINE:
                    break

        self._finalize()

    def _deliver(self, token: Token) -> bool:
        """
        Hand one token to the parser.

        Returns:
            True if the parser accepted the whole input

        Raises:
            ParserError: If the parser rejected the token
        """
        self._token_count += 1
        if self.options.trace_tokens:
            logger.debug(f"deliver {token!r}")
        if self._observer is not None:
            self._observer(token)

        status = self.parser.accept(token.type, token.value)

        if status is ParseStatus.MORE:
            return False
        if status is ParseStatus.ACCEPTED:
            return True
        if status is ParseStatus.REJECTED:
            raise ParserError(
                self.parser.diagnostic or f"unexpected {token.type.name} token",
                token.location(self.options.filename),
                self._scanner.source_line(token.line),
                token=token,
            )
        raise TypeError(f"parser returned {status!r}, expected a ParseStatus")

    # =========================================================================
    # Finalizer
    # =========================================================================

    def _finalize(self) -> None:
        """Close open blocks and signal end of stream."""
        line = self._scanner.line

        for token in self._tracker.flush(line):
            if self._deliver(token):
                return

        if self._deliver(Token(TokenType.EOF, "", line, self._scanner.column)):
            return

        raise ParserError(
            "unexpected end of input",
            SourceLocation(self.options.filename, line, self._scanner.column),
        )

    def _release(self) -> None:
        if self._released:
            return
        self._released = True
        self.parser.release()
        logger.debug("parser released")


# =============================================================================
# Convenience Functions
# =============================================================================

def lex(
    source: str,
    parser: IncrementalParser,
    options: Optional[LexerOptions] = None,
) -> SessionResult:
    """
    Run one session of ``source`` against ``parser``.

    Lexical, indentation and parser errors are reported in the result.
    Misuse still raises: a parser answer that is not a ``ParseStatus``
    raises ``TypeError``, and running a finished session raises
    ``SessionStateError``.
    """
    return LexSession(source, parser, options).run()


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize source text into a list, ending with EOF.

    Args:
        source: Source text
        filename: Source filename for error messages

    Returns:
        Every token in delivery order

    Raises:
        LexError: The first lexical or indentation error

    Example:
        >>> [t.type.name for t in tokenize("42")]
        ['NUMBER', 'EOF']
    """
    tokens: list[Token] = []
    session = LexSession(
        source,
        TokenRecorder(),
        LexerOptions(filename=filename),
        observer=tokens.append,
    )
    session.run().raise_for_status()
    return tokens
