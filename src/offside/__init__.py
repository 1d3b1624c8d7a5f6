"""
offside - Indentation-Aware Lexer
=================================

This package is the lexical front end for a small scripting language whose
blocks are delimited by indentation (the "off-side rule"). It turns source
text into a stream of typed tokens, synthesizes INDENT and DEDENT tokens
from changes in leading whitespace, and pushes each token, one at a time,
into an incremental parser.

Main Components
---------------
- **scanner**: longest-match rule table for keywords, identifiers,
  numbers, operators, comments and line terminators
- **indentation**: the stack of open indentation widths
- **parser**: the push protocol spoken to the incremental parser
- **session**: drives one input through all of the above

Quick Start
-----------
Tokenize a string:
    >>> from offside import tokenize
    >>> [t.type.name for t in tokenize("if x:\\n    y = 1\\n")]
    ['IF', 'IDENTIFIER', 'COLON', 'NEWLINE', 'INDENT', 'IDENTIFIER', 'ASSIGN', 'NUMBER', 'NEWLINE', 'DEDENT', 'EOF']

Drive your own parser:
    >>> from offside import lex, TokenRecorder
    >>> result = lex("x = 1\\n", TokenRecorder())
    >>> result.exit_code
    0

Or use the command-line tool:
    $ offside tokens program.off
    $ offside check program.off
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from offside.errors import (
    OffsideError,
    SourceLocation,
    LexError,
    LexicalError,
    IndentationError as OffsideIndentationError,  # Avoid collision with builtin
    ParserError,
    SessionStateError,
)
from offside.tokens import TokenType, Token, Lexeme, KEYWORDS, OPERATORS
from offside.scanner import Scanner, Rule, RULES
from offside.indentation import IndentationTracker
from offside.parser import IncrementalParser, ParseStatus, TokenRecorder
from offside.session import (
    LexSession,
    LexerOptions,
    SessionResult,
    SessionStatus,
    lex,
    tokenize,
)

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "OffsideError",
    "SourceLocation",
    "LexError",
    "LexicalError",
    "OffsideIndentationError",
    "ParserError",
    "SessionStateError",
    # Tokens
    "TokenType",
    "Token",
    "Lexeme",
    "KEYWORDS",
    "OPERATORS",
    # Scanner
    "Scanner",
    "Rule",
    "RULES",
    # Indentation
    "IndentationTracker",
    # Parser protocol
    "IncrementalParser",
    "ParseStatus",
    "TokenRecorder",
    # Sessions
    "LexSession",
    "LexerOptions",
    "SessionResult",
    "SessionStatus",
    "lex",
    "tokenize",
]
