# =============================================================================
# test_session.py - Lexing Session Tests
# =============================================================================
# End-to-end tests for the token driver and finalizer: full token streams,
# block structure, the parser push protocol, error propagation and parser
# release on every exit path.
# =============================================================================

import logging

import pytest

from offside import OffsideIndentationError, tokenize, lex
from offside.errors import LexicalError, ParserError, SessionStateError
from offside.parser import IncrementalParser, ParseStatus, TokenRecorder
from offside.session import LexerOptions, LexSession, SessionStatus
from offside.tokens import Token, TokenType

T = TokenType


# =============================================================================
# Helpers
# =============================================================================

def kinds(source: str) -> list:
    """Token types of the full stream, EOF included."""
    return [token.type for token in tokenize(source, "<test>")]


class ScriptedParser(IncrementalParser):
    """
    Parser that answers MORE until it sees a chosen token kind.

    Counts release() calls so tests can check it happens exactly once.
    """

    def __init__(self, stop_on=None, answer=ParseStatus.REJECTED, diagnostic=None):
        self.stop_on = stop_on
        self.answer = answer
        self.diagnostic = diagnostic
        self.seen = []
        self.release_count = 0

    def accept(self, kind, value):
        self.seen.append(kind)
        if kind is self.stop_on:
            return self.answer
        return ParseStatus.MORE

    def release(self):
        self.release_count += 1


IF_ELSE = "if x:\n    y = 1\nelse:\n    y = 2\n"


# =============================================================================
# Token Stream Tests
# =============================================================================

class TestTokenStreams:
    """Complete streams for representative inputs."""

    def test_if_else(self):
        assert kinds(IF_ELSE) == [
            T.IF, T.IDENTIFIER, T.COLON, T.NEWLINE,
            T.INDENT, T.IDENTIFIER, T.ASSIGN, T.NUMBER, T.NEWLINE,
            T.DEDENT, T.ELSE, T.COLON, T.NEWLINE,
            T.INDENT, T.IDENTIFIER, T.ASSIGN, T.NUMBER, T.NEWLINE,
            T.DEDENT, T.EOF,
        ]

    def test_single_literals(self):
        float_tokens = tokenize("3.14")
        assert [(t.type, t.value) for t in float_tokens] == [(T.FLOAT, "3.14"), (T.EOF, "")]
        number_tokens = tokenize("42")
        assert [(t.type, t.value) for t in number_tokens] == [(T.NUMBER, "42"), (T.EOF, "")]

    def test_empty_input(self):
        assert kinds("") == [T.EOF]

    def test_only_comments_and_blank_lines(self):
        assert kinds("# header\n\n   \n\t# indented comment\n") == [T.EOF]

    def test_comments_containing_carriage_return(self):
        assert kinds("# a\rb\nx\n") == [T.IDENTIFIER, T.NEWLINE, T.EOF]
        assert kinds("x # a\rb\n") == [T.IDENTIFIER, T.NEWLINE, T.EOF]

    def test_last_line_without_terminator(self):
        assert kinds("x = 1") == [T.IDENTIFIER, T.ASSIGN, T.NUMBER, T.EOF]

    def test_function_definition(self):
        source = (
            "def f(a, b):\n"
            "    if a:\n"
            "        return b\n"
            "    return 0\n"
        )
        assert kinds(source) == [
            T.DEF, T.IDENTIFIER, T.LPAREN, T.IDENTIFIER, T.COMMA, T.IDENTIFIER,
            T.RPAREN, T.COLON, T.NEWLINE,
            T.INDENT, T.IF, T.IDENTIFIER, T.COLON, T.NEWLINE,
            T.INDENT, T.RETURN, T.IDENTIFIER, T.NEWLINE,
            T.DEDENT, T.RETURN, T.NUMBER, T.NEWLINE,
            T.DEDENT, T.EOF,
        ]

    def test_while_loop_with_condition(self):
        source = "while not done and n <= 10:\n    n = n + 1\n    break\n"
        assert kinds(source) == [
            T.WHILE, T.NOT, T.IDENTIFIER, T.AND, T.IDENTIFIER, T.LE, T.NUMBER,
            T.COLON, T.NEWLINE,
            T.INDENT, T.IDENTIFIER, T.ASSIGN, T.IDENTIFIER, T.PLUS, T.NUMBER, T.NEWLINE,
            T.BREAK, T.NEWLINE,
            T.DEDENT, T.EOF,
        ]

    def test_token_lines(self):
        tokens = tokenize(IF_ELSE)
        else_token = next(t for t in tokens if t.type is T.ELSE)
        assert else_token.line == 3
        dedent = next(t for t in tokens if t.type is T.DEDENT)
        assert dedent.line == 3


# =============================================================================
# Indentation Property Tests
# =============================================================================

class TestIndentationProperties:
    """Block structure inferred from leading whitespace."""

    def test_flat_input_has_no_blocks(self):
        """Without leading whitespace there is one NEWLINE per logical line."""
        source = "x = 1\ny = 2\n\n# comment\nz = x + y\n"
        stream = kinds(source)
        assert T.INDENT not in stream
        assert T.DEDENT not in stream
        assert stream.count(T.NEWLINE) == 3

    def test_indents_and_dedents_balance(self):
        source = (
            "if a:\n"
            "    if b:\n"
            "        if c:\n"
            "            x = 1\n"
            "    y = 2\n"
            "z = 3\n"
            "while z:\n"
            "  z = z - 1\n"
        )
        stream = kinds(source)
        assert stream.count(T.INDENT) == 4
        assert stream.count(T.DEDENT) == 4

    def test_final_dedents_follow_last_token_directly(self):
        """End-of-input DEDENTs are not preceded by a synthesized NEWLINE."""
        stream = kinds("if x:\n    if y:\n        z = 1")
        assert stream[-4:] == [T.NUMBER, T.DEDENT, T.DEDENT, T.EOF]

    def test_blank_and_comment_lines_do_not_dedent(self):
        source = (
            "if x:\n"
            "    a = 1\n"
            "\n"
            "# flush-left comment\n"
            "        # deeper comment\n"
            "  \n"
            "    b = 2\n"
        )
        stream = kinds(source)
        assert stream.count(T.INDENT) == 1
        assert stream.count(T.DEDENT) == 1
        assert stream.count(T.NEWLINE) == 3

    def test_tab_indentation(self):
        tokens = tokenize("if x:\n\ty = 1\n")
        indent = next(t for t in tokens if t.type is T.INDENT)
        assert indent.value == "\t"

    def test_widths_are_raw_character_counts(self):
        """A tab plus a space and two spaces are the same level."""
        stream = kinds("if x:\n\t y = 1\n  z = 2\n")
        assert stream.count(T.INDENT) == 1
        assert stream.count(T.DEDENT) == 1

    def test_crlf_and_lf_agree(self):
        assert kinds(IF_ELSE) == kinds(IF_ELSE.replace("\n", "\r\n"))

    def test_deterministic(self):
        """Fresh sessions over the same input give identical streams."""
        assert tokenize(IF_ELSE) == tokenize(IF_ELSE)


# =============================================================================
# Error Propagation Tests
# =============================================================================

class TestErrors:
    """Fatal errors end the session."""

    def test_indentation_error(self):
        recorder = TokenRecorder()
        result = lex("if x:\n    y = 1\n  z = 2\n", recorder)

        assert result.status is SessionStatus.INDENTATION_ERROR
        assert result.exit_code != 0
        assert isinstance(result.error, OffsideIndentationError)
        assert result.error.line == 3
        # Nothing from line 3 reached the parser, not even a DEDENT
        assert recorder.kinds == [
            T.IF, T.IDENTIFIER, T.COLON, T.NEWLINE,
            T.INDENT, T.IDENTIFIER, T.ASSIGN, T.NUMBER, T.NEWLINE,
        ]
        assert result.token_count == 9
        assert recorder.released

    def test_lexical_error_halts_immediately(self):
        recorder = TokenRecorder()
        result = lex("x = 1\ny = @\nz = 3\n", recorder)

        assert result.status is SessionStatus.LEXICAL_ERROR
        assert result.exit_code == 1
        assert result.error.line == 2
        assert recorder.kinds[-1] is T.ASSIGN
        assert T.EOF not in recorder.kinds
        assert recorder.released

    def test_tokenize_raises(self):
        with pytest.raises(LexicalError):
            tokenize("a @ b")
        with pytest.raises(OffsideIndentationError):
            tokenize("if x:\n    y\n z\n")

    def test_raise_for_status(self):
        result = lex("$", TokenRecorder())
        with pytest.raises(LexicalError):
            result.raise_for_status()
        lex("x\n", TokenRecorder()).raise_for_status()

    def test_filename_in_diagnostic(self):
        result = lex("\n\n  @", TokenRecorder(), LexerOptions(filename="demo.off"))
        assert str(result.error).startswith("demo.off:3:3: error: lexical error:")


# =============================================================================
# Parser Protocol Tests
# =============================================================================

class TestParserProtocol:
    """How the driver reacts to each parser answer."""

    def test_rejection_forwards_diagnostic(self):
        parser = ScriptedParser(stop_on=T.ELSE, diagnostic="else without if")
        result = lex(IF_ELSE, parser)

        assert result.status is SessionStatus.PARSER_ERROR
        assert isinstance(result.error, ParserError)
        assert result.error.diagnostic == "else without if"
        assert result.error.line == 3
        assert result.error.token.type is T.ELSE
        assert "parse error: else without if" in str(result.error)
        assert parser.release_count == 1

    def test_rejected_token_is_attached_to_error(self):
        """The error carries the full rejected Token, matching its location."""
        parser = ScriptedParser(stop_on=T.ELSE)
        result = lex(IF_ELSE, parser, LexerOptions(filename="prog.off"))

        token = result.error.token
        assert isinstance(token, Token)
        assert (token.value, token.line, token.column) == ("else", 3, 1)
        assert str(result.error.location) == "prog.off:3:1"

    def test_rejection_without_diagnostic(self):
        parser = ScriptedParser(stop_on=T.COLON)
        result = lex("if x:\n", parser)
        assert result.error.diagnostic == "unexpected COLON token"

    def test_rejection_stops_delivery(self):
        parser = ScriptedParser(stop_on=T.NEWLINE)
        lex(IF_ELSE, parser)
        assert parser.seen == [T.IF, T.IDENTIFIER, T.COLON, T.NEWLINE]

    def test_early_acceptance_leaves_input_unread(self):
        """Once the parser accepts, later bad input is never scanned."""
        parser = ScriptedParser(stop_on=T.NEWLINE, answer=ParseStatus.ACCEPTED)
        result = lex("x = 1\n@@@\n", parser)

        assert result.ok
        assert result.exit_code == 0
        assert result.token_count == 4
        assert parser.release_count == 1

    def test_acceptance_on_final_dedent(self):
        parser = ScriptedParser(stop_on=T.DEDENT, answer=ParseStatus.ACCEPTED)
        result = lex("if x:\n    y = 1", parser)
        assert result.ok
        assert T.EOF not in parser.seen

    def test_parser_wanting_more_at_end_of_stream(self):
        parser = ScriptedParser()
        result = lex("x = 1\n", parser)

        assert result.status is SessionStatus.PARSER_ERROR
        assert result.error.diagnostic == "unexpected end of input"
        assert parser.seen[-1] is T.EOF
        assert parser.release_count == 1

    def test_release_once_on_every_path(self):
        sources = {
            "accepted": "x = 1\n",
            "lexical": "x = @\n",
            "indentation": "if x:\n    y\n  z\n",
        }
        for name, source in sources.items():
            parser = ScriptedParser(stop_on=T.EOF, answer=ParseStatus.ACCEPTED)
            lex(source, parser)
            assert parser.release_count == 1, name

    def test_invalid_answer_is_a_type_error(self):
        class BrokenParser(ScriptedParser):
            def accept(self, kind, value):
                return "yes"

        parser = BrokenParser()
        with pytest.raises(TypeError):
            lex("x\n", parser)
        assert parser.release_count == 1

    def test_token_pairs_match_stream(self):
        recorder = TokenRecorder()
        lex(IF_ELSE, recorder)
        assert recorder.tokens == [tuple(token) for token in tokenize(IF_ELSE)]


# =============================================================================
# Session Lifecycle Tests
# =============================================================================

class TestSessionLifecycle:
    """Sessions are single-use and independent."""

    def test_run_twice_is_refused(self):
        session = LexSession("x\n", TokenRecorder())
        assert session.run().ok
        with pytest.raises(SessionStateError):
            session.run()

    def test_source_errors_are_returned_but_misuse_raises(self):
        """Bad input ends up in the result; reusing a session still raises."""
        session = LexSession("x = @\n", TokenRecorder())
        result = session.run()
        assert result.status is SessionStatus.LEXICAL_ERROR
        assert isinstance(result.error, LexicalError)
        with pytest.raises(SessionStateError):
            session.run()

    def test_observer_sees_every_delivered_token(self):
        seen = []
        recorder = TokenRecorder()
        LexSession(IF_ELSE, recorder, observer=seen.append).run()
        assert [tuple(token) for token in seen] == recorder.tokens

    def test_independent_sessions(self):
        """Two sessions interleaved do not share indentation state."""
        first = LexSession("if a:\n    b\n", TokenRecorder())
        second = LexSession("c\n", TokenRecorder())
        assert second.run().token_count == 3
        assert first.run().token_count == 9

    def test_trace_logging(self, caplog):
        caplog.set_level(logging.DEBUG, logger="offside.session")
        lex("x\n", TokenRecorder(), LexerOptions(trace_tokens=True))
        assert "deliver Token(IDENTIFIER, 'x', 1:1)" in caplog.text
