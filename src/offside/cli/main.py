"""
offside - Command-Line Interface
================================

Usage Examples
--------------
Print the token stream:
    $ offside tokens program.off

Hide INDENT/DEDENT/NEWLINE/EOF:
    $ offside tokens --no-structural program.off

Check that a file lexes cleanly:
    $ offside check program.off

Read from stdin, with debug logging:
    $ cat program.off | offside -v check -
"""

import logging
from pathlib import Path

import click

from offside import __version__
from offside.cli.errors import handle_cli_exception
from offside.parser import TokenRecorder
from offside.session import LexerOptions, lex, tokenize


# =============================================================================
# Helpers
# =============================================================================

def read_source(input_file: Path, encoding: str) -> str:
    """
    Read source text without newline translation.

    Line terminators are part of the token stream, so ``\\r\\n`` must reach
    the scanner intact. ``-`` reads standard input.
    """
    with click.open_file(str(input_file), "rb") as stream:
        data = stream.read()
    return data.decode(encoding)


def display_name(input_file: Path) -> str:
    return "<stdin>" if str(input_file) == "-" else str(input_file)


def format_token(token) -> str:
    """Format one token as 'LINE  KIND  'value''."""
    return f"{token.line:>4}  {token.type.name:<10}  {token.value!r}"


INPUT_FILE = click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path),
)

ENCODING = click.option(
    "--encoding",
    default="utf-8",
    show_default=True,
    help="Text encoding of the input file",
)


# =============================================================================
# CLI Definition
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging, tracebacks on internal errors)",
)
@click.version_option(version=__version__, prog_name="offside")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """
    Lex indentation-structured source files.

    \b
    Examples:
        offside tokens program.off          # Print every token
        offside check program.off           # Exit 0 if the file lexes
        offside -v check program.off        # With debug logging
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command()
@INPUT_FILE
@ENCODING
@click.option(
    "--no-structural",
    is_flag=True,
    help="Hide INDENT, DEDENT, NEWLINE and EOF tokens",
)
@click.pass_context
def tokens(ctx: click.Context, input_file: Path, encoding: str, no_structural: bool) -> None:
    """
    Print the token stream of INPUT_FILE, one token per line.

    Nothing is printed if the file has a lexical or indentation error;
    the error goes to stderr instead.
    """
    verbose = ctx.obj["verbose"]
    try:
        source = read_source(input_file, encoding)
        stream = tokenize(source, display_name(input_file))
    except Exception as e:
        handle_cli_exception(e, verbose)

    for token in stream:
        if no_structural and token.is_structural:
            continue
        click.echo(format_token(token))


@main.command()
@INPUT_FILE
@ENCODING
@click.pass_context
def check(ctx: click.Context, input_file: Path, encoding: str) -> None:
    """
    Lex INPUT_FILE and report whether it is well formed.

    Exits with status 0 on success and 1 on the first lexical,
    indentation or parse error.
    """
    verbose = ctx.obj["verbose"]
    name = display_name(input_file)
    try:
        source = read_source(input_file, encoding)
        options = LexerOptions(filename=name, trace_tokens=verbose)
        result = lex(source, TokenRecorder(), options)
    except Exception as e:
        handle_cli_exception(e, verbose)

    if not result.ok:
        handle_cli_exception(result.error, verbose)

    click.echo(f"OK: {name}: {result.token_count} tokens")


if __name__ == "__main__":
    main()
