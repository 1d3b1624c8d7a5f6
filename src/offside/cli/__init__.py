"""
offside Command-Line Interface
==============================

This package provides the ``offside`` command:

- **offside tokens**: print the token stream of a source file
- **offside check**: lex a source file and report success or the first error

The tool is a Click-based application with shared error reporting and
exit codes (see ``offside.cli.errors``).
"""

__all__ = ["main"]
