"""Command line entry point that runs Boba source files."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from .errors import BobaError, TypeCheckError
from .interpreter import interpret
from .lexer import tokenize
from .parser import parse
from .type_checker import check_types


def run_program(source: str, out: Optional[TextIO] = None) -> None:
    """Lex, parse, type-check and run ``source``.

    Raises the BobaError subclass of the first stage that fails.
    """
    program = parse(tokenize(source))
    errors = check_types(program)
    if errors:
        raise TypeCheckError(errors[0])
    interpret(program, out)


def _main_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boba",
        description="Boba programming language interpreter",
        epilog="Commands: run <FILE>  Run a Boba program",
    )
    parser.add_argument(
        "file", nargs="?", type=Path, metavar="FILE",
        help="Path to the Boba source file (.bb)",
    )
    return parser


def _run_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="boba run", description="Run a Boba program")
    parser.add_argument(
        "file", type=Path, metavar="FILE", help="Path to the Boba source file (.bb)"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the file named on the command line; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] == "run":
        file_path = _run_parser().parse_args(args[1:]).file
    else:
        file_path = _main_parser().parse_args(args).file
        if file_path is None:
            print("Error: No file specified", file=sys.stderr)
            print("Usage: boba run <FILE> or boba <FILE>", file=sys.stderr)
            return 1

    if not file_path.exists():
        print(f"Error: File '{file_path}' not found", file=sys.stderr)
        return 1

    if file_path.suffix != ".bb":
        print("Warning: File does not have .bb extension", file=sys.stderr)

    try:
        source = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        print(f"Error reading file: {error}", file=sys.stderr)
        return 1

    print(f"Running Boba program: {file_path}")
    try:
        run_program(source, sys.stdout)
    except BobaError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    print("Program executed successfully")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())