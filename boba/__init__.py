"""Lexer, parser, type checker and interpreter for the Boba language."""

__version__ = "0.1.0"