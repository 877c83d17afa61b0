"""Error kinds reported by the Boba toolchain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional


class BobaError(Exception):
    """Base of every error the language reports."""

    label: ClassVar[str] = "Error"

    def __init__(self, message: object) -> None:
        self.message = str(message)
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"


class LexerError(BobaError):
    label = "Lexer error"


class ParserError(BobaError):
    label = "Parser error"


class TypeCheckError(BobaError):
    label = "Type error"


class BobaRuntimeError(BobaError):
    label = "Runtime error"


class BobaIOError(BobaError):
    label = "IO error"


@dataclass
class SourceLocation:
    """A line and column, optionally within a named file."""

    line: int
    column: int
    file: Optional[str] = None

    def __str__(self) -> str:
        if self.file is not None:
            return f"{self.file}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


class ErrorWithLocation(Exception):
    """An error tied to the place in the source where it occurred."""

    def __init__(self, error: BobaError, location: SourceLocation) -> None:
        self.error = error
        self.location = location
        super().__init__(error, location)

    def __str__(self) -> str:
        return f"{self.error} at {self.location}"