from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, List, Optional, TextIO

from plume.tokens import Token, TokenType


@dataclass(frozen=True)
class Diagnostic:
    """A single scanner or parser complaint."""
    line: int
    where: str
    message: str

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


class ErrorReporter:
    """Collects diagnostics and echoes each one to a text stream (stderr by default)."""
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.diagnostics: List[Diagnostic] = []

    @property
    def had_error(self) -> bool:
        return bool(self.diagnostics)

    def report(self, line: int, where: str, message: str) -> Diagnostic:
        diagnostic = Diagnostic(line, where, message)
        self.diagnostics.append(diagnostic)
        print(str(diagnostic), file=self.stream or sys.stderr)
        return diagnostic

    def error(self, line: int, message: str) -> Diagnostic:
        return self.report(line, '', message)

    def token_error(self, token: Token, message: str) -> Diagnostic:
        if token.kind is TokenType.EOF:
            return self.report(token.line, ' at end', message)
        return self.report(token.line, f" at '{token.lexeme}'", message)

    def reset(self) -> None:
        """Forget earlier diagnostics so the reporter can serve another input."""
        self.diagnostics.clear()


class PlumeError(Exception):
    """Base class for errors surfaced to the embedding driver."""


class PlumeRuntimeError(PlumeError):
    """Exception type used to propagate Plume runtime errors."""
    def __init__(self, token: Optional[Token], message: str):
        super().__init__(message)
        self.token = token
        self.message = message

    def __str__(self) -> str:
        if self.token is None:
            return f"Runtime error: {self.message}"
        return f"[line {self.token.line}] Runtime error: {self.message}"


class PlumeSyntaxError(PlumeError):
    """Raised by convenience entry points when scanning or parsing reported errors."""
    def __init__(self, diagnostics: List[Diagnostic]):
        super().__init__('\n'.join(str(d) for d in diagnostics))
        self.diagnostics = list(diagnostics)


class ParseError(Exception):
    """Internal exception used to unwind the parser to a synchronization point."""


class ReturnSignal:
    """Carries a `return` value up to the enclosing call boundary.

    Statement execution returns it as a result rather than raising it; only
    a call boundary consumes it.
    """
    __slots__ = ('keyword', 'value')

    def __init__(self, keyword: Optional[Token], value: Any):
        self.keyword = keyword
        self.value = value
