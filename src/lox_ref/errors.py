from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .token_types import TT, Token

# ---------- Error types ----------

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Token] = None):
        self.message = message
        self.token = token
        super().__init__(
            f"{message} at line {token.line}" if token else message
        )

class LoxRuntimeError(Exception):
    """Evaluation-time type error raised at the offending operator."""
    def __init__(self, token: Token, message: str):
        self.token = token
        self.message = message
        super().__init__(message)

class EvalNotImplemented(NotImplementedError):
    """Evaluation reached an expression variant the core does not run."""
    def __init__(self, variant: str):
        self.variant = variant
        super().__init__(f"Evaluation of {variant} expressions is not implemented.")

# ---------- Error sink ----------

class ErrorReporter:
    """Collects diagnostics for one run and tracks the had-error flags.

    One instance is scoped to a single run (or one REPL session, reset between
    lines); nothing here is process-wide.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.errors: List[str] = []
        self.had_error = False
        self.had_runtime_error = False

    def error(self, line: int, message: str) -> None:
        self.report(line, "", message)

    def token_error(self, token: Token, message: str) -> None:
        if token.type == TT.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def report(self, line: int, where: str, message: str) -> None:
        self._emit(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def runtime_error(self, err: LoxRuntimeError) -> None:
        self._emit(f"{err.message}\n[line {err.token.line}]")
        self.had_runtime_error = True

    def reset(self) -> None:
        self.errors.clear()
        self.had_error = False
        self.had_runtime_error = False

    def _emit(self, text: str) -> None:
        self.errors.append(text)
        print(text, file=self.stream if self.stream is not None else sys.stderr)
