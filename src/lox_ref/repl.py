"""Interactive REPL for Lox expressions, powered by prompt_toolkit."""

from __future__ import annotations

import io
import re
import sys
from dataclasses import dataclass, field
from typing import Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .ast import Expr
from .errors import ErrorReporter, EvalNotImplemented
from .lexer import tokenize
from .printer import print_ast
from .repl_highlight import LoxHighlighter
from .runner import report_fatal, run
from .token_types import TT
from .utils import debug_py_trace_enabled, parse_switch, set_debug_py_trace

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/ast": ("Also print the parsed AST of each entry", "[on|off]"),
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL error state", ""),
}

# A line ending in one of these cannot be a complete expression.
_DANGLING = {
    TT.MINUS, TT.PLUS, TT.SLASH, TT.STAR, TT.BANG, TT.BANG_EQUAL,
    TT.EQUAL_EQUAL, TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL,
    TT.COMMA, TT.QUESTION, TT.COLON,
}


@dataclass
class ReplState:
    reporter: ErrorReporter = field(default_factory=ErrorReporter)
    show_ast: bool = False


def needs_continuation(text: str) -> bool:
    """Return True if *text* has unclosed parens or ends on an operator."""
    if text.lstrip().startswith("/"):
        return False

    # Scan errors are reported for real on submit.
    tokens = tokenize(text, ErrorReporter(stream=io.StringIO()))

    depth = 0
    last = None

    for tok in tokens:
        if tok.type == TT.EOF:
            break
        if tok.type == TT.LEFT_PAREN:
            depth += 1
        elif tok.type == TT.RIGHT_PAREN:
            depth = max(depth - 1, 0)
        last = tok.type

    return depth > 0 or last in _DANGLING


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        try:
            switch = parse_switch(arg)
        except ValueError:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        set_debug_py_trace(not debug_py_trace_enabled() if switch is None else switch)
        print(f"Python traceback: {'on' if debug_py_trace_enabled() else 'off'}")
        return True

    if cmd == "/ast":
        try:
            switch = parse_switch(arg)
        except ValueError:
            print("Usage: /ast [on|off]", file=sys.stderr)
            return True

        state.show_ast = not state.show_ast if switch is None else switch
        print(f"AST echo: {'on' if state.show_ast else 'off'}")
        return True

    if cmd == "/reset":
        state.reporter.reset()
        print("Error state reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, state: ReplState, emit: Callable[[str], None] = print) -> None:
    """Run one submitted entry; errors never end the session."""
    # Error flags are per entry
    state.reporter.reset()

    echo = _echo_ast if state.show_ast else None

    try:
        run(text, state.reporter, emit, on_tree=echo)
    except (EvalNotImplemented, RecursionError) as exc:
        report_fatal(exc)


def _echo_ast(tree: Expr) -> None:
    print(print_ast(tree), file=sys.stderr)


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    state = ReplState()

    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer

        if needs_continuation(buf.text):
            buf.insert_text("\n")
            return

        buf.validate_and_handle()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=LoxHighlighter(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("lox repl (Ctrl-D to exit, / for commands)")

    while True:
        try:
            text = session.prompt("> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, state):
            continue

        eval_line(text, state)
