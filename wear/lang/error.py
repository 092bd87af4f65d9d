"""Error handling for the WeaR language.

Every error the pipeline produces on purpose is a WearError. Lexical and syntax errors are collected into a
Diagnostics sink (one per run) so that a single pass can surface several problems; a runtime error stops the run and is
recorded as exactly one diagnostic. If any other exception makes it all the way to ErrorHandler, it is assumed to be an
internal issue.
"""

import sys
from dataclasses import dataclass
from typing import Optional

from termcolor import colored


class WearError(Exception):
    """Base class for all WeaR errors. Carries the raw message and the 1-based position it is anchored at (0 when the
    position is not known yet).
    """
    kind = "error"

    def __init__(self, msg, line=0, column=0, expected=None, found=None):
        super().__init__(msg)
        self.msg = msg
        self.line = line
        self.column = column
        self.expected = expected  # what the parser/tokenizer was looking for, if anything
        self.found = found        # what it got instead

    def locate(self, node):
        """Anchors this error at node's position unless it is already anchored. Returns self so callers can re-raise
        the result directly.
        """
        if not self.line:
            self.line = node.line
            self.column = node.column
        return self

    def __str__(self):
        return self.msg


class LexicalError(WearError):
    """Unexpected character or unterminated string."""
    kind = "lexical"


class WearSyntaxError(WearError):
    """Unexpected token or invalid assignment target."""
    kind = "syntax"


class WearRuntimeError(WearError):
    """Any failure while evaluating a program. Fatal to the current run."""
    kind = "runtime"


class ConfigError(WearError):
    """Unknown language code or malformed language configuration. Raised to the caller, never collected."""
    kind = "config"


@dataclass(frozen=True)
class Diagnostic:
    """One collected error, ready to be displayed."""
    kind: str
    message: str
    line: int
    column: int
    expected: Optional[str] = None
    found: Optional[str] = None
    snippet: Optional[str] = None

    @property
    def is_runtime(self):
        return self.kind == WearRuntimeError.kind

    @property
    def friendly_message(self):
        """Human-readable block: a framed message followed by the source snippet, if there is one."""
        return self.render()

    def render(self, color=False):
        """Formats this diagnostic. If color, the header and caret are highlighted with termcolor."""
        paint = _paint if color else _plain

        if self.is_runtime:
            header = f"Runtime error on line {self.line}"
            if self.column > 0:
                header += f", column {self.column}"
            return paint(header + ":", attrs=["bold"]) + f"\n   {self.message}\n"

        header = f"I found an error on line {self.line}"
        if self.column > 0:
            header += f", column {self.column}"
        result = paint(header + ".", attrs=["bold"]) + "\n"

        if self.expected and self.found:
            result += f"   I was expecting {self.expected}, but found '{paint(self.found, attrs=['bold'])}' instead.\n"
        elif self.expected:
            result += f"   I was expecting {self.expected}.\n"
        else:
            result += f"   {self.message}\n"

        if self.snippet and self.column > 0:
            source, __, caret = self.snippet.rstrip("\n").rpartition("\n")
            result += source + "\n" + paint(caret, ErrorHandler.ERROR, attrs=["bold"]) + "\n"
        elif self.snippet:
            result += self.snippet
        return result

    def __str__(self):
        return self.render()


def _plain(text, color=None, attrs=None):
    return text


def _paint(text, color=None, attrs=None):
    return colored(text, color, attrs=attrs)


class Diagnostics:
    """Accumulates the diagnostics of one run. Threaded through the tokenizer, parser and interpreter so that
    independent runs never share mutable state.
    """

    def __init__(self, source=""):
        self.records = []
        self.source_lines = []
        self.set_source(source)

    def set_source(self, source):
        """Sets the source code used for snippet extraction."""
        self.source_lines = source.split("\n")

    def snippet(self, line, column):
        """Returns the source line at line rendered with a line-number gutter, plus a caret marker if column is
        known. Returns None if line is outside the source.
        """
        if not 0 < line <= len(self.source_lines):
            return None

        gutter = f"   {line} | "
        result = f"\n{gutter}{self.source_lines[line - 1]}\n"
        if column > 0:
            result += " " * (len(gutter) + column - 1) + "^\n"
        return result

    def report(self, error):
        """Records error (a WearError) and returns it, so that callers which need to unwind can raise it."""
        snippet = None
        if not isinstance(error, WearRuntimeError):
            snippet = self.snippet(error.line, error.column)

        self.records.append(Diagnostic(error.kind, error.msg, error.line, error.column, error.expected, error.found,
                                       snippet))
        return error

    def unexpected_token(self, token, expected):
        """Records a syntax error for token, which is not what expected describes. Returns the error."""
        found = "end of file" if token.is_eof else token.lexeme
        error = WearSyntaxError(f"Unexpected token: {token.lexeme}", token.line, token.column, expected, found)
        return self.report(error)

    def has_errors(self):
        return bool(self.records)

    def formatted(self):
        """Returns every diagnostic formatted for display, in the order they were reported."""
        return [record.friendly_message for record in self.records]

    def clear(self):
        self.records = []

    def __iter__(self):
        return iter(self.records)

    def __len__(self):
        return len(self.records)


class ErrorHandler:
    """Context manager that displays WeaR diagnostics/errors and keeps Python tracebacks away from the user."""
    ERROR = "red"

    def __init__(self, fatal=True, color=True, stream=None):
        self.fatal = fatal
        self.color = color
        self.stream = stream if stream is not None else sys.stdout

    def _print(self, text):
        print(text, file=self.stream)

    def display(self, diagnostics, path=None):
        """Prints every diagnostic in diagnostics, prefixed with a bold red 'error:' tag."""
        paint = _paint if self.color else _plain
        location = f"{path}:" if path else ""

        for record in diagnostics:
            tag = paint(f"{location}{record.line}:{record.column}: ", attrs=["bold"])
            tag += paint(f"{record.kind} error: ", ErrorHandler.ERROR, attrs=["bold"])
            self._print(tag + record.message)
            self._print(record.render(color=self.color))

    def throw(self, error, internal=False):
        """Displays error, which did not go through a Diagnostics sink (a ConfigError or an internal failure). Exits if
        this handler is fatal.
        """
        paint = _paint if self.color else _plain

        error_msg = ""
        if internal:
            error_msg += paint("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += paint("error: ", ErrorHandler.ERROR, attrs=["bold"]) + str(error)
        self._print(error_msg)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(WearError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is not None and issubclass(exc_type, WearError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(WearError(f"unknown error: '{exc_type.__name__}: {exc_val}'"), internal=True)
            do_exit = True

        return not do_exit
