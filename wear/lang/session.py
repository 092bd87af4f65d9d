"""Session control for the WeaR language. Runs source text through the whole pipeline (tokenizer, parser,
interpreter), either for a file or for the interactive shell.

Each run gets its own Diagnostics sink. The pipeline stops after the tokenizer or the parser if that stage reported
anything, so the interpreter never sees an invalid program.
"""

import logging
import os
from dataclasses import dataclass, field

from wear.core.interpreter import Interpreter
from wear.core.lexical import Tokenizer
from wear.core.parser import Parser
from wear.lang.config import get_language
from wear.lang.error import ConfigError, Diagnostics

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".wr"


@dataclass
class RunResult:
    """Outcome of one run: printed lines, one formatted block per diagnostic, and whether the run was clean."""
    output: list
    errors: list
    success: bool
    diagnostics: list = field(default_factory=list, repr=False)


class Session:
    """Governs WeaR runs for one language configuration and one output sink."""

    def __init__(self, lang="en", output=print):
        self.config = get_language(lang)
        self.output = output

    @property
    def language_name(self):
        return self.config.name

    def set_language(self, code):
        """Switches to the configuration registered under code. Raises a ConfigError if there is none."""
        self.config = get_language(code)

    def run(self, source):
        """Tokenizes, parses and interprets source. Returns a RunResult."""
        diagnostics = Diagnostics(source)

        tokens = Tokenizer(source, self.config.localizer(), diagnostics).tokenize()
        logger.debug("tokenized %d tokens with language '%s'", len(tokens), self.config.code)
        if diagnostics.has_errors():
            logger.debug("stopping after tokenizer: %d lexical error(s)", len(diagnostics))
            return self._result([], diagnostics)

        program = Parser(tokens, diagnostics).parse()
        logger.debug("parsed %d top-level statement(s)", len(program.statements))
        if diagnostics.has_errors():
            logger.debug("stopping after parser: %d syntax error(s)", len(diagnostics))
            return self._result([], diagnostics)

        output = Interpreter(diagnostics, self.output).interpret(program)
        logger.debug("interpreted program: %d line(s) printed, %d error(s)", len(output), len(diagnostics))
        return self._result(output, diagnostics)

    def parse(self, source):
        """Tokenizes and parses source without running it. Returns (program or None, diagnostics)."""
        diagnostics = Diagnostics(source)

        tokens = Tokenizer(source, self.config.localizer(), diagnostics).tokenize()
        if diagnostics.has_errors():
            return None, diagnostics

        program = Parser(tokens, diagnostics).parse()
        return (None if diagnostics.has_errors() else program), diagnostics

    def run_file(self, path):
        """Reads a .wr source file and runs it."""
        return self.run(read_source(path))

    @staticmethod
    def _result(output, diagnostics):
        return RunResult(output, diagnostics.formatted(), not diagnostics.has_errors(), list(diagnostics))


def read_source(path):
    """Returns the contents of the WeaR source file at path."""
    if not path.endswith(SOURCE_SUFFIX):
        raise ConfigError(f"WeaR source files must end with {SOURCE_SUFFIX}, got '{path}'")
    if not os.path.isfile(path):
        raise ConfigError(f"'{path}' could not be opened")

    try:
        with open(path, "r", encoding="utf-8") as file:
            return file.read()
    except OSError:
        raise ConfigError(f"'{path}' could not be opened")


def run(source, lang="en", output=None):
    """Convenience function: runs source in a new Session. Output is only collected (not printed) unless output is
    given.
    """
    return Session(lang, output).run(source)
