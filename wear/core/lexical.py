"""Lexical analysis for WeaR: turns source text into a list of positioned tokens.

Keywords are not fixed: identifiers are looked up in a KeywordLocalizer built from the active language configuration,
and a match produces the canonical keyword token. Lexical errors (unexpected characters, unterminated strings) are
reported to the run's Diagnostics and scanning continues, so one pass can surface several problems.
"""

from wear.core.tokens import Token, TokenType
from wear.lang.error import Diagnostics, LexicalError

SINGLE_CHAR_TOKENS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    ":": TokenType.COLON,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "%": TokenType.PERCENT,
}

# char: (kind if followed by '=', kind otherwise)
EQUAL_SUFFIX_TOKENS = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}

KEYWORD_LITERALS = {
    TokenType.TRUE: True,
    TokenType.FALSE: False,
    TokenType.NULL: None,
}

WHITESPACE = " \r\t"


def is_digit(char):
    return "0" <= char <= "9"


def is_alpha(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_alphanumeric(char):
    return is_alpha(char) or is_digit(char)


class Tokenizer:
    """Single-pass scanner over one source text."""

    def __init__(self, source, localizer, diagnostics=None):
        self.source = source
        self.localizer = localizer
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(source)

        self.tokens = []
        self.start = 0       # index of the first character of the token being scanned
        self.current = 0     # index of the next character to read
        self.line = 1
        self.line_start = 0  # index of the first character of the current line

        # position of the token being scanned (a string may end on a later line than it starts)
        self.start_line = 1
        self.start_column = 1

    def tokenize(self):
        """Scans the whole source. Returns the token list, which always ends with exactly one EOF token."""
        while not self.at_end():
            self.start = self.current
            self.start_line, self.start_column = self.line, self.column_of(self.current)
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.column_of(self.current)))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[char])
        elif char in EQUAL_SUFFIX_TOKENS:
            with_equal, without = EQUAL_SUFFIX_TOKENS[char]
            self.add_token(with_equal if self.match("=") else without)
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.at_end():  # comment runs to end of line
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
        elif char in WHITESPACE:
            pass
        elif char == "\n":
            self.newline()
        elif char == "\"":
            self.scan_string()
        elif is_digit(char):
            self.scan_number()
        elif is_alpha(char):
            self.scan_identifier()
        else:
            error = LexicalError(f"Unexpected character: '{char}'", self.start_line, self.start_column)
            self.diagnostics.report(error)

    def scan_string(self):
        """Scans a string literal. There are no escape sequences, and strings may span lines."""
        while self.peek() != "\"" and not self.at_end():
            if self.advance() == "\n":
                self.newline()

        if self.at_end():
            error = LexicalError("Unterminated string", self.start_line, self.start_column,
                                 expected="a closing \"", found="end of file")
            self.diagnostics.report(error)
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def scan_number(self):
        """Scans digits, optionally followed by '.' and more digits. A '.' without a digit after it is left alone."""
        while is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def scan_identifier(self):
        while is_alphanumeric(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        kind = self.localizer.token_kind(text)
        if kind is None:
            self.add_token(TokenType.IDENTIFIER)
        else:
            self.add_token(kind, KEYWORD_LITERALS.get(kind))

    # ---------- helpers ----------

    def at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def peek(self):
        if self.at_end():
            return "\0"
        return self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def match(self, expected):
        """Consumes the next character if it is expected."""
        if self.peek() != expected or self.at_end():
            return False
        self.current += 1
        return True

    def newline(self):
        """Called after consuming a newline character."""
        self.line += 1
        self.line_start = self.current

    def column_of(self, position):
        return position - self.line_start + 1

    def add_token(self, kind, literal=None):
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(kind, lexeme, literal, self.start_line, self.start_column))


def tokenize(source, config, diagnostics=None):
    """Convenience function: tokenizes source with the keywords of config (a LanguageConfig)."""
    return Tokenizer(source, config.localizer(), diagnostics).tokenize()
