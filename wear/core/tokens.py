"""Token vocabulary shared by the tokenizer and the parser."""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class TokenType(Enum):
    """Every kind of token the tokenizer can produce. Keyword kinds are canonical: the spelling that produced them
    depends on the language configuration.
    """
    # literals
    NUMBER = "NUMBER"
    STRING = "STRING"
    IDENTIFIER = "IDENTIFIER"

    # keywords
    VAR = "VAR"
    CONST = "CONST"
    FUNCTION = "FUNCTION"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"
    PRINT = "PRINT"
    TRUE = "TRUE"
    FALSE = "FALSE"
    NULL = "NULL"
    WHILE = "WHILE"
    FOR = "FOR"
    AND = "AND"
    OR = "OR"

    # operators
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    EQUAL = "="
    EQUAL_EQUAL = "=="
    BANG = "!"
    BANG_EQUAL = "!="
    LESS = "<"
    LESS_EQUAL = "<="
    GREATER = ">"
    GREATER_EQUAL = ">="

    # delimiters
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    LEFT_BRACKET = "["
    RIGHT_BRACKET = "]"
    COMMA = ","
    DOT = "."
    COLON = ":"

    EOF = "EOF"


# canonical keyword key (as used in language configurations) -> token kind
KEYWORD_TOKENS = {
    "var": TokenType.VAR,
    "const": TokenType.CONST,
    "function": TokenType.FUNCTION,
    "return": TokenType.RETURN,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,
}

# tokens that can begin a statement; the parser resynchronizes on these after a syntax error
STATEMENT_STARTS = frozenset({
    TokenType.FUNCTION, TokenType.VAR, TokenType.CONST, TokenType.IF, TokenType.WHILE, TokenType.FOR,
    TokenType.RETURN, TokenType.PRINT,
})


@dataclass(frozen=True)
class Token:
    kind: TokenType
    lexeme: str
    literal: Union[float, str, bool, None]
    line: int
    column: int

    @property
    def is_eof(self):
        return self.kind is TokenType.EOF

    def __repr__(self):
        if self.literal is not None:
            return f"{self.kind.name}({self.literal!r})@{self.line}:{self.column}"
        return f"{self.kind.name}@{self.line}:{self.column}"
