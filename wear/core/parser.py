"""Recursive-descent parser for WeaR with one token of lookahead.

Grammar, from the lowest to the highest binding expression rule:

```
<program>     ::= <declaration>*
<declaration> ::= ("var" | "const") IDENT ("=" <expression>)?
                | "function" IDENT "(" (IDENT ("," IDENT)*)? ")" <block>
                | <statement>
<statement>   ::= "if" "(" <expression> ")" <block> ("else" (<if> | <block>))?
                | "while" "(" <expression> ")" <block>
                | "return" <expression>?
                | "print" <expression>
                | <block>
                | <expression>
<block>       ::= "{" <declaration>* "}"

<expression>  ::= <assignment>
<assignment>  ::= <or> ("=" <assignment>)?            ; right-associative, target must be an identifier
<or>          ::= <and> ("or" <and>)*
<and>         ::= <equality> ("and" <equality>)*
<equality>    ::= <comparison> (("==" | "!=") <comparison>)*
<comparison>  ::= <term> ((">" | ">=" | "<" | "<=") <term>)*
<term>        ::= <factor> (("+" | "-") <factor>)*
<factor>      ::= <unary> (("*" | "/" | "%") <unary>)*
<unary>       ::= ("!" | "-") <unary> | <call>
<call>        ::= <primary> ("(" <arguments>? ")" | "[" <expression> "]")*
<primary>     ::= NUMBER | STRING | "true" | "false" | "null" | IDENT | "(" <expression> ")"
                | "[" (<expression> ("," <expression>)*)? "]"
```

Syntax errors go to the run's Diagnostics. After one, the parser discards tokens up to the next token that can start a
statement (panic-mode recovery) and carries on, so several independent errors are reported in one pass.
"""

from wear.core import nodes
from wear.core.tokens import STATEMENT_STARTS, TokenType
from wear.lang.error import Diagnostics, WearSyntaxError

EQUALITY = (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
COMPARISON = (TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL)
TERM = (TokenType.PLUS, TokenType.MINUS)
FACTOR = (TokenType.STAR, TokenType.SLASH, TokenType.PERCENT)
UNARY = (TokenType.BANG, TokenType.MINUS)


class Parser:
    """Builds a nodes.Program from a token list produced by the tokenizer."""

    def __init__(self, tokens, diagnostics=None):
        self.tokens = tokens
        self.current = 0
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def parse(self):
        """Parses every declaration up to EOF. Declarations that failed to parse are left out of the program."""
        statements = []
        while not self.at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        return nodes.Program(1, 1, tuple(statements))

    # ---------- declarations ----------

    def declaration(self):
        """Parses one declaration or statement. Returns None (after resynchronizing) if it is not valid."""
        try:
            if self.check(TokenType.VAR) or self.check(TokenType.CONST):
                return self.var_declaration()
            if self.check(TokenType.FUNCTION):
                return self.function_declaration()
            return self.statement()
        except WearSyntaxError:
            self.synchronize()
            return None

    def var_declaration(self):
        is_const = self.check(TokenType.CONST)
        keyword = self.advance()

        name = self.consume(TokenType.IDENTIFIER, "a variable name")
        identifier = nodes.Identifier(name.line, name.column, name.lexeme)

        value = None
        if self.match(TokenType.EQUAL):
            value = self.expression()

        return nodes.VarDeclaration(keyword.line, keyword.column, identifier, value, is_const)

    def function_declaration(self):
        keyword = self.advance()

        name = self.consume(TokenType.IDENTIFIER, "a function name")
        identifier = nodes.Identifier(name.line, name.column, name.lexeme)
        self.consume(TokenType.LEFT_PAREN, "'('")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                param = self.consume(TokenType.IDENTIFIER, "a parameter name")
                params.append(nodes.Identifier(param.line, param.column, param.lexeme))
                if not self.match(TokenType.COMMA):
                    break

        self.consume(TokenType.RIGHT_PAREN, "')'")
        body = self.block_statement()

        return nodes.FunctionDeclaration(keyword.line, keyword.column, identifier, tuple(params), body)

    # ---------- statements ----------

    def statement(self):
        if self.check(TokenType.IF):
            return self.if_statement()
        if self.check(TokenType.WHILE):
            return self.while_statement()
        if self.check(TokenType.RETURN):
            return self.return_statement()
        if self.check(TokenType.PRINT):
            return self.print_statement()
        if self.check(TokenType.LEFT_BRACE):
            return self.block_statement()
        return self.expression_statement()

    def if_statement(self):
        keyword = self.advance()

        self.consume(TokenType.LEFT_PAREN, "'('")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "')'")
        consequent = self.block_statement()

        alternate = None
        if self.match(TokenType.ELSE):
            if self.check(TokenType.IF):
                alternate = self.if_statement()
            else:
                alternate = self.block_statement()

        return nodes.IfStatement(keyword.line, keyword.column, condition, consequent, alternate)

    def while_statement(self):
        keyword = self.advance()

        self.consume(TokenType.LEFT_PAREN, "'('")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "')'")
        body = self.block_statement()

        return nodes.WhileStatement(keyword.line, keyword.column, condition, body)

    def return_statement(self):
        """The returned expression is optional: it is absent if the block or the program ends right after 'return',
        or if the next token starts a new statement.
        """
        keyword = self.advance()

        argument = None
        if not (self.check(TokenType.RIGHT_BRACE) or self.at_end() or self.peek().kind in STATEMENT_STARTS):
            argument = self.expression()

        return nodes.ReturnStatement(keyword.line, keyword.column, argument)

    def print_statement(self):
        keyword = self.advance()
        return nodes.PrintStatement(keyword.line, keyword.column, self.expression())

    def block_statement(self):
        brace = self.consume(TokenType.LEFT_BRACE, "'{'")

        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenType.RIGHT_BRACE, "'}'")
        return nodes.BlockStatement(brace.line, brace.column, tuple(statements))

    def expression_statement(self):
        expr = self.expression()
        return nodes.ExpressionStatement(expr.line, expr.column, expr)

    # ---------- expressions ----------

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logical_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, nodes.Identifier):
                return nodes.AssignmentExpression(expr.line, expr.column, expr, value)

            # recoverable: report, but keep parsing with the left-hand side
            self.diagnostics.report(WearSyntaxError("Invalid assignment target", equals.line, equals.column))

        return expr

    def logical_or(self):
        expr = self.logical_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            expr = nodes.BinaryExpression(operator.line, operator.column, "or", expr, self.logical_and())
        return expr

    def logical_and(self):
        expr = self.equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            expr = nodes.BinaryExpression(operator.line, operator.column, "and", expr, self.equality())
        return expr

    def equality(self):
        return self._binary(self.comparison, EQUALITY)

    def comparison(self):
        return self._binary(self.term, COMPARISON)

    def term(self):
        return self._binary(self.factor, TERM)

    def factor(self):
        return self._binary(self.unary, FACTOR)

    def _binary(self, operand, operators):
        """Parses a left-associative chain of operand separated by any of operators."""
        expr = operand()
        while self.match(*operators):
            operator = self.previous()
            expr = nodes.BinaryExpression(operator.line, operator.column, operator.lexeme, expr, operand())
        return expr

    def unary(self):
        if self.match(*UNARY):
            operator = self.previous()
            return nodes.UnaryExpression(operator.line, operator.column, operator.lexeme, self.unary())
        return self.call()

    def call(self):
        """Parses postfix calls and index accesses, which chain left to right: f()[0](x)."""
        expr = self.primary()

        while True:
            if self.match(TokenType.LEFT_PAREN):
                arguments = self.comma_separated(TokenType.RIGHT_PAREN)
                self.consume(TokenType.RIGHT_PAREN, "')' after arguments")
                expr = nodes.CallExpression(expr.line, expr.column, expr, arguments)
            elif self.match(TokenType.LEFT_BRACKET):
                index = self.expression()
                self.consume(TokenType.RIGHT_BRACKET, "']' after index")
                expr = nodes.IndexExpression(expr.line, expr.column, expr, index)
            else:
                return expr

    def primary(self):
        token = self.peek()

        if self.match(TokenType.FALSE, TokenType.TRUE):
            return nodes.BooleanLiteral(token.line, token.column, token.literal)
        if self.match(TokenType.NULL):
            return nodes.NullLiteral(token.line, token.column)
        if self.match(TokenType.NUMBER):
            return nodes.NumericLiteral(token.line, token.column, token.literal)
        if self.match(TokenType.STRING):
            return nodes.StringLiteral(token.line, token.column, token.literal)
        if self.match(TokenType.IDENTIFIER):
            return nodes.Identifier(token.line, token.column, token.lexeme)

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "')'")
            return expr

        if self.match(TokenType.LEFT_BRACKET):
            elements = self.comma_separated(TokenType.RIGHT_BRACKET)
            self.consume(TokenType.RIGHT_BRACKET, "']' to close array")
            return nodes.ArrayLiteral(token.line, token.column, elements)

        raise self.diagnostics.unexpected_token(token, "an expression")

    def comma_separated(self, closing):
        """Parses zero or more comma-separated expressions, stopping before closing. A trailing comma is an error."""
        items = []
        if not self.check(closing):
            items.append(self.expression())
            while self.match(TokenType.COMMA):
                items.append(self.expression())
        return tuple(items)

    # ---------- panic-mode recovery ----------

    def synchronize(self):
        """Discards tokens until one that can start a statement, or EOF."""
        self.advance()
        while not self.at_end():
            if self.peek().kind in STATEMENT_STARTS:
                return
            self.advance()

    # ---------- helpers ----------

    def match(self, *kinds):
        """Consumes the next token if it is any of kinds."""
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def check(self, kind):
        if self.at_end():
            return False
        return self.peek().kind is kind

    def advance(self):
        if not self.at_end():
            self.current += 1
        return self.previous()

    def at_end(self):
        return self.peek().is_eof

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def consume(self, kind, expected):
        """Consumes the next token, which must be of kind. Otherwise, a syntax error is reported and raised."""
        if self.check(kind):
            return self.advance()
        raise self.diagnostics.unexpected_token(self.peek(), expected)


def parse(tokens, diagnostics=None):
    """Convenience function: parses tokens into a nodes.Program."""
    return Parser(tokens, diagnostics).parse()
