import unittest

from wear.core import nodes
from wear.core.lexical import tokenize
from wear.core.parser import parse
from wear.lang.config import ENGLISH, INDONESIAN
from wear.lang.error import Diagnostics

# positions are ignored when nodes are compared, so expected trees are built at (0, 0)
P = (0, 0)


def num(value):
    return nodes.NumericLiteral(*P, float(value))


def ident(name):
    return nodes.Identifier(*P, name)


def binary(operator, left, right):
    return nodes.BinaryExpression(*P, operator, left, right)


def expr_stmt(expr):
    return nodes.ExpressionStatement(*P, expr)


def block(*statements):
    return nodes.BlockStatement(*P, statements)


def parse_source(source, config=ENGLISH):
    diagnostics = Diagnostics(source)
    program = parse(tokenize(source, config, diagnostics), diagnostics)
    return program, diagnostics


class ParserTestCase(unittest.TestCase):

    def assertParses(self, source, *statements):
        program, diagnostics = parse_source(source)
        self.assertEqual(diagnostics.formatted(), [], source)
        self.assertEqual(program, nodes.Program(*P, statements), source)

    def test_precedence(self):
        should_pass = {
            "1 + 2 * 3": binary("+", num(1), binary("*", num(2), num(3))),
            "(1 + 2) * 3": binary("*", binary("+", num(1), num(2)), num(3)),
            "1 - 2 - 3": binary("-", binary("-", num(1), num(2)), num(3)),
            "a or b and c": binary("or", ident("a"), binary("and", ident("b"), ident("c"))),
            "1 < 2 == true": binary("==", binary("<", num(1), num(2)), nodes.BooleanLiteral(*P, True)),
            "-a % 2": binary("%", nodes.UnaryExpression(*P, "-", ident("a")), num(2)),
            "!!x": nodes.UnaryExpression(*P, "!", nodes.UnaryExpression(*P, "!", ident("x"))),
        }
        for source, result in should_pass.items():
            self.assertParses(source, expr_stmt(result))

    def test_assignment(self):
        # right-associative
        inner = nodes.AssignmentExpression(*P, ident("b"), num(1))
        self.assertParses("a = b = 1", expr_stmt(nodes.AssignmentExpression(*P, ident("a"), inner)))

    def test_invalid_assignment_target(self):
        program, diagnostics = parse_source("1 = 2\nprint 3")

        # reported, but parsing carries on with the left-hand side
        self.assertEqual([record.message for record in diagnostics], ["Invalid assignment target"])
        self.assertEqual(next(iter(diagnostics)).column, 3)
        self.assertEqual(program.statements, (expr_stmt(num(1)), nodes.PrintStatement(*P, num(3))))

    def test_postfix_chain(self):
        call = nodes.CallExpression(*P, ident("f"), ())
        index = nodes.IndexExpression(*P, call, num(0))
        self.assertParses("f()[0](x)", expr_stmt(nodes.CallExpression(*P, index, (ident("x"),))))

    def test_array_literal(self):
        array = nodes.ArrayLiteral(*P, (num(1), nodes.StringLiteral(*P, "two"), nodes.ArrayLiteral(*P, ())))
        self.assertParses("[1, \"two\", []]", expr_stmt(array))

        __, diagnostics = parse_source("[1, 2,]")
        self.assertEqual(len(diagnostics), 1)
        self.assertEqual(next(iter(diagnostics)).found, "]")

    def test_declarations(self):
        self.assertParses("var x\nconst y = null",
                          nodes.VarDeclaration(*P, ident("x"), None, False),
                          nodes.VarDeclaration(*P, ident("y"), nodes.NullLiteral(*P), True))

        body = block(nodes.ReturnStatement(*P, binary("*", ident("l"), ident("w"))))
        self.assertParses("function area(l, w) { return l * w }",
                          nodes.FunctionDeclaration(*P, ident("area"), (ident("l"), ident("w")), body))

        self.assertParses("function nothing() { return }",
                          nodes.FunctionDeclaration(*P, ident("nothing"), (), block(nodes.ReturnStatement(*P, None))))

    def test_return_before_statement(self):
        body = block(nodes.ReturnStatement(*P, None), nodes.PrintStatement(*P, num(1)))
        self.assertParses("function f() { return\nprint 1 }", nodes.FunctionDeclaration(*P, ident("f"), (), body))

    def test_if_else_chain(self):
        source = "if (a) { print 1 } else if (b) { print 2 } else { print 3 }"
        last = nodes.IfStatement(*P, ident("b"), block(nodes.PrintStatement(*P, num(2))),
                                 block(nodes.PrintStatement(*P, num(3))))
        self.assertParses(source, nodes.IfStatement(*P, ident("a"), block(nodes.PrintStatement(*P, num(1))), last))

    def test_while_and_block(self):
        source = "while (i < 3) { i = i + 1 }\n{ var x = 1 }"
        update = expr_stmt(nodes.AssignmentExpression(*P, ident("i"), binary("+", ident("i"), num(1))))
        self.assertParses(source,
                          nodes.WhileStatement(*P, binary("<", ident("i"), num(3)), block(update)),
                          block(nodes.VarDeclaration(*P, ident("x"), num(1), False)))

    def test_blocks_are_mandatory(self):
        should_fail = ["if (x) print 1", "while (x) print 1", "function f() return 1"]
        for source in should_fail:
            __, diagnostics = parse_source(source)
            self.assertTrue(diagnostics.has_errors(), source)
            self.assertEqual(next(iter(diagnostics)).expected, "'{'", source)

    def test_positions(self):
        program, __ = parse_source("var x = 1\nprint x + 2")
        declaration, printed = program.statements

        self.assertEqual((declaration.line, declaration.column), (1, 1))
        self.assertEqual((declaration.value.line, declaration.value.column), (1, 9))
        self.assertEqual((printed.line, printed.column), (2, 1))
        self.assertEqual((printed.argument.line, printed.argument.column), (2, 9))  # the '+' operator

    def test_dangling_operator(self):
        program, diagnostics = parse_source("var x = 10\nprint x +")

        self.assertEqual(len(diagnostics), 1)
        record = next(iter(diagnostics))
        self.assertEqual(record.kind, "syntax")
        self.assertEqual((record.line, record.column), (2, 10))
        self.assertEqual((record.expected, record.found), ("an expression", "end of file"))

    def test_panic_mode_recovery(self):
        program, diagnostics = parse_source("var = 1\nprint 2\nvar y = )\nprint 3")

        # both errors are reported, and the valid statements around them survive
        self.assertEqual([record.line for record in diagnostics], [1, 3])
        self.assertEqual([record.found for record in diagnostics], ["=", ")"])
        self.assertEqual(program.statements, (nodes.PrintStatement(*P, num(2)), nodes.PrintStatement(*P, num(3))))

    def test_recovery_inside_block(self):
        program, diagnostics = parse_source("function f() {\n  print )\n  print 1\n}\nprint 2")

        self.assertEqual(len(diagnostics), 1)
        body = block(nodes.PrintStatement(*P, num(1)))
        self.assertEqual(program.statements, (nodes.FunctionDeclaration(*P, ident("f"), (), body),
                                              nodes.PrintStatement(*P, num(2))))

    def test_localizations_are_structurally_identical(self):
        english = ("const limit = 3\n"
                   "function check(n) {\n"
                   "  if (n > limit and true) { return \"big\" } else { return null }\n"
                   "}\n"
                   "var i = 0\n"
                   "while (i < 5 or false) { print check(i)\n i = i + 1 }")
        indonesian = ("konstan limit = 3\n"
                      "fungsi check(n) {\n"
                      "  jika (n > limit dan benar) { kembalikan \"big\" } lainnya { kembalikan kosong }\n"
                      "}\n"
                      "var i = 0\n"
                      "selama (i < 5 atau salah) { cetak check(i)\n i = i + 1 }")

        english_program, english_diagnostics = parse_source(english, ENGLISH)
        indonesian_program, indonesian_diagnostics = parse_source(indonesian, INDONESIAN)

        self.assertFalse(english_diagnostics.has_errors())
        self.assertFalse(indonesian_diagnostics.has_errors())
        self.assertEqual(english_program, indonesian_program)

    def test_display(self):
        program, __ = parse_source("print 1")
        self.assertEqual(program.display(), "Program(\n"
                                            "    statements=[\n"
                                            "        PrintStatement(\n"
                                            "            argument=NumericLiteral(\n"
                                            "                value=1.0\n"
                                            "            )\n"
                                            "        )\n"
                                            "    ]\n"
                                            ")")


if __name__ == '__main__':
    unittest.main()
