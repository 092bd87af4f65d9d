"""Tree-walking interpreter for WeaR.

Statements are executed for effect and expressions evaluate to runtime values (see values.py). Both are dispatched on
the node's class through tables that cover every concrete node class.

A `return` is not an error: executing a statement yields either None (carry on) or a ReturnSignal, which every
enclosing block and loop hands back up until the function call that is being evaluated consumes it. Genuine failures
are WearRuntimeErrors; the first one aborts the program and is recorded as the run's single runtime diagnostic.
"""

import math
import sys

from wear.core import nodes
from wear.core.environment import Environment
from wear.core.values import Function, is_number, is_truthy, stringify, type_name, values_equal
from wear.lang.error import Diagnostics, WearRuntimeError


class ReturnSignal:
    """Completion of a return statement, carrying the returned value to the nearest call boundary."""
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"ReturnSignal({self.value!r})"


# each WeaR call nests about ten Python frames, so the default limit allows only ~100 calls
RECURSION_LIMIT = 10000

ARITHMETIC = {
    "-": lambda left, right: left - right,
    "*": lambda left, right: left * right,
    ">": lambda left, right: left > right,
    ">=": lambda left, right: left >= right,
    "<": lambda left, right: left < right,
    "<=": lambda left, right: left <= right,
}


class Interpreter:
    """Runs a nodes.Program against a fresh global Environment."""

    def __init__(self, diagnostics=None, output=print):
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.output_callback = output  # called once per print, in program order
        self.output = []

        self.globals = Environment()
        self.environment = self.globals

        # top-level statement being executed, used to place errors that have no better position
        self._top_line, self._top_column = 0, 0

        self._statements = {
            nodes.Program: self.execute_program,
            nodes.VarDeclaration: self.execute_var_declaration,
            nodes.FunctionDeclaration: self.execute_function_declaration,
            nodes.IfStatement: self.execute_if_statement,
            nodes.WhileStatement: self.execute_while_statement,
            nodes.ReturnStatement: self.execute_return_statement,
            nodes.PrintStatement: self.execute_print_statement,
            nodes.ExpressionStatement: self.execute_expression_statement,
            nodes.BlockStatement: self.execute_block_statement,
        }
        self._expressions = {
            nodes.NumericLiteral: self.evaluate_literal,
            nodes.StringLiteral: self.evaluate_literal,
            nodes.BooleanLiteral: self.evaluate_literal,
            nodes.NullLiteral: self.evaluate_null,
            nodes.Identifier: self.evaluate_identifier,
            nodes.ArrayLiteral: self.evaluate_array_literal,
            nodes.BinaryExpression: self.evaluate_binary_expression,
            nodes.UnaryExpression: self.evaluate_unary_expression,
            nodes.CallExpression: self.evaluate_call_expression,
            nodes.AssignmentExpression: self.evaluate_assignment_expression,
            nodes.IndexExpression: self.evaluate_index_expression,
        }

    def interpret(self, program):
        """Executes every statement of program. Returns the printed lines. The first runtime error stops execution and
        is reported to self.diagnostics.
        """
        self.output = []
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(limit, RECURSION_LIMIT))

        try:
            self.execute(program)
        except WearRuntimeError as error:
            self.diagnostics.report(error)
        except RecursionError:
            self.diagnostics.report(WearRuntimeError("Maximum call depth exceeded", self._top_line, self._top_column))
        finally:
            self.environment = self.globals
            sys.setrecursionlimit(limit)

        return self.output

    # ---------- statements ----------

    def execute(self, stmt):
        """Executes stmt. Returns a ReturnSignal if a return statement completed inside it, else None."""
        try:
            return self._statements[type(stmt)](stmt)
        except WearRuntimeError as error:
            raise error.locate(stmt)

    def execute_program(self, program):
        self._top_line, self._top_column = program.line, program.column
        for stmt in program.statements:
            self._top_line, self._top_column = stmt.line, stmt.column
            if self.execute(stmt) is not None:
                break  # a top-level return ends the program

    def execute_var_declaration(self, stmt):
        value = self.evaluate(stmt.value) if stmt.value is not None else None
        self.environment.define(stmt.identifier.name, value, stmt.is_const)

    def execute_function_declaration(self, stmt):
        params = tuple(param.name for param in stmt.params)
        func = Function(stmt.name.name, params, stmt.body, self.environment)
        self.environment.define(func.name, func)

    def execute_if_statement(self, stmt):
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute_block(stmt.consequent, self.environment.child())
        if isinstance(stmt.alternate, nodes.IfStatement):
            return self.execute_if_statement(stmt.alternate)
        if stmt.alternate is not None:
            return self.execute_block(stmt.alternate, self.environment.child())
        return None

    def execute_while_statement(self, stmt):
        while is_truthy(self.evaluate(stmt.condition)):
            signal = self.execute_block(stmt.body, self.environment.child())  # fresh scope per iteration
            if signal is not None:
                return signal
        return None

    def execute_return_statement(self, stmt):
        value = self.evaluate(stmt.argument) if stmt.argument is not None else None
        return ReturnSignal(value)

    def execute_print_statement(self, stmt):
        text = stringify(self.evaluate(stmt.argument))
        self.output.append(text)
        if self.output_callback is not None:
            self.output_callback(text)

    def execute_expression_statement(self, stmt):
        self.evaluate(stmt.expression)

    def execute_block_statement(self, stmt):
        return self.execute_block(stmt, self.environment.child())

    def execute_block(self, block, env):
        """Executes block's statements in env, then restores the previously active environment, however the block
        was left.
        """
        previous = self.environment
        self.environment = env
        try:
            for stmt in block.statements:
                signal = self.execute(stmt)
                if signal is not None:
                    return signal
        finally:
            self.environment = previous
        return None

    # ---------- expressions ----------

    def evaluate(self, expr):
        try:
            return self._expressions[type(expr)](expr)
        except WearRuntimeError as error:
            raise error.locate(expr)

    def evaluate_literal(self, expr):
        return expr.value

    def evaluate_null(self, expr):
        return None

    def evaluate_identifier(self, expr):
        return self.environment.get(expr.name)

    def evaluate_array_literal(self, expr):
        return [self.evaluate(element) for element in expr.elements]

    def evaluate_binary_expression(self, expr):
        # both sides are always evaluated, including for 'and'/'or'
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        if operator == "+":
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            self._check_numbers(operator, left, right)
            return left + right

        if operator == "==":
            return values_equal(left, right)
        if operator == "!=":
            return not values_equal(left, right)
        if operator == "and":
            return is_truthy(left) and is_truthy(right)
        if operator == "or":
            return is_truthy(left) or is_truthy(right)

        if operator == "/":
            self._check_numbers(operator, left, right)
            if right == 0:
                raise WearRuntimeError("Division by zero")
            return left / right
        if operator == "%":
            self._check_numbers(operator, left, right)
            if right == 0:
                raise WearRuntimeError("Modulo by zero")
            return math.fmod(left, right)  # sign follows the dividend

        if operator in ARITHMETIC:
            self._check_numbers(operator, left, right)
            return ARITHMETIC[operator](left, right)

        raise WearRuntimeError(f"Unknown operator: {operator}")

    @staticmethod
    def _check_numbers(operator, left, right):
        if not (is_number(left) and is_number(right)):
            raise WearRuntimeError(f"Operands of '{operator}' must be numbers, but got {type_name(left)} and "
                                   f"{type_name(right)}")

    def evaluate_unary_expression(self, expr):
        value = self.evaluate(expr.argument)

        if expr.operator == "-":
            if not is_number(value):
                raise WearRuntimeError(f"Operand of '-' must be a number, but got {type_name(value)}")
            return -value
        if expr.operator == "!":
            return not is_truthy(value)

        raise WearRuntimeError(f"Unknown unary operator: {expr.operator}")

    def evaluate_call_expression(self, expr):
        callee = self.evaluate(expr.callee)
        if not isinstance(callee, Function):
            raise WearRuntimeError("Can only call functions")

        args = [self.evaluate(arg) for arg in expr.arguments]
        if len(args) != callee.arity:
            raise WearRuntimeError(f"Function '{callee.name}' expects {callee.arity} arguments, but got {len(args)}")

        env = callee.closure.child()
        for param, arg in zip(callee.params, args):
            env.define(param, arg)

        signal = self.execute_block(callee.body, env)
        return signal.value if signal is not None else None

    def evaluate_assignment_expression(self, expr):
        value = self.evaluate(expr.value)
        self.environment.assign(expr.assignee.name, value)
        return value

    def evaluate_index_expression(self, expr):
        obj = self.evaluate(expr.object)
        index = self.evaluate(expr.index)

        if not isinstance(obj, list):
            raise WearRuntimeError("Can only index into arrays")
        if not is_number(index):
            raise WearRuntimeError("Array index must be a number")
        if not (0 <= index < len(obj)) or not float(index).is_integer():
            raise WearRuntimeError(f"Array index {stringify(index)} out of bounds (array length: {len(obj)})")

        return obj[int(index)]
