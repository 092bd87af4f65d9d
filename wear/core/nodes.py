"""Abstract syntax tree for WeaR programs.

Every node records the line/column of the token it is anchored at. Positions are excluded from comparisons, so two
trees are equal exactly when they have the same shape and literal values, e.g. the same program written with two
different keyword localizations:

```
Program(statements=[
    VarDeclaration(identifier=Identifier(name='x'), value=NumericLiteral(value=10.0), is_const=False)
])
```

Nodes are frozen; sequences of children are stored as tuples.
"""

from dataclasses import dataclass, field, fields
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Node:
    """Superclass of every AST node."""
    line: int = field(compare=False)
    column: int = field(compare=False)

    def children(self):
        """Yields (field name, value) for every non-position field of this node."""
        for node_field in fields(self):
            if node_field.compare:
                yield node_field.name, getattr(self, node_field.name)

    def display(self, indents=0):
        """Recursively displays this node and its children in a readable, indented format."""
        pad = "    " * indents
        parts = []
        for name, value in self.children():
            if isinstance(value, Node):
                parts.append(f"\n{pad}    {name}=" + value.display(indents + 1).lstrip())
            elif isinstance(value, tuple) and value:
                items = ",".join("\n" + item.display(indents + 2) for item in value)
                parts.append(f"\n{pad}    {name}=[{items}\n{pad}    ]")
            else:
                parts.append(f"\n{pad}    {name}={value!r}")

        if not parts:
            return f"{pad}{type(self).__name__}()"
        return f"{pad}{type(self).__name__}(" + ",".join(parts) + f"\n{pad})"


class Statement(Node):
    """Superclass of nodes executed for effect."""


class Expression(Node):
    """Superclass of nodes evaluated to a value."""


# ---------- expressions ----------

@dataclass(frozen=True)
class Identifier(Expression):
    name: str


@dataclass(frozen=True)
class NumericLiteral(Expression):
    value: float


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool


@dataclass(frozen=True)
class NullLiteral(Expression):
    pass


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    elements: Tuple[Expression, ...]


@dataclass(frozen=True)
class BinaryExpression(Expression):
    operator: str  # '+', '==', ..., or the canonical 'and'/'or'
    left: Expression
    right: Expression


@dataclass(frozen=True)
class UnaryExpression(Expression):
    operator: str  # '-' or '!'
    argument: Expression


@dataclass(frozen=True)
class CallExpression(Expression):
    callee: Expression
    arguments: Tuple[Expression, ...]


@dataclass(frozen=True)
class AssignmentExpression(Expression):
    assignee: Identifier
    value: Expression


@dataclass(frozen=True)
class IndexExpression(Expression):
    object: Expression
    index: Expression


# ---------- statements ----------

@dataclass(frozen=True)
class BlockStatement(Statement):
    """A braced statement list. Always executed in its own scope."""
    statements: Tuple[Statement, ...]


@dataclass(frozen=True)
class Program(Statement):
    """Root of the tree. Its statements run in the global scope."""
    statements: Tuple[Statement, ...]


@dataclass(frozen=True)
class VarDeclaration(Statement):
    identifier: Identifier
    value: Optional[Expression]  # None binds null
    is_const: bool


@dataclass(frozen=True)
class FunctionDeclaration(Statement):
    name: Identifier
    params: Tuple[Identifier, ...]
    body: BlockStatement


@dataclass(frozen=True)
class IfStatement(Statement):
    condition: Expression
    consequent: BlockStatement
    alternate: Optional[Union[BlockStatement, "IfStatement"]]  # an IfStatement makes an else-if chain


@dataclass(frozen=True)
class WhileStatement(Statement):
    condition: Expression
    body: BlockStatement


@dataclass(frozen=True)
class ReturnStatement(Statement):
    argument: Optional[Expression]


@dataclass(frozen=True)
class PrintStatement(Statement):
    argument: Expression


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression


def concrete_nodes(cls=Node):
    """Returns every concrete (leaf) node class below cls. Used to check that dispatch tables are exhaustive."""
    result = set()
    for subclass in cls.__subclasses__():
        if subclass.__subclasses__():
            result |= concrete_nodes(subclass)
        else:
            result.add(subclass)
    return result
