"""Runtime values of WeaR programs.

WeaR values map onto Python objects directly:

```
Number   -> float
String   -> str
Boolean  -> bool
Null     -> None
Array    -> list   (mutable, compared by identity)
Function -> Function
```
"""

import math
from dataclasses import dataclass
from decimal import Decimal

from wear.core.environment import Environment
from wear.core.nodes import BlockStatement


@dataclass(eq=False)
class Function:
    """A user-defined function together with the frame it was declared in. Every call runs in a new child of
    closure, never in the caller's frame.
    """
    name: str
    params: tuple
    body: BlockStatement
    closure: Environment

    @property
    def arity(self):
        return len(self.params)

    def __repr__(self):
        return f"<function {self.name}>"


def is_number(value):
    # bool is a subclass of int, but never a WeaR number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_name(value):
    """Name of value's WeaR type, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, Function):
        return "function"
    return type(value).__name__


def is_truthy(value):
    """null and false are falsy. Everything else, including 0, "" and [], is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def values_equal(left, right):
    """Equality without coercion: values of different types are never equal. Arrays and functions are equal only to
    themselves.
    """
    if is_number(left) and is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    if isinstance(left, (list, Function)):
        return left is right
    return left == right


def format_number(value):
    """Formats a number the way print shows it, following JavaScript's Number to string rules. Values from 1e-6
    up to 1e21 are written out in full; smaller and larger ones use exponent notation such as `1e-7` or `1.5e+22`.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))

    sign = "-" if value < 0 else ""
    __, digits, exponent = Decimal(repr(abs(float(value)))).normalize().as_tuple()
    digits = "".join(map(str, digits))
    point = len(digits) + exponent  # position of the decimal point relative to the digits

    if len(digits) <= point <= 21:
        return sign + digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits

    mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
    return f"{sign}{mantissa}e{'+' if point > 0 else '-'}{abs(point - 1)}"


def stringify(value):
    """Renders value as print would show it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    if isinstance(value, list):
        return "[" + ", ".join(stringify(item) for item in value) + "]"
    if isinstance(value, Function):
        return f"<function {value.name}>"
    return str(value)
