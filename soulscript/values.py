"""SoulScript runtime values

Script values form a closed set: numbers (int/float), text (str), booleans,
``Vec2``, ``Color``, world entities and null (None). Host payloads such as the
dicts handed to ``broadcast`` pass through untouched.

Every operator here is a total function over that set. Mismatched operands
fall back to numeric coercion, division by zero yields 0, and nothing raises,
so a questionable expression can never stop a simulation tick.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict


class Vec2(BaseModel):
    """Immutable 2D vector"""
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> 'Vec2':
        mag = self.magnitude
        if mag <= 0:
            return Vec2()
        return Vec2(x=self.x / mag, y=self.y / mag)

    def distance_to(self, other: 'Vec2') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def __add__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(x=self.x - other.x, y=self.y - other.y)

    def scaled(self, factor: float) -> 'Vec2':
        return Vec2(x=self.x * factor, y=self.y * factor)

    def __str__(self) -> str:
        return f"({format_value(self.x)}, {format_value(self.y)})"


class Color(BaseModel):
    """Immutable RGB(A) color"""
    model_config = ConfigDict(frozen=True)

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0

    def __str__(self) -> str:
        return f"rgb({format_value(self.r)}, {format_value(self.g)}, {format_value(self.b)})"


# Zero values per declared field type; any other type starts as null
ZERO_VALUES = {
    'float': 0.0,
    'int': 0,
    'string': '',
    'bool': False,
}


def zero_value(data_type: str) -> Any:
    """Default value for a field or parameter declared without a value"""
    return ZERO_VALUES.get(data_type)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Any) -> float:
    """Coerce any value to a number; non-numeric values become 0"""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if is_number(value):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def is_truthy(value: Any) -> bool:
    """Permissive truthiness used by if-conditions"""
    if isinstance(value, bool):
        return value
    if is_number(value):
        return value != 0
    if isinstance(value, str):
        return value != ''
    return value is not None


def format_value(value: Any) -> str:
    """Text form of a value, as used by log() and string concatenation"""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def _compare(operator: str, left: Any, right: Any) -> bool:
    if operator == "==":
        return bool(left == right)
    if operator == "!=":
        return not _compare("==", left, right)

    if isinstance(left, str) and isinstance(right, str):
        a, b = left, right
    else:
        a, b = to_number(left), to_number(right)

    if operator == "<":
        return a < b
    elif operator == ">":
        return a > b
    elif operator == "<=":
        return a <= b
    elif operator == ">=":
        return a >= b
    return False


def apply_binary(operator: str, left: Any, right: Any) -> Any:
    """Apply a binary operator; total over the value set"""
    if operator in ("<", ">", "<=", ">=", "==", "!="):
        return _compare(operator, left, right)

    if operator == "+":
        if isinstance(left, str) or isinstance(right, str):
            return format_value(left) + format_value(right)
        if isinstance(left, Vec2) and isinstance(right, Vec2):
            return left + right
        return _numeric(left) + _numeric(right)

    if operator == "-":
        if isinstance(left, Vec2) and isinstance(right, Vec2):
            return left - right
        return _numeric(left) - _numeric(right)

    if operator == "*":
        if isinstance(left, Vec2) and not isinstance(right, Vec2):
            return left.scaled(to_number(right))
        if isinstance(right, Vec2) and not isinstance(left, Vec2):
            return right.scaled(to_number(left))
        return _numeric(left) * _numeric(right)

    if operator == "/":
        divisor = to_number(right)
        if isinstance(left, Vec2):
            return left.scaled(1.0 / divisor) if divisor != 0 else Vec2()
        if divisor == 0:
            return 0.0
        return _numeric(left) / divisor

    return 0.0


def apply_unary(operator: str, operand: Any) -> Any:
    """Apply a unary operator (-, +, !)"""
    if operator == "!":
        return not is_truthy(operand)
    if isinstance(operand, Vec2):
        return operand.scaled(-1.0) if operator == "-" else operand
    value = _numeric(operand)
    return -value if operator == "-" else value


def _numeric(value: Any):
    # keeps ints as ints so int fields stay integral
    return value if is_number(value) else to_number(value)
