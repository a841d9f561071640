"""
Tests for the runtime value model and its total operators
"""
import math

import pytest
from pydantic import ValidationError

from soulscript.values import (
    Color, Vec2, apply_binary, apply_unary, format_value, is_truthy, to_number, zero_value,
)


class TestVec2:
    """Vector model"""

    def test_defaults_and_magnitude(self):
        assert Vec2() == Vec2(x=0, y=0)
        assert Vec2(x=3, y=4).magnitude == 5

    def test_normalized(self):
        v = Vec2(x=3, y=4).normalized()
        assert v.x == pytest.approx(0.6)
        assert v.y == pytest.approx(0.8)
        assert Vec2().normalized() == Vec2()

    def test_distance(self):
        assert Vec2(x=1, y=1).distance_to(Vec2(x=4, y=5)) == 5

    def test_frozen(self):
        v = Vec2(x=1, y=2)
        with pytest.raises(ValidationError):
            v.x = 5

    def test_str(self):
        assert str(Vec2(x=1, y=2.5)) == "(1, 2.5)"


class TestCoercion:
    """Zero values, numbers and truthiness"""

    @pytest.mark.parametrize("data_type,expected", [
        ("float", 0.0),
        ("int", 0),
        ("string", ""),
        ("bool", False),
        ("vec2", None),
        ("map", None),
        ("Entity", None),
    ])
    def test_zero_value(self, data_type, expected):
        assert zero_value(data_type) == expected
        assert type(zero_value(data_type)) is type(expected)

    @pytest.mark.parametrize("value,expected", [
        (3, 3),
        (2.5, 2.5),
        (True, 1.0),
        (False, 0.0),
        ("4.5", 4.5),
        ("abc", 0.0),
        (None, 0.0),
        (Vec2(x=1, y=1), 0.0),
    ])
    def test_to_number(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (True, True),
        (False, False),
        (0, False),
        (0.0, False),
        (-2, True),
        ("", False),
        ("x", True),
        (None, False),
        (Vec2(), True),
        ({}, True),
    ])
    def test_truthiness(self, value, expected):
        assert is_truthy(value) is expected

    @pytest.mark.parametrize("value,expected", [
        (2.0, "2"),
        (2.5, "2.5"),
        (7, "7"),
        (None, "null"),
        (True, "true"),
        ("text", "text"),
        (Color(r=1, g=2, b=3), "rgb(1, 2, 3)"),
    ])
    def test_format_value(self, value, expected):
        assert format_value(value) == expected

    def test_format_value_non_finite(self):
        assert format_value(math.inf) == "inf"


class TestBinaryOperators:
    """Every operator is total over the value set"""

    def test_arithmetic(self):
        assert apply_binary("+", 1, 2) == 3
        assert apply_binary("-", 5.0, 2) == 3.0
        assert apply_binary("*", 2, 2.5) == 5.0
        assert apply_binary("/", 9, 3) == 3.0

    def test_int_stays_int(self):
        result = apply_binary("+", 1, 2)
        assert result == 3 and isinstance(result, int)

    def test_division_by_zero_is_zero(self):
        assert apply_binary("/", 10, 0) == 0.0
        assert apply_binary("/", Vec2(x=1, y=1), 0) == Vec2()

    def test_string_concatenation(self):
        assert apply_binary("+", "energy: ", 5.0) == "energy: 5"
        assert apply_binary("+", 1, "x") == "1x"
        assert apply_binary("+", "flag ", True) == "flag true"

    def test_mismatched_types_coerce(self):
        assert apply_binary("-", "abc", 1) == -1.0
        assert apply_binary("*", None, 3) == 0.0
        assert apply_binary("+", True, 1) == 2.0

    def test_vectors(self):
        a, b = Vec2(x=1, y=2), Vec2(x=3, y=4)
        assert apply_binary("+", a, b) == Vec2(x=4, y=6)
        assert apply_binary("-", b, a) == Vec2(x=2, y=2)
        assert apply_binary("*", a, 2) == Vec2(x=2, y=4)
        assert apply_binary("*", 2, a) == Vec2(x=2, y=4)
        assert apply_binary("/", b, 2) == Vec2(x=1.5, y=2)

    def test_comparisons(self):
        assert apply_binary("<", 1, 2) is True
        assert apply_binary(">=", 2, 2) is True
        assert apply_binary("==", 1, 1.0) is True
        assert apply_binary("!=", "a", "b") is True
        assert apply_binary("<", "apple", "banana") is True
        assert apply_binary("<", "5", 10) is True
        assert apply_binary("==", None, None) is True
        assert apply_binary("==", Vec2(x=1, y=1), Vec2(x=1, y=1)) is True

    def test_unknown_operator(self):
        assert apply_binary("%", 5, 2) == 0.0


class TestUnaryOperators:

    def test_negation(self):
        assert apply_unary("-", 1.0) == -1.0
        assert apply_unary("-", "3") == -3.0
        assert apply_unary("-", Vec2(x=1, y=-2)) == Vec2(x=-1, y=2)
        assert apply_unary("+", 4) == 4

    def test_not(self):
        assert apply_unary("!", 0) is True
        assert apply_unary("!", "x") is False
        assert apply_unary("!", None) is True
