"""
Tests for the expression evaluator
"""
import pytest

from soulscript.ast_nodes import CallNode, IdentifierNode, LiteralNode
from soulscript.context import Frame
from soulscript.evaluator import ExpressionEvaluator
from soulscript.registry import RuntimeComponent


@pytest.fixture
def evaluator(runtime):
    return ExpressionEvaluator(runtime)


@pytest.fixture
def component():
    return RuntimeComponent(name="Sensor", declaration_name="Sensor",
                            fields={"energy": 10.0, "label": "sensor"})


class TestIdentifiers:
    """Name resolution"""

    def test_unknown_identifier_is_zero(self, evaluator, component):
        assert evaluator.evaluate(IdentifierNode("undefinedVar"), component) == 0

    def test_field_lookup(self, evaluator, component):
        assert evaluator.evaluate(IdentifierNode("energy"), component) == 10.0

    def test_scope_shadows_field(self, evaluator, component):
        scope = {"energy": 1.0}
        assert evaluator.evaluate(IdentifierNode("energy"), component, scope) == 1.0

    def test_no_component(self, evaluator):
        assert evaluator.evaluate(IdentifierNode("anything"), None) == 0


class TestExpressions:
    """Evaluation of parsed expressions"""

    def test_arithmetic_with_fields(self, evaluator, component, parser):
        expr = parser.parse_expression("energy * 2 - 5")
        assert evaluator.evaluate(expr, component) == 15.0

    def test_comparison_result_is_bool(self, evaluator, component, parser):
        assert evaluator.evaluate(parser.parse_expression("energy >= 10"), component) is True

    def test_string_building(self, evaluator, component, parser):
        expr = parser.parse_expression('label + " has " + energy')
        assert evaluator.evaluate(expr, component) == "sensor has 10"

    def test_division_by_zero(self, evaluator, component, parser):
        assert evaluator.evaluate(parser.parse_expression("energy / missing"), component) == 0.0

    def test_literal(self, evaluator, component):
        assert evaluator.evaluate(LiteralNode("x", "string"), component) == "x"


class TestCalls:
    """Call expressions go through the runtime"""

    def test_builtin_call(self, evaluator, component, runtime):
        runtime.builtins["double"] = lambda x: x * 2
        expr = CallNode("double", [IdentifierNode("energy")])
        assert evaluator.evaluate(expr, component) == 20.0
        assert runtime.calls == [("double", [10.0])]

    def test_unknown_call_warns_once_and_yields_zero(self, evaluator, component, runtime):
        result = evaluator.evaluate(CallNode("nope", [LiteralNode(1.0)]), component)
        assert result == 0
        assert runtime.warnings() == ["Unknown function: nope"]

    def test_frame_call_function(self, runtime, component):
        runtime.builtins["one"] = lambda: 1
        frame = Frame(component, None, runtime)
        assert frame.scope == {}
        assert frame.call_function("one", []) == 1


class TestStats:

    def test_evaluations_are_counted(self, evaluator, component):
        evaluator.evaluate(LiteralNode(1.0), component)
        evaluator.evaluate(LiteralNode(2.0), component)
        assert evaluator.stats.total_evaluations == 2
        assert evaluator.stats.avg_time_per_eval >= 0.0

        evaluator.reset_stats()
        assert evaluator.stats.total_evaluations == 0
        assert evaluator.stats.avg_time_per_eval == 0.0
