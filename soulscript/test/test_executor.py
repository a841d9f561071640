"""
Tests for the statement executor
"""
import pytest

from soulscript.ast_nodes import AssignmentStatement, IdentifierNode, LiteralNode, UnknownStatement
from soulscript.errors import CallDepthExceeded
from soulscript.evaluator import ExpressionEvaluator
from soulscript.executor import StatementExecutor
from soulscript.logs import LogLevel
from soulscript.parser import parse
from soulscript.registry import ComponentRegistry


@pytest.fixture
def executor(runtime):
    return StatementExecutor(ExpressionEvaluator(runtime), runtime, max_call_depth=8)


@pytest.fixture
def make(executor):
    """Instantiate the first component of ``source`` against the executor's runtime"""
    registry = ComponentRegistry()

    def _make(source):
        return registry.create(parse(source)[0], executor.evaluator)
    return _make


def run(executor, component, method_name, *args):
    executor.execute_method(component, component.get_method(method_name), list(args))


class TestAssignment:
    """Field-first reads and writes"""

    def test_atom_five_updates(self, executor, make, atom_source):
        atom = make(atom_source)
        seen = []
        for _ in range(5):
            run(executor, atom, "update", 1.0)
            seen.append(atom.fields["energy"])
        assert seen == [99, 98, 97, 96, 95]
        assert atom.is_active

    @pytest.mark.parametrize("operator,expected", [
        ("=", 3.0),
        ("+=", 13.0),
        ("-=", 7.0),
        ("*=", 30.0),
        ("/=", 10.0 / 3.0),
    ])
    def test_compound_operators(self, executor, make, operator, expected):
        component = make("component C { float x = 10; }")
        executor.execute_statement(AssignmentStatement("x", operator, LiteralNode(3.0)), component)
        assert component.fields["x"] == pytest.approx(expected)

    def test_non_field_goes_to_scope(self, executor, make):
        component = make("component C { float x = 1; }")
        scope = {}
        executor.execute_statement(AssignmentStatement("tmp", "+=", LiteralNode(2.0)), component, scope)
        assert scope == {"tmp": 2.0}
        assert "tmp" not in component.fields

    def test_field_wins_over_scope(self, executor, make):
        component = make("component C { float x = 1; }")
        scope = {"x": 100.0}
        executor.execute_statement(AssignmentStatement("x", "=", IdentifierNode("x")), component, scope)
        # read resolves through the evaluator (scope first), write goes to the field
        assert component.fields["x"] == 100.0
        assert scope["x"] == 100.0

    def test_locals_carry_across_statements(self, executor, make):
        component = make("""
            component C {
                float out = 0;
                fn calc(float a) {
                    tmp = a * 2;
                    tmp += 1;
                    out = tmp;
                }
            }
        """)
        run(executor, component, "calc", 4.0)
        assert component.fields["out"] == 9.0


class TestIf:

    @pytest.mark.parametrize("condition,fired", [
        ("1", True),
        ("0", False),
        ('"yes"', True),
        ('""', False),
        ("true", True),
        ("false", False),
        ("missing", False),
    ])
    def test_truthiness(self, executor, make, condition, fired):
        component = make("component C { bool hit; fn go() { if " + condition + " { hit = true; } } }")
        run(executor, component, "go")
        assert component.fields["hit"] is fired

    def test_body_runs_in_order(self, executor, make):
        component = make("component C { float x = 1; fn go() { if x { x += 1; x *= 10; } } }")
        run(executor, component, "go")
        assert component.fields["x"] == 20.0


class TestCalls:
    """Intrinsics, built-ins, own methods and unknown names"""

    def test_destroy(self, executor, make, runtime):
        component = make("component C { fn die() { destroy(); } }")
        run(executor, component, "die")
        assert component.is_active is False
        assert runtime.messages == [(LogLevel.WARNING, "Component C destroyed")]

    def test_spawn_logs_intent(self, executor, make, runtime):
        component = make('component C { fn go() { spawn("spark", 1); } }')
        run(executor, component, "go")
        assert runtime.messages == [(LogLevel.INFO, "Spawning new spark from C")]

    def test_builtin_result_discarded(self, executor, make, runtime):
        received = []
        runtime.builtins["record"] = lambda *args: received.append(args)
        component = make("component C { float x = 2; fn go() { record(x, x + 1); } }")
        run(executor, component, "go")
        assert received == [(2.0, 3.0)]

    def test_unknown_function_warns_once(self, executor, make, runtime):
        component = make("component C { float x = 5; fn go() { mystery(x); } }")
        before = dict(component.fields)
        run(executor, component, "go")
        assert runtime.warnings() == ["Unknown function: mystery"]
        assert component.fields == before
        assert executor.stats.unknown_calls == 1

    def test_own_method_call_with_parameters(self, executor, make):
        component = make("""
            component C {
                float total = 0;
                fn go() { add(3, 4); }
                fn add(float a, float b) { total = a + b; }
            }
        """)
        run(executor, component, "go")
        assert component.fields["total"] == 7.0

    def test_missing_arguments_get_zero_values(self, executor, make):
        component = make("""
            component C {
                string s = "unset";
                float n = -1;
                fn set(string a, float b) { s = a; n = b; }
            }
        """)
        run(executor, component, "set")
        assert component.fields["s"] == ""
        assert component.fields["n"] == 0.0

    def test_runaway_recursion_raises_call_depth(self, executor, make):
        component = make("component C { float n = 0; fn loop() { n += 1; loop(); } }")
        with pytest.raises(CallDepthExceeded):
            run(executor, component, "loop")
        assert component.fields["n"] == 8
        assert executor.call_stack == []

    def test_unknown_statement_is_noop(self, executor, make):
        component = make("component C { float x = 1; }")
        executor.execute_statement(UnknownStatement("?"), component)
        assert component.fields == {"x": 1.0}

    def test_current_component_tracks_call_stack(self, executor, make, runtime):
        seen = []
        runtime.builtins["record"] = lambda: seen.append(executor.current_component)
        component = make("component C { fn go() { record(); } }")
        assert executor.current_component is None
        run(executor, component, "go")
        assert seen == [component]
        assert executor.current_component is None
