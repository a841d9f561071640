"""
Tests for the runtime component registry
"""
import pytest

from soulscript.errors import ComponentExistsError
from soulscript.logs import LogLevel
from soulscript.parser import parse
from soulscript.registry import ComponentRegistry


@pytest.fixture
def registry():
    return ComponentRegistry()


class TestCreate:
    """Instantiation from declarations"""

    def test_fields_initialized_in_declaration_order(self, registry, interpreter):
        decl = parse("component C { float a = 2; float b = a * 3; float c = b + a; }")[0]
        component = registry.create(decl, interpreter.evaluator)
        assert component.fields == {"a": 2.0, "b": 6.0, "c": 8.0}

    def test_later_fields_not_visible_to_earlier(self, registry, interpreter):
        decl = parse("component C { float x = y + 1; float y = 5; }")[0]
        component = registry.create(decl, interpreter.evaluator)
        assert component.fields["x"] == 1.0
        assert component.fields["y"] == 5.0

    def test_zero_values(self, registry, interpreter):
        decl = parse("component C { float f; int i; string s; bool b; vec2 v; map m; }")[0]
        component = registry.create(decl, interpreter.evaluator)
        assert component.fields == {"f": 0.0, "i": 0, "s": "", "b": False, "v": None, "m": None}

    def test_field_keys_fixed_in_order(self, registry, interpreter):
        decl = parse("component C { float z; float a; float m; }")[0]
        component = registry.create(decl, interpreter.evaluator)
        assert list(component.fields) == ["z", "a", "m"]

    def test_methods_by_name(self, registry, interpreter, atom_source):
        component = registry.create(parse(atom_source)[0], interpreter.evaluator)
        assert component.has_method("update")
        assert component.get_method("missing") is None
        assert component.declaration_name == "Atom"
        assert component.is_active


class TestNaming:
    """Instance names are unique keys"""

    def test_default_name_is_declaration_name(self, registry, interpreter, atom_source):
        component = registry.create(parse(atom_source)[0], interpreter.evaluator)
        assert component.name == "Atom"
        assert "Atom" in registry

    def test_numeric_suffix_on_collision(self, registry, interpreter, atom_source):
        decl = parse(atom_source)[0]
        names = [registry.create(decl, interpreter.evaluator).name for _ in range(3)]
        assert names == ["Atom", "Atom_2", "Atom_3"]
        assert len(registry) == 3

    def test_explicit_name(self, registry, interpreter, atom_source):
        component = registry.create(parse(atom_source)[0], interpreter.evaluator, "Hydrogen")
        assert component.name == "Hydrogen"
        assert component.declaration_name == "Atom"

    def test_explicit_collision_raises(self, registry, interpreter, atom_source):
        decl = parse(atom_source)[0]
        registry.create(decl, interpreter.evaluator, "Hydrogen")
        with pytest.raises(ComponentExistsError) as exc_info:
            registry.create(decl, interpreter.evaluator, "Hydrogen")
        assert exc_info.value.name == "Hydrogen"


class TestLifecycle:

    def test_deactivate_and_active_snapshot(self, registry, interpreter):
        for source in ("component A { }", "component B { }", "component C { }"):
            registry.create(parse(source)[0], interpreter.evaluator)
        assert registry.deactivate("B") is True
        assert registry.deactivate("nobody") is False
        assert [c.name for c in registry.active()] == ["A", "C"]
        assert [c.name for c in registry.all()] == ["A", "B", "C"]

    def test_remove_and_clear(self, registry, interpreter):
        registry.create(parse("component A { }")[0], interpreter.evaluator)
        assert registry.remove("A").name == "A"
        assert registry.remove("A") is None
        registry.create(parse("component B { }")[0], interpreter.evaluator)
        registry.clear()
        assert len(registry) == 0

    def test_iteration_is_a_snapshot(self, registry, interpreter):
        for source in ("component A { }", "component B { }"):
            registry.create(parse(source)[0], interpreter.evaluator)
        for component in registry:
            registry.remove(component.name)
        assert len(registry) == 0


class TestInitializerFailures:
    """An initializer that overflows the stack leaves the field at its zero value"""

    def test_deep_initializer_logged_and_zeroed(self, registry, interpreter):
        chain = "+".join(["1"] * 3000)
        decl = parse(f"component C {{ float x = {chain}; float y = 2; }}")[0]
        component = registry.create(decl, interpreter.evaluator)
        assert component.fields == {"x": 0.0, "y": 2.0}
        assert "C" in registry
        errors = interpreter.get_logs(LogLevel.ERROR)
        assert len(errors) == 1
        assert errors[0].message.startswith("Error initializing C.x")
