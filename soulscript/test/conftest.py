"""
pytest configuration

Fixtures shared by the SoulScript tests
"""
from typing import Any, Callable, Dict, List, Optional

import pytest

from soulscript.context import RuntimeContext
from soulscript.examples import ATOM
from soulscript.interpreter import SoulScriptInterpreter
from soulscript.logs import LogLevel
from soulscript.parser import SoulParser
from soulscript.settings import InterpreterSettings


class RecordingRuntime(RuntimeContext):
    """Minimal runtime that records log calls and serves a dict of built-ins"""

    def __init__(self, builtins: Optional[Dict[str, Callable[..., Any]]] = None):
        self.builtins = builtins or {}
        self.messages: List[tuple] = []
        self.calls: List[tuple] = []
        self.time = 0.0

    def has_builtin(self, name: str) -> bool:
        return name in self.builtins

    def call_builtin(self, name: str, args: List[Any]) -> Any:
        self.calls.append((name, list(args)))
        if name not in self.builtins:
            self.log(LogLevel.WARNING, f"Unknown function: {name}")
            return 0
        return self.builtins[name](*args)

    def log(self, level: LogLevel, message: str, entity_id: Optional[int] = None):
        self.messages.append((level, message))

    def get_current_time(self) -> float:
        return self.time

    def warnings(self) -> List[str]:
        return [message for level, message in self.messages if level == LogLevel.WARNING]


@pytest.fixture
def settings():
    """Seeded settings so random built-ins are reproducible"""
    return InterpreterSettings(random_seed=1234)


@pytest.fixture
def interpreter(settings):
    return SoulScriptInterpreter(settings)


@pytest.fixture
def parser():
    return SoulParser()


@pytest.fixture
def runtime():
    return RecordingRuntime()


@pytest.fixture
def atom_source():
    """The canonical decaying Atom program"""
    return ATOM


@pytest.fixture
def atom(interpreter, parser, atom_source):
    """Atom component created directly from its declaration, without an entity"""
    return interpreter.create_component(parser.parse(atom_source)[0])


@pytest.fixture
def instantiate(interpreter):
    """Parse and instantiate source, failing the test on structural errors"""
    def _instantiate(source: str, **kwargs):
        components, errors = interpreter.parse_and_instantiate(source, **kwargs)
        assert errors == []
        return {component.name: component for component in components}
    return _instantiate


def pytest_collection_modifyitems(config, items):
    """Tests without a marker are unit tests"""
    for item in items:
        if not any(item.iter_markers()):
            item.add_marker(pytest.mark.unit)
