"""SoulScript Context - what a running method can see

``RuntimeContext`` is the interface the evaluator and executor use to reach the
host runtime: built-in functions, the simulation log and world time. The
interpreter implements it; tests can supply lighter implementations.

``Frame`` binds one method invocation: the component whose fields are visible
and the local scope holding parameters and block locals.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .logs import LogLevel


class RuntimeContext(ABC):
    """Abstract base class for the runtime seen by executing scripts"""

    @abstractmethod
    def has_builtin(self, name: str) -> bool:
        """Whether ``name`` is in the built-in function table"""
        pass

    @abstractmethod
    def call_builtin(self, name: str, args: List[Any]) -> Any:
        """Call a built-in; unknown names and failures must not raise"""
        pass

    @abstractmethod
    def log(self, level: LogLevel, message: str, entity_id: Optional[int] = None):
        """Append to the simulation log"""
        pass

    @abstractmethod
    def get_current_time(self) -> float:
        """Current simulation time in seconds"""
        pass


class Frame:
    """Evaluation frame for one method invocation"""

    def __init__(self, component, scope: Optional[Dict[str, Any]], runtime: RuntimeContext):
        self.component = component
        self.scope = scope if scope is not None else {}
        self.runtime = runtime

    def resolve_identifier(self, name: str) -> Any:
        """Scope first, then component fields; unknown names evaluate to 0"""
        if name in self.scope:
            return self.scope[name]
        if self.component is not None and name in self.component.fields:
            return self.component.fields[name]
        return 0

    def call_function(self, name: str, args: List[Any]) -> Any:
        return self.runtime.call_builtin(name, args)
