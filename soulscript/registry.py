"""Runtime component registry

Holds the live component instances of an interpreter session in insertion
order. That order is the update order of every tick, so it decides which
components see fresh versus stale world state within a tick.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .ast_nodes import ComponentDeclaration, MethodDeclaration
from .errors import ComponentExistsError
from .logs import LogLevel
from .values import zero_value


logger = logging.getLogger(__name__)


@dataclass(eq=False)
class RuntimeComponent:
    """A live instance of a component declaration"""
    name: str
    declaration_name: str
    fields: Dict[str, Any] = field(default_factory=dict)
    methods: Dict[str, MethodDeclaration] = field(default_factory=dict)
    is_active: bool = True

    def get_method(self, name: str) -> Optional[MethodDeclaration]:
        return self.methods.get(name)

    def has_method(self, name: str) -> bool:
        return name in self.methods

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"RuntimeComponent({self.name!r}, {state}, fields={self.fields!r})"


class ComponentRegistry:
    """Registry of runtime components keyed by unique instance name"""

    def __init__(self):
        self.components: Dict[str, RuntimeComponent] = {}

    def create(self, declaration: ComponentDeclaration, evaluator,
               instance_name: Optional[str] = None) -> RuntimeComponent:
        """Instantiate ``declaration`` and register it

        Field initializers run in declaration order against the fields built
        so far, so an initializer can read any field declared above it.
        """
        if instance_name is not None and instance_name in self.components:
            raise ComponentExistsError(instance_name)
        name = instance_name or self.unique_name(declaration.name)

        component = RuntimeComponent(
            name=name,
            declaration_name=declaration.name,
            methods=declaration.method_table,
        )

        for field_decl in declaration.fields:
            value = zero_value(field_decl.data_type)
            if field_decl.initial_value is not None:
                try:
                    value = evaluator.evaluate(field_decl.initial_value, component)
                except RecursionError as error:
                    evaluator.runtime.log(LogLevel.ERROR,
                                          f"Error initializing {name}.{field_decl.name}: {error}")
            component.fields[field_decl.name] = value

        self.components[name] = component
        logger.debug("Registered component %s (%s)", name, declaration.name)
        return component

    def unique_name(self, base: str) -> str:
        """``base`` if free, otherwise ``base_2``, ``base_3``, ..."""
        if base not in self.components:
            return base
        suffix = 2
        while f"{base}_{suffix}" in self.components:
            suffix += 1
        return f"{base}_{suffix}"

    def get(self, name: str) -> Optional[RuntimeComponent]:
        return self.components.get(name)

    def deactivate(self, name: str) -> bool:
        component = self.components.get(name)
        if component is None:
            return False
        component.is_active = False
        return True

    def remove(self, name: str) -> Optional[RuntimeComponent]:
        return self.components.pop(name, None)

    def active(self) -> List[RuntimeComponent]:
        """Snapshot of active components in insertion order"""
        return [c for c in self.components.values() if c.is_active]

    def all(self) -> List[RuntimeComponent]:
        return list(self.components.values())

    def clear(self):
        self.components.clear()

    def __contains__(self, name: str) -> bool:
        return name in self.components

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self) -> Iterator[RuntimeComponent]:
        return iter(list(self.components.values()))
