"""SoulScript Interpreter

The explicit context object of a session. It owns the component registry,
the world entity table, the event bus, the callback scheduler, the built-in
table and the simulation log, and exposes the two calls a host drives it with:

- ``parse_and_instantiate(source)`` turns source text into live components
- ``tick(delta_time)`` advances the simulation by one step

Everything a script does wrong is reported through the simulation log; only
structural errors in the source text (ParseError) reach the host, and those
are returned rather than raised by ``parse_and_instantiate``.
"""

import logging
import random
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union

from .builtins import BuiltinCategory, BuiltinRegistry, install_builtins
from .collaborators import AudioBackend, NullAudioBackend, NullPhysicsBackend, PhysicsBackend
from .context import RuntimeContext
from .errors import CallDepthExceeded, LexerError, ParseError, SoulScriptError
from .ast_nodes import ComponentDeclaration, MethodDeclaration
from .evaluator import ExpressionEvaluator
from .events import EventBus
from .executor import StatementExecutor
from .logs import LogEntry, LogLevel, SimulationLog
from .parser import SoulParser
from .registry import ComponentRegistry, RuntimeComponent
from .scheduler import CallbackScheduler
from .settings import InterpreterSettings
from .values import Vec2, format_value, to_number
from .world import World, WorldEntity


logger = logging.getLogger(__name__)

# Script failures that end one method invocation but never the tick
METHOD_FAILURES = (CallDepthExceeded, RecursionError)

# Host-side mistakes inside a built-in call become error log entries
BUILTIN_FAILURES = (TypeError, ValueError, ArithmeticError, AttributeError, KeyError, IndexError)


class SoulScriptInterpreter(RuntimeContext):
    """Tree-walking interpreter for SoulScript components"""

    def __init__(self,
                 settings: Optional[InterpreterSettings] = None,
                 audio: Optional[AudioBackend] = None,
                 physics: Optional[PhysicsBackend] = None,
                 extra_builtins: Optional[Dict[str, Callable[..., Any]]] = None):
        self.settings = settings or InterpreterSettings()
        self.audio = audio or NullAudioBackend()
        self.physics = physics or NullPhysicsBackend()
        self.rng = random.Random(self.settings.random_seed)

        self.logs = SimulationLog(self.settings.max_log_entries)
        self.parser = SoulParser()
        self.registry = ComponentRegistry()
        self.world = World()
        self.events = EventBus()
        self.scheduler = CallbackScheduler(self.settings.max_callbacks_per_tick)

        self.evaluator = ExpressionEvaluator(self)
        self.executor = StatementExecutor(self.evaluator, self, self.settings.max_call_depth)

        self.builtins = BuiltinRegistry()
        install_builtins(self.builtins, self)
        for name, func in (extra_builtins or {}).items():
            self.builtins.register(name, func, BuiltinCategory.CUSTOM)
        self.builtins.seal()

        self.world_time = 0.0
        self.tick_count = 0
        self._in_tick = False
        self._pending_entity_removals: List[int] = []
        self._pending_component_removals: List[str] = []
        self._destroying: Set[int] = set()

    # RuntimeContext

    def has_builtin(self, name: str) -> bool:
        return name in self.builtins

    def call_builtin(self, name: str, args: List[Any]) -> Any:
        """Call a built-in by name; never raises for script-level problems"""
        builtin = self.builtins.get(name)
        if builtin is None:
            self.log(LogLevel.WARNING, f"Unknown function: {name}")
            return 0
        try:
            return builtin(*args)
        except BUILTIN_FAILURES as error:
            self.log(LogLevel.ERROR, f"Error in {name}: {error}")
            return 0

    def log(self, level: LogLevel, message: str, entity_id: Optional[int] = None):
        if entity_id is None:
            entity = self.current_entity()
            entity_id = entity.id if entity is not None else None
        self.logs.append(level, message, entity_id)

    def get_current_time(self) -> float:
        return self.world_time

    # Parsing and instantiation

    def parse(self, source: str) -> List[ComponentDeclaration]:
        """Parse source text; ParseError propagates, lexer problems are logged"""
        try:
            return self.parser.parse(source)
        finally:
            for error in self.parser.lexer.errors:
                self.log(LogLevel.WARNING, str(error))

    def parse_and_instantiate(self, source: str,
                              positions: Optional[Dict[str, Vec2]] = None
                              ) -> Tuple[List[RuntimeComponent], List[SoulScriptError]]:
        """Parse ``source`` and create one component per declaration

        Returns ``(components, errors)``. A ParseError in ``errors`` means the
        source instantiated nothing; LexerErrors for skipped characters are
        reported alongside the components that were still created.
        """
        try:
            declarations = self.parse(source)
        except (ParseError, LexerError) as error:
            self.log(LogLevel.ERROR, str(error))
            return [], self._lexer_warnings() + [error]

        positions = positions or {}
        components = []
        for declaration in declarations:
            component = self.create_component(declaration)
            position = None
            if self.settings.bind_entities:
                requested = positions.get(component.name, positions.get(declaration.name))
                entity = self.create_entity(declaration.name, requested, component=component)
                position = entity.position

            init_method = component.get_method('init')
            if init_method is not None:
                self._run_method(component, init_method, [position], f"Error in init for {component.name}")
            components.append(component)

        return components, self._lexer_warnings()

    def _lexer_warnings(self) -> List[SoulScriptError]:
        """Characters the lexer skipped; reported but never fatal"""
        return list(self.parser.lexer.errors)

    # Components

    def create_component(self, declaration: ComponentDeclaration,
                         instance_name: Optional[str] = None) -> RuntimeComponent:
        component = self.registry.create(declaration, self.evaluator, instance_name)
        self.log(LogLevel.INFO, f"Component {component.name} created")
        return component

    def get_component(self, name: str) -> Optional[RuntimeComponent]:
        return self.registry.get(name)

    def get_all_components(self) -> List[RuntimeComponent]:
        return self.registry.all()

    def destroy_component(self, name: str) -> bool:
        if not self.registry.deactivate(name):
            return False
        self.log(LogLevel.WARNING, f"Component {name} destroyed")
        return True

    def remove_component(self, name: str) -> bool:
        """Drop a component from the registry; deferred to tick end while ticking"""
        if name not in self.registry:
            return False
        if self._in_tick:
            self.registry.deactivate(name)
            self._pending_component_removals.append(name)
        else:
            self.registry.remove(name)
        return True

    def update_component(self, name: str, delta_time: Optional[float] = None):
        component = self.registry.get(name)
        if component is None or not component.is_active:
            return
        update_method = component.get_method('update')
        if update_method is None:
            return

        dt = self.settings.tick_delta if delta_time is None else delta_time
        self._run_method(component, update_method, [dt], f"Error updating {name}")

    def update_all_components(self, delta_time: Optional[float] = None):
        for component in self.registry.active():
            self.update_component(component.name, delta_time)

    def execute_method(self, component: Union[RuntimeComponent, str], method_name: str,
                       args: Optional[List[Any]] = None) -> bool:
        """Run a component method by name from host code; False if it does not exist"""
        if isinstance(component, str):
            component = self.registry.get(component)
        if component is None:
            return False
        method = component.get_method(method_name)
        if method is None:
            return False
        self._run_method(component, method, list(args or []), f"Error in {component.name}.{method_name}")
        return True

    def _run_method(self, component: RuntimeComponent, method: MethodDeclaration,
                    args: List[Any], failure_prefix: str):
        try:
            self.executor.execute_method(component, method, args)
        except METHOD_FAILURES as error:
            self.log(LogLevel.ERROR, f"{failure_prefix}: {error}")

    # Simulation step

    def tick(self, delta_time: Optional[float] = None):
        """Advance the simulation by one step

        Order: world time, due scheduled callbacks, component updates in
        registry order, entity ageing, then removals requested during the tick.
        """
        dt = self.settings.tick_delta if delta_time is None else delta_time

        self._in_tick = True
        try:
            self.world_time += dt
            self.scheduler.advance_time(dt)
            self._run_due_callbacks()
            self.update_all_components(dt)
            self.world.advance_lifespans(dt)
        finally:
            self._in_tick = False
            self._commit_removals()
        self.tick_count += 1

    def _run_due_callbacks(self):
        for callback in self.scheduler.pop_due():
            component = self.registry.get(callback.component_name)
            if component is None or not component.is_active:
                continue
            method = component.get_method(callback.method_name)
            if method is None:
                self.log(LogLevel.WARNING, f"Unknown function: {callback.method_name}")
                continue
            self._run_method(component, method, callback.args,
                             f"Error in callback {component.name}.{callback.method_name}")

    def _commit_removals(self):
        for entity_id in self._pending_entity_removals:
            self.world.remove(entity_id)
        for name in self._pending_component_removals:
            self.registry.remove(name)
        self._pending_entity_removals.clear()
        self._pending_component_removals.clear()

    # World entities

    def current_entity(self) -> Optional[WorldEntity]:
        """Entity bound to the component whose method is running"""
        return self.world.entity_for_component(self.executor.current_component)

    def create_entity(self, entity_type: str, position: Optional[Vec2] = None,
                      component: Optional[RuntimeComponent] = None) -> WorldEntity:
        if position is None:
            position = self._random_spawn_position()
        entity = self.world.create(entity_type, position, component)

        self.broadcast('entityCreated', {
            'id': entity.id,
            'type': entity.type,
            'position': entity.position,
        })
        self.log(LogLevel.INFO, f"Entity created: {entity.name} at {entity.position}", entity.id)
        return entity

    def get_entity(self, entity_id: int) -> Optional[WorldEntity]:
        entity = self.world.get(entity_id)
        if entity is None or not entity.is_active:
            return None
        return entity

    def destroy_entity(self, entity: Union[WorldEntity, int, float]) -> bool:
        """Run onDestroy, broadcast entityDestroyed, then remove the entity

        While a tick is running the entity is only marked inactive; it leaves
        the table when the tick ends. The bound component stops updating.
        """
        entity_id = entity.id if isinstance(entity, WorldEntity) else int(to_number(entity))
        world_entity = self.world.get(entity_id)
        if world_entity is None or not world_entity.is_active or entity_id in self._destroying:
            return False

        component = world_entity.component
        if component is not None:
            on_destroy = component.get_method('onDestroy')
            if on_destroy is not None:
                # onDestroy may destroy its own entity again; that call is a no-op
                self._destroying.add(entity_id)
                try:
                    self._run_method(component, on_destroy, [], f"Error in onDestroy for {world_entity.name}")
                finally:
                    self._destroying.discard(entity_id)

        self.broadcast('entityDestroyed', {
            'id': world_entity.id,
            'type': world_entity.type,
            'position': world_entity.position,
            'lifespan': world_entity.lifespan,
        })

        world_entity.is_active = False
        if component is not None:
            component.is_active = False
        if self._in_tick:
            self._pending_entity_removals.append(entity_id)
        else:
            self.world.remove(entity_id)

        self.log(LogLevel.INFO, f"Entity destroyed: {world_entity.name}", entity_id)
        return True

    def _random_spawn_position(self) -> Vec2:
        margin = self.settings.spawn_margin
        width = max(0.0, self.settings.world_width - 2 * margin)
        height = max(0.0, self.settings.world_height - 2 * margin)
        return Vec2(x=margin + self.rng.random() * width, y=margin + self.rng.random() * height)

    # Events and callbacks

    def subscribe(self, event: str, handler: str):
        self.events.subscribe(event, handler)

    def broadcast(self, event: str, payload: Any = None) -> int:
        return self.events.broadcast(event, payload, self.registry.active(), self._invoke_handler)

    def _invoke_handler(self, component: RuntimeComponent, handler: str, payload: Any):
        method = component.get_method(handler)
        self._run_method(component, method, [payload], f"Event handler error in {component.name}.{handler}")

    def schedule_callback(self, delay: float, method_name: str, args: Optional[List[Any]] = None) -> int:
        """Schedule a method of the running component; 0 outside of a method"""
        component = self.executor.current_component
        if component is None:
            self.log(LogLevel.WARNING, f"scheduleCallback({method_name}) called outside of a component")
            return 0
        return self.scheduler.schedule(delay, component.name, method_name, args)

    # Logs and state

    def get_logs(self, level: Optional[LogLevel] = None) -> List[LogEntry]:
        return self.logs.entries(level)

    def clear_logs(self):
        self.logs.clear()

    def snapshot(self) -> List[Dict[str, Any]]:
        """Renderer-facing view of the active entities"""
        return [entity.to_render_dict() for entity in self.world.all()]

    def reset(self):
        self.registry.clear()
        self.world.clear()
        self.events.clear()
        self.scheduler.reset()
        self.logs.clear()
        self.rng.seed(self.settings.random_seed)
        self.world_time = 0.0
        self.tick_count = 0
        self._pending_entity_removals.clear()
        self._pending_component_removals.clear()
        self.log(LogLevel.INFO, "Interpreter reset")
        logger.debug("Interpreter reset")

    def __repr__(self) -> str:
        return (f"SoulScriptInterpreter(components={len(self.registry)}, "
                f"entities={self.world.count()}, time={format_value(self.world_time)})")
