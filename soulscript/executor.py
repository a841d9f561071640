"""SoulScript Statement Executor

Runs statement nodes against a component's fields and a local scope:
- Assignment with compound operators (=, +=, -=, *=, /=)
- If statements with permissive truthiness (no else branch)
- Call statements: the lifecycle intrinsics destroy() and spawn(), the
  built-in function table, and the component's own methods
- Method invocation with positional parameter binding

A script that calls something unknown gets a warning in the simulation log
and carries on; one bad statement must not stop the tick for everyone else.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .ast_nodes import (
    Statement, AssignmentStatement, IfStatement, CallStatement, UnknownStatement,
    MethodDeclaration,
)
from .context import Frame, RuntimeContext
from .errors import CallDepthExceeded
from .evaluator import ExpressionEvaluator
from .logs import LogLevel
from .values import apply_binary, format_value, is_truthy, zero_value


# Compound assignment operator -> binary operator
COMPOUND_OPERATORS = {
    '+=': '+',
    '-=': '-',
    '*=': '*',
    '/=': '/',
}

INTRINSICS = ('destroy', 'spawn')


@dataclass
class ExecutionStats:
    statements_executed: int = 0
    methods_invoked: int = 0
    unknown_calls: int = 0


class StatementExecutor:
    """Tree-walking executor for SoulScript statements"""

    def __init__(self, evaluator: ExpressionEvaluator, runtime: RuntimeContext,
                 max_call_depth: int = 64):
        self.evaluator = evaluator
        self.runtime = runtime
        self.max_call_depth = max_call_depth
        self.call_stack: List[Any] = []
        self.stats = ExecutionStats()

        self._handlers = {
            AssignmentStatement: self._execute_assignment,
            IfStatement: self._execute_if,
            CallStatement: self._execute_call,
            UnknownStatement: self._execute_unknown,
        }

    @property
    def current_component(self):
        """Component whose method is running, or None outside of scripts"""
        return self.call_stack[-1] if self.call_stack else None

    def execute_method(self, component, method: MethodDeclaration, args: List[Any]) -> None:
        """Bind ``args`` to the method's parameters and run its body

        Missing arguments take the zero value of the parameter's declared type.
        Raises CallDepthExceeded when nesting passes ``max_call_depth``.
        """
        if len(self.call_stack) >= self.max_call_depth:
            raise CallDepthExceeded(method.name, self.max_call_depth)

        scope: Dict[str, Any] = {}
        for index, param in enumerate(method.parameters):
            scope[param.name] = args[index] if index < len(args) else zero_value(param.data_type)

        self.call_stack.append(component)
        self.stats.methods_invoked += 1
        try:
            self.execute_block(method.body, component, scope)
        finally:
            self.call_stack.pop()

    def execute_block(self, statements: List[Statement], component, scope: Dict[str, Any]):
        for statement in statements:
            self.execute_statement(statement, component, scope)

    def execute_statement(self, statement: Statement, component, scope: Optional[Dict[str, Any]] = None):
        if scope is None:
            scope = {}
        self.stats.statements_executed += 1
        handler = self._handlers.get(type(statement))
        if handler is not None:
            handler(statement, component, scope)

    def _evaluate(self, expr, component, scope):
        return self.evaluator.evaluate_in(expr, Frame(component, scope, self.runtime))

    def _execute_assignment(self, statement: AssignmentStatement, component, scope):
        name = statement.variable

        # fields win over scope for both the read and the write
        if name in component.fields:
            current = component.fields[name]
        elif name in scope:
            current = scope[name]
        else:
            current = 0

        new_value = self._evaluate(statement.value, component, scope)

        operator = COMPOUND_OPERATORS.get(statement.operator)
        result = apply_binary(operator, current, new_value) if operator else new_value

        if name in component.fields:
            component.fields[name] = result
        else:
            scope[name] = result

    def _execute_if(self, statement: IfStatement, component, scope):
        condition = self._evaluate(statement.condition, component, scope)
        if is_truthy(condition):
            self.execute_block(statement.body, component, scope)

    def _execute_call(self, statement: CallStatement, component, scope):
        name = statement.function

        if name == 'destroy':
            component.is_active = False
            self.runtime.log(LogLevel.WARNING, f"Component {component.name} destroyed")
            return

        if name == 'spawn':
            if statement.arguments:
                entity_type = self._evaluate(statement.arguments[0], component, scope)
                self.runtime.log(LogLevel.INFO,
                                 f"Spawning new {format_value(entity_type)} from {component.name}")
            return

        args = [self._evaluate(arg, component, scope) for arg in statement.arguments]

        if self.runtime.has_builtin(name):
            self.runtime.call_builtin(name, args)
            return

        method = component.get_method(name)
        if method is not None:
            self.execute_method(component, method, args)
            return

        self.stats.unknown_calls += 1
        self.runtime.log(LogLevel.WARNING, f"Unknown function: {name}")

    def _execute_unknown(self, statement: UnknownStatement, component, scope):
        pass
