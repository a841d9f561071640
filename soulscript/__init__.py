"""SoulScript language core

A small component-oriented scripting language for simulated worlds: source
text declares components with typed fields and methods, and an interpreter
runs every live component's ``update`` method once per simulation tick.

This package provides:
- Tokenizer and recursive-descent parser producing an AST
- Tree-walking evaluator and statement executor with lenient runtime errors
- Component registry, world entity table, event bus and callback scheduler
- A sealed table of built-in functions (math, vectors, entities, audio, ...)

Usage:
    from soulscript import SoulScriptInterpreter

    interpreter = SoulScriptInterpreter()
    components, errors = interpreter.parse_and_instantiate(source)
    for _ in range(60):
        interpreter.tick()
    print(interpreter.get_logs())
"""

from .errors import (
    SoulScriptError, LexerError, ParseError, RegistryError, ComponentExistsError,
    BuiltinRegistrationError, CallDepthExceeded,
)
from .lexer import SoulLexer, Token, TokenType, tokenize
from .parser import SoulParser, parse
from .ast_nodes import *
from .values import Vec2, Color
from .evaluator import ExpressionEvaluator
from .executor import StatementExecutor
from .registry import ComponentRegistry, RuntimeComponent
from .builtins import BuiltinRegistry, BuiltinCategory
from .events import EventBus
from .world import World, WorldEntity
from .scheduler import CallbackScheduler
from .logs import LogLevel, LogEntry, SimulationLog
from .settings import InterpreterSettings
from .interpreter import SoulScriptInterpreter

__version__ = "1.0.0"

__all__ = [
    'SoulLexer',
    'SoulParser',
    'Token',
    'TokenType',
    'tokenize',
    'parse',
    'parse_and_instantiate',
    'ExpressionEvaluator',
    'StatementExecutor',
    'ComponentRegistry',
    'RuntimeComponent',
    'BuiltinRegistry',
    'BuiltinCategory',
    'EventBus',
    'World',
    'WorldEntity',
    'CallbackScheduler',
    'SimulationLog',
    'LogLevel',
    'LogEntry',
    'InterpreterSettings',
    'SoulScriptInterpreter',
    'Vec2',
    'Color',
    # Errors
    'SoulScriptError',
    'LexerError',
    'ParseError',
    'RegistryError',
    'ComponentExistsError',
    'BuiltinRegistrationError',
    'CallDepthExceeded',
    # AST nodes
    'ExprNode',
    'LiteralNode',
    'IdentifierNode',
    'UnaryNode',
    'BinaryNode',
    'CallNode',
    'Statement',
    'AssignmentStatement',
    'IfStatement',
    'CallStatement',
    'UnknownStatement',
    'Parameter',
    'FieldDeclaration',
    'MethodDeclaration',
    'ComponentDeclaration',
]


def parse_and_instantiate(interpreter: SoulScriptInterpreter, source: str):
    """Parse ``source`` into ``interpreter``; returns ``(components, errors)``"""
    return interpreter.parse_and_instantiate(source)
