"""AST Nodes - Abstract Syntax Tree node definitions for SoulScript

Defines the node types produced by the parser:
- ExprNode: base class for expression nodes (Literal, Identifier, Unary,
  Binary, Call); expression nodes evaluate themselves against a Frame
- Statement nodes: Assignment, If, Call, Unknown
- Declarations: ComponentDeclaration, FieldDeclaration, MethodDeclaration,
  Parameter

All nodes are dataclasses so two parses of the same text compare equal.
Source positions are carried but excluded from comparison.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from enum import Enum

from .values import apply_binary, apply_unary, format_value


class NodeType(Enum):
    """Types of AST nodes"""
    LITERAL = "Literal"
    IDENTIFIER = "Identifier"
    UNARY = "UnaryExpression"
    BINARY = "BinaryExpression"
    CALL = "CallExpression"
    ASSIGNMENT = "AssignmentStatement"
    IF = "IfStatement"
    CALL_STATEMENT = "CallStatement"
    UNKNOWN = "UnknownStatement"
    PARAMETER = "Parameter"
    FIELD = "FieldDeclaration"
    METHOD = "MethodDeclaration"
    COMPONENT = "ComponentDeclaration"


class ExprNode(ABC):
    """Base class for all expression nodes"""

    node_type: NodeType

    @abstractmethod
    def evaluate(self, frame) -> Any:
        """Evaluate this expression node in the given frame"""
        pass

    @abstractmethod
    def __str__(self) -> str:
        pass


@dataclass(eq=True)
class LiteralNode(ExprNode):
    """Numeric, string or boolean literal"""
    value: Any
    data_type: str = "float"
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    node_type = NodeType.LITERAL

    def evaluate(self, frame) -> Any:
        return self.value

    def __str__(self) -> str:
        if self.data_type == "string":
            return f'"{self.value}"'
        return format_value(self.value)


@dataclass(eq=True)
class IdentifierNode(ExprNode):
    """Reference to a parameter, local or component field"""
    name: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    node_type = NodeType.IDENTIFIER

    def evaluate(self, frame) -> Any:
        return frame.resolve_identifier(self.name)

    def __str__(self) -> str:
        return self.name


@dataclass(eq=True)
class UnaryNode(ExprNode):
    """Unary operations (-expr, +expr, !expr)"""
    operator: str
    operand: ExprNode
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    node_type = NodeType.UNARY

    def evaluate(self, frame) -> Any:
        return apply_unary(self.operator, self.operand.evaluate(frame))

    def __str__(self) -> str:
        return f"({self.operator}{self.operand})"


@dataclass(eq=True)
class BinaryNode(ExprNode):
    """Binary operations (a + b, a < b, ...)"""
    operator: str
    left: ExprNode
    right: ExprNode
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    node_type = NodeType.BINARY

    def evaluate(self, frame) -> Any:
        left_val = self.left.evaluate(frame)
        right_val = self.right.evaluate(frame)
        return apply_binary(self.operator, left_val, right_val)

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(eq=True)
class CallNode(ExprNode):
    """Built-in function call used as a value, e.g. sin(t)"""
    name: str
    args: List[ExprNode] = field(default_factory=list)
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    node_type = NodeType.CALL

    def evaluate(self, frame) -> Any:
        arg_values = [arg.evaluate(frame) for arg in self.args]
        return frame.call_function(self.name, arg_values)

    def __str__(self) -> str:
        args_str = ", ".join(str(arg) for arg in self.args)
        return f"{self.name}({args_str})"


# Statements

class Statement:
    """Base class for statement nodes"""
    node_type: NodeType


@dataclass
class AssignmentStatement(Statement):
    variable: str
    operator: str
    value: ExprNode
    line: int = field(default=0, compare=False)

    node_type = NodeType.ASSIGNMENT

    def __str__(self) -> str:
        return f"{self.variable} {self.operator} {self.value};"


@dataclass
class IfStatement(Statement):
    condition: ExprNode
    body: List[Statement] = field(default_factory=list)
    line: int = field(default=0, compare=False)

    node_type = NodeType.IF

    def __str__(self) -> str:
        return f"if {self.condition} {{ {len(self.body)} statement(s) }}"


@dataclass
class CallStatement(Statement):
    function: str
    arguments: List[ExprNode] = field(default_factory=list)
    line: int = field(default=0, compare=False)

    node_type = NodeType.CALL_STATEMENT

    def __str__(self) -> str:
        args_str = ", ".join(str(arg) for arg in self.arguments)
        return f"{self.function}({args_str});"


@dataclass
class UnknownStatement(Statement):
    """A token the parser could not place; skipped at runtime"""
    token: str = ""
    line: int = field(default=0, compare=False)

    node_type = NodeType.UNKNOWN

    def __str__(self) -> str:
        return f"<unknown {self.token!r}>"


# Declarations

@dataclass
class Parameter:
    data_type: str
    name: str

    node_type = NodeType.PARAMETER


@dataclass
class FieldDeclaration:
    data_type: str
    name: str
    initial_value: Optional[ExprNode] = None
    line: int = field(default=0, compare=False)

    node_type = NodeType.FIELD


@dataclass
class MethodDeclaration:
    name: str
    parameters: List[Parameter] = field(default_factory=list)
    body: List[Statement] = field(default_factory=list)
    line: int = field(default=0, compare=False)

    node_type = NodeType.METHOD


@dataclass
class ComponentDeclaration:
    """Root node for one ``component Name { ... }`` block"""
    name: str
    fields: List[FieldDeclaration] = field(default_factory=list)
    methods: List[MethodDeclaration] = field(default_factory=list)
    line: int = field(default=0, compare=False)

    node_type = NodeType.COMPONENT

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def method_table(self) -> Dict[str, MethodDeclaration]:
        """Methods by name; a later duplicate replaces an earlier one"""
        return {m.name: m for m in self.methods}

    def __str__(self) -> str:
        return (f"component {self.name} "
                f"({len(self.fields)} fields, {len(self.methods)} methods)")
