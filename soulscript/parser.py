"""SoulScript Parser - Converts token stream to Abstract Syntax Tree

Implements a recursive descent parser for SoulScript components:
- Skips anything at top level that does not start a component
- Parses fields, methods and statements
- Never loops on statements it cannot classify: one token is consumed and
  an UnknownStatement is produced
- Raises ParseError for missing structural tokens (';', '{', '}', ...)

Grammar (simplified):
  program     := (component | <any token>)*
  component   := 'component' IDENT '{' (method | field)* '}'
  field       := IDENT IDENT ('=' expression)? ';'
  method      := 'fn' IDENT '(' (param (',' param)*)? ')' block
  param       := IDENT IDENT
  block       := '{' statement* '}'
  statement   := 'if' expression block
               | IDENT ('=' | '+=' | '-=' | '*=' | '/=') expression ';'
               | IDENT '(' (expression (',' expression)*)? ')' ';'
               | <any token>
  expression  := comparison
  comparison  := addition (('<' | '>' | '<=' | '>=' | '==' | '!=') addition)*
  addition    := multiplication (('+' | '-') multiplication)*
  multiplication := unary (('*' | '/') unary)*
  unary       := ('-' | '+' | '!') unary | primary
  primary     := NUMBER | STRING | 'true' | 'false'
               | IDENT '(' arguments ')' | IDENT | '(' expression ')'
"""

from contextlib import contextmanager
from typing import List, Optional, Union

from .errors import ParseError
from .lexer import SoulLexer, Token, TokenType, ASSIGNMENT_TYPES
from .ast_nodes import (
    ExprNode, LiteralNode, IdentifierNode, UnaryNode, BinaryNode, CallNode,
    Statement, AssignmentStatement, IfStatement, CallStatement, UnknownStatement,
    Parameter, FieldDeclaration, MethodDeclaration, ComponentDeclaration,
)


COMPARISON_TYPES = (
    TokenType.LESS, TokenType.GREATER, TokenType.LESS_EQUAL,
    TokenType.GREATER_EQUAL, TokenType.EQUAL_EQUAL, TokenType.NOT_EQUAL,
)


class SoulParser:
    """Recursive descent parser for SoulScript"""

    def __init__(self, lexer: Optional[SoulLexer] = None):
        self.tokens: List[Token] = []
        self.current = 0
        self.lexer = lexer or SoulLexer()

    def parse(self, source: Union[str, List[Token]]) -> List[ComponentDeclaration]:
        """Parse source text (or an already tokenized stream) into declarations"""
        self._load(source)

        components = []
        with self._nesting_guard():
            while not self._is_at_end():
                if self._match(TokenType.COMPONENT):
                    components.append(self._parse_component())
                else:
                    self._advance()  # top-level noise is tolerated

        return components

    def parse_expression(self, source: Union[str, List[Token]]) -> ExprNode:
        """Parse a single expression (for testing/utility)"""
        self._load(source)
        with self._nesting_guard():
            return self._parse_expression()

    @contextmanager
    def _nesting_guard(self):
        """Report source nested past the interpreter stack as a ParseError"""
        try:
            yield
        except RecursionError:
            raise ParseError("Expression nested too deeply", self._peek()) from None

    def _load(self, source: Union[str, List[Token]]):
        if isinstance(source, str):
            source = self.lexer.tokenize(source)
        self.tokens = list(source)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            line, column = (self.tokens[-1].line, self.tokens[-1].column) if self.tokens else (1, 1)
            self.tokens.append(Token(TokenType.EOF, "", line, column))
        self.current = 0

    def _parse_component(self) -> ComponentDeclaration:
        start = self._previous()
        name = self._consume_identifier("Expected component name").value
        self._consume(TokenType.LBRACE, "{")

        fields = []
        methods = []
        while not self._check(TokenType.RBRACE) and not self._is_at_end():
            if self._check(TokenType.FN):
                methods.append(self._parse_method())
            else:
                fields.append(self._parse_field())

        self._consume(TokenType.RBRACE, "}")
        return ComponentDeclaration(name, fields, methods, line=start.line)

    def _parse_field(self) -> FieldDeclaration:
        type_token = self._consume_identifier("Expected field type")
        name = self._consume_identifier("Expected field name").value

        initial_value = None
        if self._match(TokenType.ASSIGN):
            initial_value = self._parse_expression()

        self._consume(TokenType.SEMICOLON, ";")
        return FieldDeclaration(type_token.value, name, initial_value, line=type_token.line)

    def _parse_method(self) -> MethodDeclaration:
        fn_token = self._consume(TokenType.FN, "fn")
        name = self._consume_identifier("Expected method name").value
        self._consume(TokenType.LPAREN, "(")

        parameters = []
        if not self._check(TokenType.RPAREN):
            while True:
                param_type = self._consume_identifier("Expected parameter type").value
                param_name = self._consume_identifier("Expected parameter name").value
                parameters.append(Parameter(param_type, param_name))
                if not self._match(TokenType.COMMA):
                    break

        self._consume(TokenType.RPAREN, ")")
        body = self._parse_block()
        return MethodDeclaration(name, parameters, body, line=fn_token.line)

    def _parse_block(self) -> List[Statement]:
        self._consume(TokenType.LBRACE, "{")
        body = []
        while not self._check(TokenType.RBRACE) and not self._is_at_end():
            body.append(self._parse_statement())
        self._consume(TokenType.RBRACE, "}")
        return body

    def _parse_statement(self) -> Statement:
        if self._check(TokenType.IF):
            return self._parse_if_statement()

        if self._check(TokenType.IDENTIFIER) and self._peek_next().type in ASSIGNMENT_TYPES:
            return self._parse_assignment_statement()

        if self._check(TokenType.IDENTIFIER) and self._peek_next().type == TokenType.LPAREN:
            return self._parse_call_statement()

        token = self._advance()
        return UnknownStatement(token.value, line=token.line)

    def _parse_if_statement(self) -> IfStatement:
        if_token = self._consume(TokenType.IF, "if")
        condition = self._parse_expression()
        body = self._parse_block()
        return IfStatement(condition, body, line=if_token.line)

    def _parse_assignment_statement(self) -> AssignmentStatement:
        variable = self._advance()
        operator = self._advance().value
        value = self._parse_expression()
        self._consume(TokenType.SEMICOLON, ";")
        return AssignmentStatement(variable.value, operator, value, line=variable.line)

    def _parse_call_statement(self) -> CallStatement:
        function = self._advance()
        arguments = self._parse_arguments()
        self._consume(TokenType.SEMICOLON, ";")
        return CallStatement(function.value, arguments, line=function.line)

    def _parse_arguments(self) -> List[ExprNode]:
        self._consume(TokenType.LPAREN, "(")
        args = []
        if not self._check(TokenType.RPAREN):
            args.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self._parse_expression())
        self._consume(TokenType.RPAREN, ")")
        return args

    def _parse_expression(self) -> ExprNode:
        return self._parse_comparison()

    def _parse_comparison(self) -> ExprNode:
        expr = self._parse_addition()

        while self._match(*COMPARISON_TYPES):
            operator = self._previous()
            right = self._parse_addition()
            expr = BinaryNode(operator.value, expr, right, operator.line, operator.column)

        return expr

    def _parse_addition(self) -> ExprNode:
        expr = self._parse_multiplication()

        while self._match(TokenType.PLUS, TokenType.MINUS):
            operator = self._previous()
            right = self._parse_multiplication()
            expr = BinaryNode(operator.value, expr, right, operator.line, operator.column)

        return expr

    def _parse_multiplication(self) -> ExprNode:
        expr = self._parse_unary()

        while self._match(TokenType.STAR, TokenType.SLASH):
            operator = self._previous()
            right = self._parse_unary()
            expr = BinaryNode(operator.value, expr, right, operator.line, operator.column)

        return expr

    def _parse_unary(self) -> ExprNode:
        if self._match(TokenType.MINUS, TokenType.PLUS, TokenType.BANG):
            operator = self._previous()
            operand = self._parse_unary()
            return UnaryNode(operator.value, operand, operator.line, operator.column)

        return self._parse_primary()

    def _parse_primary(self) -> ExprNode:
        if self._match(TokenType.NUMBER):
            token = self._previous()
            try:
                value = float(token.value)
            except ValueError:
                raise ParseError(f"Invalid number {token.value!r}", token, expected="number") from None
            return LiteralNode(value, "float", token.line, token.column)

        if self._match(TokenType.STRING):
            token = self._previous()
            return LiteralNode(token.value, "string", token.line, token.column)

        if self._match(TokenType.TRUE, TokenType.FALSE):
            token = self._previous()
            return LiteralNode(token.type == TokenType.TRUE, "bool", token.line, token.column)

        if self._match(TokenType.IDENTIFIER):
            token = self._previous()
            if self._check(TokenType.LPAREN):
                return CallNode(token.value, self._parse_arguments(), token.line, token.column)
            return IdentifierNode(token.value, token.line, token.column)

        if self._match(TokenType.LPAREN):
            expr = self._parse_expression()
            self._consume(TokenType.RPAREN, ")")
            return expr

        raise ParseError("Unexpected token in expression", self._peek(), expected="expression")

    # Utility methods
    def _match(self, *types: TokenType) -> bool:
        """Consume the current token if it matches any of the given types"""
        for token_type in types:
            if self._check(token_type):
                self._advance()
                return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        if self._is_at_end():
            return False
        return self._peek().type == token_type

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise ParseError(f"Expected {expected}", self._peek(), expected=expected)

    def _consume_identifier(self, message: str) -> Token:
        if self._check(TokenType.IDENTIFIER):
            return self._advance()
        raise ParseError(message, self._peek(), expected="identifier")

    def _advance(self) -> Token:
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _peek_next(self) -> Token:
        if self.current + 1 >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.current + 1]

    def _previous(self) -> Token:
        if self.current > 0:
            return self.tokens[self.current - 1]
        return self.tokens[0]


def parse(source: Union[str, List[Token]]) -> List[ComponentDeclaration]:
    """Convenience function: parse SoulScript text into component declarations"""
    return SoulParser().parse(source)
