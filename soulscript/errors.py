"""SoulScript exception hierarchy

Structural problems (bad tokens, bad grammar, host misuse of the registries)
are raised as exceptions. Problems a running script causes are never raised
out of a tick; they become simulation log entries instead.
"""

from typing import Optional


class SoulScriptError(Exception):
    """Base class for every error raised by the SoulScript core"""
    pass


class LexerError(SoulScriptError):
    """Lexer error with position information"""

    def __init__(self, message: str, line: int, column: int, filename: str = ""):
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        super().__init__(f"{filename}:{line}:{column}: {message}")


class ParseError(SoulScriptError):
    """Exception raised during parsing"""

    def __init__(self, message: str, token=None, expected: Optional[str] = None,
                 line: int = 0, column: int = 0):
        self.message = message
        self.token = token
        self.expected = expected
        self.line = line if token is None else token.line
        self.column = column if token is None else token.column
        super().__init__(f"Parse error at line {self.line}, column {self.column}: {message}")


class RegistryError(SoulScriptError):
    """Invalid use of the runtime component registry"""
    pass


class ComponentExistsError(RegistryError):
    """An explicit instance name is already taken"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Component '{name}' already exists")


class BuiltinRegistrationError(SoulScriptError):
    """Invalid built-in name, duplicate name, or registration after sealing"""
    pass


class CallDepthExceeded(SoulScriptError):
    """Method invocations nested deeper than the configured limit"""

    def __init__(self, method_name: str, depth: int):
        self.method_name = method_name
        self.depth = depth
        super().__init__(f"Maximum call depth {depth} exceeded calling '{method_name}'")
