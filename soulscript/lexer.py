"""SoulScript Lexer - Tokenizes SoulScript source into tokens

Implements tokenization for SoulScript component syntax including:
- Identifiers and keywords (component, fn, if, true, false)
- Numbers (integers and decimals)
- Double-quoted string literals
- Operators, compound assignments and punctuation
- Line comments starting with //

The lexer is lenient: unexpected characters are skipped and unterminated
strings run to the end of the line. Both are recorded in ``errors`` so the
caller can surface them. Pass ``strict=True`` to raise instead.
"""

from enum import Enum
from typing import List
from dataclasses import dataclass

from .errors import LexerError


class TokenType(Enum):
    """Token types for SoulScript syntax"""
    # Literals
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"

    # Keywords
    COMPONENT = "COMPONENT"  # component
    FN = "FN"                # fn
    IF = "IF"                # if
    TRUE = "TRUE"            # true
    FALSE = "FALSE"          # false

    # Arithmetic
    PLUS = "PLUS"            # +
    MINUS = "MINUS"          # -
    STAR = "STAR"            # *
    SLASH = "SLASH"          # /

    # Comparison
    LESS = "LESS"                    # <
    LESS_EQUAL = "LESS_EQUAL"        # <=
    GREATER = "GREATER"              # >
    GREATER_EQUAL = "GREATER_EQUAL"  # >=
    EQUAL_EQUAL = "EQUAL_EQUAL"      # ==
    NOT_EQUAL = "NOT_EQUAL"          # !=
    BANG = "BANG"                    # !

    # Assignment
    ASSIGN = "ASSIGN"              # =
    PLUS_ASSIGN = "PLUS_ASSIGN"    # +=
    MINUS_ASSIGN = "MINUS_ASSIGN"  # -=
    STAR_ASSIGN = "STAR_ASSIGN"    # *=
    SLASH_ASSIGN = "SLASH_ASSIGN"  # /=

    # Punctuation
    LBRACE = "LBRACE"        # {
    RBRACE = "RBRACE"        # }
    LPAREN = "LPAREN"        # (
    RPAREN = "RPAREN"        # )
    SEMICOLON = "SEMICOLON"  # ;
    COMMA = "COMMA"          # ,

    EOF = "EOF"


ASSIGNMENT_TYPES = (
    TokenType.ASSIGN,
    TokenType.PLUS_ASSIGN,
    TokenType.MINUS_ASSIGN,
    TokenType.STAR_ASSIGN,
    TokenType.SLASH_ASSIGN,
)


@dataclass
class Token:
    """Represents a single token with position information"""
    type: TokenType
    value: str
    line: int
    column: int
    filename: str = ""

    def __str__(self):
        return f"Token({self.type.value}, '{self.value}', {self.line}:{self.column})"

    def __repr__(self):
        return self.__str__()


class SoulLexer:
    """SoulScript Lexer - converts source text into tokens"""

    KEYWORDS = {
        'component': TokenType.COMPONENT,
        'fn': TokenType.FN,
        'if': TokenType.IF,
        'true': TokenType.TRUE,
        'false': TokenType.FALSE,
    }

    # ASCII digits only; float() rejects other Unicode digits
    DIGITS = frozenset("0123456789")

    # Multi-character operators (order matters - longer first)
    MULTI_CHAR_OPS = [
        ('+=', TokenType.PLUS_ASSIGN),
        ('-=', TokenType.MINUS_ASSIGN),
        ('*=', TokenType.STAR_ASSIGN),
        ('/=', TokenType.SLASH_ASSIGN),
        ('<=', TokenType.LESS_EQUAL),
        ('>=', TokenType.GREATER_EQUAL),
        ('==', TokenType.EQUAL_EQUAL),
        ('!=', TokenType.NOT_EQUAL),
    ]

    SINGLE_CHAR_OPS = {
        '+': TokenType.PLUS,
        '-': TokenType.MINUS,
        '*': TokenType.STAR,
        '/': TokenType.SLASH,
        '<': TokenType.LESS,
        '>': TokenType.GREATER,
        '!': TokenType.BANG,
        '=': TokenType.ASSIGN,
        '{': TokenType.LBRACE,
        '}': TokenType.RBRACE,
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
        ';': TokenType.SEMICOLON,
        ',': TokenType.COMMA,
    }

    def __init__(self, filename: str = "", strict: bool = False):
        self.filename = filename
        self.strict = strict
        self.text = ""
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []

    def tokenize(self, text: str, filename: str = "") -> List[Token]:
        """Tokenize SoulScript text and return list of tokens ending in EOF"""
        self.filename = filename or self.filename
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []
        self.errors = []

        while self.pos < len(self.text):
            self._skip_whitespace()

            if self.pos >= len(self.text):
                break

            char = self._current_char()

            if char == '/' and self._peek() == '/':
                self._skip_comment()
                continue

            if char in self.DIGITS:
                self._read_number()
                continue

            if char.isalpha() or char == '_':
                self._read_identifier()
                continue

            if char == '"':
                self._read_string()
                continue

            found_multi = False
            for op_str, token_type in self.MULTI_CHAR_OPS:
                if self._match_string(op_str):
                    self._add_token(token_type, op_str)
                    self._advance(len(op_str))
                    found_multi = True
                    break

            if found_multi:
                continue

            if char in self.SINGLE_CHAR_OPS:
                self._add_token(self.SINGLE_CHAR_OPS[char], char)
                self._advance()
                continue

            self._error(f"Unexpected character: '{char}'", self.line, self.column)
            self._advance()

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column, self.filename))
        return self.tokens

    def _error(self, message: str, line: int, column: int):
        error = LexerError(message, line, column, self.filename)
        if self.strict:
            raise error
        self.errors.append(error)

    def _current_char(self) -> str:
        if self.pos >= len(self.text):
            return '\0'
        return self.text[self.pos]

    def _peek(self, offset: int = 1) -> str:
        peek_pos = self.pos + offset
        if peek_pos >= len(self.text):
            return '\0'
        return self.text[peek_pos]

    def _advance(self, count: int = 1):
        """Advance position and update line/column"""
        for _ in range(count):
            if self.pos < len(self.text) and self.text[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _match_string(self, target: str) -> bool:
        return self.text.startswith(target, self.pos)

    def _add_token(self, token_type: TokenType, value: str):
        self.tokens.append(Token(token_type, value, self.line, self.column, self.filename))

    def _skip_whitespace(self):
        while self.pos < len(self.text) and self._current_char() in ' \t\r\n':
            self._advance()

    def _skip_comment(self):
        while self.pos < len(self.text) and self._current_char() != '\n':
            self._advance()

    def _read_number(self):
        """Read numeric literal (digits with an optional decimal part)"""
        start_pos = self.pos
        start_line, start_col = self.line, self.column

        while self.pos < len(self.text) and self._current_char() in self.DIGITS:
            self._advance()

        if self._current_char() == '.' and self._peek() in self.DIGITS:
            self._advance()  # consume '.'
            while self.pos < len(self.text) and self._current_char() in self.DIGITS:
                self._advance()

        value = self.text[start_pos:self.pos]
        self.tokens.append(Token(TokenType.NUMBER, value, start_line, start_col, self.filename))

    def _read_identifier(self):
        """Read identifier or keyword"""
        start_pos = self.pos
        start_line, start_col = self.line, self.column

        while (self.pos < len(self.text) and
               (self._current_char().isalnum() or self._current_char() == '_')):
            self._advance()

        value = self.text[start_pos:self.pos]
        token_type = self.KEYWORDS.get(value, TokenType.IDENTIFIER)
        self.tokens.append(Token(token_type, value, start_line, start_col, self.filename))

    def _read_string(self):
        """Read double-quoted string literal, lenient on a missing closing quote"""
        start_line, start_col = self.line, self.column
        self._advance()  # consume opening quote

        value = ""
        while self.pos < len(self.text) and self._current_char() not in ('"', '\n'):
            if self._current_char() == '\\' and self._peek() in ('"', '\\', 'n', 't'):
                self._advance()
                escape_char = self._current_char()
                value += {'n': '\n', 't': '\t'}.get(escape_char, escape_char)
            else:
                value += self._current_char()
            self._advance()

        if self._current_char() == '"':
            self._advance()  # consume closing quote
        else:
            self._error("Unterminated string", start_line, start_col)

        self.tokens.append(Token(TokenType.STRING, value, start_line, start_col, self.filename))


def tokenize(text: str, filename: str = "") -> List[Token]:
    """Convenience function to tokenize SoulScript text"""
    return SoulLexer(filename).tokenize(text)
