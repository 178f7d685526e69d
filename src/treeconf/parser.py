"""Reader for the HOCON-like configuration text format.

Example:
    ```
    # global values
    name = "app"
    port 8080;

    prod {
        port = 80
        hosts = ["a.example.com", "b.example.com"]
        home = $HOME
    }

    include "local.cfg"
    ```

A value statement is terminated by ";", a newline, a closing "}" or the end
of input. A comment may follow a ";" on the same line, but not a bare value.
"""

import logging
import math
import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .exceptions import ConfigParseError
from .models import Node
from .models import NodeKind
from .tree import Tree

logger = logging.getLogger(__name__)

_IDENT_START = re.compile(r"[A-Za-z_]")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_\-.]*")
_ENV = re.compile(r"\$(?:\{([A-Za-z_][A-Za-z0-9_]*)\}|([A-Za-z_][A-Za-z0-9_]*))")
_NUMBER_CHARS = re.compile(r"[0-9A-Za-z_.+\-]*")
_INT = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.[0-9]+(?:[eE][+-]?[0-9]+)?|[0-9]+[eE][+-]?[0-9]+)")

_ESCAPES = {'"': '"', "\\": "\\", "/": "/", "n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f"}

MAX_INCLUDE_DEPTH = 32
MAX_NESTING_DEPTH = 100


class TokenType(Enum):
    LBRACE = "'{'"
    RBRACE = "'}'"
    LBRACKET = "'['"
    RBRACKET = "']'"
    ASSIGN = "'='"
    SEMICOLON = "';'"
    COMMA = "','"
    NEWLINE = "newline"
    COMMENT = "comment"
    IDENT = "identifier"
    STRING = "string"
    INT = "integer"
    FLOAT = "float"
    BOOL = "boolean"
    NULL = "null"
    ENV = "environment reference"
    EOF = "end of input"


@dataclass
class Token:
    type: TokenType
    text: str
    line: int
    column: int
    value: object = None


_PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "=": TokenType.ASSIGN,
    ":": TokenType.ASSIGN,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
}


class Lexer:
    """Splits configuration text into tokens.

    Args:
        text: Source text
        source_name: Name used in error messages
    """

    def __init__(self, text: str, source_name: str = "<string>"):
        self.text = text
        self.source_name = source_name
        self.lines = text.split("\n")
        self.pos = 0
        self.line = 1
        self.column = 1

    def error(self, message: str, line: int, column: int) -> ConfigParseError:
        fragment = self.lines[line - 1] if 0 < line <= len(self.lines) else ""
        return ConfigParseError(message, line, column, fragment, self.source_name)

    def tokens(self) -> list[Token]:
        result = []
        while True:
            token = self._next()
            result.append(token)
            if token.type is TokenType.EOF:
                return result

    def _advance(self, count: int = 1) -> str:
        chunk = self.text[self.pos : self.pos + count]
        for char in chunk:
            if char == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.pos += count
        return chunk

    def _next(self) -> Token:
        text = self.text
        while self.pos < len(text) and text[self.pos] in " \t\r\f\ufeff":
            self._advance()

        line, column = self.line, self.column
        if self.pos >= len(text):
            return Token(TokenType.EOF, "", line, column)

        char = text[self.pos]
        if char == "\n":
            self._advance()
            return Token(TokenType.NEWLINE, "\n", line, column)
        if char == "#" or text.startswith("//", self.pos):
            end = text.find("\n", self.pos)
            if end < 0:
                end = len(text)
            comment = self._advance(end - self.pos)
            return Token(TokenType.COMMENT, comment, line, column)

        if char in _PUNCTUATION:
            self._advance()
            return Token(_PUNCTUATION[char], char, line, column)

        if char == '"':
            return self._string(line, column)
        if char == "$":
            return self._env(line, column)
        if char.isdigit() or (char in "+-" and text[self.pos + 1 : self.pos + 2].isdigit()):
            return self._number(line, column)
        if _IDENT_START.match(char):
            word = _IDENT.match(text, self.pos).group(0)
            self._advance(len(word))
            lowered = word.lower()
            if lowered in ("true", "false"):
                return Token(TokenType.BOOL, word, line, column, lowered == "true")
            if lowered == "null":
                return Token(TokenType.NULL, word, line, column)
            return Token(TokenType.IDENT, word, line, column)

        raise self.error(f"unexpected character '{char}'", line, column)

    def _string(self, line: int, column: int) -> Token:
        self._advance()
        chars = []
        while True:
            if self.pos >= len(self.text) or self.text[self.pos] == "\n":
                raise self.error("unterminated string", line, column)
            char = self._advance()
            if char == '"':
                break
            if char != "\\":
                chars.append(char)
                continue

            if self.pos >= len(self.text):
                raise self.error("unterminated string", line, column)
            escape = self._advance()
            if escape in _ESCAPES:
                chars.append(_ESCAPES[escape])
            elif escape == "u":
                digits = self.text[self.pos : self.pos + 4]
                if not re.fullmatch(r"[0-9A-Fa-f]{4}", digits):
                    raise self.error(f"invalid unicode escape '\\u{digits}'", self.line, self.column)
                self._advance(4)
                chars.append(chr(int(digits, 16)))
            else:
                raise self.error(f"invalid escape sequence '\\{escape}'", self.line, self.column - 2)
        value = "".join(chars)
        return Token(TokenType.STRING, value, line, column, value)

    def _env(self, line: int, column: int) -> Token:
        match = _ENV.match(self.text, self.pos)
        if match is None:
            raise self.error("invalid environment reference", line, column)
        self._advance(len(match.group(0)))
        return Token(TokenType.ENV, match.group(0), line, column, match.group(1) or match.group(2))

    def _number(self, line: int, column: int) -> Token:
        start = self.pos
        self._advance()
        word = self.text[start] + _NUMBER_CHARS.match(self.text, self.pos).group(0)
        self._advance(len(word) - 1)
        if _INT.fullmatch(word):
            return Token(TokenType.INT, word, line, column, int(word))
        if _FLOAT.fullmatch(word):
            value = float(word)
            if not math.isfinite(value):
                raise self.error(f"number out of range '{word}'", line, column)
            return Token(TokenType.FLOAT, word, line, column, value)
        raise self.error(f"invalid number '{word}'", line, column)


class Parser:
    """Recursive-descent parser building a Tree from configuration text.

    Args:
        text: Source text
        source_name: Name used in error messages
        base_dir: Directory include paths are resolved against (cwd when None)
    """

    def __init__(
        self,
        text: str,
        source_name: str = "<string>",
        base_dir: str | Path | None = None,
        _including: tuple[Path, ...] = (),
        _depth: int = 0,
    ):
        self.lexer = Lexer(text, source_name)
        self.source_name = source_name
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self._including = _including
        self._depth = _depth
        self._tokens: list[Token] = []
        self._index = 0

    def parse(self) -> Tree:
        tree = Tree()
        self.parse_into(tree.root)
        return tree

    def parse_into(self, section: Node) -> None:
        """Parse the whole text into an existing section node."""
        self._tokens = self.lexer.tokens()
        self._index = 0
        self._statements(section, closing=None)

    # ===== Grammar =====

    def _statements(self, section: Node, closing: TokenType | None) -> None:
        while True:
            token = self._peek()
            if token.type in (TokenType.NEWLINE, TokenType.SEMICOLON, TokenType.COMMENT):
                self._take()
            elif token.type is closing:
                self._take()
                return
            elif token.type is TokenType.EOF:
                if closing is not None:
                    raise self._error("unexpected end of input, expected '}'", token)
                return
            elif token.type is TokenType.IDENT:
                self._statement(section)
            else:
                raise self._error(f"expected key, found {self._describe(token)}", token)

    def _statement(self, section: Node) -> None:
        key = self._take()
        if key.text == "include" and self._peek().type is TokenType.STRING:
            self._include(section, self._take())
            self._terminator()
            return

        if key.text.startswith(".") or key.text.endswith(".") or ".." in key.text:
            raise self._error(f"invalid key '{key.text}'", key)

        if self._peek().type is TokenType.ASSIGN:
            self._take()

        if self._peek().type is TokenType.LBRACE:
            self._enter(self._take())
            target = self._section_for(section, key)
            self._statements(target, closing=TokenType.RBRACE)
            self._depth -= 1
            return

        value = self._value()
        self._terminator()
        parent, name = self._parent_for(section, key)
        parent.value[name] = value

    def _value(self) -> Node:
        token = self._take()
        if token.type is TokenType.STRING:
            return Node(NodeKind.STRING, token.value)
        if token.type is TokenType.INT:
            return Node(NodeKind.INT, token.value)
        if token.type is TokenType.FLOAT:
            return Node(NodeKind.FLOAT, token.value)
        if token.type is TokenType.BOOL:
            return Node(NodeKind.BOOL, token.value)
        if token.type is TokenType.NULL:
            return Node.null()
        if token.type is TokenType.ENV:
            value = os.environ.get(token.value)
            if value is None:
                raise self._error(f"environment variable '{token.value}' is not set", token)
            return Node(NodeKind.STRING, value)
        if token.type is TokenType.LBRACKET:
            self._enter(token)
            node = self._list(token)
            self._depth -= 1
            return node
        raise self._error(f"expected value, found {self._describe(token)}", token)

    def _list(self, opening: Token) -> Node:
        items: list[Node] = []
        expect_value = True
        while True:
            token = self._peek()
            if token.type in (TokenType.NEWLINE, TokenType.COMMENT):
                self._take()
            elif token.type is TokenType.RBRACKET:
                self._take()
                return Node(NodeKind.LIST, items)
            elif token.type is TokenType.EOF:
                raise self._error("unterminated list", opening)
            elif token.type is TokenType.COMMA:
                if expect_value:
                    raise self._error("unexpected ',' in list", token)
                self._take()
                expect_value = True
            elif expect_value:
                items.append(self._value())
                expect_value = False
            else:
                raise self._error(f"expected ',' or ']' in list, found {self._describe(token)}", token)

    def _terminator(self) -> None:
        token = self._peek()
        if token.type in (TokenType.SEMICOLON, TokenType.NEWLINE):
            self._take()
        elif token.type in (TokenType.RBRACE, TokenType.EOF):
            pass
        elif token.type is TokenType.COMMENT:
            raise self._error(f"expected ';' before comment '{token.text}'", token)
        else:
            raise self._error(f"expected ';' or newline, found {self._describe(token)}", token)

    def _include(self, section: Node, name: Token) -> None:
        path = (self.base_dir / name.value).resolve()
        if path in self._including:
            raise self._error(f"include cycle detected: '{name.value}'", name)
        if len(self._including) >= MAX_INCLUDE_DEPTH:
            raise self._error("includes nested too deeply", name)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise self._error(f"does not exists: {path}", name) from e
        except UnicodeDecodeError as e:
            raise self._error(f"not valid UTF-8 text: {path}", name) from e

        logger.debug(f"Including {path} from {self.source_name}")
        parser = Parser(text, str(path), path.parent, self._including + (path,), self._depth + 1)
        parser.parse_into(section)

    # ===== Private Helpers =====

    def _enter(self, token: Token) -> None:
        self._depth += 1
        if self._depth > MAX_NESTING_DEPTH:
            raise self._error("nesting too deep", token)

    def _section_for(self, section: Node, key: Token) -> Node:
        # a repeated section block continues the earlier one
        parent, name = self._parent_for(section, key)
        existing = parent.value.get(name)
        if existing is not None and existing.is_section:
            return existing
        child = Node.section()
        parent.value[name] = child
        return child

    def _parent_for(self, section: Node, key: Token) -> tuple[Node, str]:
        *parents, name = key.text.split(".")
        current = section
        for part in parents:
            child = current.value.get(part)
            if child is None or not child.is_section:
                child = Node.section()
                current.value[part] = child
            current = child
        return current, name

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _take(self) -> Token:
        token = self._tokens[self._index]
        if token.type is not TokenType.EOF:
            self._index += 1
        return token

    def _describe(self, token: Token) -> str:
        if token.type in (TokenType.NEWLINE, TokenType.EOF) or token.type.value.startswith("'"):
            return token.type.value
        return f"{token.type.value} '{token.text}'"

    def _error(self, message: str, token: Token) -> ConfigParseError:
        return self.lexer.error(message, token.line, token.column)


def parse(text: str, source_name: str = "<string>", base_dir: str | Path | None = None) -> Tree:
    """Parse configuration text into a Tree.

    Raises:
        ConfigParseError: If the text is malformed
    """
    return Parser(text, source_name, base_dir).parse()
