"""Lexeme kinds, source positions and tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional

__all__ = ["Lexeme", "SourcePosition", "Token"]


class Lexeme(Enum):
    IDENTIFIER = auto()
    INTEGER = auto()  # 42, -7, 0x2A, $2A
    RES_ID = auto()  # #128
    STRING = auto()  # "text", value holds the unescaped text
    L_PAREN = auto()
    R_PAREN = auto()
    L_BRACE = auto()
    R_BRACE = auto()
    EQUALS = auto()
    SEMI = auto()
    COMMA = auto()
    PIPE = auto()
    EOF = auto()


@dataclass(frozen=True, slots=True)
class SourcePosition:
    """1-based line and column, 0-based character offset."""

    path: Optional[str]
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.path or '<input>'}:{self.line}:{self.column}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "offset": self.offset,
        }


@dataclass(frozen=True, slots=True)
class Token:
    lexeme: Lexeme
    text: str
    position: SourcePosition
    value: Any = None

    def is_(self, lexeme: Lexeme, text: str | None = None) -> bool:
        if self.lexeme is not lexeme:
            return False
        return text is None or self.text == text

    def int_value(self) -> int:
        if self.lexeme not in (Lexeme.INTEGER, Lexeme.RES_ID):
            raise TypeError(f"{self.lexeme.name} token has no integer value")
        return int(self.value)

    def describe(self) -> str:
        if self.lexeme is Lexeme.EOF:
            return "end of input"
        return f"'{self.text}'"
