"""Token cursor with expectation based lookahead.

An :class:`Expectation` describes one token shape. ``expect`` tests a
sequence of expectations against the upcoming tokens without consuming
anything; ``ensure`` consumes the sequence or raises a grammar error at the
first token that does not match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..errors import E_UNEXPECTED_TOKEN, grammar_error
from .tokens import Lexeme, Token

__all__ = [
    "Expectation",
    "expect_true",
    "expect_false",
    "TokenCursor",
]


@dataclass(frozen=True, slots=True)
class Expectation:
    lexeme: Lexeme
    text: Optional[str] = None
    expected: bool = True

    def matches(self, token: Token) -> bool:
        return token.is_(self.lexeme, self.text) == self.expected

    def describe(self) -> str:
        shape = f"'{self.text}'" if self.text else self.lexeme.name.lower()
        return shape if self.expected else f"anything but {shape}"


def expect_true(lexeme: Lexeme, text: str | None = None) -> Expectation:
    return Expectation(lexeme, text, True)


def expect_false(lexeme: Lexeme, text: str | None = None) -> Expectation:
    return Expectation(lexeme, text, False)


class TokenCursor:
    def __init__(self, tokens: Sequence[Token]):
        if not tokens or tokens[-1].lexeme is not Lexeme.EOF:
            raise ValueError("token stream must end with an EOF token")
        self._tokens: List[Token] = list(tokens)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def finished(self) -> bool:
        return self.peek().lexeme is Lexeme.EOF

    def peek(self, offset: int = 0) -> Token:
        idx = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[idx]

    def expect(self, expectations: Sequence[Expectation]) -> bool:
        return all(
            exp.matches(self.peek(i)) for i, exp in enumerate(expectations)
        )

    def ensure(self, expectations: Sequence[Expectation]) -> List[Token]:
        for i, exp in enumerate(expectations):
            tok = self.peek(i)
            if not exp.matches(tok):
                raise grammar_error(
                    E_UNEXPECTED_TOKEN,
                    f"Expected {exp.describe()} but found {tok.describe()}.",
                    tok.position,
                )
        return [self.read() for _ in expectations]

    def read(self) -> Token:
        tok = self.peek()
        self.advance()
        return tok

    def advance(self, count: int = 1) -> None:
        self._pos = min(self._pos + count, len(self._tokens) - 1)

