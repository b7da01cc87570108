"""Literal reader: pulls one literal of a required category off the cursor.

Integer and string slots also accept an identifier naming a constant from
the slot's symbol table, provided the constant has the required category.
"""

from __future__ import annotations

import os
from typing import List, Optional

from ..errors import (
    E_BITMASK_SYNTAX,
    E_EXPECTED_LITERAL,
    E_SYMBOL_TYPE,
    E_TEXT_ENCODING,
    E_VALUE_RANGE,
    grammar_error,
    value_error,
)
from ..lexer.cursor import TokenCursor, expect_true
from ..lexer.tokens import Lexeme, Token
from ..types.primitives import RECT_COMPONENTS, PrimitiveKind, int_range
from ..types.templates import ValueSlot

__all__ = ["DEFAULT_TEXT_ENCODING", "text_encoding", "LiteralReader"]

DEFAULT_TEXT_ENCODING = "mac_roman"


def text_encoding() -> str:
    return os.getenv("RSRCGEN_TEXT_ENCODING") or DEFAULT_TEXT_ENCODING


class LiteralReader:
    def __init__(
        self,
        cursor: TokenCursor,
        field_name: Token,
        *,
        encoding: Optional[str] = None,
    ):
        self.cursor = cursor
        self.field_name = field_name
        self.encoding = encoding or text_encoding()

    @property
    def field(self) -> str:
        return self.field_name.text

    def _fail_expected(self, what: str):
        tok = self.cursor.peek()
        return grammar_error(
            E_EXPECTED_LITERAL,
            f"Expected {what} for field '{self.field}'.",
            tok.position,
            {"found": tok.text},
        )

    def check_range(self, value: int, kind: PrimitiveKind, token: Token) -> int:
        lo, hi = int_range(kind)
        if not lo <= value <= hi:
            raise value_error(
                E_VALUE_RANGE,
                f"Value {value} is outside the range of {kind.value} "
                f"({lo}..{hi}) for field '{self.field}'.",
                token.position,
            )
        return value

    def encode_text(self, text: str, token: Token) -> bytes:
        try:
            return text.encode(self.encoding, errors="surrogateescape")
        except UnicodeEncodeError as e:
            raise value_error(
                E_TEXT_ENCODING,
                f"String for field '{self.field}' cannot be encoded as "
                f"{self.encoding}: {e.reason}.",
                token.position,
            ) from None

    # Integers ---------------------------------------------------------------
    def integer(self, slot: ValueSlot, kind: PrimitiveKind) -> int:
        if self.cursor.expect([expect_true(Lexeme.INTEGER)]):
            tok = self.cursor.read()
            return self.check_range(tok.int_value(), kind, tok)
        if self.cursor.expect([expect_true(Lexeme.IDENTIFIER)]):
            tok = self.cursor.read()
            value = slot.value_for(tok)
            if isinstance(value, bool) or not isinstance(value, int):
                raise value_error(
                    E_SYMBOL_TYPE,
                    f"Type mismatch for '{tok.text}': field '{self.field}' "
                    "expects an integer.",
                    tok.position,
                )
            return self.check_range(value, kind, tok)
        raise self._fail_expected("an integer literal")

    def resource_id(self, kind: PrimitiveKind) -> int:
        if not self.cursor.expect([expect_true(Lexeme.RES_ID)]):
            tok = self.cursor.peek()
            raise grammar_error(
                E_EXPECTED_LITERAL,
                f"The field '{self.field}' expects a resource id.",
                tok.position,
                {"found": tok.text},
            )
        tok = self.cursor.read()
        return self.check_range(tok.int_value(), kind, tok)

    def rect(self) -> List[int]:
        if not self.cursor.expect(
            [expect_true(Lexeme.INTEGER)] * RECT_COMPONENTS
        ):
            raise self._fail_expected(f"{RECT_COMPONENTS} integer literals")
        out: List[int] = []
        for _ in range(RECT_COMPONENTS):
            tok = self.cursor.read()
            out.append(
                self.check_range(tok.int_value(), PrimitiveKind.RECT, tok)
            )
        return out

    # Strings ----------------------------------------------------------------
    def string_token(self) -> Token:
        """Require a string literal token (used by the file directives)."""
        if not self.cursor.expect([expect_true(Lexeme.STRING)]):
            raise self._fail_expected("a string literal")
        return self.cursor.read()

    def string(self, slot: ValueSlot) -> bytes:
        if self.cursor.expect([expect_true(Lexeme.STRING)]):
            tok = self.cursor.read()
            return self.encode_text(tok.value, tok)
        if self.cursor.expect([expect_true(Lexeme.IDENTIFIER)]):
            tok = self.cursor.read()
            value = slot.value_for(tok)
            if not isinstance(value, str):
                raise value_error(
                    E_SYMBOL_TYPE,
                    f"Type mismatch for '{tok.text}': field '{self.field}' "
                    "expects a string.",
                    tok.position,
                )
            return self.encode_text(value, tok)
        raise self._fail_expected("a string literal")

    # Bitmask terms ------------------------------------------------------------
    def mask_term(self, slot: ValueSlot) -> int:
        if self.cursor.expect([expect_true(Lexeme.INTEGER)]):
            return self.cursor.read().int_value()
        if self.cursor.expect([expect_true(Lexeme.IDENTIFIER)]):
            symbol = self.cursor.read()
            value = slot.value_for(symbol)
            if isinstance(value, bool) or not isinstance(value, int):
                raise value_error(
                    E_SYMBOL_TYPE,
                    f"Type mismatch for '{symbol.text}' in bitmask.",
                    symbol.position,
                )
            return value
        tok = self.cursor.peek()
        raise grammar_error(
            E_BITMASK_SYNTAX,
            f"Unexpected lexeme encountered in bitmask: {tok.describe()}",
            tok.position,
        )
