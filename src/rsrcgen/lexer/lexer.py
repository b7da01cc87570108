"""Regex driven tokenizer for resource scripts."""

from __future__ import annotations

import re
from typing import Iterator, List, Optional

from ..errors import E_LEX, grammar_error
from .tokens import Lexeme, SourcePosition, Token

__all__ = ["tokenize", "unescape_string"]

_TOKEN_SPEC = [
    ("WS", r"[ \t\r\n]+"),
    ("LINE_COMMENT", r"//[^\n]*"),
    ("BLOCK_COMMENT", r"/\*.*?\*/"),
    ("STRING", r'"(?:[^"\\\n]|\\.)*"'),
    ("RES_ID", r"#-?[0-9]+"),
    ("INTEGER", r"-?(?:0[xX][0-9A-Fa-f]+|\$[0-9A-Fa-f]+|[0-9]+)"),
    ("IDENTIFIER", r"[A-Za-z_][A-Za-z0-9_]*"),
    ("L_PAREN", r"\("),
    ("R_PAREN", r"\)"),
    ("L_BRACE", r"\{"),
    ("R_BRACE", r"\}"),
    ("EQUALS", r"="),
    ("SEMI", r";"),
    ("COMMA", r","),
    ("PIPE", r"\|"),
]
_MASTER = re.compile(
    "|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC),
    re.DOTALL,
)
_SKIP = {"WS", "LINE_COMMENT", "BLOCK_COMMENT"}

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
}
_ESCAPE_RE = re.compile(r"\\(x[0-9A-Fa-f]{2}|.)")


def unescape_string(body: str) -> str:
    """Resolve backslash escapes in a string literal body.

    ``\\xHH`` stands for the raw byte HH in the encoded output. Bytes above
    0x7F are kept as lone surrogates (the ``surrogateescape`` convention) so
    the text encoding does not remap them.
    """

    def _sub(m: re.Match[str]) -> str:
        esc = m.group(1)
        if esc.startswith("x") and len(esc) == 3:
            byte = int(esc[1:], 16)
            return chr(byte) if byte < 0x80 else chr(0xDC00 + byte)
        return _ESCAPES.get(esc, esc)

    return _ESCAPE_RE.sub(_sub, body)


def _parse_integer(text: str) -> int:
    negative = text.startswith("-")
    digits = text[1:] if negative else text
    if digits[:2].lower() == "0x":
        value = int(digits[2:], 16)
    elif digits.startswith("$"):
        value = int(digits[1:], 16)
    else:
        value = int(digits, 10)
    return -value if negative else value


def _iter_tokens(source: str, path: Optional[str]) -> Iterator[Token]:
    line = 1
    line_start = 0
    pos = 0
    length = len(source)
    while pos < length:
        m = _MASTER.match(source, pos)
        if m is None:
            where = SourcePosition(path, line, pos - line_start + 1, pos)
            if source.startswith('"', pos):
                raise grammar_error(E_LEX, "Unterminated string literal", where)
            raise grammar_error(
                E_LEX, f"Unexpected character {source[pos]!r}", where
            )
        kind = m.lastgroup
        text = m.group()
        if kind not in _SKIP:
            where = SourcePosition(path, line, pos - line_start + 1, pos)
            lexeme = Lexeme[kind]
            value = None
            if lexeme is Lexeme.STRING:
                value = unescape_string(text[1:-1])
            elif lexeme is Lexeme.INTEGER:
                value = _parse_integer(text)
            elif lexeme is Lexeme.RES_ID:
                value = _parse_integer(text[1:])
            yield Token(lexeme, text, where, value)
        newlines = text.count("\n")
        if newlines:
            line += newlines
            line_start = pos + text.rfind("\n") + 1
        pos = m.end()
    yield Token(
        Lexeme.EOF, "", SourcePosition(path, line, pos - line_start + 1, pos)
    )


def tokenize(source: str, path: Optional[str] = None) -> List[Token]:
    """Tokenize ``source``; the returned list always ends with an EOF token.

    String token values are unescaped; integer and resource id token values
    are Python ints.
    """
    return list(_iter_tokens(source, path))
