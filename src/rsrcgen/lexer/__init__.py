from .tokens import Lexeme, SourcePosition, Token
from .lexer import tokenize, unescape_string
from .cursor import Expectation, TokenCursor, expect_false, expect_true

__all__ = [
    "Lexeme",
    "SourcePosition",
    "Token",
    "tokenize",
    "unescape_string",
    "Expectation",
    "TokenCursor",
    "expect_true",
    "expect_false",
]
