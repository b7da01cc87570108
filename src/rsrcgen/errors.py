"""Error definitions for rsrcgen.

Every error is fatal to the current compilation unit. Errors carry the
offending source position (when one is known) and a machine readable code.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .lexer.tokens import SourcePosition

# Grammar
E_LEX = "E_LEX"
E_UNEXPECTED_TOKEN = "E_UNEXPECTED_TOKEN"
E_EXPECTED_FIELD_NAME = "E_EXPECTED_FIELD_NAME"
E_EXPECTED_LITERAL = "E_EXPECTED_LITERAL"
E_BITMASK_SYNTAX = "E_BITMASK_SYNTAX"
# Template
E_TEMPLATE = "E_TEMPLATE"
E_UNKNOWN_TYPE = "E_UNKNOWN_TYPE"
E_UNKNOWN_FIELD = "E_UNKNOWN_FIELD"
E_UNKNOWN_FIELD_TYPE = "E_UNKNOWN_FIELD_TYPE"
E_REFERENCE_BACKING = "E_REFERENCE_BACKING"
E_BITMASK_BACKING = "E_BITMASK_BACKING"
E_FILE_BACKING = "E_FILE_BACKING"
E_UNKNOWN_VALUE_TYPE = "E_UNKNOWN_VALUE_TYPE"
# Value
E_VALUE_RANGE = "E_VALUE_RANGE"
E_STRING_TOO_LARGE = "E_STRING_TOO_LARGE"
E_UNDEFINED_SYMBOL = "E_UNDEFINED_SYMBOL"
E_SYMBOL_TYPE = "E_SYMBOL_TYPE"
E_DUP_RESOURCE_ID = "E_DUP_RESOURCE_ID"
E_DUPLICATE_VALUE = "E_DUPLICATE_VALUE"
E_TEXT_ENCODING = "E_TEXT_ENCODING"
# Unsupported
E_UNSUPPORTED = "E_UNSUPPORTED"
# Resource
E_FILE_MISSING = "E_FILE_MISSING"
E_FILE_TOO_LARGE = "E_FILE_TOO_LARGE"
E_FILE_UNREADABLE = "E_FILE_UNREADABLE"
E_PATH_ESCAPE = "E_PATH_ESCAPE"
E_WRITE_IO = "E_WRITE_IO"
E_INTERNAL = "E_INTERNAL"


@dataclass
class RsrcError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None
    position: Optional["SourcePosition"] = None

    def __str__(self) -> str:  # pragma: no cover
        where = f"{self.position}: " if self.position is not None else ""
        return f"{where}{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
            "position": (
                self.position.to_dict() if self.position is not None else None
            ),
        }


class GrammarError(RsrcError):
    pass


class TemplateError(RsrcError):
    pass


class ValueEncodingError(RsrcError):
    pass


class UnsupportedFeatureError(RsrcError):
    pass


class ResourceError(RsrcError):
    pass


def grammar_error(
    code: str, message: str, position=None, context=None
) -> GrammarError:
    return GrammarError(
        code=code, message=message, context=context, position=position
    )


def template_error(
    code: str, message: str, position=None, context=None
) -> TemplateError:
    return TemplateError(
        code=code, message=message, context=context, position=position
    )


def value_error(
    code: str, message: str, position=None, context=None
) -> ValueEncodingError:
    return ValueEncodingError(
        code=code, message=message, context=context, position=position
    )


def internal_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> RsrcError:
    return RsrcError(code=E_INTERNAL, message=message, context=context)


__all__ = [
    "RsrcError",
    "GrammarError",
    "TemplateError",
    "ValueEncodingError",
    "UnsupportedFeatureError",
    "ResourceError",
    "grammar_error",
    "template_error",
    "value_error",
    "internal_error",
    "E_LEX",
    "E_UNEXPECTED_TOKEN",
    "E_EXPECTED_FIELD_NAME",
    "E_EXPECTED_LITERAL",
    "E_BITMASK_SYNTAX",
    "E_TEMPLATE",
    "E_UNKNOWN_TYPE",
    "E_UNKNOWN_FIELD",
    "E_UNKNOWN_FIELD_TYPE",
    "E_REFERENCE_BACKING",
    "E_BITMASK_BACKING",
    "E_FILE_BACKING",
    "E_UNKNOWN_VALUE_TYPE",
    "E_VALUE_RANGE",
    "E_STRING_TOO_LARGE",
    "E_UNDEFINED_SYMBOL",
    "E_SYMBOL_TYPE",
    "E_DUP_RESOURCE_ID",
    "E_DUPLICATE_VALUE",
    "E_TEXT_ENCODING",
    "E_UNSUPPORTED",
    "E_FILE_MISSING",
    "E_FILE_TOO_LARGE",
    "E_FILE_UNREADABLE",
    "E_PATH_ESCAPE",
    "E_WRITE_IO",
    "E_INTERNAL",
]
