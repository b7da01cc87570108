"""Field directive resolution.

A field's template either names an explicit directive (a resource
reference, ``File``, ``Picture``, ``Sprite``, ``ColorIcon`` or ``Bitmask``)
or has none, in which case every value slot is read positionally and typed
by its backing primitive. Each directive consumes exactly the tokens of one
field value and writes into the resource encoder.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, Optional

from ..errors import (
    E_BITMASK_BACKING,
    E_BITMASK_SYNTAX,
    E_FILE_BACKING,
    E_REFERENCE_BACKING,
    E_STRING_TOO_LARGE,
    E_UNKNOWN_FIELD_TYPE,
    E_UNKNOWN_VALUE_TYPE,
    E_UNSUPPORTED,
    ResourceError,
    RsrcError,
    UnsupportedFeatureError,
    grammar_error,
    template_error,
    value_error,
)
from ..lexer.cursor import TokenCursor, expect_true
from ..lexer.tokens import Lexeme, SourcePosition, Token
from ..logging import get_logger
from ..types.primitives import (
    PSTR_MAX_LENGTH,
    UNSIGNED_KINDS,
    PrimitiveKind,
    PrimitiveType,
    StringKind,
)
from ..types.templates import FieldTemplate, ValueSlot
from ..utils.io import FileLoader
from ..utils.paths import SourceRootResolver
from .encoder import ResourceEncoder
from .reader import LiteralReader

if TYPE_CHECKING:  # pragma: no cover
    from ..types.registry import TypeTemplateRegistry

__all__ = ["FieldDirective", "FieldContext", "FieldDirectiveResolver"]

_MASK64 = (1 << 64) - 1


class FieldDirective(Enum):
    REFERENCE = "Reference"
    FILE = "File"
    PICTURE = "Picture"
    SPRITE = "Sprite"
    COLOR_ICON = "ColorIcon"
    BITMASK = "Bitmask"
    NONE = ""

    @classmethod
    def for_field(
        cls, template: FieldTemplate, position: SourcePosition | None = None
    ) -> "FieldDirective":
        explicit = template.explicit_type
        if explicit is None:
            return cls.NONE
        if explicit.is_reference:
            return cls.REFERENCE
        for directive in cls:
            if directive not in (cls.REFERENCE, cls.NONE) and (
                directive.value == explicit.tag
            ):
                return directive
        raise template_error(
            E_UNKNOWN_FIELD_TYPE,
            f"Unknown field type: '{explicit.tag}'",
            position,
            {"field": template.name},
        )


@dataclass(slots=True)
class FieldContext:
    field_name: Token
    template: FieldTemplate
    encoder: ResourceEncoder
    cursor: TokenCursor
    reader: LiteralReader

    @property
    def name(self) -> str:
        return self.field_name.text


class FieldDirectiveResolver:
    def __init__(
        self,
        registry: "TypeTemplateRegistry",
        source_root: Optional[SourceRootResolver] = None,
        loader: Optional[FileLoader] = None,
        *,
        encoding: Optional[str] = None,
    ):
        self.registry = registry
        self.source_root = source_root or SourceRootResolver(Path.cwd())
        self.loader = loader or FileLoader()
        self.encoding = encoding

    def resolve(
        self,
        field_name: Token,
        template: FieldTemplate,
        encoder: ResourceEncoder,
        cursor: TokenCursor,
    ) -> FieldDirective:
        directive = FieldDirective.for_field(
            template, cursor.peek().position
        )
        ctx = FieldContext(
            field_name=field_name,
            template=template,
            encoder=encoder,
            cursor=cursor,
            reader=LiteralReader(cursor, field_name, encoding=self.encoding),
        )
        get_logger().debug(
            "field %s: directive=%s", ctx.name, directive.name.lower()
        )
        try:
            _HANDLERS[directive](self, ctx)
        except RsrcError as e:
            if e.position is None:
                e.position = field_name.position
            raise
        return directive

    def _backing(self, slot: ValueSlot) -> PrimitiveType:
        return self.registry.template_field_named(slot.name)[1]

    def _check_length(
        self, ctx: FieldContext, data: bytes, limit: int
    ) -> bytes:
        if len(data) > limit:
            raise value_error(
                E_STRING_TOO_LARGE,
                "String too large for value type.",
                ctx.field_name.position,
                {"field": ctx.name, "length": len(data), "limit": limit},
            )
        return data

    # Reference ---------------------------------------------------------------
    def _reference(self, ctx: FieldContext) -> None:
        slot = ctx.template.value_at(0)
        backing = self._backing(slot)
        if backing.kind is PrimitiveKind.DWRD:
            ctx.encoder.write_signed_short(
                slot, ctx.reader.resource_id(backing.kind)
            )
        elif backing.kind is PrimitiveKind.DQAD:
            ctx.encoder.write_signed_quad(
                slot, ctx.reader.resource_id(backing.kind)
            )
        else:
            raise template_error(
                E_REFERENCE_BACKING,
                "Resource Reference field should be backed by either a "
                "DWRD or DQAD value.",
                ctx.field_name.position,
                {"field": ctx.name, "backing": str(backing)},
            )

    # File --------------------------------------------------------------------
    def _file(self, ctx: FieldContext) -> None:
        import_file = False
        if ctx.cursor.expect([expect_true(Lexeme.IDENTIFIER, "import")]):
            ctx.cursor.advance()
            import_file = True
        tok = ctx.reader.string_token()
        if import_file:
            data = self._import(tok)
        else:
            data = ctx.reader.encode_text(tok.value, tok)

        slot = ctx.template.value_at(0)
        backing = self._backing(slot)
        sk = backing.string_kind
        if sk is StringKind.PASCAL:
            ctx.encoder.write_pstr(
                slot, self._check_length(ctx, data, PSTR_MAX_LENGTH)
            )
        elif sk is StringKind.C:
            ctx.encoder.write_cstr(slot, data)
        elif sk is StringKind.RAW:
            ctx.encoder.write_data(slot, data)
        elif sk is StringKind.FIXED:
            ctx.encoder.write_cstr(
                slot, self._check_length(ctx, data, backing.size), backing.size
            )
        else:
            raise template_error(
                E_FILE_BACKING,
                f"Unsupported value type for field '{ctx.name}' with a type "
                "'File'.",
                ctx.field_name.position,
                {"backing": str(backing)},
            )

    def _import(self, tok: Token) -> bytes:
        try:
            path = self.source_root.resolve_src_path(tok.value)
            data = self.loader.contents(path)
        except ResourceError as e:
            if e.position is None:
                e.position = tok.position
            raise
        get_logger().debug("imported %s (%d bytes)", path, len(data))
        return data

    # Picture / Sprite / ColorIcon ---------------------------------------------
    def _unsupported_image(self, ctx: FieldContext, label: str) -> None:
        path_tok = ctx.reader.string_token()
        raise UnsupportedFeatureError(
            code=E_UNSUPPORTED,
            message=f"{label} types are not currently supported.",
            context={"field": ctx.name, "path": path_tok.value},
            position=path_tok.position,
        )

    def _picture(self, ctx: FieldContext) -> None:
        self._unsupported_image(ctx, "Picture")

    def _sprite(self, ctx: FieldContext) -> None:
        self._unsupported_image(ctx, "Sprite")

    def _color_icon(self, ctx: FieldContext) -> None:
        self._unsupported_image(ctx, "ColorIcon")

    # Bitmask -----------------------------------------------------------------
    def _bitmask(self, ctx: FieldContext) -> None:
        if ctx.template.value_count != 1:
            raise template_error(
                E_BITMASK_BACKING,
                f"The field '{ctx.name}' should have only one value due to "
                "it being a 'Bitmask'.",
                ctx.field_name.position,
            )
        slot = ctx.template.value_at(0)
        backing = self._backing(slot)
        if backing.kind not in UNSIGNED_KINDS:
            raise template_error(
                E_BITMASK_BACKING,
                f"The field '{ctx.name}' must be backed by either a HBYT, "
                "HWRD, HLNG or HQAD value.",
                ctx.field_name.position,
                {"backing": str(backing)},
            )

        semi = [expect_true(Lexeme.SEMI)]
        mask = 0
        if not ctx.cursor.expect(semi):
            mask |= ctx.reader.mask_term(slot) & _MASK64
            while ctx.cursor.expect([expect_true(Lexeme.PIPE)]):
                ctx.cursor.advance()
                mask |= ctx.reader.mask_term(slot) & _MASK64
            if not ctx.cursor.expect(semi):
                tok = ctx.cursor.peek()
                raise grammar_error(
                    E_BITMASK_SYNTAX,
                    f"Malformed bitmask for field '{ctx.name}': expected "
                    f"'|' or ';' but found {tok.describe()}.",
                    tok.position,
                )

        width_mask = (1 << (backing.width * 8)) - 1
        ctx.encoder.write_integer(slot, backing.kind, mask & width_mask)

    # Positional inference ------------------------------------------------------
    def _positional(self, ctx: FieldContext) -> None:
        for slot in ctx.template.values:
            self._positional_slot(ctx, slot, self._backing(slot))

    def _positional_slot(
        self, ctx: FieldContext, slot: ValueSlot, backing: PrimitiveType
    ) -> None:
        kind = backing.kind
        if backing.is_integer:
            ctx.encoder.write_integer(
                slot, kind, ctx.reader.integer(slot, kind)
            )
        elif kind is PrimitiveKind.PSTR:
            data = ctx.reader.string(slot)
            ctx.encoder.write_pstr(
                slot, self._check_length(ctx, data, PSTR_MAX_LENGTH)
            )
        elif kind is PrimitiveKind.CSTR:
            ctx.encoder.write_cstr(slot, ctx.reader.string(slot))
        elif kind is PrimitiveKind.CXXX:
            data = ctx.reader.string(slot)
            ctx.encoder.write_cstr(
                slot, self._check_length(ctx, data, backing.size), backing.size
            )
        elif kind is PrimitiveKind.RECT:
            ctx.encoder.write_rect(slot, *ctx.reader.rect())
        elif kind is PrimitiveKind.HEXD:
            raise UnsupportedFeatureError(
                code=E_UNSUPPORTED,
                message=f"The 'HEXD' type is not directly supported for "
                f"field '{ctx.name}'.",
                position=ctx.cursor.peek().position,
            )
        else:
            raise template_error(
                E_UNKNOWN_VALUE_TYPE,
                f"Unknown type encountered in field '{ctx.name}'.",
                ctx.cursor.peek().position,
                {"value": slot.name},
            )


_HANDLERS: Dict[
    FieldDirective, Callable[[FieldDirectiveResolver, FieldContext], None]
] = {
    FieldDirective.REFERENCE: FieldDirectiveResolver._reference,
    FieldDirective.FILE: FieldDirectiveResolver._file,
    FieldDirective.PICTURE: FieldDirectiveResolver._picture,
    FieldDirective.SPRITE: FieldDirectiveResolver._sprite,
    FieldDirective.COLOR_ICON: FieldDirectiveResolver._color_icon,
    FieldDirective.BITMASK: FieldDirectiveResolver._bitmask,
    FieldDirective.NONE: FieldDirectiveResolver._positional,
}
