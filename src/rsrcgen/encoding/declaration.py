"""Resource declaration parsing.

Grammar::

    new ( [ <res-id> , <string> | <res-id> | <string> ] ) {
        ( <identifier> = <value> ; )*
    }

The header id may be written as a resource id (``#128``) or as a plain
integer. Once a field name has been consumed the parser commits to that
field; any failure aborts the whole declaration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from ..errors import (
    E_EXPECTED_FIELD_NAME,
    E_UNEXPECTED_TOKEN,
    grammar_error,
)
from ..lexer.cursor import TokenCursor, expect_false, expect_true
from ..lexer.tokens import Lexeme
from ..logging import get_logger
from .directives import FieldDirectiveResolver
from .encoder import EncodedResource

if TYPE_CHECKING:  # pragma: no cover
    from ..types.registry import TypeTemplateRegistry

__all__ = ["test", "parse_header", "parse_resource", "parse_script"]

_NEW = expect_true(Lexeme.IDENTIFIER, "new")


def test(cursor: TokenCursor) -> bool:
    """True when the cursor sits on the start of a resource declaration."""
    return cursor.expect([_NEW])


def parse_header(cursor: TokenCursor) -> Tuple[Optional[int], Optional[str]]:
    cursor.ensure([_NEW, expect_true(Lexeme.L_PAREN)])

    resource_id: Optional[int] = None
    resource_name: Optional[str] = None
    for id_lexeme in (Lexeme.RES_ID, Lexeme.INTEGER):
        if cursor.expect(
            [
                expect_true(id_lexeme),
                expect_true(Lexeme.COMMA),
                expect_true(Lexeme.STRING),
            ]
        ):
            resource_id = cursor.read().int_value()
            cursor.advance()
            resource_name = cursor.read().value
            break
        if cursor.expect([expect_true(id_lexeme)]):
            resource_id = cursor.read().int_value()
            break
    else:
        if cursor.expect([expect_true(Lexeme.STRING)]):
            resource_name = cursor.read().value

    cursor.ensure([expect_true(Lexeme.R_PAREN)])
    return resource_id, resource_name


def parse_resource(
    cursor: TokenCursor,
    registry: "TypeTemplateRegistry",
    resolver: FieldDirectiveResolver,
) -> EncodedResource:
    logger = get_logger()
    start = cursor.peek().position
    resource_id, resource_name = parse_header(cursor)

    encoder = registry.instantiate_resource(resource_id, resource_name, start)
    cursor.ensure([expect_true(Lexeme.L_BRACE)])

    while cursor.expect([expect_false(Lexeme.R_BRACE)]):
        if not cursor.expect([expect_true(Lexeme.IDENTIFIER)]):
            tok = cursor.peek()
            raise grammar_error(
                E_EXPECTED_FIELD_NAME,
                "Expected an identifier for the field name.",
                tok.position,
                {"found": tok.text},
            )
        field_name = cursor.read()
        field = registry.field_named(field_name)
        cursor.ensure([expect_true(Lexeme.EQUALS)])
        resolver.resolve(field_name, field, encoder, cursor)
        cursor.ensure([expect_true(Lexeme.SEMI)])

    cursor.ensure([expect_true(Lexeme.R_BRACE)])

    resource = encoder.assemble()
    logger.debug(
        "encoded %s #%d '%s' (%d bytes)",
        resource.type_code,
        resource.resource_id,
        resource.name,
        len(resource.data),
    )
    return resource


def parse_script(
    cursor: TokenCursor,
    registry: "TypeTemplateRegistry",
    resolver: FieldDirectiveResolver,
) -> List[EncodedResource]:
    """Parse every declaration up to the end of input."""
    resources: List[EncodedResource] = []
    while not cursor.finished():
        if not test(cursor):
            tok = cursor.peek()
            raise grammar_error(
                E_UNEXPECTED_TOKEN,
                f"Expected a resource declaration but found {tok.describe()}.",
                tok.position,
            )
        resources.append(parse_resource(cursor, registry, resolver))
    return resources
