import pytest

from rsrcgen.errors import (
    E_DUP_RESOURCE_ID,
    E_TEMPLATE,
    E_UNKNOWN_FIELD,
    E_UNKNOWN_TYPE,
    TemplateError,
    ValueEncodingError,
)
from rsrcgen.lexer import tokenize
from rsrcgen.types.loader import parse_types_dict
from rsrcgen.types.primitives import PrimitiveKind
from rsrcgen.types.registry import FIRST_AUTO_ID, TypeTemplateRegistry

from template_helper import make_registry, types_dict


def _two_types():
    a = types_dict([("x", "DBYT")], name="A", code="AAAA")["types"]
    b = types_dict([("y", "DWRD")], name="B", code="BBBB")["types"]
    return parse_types_dict({"types": a + b})


def test_single_type_is_selected_automatically():
    reg = make_registry([("x", "DBYT")])
    assert reg.active.name == "Test"


def test_multiple_types_need_selection():
    reg = TypeTemplateRegistry(_two_types())
    assert reg.type_names == ["A", "B"]
    with pytest.raises(TemplateError) as ei:
        reg.active
    assert ei.value.code == E_UNKNOWN_TYPE
    assert reg.select("B").code == "BBBB"
    assert TypeTemplateRegistry(_two_types(), active="A").active.name == "A"


def test_unknown_type_selection():
    with pytest.raises(TemplateError) as ei:
        TypeTemplateRegistry(_two_types(), active="C")
    assert ei.value.code == E_UNKNOWN_TYPE


def test_duplicate_type_names():
    types = _two_types()
    with pytest.raises(TemplateError) as ei:
        TypeTemplateRegistry(types + types[:1])
    assert ei.value.code == E_TEMPLATE


def test_field_named_unknown():
    reg = make_registry([("x", "DBYT")])
    tok = tokenize("bogus")[0]
    with pytest.raises(TemplateError) as ei:
        reg.field_named(tok)
    assert ei.value.code == E_UNKNOWN_FIELD
    assert ei.value.message == "The field 'bogus' is not defined by type 'Test'."
    assert ei.value.position == tok.position


def test_template_field_named():
    reg = make_registry(
        [("x", "HBYT")],
        [{"name": "x", "values": [{"name": "x", "symbols": {"on": 1}}]}],
    )
    symbols, ptype = reg.template_field_named("x")
    assert symbols == {"on": 1}
    assert ptype.kind is PrimitiveKind.HBYT
    _, missing = reg.template_field_named("nothing")
    assert missing.kind is PrimitiveKind.NONE


def test_anonymous_ids_fill_lowest_free_slot():
    reg = make_registry([("x", "DBYT")])
    assert reg.resolve_id(FIRST_AUTO_ID + 1) == FIRST_AUTO_ID + 1
    assert reg.resolve_id(None) == FIRST_AUTO_ID
    assert reg.resolve_id(None) == FIRST_AUTO_ID + 2


def test_duplicate_explicit_id():
    reg = make_registry([("x", "DBYT")])
    reg.resolve_id(200)
    with pytest.raises(ValueEncodingError) as ei:
        reg.resolve_id(200)
    assert ei.value.code == E_DUP_RESOURCE_ID


def test_ids_are_tracked_per_type():
    reg = TypeTemplateRegistry(_two_types(), active="A")
    reg.resolve_id(130)
    reg.select("B")
    assert reg.resolve_id(130) == 130
