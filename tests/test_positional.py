import struct

import pytest

from rsrcgen.errors import (
    E_DUPLICATE_VALUE,
    E_EXPECTED_LITERAL,
    E_STRING_TOO_LARGE,
    E_SYMBOL_TYPE,
    E_TEXT_ENCODING,
    E_UNDEFINED_SYMBOL,
    E_UNKNOWN_VALUE_TYPE,
    E_UNSUPPORTED,
    E_VALUE_RANGE,
    GrammarError,
    TemplateError,
    UnsupportedFeatureError,
    ValueEncodingError,
)

from template_helper import encode_one, make_registry


def _encode(kind, value):
    reg = make_registry([("v", kind)])
    return encode_one(f"new(#128) {{ v = {value}; }}", reg).data


@pytest.mark.parametrize(
    "kind,value,expected",
    [
        ("DBYT", -1, b"\xff"),
        ("DWRD", 3, b"\x00\x03"),
        ("DLNG", -2, b"\xff\xff\xff\xfe"),
        ("DQAD", 1, b"\x00" * 7 + b"\x01"),
        ("HBYT", 0xFF, b"\xff"),
        ("HWRD", "0x1234", b"\x12\x34"),
        ("HLNG", "$DEADBEEF", b"\xde\xad\xbe\xef"),
        ("HQAD", 2, b"\x00" * 7 + b"\x02"),
    ],
)
def test_integer_widths(kind, value, expected):
    assert _encode(kind, value) == expected


@pytest.mark.parametrize(
    "kind,value",
    [("DBYT", 128), ("DBYT", -129), ("HBYT", 256), ("HWRD", -1)],
)
def test_integer_out_of_range(kind, value):
    with pytest.raises(ValueEncodingError) as ei:
        _encode(kind, value)
    assert ei.value.code == E_VALUE_RANGE


def test_pstr_limit():
    assert _encode("PSTR", '"' + "a" * 255 + '"') == b"\xff" + b"a" * 255
    with pytest.raises(ValueEncodingError) as ei:
        _encode("PSTR", '"' + "a" * 256 + '"')
    assert ei.value.code == E_STRING_TOO_LARGE
    assert ei.value.message == "String too large for value type."


def test_cstr_is_nul_terminated():
    assert _encode("CSTR", '"hi"') == b"hi\x00"


def test_fixed_string_limit():
    assert _encode("Cxxx(8)", '"abcdefgh"') == b"abcdefgh"
    assert _encode("C008", '"ab"') == b"ab" + b"\x00" * 6
    with pytest.raises(ValueEncodingError) as ei:
        _encode("C008", '"abcdefghi"')
    assert ei.value.code == E_STRING_TOO_LARGE


def test_strings_use_mac_roman_by_default():
    assert _encode("CSTR", '"é"') == b"\x8e\x00"


def test_hex_escapes_are_raw_bytes():
    assert _encode("CSTR", r'"\xA5\x80"') == b"\xa5\x80\x00"
    assert _encode("CSTR", r'"\x41é"') == b"A\x8e\x00"


def test_unencodable_string():
    with pytest.raises(ValueEncodingError) as ei:
        _encode("CSTR", '"中"')
    assert ei.value.code == E_TEXT_ENCODING


def test_rect_in_template_order():
    assert _encode("RECT", "1 2 -3 4") == struct.pack(">4h", 1, 2, -3, 4)


def test_rect_needs_four_integers():
    with pytest.raises(GrammarError) as ei:
        _encode("RECT", "1 2 3")
    assert ei.value.code == E_EXPECTED_LITERAL


def test_hexd_is_unsupported():
    with pytest.raises(UnsupportedFeatureError) as ei:
        _encode("HEXD", '"00ff"')
    assert ei.value.code == E_UNSUPPORTED


def test_unknown_backing_type():
    with pytest.raises(TemplateError) as ei:
        _encode("WHAT", "1")
    assert ei.value.code == E_UNKNOWN_VALUE_TYPE


def test_category_mismatch():
    with pytest.raises(GrammarError) as ei:
        _encode("DWRD", '"text"')
    assert ei.value.message == "Expected an integer literal for field 'v'."
    with pytest.raises(GrammarError):
        _encode("PSTR", "12")


def test_multiple_values_in_one_field():
    reg = make_registry(
        [("w", "DWRD"), ("h", "DWRD"), ("label", "PSTR")],
        [{"name": "size", "values": ["w", "h"]}, "label"],
    )
    res = encode_one('new(#128) { label = "x"; size = 10 20; }', reg)
    assert res.data == b"\x00\x0a\x00\x14\x01x"


def test_unwritten_entries_use_defaults():
    reg = make_registry([("a", "DWRD"), ("b", "PSTR"), ("c", "HBYT")])
    assert encode_one("new(#128) { c = 7; }", reg).data == b"\x00\x00\x00\x07"


def test_value_written_twice():
    reg = make_registry([("a", "DWRD")])
    with pytest.raises(ValueEncodingError) as ei:
        encode_one("new(#128) { a = 1; a = 2; }", reg)
    assert ei.value.code == E_DUPLICATE_VALUE
    assert (ei.value.position.line, ei.value.position.column) == (1, 20)


class TestSymbols:
    @pytest.fixture
    def reg(self):
        return make_registry(
            [("mode", "DWRD"), ("label", "CSTR")],
            [
                {
                    "name": "mode",
                    "values": [
                        {"name": "mode", "symbols": {"fast": 2, "word": "no"}}
                    ],
                },
                {
                    "name": "label",
                    "values": [
                        {"name": "label", "symbols": {"ok": "OK", "one": 1}}
                    ],
                },
            ],
        )

    def test_symbols_resolve(self, reg):
        res = encode_one("new(#128) { mode = fast; label = ok; }", reg)
        assert res.data == b"\x00\x02OK\x00"

    def test_undefined_symbol(self, reg):
        with pytest.raises(ValueEncodingError) as ei:
            encode_one("new(#128) { mode = slow; }", reg)
        assert ei.value.code == E_UNDEFINED_SYMBOL

    @pytest.mark.parametrize(
        "src", ["new(#128) { mode = word; }", "new(#128) { label = one; }"]
    )
    def test_symbol_of_wrong_category(self, reg, src):
        with pytest.raises(ValueEncodingError) as ei:
            encode_one(src, reg)
        assert ei.value.code == E_SYMBOL_TYPE
