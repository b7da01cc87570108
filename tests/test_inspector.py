import pytest

from rsrcgen.encoding.inspector import (
    decode_resource,
    inspect_resource,
    validate_resource,
)

from template_helper import encode_one, make_registry


@pytest.fixture
def registry():
    return make_registry(
        [
            ("id", "DWRD"),
            ("title", "PSTR"),
            ("bounds", "RECT"),
            ("tag", "C004"),
        ]
    )


def test_decode_matches_declared_values(registry):
    res = encode_one(
        'new(#128) { id = -2; title = "Hi"; bounds = 1 2 3 4; tag = "ab"; }',
        registry,
    )
    assert decode_resource(res.data, registry.active) == [
        ("id", -2),
        ("title", b"Hi"),
        ("bounds", (1, 2, 3, 4)),
        ("tag", b"ab"),
    ]


def test_inspect_reports_offsets(registry):
    res = encode_one('new(#128) { title = "Hi"; }', registry)
    info = inspect_resource(res.data, registry.active)
    assert info["size"] == len(res.data)
    assert [(e["name"], e["offset"]) for e in info["entries"]] == [
        ("id", 0),
        ("title", 2),
        ("bounds", 5),
        ("tag", 13),
    ]
    assert info["entries"][1]["value"] == b"Hi".hex()
    assert info["entries"][2]["value"] == [0, 0, 0, 0]
    assert validate_resource(info) == []


def test_inspect_from_file(tmp_path, registry):
    res = encode_one("new(#128) { id = 1; }", registry)
    path = tmp_path / "128.bin"
    path.write_bytes(res.data)
    assert inspect_resource(path, registry.active)["entries"][0]["value"] == 1


def test_trailing_data_is_an_issue(registry):
    data = encode_one("new(#128) { }", registry).data + b"\x00"
    issues = validate_resource(inspect_resource(data, registry.active))
    assert issues == ["Trailing data: decoded 15 of 16 bytes"]


def test_truncated_data(registry):
    info = inspect_resource(b"\x00\x01\x05ab", registry.active)
    assert "error" in info
    assert info["entries"] == []
    assert validate_resource(info) == [info["error"]]


def test_hexd_takes_remaining_bytes():
    reg = make_registry([("n", "HBYT"), ("blob", "HEXD")])
    assert decode_resource(b"\x01abc", reg.active) == [
        ("n", 1),
        ("blob", b"abc"),
    ]
