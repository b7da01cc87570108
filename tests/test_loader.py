import json

import pytest

from rsrcgen.errors import E_TEMPLATE, TemplateError
from rsrcgen.types.loader import load_registry, load_types, parse_types_dict
from rsrcgen.types.primitives import PrimitiveKind

YAML_TYPES = """
types:
  - name: Widget
    code: WDGT
    template:
      - {name: count, type: DWRD}
      - {name: flags, type: HBYT}
      - {name: title, type: PSTR}
      - {name: link, type: DWRD}
    fields:
      - count
      - name: flags
        type: Bitmask
        values:
          - name: flags
            symbols: {bold: 1, italic: 2}
      - name: title
      - name: link
        reference: WDGT
"""


def test_load_yaml(tmp_path):
    p = tmp_path / "types.yaml"
    p.write_text(YAML_TYPES, encoding="utf-8")
    (widget,) = load_types(p)
    assert widget.name == "Widget"
    assert widget.code == "WDGT"
    assert [name for name, _ in widget.layout()] == [
        "count",
        "flags",
        "title",
        "link",
    ]
    flags = widget.fields["flags"]
    assert flags.explicit_type.tag == "Bitmask"
    assert flags.value_at(0).symbols == {"bold": 1, "italic": 2}
    assert widget.fields["link"].explicit_type.is_reference
    assert widget.fields["count"].explicit_type is None


def test_load_json_registry(tmp_path):
    p = tmp_path / "types.json"
    p.write_text(
        json.dumps(
            {
                "types": [
                    {
                        "name": "A",
                        "template": [{"name": "x", "type": "DLNG"}],
                        "fields": ["x"],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    reg = load_registry(p)
    assert reg.active.name == "A"
    # Code defaults to the type name
    assert reg.active.code == "A"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_types(tmp_path / "nope.yaml")


def test_malformed_yaml(tmp_path):
    p = tmp_path / "bad.yaml"
    p.write_text("types: [", encoding="utf-8")
    with pytest.raises(TemplateError) as ei:
        load_types(p)
    assert ei.value.code == E_TEMPLATE


def test_root_must_be_mapping(tmp_path):
    p = tmp_path / "list.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(TemplateError):
        load_types(p)


def test_unknown_type_name_loads_as_none():
    (t,) = parse_types_dict(
        {"types": [{"name": "T", "template": [{"name": "v", "type": "WHAT"}]}]}
    )
    assert t.template[0].type.kind is PrimitiveKind.NONE


@pytest.mark.parametrize(
    "raw,needle",
    [
        ({"types": {}}, "'types' must be a list"),
        ({"types": [{"code": "X"}]}, "missing 'name'"),
        (
            {
                "types": [
                    {
                        "name": "T",
                        "template": [
                            {"name": "a", "type": "DBYT"},
                            {"name": "a", "type": "DBYT"},
                        ],
                    }
                ]
            },
            "duplicate template entry",
        ),
        (
            {
                "types": [
                    {
                        "name": "T",
                        "template": [{"name": "a", "type": "DBYT"}],
                        "fields": ["a", "a"],
                    }
                ]
            },
            "duplicate field",
        ),
        (
            {
                "types": [
                    {
                        "name": "T",
                        "template": [{"name": "a", "type": "DBYT"}],
                        "fields": [{"name": "f", "values": ["b"]}],
                    }
                ]
            },
            "not in the type template",
        ),
        (
            {
                "types": [
                    {
                        "name": "T",
                        "template": [{"name": "a", "type": "DBYT"}],
                        "fields": [
                            {
                                "name": "a",
                                "values": [
                                    {"name": "a", "symbols": {"on": True}}
                                ],
                            }
                        ],
                    }
                ]
            },
            "must be an integer or a string",
        ),
    ],
)
def test_invalid_templates(raw, needle):
    with pytest.raises(TemplateError) as ei:
        parse_types_dict(raw)
    assert ei.value.code == E_TEMPLATE
    assert needle in ei.value.message
