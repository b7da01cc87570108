import json

import pytest

from rsrcgen.cli import main

TYPES = """
types:
  - name: Counter
    code: CNTR
    template:
      - {name: count, type: DWRD}
      - {name: flags, type: HBYT}
    fields:
      - count
      - name: flags
        type: Bitmask
"""


@pytest.fixture
def project(tmp_path):
    (tmp_path / "types.yaml").write_text(TYPES, encoding="utf-8")
    return tmp_path


def _script(project, text):
    path = project / "main.rdef"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_build_json(project, capsys):
    script = _script(project, 'new(128, "Test") { count = 3; flags = 1 | 2; }')
    rc = main(
        ["-r", "silent", "build", script, "-t", str(project / "types.yaml"), "--json"]
    )
    assert rc == 0
    (entry,) = json.loads(capsys.readouterr().out)
    assert entry == {"id": 128, "name": "Test", "type": "CNTR", "data": "000303"}


def test_build_writes_output_dir(project):
    script = _script(project, "new(#200) { count = 1; }")
    out = project / "out"
    rc = main(
        [
            "-r",
            "silent",
            "build",
            script,
            "-t",
            str(project / "types.yaml"),
            "-o",
            str(out),
            "--emit-manifest",
            str(project / "manifest.json"),
        ]
    )
    assert rc == 0
    assert (out / "CNTR" / "200.bin").read_bytes() == b"\x00\x01\x00"
    assert (project / "manifest.json").is_file()


def test_plain_diagnostic_has_location_and_caret(project, capsys):
    script = _script(project, "new(#1) {\n  colour = 3;\n}\n")
    rc = main(["build", script, "-t", str(project / "types.yaml")])
    assert rc == 1
    err = capsys.readouterr().err
    assert f"{script}:2:3: E_UNKNOWN_FIELD" in err
    assert "      ^" in err


def test_json_reporter_emits_diagnostic_event(project, capsys):
    script = _script(project, "new(#1) { count = 70000; }")
    rc = main(["-r", "json", "build", script, "-t", str(project / "types.yaml")])
    assert rc == 1
    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    diag = [e for e in events if e["event"] == "diagnostic"]
    assert len(diag) == 1
    assert diag[0]["code"] == "E_VALUE_RANGE"
    assert diag[0]["position"]["line"] == 1
    summaries = {e["summary_type"] for e in events if e["event"] == "summary"}
    assert summaries == {"types"}


def test_missing_types_file(project):
    script = _script(project, "new(#1) { }")
    rc = main(["-r", "silent", "build", script, "-t", str(project / "nope.yaml")])
    assert rc == 1


def test_types_listing(project, capsys):
    rc = main(["-r", "silent", "types", str(project / "types.yaml"), "--json"])
    assert rc == 0
    (info,) = json.loads(capsys.readouterr().out)
    assert info["fields"]["flags"]["directive"] == "Bitmask"


def test_inspect_flags_trailing_data(project, capsys):
    blob = project / "res.bin"
    blob.write_bytes(b"\x00\x01\x02\xff")
    rc = main(
        ["-r", "silent", "inspect", str(blob), "-t", str(project / "types.yaml"), "--json"]
    )
    assert rc == 1
    info = json.loads(capsys.readouterr().out)
    assert [e["value"] for e in info["entries"]] == [1, 2]
    assert info["issues"] == ["Trailing data: decoded 3 of 4 bytes"]
