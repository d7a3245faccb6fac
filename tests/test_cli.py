from __future__ import annotations

import json
import sys
from pathlib import Path

import fitz
import pytest

import main as cli
from nfa_form.mapping import fields
from nfa_form.state.token import encode
from tests.mock_answers import mock_answers, mock_record


def _run(monkeypatch, capsys, *argv: str) -> object:
    monkeypatch.setattr(sys, "argv", ["main.py", *argv])
    cli.main()
    return json.loads(capsys.readouterr().out)


def test_load_record_accepts_file_and_inline_json(tmp_path: Path) -> None:
    answers_file = tmp_path / "answers.json"
    answers_file.write_text(json.dumps(mock_answers()), encoding="utf-8")

    assert cli.load_record(str(answers_file)) == mock_record()
    assert cli.load_record('{"q2_fullName": "JANE"}').q2_fullName == "JANE"


def test_load_record_accepts_long_inline_json() -> None:
    inline = json.dumps(mock_answers())

    assert len(inline) > 255
    assert cli.load_record(inline) == mock_record()
    assert cli.load_record(f"  {inline}") == mock_record()


def test_load_record_rejects_bad_input() -> None:
    with pytest.raises(SystemExit, match="Invalid JSON"):
        cli.load_record("{not json")
    with pytest.raises(SystemExit, match="must be an object"):
        cli.load_record("[1, 2]")
    with pytest.raises(SystemExit, match="validation failed"):
        cli.load_record('{"q1_formType": "ATF FORM 9"}')


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_cli_encode_then_decode(monkeypatch, capsys) -> None:
    record = mock_record()

    encoded = _run(monkeypatch, capsys, "encode", "--json", json.dumps(mock_answers()))
    decoded = _run(monkeypatch, capsys, "decode", encoded["fragment"])

    assert encoded["token"] == encode(record)
    assert decoded == record.as_dict()


def test_cli_decode_rejects_garbage(monkeypatch) -> None:
    monkeypatch.setattr(sys, "argv", ["main.py", "decode", "###"])
    with pytest.raises(SystemExit):
        cli.main()


def test_cli_map_prints_operations(monkeypatch, capsys) -> None:
    rows = _run(
        monkeypatch,
        capsys,
        "map",
        "--json",
        '{"q1_formType": "ATF FORM 4"}',
        "--today",
        "2024-03-05",
    )

    assert rows == [
        {"field_name": fields.FORM_TYPE_FIELDS["ATF FORM 4"], "operation": "select"},
        {
            "field_name": fields.CERTIFICATION_DATE_FIELD,
            "operation": "set_text",
            "value": "03/05/2024",
        },
    ]


def test_cli_check_template_reports_missing_fields(
    monkeypatch, capsys, tmp_path: Path
) -> None:
    template = tmp_path / "blank.pdf"
    doc = fitz.open()
    doc.new_page()
    doc.save(str(template))
    doc.close()
    monkeypatch.setattr(
        sys, "argv", ["main.py", "check-template", "--template", str(template)]
    )

    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    report = json.loads(capsys.readouterr().out)

    assert exc_info.value.code == 1
    assert report["ok"] is False
    assert report["template"] == str(template)
    assert report["page_count"] == 1
    assert report["missing_fields"]
