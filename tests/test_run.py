import sys

import pytest

from attrition_pipeline import run
from attrition_pipeline.config import load_pipeline_config
from tests.factories import A, P, UL, csv_bytes, history_rows, make_row


@pytest.fixture
def config():
    return load_pipeline_config("testing")


def test_validate_file_passes_clean_upload(tmp_path, config):
    path = tmp_path / "clean.csv"
    path.write_bytes(csv_bytes(history_rows([P] * 63)))

    assert run.validate_file(path, config) == 0


def test_validate_file_fails_on_rejected_rows(tmp_path, config):
    path = tmp_path / "weekend.csv"
    path.write_bytes(csv_bytes([make_row(day="2024-03-09")]))

    assert run.validate_file(path, config) == 1


def test_validate_file_fails_on_unsupported_format(tmp_path, config):
    path = tmp_path / "notes.txt"
    path.write_text("hello")

    assert run.validate_file(path, config) == 1


def test_main_scores_and_exports(tmp_path, monkeypatch):
    upload = tmp_path / "acme.csv"
    rows = history_rows([P] * 63, employee_id="E1") + history_rows(([A] * 5 + [UL] * 5) * 6, employee_id="E2")
    upload.write_bytes(csv_bytes(rows))
    out = tmp_path / "out"

    monkeypatch.setattr(sys, "argv", [
        "attrition-pipeline", "--file", str(upload), "--org", "acme", "--as-of", "2024-05-31",
        "--export", str(out), "--format", "json", "--env", "testing",
    ])
    with pytest.raises(SystemExit) as exc_info:
        run.main()

    assert exc_info.value.code == 0
    assert len(list(out.glob("attrition_acme_*.json"))) == 1


def test_main_without_input_prints_help(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["attrition-pipeline", "--env", "testing"])
    with pytest.raises(SystemExit) as exc_info:
        run.main()
    assert exc_info.value.code == 2


def test_export_without_directory_uses_configured_output(tmp_path, monkeypatch):
    upload = tmp_path / "acme.csv"
    upload.write_bytes(csv_bytes(history_rows([P] * 63, employee_id="E1")))
    monkeypatch.chdir(tmp_path)

    monkeypatch.setattr(sys, "argv", [
        "attrition-pipeline", "--file", str(upload), "--org", "acme", "--as-of", "2024-05-31",
        "--export", "--env", "testing",
    ])
    with pytest.raises(SystemExit) as exc_info:
        run.main()

    assert exc_info.value.code == 0
    assert len(list((tmp_path / "output" / "test").glob("attrition_acme_*.json"))) == 1
