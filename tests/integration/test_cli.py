"""Integration tests for the command-line runner."""
import pandas as pd
import pytest

from actiontrack.run import build_mapping, main


@pytest.fixture
def workbook(tmp_path, build_workbook, sample_rows):
    path = tmp_path / "liste.xlsx"
    path.write_bytes(build_workbook(sample_rows))
    return path


def run_cli(*argv) -> int:
    with pytest.raises(SystemExit) as exc:
        main([str(a) for a in argv])
    return exc.value.code


def test_list_columns(workbook, capsys):
    assert run_cli(workbook, "--columns") == 0
    assert "Açıklama" in capsys.readouterr().out


def test_blocked_without_description(workbook):
    assert run_cli(workbook, "--map", "source=Kaynak") == 1


def test_import_and_export(workbook, tmp_path):
    out = tmp_path / "out" / "records.csv"
    code = run_cli(
        workbook,
        "--map", "description=Açıklama",
        "--map", "status=Durum",
        "--today", "2024-09-20",
        "--validate",
        "--output", out,
    )
    assert code == 0
    exported = pd.read_csv(out)
    assert len(exported) == 3
    assert "created_ts" not in exported.columns
    assert sorted(exported["status"]) == ["closed", "in-progress", "open"]


def test_mapping_file(workbook, tmp_path):
    mapping = tmp_path / "mapping.yaml"
    mapping.write_text("mapping:\n  description: Açıklama\n  teamLeader: Ekip Lideri\n", encoding="utf-8")
    assert run_cli(workbook, "--mapping", mapping, "--env", "development") == 0


def test_unsupported_file_type(tmp_path):
    path = tmp_path / "liste.csv"
    path.write_text("Açıklama\nx\n", encoding="utf-8")
    assert run_cli(path, "--map", "description=Açıklama") == 1


def test_unknown_environment(workbook):
    assert run_cli(workbook, "--env", "qa") == 1


def test_build_mapping_pairs_override_file(tmp_path):
    path = tmp_path / "mapping.yaml"
    path.write_text("description: Konu\nteam: Ekip\n", encoding="utf-8")
    mapping = build_mapping(str(path), ["description=Açıklama"])
    assert mapping.description == "Açıklama"
    assert mapping.team == "Ekip"


def test_build_mapping_rejects_bad_pair():
    with pytest.raises(ValueError):
        build_mapping(None, ["description"])
