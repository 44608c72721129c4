"""Tests for the command line front end (job_tracker/main.py)."""

from datetime import date

import openpyxl
import pytest

from job_tracker.main import format_date_display, main
from job_tracker.persistence import load_all
from job_tracker.storage import SQLiteStore


@pytest.fixture
def stored(app_config):
    """Load whatever the CLI wrote to the configured store."""
    return lambda: load_all(SQLiteStore(app_config.data_path), app_config.storage_key)


def test_add_then_list(app_config, stored, capsys):
    assert main(["add", "--name", "Jane", "--company", "Acme", "--date", "2024-01-10"]) == 0
    assert main(["add", "--name", "Raj", "--company", "Globex", "--status", "Rejected"]) == 0

    records = stored()
    assert [r.contact_name for r in records] == ["Raj", "Jane"]
    assert records[1].applied_date == date(2024, 1, 10)

    capsys.readouterr()
    assert main(["list", "--status", "Rejected"]) == 0
    out = capsys.readouterr().out
    assert "Raj @ Globex" in out
    assert "Jane" not in out
    assert "1 of 2 entries" in out


def test_add_rejects_blank_name(app_config, stored, capsys):
    assert main(["add", "--name", "  ", "--company", "Acme"]) == 1
    assert "Full name is required." in capsys.readouterr().err
    assert stored() == []


def test_edit_by_id_prefix(app_config, stored):
    main(["add", "--name", "Jane", "--company", "Acme", "--notes", "first"])
    record_id = stored()[0].id

    assert main(["edit", record_id[:8], "--status", "Final-Round"]) == 0

    [record] = stored()
    assert record.id == record_id
    assert record.status.value == "Final-Round"
    assert record.notes == "first"


def test_edit_unknown_id(app_config, capsys):
    assert main(["edit", "does-not-exist", "--notes", "x"]) == 1


def test_delete_with_confirmation(app_config, stored, monkeypatch):
    main(["add", "--name", "Jane", "--company", "Acme"])
    record_id = stored()[0].id

    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    assert main(["delete", record_id]) == 0
    assert len(stored()) == 1

    monkeypatch.setattr("builtins.input", lambda prompt: "y")
    assert main(["delete", record_id]) == 0
    assert stored() == []


def test_delete_yes_skips_prompt(app_config, stored, monkeypatch):
    main(["add", "--name", "Jane", "--company", "Acme"])

    def fail(prompt):
        raise AssertionError("should not prompt")

    monkeypatch.setattr("builtins.input", fail)
    assert main(["delete", stored()[0].id, "--yes"]) == 0
    assert stored() == []


def test_import_and_export(app_config, stored, tmp_path, capsys):
    source = tmp_path / "in.xlsx"
    wb = openpyxl.Workbook()
    wb.active.append(["Name", "Company"])
    wb.active.append(["Jane", "Acme"])
    wb.save(source)

    assert main(["import", str(source)]) == 0
    assert "Successfully imported 1 entries!" in capsys.readouterr().out
    assert [r.organization_name for r in stored()] == ["Acme"]

    assert main(["export"]) == 0
    exported = list((app_config.export_dir).glob("job_tracker_export_*.xlsx"))
    assert len(exported) == 1


def test_import_broken_file(app_config, stored, tmp_path):
    source = tmp_path / "broken.xlsx"
    source.write_bytes(b"nope")

    assert main(["import", str(source)]) == 1
    assert stored() == []


def test_usage(app_config, capsys):
    assert main(["usage"]) == 0
    assert "Using about 1 KB (2 bytes) for 0 entries" in capsys.readouterr().out


def test_format_date_display():
    assert format_date_display(date(2024, 1, 5)) == "Jan-05-2024"


def test_list_shows_hyphenated_dates(app_config, capsys):
    main(["add", "--name", "Jane", "--company", "Acme", "--date", "2024-03-09"])
    capsys.readouterr()

    assert main(["list"]) == 0
    assert "Mar-09-2024" in capsys.readouterr().out


@pytest.mark.parametrize("key", ["applied_date", "appliedDate", "organizationName", "status"])
def test_list_accepts_known_sort_fields(app_config, key):
    assert main(["list", "--sort", key, "--asc"]) == 0


def test_list_rejects_unknown_sort_field(app_config, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["list", "--sort", "salary"])

    assert exc_info.value.code == 2
    assert "invalid choice: 'salary'" in capsys.readouterr().err


def test_delete_prompt_at_end_of_input_cancels(app_config, stored, monkeypatch, capsys):
    main(["add", "--name", "Jane", "--company", "Acme"])

    def closed_stdin(prompt):
        raise EOFError

    monkeypatch.setattr("builtins.input", closed_stdin)
    assert main(["delete", stored()[0].id]) == 0
    assert "Cancelled" in capsys.readouterr().out
    assert len(stored()) == 1


def test_import_csv(app_config, stored, tmp_path, capsys):
    source = tmp_path / "in.csv"
    source.write_text("Name,Company\nJane,Acme\nRaj,Globex\n", encoding="utf-8")

    assert main(["import", str(source)]) == 0
    assert "Successfully imported 2 entries!" in capsys.readouterr().out
    assert [r.contact_name for r in stored()] == ["Jane", "Raj"]


def test_import_malformed_csv(app_config, stored, tmp_path, capsys):
    source = tmp_path / "broken.csv"
    source.write_bytes(b"Name\n\xff\xfe\n")

    assert main(["import", str(source)]) == 1
    assert "Failed to parse CSV file" in capsys.readouterr().err
    assert stored() == []
