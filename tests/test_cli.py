"""Tests for the command-line entrypoints."""

from shiftboard.cli import main


def test_cli_workflow(tmp_path, capsys):
    db_url = f"sqlite:///{tmp_path / 'board.db'}"
    roster = tmp_path / "staff.csv"
    roster.write_text("name,role\nAiko,ADMIN\nBen,STAFF\n")

    main(["--db", db_url, "init-db"])
    main(["--db", db_url, "import-staff", "--csv", str(roster)])
    main(["--db", db_url, "create-period", "--start", "2025-03-01", "--end", "2025-03-15"])
    out = capsys.readouterr().out
    assert "Imported 2 staff" in out
    assert "Created period 1" in out

    main(["--db", db_url, "summarize", "--period", "1"])
    assert "No assignments." in capsys.readouterr().out

    export = tmp_path / "shifts.csv"
    main(["--db", db_url, "export", "--period", "1", "--out", str(export)])
    assert export.exists()
