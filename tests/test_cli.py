import pandas as pd
import pytest

from dupsmith.cli import main


@pytest.fixture
def folders(tmp_path):
    in_dir = tmp_path / "Input"
    out_dir = tmp_path / "Output"
    in_dir.mkdir()
    return in_dir, out_dir


def _write_csv(path, text):
    path.write_text(text, encoding="utf-8")
    return path


CSV = "id,a,b,c\n1,x,y,z\n2,x,y,z\n3,q,q,q\n"


# -------------------------------------------------------------------
# extract
# -------------------------------------------------------------------


def test_extract_writes_workbooks(folders, capsys):
    in_dir, out_dir = folders
    _write_csv(in_dir / "one.csv", CSV)

    rc = main(["extract", str(in_dir), str(out_dir), "--columns-to-skip", "2"])

    assert rc == 0
    out = out_dir / "one.xlsx"
    assert out.exists()
    dup = pd.read_excel(out, sheet_name="Duplicates", header=None)
    # CSV cells are read as text and written back as text
    assert dup.iloc[1:, 0].tolist() == ["1", "2"]
    assert "Processed 1 file(s), 0 failed." in capsys.readouterr().out


def test_extract_missing_input_folder(tmp_path, capsys):
    rc = main(["extract", str(tmp_path / "missing"), str(tmp_path / "out")])
    assert rc == 1
    assert "does not exist" in capsys.readouterr().err


def test_extract_no_input_files(folders, capsys):
    in_dir, out_dir = folders
    rc = main(["extract", str(in_dir), str(out_dir)])
    assert rc == 0
    assert out_dir.is_dir()
    assert "No input files found" in capsys.readouterr().out


def test_extract_reports_failed_files(folders, capsys):
    in_dir, out_dir = folders
    _write_csv(in_dir / "empty.csv", "")
    _write_csv(in_dir / "ok.csv", CSV)

    rc = main(["extract", str(in_dir), str(out_dir)])

    assert rc == 1
    assert (out_dir / "ok.xlsx").exists()
    assert "Processed 1 file(s), 1 failed." in capsys.readouterr().out


def test_extract_defaults_to_input_and_output(folders, monkeypatch):
    in_dir, out_dir = folders
    _write_csv(in_dir / "one.csv", CSV)
    monkeypatch.chdir(in_dir.parent)

    assert main(["extract"]) == 0
    assert (out_dir / "one.xlsx").exists()


def test_extract_invalid_config(folders, capsys):
    in_dir, out_dir = folders
    rc = main(["extract", str(in_dir), str(out_dir), "--min-repeats", "0"])
    assert rc == 2
    assert "min_repeats" in capsys.readouterr().err


# -------------------------------------------------------------------
# scan
# -------------------------------------------------------------------


def test_scan_prints_both_tables(tmp_path, capsys):
    src = _write_csv(tmp_path / "in.csv", CSV)

    rc = main(["scan", str(src), "--columns-to-skip", "2"])

    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "# Duplicates",
        "id,a,b,c",
        "1,x,y,z",
        "2,x,y,z",
        "# Repeats",
        "id,a,b,c",
        "3,q,q,q",
    ]


def test_scan_writes_workbook(tmp_path, capsys):
    src = _write_csv(tmp_path / "in.csv", CSV)
    out = tmp_path / "result.xlsx"

    rc = main(["scan", str(src), "-o", str(out), "--columns-to-skip", "2"])

    assert rc == 0
    sheets = pd.read_excel(out, sheet_name=None, header=None)
    assert list(sheets) == ["Duplicates", "Repeats"]
    assert f"Wrote duplicates and repeats to: {out}" in capsys.readouterr().out


def test_scan_missing_file(tmp_path, capsys):
    rc = main(["scan", str(tmp_path / "missing.csv")])
    assert rc == 1
    assert "input file not found" in capsys.readouterr().err


def test_scan_table_too_narrow(tmp_path, capsys):
    src = _write_csv(tmp_path / "in.csv", "h1,h2\na,b\n")
    rc = main(["scan", str(src)])
    assert rc == 2
    assert "columns_to_skip=3" in capsys.readouterr().err


def test_scan_unwritable_output(tmp_path, capsys):
    src = _write_csv(tmp_path / "in.csv", CSV)
    out = tmp_path / "taken.xlsx"
    out.mkdir()

    rc = main(["scan", str(src), "-o", str(out), "--columns-to-skip", "2"])

    assert rc == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_scan_invalid_config(tmp_path, capsys):
    src = _write_csv(tmp_path / "in.csv", CSV)
    rc = main(["scan", str(src), "--sort-column", "0"])
    assert rc == 2
    assert "sort_column" in capsys.readouterr().err


def test_missing_subcommand_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
