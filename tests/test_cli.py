from __future__ import annotations

from pathlib import Path

import polars as pl
import pytest

from bnfuzzer import cli

GRAMMAR = """\
digit  ::= "0" | "1" | "2"
number ::= 1*3 <digit>
orphan ::= "never"
"""


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    for key in ["BNFUZZER_COUNT", "BNFUZZER_SEED", "BNFUZZER_MAX_REPETITION", "BNFUZZER_OUT_FORMAT"]:
        monkeypatch.delenv(key, raising=False)


def _write(tmp_path: Path, text: str = GRAMMAR, name: str = "g.bnf") -> str:
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_generates_count_messages(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path)
    code = cli.main(["-file", path, "-entry", "digit", "-count", "25", "-no-env"])
    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert len(out) == 25
    assert set(out) <= {"0", "1", "2"}


def test_seed_reproduces_output(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path)
    args = ["-file", path, "-entry", "number", "-count", "10", "-seed", "99", "-no-env"]
    assert cli.main(args) == 0
    first = capsys.readouterr().out
    assert cli.main(args) == 0
    assert capsys.readouterr().out == first


def test_list_entries_sorted(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path)
    assert cli.main(["-file", path, "-entry", "!", "-no-env"]) == 0
    assert capsys.readouterr().out.splitlines() == ["digit", "number", "orphan"]


def test_dump_prints_rule(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path)
    assert cli.main(["--file", path, "--entry", "number", "--dump", "--no-env"]) == 0
    assert capsys.readouterr().out.strip() == "number ::= 1*3 <digit>"


def test_missing_required_flags(tmp_path: Path, capsys) -> None:
    assert cli.main(["-entry", "digit", "-no-env"]) == 1
    assert "-file is not provided" in capsys.readouterr().err
    assert cli.main(["-file", _write(tmp_path), "-no-env"]) == 1
    assert "-entry is not provided" in capsys.readouterr().err


def test_bad_flag_value_exits_one(capsys) -> None:
    assert cli.main(["-count", "many"]) == 1


def test_undefined_entry(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path)
    assert cli.main(["-file", path, "-entry", "nothing", "-no-env"]) == 1
    assert "Symbol <nothing> is not defined" in capsys.readouterr().err


def test_parse_errors_reported_for_every_line(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, 'a ::= "x"\nb ::= @\na ::= "y"\n')
    assert cli.main(["-file", path, "-entry", "a", "-no-env"]) == 1
    err = capsys.readouterr().err
    assert f"{path}:2:7: ERROR: Invalid token" in err
    assert f"{path}:3:1: ERROR: Redefinition of the rule <a>" in err
    assert f"{path}:1:1: NOTE:" in err


def test_verify_and_unused_checks(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, GRAMMAR + "broken ::= <ghost>\n")
    assert cli.main(["-file", path, "-entry", "number", "-verify", "-no-env"]) == 1
    assert "Symbol <ghost> is not defined" in capsys.readouterr().err

    path = _write(tmp_path)
    assert cli.main(["-file", path, "-entry", "number", "-unused", "-no-env"]) == 1
    err = capsys.readouterr().err
    assert "Symbol <orphan> is not used" in err
    assert "<digit>" not in err

    assert cli.main(["-file", path, "-entry", "number", "-verify", "-no-env"]) == 0


def test_generation_error_exits_one(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, 'bad ::= "z" ... "a"\n')
    assert cli.main(["-file", path, "-entry", "bad", "-no-env"]) == 1
    assert "greater than its upper bound" in capsys.readouterr().err


def test_unbounded_recursion_is_reported(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, "loop ::= <loop>\n")
    assert cli.main(["-file", path, "-entry", "loop", "-no-env"]) == 1
    assert "recursion limit" in capsys.readouterr().err


def test_missing_file(tmp_path: Path, capsys) -> None:
    assert cli.main(["-file", str(tmp_path / "none.bnf"), "-entry", "a", "-no-env"]) == 1
    assert "could not read file" in capsys.readouterr().err


def test_out_writes_parquet(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path)
    out = tmp_path / "samples.parquet"
    code = cli.main(
        ["-file", path, "-entry", "digit", "-count", "4", "-seed", "5", "-out", str(out), "-no-env"]
    )
    assert code == 0
    assert capsys.readouterr().out == ""
    df = pl.read_parquet(out)
    assert df.height == 4
    assert df.get_column("entry").unique().to_list() == ["digit"]
    assert df.get_column("index").to_list() == [0, 1, 2, 3]
    assert set(df.get_column("text").to_list()) <= {"0", "1", "2"}


def test_config_and_env_feed_settings(tmp_path: Path, monkeypatch, capsys) -> None:
    path = _write(tmp_path)
    (tmp_path / "bnfuzzer.toml").write_text("count = 3\n")
    assert cli.main(["-file", path, "-entry", "digit", "-no-env"]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 3

    (tmp_path / ".env").write_text("BNFUZZER_COUNT=6\n")
    assert cli.main(["-file", path, "-entry", "digit"]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 6
    monkeypatch.delenv("BNFUZZER_COUNT", raising=False)

    assert cli.main(["-file", path, "-entry", "digit", "-count", "2", "-no-env"]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 2


def test_entry_name_starting_with_dash(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, '-sign ::= "-" | "+"\n')
    assert cli.main(["-file", path, "-entry", "-sign", "-count", "5", "-no-env"]) == 0
    assert set(capsys.readouterr().out.splitlines()) <= {"-", "+"}

    assert cli.main(["-file", path, "--entry", "-sign", "-dump", "-no-env"]) == 0
    assert capsys.readouterr().out.strip() == '-sign ::= "-" | "+"'


def test_zero_count_generates_nothing(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path)
    assert cli.main(["-file", path, "-entry", "digit", "-count", "0", "-no-env"]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
