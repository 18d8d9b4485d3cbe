# python
"""
tests/test_cli.py
End-to-end tests for the fsreplay command line entry point.
"""
import io
import json
import logging
from pathlib import Path

import pytest

from fsreplay.cli import main

EXAMPLE = Path(__file__).resolve().parent / "data" / "example.txt"


def _write_transcript(tmp_path: Path, text: str) -> str:
    path = tmp_path / "transcript.txt"
    path.write_text(text.lstrip(), encoding="utf-8")
    return str(path)


def test_part_one(capsys) -> None:
    assert main(["1", str(EXAMPLE)]) == 0
    assert capsys.readouterr().out == "95437\n"


def test_part_two(capsys) -> None:
    assert main(["2", str(EXAMPLE)]) == 0
    assert capsys.readouterr().out == "24933642\n"


def test_reads_stdin(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(EXAMPLE.read_text(encoding="utf-8")))
    assert main(["1"]) == 0
    assert capsys.readouterr().out == "95437\n"


def test_limit_flags_override_defaults(capsys) -> None:
    assert main(["1", str(EXAMPLE), "--max-size", "1000"]) == 0
    assert capsys.readouterr().out == "584\n"
    assert main(
        ["2", str(EXAMPLE), "--filesystem-size", "48381165", "--required-free", "94853"]
    ) == 0
    assert capsys.readouterr().out == "94853\n"


def test_env_limits_are_used(monkeypatch, capsys) -> None:
    monkeypatch.setenv("FSREPLAY_MAX_SIZE", "1000")
    assert main(["1", str(EXAMPLE)]) == 0
    assert capsys.readouterr().out == "584\n"


def test_malformed_transcript_fails(tmp_path: Path, capsys, caplog) -> None:
    path = _write_transcript(tmp_path, "$ cd /\nxyz\n")
    with caplog.at_level(logging.ERROR):
        assert main(["1", path]) == 1
    assert capsys.readouterr().out == ""
    assert "unknown input line 2" in caplog.text


def test_conflict_policy_flag(tmp_path: Path, capsys) -> None:
    path = _write_transcript(tmp_path, "$ cd /\n10 f\n$ ls\n20 f\n")
    assert main(["1", path]) == 1
    assert capsys.readouterr().out == ""
    assert main(["1", path, "--on-conflict", "overwrite"]) == 0
    assert capsys.readouterr().out == "20\n"


def test_no_candidate_fails(tmp_path: Path, capsys, caplog) -> None:
    path = _write_transcript(tmp_path, "$ cd /\n100 f\n")
    with caplog.at_level(logging.ERROR):
        assert main(["2", path, "--filesystem-size", "100", "--required-free", "101"]) == 1
    assert capsys.readouterr().out == ""
    assert "101 required" in caplog.text


def test_missing_input_file(tmp_path: Path, capsys) -> None:
    assert main(["1", str(tmp_path / "nope.txt")]) == 1
    assert capsys.readouterr().out == ""


def test_bad_part_is_usage_error() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["3", str(EXAMPLE)])
    assert exc_info.value.code == 2


def test_negative_size_flag_is_usage_error() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["1", str(EXAMPLE), "--max-size", "-5"])
    assert exc_info.value.code == 2


def test_dump_prints_table_then_answer(capsys) -> None:
    assert main(["1", str(EXAMPLE), "--dump"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "/"
    assert "    dir a" in lines
    assert "/a/e 584" in lines
    assert "/ 48381165" in lines
    assert lines[-1] == "95437"


def test_export_then_snapshot(tmp_path: Path, capsys) -> None:
    snap = tmp_path / "fs.json"
    assert main(["1", str(EXAMPLE), "--export", str(snap)]) == 0
    capsys.readouterr()
    assert json.loads(snap.read_text(encoding="utf-8"))["type"] == "dir"
    assert main(["2", "--snapshot", str(snap)]) == 0
    assert capsys.readouterr().out == "24933642\n"


def test_events_are_logged(tmp_path: Path, capsys) -> None:
    events_file = tmp_path / "events.jsonl"
    assert main(["1", str(EXAMPLE), "--events", str(events_file)]) == 0
    records = [json.loads(line) for line in events_file.read_text(encoding="utf-8").splitlines()]
    assert [r["event"] for r in records] == ["run.start", "parse.done", "query.result"]
    assert records[1]["payload"] == {"directories": 4, "files": 10}
    assert records[2]["payload"]["answer"] == 95437
    assert len({r["run_id"] for r in records}) == 1


def test_error_event_is_logged(tmp_path: Path, capsys) -> None:
    events_file = tmp_path / "events.jsonl"
    path = _write_transcript(tmp_path, "$ cd /\n$ cd ..\n")
    assert main(["1", path, "--events", str(events_file)]) == 1
    records = [json.loads(line) for line in events_file.read_text(encoding="utf-8").splitlines()]
    assert records[-1]["event"] == "run.error"
    assert records[-1]["payload"]["error"] == "NavigationError"


def test_export_with_slash_in_file_name_reloads(tmp_path: Path, capsys) -> None:
    path = _write_transcript(tmp_path, "$ cd /\n5 a/b\n$ cd x\n7 y\n")
    snap = tmp_path / "fs.json"
    assert main(["1", path, "--export", str(snap)]) == 0
    assert capsys.readouterr().out == "19\n"
    assert main(["1", "--snapshot", str(snap)]) == 0
    assert capsys.readouterr().out == "19\n"


def test_bad_log_level_is_config_error(monkeypatch, capsys, caplog) -> None:
    monkeypatch.setenv("FSREPLAY_LOG_LEVEL", "basic_format")
    with caplog.at_level(logging.ERROR):
        assert main(["1", str(EXAMPLE)]) == 1
    assert capsys.readouterr().out == ""
    assert "FSREPLAY_LOG_LEVEL" in caplog.text
