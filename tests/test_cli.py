import json

import pytest

from crawlmap.__main__ import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("CRAWLMAP_CONFIG", "CRAWLMAP_SEED", "CRAWLMAP_ROOM_INCLUSION_PROBABILITY"):
        monkeypatch.delenv(key, raising=False)


def test_prints_ascii_map(capsys):
    assert main(["--seed", "7"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 9
    assert all(len(line) == 9 for line in lines)
    text = "".join(lines)
    assert text.count("S") == 1
    assert text.count("B") == 1
    assert 8 <= 9 * 9 - text.count("#") <= 12


def test_json_output_is_reproducible(capsys):
    assert main(["--seed", "7", "--json"]) == 0
    first = json.loads(capsys.readouterr().out)
    assert main(["--seed", "7", "--json"]) == 0
    second = json.loads(capsys.readouterr().out)
    assert first == second
    assert first["width"] == 9
    assert first["start"] == [4, 4]


def test_play_reports_cleared_level(capsys):
    assert main(["--seed", "5", "--json", "--play"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["play"]["cleared"] is True
    assert data["play"]["boss_slain"] is True
    assert len(data["play"]["finished_order"]) == len(data["rooms"])


def test_play_summary_line(capsys):
    assert main(["--seed", "5", "--play"]) == 0
    last = capsys.readouterr().out.splitlines()[-1]
    assert last.startswith("cleared=True boss_slain=True ")


def test_invalid_settings_exit_code(capsys):
    assert main(["--min-rooms", "13"]) == 1
    assert "invalid settings" in capsys.readouterr().err


def test_exhaustion_exit_code(monkeypatch, capsys):
    monkeypatch.setenv("CRAWLMAP_ROOM_INCLUSION_PROBABILITY", "0")
    assert main(["--seed", "1", "--attempts", "3"]) == 2
    assert "No valid dungeon after 3 attempts" in capsys.readouterr().err
