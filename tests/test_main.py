import json

from qgrid.__main__ import main


def test_headless_run(qapp, capsys):
    status = main(["--episodes", "20", "--seed", "3", "--report-every", "10"])

    out = capsys.readouterr().out
    assert status == 0
    assert "Episode 10:" in out
    assert "Episode 20:" in out
    assert "Episodes: 20" in out
    assert "Learned policy:" in out


def test_timed_run(qapp, capsys):
    status = main(["--episodes", "2", "--seed", "3", "--timed", "--delay", "0",
                   "--report-every", "1"])

    out = capsys.readouterr().out
    assert status == 0
    assert "Episodes: 2" in out


def test_generated_grid_and_q_table(qapp, capsys):
    status = main(["--episodes", "3", "--size", "6", "--seed", "1", "--show-q-table"])

    out = capsys.readouterr().out
    assert status == 0
    assert "Grid 6x6" in out
    assert "best" in out


def test_grid_file(qapp, capsys, tmp_path):
    path = tmp_path / "grid.json"
    path.write_text(json.dumps({"size": 4, "goal": [3, 3], "obstacles": [[1, 1]]}))

    assert main(["--episodes", "2", "--grid", str(path), "--seed", "0"]) == 0
    assert "Grid 4x4" in capsys.readouterr().out


def test_invalid_grid_file(qapp, capsys, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"size": 4, "goal": [1, 1], "obstacles": [[1, 1]]}))

    assert main(["--grid", str(path)]) == 2
    assert "Invalid grid" in capsys.readouterr().out
