"""
Tests for the command-line interface.
"""

import pytest

from api.cli import build_parser, main
from src.routes.models import PropulsionDirection
from src.routes.plan import create_plan_from_points, save_plan


@pytest.fixture
def plan_file(tmp_path):
    plan = create_plan_from_points([(51.90, 4.10), (51.905, 4.11), (51.912, 4.112)])
    plan.set_propulsion(2, PropulsionDirection.ASTERN)
    return save_plan(plan, tmp_path / "trajectory-plan.json")


class TestLegsCommand:

    def test_prints_leg_table(self, plan_file, capsys):
        assert main(["legs", str(plan_file)]) == 0
        out = capsys.readouterr().out

        assert "TRAJECTORY PLAN" in out
        assert "Start" in out
        assert "End of Plan" in out
        assert "Total time" in out

    def test_drift_columns(self, plan_file, capsys):
        code = main([
            "legs", str(plan_file), "--drift", "--current-speed", "50", "--current-dir", "90",
        ])
        assert code == 0
        assert "n/a" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["legs", str(tmp_path / "nope.json")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_invalid_plan(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text('{"waypoints": []}', encoding="utf-8")

        assert main(["legs", str(path)]) == 1
        assert "Invalid plan file format" in capsys.readouterr().err


class TestSimulateCommand:

    def test_runs_headless_playback(self, plan_file, capsys):
        assert main(["simulate", str(plan_file), "--speed", "256", "--fps", "10", "--samples", "5"]) == 0
        out = capsys.readouterr().out

        assert "Playback at 256x" in out
        assert "51.912000" in out

    def test_rejects_unsupported_speed(self, plan_file):
        with pytest.raises(SystemExit):
            main(["simulate", str(plan_file), "--speed", "3"])

    @pytest.mark.parametrize("option", ["--fps", "--samples", "--max-frames"])
    @pytest.mark.parametrize("value", ["0", "-2", "abc"])
    def test_rejects_non_positive_counts(self, plan_file, option, value):
        with pytest.raises(SystemExit):
            main(["simulate", str(plan_file), option, value])

    def test_frame_limit_reports_unfinished_playback(self, plan_file, capsys):
        assert main(["simulate", str(plan_file), "--max-frames", "2"]) == 1
        assert "playback stopped after 2 frames" in capsys.readouterr().err

    def test_nothing_to_play(self, tmp_path, capsys):
        plan = create_plan_from_points([(51.9, 4.1)])
        path = save_plan(plan, tmp_path / "single.json")

        assert main(["simulate", str(path)]) == 1
        assert "Nothing to play back" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "legs" in capsys.readouterr().out


def test_parser_defaults():
    args = build_parser().parse_args(["legs", "plan.json"])
    assert args.pivot_duration == 30.0
    assert args.drift is False
