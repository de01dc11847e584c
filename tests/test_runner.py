"""
Integration tests for the stacking runner and the ``boxstack`` CLI.

Run with:
    python -m pytest tests/test_runner.py -v
"""

import json

import pytest

from boxstack.core.config import SearchConfig
from boxstack.core.models import Box, is_valid_stack
from boxstack.runner.experiment import StackingRunner, main


@pytest.fixture
def box_file(tmp_path):
    path = tmp_path / "boxes.txt"
    path.write_text("4 6 7\n1 2 3\n4 5 6\n")
    return path


@pytest.fixture
def config():
    return SearchConfig(initial_temperature=1000, cooling_rate=1, seed=0)


# ---------------------------------------------------------------------------
# 1. StackingRunner
# ---------------------------------------------------------------------------

class TestStackingRunner:
    @pytest.mark.asyncio
    async def test_run_example(self, config, example_originals):
        metrics = await StackingRunner(config).run(example_originals)
        assert metrics.original_boxes == 3
        assert metrics.candidates == 9
        assert metrics.initial_size == 3
        assert metrics.initial_height == 9
        assert metrics.final_height >= metrics.initial_height
        assert metrics.final_stack
        assert is_valid_stack(metrics.final_stack)
        assert metrics.iterations == 1000
        assert metrics.completed_at is not None

    @pytest.mark.asyncio
    async def test_run_file_saves_results(self, config, box_file, tmp_path):
        results_dir = tmp_path / "results"
        metrics = await StackingRunner(config, results_dir=results_dir).run_file(box_file)
        assert metrics.input_path == str(box_file)

        saved = json.loads((results_dir / f"{metrics.run_id}.json").read_text())
        assert saved["final_height"] == metrics.final_height
        assert (results_dir / f"{metrics.run_id}_stack.csv").exists()

    @pytest.mark.asyncio
    async def test_missing_file(self, config, tmp_path):
        with pytest.raises(FileNotFoundError):
            await StackingRunner(config).run_file(tmp_path / "nope.txt")

    @pytest.mark.asyncio
    async def test_notifications_without_credentials(self, config, example_originals, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        metrics = await StackingRunner(config, send_telegram_updates=True).run(example_originals)
        assert metrics.final_stack

    @pytest.mark.asyncio
    async def test_empty_input(self, config):
        metrics = await StackingRunner(config).run([])
        assert metrics.final_stack == []
        assert metrics.final_height == 0

    @pytest.mark.asyncio
    async def test_multi_start(self, example_originals):
        config = SearchConfig(initial_temperature=10, cooling_rate=1, seed=0, multi_start=True)
        metrics = await StackingRunner(config).run(example_originals)
        assert metrics.initial_height >= 9


# ---------------------------------------------------------------------------
# 2. Command line
# ---------------------------------------------------------------------------

def _report_lines(out):
    report, _, summary = out.partition("\n\n")
    return report.splitlines(), summary.splitlines()


class TestCli:
    def test_example_output(self, box_file, capsys):
        assert main([str(box_file), "1000", "1", "--seed", "3"]) == 0
        report, summary = _report_lines(capsys.readouterr().out)

        assert report
        boxes = [Box(*map(int, line.split()[:3]), id=-1) for line in report]
        residuals = [int(line.split()[3]) for line in report]
        assert all(a > b for a, b in zip(residuals, residuals[1:]))
        assert residuals[-1] == boxes[-1].h
        assert all(top.w < bottom.w and top.l < bottom.l for top, bottom in zip(boxes, boxes[1:]))

        assert summary[0] == "- Summary -"
        figures = {line.split(":")[0].strip(): int(line.split(":")[1]) for line in summary[1:4]}
        assert figures["Initial stack size"] == 3
        assert figures["Initial stack height"] == 9
        assert figures["Final stack total height"] >= 9
        assert figures["Final stack total height"] == residuals[0]

    def test_same_seed_same_output(self, box_file, capsys):
        main([str(box_file), "200", "1", "--seed", "8"])
        first = capsys.readouterr().out
        main([str(box_file), "200", "1", "--seed", "8"])
        assert capsys.readouterr().out == first

    @pytest.mark.parametrize("argv", [[], ["boxes.txt"], ["boxes.txt", "10"], ["a", "1", "2", "3"]])
    def test_wrong_argument_count_prints_usage(self, argv, capsys):
        with pytest.raises(SystemExit) as exc:
            main(argv)
        assert exc.value.code == 2
        assert "usage:" in capsys.readouterr().err

    @pytest.mark.parametrize("cooling", ["0", "-1"])
    def test_non_positive_cooling_rejected(self, box_file, cooling, capsys):
        with pytest.raises(SystemExit) as exc:
            main([str(box_file), "100", cooling])
        assert exc.value.code == 2
        assert "cooling_rate" in capsys.readouterr().err

    @pytest.mark.parametrize("value", ["inf", "nan"])
    def test_non_finite_parameters_rejected(self, box_file, value, capsys):
        for argv in ([str(box_file), value, "1"], [str(box_file), "100", value]):
            with pytest.raises(SystemExit) as exc:
                main(argv)
            assert exc.value.code == 2
            assert "invalid configuration" in capsys.readouterr().err

    def test_missing_input(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main([str(tmp_path / "missing.txt"), "100", "1"])
        assert exc.value.code == 2
        assert "not found" in capsys.readouterr().err

    def test_config_file_and_results(self, box_file, tmp_path, capsys):
        cfg = tmp_path / "search.yaml"
        cfg.write_text("initial_temperature: 1\ncooling_rate: 1\nmax_iterations: 20\n")
        results_dir = tmp_path / "results"
        assert main([
            str(box_file), "100", "1",
            "--config", str(cfg),
            "--seed", "1",
            "--results-dir", str(results_dir),
            "--verbose",
        ]) == 0
        out = capsys.readouterr().out
        assert "Iterations:     20" in out
        assert len(list(results_dir.glob("*.json"))) == 1

    def test_schedule_from_config_file(self, box_file, tmp_path, capsys):
        cfg = tmp_path / "search.yaml"
        cfg.write_text("initial_temperature: 30\ncooling_rate: 2\nseed: 4\n")
        assert main([str(box_file), "--config", str(cfg), "--verbose"]) == 0
        assert "Iterations:     15" in capsys.readouterr().out

    def test_positionals_override_config_file(self, box_file, tmp_path, capsys):
        cfg = tmp_path / "search.json"
        cfg.write_text(json.dumps({"initial_temperature": 30, "cooling_rate": 2}))
        assert main([str(box_file), "10", "1", "--config", str(cfg), "--verbose"]) == 0
        assert "Iterations:     10" in capsys.readouterr().out

    def test_config_file_missing_cooling_rate(self, box_file, tmp_path, capsys):
        cfg = tmp_path / "search.yaml"
        cfg.write_text("initial_temperature: 30\n")
        with pytest.raises(SystemExit) as exc:
            main([str(box_file), "--config", str(cfg)])
        assert exc.value.code == 2
        assert "cooling_rate" in capsys.readouterr().err

    def test_malformed_config_file(self, box_file, tmp_path, capsys):
        cfg = tmp_path / "search.yaml"
        cfg.write_text("initial_temperature: [30\ncooling_rate: 2\n")
        with pytest.raises(SystemExit) as exc:
            main([str(box_file), "--config", str(cfg)])
        assert exc.value.code == 2
        assert "invalid configuration" in capsys.readouterr().err
