"""
Unit tests for the command line interface.
"""

import json
import logging

import pytest

from algokit.cli import WORKLOADS, build_parser, main
from algokit.performance.tracker import get_tracker


@pytest.fixture(autouse=True)
def isolated_cli(clean_env, tmp_path):
    """Point the CLI at an empty .env and drop handlers it installs."""
    yield str(tmp_path / "missing.env")
    logging.getLogger("algokit").handlers.clear()


class TestParser:
    """Test argument parsing."""

    def test_analyze_arguments(self):
        args = build_parser().parse_args(["analyze", "merge-sort", "--min-size", "8", "--space"])
        assert args.name == "merge-sort"
        assert args.min_size == 8
        assert args.space is True
        assert args.max_size is None

    def test_unknown_workload(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["analyze", "bogo-sort"])

    def test_workloads_run(self):
        for name, (generator, algorithm) in WORKLOADS.items():
            algorithm(generator(32))


class TestCommands:
    """Test command execution."""

    def test_info_all(self, isolated_cli, capsys):
        assert main(["--env-file", isolated_cli, "info"]) == 0
        out = capsys.readouterr().out
        assert "binary-search (search)" in out
        assert "merge-sort (sort)" in out

    def test_info_unknown(self, isolated_cli):
        assert main(["--env-file", isolated_cli, "info", "bogo-sort"]) == 1

    def test_analyze_with_output(self, isolated_cli, tmp_path, capsys):
        output = tmp_path / "results" / "linear.json"
        code = main([
            "--env-file", isolated_cli,
            "analyze", "linear-search",
            "--min-size", "16", "--max-size", "64", "--iterations", "1",
            "--output", str(output),
        ])

        assert code == 0
        assert "=== Complexity Analysis Report ===" in capsys.readouterr().out

        data = json.loads(output.read_text())
        assert data['workload'] == "linear-search"
        assert len(data['time']['measurement_points']) == 3
        assert get_tracker().get_operation_metrics("analyze.linear-search").count == 1

    def test_analyze_space(self, isolated_cli, capsys):
        code = main([
            "--env-file", isolated_cli,
            "analyze", "deque", "--space",
            "--min-size", "16", "--max-size", "32", "--iterations", "1",
        ])
        assert code == 0
        assert "Analysis Type: Space" in capsys.readouterr().out

    def test_analyze_invalid_override(self, isolated_cli, capsys):
        code = main([
            "--env-file", isolated_cli,
            "analyze", "merge-sort", "--min-size", "100", "--max-size", "10",
        ])
        assert code == 1
        assert "Configuration Error" in capsys.readouterr().err

    def test_compare_search(self, isolated_cli, capsys):
        assert main(["--env-file", isolated_cli, "compare-search", "42", "--size", "500"]) == 0

        out = capsys.readouterr().out
        assert "Searching for 42 in 500 values" in out
        assert "hash-search" in out
        assert get_tracker().get_operation_metrics("compare-search").count == 1

    def test_compare_search_invalid_size(self, isolated_cli):
        assert main(["--env-file", isolated_cli, "compare-search", "1", "--size", "0"]) == 1

    def test_invalid_environment(self, isolated_cli, clean_env, capsys):
        clean_env.setenv("ALGOKIT_ITERATIONS", "many")
        assert main(["--env-file", isolated_cli, "info"]) == 1
        assert "ALGOKIT_ITERATIONS" in capsys.readouterr().err
