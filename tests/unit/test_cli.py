"""Unit tests for the command-line entry point."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from fair_maturity.cli import EXIT_ERROR, EXIT_INPUT_ERROR, EXIT_OK, main, parse_arguments
from fair_maturity.evaluator.exceptions import EvaluatorError


@pytest.fixture
def cli_env(settings, mature_client):
    """Route the CLI to the fake client and isolated settings."""
    with patch("fair_maturity.cli.get_settings", return_value=settings), \
         patch("fair_maturity.cli.GitHubClient") as MockClient:
        MockClient.from_settings.return_value = mature_client
        yield mature_client


class TestParseArguments:
    def test_repository_and_options(self):
        args = parse_arguments(["octo/widgets", "-l", "Intermediate", "-a", "answers.json", "-q"])
        assert args.repository == "octo/widgets"
        assert args.target_level == "Intermediate"
        assert args.answers == "answers.json"
        assert args.quiet

    def test_from_snapshot_only(self):
        args = parse_arguments(["--from-snapshot", "run.json"])
        assert args.repository is None
        assert args.from_snapshot == "run.json"

    def test_requires_repository_or_snapshot(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_arguments([])
        assert exc_info.value.code == 2


class TestMain:
    def test_prints_json_report(self, cli_env, capsys):
        code = main(["octo/widgets", "--target-level", "Novice", "-q"])
        assert code == EXIT_OK
        report = json.loads(capsys.readouterr().out)
        assert report["repository"] == "github.com/octo/widgets"
        assert report["capped_level"] == "Novice"
        assert list(report["level_scores"]) == ["Novice"]
        assert report["level_scores"]["Novice"]["unmet"] == [1, 2, 3]
        assert cli_env.closed

    def test_applies_module_log_levels(self, settings, mature_client):
        tuned = settings.model_copy(update={"module_log_levels": {"fair_maturity.checks": "DEBUG"}})
        with patch("fair_maturity.cli.get_settings", return_value=tuned), \
             patch("fair_maturity.cli.GitHubClient") as MockClient:
            MockClient.from_settings.return_value = mature_client
            assert main(["octo/widgets", "--target-level", "Novice", "-q"]) == EXIT_OK
        assert logging.getLogger("fair_maturity.checks").level == logging.DEBUG

    def test_progress_goes_to_stderr(self, cli_env, capsys):
        main(["octo/widgets", "--target-level", "Novice"])
        assert "[1/5]" in capsys.readouterr().err

    def test_malformed_repository(self, cli_env, capsys):
        code = main(["not a repository", "-q"])
        assert code == EXIT_INPUT_ERROR
        assert "Malformed repository identifier" in capsys.readouterr().err
        assert cli_env.calls == []

    def test_unreadable_answers_file(self, cli_env, tmp_path):
        assert main(["octo/widgets", "-a", str(tmp_path / "missing.json"), "-q"]) == EXIT_INPUT_ERROR

    def test_answers_file_must_be_object(self, cli_env, tmp_path):
        path = tmp_path / "answers.json"
        path.write_text("[1, 2]")
        assert main(["octo/widgets", "-a", str(path), "-q"]) == EXIT_INPUT_ERROR

    def test_evaluator_error_exit_code(self, cli_env):
        with patch(
            "fair_maturity.cli.ComplianceEvaluationService.evaluate",
            side_effect=EvaluatorError("boom"),
        ):
            assert main(["octo/widgets", "-q"]) == EXIT_ERROR
        assert cli_env.closed


class TestSnapshotRoundTrip:
    def test_write_then_rerun(self, cli_env, tmp_path, capsys):
        answers = tmp_path / "answers.json"
        answers.write_text(json.dumps({"1": {"status": "met", "evidence": "README"}}))
        snapshot = tmp_path / "run.json"

        assert main(["octo/widgets", "-l", "Novice", "-a", str(answers), "-s", str(snapshot), "-q"]) == EXIT_OK
        first = json.loads(capsys.readouterr().out)
        stored = json.loads(snapshot.read_text())
        assert stored["manual_answers"]["1"]["evidence"] == "README"

        assert main(["--from-snapshot", str(snapshot), "-q"]) == EXIT_OK
        second = json.loads(capsys.readouterr().out)
        assert second["results"] == first["results"]
        assert second["target_level"] == "Novice"

    def test_corrupt_snapshot(self, cli_env, tmp_path):
        path = tmp_path / "run.json"
        path.write_text("{broken")
        assert main(["--from-snapshot", str(path), "-q"]) == EXIT_INPUT_ERROR
