"""Command-line entry point: evaluate one repository and print the JSON report."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from fair_maturity.config import get_settings
from fair_maturity.evaluator import LEVEL_ORDER, EvaluationReport
from fair_maturity.evaluator.exceptions import EvaluatorError, InputError
from fair_maturity.evaluator.service import ComplianceEvaluationService
from fair_maturity.evaluator.snapshot import EvaluationSnapshot
from fair_maturity.repository.github import GitHubClient
from fair_maturity.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INPUT_ERROR = 2


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fair-maturity",
        description="Grade a repository against the research software maturity guidelines.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage examples:
  %(prog)s owner/repo
  %(prog)s https://github.com/owner/repo --target-level Intermediate
  %(prog)s owner/repo --answers answers.json --snapshot run.json
  %(prog)s --from-snapshot run.json
        """,
    )
    parser.add_argument(
        "repository",
        nargs="?",
        help="Repository identifier: owner/repo, host/owner/repo or a URL",
    )
    parser.add_argument(
        "-l",
        "--target-level",
        metavar="LEVEL",
        help=f"Highest tier to evaluate against ({', '.join(level.value for level in LEVEL_ORDER)})",
    )
    parser.add_argument(
        "-a",
        "--answers",
        metavar="FILE",
        help="JSON file mapping manual criterion ids to answers",
    )
    parser.add_argument(
        "-s",
        "--snapshot",
        metavar="FILE",
        help="Write an evaluation snapshot to this file",
    )
    parser.add_argument(
        "--from-snapshot",
        metavar="FILE",
        help="Re-run a stored snapshot with its manual answers",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not print check progress",
    )
    args = parser.parse_args(argv)
    if not args.repository and not args.from_snapshot:
        parser.error("a repository or --from-snapshot is required")
    return args


def _load_answers(path: str | None) -> dict:
    if not path:
        return {}
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise InputError(f"Cannot read answers file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise InputError(f"Answers file {path} must contain a JSON object")
    return data


def _load_snapshot(path: str) -> EvaluationSnapshot:
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise InputError(f"Cannot read snapshot {path}: {exc}") from exc
    return EvaluationSnapshot.from_json(raw)


def _print_progress(completed: int, total: int, label: str) -> None:
    print(f"[{completed}/{total}] {label}", file=sys.stderr)


async def run(args: argparse.Namespace) -> EvaluationReport:
    settings = get_settings()
    service = ComplianceEvaluationService(GitHubClient.from_settings(settings), settings=settings)
    progress = None if args.quiet else _print_progress
    try:
        if args.from_snapshot:
            snapshot = _load_snapshot(args.from_snapshot)
            answers = snapshot.manual_answers
            report = await service.reevaluate(snapshot, progress=progress)
        else:
            answers = _load_answers(args.answers)
            report = await service.evaluate(
                args.repository,
                target_level=args.target_level,
                manual_answers=answers,
                progress=progress,
            )
    finally:
        await service.aclose()

    if args.snapshot:
        snapshot = EvaluationSnapshot.from_report(report, answers)
        Path(args.snapshot).write_text(snapshot.to_json(), encoding="utf-8")
        logger.info("Snapshot written to %s", args.snapshot)
    return report


def main(argv: list[str] | None = None) -> int:
    args = parse_arguments(argv)
    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        environment=settings.app_env.value,
        module_levels=settings.module_log_levels,
    )

    try:
        report = asyncio.run(run(args))
    except InputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except EvaluatorError as exc:
        logger.error("Evaluation failed: %s context=%s", exc, exc.context)
        return EXIT_ERROR

    print(report.model_dump_json(indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
