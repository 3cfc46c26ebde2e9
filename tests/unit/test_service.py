"""Unit tests for ComplianceEvaluationService."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from fair_maturity.checks import DEFAULT_BINDINGS
from fair_maturity.checks.base import met
from fair_maturity.checks.registry import CheckRegistry
from fair_maturity.evaluator import Level, Status
from fair_maturity.evaluator.criteria import CriteriaCatalog
from fair_maturity.evaluator.exceptions import ConfigurationError, EvaluatorError, InputError, RegistryError
from fair_maturity.evaluator.service import ComplianceEvaluationService, parse_target_level
from fair_maturity.evaluator.snapshot import EvaluationSnapshot
from fair_maturity.pipeline.nodes.check_runner import UNREACHABLE_ERROR
from fair_maturity.repository.cache import ResultCache
from fair_maturity.repository.client import Outcome
from fair_maturity.repository.github import GitHubClient
from tests.fixtures.criteria import auto

NOVICE_ANSWERS = {
    "1": {"status": "met", "evidence": "Research purpose stated in README"},
    "2": {"status": "met", "evidence": "docs/index.md"},
    "3": {"status": "met", "evidence": "Maintainers listed in AUTHORS"},
}


async def _met(ctx):
    return met("present")


class TestParseTargetLevel:
    @pytest.mark.parametrize("value", [None, ""])
    def test_absent(self, value):
        assert parse_target_level(value) is None

    def test_case_insensitive(self):
        assert parse_target_level("advanced") == Level.ADVANCED

    def test_unknown_level(self):
        with pytest.raises(InputError):
            parse_target_level("Guru")


class TestServiceInit:
    def test_defaults(self, bare_client, settings):
        svc = ComplianceEvaluationService(bare_client, settings=settings)
        assert len(svc.catalog) == 47
        assert len(svc.registry) == len(DEFAULT_BINDINGS)
        assert svc.cache.ttl_seconds == settings.cache_ttl_seconds

    def test_mismatched_registry_rejected(self, bare_client, settings):
        catalog = CriteriaCatalog([auto(1)])
        with pytest.raises(RegistryError):
            ComplianceEvaluationService(bare_client, catalog=catalog, registry=CheckRegistry(), settings=settings)

    def test_configured_scoring_file_must_exist(self, bare_client, settings, tmp_path):
        missing = settings.model_copy(update={"eval_config_path": str(tmp_path / "scoring.yaml")})
        with pytest.raises(ConfigurationError, match="not found"):
            ComplianceEvaluationService(bare_client, settings=missing)


class TestInputValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("repository,target", [
        ("not a repository", None),
        ("", None),
        ("octo/widgets", "Guru"),
    ])
    async def test_input_error_before_network(self, bare_client, settings, repository, target):
        svc = ComplianceEvaluationService(bare_client, settings=settings)
        with pytest.raises(InputError):
            await svc.evaluate(repository, target_level=target)
        assert bare_client.calls == []

    @pytest.mark.asyncio
    async def test_foreign_host_rejected(self, bare_client, settings):
        svc = ComplianceEvaluationService(bare_client, settings=settings)
        with pytest.raises(InputError, match="'gitlab.com' is not served") as exc_info:
            await svc.evaluate("gitlab.com/octo/widgets")
        assert exc_info.value.context["host"] == "gitlab.com"
        assert bare_client.calls == []

    @pytest.mark.asyncio
    async def test_github_client_never_queried_for_foreign_host(self, settings):
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json={"full_name": "octo/widgets"})

        client = GitHubClient(api_url="https://api.test", transport=httpx.MockTransport(handler))
        svc = ComplianceEvaluationService(client, settings=settings)
        with pytest.raises(InputError):
            await svc.evaluate("https://gitlab.com/octo/widgets")
        await svc.aclose()
        assert requested == []

    @pytest.mark.asyncio
    async def test_host_match_is_case_insensitive(self, bare_client, settings):
        svc = ComplianceEvaluationService(bare_client, settings=settings)
        report = await svc.evaluate("GitHub.com/octo/widgets", target_level="Novice")
        assert report.repository == "github.com/octo/widgets"


class TestEvaluate:
    @pytest.mark.asyncio
    async def test_unreachable_repository(self, unreachable_client, settings):
        catalog = CriteriaCatalog([auto(1, Level.BEGINNER)])
        svc = ComplianceEvaluationService(
            unreachable_client,
            catalog=catalog,
            registry=CheckRegistry.from_bindings([(1, _met)]),
            settings=settings,
        )
        report = await svc.evaluate("octo/widgets")
        assert report.results[1].status == Status.UNMET
        assert report.results[1].error == UNREACHABLE_ERROR
        assert report.global_score == 0.0
        assert report.raw_level == Level.NOVICE
        assert report.achieved_level is None

    @pytest.mark.asyncio
    async def test_mature_repository_at_novice(self, mature_client, settings):
        svc = ComplianceEvaluationService(mature_client, settings=settings)
        report = await svc.evaluate("octo/widgets", target_level="Novice", manual_answers=NOVICE_ANSWERS)
        assert set(report.results) == {8, 29, 10, 11, 32, 1, 2, 3}
        assert all(r.met for r in report.results.values())
        assert report.global_score == 1.0
        assert report.raw_level == Level.EXPERT
        assert report.capped_level == Level.NOVICE
        assert report.achieved_level == Level.NOVICE
        assert report.stats.rate_limit.search_limit == 30

    @pytest.mark.asyncio
    async def test_full_catalog_progress(self, mature_client, settings):
        events: list[tuple[int, int, str]] = []
        svc = ComplianceEvaluationService(mature_client, settings=settings)
        report = await svc.evaluate("octo/widgets", progress=lambda c, t, label: events.append((c, t, label)))
        assert len(report.results) == 47
        assert [c for c, _, _ in events] == list(range(1, len(DEFAULT_BINDINGS) + 1))
        assert {t for _, t, _ in events} == {len(DEFAULT_BINDINGS)}
        assert all(report.results[cid].met for cid, _ in DEFAULT_BINDINGS)

    @pytest.mark.asyncio
    async def test_search_quota_still_yields_full_report(self, mature_client, settings):
        mature_client.failures["search_code"] = Outcome.failure(
            "search API rate limit exceeded; the criterion could not be verified.",
            status_code=403,
            quota_exhausted=True,
        )
        svc = ComplianceEvaluationService(mature_client, settings=settings)
        report = await svc.evaluate("octo/widgets")
        assert len(report.results) == 47
        assert report.results[16].status == Status.UNMET
        assert "rate limit" in report.results[16].error
        assert report.stats.unverified_count >= 1

    @pytest.mark.asyncio
    async def test_cache_cleared_between_runs(self, mature_client, settings):
        cache = ResultCache()
        svc = ComplianceEvaluationService(mature_client, cache=cache, settings=settings)
        await svc.evaluate("octo/widgets", target_level="Novice")
        assert len(cache) > 0
        assert mature_client.count("get_metadata") == 1

        await svc.evaluate("octo/widgets", target_level="Novice")
        assert mature_client.count("get_metadata") == 2

    @pytest.mark.asyncio
    async def test_idempotent(self, mature_client, settings):
        svc = ComplianceEvaluationService(mature_client, settings=settings)
        first = await svc.evaluate("octo/widgets", manual_answers=NOVICE_ANSWERS)
        second = await svc.evaluate("octo/widgets", manual_answers=NOVICE_ANSWERS)
        assert first.results == second.results
        assert first.global_score == second.global_score
        assert first.capped_level == second.capped_level
        assert first.feedback == second.feedback

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self, bare_client, settings):
        async def failing_stream(*args, **kwargs):
            raise RuntimeError("graph exploded")
            yield  # makes this an async generator

        mock_graph = MagicMock()
        mock_graph.astream = failing_stream
        svc = ComplianceEvaluationService(bare_client, settings=settings)
        with patch("fair_maturity.evaluator.service.get_graph", return_value=mock_graph):
            with pytest.raises(EvaluatorError, match="RuntimeError: graph exploded") as exc_info:
                await svc.evaluate("octo/widgets")
        assert exc_info.value.context == {"repository": "github.com/octo/widgets"}

    @pytest.mark.asyncio
    async def test_missing_report(self, bare_client, settings):
        async def empty_stream(*args, **kwargs):
            yield {"score_results": {"global_score": 0.0}}

        mock_graph = MagicMock()
        mock_graph.astream = empty_stream
        svc = ComplianceEvaluationService(bare_client, settings=settings)
        with patch("fair_maturity.evaluator.service.get_graph", return_value=mock_graph):
            with pytest.raises(EvaluatorError, match="no report"):
                await svc.evaluate("octo/widgets")


class TestReevaluate:
    @pytest.mark.asyncio
    async def test_reinjects_manual_answers(self, mature_client, settings):
        svc = ComplianceEvaluationService(mature_client, settings=settings)
        report = await svc.evaluate("octo/widgets", target_level="Novice", manual_answers=NOVICE_ANSWERS)
        snapshot = EvaluationSnapshot.from_report(report, NOVICE_ANSWERS)

        restored = EvaluationSnapshot.from_json(snapshot.to_json())
        again = await svc.reevaluate(restored)

        assert again.results == report.results
        assert again.target_level == Level.NOVICE
        assert again.capped_level == report.capped_level


class TestAclose:
    @pytest.mark.asyncio
    async def test_closes_client(self, bare_client, settings):
        svc = ComplianceEvaluationService(bare_client, settings=settings)
        await svc.aclose()
        assert bare_client.closed
