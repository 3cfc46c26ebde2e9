"""Unit tests for the built-in check functions."""

from __future__ import annotations

import dataclasses

import pytest

from fair_maturity.checks import DEFAULT_BINDINGS
from fair_maturity.checks.automation import (
    check_automated_tests,
    check_continuous_deployment,
    check_continuous_integration,
)
from fair_maturity.checks.base import first_existing_path, search_first
from fair_maturity.checks.collaboration import (
    check_community_collaborators,
    check_external_collaborators,
    check_identified_collaborators,
    check_reviewed_pull_requests,
)
from fair_maturity.checks.content import (
    check_operating_systems,
    check_persistent_identifier,
    check_programming_languages,
)
from fair_maturity.checks.files import check_readme
from fair_maturity.checks.metadata import check_open_source_license, check_version_control
from fair_maturity.checks.releases import check_release_notes
from fair_maturity.evaluator import Status
from fair_maturity.evaluator.exceptions import CheckFailure, QuotaExceededError
from fair_maturity.repository.client import Contributor, Outcome, Release, Workflow

QUOTA = Outcome.failure("search API rate limit exceeded", status_code=403, quota_exhausted=True)


class TestAllChecksOnMatureRepository:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("criterion_id,check", DEFAULT_BINDINGS)
    async def test_met(self, criterion_id, check, mature_client, make_context):
        outcome = await check(make_context(mature_client))
        assert outcome.status == Status.MET, (criterion_id, outcome)
        assert outcome.evidence


class TestAllChecksOnBareRepository:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("criterion_id,check", [
        (cid, fn) for cid, fn in DEFAULT_BINDINGS if cid != 8
    ])
    async def test_unmet(self, criterion_id, check, bare_client, make_context):
        outcome = await check(make_context(bare_client))
        assert outcome.status == Status.UNMET, (criterion_id, outcome)


class TestFirstExistingPath:
    @pytest.mark.asyncio
    async def test_first_hit(self, mature_client, make_context):
        outcome = await first_existing_path(make_context(mature_client), ["NOPE.md", "README.md"])
        assert outcome.met
        assert outcome.evidence == "Found README.md"

    @pytest.mark.asyncio
    async def test_definite_miss_has_no_error(self, bare_client, make_context):
        outcome = await first_existing_path(make_context(bare_client), ["A", "B"])
        assert not outcome.met
        assert outcome.error is None

    @pytest.mark.asyncio
    async def test_failed_lookup_is_reported(self, bare_client, make_context):
        bare_client.failures["path_exists"] = Outcome.failure("GitHub API returned 500: oops", status_code=500)
        outcome = await first_existing_path(make_context(bare_client), ["README.md"])
        assert not outcome.met
        assert "500" in outcome.error


class TestSearchFirst:
    @pytest.mark.asyncio
    async def test_quota_raises(self, bare_client, make_context):
        bare_client.failures["search_code"] = QUOTA
        with pytest.raises(QuotaExceededError):
            await search_first(make_context(bare_client), ["def test_"])

    @pytest.mark.asyncio
    async def test_other_failure_raises_check_failure(self, bare_client, make_context):
        bare_client.failures["search_code"] = Outcome.failure("Network error")
        with pytest.raises(CheckFailure) as exc_info:
            await search_first(make_context(bare_client), ["def test_"])
        assert not isinstance(exc_info.value, QuotaExceededError)


class TestMetadataChecks:
    @pytest.mark.asyncio
    async def test_license_falls_back_to_file(self, bare_client, make_context):
        bare_client.paths.add("COPYING")
        outcome = await check_open_source_license(make_context(bare_client))
        assert outcome.met
        assert "COPYING" in outcome.evidence

    @pytest.mark.asyncio
    async def test_noassertion_license_needs_file(self, bare_client, make_context):
        bare_client.metadata = bare_client.metadata.model_copy(update={"license": "NOASSERTION"})
        outcome = await check_open_source_license(make_context(bare_client))
        assert not outcome.met

    @pytest.mark.asyncio
    async def test_metadata_failure_raises(self, bare_client, make_context):
        bare_client.failures["get_metadata"] = Outcome.failure("Network error")
        with pytest.raises(CheckFailure):
            await check_version_control(make_context(bare_client))


class TestContentChecks:
    @pytest.mark.asyncio
    async def test_missing_readme_is_verified_unmet(self, bare_client, make_context):
        outcome = await check_operating_systems(make_context(bare_client))
        assert not outcome.met
        assert outcome.error is None

    @pytest.mark.asyncio
    async def test_unreadable_readme_raises(self, bare_client, make_context):
        bare_client.failures["get_readme"] = Outcome.failure("GitHub API returned 500: x", status_code=500)
        with pytest.raises(CheckFailure):
            await check_persistent_identifier(make_context(bare_client))

    @pytest.mark.asyncio
    async def test_language_must_be_a_whole_word(self, bare_client, make_context):
        bare_client.languages = {"C": 100}
        bare_client.readme = "A Colourful Collection of things"
        outcome = await check_programming_languages(make_context(bare_client))
        assert not outcome.met

    @pytest.mark.asyncio
    async def test_language_with_symbols(self, bare_client, make_context):
        bare_client.languages = {"C++": 100}
        bare_client.readme = "Written in modern C++ with CMake."
        outcome = await check_programming_languages(make_context(bare_client))
        assert outcome.met

    @pytest.mark.asyncio
    async def test_swhid(self, bare_client, make_context):
        bare_client.readme = "Archived as swh:1:dir:abc"
        assert (await check_persistent_identifier(make_context(bare_client))).met


class TestFileChecks:
    @pytest.mark.asyncio
    async def test_readme_variant(self, bare_client, make_context):
        bare_client.paths.add("README.rst")
        outcome = await check_readme(make_context(bare_client))
        assert outcome.evidence == "Found README.rst"


class TestReleaseNotes:
    @pytest.mark.asyncio
    async def test_versioned_changelog(self, bare_client, make_context):
        bare_client.text_files["CHANGES.md"] = "# Changes\n\n## v2.0\n- big\n"
        outcome = await check_release_notes(make_context(bare_client))
        assert outcome.met
        assert "CHANGES.md" in outcome.evidence

    @pytest.mark.asyncio
    async def test_unversioned_changelog(self, bare_client, make_context):
        bare_client.text_files["CHANGELOG.md"] = "# Changelog\n\nStuff happened.\n"
        bare_client.releases = [Release(tag_name="v1", body="  ")]
        outcome = await check_release_notes(make_context(bare_client))
        assert not outcome.met


class TestAutomationChecks:
    @pytest.mark.asyncio
    async def test_ci_without_tests(self, bare_client, make_context):
        bare_client.workflows = [Workflow(name="CI", path=".github/workflows/ci.yml")]
        outcome = await check_continuous_integration(make_context(bare_client))
        assert not outcome.met

    @pytest.mark.asyncio
    async def test_disabled_workflow_ignored(self, bare_client, make_context):
        bare_client.paths.add("tests")
        bare_client.workflows = [Workflow(name="CI", path="ci.yml", state="disabled_manually")]
        assert not (await check_continuous_integration(make_context(bare_client))).met

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,path,expected", [
        ("Deploy docs", "docs.yml", True),
        ("Build", ".github/workflows/cd.yml", True),
        ("Build", ".github/workflows/release.yml", True),
        ("Lint", ".github/workflows/lint.yml", False),
        ("Decode", ".github/workflows/abcd.yml", False),
    ])
    async def test_deployment_detection(self, name, path, expected, bare_client, make_context):
        bare_client.workflows = [Workflow(name=name, path=path)]
        outcome = await check_continuous_deployment(make_context(bare_client))
        assert outcome.met is expected

    @pytest.mark.asyncio
    async def test_search_quota_propagates(self, bare_client, make_context):
        bare_client.failures["search_code"] = QUOTA
        with pytest.raises(QuotaExceededError):
            await check_automated_tests(make_context(bare_client))


class TestCollaborationChecks:
    @pytest.mark.asyncio
    async def test_anonymous_contributor(self, bare_client, make_context):
        bare_client.contributors = [Contributor(login="octo"), Contributor(login=None, type="Anonymous")]
        outcome = await check_identified_collaborators(make_context(bare_client))
        assert not outcome.met

    @pytest.mark.asyncio
    async def test_community_list_required(self, mature_client, make_context):
        ctx = dataclasses.replace(make_context(mature_client), community_members=frozenset())
        outcome = await check_community_collaborators(ctx)
        assert not outcome.met
        assert outcome.error == "community member list is not configured"

    @pytest.mark.asyncio
    async def test_community_match_is_case_insensitive(self, bare_client, make_context):
        bare_client.contributors = [Contributor(login="Octo"), Contributor(login="ALICE")]
        assert (await check_community_collaborators(make_context(bare_client))).met

    @pytest.mark.asyncio
    async def test_bots_are_not_collaborators(self, bare_client, make_context):
        bare_client.contributors = [
            Contributor(login="octo"),
            Contributor(login="github-actions[bot]", type="Bot"),
        ]
        assert not (await check_external_collaborators(make_context(bare_client))).met

    @pytest.mark.asyncio
    async def test_only_community_members(self, bare_client, make_context):
        bare_client.contributors = [Contributor(login="octo"), Contributor(login="alice")]
        assert not (await check_external_collaborators(make_context(bare_client))).met

    @pytest.mark.asyncio
    async def test_review_sample_is_bounded(self, mature_client, make_context):
        ctx = dataclasses.replace(make_context(mature_client), pull_request_sample_size=1)
        mature_client.reviews = {6: [mature_client.reviews[7][0]]}
        outcome = await check_reviewed_pull_requests(ctx)
        assert not outcome.met
        assert mature_client.count("list_pull_request_reviews") == 1
