"""Unit tests for RepositoryReconciler: one Target end to end."""

from __future__ import annotations

import pytest

from dtforge.services.github.exceptions import (
    AuthError,
    NotFound,
    TransportError,
    VersionConflict,
)
from dtforge.services.reconcile.repository import RepositoryReconciler
from dtforge.services.reconcile.types import FileEntry, OutcomeStatus, Target

REPO = "android_device_xiaomi_daisy"


def _target(
    branch: str | None = "lineage-23.0", files: dict[str, bytes] | None = None
) -> Target:
    entries = [FileEntry(path, content) for path, content in (files or {}).items()]
    return Target(REPO, branch, tuple(entries), description="Daisy")


# ═══════════════════════════════════════════════════════════════════════════
# RepoCheck
# ═══════════════════════════════════════════════════════════════════════════


class TestRepoCheck:
    @pytest.mark.asyncio
    async def test_creates_missing_repository(self, fake_client, policy):
        outcome = await RepositoryReconciler(fake_client, policy).reconcile(_target())

        assert outcome.status == OutcomeStatus.CREATED
        assert outcome.repository_created is True
        assert outcome.branch_created is True
        assert outcome.url == f"https://github.com/octo/{REPO}"
        assert fake_client.calls_to("create_repository") == [(REPO, "Daisy", "public", None)]

    @pytest.mark.asyncio
    async def test_license_template_passed_through(self, fake_client, policy):
        reconciler = RepositoryReconciler(fake_client, policy, license_template="apache-2.0")

        await reconciler.reconcile(_target())

        assert fake_client.calls_to("create_repository")[0][3] == "apache-2.0"

    @pytest.mark.asyncio
    async def test_seeded_license_updated_without_conflict(self, fake_client, policy):
        reconciler = RepositoryReconciler(fake_client, policy, license_template="apache-2.0")
        target = _target(files={"LICENSE": b"Apache License\n", "device.mk": b"a\n"})

        outcome = await reconciler.reconcile(target)

        assert outcome.status == OutcomeStatus.CREATED
        assert outcome.files_written == 2
        assert fake_client.calls_to("get_file_handle") == [(REPO, "LICENSE", "lineage-23.0")]
        puts = fake_client.calls_to("put_file")
        assert [p[1] for p in puts] == ["LICENSE", "device.mk"]
        assert puts[0][3] is not None
        assert puts[1][3] is None

    @pytest.mark.asyncio
    async def test_create_race_treated_as_existing(self, fake_client, policy):
        def other_creator(*_args):
            fake_client.add_repository(REPO, {"main": {}, "lineage-23.0": {}})

        fake_client.before["create_repository"] = other_creator

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(_target())

        assert outcome.status == OutcomeStatus.ALREADY_PRESENT
        assert outcome.repository_created is False

    @pytest.mark.asyncio
    async def test_repo_check_failure_fails_target(self, fake_client, policy):
        fake_client.fail("repository_exists", TransportError("forbidden", 403, retryable=False))

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(
            _target(files={"a.txt": b"a"})
        )

        assert outcome.status == OutcomeStatus.FAILED
        assert "Repository check failed" in outcome.reason
        assert fake_client.write_calls == []

    @pytest.mark.asyncio
    async def test_auth_error_fails_target(self, fake_client, policy):
        fake_client.fail("repository_exists", AuthError())

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(_target())

        assert outcome.status == OutcomeStatus.FAILED
        assert "GitHub not connected" in outcome.reason


# ═══════════════════════════════════════════════════════════════════════════
# BranchCheck
# ═══════════════════════════════════════════════════════════════════════════


class TestBranchCheck:
    @pytest.mark.asyncio
    async def test_no_base_branch_fails_without_file_writes(self, fake_client, policy):
        fake_client.add_repository(REPO, {"develop": {}})

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(
            _target(files={"a.txt": b"a"})
        )

        assert outcome.status == OutcomeStatus.FAILED
        assert "No base branch" in outcome.reason
        assert fake_client.calls_to("get_file_handle") == []
        assert fake_client.calls_to("put_file") == []

    @pytest.mark.asyncio
    async def test_branch_check_transport_failure_fails_target(self, fake_client, policy):
        fake_client.add_repository(REPO)
        fake_client.fail("get_branch_ref", TransportError("502", 502), times=2)

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(_target())

        assert outcome.status == OutcomeStatus.FAILED
        assert "Branch check failed" in outcome.reason

    @pytest.mark.asyncio
    async def test_no_branch_uses_default_branch(self, fake_client, policy):
        fake_client.add_repository(REPO, {"lineage-22.2": {}}, default_branch="lineage-22.2")

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(
            _target(branch=None, files={"a.txt": b"a"})
        )

        assert outcome.status == OutcomeStatus.CREATED
        assert outcome.branch == "lineage-22.2"
        assert outcome.branch_created is False
        assert fake_client.file(REPO, "lineage-22.2", "a.txt") == b"a"
        assert fake_client.calls_to("create_branch_ref") == []


# ═══════════════════════════════════════════════════════════════════════════
# FileUpsertLoop and final status
# ═══════════════════════════════════════════════════════════════════════════


class TestFileLoop:
    @pytest.mark.asyncio
    async def test_already_present_when_nothing_changes(self, fake_client, policy):
        fake_client.add_repository(REPO, {"main": {}, "lineage-23.0": {"a.txt": b"a"}})

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(
            _target(files={"a.txt": b"a"})
        )

        assert outcome.status == OutcomeStatus.ALREADY_PRESENT
        assert outcome.files_unchanged == 1
        assert outcome.files_written == 0
        assert fake_client.write_calls == []

    @pytest.mark.asyncio
    async def test_updated_file_makes_outcome_created(self, fake_client, policy):
        fake_client.add_repository(REPO, {"main": {}, "lineage-23.0": {"a.txt": b"old"}})

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(
            _target(files={"a.txt": b"new", "b.txt": b"b"})
        )

        assert outcome.status == OutcomeStatus.CREATED
        assert outcome.repository_created is False
        assert outcome.files_written == 2

    @pytest.mark.asyncio
    async def test_partial_failure_lists_only_failed_file(self, fake_client, policy):
        fake_client.add_repository(REPO, {"main": {}, "lineage-23.0": {}})
        fake_client.fail(
            "put_file",
            VersionConflict("does not match"),
            times=2,
            when=lambda repo, path, branch, prior: path == "2.txt",
        )

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(
            _target(files={"1.txt": b"1", "2.txt": b"2", "3.txt": b"3"})
        )

        assert outcome.status == OutcomeStatus.PARTIAL_FAILURE
        assert [f.path for f in outcome.failures] == ["2.txt"]
        assert "Concurrent modification of 2.txt" in outcome.failures[0].reason
        assert outcome.files_written == 2
        assert fake_client.file(REPO, "lineage-23.0", "3.txt") == b"3"

    @pytest.mark.asyncio
    async def test_transport_failure_on_one_file_is_isolated(self, fake_client, policy):
        fake_client.add_repository(REPO, {"main": {}, "lineage-23.0": {}})
        fake_client.fail(
            "put_file",
            TransportError("too large", 422, retryable=False),
            when=lambda repo, path, branch, prior: path == "big.bin",
        )

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(
            _target(files={"big.bin": b"0" * 10, "small.txt": b"s"})
        )

        assert outcome.status == OutcomeStatus.PARTIAL_FAILURE
        assert outcome.failures[0].path == "big.bin"
        assert outcome.files_written == 1

    @pytest.mark.asyncio
    async def test_write_not_found_fails_target(self, fake_client, policy):
        fake_client.add_repository(REPO, {"main": {}, "lineage-23.0": {}})
        fake_client.fail("put_file", NotFound("branch gone"))

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(
            _target(files={"a.txt": b"a", "b.txt": b"b"})
        )

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.branch == "lineage-23.0"
        assert len(fake_client.calls_to("put_file")) == 1

    @pytest.mark.asyncio
    async def test_cancellation_between_files(self, fake_client, policy):
        fake_client.add_repository(REPO, {"main": {}, "lineage-23.0": {}})
        fake_client.after["put_file"] = lambda *_args: policy.cancel.cancel()

        outcome = await RepositoryReconciler(fake_client, policy).reconcile(
            _target(files={"a.txt": b"a", "b.txt": b"b", "c.txt": b"c"})
        )

        assert outcome.status == OutcomeStatus.PARTIAL_FAILURE
        assert [f.path for f in outcome.failures] == ["b.txt", "c.txt"]
        assert {f.reason for f in outcome.failures} == {"cancelled"}
        assert outcome.files_written == 1
