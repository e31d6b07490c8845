"""Unit tests for turning device repository records into a reconciled batch."""

from __future__ import annotations

import pytest

from dtforge.services.device_upload import (
    build_device_targets,
    repository_description,
    resolve_tree_directory,
    serialize_report,
    upload_device_repositories,
)
from dtforge.services.reconcile import (
    BatchOrchestrator,
    BatchReport,
    FileFailure,
    OutcomeStatus,
    ReconciliationOutcome,
)

from tests.helpers.mock_factories import make_mock_device, make_mock_repository


@pytest.fixture
def trees(tmp_path):
    device_tree = tmp_path / "android_device_xiaomi_daisy"
    device_tree.mkdir()
    (device_tree / "device.mk").write_bytes(b"PRODUCT_DEVICE := daisy\n")
    vendor_tree = tmp_path / "vendor" / "xiaomi" / "daisy"
    vendor_tree.mkdir(parents=True)
    (vendor_tree / "daisy-vendor.mk").write_bytes(b"# vendor\n")
    return tmp_path


def _records():
    return [
        make_mock_repository(name="android_device_xiaomi_daisy", category="device"),
        make_mock_repository(
            name="android_vendor_xiaomi_daisy", path="vendor/xiaomi/daisy", category="vendor"
        ),
        make_mock_repository(
            name="android_kernel_xiaomi_msm8953", path="kernel/xiaomi/msm8953", category="kernel"
        ),
    ]


class TestTargets:
    def test_description(self):
        device = make_mock_device()
        record = make_mock_repository(category="device")

        assert repository_description(device, record) == (
            "Device tree for Xiaomi Mi A2 Lite (daisy) - device - LineageOS lineage-23.0"
        )

    def test_resolves_by_name_then_path(self, trees):
        by_name, by_path, missing = _records()

        assert resolve_tree_directory(trees, by_name) == trees / "android_device_xiaomi_daisy"
        assert resolve_tree_directory(trees, by_path) == trees / "vendor" / "xiaomi" / "daisy"
        assert resolve_tree_directory(trees, missing) is None

    def test_parent_segments_stay_inside_root(self, tmp_path):
        root = tmp_path / "device-trees"
        root.mkdir()
        (tmp_path / "secrets").mkdir()
        (tmp_path / "secrets" / "id_rsa").write_bytes(b"key")
        record = make_mock_repository(name="android_device_xiaomi_daisy", path="../secrets")

        assert resolve_tree_directory(root, record) is None

    def test_absolute_path_ignored(self, tmp_path):
        root = tmp_path / "device-trees"
        root.mkdir()
        outside = tmp_path / "home"
        outside.mkdir()
        record = make_mock_repository(name="android_device_xiaomi_daisy", path=str(outside))

        assert resolve_tree_directory(root, record) is None

    def test_root_itself_ignored(self, trees):
        record = make_mock_repository(name="android_device_xiaomi_x", path=".")

        assert resolve_tree_directory(trees, record) is None

    def test_one_target_per_record_in_order(self, trees):
        targets = build_device_targets(make_mock_device(), _records(), trees, "private")

        assert [t.repository_name for t in targets] == [
            "android_device_xiaomi_daisy",
            "android_vendor_xiaomi_daisy",
            "android_kernel_xiaomi_msm8953",
        ]
        assert [len(t.files) for t in targets] == [1, 1, 0]
        assert {t.branch for t in targets} == {"lineage-23.0"}
        assert {t.visibility for t in targets} == {"private"}


class TestSerializeReport:
    def test_maps_statuses(self):
        report = BatchReport.from_outcomes(
            [
                ReconciliationOutcome(
                    "new", OutcomeStatus.CREATED, url="u1", repository_created=True
                ),
                ReconciliationOutcome("same", OutcomeStatus.ALREADY_PRESENT, url="u2"),
                ReconciliationOutcome(
                    "partial",
                    OutcomeStatus.PARTIAL_FAILURE,
                    failures=(FileFailure("a.txt", "Concurrent modification of a.txt"),),
                    files_written=2,
                ),
                ReconciliationOutcome("broken", OutcomeStatus.FAILED, reason="No base branch"),
            ]
        )

        response = serialize_report(report, make_mock_device())

        assert response.success is False
        assert response.message == "Processed 4 repositories: 2 successful, 2 errors"
        assert response.device.codename == "daisy"
        assert [r.status for r in response.repositories] == ["created", "exists", "error", "error"]
        assert response.repositories[0].message == "Repository created successfully"
        assert response.repositories[2].error == "a.txt: Concurrent modification of a.txt"
        assert response.repositories[3].error == "No base branch"

    def test_created_on_existing_repository_reports_writes(self):
        report = BatchReport.from_outcomes(
            [
                ReconciliationOutcome(
                    "r", OutcomeStatus.CREATED, branch="dev", files_written=3, branch_created=True
                )
            ]
        )

        result = serialize_report(report, make_mock_device()).repositories[0]

        assert result.message == "Reconciled 3 file(s) on dev (branch created)"


class TestUploadDeviceRepositories:
    @pytest.mark.asyncio
    async def test_end_to_end_against_fake_host(self, trees, fake_client, policy):
        response = await upload_device_repositories(
            make_mock_device(), _records(), BatchOrchestrator(fake_client, policy), trees
        )

        assert response.success is True
        assert [r.status for r in response.repositories] == ["created"] * 3
        assert fake_client.file(
            "android_device_xiaomi_daisy", "lineage-23.0", "device.mk"
        ) == b"PRODUCT_DEVICE := daisy\n"
        assert fake_client.calls_to("create_repository")[0][1] == (
            "Device tree for Xiaomi Mi A2 Lite (daisy) - device - LineageOS lineage-23.0"
        )
