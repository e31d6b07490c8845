"""Unit tests for environment-driven settings."""

from dtforge.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ("GITHUB_OWNER", "WRITE_PACING_SECONDS", "BASE_BRANCHES"):
            monkeypatch.delenv(var, raising=False)

        config = Settings(_env_file=None)

        assert config.github_owner == "Gtajisan"
        assert config.write_pacing_seconds == 0.3
        assert config.transport_retries == 1
        assert config.base_branches == ["main", "master"]

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_OWNER", "LineageOS-Devices")
        monkeypatch.setenv("BASE_BRANCHES", '["lineage-23.0", "main"]')
        monkeypatch.setenv("WRITE_PACING_SECONDS", "0")

        config = Settings(_env_file=None)

        assert config.github_owner == "LineageOS-Devices"
        assert config.base_branches == ["lineage-23.0", "main"]
        assert config.write_pacing_seconds == 0

    def test_connector_enabled(self):
        assert Settings(connector_hostname="h", connector_identity="i").connector_enabled
        assert Settings(connector_hostname="h", connector_renewal="r").connector_enabled
        assert not Settings(
            connector_hostname="", connector_identity="i", connector_renewal=""
        ).connector_enabled
        assert not Settings(
            connector_hostname="h", connector_identity="", connector_renewal=""
        ).connector_enabled
