"""Tests for stat_agent.config: Settings defaults and env override."""

from __future__ import annotations

import pytest


class TestSettings:
    def test_default_values(self):
        from stat_agent.config import Settings
        s = Settings()
        assert s.app_name == "Host Stat Agent"
        assert s.debug is False
        assert s.proc_root == "/proc"
        assert s.sample_interval == 1.0
        assert s.vnstat is False
        assert s.probe_port == 80
        assert s.probe_timeout == 1.0
        assert s.fatal_policy == "fatal"

    def test_version_follows_package(self):
        from stat_agent import __version__
        from stat_agent.config import Settings
        assert Settings().version == __version__

    def test_default_iface_ignore_matches_filter(self):
        from stat_agent.collectors.procfs import DEFAULT_IFACE_IGNORE
        from stat_agent.config import Settings
        assert tuple(Settings().iface_ignore) == DEFAULT_IFACE_IGNORE

    def test_disk_fs_allow_list(self):
        from stat_agent.config import Settings
        s = Settings()
        assert "ext4" in s.disk_fs_types
        assert "tmpfs" not in s.disk_fs_types

    def test_env_prefix(self):
        from stat_agent.config import Settings
        assert Settings.model_config["env_prefix"] == "STAT_"

    def test_env_override(self, monkeypatch):
        from stat_agent.config import Settings
        monkeypatch.setenv("STAT_VNSTAT", "true")
        monkeypatch.setenv("STAT_SAMPLE_INTERVAL", "2.5")
        s = Settings()
        assert s.vnstat is True
        assert s.sample_interval == 2.5

    def test_rejects_unknown_policy(self):
        from pydantic import ValidationError

        from stat_agent.config import Settings
        with pytest.raises(ValidationError):
            Settings(fatal_policy="ignore")
