"""Tests for pidfinder configuration manager."""

import pytest
import yaml

from pidfinder.core.config import FinderConfig, default_config_path
from pidfinder.core.models import MatchCriteria, ResolutionError
from pidfinder.detection.pipeline import ProcessFinder
from pidfinder.sensors.procfs import ProcFS


class TestFinderConfig:
    def test_default_config_has_all_sections(self):
        config = FinderConfig()
        for section in ("match", "procfs", "reclaim", "logging"):
            assert isinstance(config.get(section), dict)

    def test_defaults(self):
        config = FinderConfig()
        assert config.get("procfs.root") == "/proc"
        assert config.get("reclaim.enabled") is False
        assert config.get("reclaim.interval_seconds") == 5.0
        assert config.get("match.reconcile") is None

    def test_get_missing_key_returns_default(self):
        config = FinderConfig()
        assert config.get("nonexistent.key", "fallback") == "fallback"

    def test_set_nested_value(self):
        config = FinderConfig()
        config.set("match.process_name", "nginx")
        assert config.get("match.process_name") == "nginx"

    def test_instances_do_not_share_defaults(self):
        a = FinderConfig()
        a.set("procfs.root", "/elsewhere")
        assert FinderConfig().get("procfs.root") == "/proc"

    def test_criteria_from_match_section(self):
        config = FinderConfig()
        config.set("match.process_name", "nginx")
        config.set("match.reconcile", "parent")
        assert config.criteria() == MatchCriteria(process_name="nginx", reconcile="parent")

    def test_save_and_load(self, tmp_path):
        config = FinderConfig()
        config.set("match.process_cwd", "^/srv")
        config_path = tmp_path / "conf" / "config.yaml"
        config.save(config_path)

        loaded = FinderConfig.load(config_path)
        assert loaded.get("match.process_cwd") == "^/srv"

    def test_load_nonexistent_returns_defaults(self, tmp_path):
        config = FinderConfig.load(tmp_path / "nonexistent.yaml")
        assert config.get("procfs.root") == "/proc"

    def test_load_merges_with_defaults(self, tmp_path):
        config_path = tmp_path / "partial.yaml"
        config_path.write_text(yaml.dump({"match": {"processName": "redis"}}))
        config = FinderConfig.load(config_path)
        assert config.criteria().process_name == "redis"
        assert config.get("reclaim.enabled") is False

    def test_load_empty_file(self, tmp_path):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        assert FinderConfig.load(config_path).get("procfs.root") == "/proc"

    def test_load_rejects_non_mapping(self, tmp_path):
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            FinderConfig.load(config_path)

    def test_numeric_process_name_becomes_string(self, tmp_path):
        config_path = tmp_path / "numeric.yaml"
        config_path.write_text("match:\n  process_name: 1234\n")
        criteria = FinderConfig.load(config_path).criteria()
        assert criteria.process_name == "1234"

    def test_numeric_process_name_resolves_without_raising(self, tmp_path, fake_procfs):
        fake_procfs.add(10, "worker-1234")
        fake_procfs.add(11, "bash")
        config_path = tmp_path / "numeric.yaml"
        config_path.write_text("match:\n  process_name: 1234\n")
        criteria = FinderConfig.load(config_path).criteria()
        finder = ProcessFinder(procfs=ProcFS(fake_procfs.root), is_linux=True)
        assert finder.resolve(criteria).pid == 10

    def test_list_process_name_is_invalid_pattern(self, tmp_path, fake_procfs):
        fake_procfs.add(10, "worker")
        config_path = tmp_path / "list.yaml"
        config_path.write_text("match:\n  process_name: [a, b]\n")
        criteria = FinderConfig.load(config_path).criteria()
        finder = ProcessFinder(procfs=ProcFS(fake_procfs.root), is_linux=True)
        result = finder.resolve(criteria)
        assert result.pid == 0
        assert result.error is ResolutionError.INVALID_PATTERN


class TestDefaultConfigPath:
    def test_uses_xdg_config_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert default_config_path() == tmp_path / "pidfinder" / "config.yaml"

    def test_falls_back_to_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_config_path() == tmp_path / ".config" / "pidfinder" / "config.yaml"
