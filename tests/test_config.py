"""
Unit tests for configuration loading and validation.

Tests defaults, path resolution, and strict validation errors.
"""

import os
import tempfile
from pathlib import Path

import pytest
import yaml

from image_dashboard.config.loader import (
    DashboardConfig,
    PresetConfig,
    StorageConfig,
    UsageConfig,
    load_dashboard_config,
)


class TestConfigLoading:
    """Test configuration loading and validation."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, config_data, filename: str = "config.yaml") -> str:
        """Write configuration data to temporary file."""
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path

    def test_valid_config_loads_correctly(self):
        """Test that a full configuration loads correctly."""
        config_path = self._write_config({
            "storage": {
                "presets_path": "state/presets.json",
                "usage_path": "/var/lib/dashboard/usage.json"
            },
            "presets": {"seed_defaults": False},
            "usage": {"recent_limit": 20, "export_limit": 500}
        })

        config = load_dashboard_config(config_path)

        base = Path(self.temp_dir).resolve()
        assert config.storage.presets_path == base / "state" / "presets.json"
        assert config.storage.usage_path == Path("/var/lib/dashboard/usage.json")
        assert config.presets.seed_defaults is False
        assert config.usage.recent_limit == 20
        assert config.usage.export_limit == 500

    def test_partial_config_keeps_defaults(self):
        """Test that omitted sections keep their defaults."""
        config_path = self._write_config({"usage": {"recent_limit": 10}})

        config = load_dashboard_config(config_path)

        assert config.usage.recent_limit == 10
        assert config.usage.export_limit == 1000
        assert config.presets.seed_defaults is True
        assert config.storage == StorageConfig()

    def test_defaults(self):
        """Test the built-in defaults."""
        config = DashboardConfig()

        assert config.storage.presets_path == Path("data/presets.json")
        assert config.storage.usage_path == Path("data/usage.json")
        assert config.presets == PresetConfig(seed_defaults=True)
        assert config.usage == UsageConfig(recent_limit=50, export_limit=1000)

    def test_missing_file(self):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Dashboard config file not found"):
            load_dashboard_config(os.path.join(self.temp_dir, "nope.yaml"))

    def test_empty_file(self):
        """Test that an empty file is rejected."""
        config_path = os.path.join(self.temp_dir, "empty.yaml")
        Path(config_path).write_text("", encoding="utf-8")

        with pytest.raises(ValueError, match="Configuration file is empty"):
            load_dashboard_config(config_path)

    def test_invalid_yaml(self):
        """Test that malformed YAML is reported."""
        config_path = os.path.join(self.temp_dir, "bad.yaml")
        Path(config_path).write_text("storage: [unclosed", encoding="utf-8")

        with pytest.raises(yaml.YAMLError, match="Invalid YAML"):
            load_dashboard_config(config_path)

    def test_non_mapping_document(self):
        """Test that a top-level list is rejected."""
        config_path = self._write_config(["storage"])

        with pytest.raises(ValueError, match="must be a dictionary"):
            load_dashboard_config(config_path)

    def test_unknown_top_level_key(self):
        """Test that unknown sections are rejected."""
        config_path = self._write_config({"database": {"url": "sqlite://"}})

        with pytest.raises(ValueError, match="Unknown configuration keys"):
            load_dashboard_config(config_path)

    def test_unknown_section_key(self):
        """Test that unknown keys inside a section are rejected."""
        config_path = self._write_config({"storage": {"images_path": "out"}})

        with pytest.raises(ValueError, match="Unknown keys in storage"):
            load_dashboard_config(config_path)

    def test_section_must_be_mapping(self):
        """Test that sections must be dictionaries."""
        config_path = self._write_config({"usage": [1, 2]})

        with pytest.raises(ValueError, match="'usage' must be a dictionary"):
            load_dashboard_config(config_path)

    def test_empty_storage_path(self):
        """Test that storage paths must be non-empty strings."""
        config_path = self._write_config({"storage": {"usage_path": ""}})

        with pytest.raises(ValueError, match="storage.usage_path"):
            load_dashboard_config(config_path)

    def test_seed_defaults_must_be_bool(self):
        """Test that seed_defaults rejects non-boolean values."""
        config_path = self._write_config({"presets": {"seed_defaults": "yes please"}})

        with pytest.raises(ValueError, match="seed_defaults"):
            load_dashboard_config(config_path)

    def test_limits_must_be_integers(self):
        """Test that limits reject non-integer values."""
        config_path = self._write_config({"usage": {"recent_limit": "ten"}})

        with pytest.raises(ValueError, match="usage.recent_limit"):
            load_dashboard_config(config_path)

    def test_limits_reject_booleans(self):
        """Test that booleans are not accepted as limits."""
        config_path = self._write_config({"usage": {"export_limit": True}})

        with pytest.raises(ValueError, match="usage.export_limit"):
            load_dashboard_config(config_path)

    def test_limits_must_be_positive(self):
        """Test that zero or negative limits are rejected."""
        config_path = self._write_config({"usage": {"export_limit": 0}})

        with pytest.raises(ValueError, match="export_limit must be > 0"):
            load_dashboard_config(config_path)
