"""
Unit tests for planner/config.py
"""

from pathlib import Path

import pytest
import yaml

from planner.config import PlannerConfig, apply_environment, load_config


def write_yaml(tmp_path, text):
    path = tmp_path / "planner.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    """Test configuration loading."""

    def test_defaults_without_file(self):
        config = load_config(environ={})

        assert config == PlannerConfig()
        assert config.storage.adapter == "json"
        assert config.storage.key == "plannerData"
        assert config.events.history_capacity == 100
        assert config.defaults.orientation == "landscape"

    def test_file_overrides(self, tmp_path):
        path = write_yaml(
            tmp_path,
            """
storage:
  adapter: memory
  directory: /tmp/planner-test
events:
  history_capacity: 7
features:
  undo_redo: false
""",
        )

        config = load_config(path, environ={})

        assert config.storage.adapter == "memory"
        assert config.storage.directory == Path("/tmp/planner-test")
        assert config.storage.namespace == "planner"
        assert config.events.history_capacity == 7
        assert config.features.undo_redo is False
        assert config.is_feature_enabled("undo_redo") is False
        assert config.is_feature_enabled("no_such_feature") is False

    def test_empty_file(self, tmp_path):
        path = write_yaml(tmp_path, "")
        assert load_config(path, environ={}) == PlannerConfig()

    def test_empty_section_is_ignored(self, tmp_path):
        path = write_yaml(tmp_path, "storage:\n")
        assert load_config(path, environ={}).storage.adapter == "json"

    def test_file_must_be_mapping(self, tmp_path):
        path = write_yaml(tmp_path, "- one\n- two\n")

        with pytest.raises(ValueError) as exc_info:
            load_config(path, environ={})

        assert "must be a YAML mapping" in str(exc_info.value)

    def test_unknown_section(self, tmp_path):
        path = write_yaml(tmp_path, "plugins:\n  enabled: true\n")

        with pytest.raises(ValueError) as exc_info:
            load_config(path, environ={})

        assert "Unknown config section: 'plugins'" in str(exc_info.value)

    def test_section_must_be_mapping(self, tmp_path):
        path = write_yaml(tmp_path, "storage: json\n")

        with pytest.raises(ValueError) as exc_info:
            load_config(path, environ={})

        assert "Config section 'storage' must be a mapping" in str(exc_info.value)

    def test_unknown_option(self, tmp_path):
        path = write_yaml(tmp_path, "events:\n  retention: 5\n")

        with pytest.raises(ValueError) as exc_info:
            load_config(path, environ={})

        assert "Unknown option 'retention' in config section 'events'" in str(exc_info.value)

    def test_wrong_types(self, tmp_path):
        path = write_yaml(tmp_path, "events:\n  history_capacity: lots\n")
        with pytest.raises(ValueError) as exc_info:
            load_config(path, environ={})
        assert "must be an integer" in str(exc_info.value)

        path = write_yaml(tmp_path, "storage:\n  autosave: sometimes\n")
        with pytest.raises(ValueError) as exc_info:
            load_config(path, environ={})
        assert "must be true or false" in str(exc_info.value)

    def test_invalid_values(self, tmp_path):
        path = write_yaml(tmp_path, "events:\n  history_capacity: -1\n")
        with pytest.raises(ValueError):
            load_config(path, environ={})

        path = write_yaml(tmp_path, "storage:\n  adapter: cloud\n")
        with pytest.raises(ValueError) as exc_info:
            load_config(path, environ={})
        assert "storage.adapter must be one of json, memory" in str(exc_info.value)

        path = write_yaml(tmp_path, "defaults:\n  orientation: square\n")
        with pytest.raises(ValueError):
            load_config(path, environ={})

    def test_malformed_yaml(self, tmp_path):
        path = write_yaml(tmp_path, "storage: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_config(path, environ={})


class TestEnvironment:
    """Test environment variable overrides."""

    def test_data_dir(self, tmp_path):
        config = apply_environment(PlannerConfig(), {"PLANNER_DATA_DIR": str(tmp_path)})
        assert config.storage.directory == tmp_path

    def test_log_level(self):
        config = apply_environment(PlannerConfig(), {"PLANNER_LOG_LEVEL": "debug"})
        assert config.logging.level == "DEBUG"

    def test_environment_beats_file(self, tmp_path):
        path = write_yaml(tmp_path, "storage:\n  directory: /from/file\n")

        config = load_config(path, environ={"PLANNER_DATA_DIR": str(tmp_path / "env")})

        assert config.storage.directory == tmp_path / "env"

    def test_empty_values_ignored(self):
        config = apply_environment(PlannerConfig(), {"PLANNER_DATA_DIR": "", "PLANNER_LOG_LEVEL": ""})
        assert config == PlannerConfig()
