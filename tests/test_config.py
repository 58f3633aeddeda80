# tests/test_config.py
"""
Tests for TimeConfig precedence and YAML settings loading.
"""

import threading

import pytest
from uiauto_pages.config import (PageSettings, TimeConfig, TimeoutSettings,
                                 available_presets, load_settings)
from uiauto_pages.exceptions import ConfigError
from uiauto_pages.store import PageNodeStore


def write_yaml(tmp_path, text):
    path = tmp_path / "settings.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestTimeConfig:
    """Tests for presets and override precedence."""

    def test_default_preset(self):
        """Should start from the base defaults."""
        config = TimeConfig.current()

        assert config.element_wait.timeout == 10.0
        assert config.page_wait.interval == 0.5
        assert config.click_action.retry_count == 3
        assert config.after_click_pause == 0.0

    def test_named_preset(self):
        """Should apply preset values over the defaults."""
        config = TimeConfig("slow")

        assert config.element_wait.timeout == 20.0
        assert config.after_click_pause == 0.15

    def test_unknown_preset(self):
        """Should reject unknown preset names."""
        with pytest.raises(ValueError):
            TimeConfig("instant")

    def test_available_presets(self):
        """Should list the default preset and every named one."""
        assert set(available_presets()) == {"default", "fast", "slow", "ci"}

    def test_override_wins_over_run_config(self):
        """Should prefer the override context over the installed run config."""
        TimeConfig.install_run_config(TimeConfig.build_from(preset="fast"))

        with TimeConfig.override(element_wait={"timeout": 1.5}):
            assert TimeConfig.current().element_wait.timeout == 1.5
            assert TimeConfig.current().element_wait.interval == 0.1

        assert TimeConfig.current().element_wait.timeout == 5.0

    def test_override_rejects_unknown_field(self):
        """Should fail on fields the config does not have."""
        with pytest.raises(ValueError):
            with TimeConfig.override(teleport_wait={"timeout": 1}):
                pass

    def test_override_accepts_settings_object(self):
        """Should replace a field with a TimeoutSettings value."""
        with TimeConfig.override(list_wait=TimeoutSettings(timeout=2.0, interval=0.5)) as config:
            assert config.list_wait.timeout == 2.0

    def test_run_config_is_thread_local(self):
        """Should not leak a run config into other threads."""
        TimeConfig.install_run_config(TimeConfig.build_from(preset="ci"))
        seen = []

        thread = threading.Thread(target=lambda: seen.append(TimeConfig.current().element_wait.timeout))
        thread.start()
        thread.join()

        assert seen == [10.0]
        assert TimeConfig.current().element_wait.timeout == 20.0

    def test_app_defaults_apply_to_default_preset(self):
        """Should use the node defaults for element and list waits."""
        config = TimeConfig.build_from(
            preset="default",
            app_defaults={"default_timeout": 3.0, "polling_interval": 0.1},
        )

        assert config.element_wait.timeout == 3.0
        assert config.list_wait.interval == 0.1
        assert config.page_wait.timeout == 30.0


class TestPageSettings:
    """Tests for installing settings."""

    def test_install(self):
        """Should install the settings as the run config."""
        PageSettings(default_timeout=2.0, polling_interval=0.1).install()

        assert TimeConfig.current().element_wait.timeout == 2.0

    def test_nodes_read_config_at_construction(self, driver):
        """Should keep the timeout a node was built with."""
        store = PageNodeStore.from_settings(driver, PageSettings(default_timeout=2.0, polling_interval=0.1))
        element = store.element("//p")

        PageSettings(default_timeout=7.0, polling_interval=0.1).install()

        assert element.timeout == 2.0
        assert store.element("//div").timeout == 7.0


class TestLoadSettings:
    """Tests for YAML settings files."""

    def test_full_file(self, tmp_path):
        """Should parse every section."""
        path = write_yaml(tmp_path, """
preset: default
nodes:
  default_timeout: 4
  polling_interval: 0.1
  default_wait: exist
store:
  disable_cache: true
timings:
  page_wait:
    timeout: 12
""")

        settings = load_settings(path)

        assert settings.default_timeout == 4.0
        assert settings.default_wait == "exist"
        assert settings.disable_cache is True
        assert settings.build_time_config().page_wait.timeout == 12.0

    def test_empty_file(self, tmp_path):
        """Should fall back to defaults for an empty file."""
        settings = load_settings(write_yaml(tmp_path, ""))

        assert settings == PageSettings()

    def test_missing_file(self, tmp_path):
        """Should raise ConfigError for a missing file."""
        with pytest.raises(ConfigError, match="not found"):
            load_settings(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        """Should raise ConfigError for unparsable YAML."""
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(write_yaml(tmp_path, "nodes: [unclosed"))

    def test_root_must_be_mapping(self, tmp_path):
        """Should reject a YAML list at the root."""
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(write_yaml(tmp_path, "- a\n- b\n"))

    def test_schema_errors(self, tmp_path):
        """Should report schema violations with their paths."""
        path = write_yaml(tmp_path, """
preset: turbo
nodes:
  default_timeout: -1
""")

        with pytest.raises(ConfigError) as exc_info:
            load_settings(path)

        message = str(exc_info.value)
        assert message.startswith("Settings schema validation failed:")
        assert "['nodes', 'default_timeout']" in message
        assert "['preset']" in message

    def test_unknown_key(self, tmp_path):
        """Should reject keys the schema does not define."""
        with pytest.raises(ConfigError):
            load_settings(write_yaml(tmp_path, "browser: chrome\n"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
