"""Test suite for config management functionality.

This test suite validates:
- Preferences module functionality
- Config loader functionality (optional file, defaults, validation)
- Dynamic config path resolution (no module-level caching)
- CLI commands for config management
"""
import json
from argparse import Namespace

import pytest
import yaml

from dotnet_user_secrets.secrets.domains import preferences
from dotnet_user_secrets.secrets.domains import config_loader
from dotnet_user_secrets.secrets.domains.config_loader import ConfigError


@pytest.fixture
def temp_config_dir(temp_home):
    """Fixture to create temporary config directory."""
    config_dir = temp_home / ".config" / "dotnet-user-secrets"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


@pytest.fixture
def temp_config_file(temp_config_dir):
    """Fixture to create a config file at the default location."""
    config_file = temp_config_dir / "config.yml"
    with open(config_file, 'w') as f:
        yaml.dump({"editor": "nano", "open_in_editor": True}, f)
    return config_file


class TestPreferencesModule:
    """Test suite for preferences module."""

    def test_get_preference_returns_none_when_not_set(self, temp_home):
        assert preferences.get_preference("config_path") is None

    def test_set_preference_stores_value(self, temp_home):
        preferences.set_preference("config_path", "/path/to/config.yml")
        assert preferences.get_preference("config_path") == "/path/to/config.yml"

    def test_clear_preference_removes_value(self, temp_home):
        preferences.set_preference("config_path", "/path/to/config.yml")
        preferences.clear_preference("config_path")
        assert preferences.get_preference("config_path") is None

    def test_clear_nonexistent_preference(self, temp_home):
        # Should not raise an error
        preferences.clear_preference("nonexistent_key")

    def test_preferences_persisted_to_json_file(self, temp_home):
        preferences.set_preference("config_path", "/path/to/config.yml")

        with open(preferences.PREFERENCES_FILE, 'r') as f:
            data = json.load(f)

        assert data["config_path"] == "/path/to/config.yml"

    def test_corrupt_preferences_file_is_ignored(self, temp_home):
        preferences.PREFERENCES_DIR.mkdir(parents=True)
        preferences.PREFERENCES_FILE.write_text("{not json")

        assert preferences.get_preference("config_path") is None


class TestConfigLoader:
    """Test suite for config_loader module."""

    def test_defaults_when_no_config_file(self, temp_home):
        config = config_loader.load_config()

        assert config == {"editor": None, "open_in_editor": True}

    def test_loads_default_location(self, temp_home, temp_config_file):
        config = config_loader.load_config()

        assert config["editor"] == "nano"
        assert config["open_in_editor"] is True

    def test_preference_overrides_default_location(self, temp_home, temp_config_file, tmp_path):
        custom = tmp_path / "custom.yml"
        custom.write_text("editor: code --wait\nopen_in_editor: false\n")
        preferences.set_preference("config_path", str(custom))

        config = config_loader.load_config()

        assert config["editor"] == "code --wait"
        assert config["open_in_editor"] is False

    def test_config_path_not_cached_at_module_level(self, temp_home, tmp_path):
        """Changing the preference takes effect without restarting Python."""
        config1 = tmp_path / "config1.yml"
        config2 = tmp_path / "config2.yml"
        config1.write_text("editor: vim\n")
        config2.write_text("editor: emacs\n")

        preferences.set_preference("config_path", str(config1))
        assert config_loader.load_config()["editor"] == "vim"

        preferences.set_preference("config_path", str(config2))
        assert config_loader.load_config()["editor"] == "emacs"

    def test_preference_with_nonexistent_path_falls_back(self, temp_home, temp_config_file, tmp_path):
        preferences.set_preference("config_path", str(tmp_path / "nonexistent.yml"))

        assert config_loader._get_config_path() == temp_config_file

    def test_empty_config_file_uses_defaults(self, temp_home, temp_config_dir):
        (temp_config_dir / "config.yml").write_text("")

        assert config_loader.load_config() == {"editor": None, "open_in_editor": True}

    def test_invalid_yaml_config(self, temp_home, temp_config_dir):
        (temp_config_dir / "config.yml").write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigError) as exc_info:
            config_loader.load_config()

        assert "parse" in str(exc_info.value).lower()

    def test_non_mapping_config(self, temp_home, temp_config_dir):
        (temp_config_dir / "config.yml").write_text("- just\n- a list\n")

        with pytest.raises(ConfigError) as exc_info:
            config_loader.load_config()

        assert "mapping" in str(exc_info.value)

    def test_unknown_keys_are_not_merged(self, temp_home, temp_config_dir):
        (temp_config_dir / "config.yml").write_text("editor: nano\ntheme: dark\n")

        assert config_loader.load_config() == {"editor": "nano", "open_in_editor": True}

    def test_invalid_open_in_editor_value(self, temp_home, temp_config_dir):
        (temp_config_dir / "config.yml").write_text("open_in_editor: sometimes\n")

        with pytest.raises(ConfigError) as exc_info:
            config_loader.load_config()

        assert "open_in_editor" in str(exc_info.value)


class TestCLICommands:
    """Test suite for config CLI commands."""

    def test_config_set_path_validates_file_exists(self, temp_home, tmp_path):
        from dotnet_user_secrets.cli.main import cmd_config_set_path

        args = Namespace(path=str(tmp_path / "nonexistent.yml"))

        with pytest.raises(SystemExit) as exc_info:
            cmd_config_set_path(args)

        assert exc_info.value.code == 1

    def test_config_set_path_stores_absolute_path(self, temp_home, temp_config_file):
        from dotnet_user_secrets.cli.main import cmd_config_set_path

        cmd_config_set_path(Namespace(path=str(temp_config_file)))

        assert preferences.get_preference("config_path") == str(temp_config_file.resolve())

    def test_config_show_with_preference(self, temp_home, temp_config_file, capsys):
        from dotnet_user_secrets.cli.main import cmd_config_show

        preferences.set_preference("config_path", str(temp_config_file))
        cmd_config_show(Namespace())

        captured = capsys.readouterr()
        assert str(temp_config_file) in captured.out
        assert "preference" in captured.out.lower()

    def test_config_show_without_preference(self, temp_home, capsys):
        from dotnet_user_secrets.cli.main import cmd_config_show

        cmd_config_show(Namespace())

        captured = capsys.readouterr()
        assert str(temp_home / ".config" / "dotnet-user-secrets" / "config.yml") in captured.out
        assert "default" in captured.out.lower()

    def test_config_clear_removes_preference(self, temp_home, temp_config_file, capsys):
        from dotnet_user_secrets.cli.main import cmd_config_clear

        preferences.set_preference("config_path", str(temp_config_file))
        cmd_config_clear(Namespace())

        assert preferences.get_preference("config_path") is None
        assert "cleared" in capsys.readouterr().out.lower()
