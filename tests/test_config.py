"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest

from devlog.config import (
    DEFAULT_EDITOR,
    DEFAULT_TAIL_LIMIT,
    DevlogConfig,
    dict_to_config,
    find_config_file,
    load_config,
    load_json_config,
)
from devlog.errors import ConfigError


class TestDefaults:
    """Tests for default configuration."""

    def test_defaults(self):
        config = load_config(environ={})
        assert config.repo_dir == Path.home() / "devlogs"
        assert config.editor == DEFAULT_EDITOR == "nano"
        assert config.tail_limit == DEFAULT_TAIL_LIMIT == 2
        assert config.assume_yes is False


class TestEnvironment:
    """Tests for environment overrides."""

    def test_repo_and_editor(self, temp_project):
        config = load_config(environ={
            "DEVLOG_REPO": str(temp_project / "logs"),
            "DEVLOG_EDITOR": "vim -n",
        })
        assert config.repo_dir == temp_project / "logs"
        assert config.editor == "vim -n"

    def test_empty_values_ignored(self):
        config = load_config(environ={"DEVLOG_REPO": "", "DEVLOG_EDITOR": ""})
        assert config.editor == "nano"
        assert config.repo_dir == Path.home() / "devlogs"


class TestFindConfigFile:
    """Tests for find_config_file."""

    def test_finds_toml_first(self, temp_project):
        (temp_project / "devlog.toml").write_text("")
        (temp_project / "devlog.json").write_text("{}")
        assert find_config_file(temp_project).name == "devlog.toml"

    def test_finds_json(self, temp_project):
        (temp_project / "devlog.json").write_text("{}")
        assert find_config_file(temp_project).name == "devlog.json"

    def test_returns_none_if_no_config(self, temp_project):
        assert find_config_file(temp_project) is None


class TestConfigFiles:
    """Tests for loading .toml and .json files."""

    def test_toml_in_repository(self, temp_project):
        (temp_project / "devlog.toml").write_text(
            '[editor]\ncommand = "emacs"\n\n[tail]\nlimit = 5\n\n[prompts]\nassume_yes = true\n'
        )
        config = load_config(environ={"DEVLOG_REPO": str(temp_project)})
        assert config.editor == "emacs"
        assert config.tail_limit == 5
        assert config.assume_yes is True
        assert config.repo_dir == temp_project

    def test_explicit_json_path(self, temp_project):
        path = temp_project / "settings.json"
        path.write_text(json.dumps({"repository": {"dir": str(temp_project / "elsewhere")}}))
        config = load_config(config_path=path, environ={})
        assert config.repo_dir == temp_project / "elsewhere"

    def test_config_env_var(self, temp_project):
        path = temp_project / "custom.toml"
        path.write_text('[editor]\ncommand = "micro"\n')
        config = load_config(environ={"DEVLOG_CONFIG": str(path)})
        assert config.editor == "micro"

    def test_environment_beats_file(self, temp_project):
        path = temp_project / "custom.toml"
        path.write_text(f'[repository]\ndir = "{temp_project / "file-repo"}"\n[editor]\ncommand = "micro"\n')
        config = load_config(config_path=path, environ={
            "DEVLOG_REPO": str(temp_project / "env-repo"),
            "DEVLOG_EDITOR": "vi",
        })
        assert config.repo_dir == temp_project / "env-repo"
        assert config.editor == "vi"

    def test_unsupported_suffix(self, temp_project):
        path = temp_project / "devlog.yaml"
        path.write_text("editor: vim")
        with pytest.raises(ConfigError, match="Unsupported config file type"):
            load_config(config_path=path, environ={})

    def test_malformed_json(self, temp_project):
        path = temp_project / "devlog.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Malformed config"):
            load_config(config_path=path, environ={})

    def test_malformed_toml(self, temp_project):
        path = temp_project / "devlog.toml"
        path.write_text("[editor\ncommand = ")
        with pytest.raises(ConfigError, match="Malformed config"):
            load_config(config_path=path, environ={})

    def test_missing_explicit_file(self, temp_project):
        with pytest.raises(ConfigError, match="Cannot read config"):
            load_config(config_path=temp_project / "missing.toml", environ={})

    def test_load_json_config(self, temp_project):
        path = temp_project / "c.json"
        path.write_text('{"tail": {"limit": 3}}')
        assert load_json_config(path) == {"tail": {"limit": 3}}


class TestDictToConfig:
    """Tests for dict_to_config."""

    def test_empty_dict_keeps_defaults(self):
        assert dict_to_config({}) == DevlogConfig()

    def test_updates_given_config(self, temp_project):
        base = DevlogConfig(repo_dir=temp_project, editor="vi")
        config = dict_to_config({"tail": {"limit": 4}}, base)
        assert config.repo_dir == temp_project
        assert config.editor == "vi"
        assert config.tail_limit == 4

    @pytest.mark.parametrize("limit", [0, -1, "3", True])
    def test_invalid_tail_limit(self, limit):
        with pytest.raises(ConfigError, match="tail.limit"):
            dict_to_config({"tail": {"limit": limit}})

    @pytest.mark.parametrize("data", [
        {"repository": "x"},
        {"editor": ["vim"]},
        {"tail": 3},
        {"prompts": True},
    ])
    def test_non_table_section(self, data):
        with pytest.raises(ConfigError, match="must be a table"):
            dict_to_config(data)

    def test_non_table_document(self):
        with pytest.raises(ConfigError, match="top level"):
            dict_to_config(["repository"])

    def test_repository_dir_must_be_string(self):
        with pytest.raises(ConfigError, match="repository.dir"):
            dict_to_config({"repository": {"dir": 42}})

    @pytest.mark.parametrize("command", ["", "   ", 7])
    def test_rejects_unusable_editor(self, command):
        with pytest.raises(ConfigError, match="editor.command"):
            dict_to_config({"editor": {"command": command}})

    def test_rejects_unbalanced_quotes(self):
        with pytest.raises(ConfigError, match="Invalid editor command"):
            dict_to_config({"editor": {"command": "vim '-c"}})


class TestConfigFileValidation:
    """Tests for type errors in config files and the environment."""

    def test_string_repository_in_toml(self, temp_project):
        path = temp_project / "devlog.toml"
        path.write_text('repository = "x"\n')
        with pytest.raises(ConfigError, match=r"\[repository\] must be a table"):
            load_config(config_path=path, environ={})

    def test_empty_editor_in_json(self, temp_project):
        path = temp_project / "devlog.json"
        path.write_text(json.dumps({"editor": {"command": ""}}))
        with pytest.raises(ConfigError, match="must not be empty"):
            load_config(config_path=path, environ={})

    def test_whitespace_editor_in_environment(self, temp_project):
        with pytest.raises(ConfigError, match="must not be empty"):
            load_config(environ={"DEVLOG_REPO": str(temp_project), "DEVLOG_EDITOR": "  "})
