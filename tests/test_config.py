"""
Tests for configuration loading and validation.
"""

import json

import pytest

from mathchat.config import load_settings, Settings
from mathchat.config.loader import OVERRIDES_ENV, merge_dicts
from mathchat.utils.errors import ConfigError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run each test from an empty directory without overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(OVERRIDES_ENV, raising=False)


def write_config(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    """Test built-in defaults."""

    def test_defaults_without_file(self):
        """Test that missing default config falls back to built-in values."""
        settings = load_settings()

        assert settings.render.backend == "matplotlib"
        assert settings.segmenter.named_commands == ["ce", "mathrm", "text"]
        assert "¥" in settings.segmenter.escape_substitutes
        assert settings.logging.level == "INFO"

    def test_default_config_file_is_used(self, tmp_path):
        """Test that config/default.yaml in the working directory is read."""
        (tmp_path / "config").mkdir()
        write_config(tmp_path / "config" / "default.yaml", "render:\n  backend: mathjax\n")

        assert load_settings().render.backend == "mathjax"


class TestLoadSettings:
    """Test YAML loading and overrides."""

    def test_explicit_file(self, tmp_path):
        """Test loading an explicit YAML file."""
        path = write_config(
            tmp_path / "custom.yaml",
            "render:\n  fontsize: 18\n  error_label: Fehler\nlogging:\n  json: true\n",
        )

        settings = load_settings(path)

        assert settings.render.fontsize == 18
        assert settings.render.error_label == "Fehler"
        assert settings.logging.json_output is True

    def test_missing_explicit_file(self, tmp_path):
        """Test that a missing explicit file is an error."""
        with pytest.raises(ConfigError):
            load_settings(tmp_path / "nope.yaml")

    def test_blank_file_gives_defaults(self, tmp_path):
        """Test that an empty YAML file is accepted."""
        path = write_config(tmp_path / "blank.yaml", "")

        assert load_settings(path) == Settings()

    def test_invalid_yaml(self, tmp_path):
        """Test that malformed YAML raises ConfigError."""
        path = write_config(tmp_path / "bad.yaml", "render: [unclosed\n")

        with pytest.raises(ConfigError):
            load_settings(path)

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Test that JSON overrides are merged over the file."""
        path = write_config(tmp_path / "c.yaml", "render:\n  backend: matplotlib\n  dpi: 100\n")
        monkeypatch.setenv(OVERRIDES_ENV, json.dumps({"render": {"backend": "mathjax"}}))

        settings = load_settings(path)

        assert settings.render.backend == "mathjax"
        assert settings.render.dpi == 100

    def test_invalid_env_overrides(self, monkeypatch):
        """Test that non-JSON overrides raise ConfigError."""
        monkeypatch.setenv(OVERRIDES_ENV, "{not json")

        with pytest.raises(ConfigError):
            load_settings()


class TestValidation:
    """Test schema validation rules."""

    def test_unknown_backend_rejected(self, tmp_path):
        """Test that only known backends validate."""
        path = write_config(tmp_path / "c.yaml", "render:\n  backend: katex\n")

        with pytest.raises(ConfigError) as exc_info:
            load_settings(path)

        assert "backend" in exc_info.value.technical_details

    def test_backslash_substitute_rejected(self):
        """Test that the backslash cannot be configured as a substitute."""
        with pytest.raises(ValueError):
            Settings.model_validate({"segmenter": {"escape_substitutes": ["\\"]}})

    def test_multichar_substitute_rejected(self):
        """Test that substitutes are single characters."""
        with pytest.raises(ValueError):
            Settings.model_validate({"segmenter": {"escape_substitutes": ["¥¥"]}})

    def test_empty_whitelist_rejected(self):
        """Test that the named command whitelist cannot be empty."""
        with pytest.raises(ValueError):
            Settings.model_validate({"segmenter": {"named_commands": []}})

    def test_command_names_without_backslash(self):
        """Test that command names must be bare letters."""
        with pytest.raises(ValueError):
            Settings.model_validate({"segmenter": {"named_commands": ["\\ce"]}})


class TestMergeDicts:
    """Test recursive dictionary merge."""

    def test_nested_merge(self):
        """Test that nested keys merge rather than replace."""
        base = {"render": {"backend": "matplotlib", "dpi": 150}, "logging": {"level": "INFO"}}
        override = {"render": {"dpi": 300}}

        merged = merge_dicts(base, override)

        assert merged["render"] == {"backend": "matplotlib", "dpi": 300}
        assert merged["logging"] == {"level": "INFO"}
        assert base["render"]["dpi"] == 150
