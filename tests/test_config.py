"""Tests for configuration loading."""

import os

import pytest

from code_styler.checkers.formatter import FormatterChecker
from code_styler.config import DEFAULT_FORMATTER_PATTERN, StylerConfig, load_config
from code_styler.exceptions import ConfigFileError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep user and project config files out of the tests."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in [k for k in os.environ if k.startswith("CODE_STYLER_")]:
        monkeypatch.delenv(key)
    return work


class TestStylerConfig:
    def test_defaults(self):
        config = StylerConfig()
        assert config.target_branch == "master"
        assert config.diff_source == "combined"
        assert config.image_extensions == [".jpg", ".jpeg"]
        assert not config.formatter_enabled

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"target_branch": "  "},
            {"diff_source": "everything"},
            {"transport_port": 0},
            {"send_timeout_seconds": -1},
            {"verbosity": "loud"},
            {"image_extensions": ["jpg"]},
        ],
    )
    def test_validation(self, kwargs):
        with pytest.raises(InvalidConfigError):
            StylerConfig(**kwargs)


class TestLoadConfig:
    def test_overrides_ignore_none(self):
        config = load_config(target_branch=None, diff_source="staged")
        assert config.target_branch == "master"
        assert config.diff_source == "staged"

    def test_verbose_flag(self):
        assert load_config(verbose=True, quiet=False).verbosity == "verbose"

    def test_project_file(self, isolated):
        (isolated / ".code-styler.toml").write_text('target_branch = "develop"\n', encoding="utf-8")
        assert load_config().target_branch == "develop"

    def test_explicit_file_with_table(self, tmp_path):
        config_file = tmp_path / "styler.toml"
        config_file.write_text(
            '[code-styler]\nexclude_paths = ["generated/"]\nformatter_command = "flake8"\n',
            encoding="utf-8",
        )
        config = load_config(config_file=config_file)
        assert config.exclude_paths == ["generated/"]
        assert config.formatter_enabled

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigFileError):
            load_config(config_file=tmp_path / "absent.toml")

    def test_unparseable_file(self, tmp_path):
        config_file = tmp_path / "broken.toml"
        config_file.write_text("target_branch = \n", encoding="utf-8")
        with pytest.raises(ConfigFileError):
            load_config(config_file=config_file)

    def test_unknown_key(self, tmp_path):
        config_file = tmp_path / "styler.toml"
        config_file.write_text("colour = true\n", encoding="utf-8")
        with pytest.raises(InvalidConfigError):
            load_config(config_file=config_file)

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("CODE_STYLER_EXCLUDE_PATHS", "generated/, Localization.py")
        monkeypatch.setenv("CODE_STYLER_TRANSPORT_PORT", "50000")
        monkeypatch.setenv("CODE_STYLER_ENABLE_DOCUMENTATION", "no")
        config = load_config()
        assert config.exclude_paths == ["generated/", "Localization.py"]
        assert config.transport_port == 50000
        assert config.enable_documentation is False

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("CODE_STYLER_TRANSPORT_PORT", "lots")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_cli_beats_env(self, monkeypatch):
        monkeypatch.setenv("CODE_STYLER_TARGET_BRANCH", "develop")
        assert load_config(target_branch="main").target_branch == "main"


class TestValueTypes:
    """Wrongly typed file values are reported as configuration errors."""

    @pytest.mark.parametrize(
        "line,key",
        [
            ('transport_port = "abc"', "transport_port"),
            ("target_branch = 5", "target_branch"),
            ('exclude_paths = "generated/"', "exclude_paths"),
            ("image_extensions = [1, 2]", "image_extensions"),
            ('enable_documentation = "yes"', "enable_documentation"),
            ("transport_port = true", "transport_port"),
            ('send_timeout_seconds = "soon"', "send_timeout_seconds"),
        ],
    )
    def test_wrong_type_in_file(self, tmp_path, line, key):
        config_file = tmp_path / "styler.toml"
        config_file.write_text(line + "\n", encoding="utf-8")

        with pytest.raises(InvalidConfigError) as excinfo:
            load_config(config_file=config_file)

        assert excinfo.value.key == key

    def test_integer_timeout_is_accepted(self, tmp_path):
        config_file = tmp_path / "styler.toml"
        config_file.write_text("send_timeout_seconds = 3\n", encoding="utf-8")
        assert load_config(config_file=config_file).send_timeout_seconds == 3

    def test_wrong_type_override(self):
        with pytest.raises(InvalidConfigError):
            load_config(transport_port="48123")


class TestFormatterPattern:
    def test_default_is_shared_with_checker(self):
        checker = FormatterChecker("lint", ".", executor=None)
        assert checker.pattern.pattern == StylerConfig().formatter_pattern == DEFAULT_FORMATTER_PATTERN

    @pytest.mark.parametrize("pattern", [r"(?P<line>\d+", r"(?P<line>\d+): (?P<text>.*)"])
    def test_invalid_pattern(self, pattern):
        with pytest.raises(InvalidConfigError):
            StylerConfig(formatter_pattern=pattern)
