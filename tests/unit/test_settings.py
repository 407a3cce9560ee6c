
from pathlib import Path

import pytest

from packages.config.settings import CONFIG_ENV, Settings, load_settings
from packages.schema.errors import ConfigError


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "perlcritic-sarif.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    settings = load_settings()
    assert settings == Settings()
    assert settings.tool_name == "Perl::Critic"
    assert settings.help_uri("Perl::Critic::Policy::Foo") == "https://metacpan.org/pod/Perl::Critic::Policy::Foo"


def test_explicit_file_overrides_defaults(tmp_path):
    path = _write(
        tmp_path,
        "tool_name: perlcritic\nuri_base_id: '%SRCROOT%'\nindent: null\n",
    )
    settings = load_settings(path)

    assert settings.tool_name == "perlcritic"
    assert settings.uri_base_id == "%SRCROOT%"
    assert settings.indent is None
    assert settings.information_uri == Settings().information_uri


def test_env_var_points_at_file(monkeypatch, tmp_path):
    path = _write(tmp_path, "indent: 4\n")
    monkeypatch.setenv(CONFIG_ENV, str(path))
    assert load_settings().indent == 4


def test_empty_file_gives_defaults(tmp_path):
    assert load_settings(_write(tmp_path, "")) == Settings()


@pytest.mark.parametrize(
    "text",
    [
        "colour: blue\n",
        "- a\n- b\n",
        "indent: -1\n",
        "indent: yes\n",
        "tool_name: ''\n",
        "tool_name: 3\n",
        "uri_base_id: [1]\n",
        "help_uri_template: https://example.test/docs\n",
        "help_uri_template: 'https://example.test/{policy}/{other}'\n",
        "tool_name: [unclosed\n",
    ],
)
def test_invalid_files_raise(tmp_path, text):
    with pytest.raises(ConfigError):
        load_settings(_write(tmp_path, text))


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "absent.yaml")
