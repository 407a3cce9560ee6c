"""Converter settings: driver identity, rule help links and output layout."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Optional

import yaml

from packages.schema.errors import ConfigError

CONFIG_ENV = "PERLCRITIC_SARIF_CONFIG"


@dataclass(frozen=True)
class Settings:
    """Values the translator stamps into every document."""

    tool_name: str = "Perl::Critic"
    tool_full_name: str = "Perl::Critic"
    information_uri: str = "https://metacpan.org/pod/Perl::Critic"
    help_uri_template: str = "https://metacpan.org/pod/{policy}"
    uri_base_id: Optional[str] = None
    indent: Optional[int] = 2

    def help_uri(self, policy: str) -> str:
        return self.help_uri_template.format(policy=policy)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read settings from `path`, else from $PERLCRITIC_SARIF_CONFIG, else defaults."""

    if path is None:
        override = os.environ.get(CONFIG_ENV)
        if not override:
            return Settings()
        path = Path(override)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read settings file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return replace(Settings(), **_checked(data, path))


def _checked(data: Dict[str, object], path: Path) -> Dict[str, object]:
    known = {f.name: f for f in fields(Settings)}
    checked: Dict[str, object] = {}
    for key, value in data.items():
        if key not in known:
            raise ConfigError(f"Unknown setting '{key}' in {path}")
        if key == "indent":
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
                raise ConfigError(f"Setting 'indent' in {path} must be a non-negative integer or null")
        elif key == "uri_base_id":
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"Setting 'uri_base_id' in {path} must be a string or null")
        elif not isinstance(value, str) or not value:
            raise ConfigError(f"Setting '{key}' in {path} must be a non-empty string")
        checked[key] = value

    template = checked.get("help_uri_template")
    if isinstance(template, str):
        if "{policy}" not in template:
            raise ConfigError(f"Setting 'help_uri_template' in {path} must contain '{{policy}}'")
        try:
            template.format(policy="Perl::Critic::Policy")
        except (IndexError, KeyError, ValueError) as exc:
            raise ConfigError(f"Setting 'help_uri_template' in {path} is not a valid template: {exc}") from exc
    return checked


__all__ = ["CONFIG_ENV", "Settings", "load_settings"]
