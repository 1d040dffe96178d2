"""Configuration loading for fixturekit (.fixturekit.yml)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".fixturekit.yml"
DEFAULT_PATH = "/main.rs"
LINT_MODES = ("error", "warn", "off")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class FixtureKitConfig:
    """Represents the settings defined in .fixturekit.yml."""

    root: Path
    default_path: str = DEFAULT_PATH
    minicore_path: Optional[Path] = None
    metadata_lint: str = "error"

    def read_minicore(self) -> Optional[str]:
        """Return the configured reference resource text, if one is set."""
        if self.minicore_path is None:
            return None
        return self.minicore_path.read_text(encoding="utf-8")


def load_config(config_path: Path) -> FixtureKitConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return FixtureKitConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    default_path = _as_str(data.get("default_path")) or DEFAULT_PATH
    if not default_path.startswith("/"):
        raise ConfigError(f"default_path must start with `/`: {default_path!r}")

    minicore_str = _as_str(data.get("minicore_path"))
    minicore_path = root / minicore_str if minicore_str else None

    lint_value = data.get("metadata_lint", "error")
    # YAML reads a bare `off` as False.
    if lint_value is False:
        lint_value = "off"
    metadata_lint = (_as_str(lint_value) or "error").lower()
    if metadata_lint not in LINT_MODES:
        raise ConfigError(
            f"metadata_lint must be one of {', '.join(LINT_MODES)}: {metadata_lint!r}"
        )

    return FixtureKitConfig(
        root=root,
        default_path=default_path,
        minicore_path=minicore_path,
        metadata_lint=metadata_lint,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) else None


__all__ = ["CONFIG_FILENAME", "ConfigError", "DEFAULT_PATH", "FixtureKitConfig", "load_config"]
