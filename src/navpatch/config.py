from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from navpatch.model import FeatureFlags

DEFAULT_CONFIG_NAME = "navpatch.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def _section(data: TomlTable, name: str) -> TomlTable:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def feature_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "features")


def host_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "host")


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def _as_text(value: TomlValue) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def feature_flags(section: TomlTable | None) -> FeatureFlags:
    if not isinstance(section, dict):
        return FeatureFlags()
    return FeatureFlags.from_mapping(
        {key: _as_bool(value) for key, value in section.items()}
    )


def host_source_path(section: TomlTable | None) -> Path | None:
    if not isinstance(section, dict):
        return None
    text = _as_text(section.get("source_path"))
    return Path(text) if text is not None else None


def host_version(section: TomlTable | None) -> str | None:
    if not isinstance(section, dict):
        return None
    return _as_text(section.get("version"))


@dataclass(frozen=True)
class NavPatchSettings:
    features: FeatureFlags = field(default_factory=FeatureFlags)
    host_source_path: Path | None = None
    host_version: str | None = None


def load_settings(
    root: Path | None = None, config_path: Path | None = None
) -> NavPatchSettings:
    data = load_config(root=root, config_path=config_path)
    host = _section(data, "host")
    return NavPatchSettings(
        features=feature_flags(_section(data, "features")),
        host_source_path=host_source_path(host),
        host_version=host_version(host),
    )
