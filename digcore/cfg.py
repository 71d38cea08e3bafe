"""Loading configuration from TOML, YAML and JSON sources."""

from __future__ import annotations

import json
import tomllib
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml


class ConfigFormat(StrEnum):
    YAML = "yaml"
    TOML = "toml"
    JSON = "json"


@dataclass
class ConfigWithFormat:
    """Configuration text together with its format."""

    config: str
    format: ConfigFormat
    checksum: str = field(default="", compare=False)


@dataclass
class FileScanner:
    """Reads files until the first failure, which it keeps in ``error``."""

    data: bytes = b""
    error: OSError | None = None

    def read(self, path: str | Path) -> None:
        if self.error is not None:
            return
        try:
            self.data = Path(path).read_bytes()
        except OSError as exc:
            self.data = b""
            self.error = exc


def guess_format(path: str) -> ConfigFormat:
    """Guess the format from the file suffix; TOML unless JSON or YAML."""
    if path.endswith(".json"):
        return ConfigFormat.JSON
    if path.endswith((".yaml", ".yml")):
        return ConfigFormat.YAML
    return ConfigFormat.TOML


def _is_local_override_toml(name: str) -> bool:
    return name.lower().endswith(".local.toml")


def _parse(text: str, fmt: ConfigFormat, origin: str) -> dict[str, Any]:
    try:
        if fmt == ConfigFormat.TOML:
            data: Any = tomllib.loads(text)
        elif fmt == ConfigFormat.YAML:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ValueError(f"failed to parse {fmt} config {origin}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{fmt} config {origin} is not a mapping")
    return data


def _merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = value
    return target


def _merge_all(sources: Iterable[dict[str, Any]]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for source in sources:
        _merge(merged, source)
    return merged


def load_config_by_dir(config_dir: str | Path) -> dict[str, Any]:
    """Merge every config file directly under ``config_dir`` into one mapping.

    JSON and YAML files load first, then regular TOML files in name order,
    then ``*.local.toml`` overrides in name order; later values win and
    nested tables are merged.
    """
    directory = Path(config_dir)
    try:
        names = sorted(entry.name for entry in directory.iterdir() if entry.is_file())
    except OSError as exc:
        raise OSError(f"failed to list files under: {config_dir} : {exc}") from exc

    sources: list[tuple[Path, ConfigFormat]] = []
    tomls: list[str] = []
    local_tomls: list[str] = []
    for name in names:
        if name.endswith(".toml"):
            (local_tomls if _is_local_override_toml(name) else tomls).append(name)
        elif name.endswith(".json"):
            sources.append((directory / name, ConfigFormat.JSON))
        elif name.endswith((".yaml", ".yml")):
            sources.append((directory / name, ConfigFormat.YAML))

    sources.extend((directory / name, ConfigFormat.TOML) for name in sorted(tomls) + sorted(local_tomls))

    return _merge_all(
        _parse(path.read_text(encoding="utf-8"), fmt, str(path)) for path, fmt in sources
    )


def load_configs(configs: Iterable[ConfigWithFormat]) -> dict[str, Any]:
    """Merge several configuration texts.

    Texts of one format are joined first; TOML then YAML then JSON are
    applied, later ones overriding earlier ones.
    """
    toml_text = ""
    yaml_text = ""
    json_text = ""
    for c in configs:
        if c.format == ConfigFormat.TOML:
            toml_text += "\n\n" + c.config
        elif c.format == ConfigFormat.YAML:
            yaml_text += c.config
        elif c.format == ConfigFormat.JSON:
            json_text += c.config

    parsed: list[dict[str, Any]] = []
    if toml_text:
        parsed.append(_parse(toml_text, ConfigFormat.TOML, "<toml>"))
    if yaml_text:
        parsed.append(_parse(yaml_text, ConfigFormat.YAML, "<yaml>"))
    if json_text:
        parsed.append(_parse(json_text, ConfigFormat.JSON, "<json>"))
    return _merge_all(parsed)


def load_single_config(config: ConfigWithFormat) -> dict[str, Any]:
    """Parse one configuration text; an unknown format yields an empty mapping."""
    if config.format not in {f.value for f in ConfigFormat}:
        return {}
    return _parse(config.config, ConfigFormat(config.format), "<config>")