from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides


_SECTION_KEYS: frozenset[str] = frozenset({"logging", "cache"})
_TOP_LEVEL_KEYS: tuple[str, ...] = ("app_name", "environment")

# CACHEFRONT_* env vars and CLI flags arrive flat; each maps to (section, key).
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "cache_backend": ("cache", "backend"),
    "cache_dir": ("cache", "dir"),
    "cache_redis_url": ("cache", "redis_url"),
    "cache_namespace": ("cache", "namespace"),
    "cache_failure_mode": ("cache", "failure_mode"),
}

# Alternate spellings accepted inside a section, rewritten to the schema name.
_SECTION_SYNONYMS: dict[str, dict[str, str]] = {
    "cache": {"directory": "dir"},
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into ``base`` in place; nested sections merge key by key."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _deep_merge(current, value)
        else:
            base[key] = value
    return base


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Bring one config layer into the sectioned shape ``AppConfig`` validates.

    A layer may mix three spellings:
    - sectioned blocks as written in YAML (``cache: {backend: redis}``)
    - flat keys from CACHEFRONT_* env vars or CLI flags (``cache_backend``)
    - the ``directory`` synonym for ``cache.dir``

    Unknown keys are dropped here; the schema rejects bad values later.
    """
    out: dict[str, Any] = {
        key: data[key] for key in _TOP_LEVEL_KEYS if key in data
    }

    for section in _SECTION_KEYS:
        block = data.get(section)
        if isinstance(block, Mapping):
            out[section] = dict(block)

    for flat_key, (section, section_key) in _FLAT_KEYS.items():
        if flat_key in data:
            out.setdefault(section, {})[section_key] = data[flat_key]

    for section, synonyms in _SECTION_SYNONYMS.items():
        block = out.get(section)
        if not block:
            continue
        for alias, canonical in synonyms.items():
            if alias in block:
                block[canonical] = block.pop(alias)

    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _require_file(path: Path) -> Path:
    if not path.exists():
        raise FileNotFoundError(path)
    return path


def _override_layers(
    config_path: Path | None, cli_overrides: Mapping[str, Any]
) -> Iterator[Mapping[str, Any]]:
    """Yield raw override layers, lowest precedence first."""
    if config_path is not None:
        yield _read_yaml_config(_require_file(config_path))
    yield EnvOverrides().to_update_dict()
    yield cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Build the cache configuration from defaults, a YAML file, CACHEFRONT_*
    env vars and CLI overrides, in that order of increasing precedence.

    A ``.env`` file, when given, is loaded into the process environment
    without replacing variables that are already set, so it sits in the
    env layer. Nothing is written to disk; the cache directory is created
    by the driver that uses it.
    """
    if dotenv_path is not None:
        load_dotenv(_require_file(dotenv_path), override=False)

    merged = _normalize_layer(deepcopy(DEFAULT_CONFIG))
    for layer in _override_layers(config_path, cli_overrides or {}):
        _deep_merge(merged, _normalize_layer(layer))

    return AppConfig.model_validate(merged)
