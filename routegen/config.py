"""Load and validate the YAML configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

CONFIG_ENV_VAR = "ROUTEGEN_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "routegen.yaml"


def _load_config(path: Path) -> Dict[str, Any]:
    """Read the YAML config from disk and validate its top-level type."""
    if not path.exists():
        raise RuntimeError(f'Config file not found: "{path}"')
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except Exception as e:
        raise RuntimeError(f'Failed to read config "{path}": {e}') from e
    if not isinstance(data, dict):
        raise RuntimeError(f'Config file "{path}" must be a YAML mapping at top level')
    return data


def _resolve_config_path() -> Path:
    """Resolve the config path from env override or default."""
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser().resolve()
    return DEFAULT_CONFIG_PATH


_CONFIG_PATH = _resolve_config_path()
_CONFIG = _load_config(_CONFIG_PATH)


def get_config_path() -> Path:
    """Expose the resolved config path for diagnostics."""
    return _CONFIG_PATH


def _require_section(name: str, kind: type) -> Any:
    """Fetch a required config section and validate its type."""
    value = _CONFIG.get(name)
    if not isinstance(value, kind):
        raise RuntimeError(f'Config section "{name}" missing or not a {kind.__name__}')
    return value


def get_scan_rules() -> Dict[str, Any]:
    """Return controller discovery rules from the config."""
    scan = _require_section("scan", dict)
    return scan


def get_php_config() -> Dict[str, Any]:
    """Return source-language syntax settings from the config."""
    php = _require_section("php", dict)
    return php


def get_render_templates() -> Dict[str, str]:
    """Return router file templates from the config."""
    render = _require_section("render", dict)
    for key, value in render.items():
        if not isinstance(value, str):
            raise RuntimeError(f'Config value "render.{key}" must be a string')
    return render


def get_catalog_config() -> Dict[str, Any]:
    """Return optional catalog defaults or an empty mapping."""
    catalog = _CONFIG.get("catalog")
    if catalog is None:
        return {}
    if not isinstance(catalog, dict):
        raise RuntimeError('Config section "catalog" must be a mapping')
    return catalog
