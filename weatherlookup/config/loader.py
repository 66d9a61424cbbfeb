"""YAML config loader with environment overrides and dotted-key access."""

import hashlib
import os
from pathlib import Path
from typing import Any

import yaml

from weatherlookup.config.schema import AppConfig

API_KEY_ENV = "WEATHERLOOKUP_API_KEY"


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing path or an empty file yields defaults. The upstream API key
    from WEATHERLOOKUP_API_KEY takes precedence over the file.
    """
    raw: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    api_key = os.environ.get(API_KEY_ENV)
    if api_key:
        raw.setdefault("upstream", {})["api_key"] = api_key

    return AppConfig(**raw)


def config_hash(config: AppConfig) -> str:
    """Compute a deterministic SHA256 hash of the config, secrets excluded."""
    data = config.model_dump_json(indent=None, exclude={"upstream": {"api_key"}})
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'cache.ttl_minutes'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict) and part in obj:
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
