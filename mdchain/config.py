from __future__ import annotations

import json
import sys
from pathlib import Path

import yaml

try:
    import tomllib as toml
except ImportError:
    import tomli as toml

from .utils import parse_bool

DEFAULTS = {
    "recursive": True,
    "stylesheet": "",
    "copy_assets": True,
    "clean": False,
}


def load_config(path: Path) -> dict:
    """Read a TOML, YAML or JSON site config. A missing file is an empty config."""
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be an object: {path}", file=sys.stderr)
        sys.exit(1)
    return data


def cfg_str(config: dict, key: str) -> str:
    value = config.get(key)
    return DEFAULTS[key] if value is None else str(value)


def cfg_bool(config: dict, key: str) -> bool:
    value = config.get(key)
    return DEFAULTS[key] if value is None else parse_bool(value)
