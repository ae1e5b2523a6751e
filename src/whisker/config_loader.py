"""Load RunContext from whisker.yaml if present.

Merges file config with keyword overrides. Overrides win over the file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from whisker._errors import ConfigError
from whisker.config import RunContext

_CONFIG_KEYS = frozenset({
    "verbose",
    "debug",
    "profile",
    "enable_output_diff",
    "output_diff_path",
    "profile_path",
})

_PATH_KEYS = ("output_diff_path", "profile_path")


def load_context(root: str | Path = ".", **overrides: object) -> RunContext:
    """Load RunContext from root, optionally merging whisker.yaml.

    Looks for whisker.yaml, whisker.yml, or whisker.toml in root. If found,
    loads and merges with overrides. Overrides take precedence; ``None``
    overrides are ignored so unset command-line options fall through to the
    file.

    Raises:
        ConfigError: If a config file exists but cannot be parsed.

    """
    root = Path(root)
    file_config = _read_whisker_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    for key in _PATH_KEYS:
        if key in merged and not isinstance(merged[key], Path):
            merged[key] = Path(str(merged[key]))
    return RunContext(root=root, **merged)


def _read_whisker_config(root: Path) -> dict[str, object]:
    """Read whisker config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("whisker.yaml", "whisker.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "whisker.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Cannot parse {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_whisker_section(data, path)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Cannot parse {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_whisker_section(data, path)


def _flatten_whisker_section(data: object, path: Path) -> dict[str, object]:
    """Extract whisker.* keys and known top-level keys into one dict."""
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)

    result: dict[str, object] = {
        k: v for k, v in data.items() if k != "whisker" and k in _CONFIG_KEYS
    }
    section = data.get("whisker")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _CONFIG_KEYS:
                result[k] = v
    return result
