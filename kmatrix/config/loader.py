import dataclasses
import json
import os
import shutil
import tomllib
from pathlib import Path
from typing import Any, Mapping

import structlog
import yaml

from .types import ConfigError, RunConfig, UnsupportedConfigFormatError

logger = structlog.get_logger(__name__)

_KEYS = {"vng_path", "cmd", "parallel", "out_path", "report_only", "kernel_versions"}


def load_config(path: str | Path) -> RunConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        logger.info("Cannot find config file, using defaults", path=str(pure_path))
        return RunConfig()

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    config = _build_run_config(raw_file)
    logger.info("Using config file", path=str(pure_path))
    return config


def merge_overrides(config: RunConfig, overrides: Mapping[str, Any]) -> RunConfig:
    """Return a copy of `config` with every non-None override applied.

    Overrides come from command line flags and take precedence over the file.
    """
    changes = {}
    for key, value in overrides.items():
        if key not in _KEYS:
            raise ConfigError(f"Unknown override: {key}")
        if value is None:
            continue
        changes[key] = list(value) if key == "kernel_versions" else value

    return dataclasses.replace(config, **changes)


def resolve_config(path: str | Path, overrides: Mapping[str, Any]) -> RunConfig:
    config = merge_overrides(load_config(path), overrides)
    logger.info("Final configuration", config=str(config))
    return config


def validate_config(config: RunConfig) -> None:
    if not _is_resolvable(config.vng_path):
        raise ConfigError(f"'vng' binary not found at '{config.vng_path}'")

    parts = config.command_argv()
    if len(parts) < 1:
        raise ConfigError("'cmd' is empty")

    if not _is_resolvable(parts[0]):
        raise ConfigError(f"tested binary not found at '{parts[0]}'")

    if len(config.kernel_versions) < 1:
        raise ConfigError("'kernel_versions' cannot be empty")

    if config.parallel < 1:
        raise ConfigError(f"'parallel' must be at least 1, got {config.parallel}")


def _is_resolvable(path: str) -> bool:
    if not path:
        return False

    if os.path.isabs(path):
        return os.path.exists(path)

    found = shutil.which(path)
    if found is None:
        logger.error("Path is not absolute and not found in PATH", path=path)
        return False
    return True


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            return _parse_yaml(path)
        case "toml":
            return _parse_toml(path)
        case "json":
            return _parse_json(path)
        case _:
            raise AssertionError("Unreachable")


def _parse_yaml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc

    # An empty document means "use the defaults".
    if raw_file is None:
        return {}

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: YAML parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _parse_toml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc

    return raw_file


def _parse_json(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: JSON parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_run_config(raw: Mapping[str, Any]) -> RunConfig:
    for key in raw.keys():
        if key not in _KEYS:
            raise ConfigError(f"Can't process: {key}")

    config = RunConfig()

    for key in ("vng_path", "cmd", "out_path"):
        if key in raw:
            if not isinstance(raw[key], str):
                raise ConfigError(f"'{key}' should be a string")
            setattr(config, key, raw[key].strip())

    if "parallel" in raw:
        # bool is an int subclass
        if isinstance(raw["parallel"], bool) or not isinstance(raw["parallel"], int):
            raise ConfigError(f"'parallel' should be an integer, got {type(raw['parallel'])}")
        config.parallel = raw["parallel"]

    if "report_only" in raw:
        if not isinstance(raw["report_only"], bool):
            raise ConfigError("'report_only' should be a boolean")
        config.report_only = raw["report_only"]

    if "kernel_versions" in raw:
        if not isinstance(raw["kernel_versions"], list):
            raise ConfigError("'kernel_versions' should be a list")

        for item in raw["kernel_versions"]:
            if not isinstance(item, str):
                raise ConfigError(f"{item} should be a string in 'kernel_versions'")

            version = item.strip()

            if len(version) < 1:
                raise ConfigError("A kernel version is empty")

            config.kernel_versions.append(version)

    return config
