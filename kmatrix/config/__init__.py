from .loader import load_config, merge_overrides, resolve_config, validate_config
from .types import ConfigError, RunConfig, UnsupportedConfigFormatError

__all__ = [
    "load_config",
    "merge_overrides",
    "resolve_config",
    "validate_config",
    "RunConfig",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
