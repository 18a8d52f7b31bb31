"""Configuration management."""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple
import copy
import os

import yaml

from virtual_he.core.compositor import DEFAULT_STRENGTH, TRUNCATE
from virtual_he.core.image_processing import DEFAULT_PERCENTILE

DEFAULTS: Dict[str, Any] = {
    'normalization': {
        'percentile': DEFAULT_PERCENTILE,
    },
    'composition': {
        'k': DEFAULT_STRENGTH,
        'rounding': TRUNCATE,
        'workers': 1,
    },
    'output': {
        'overview': None,
    },
}

# Environment variable -> (config path, type)
ENV_MAPPINGS: Dict[str, Tuple[Tuple[str, ...], Callable[[str], Any]]] = {
    'VIRTUAL_HE_PERCENTILE': (('normalization', 'percentile'), float),
    'VIRTUAL_HE_K': (('composition', 'k'), float),
    'VIRTUAL_HE_ROUNDING': (('composition', 'rounding'), str),
    'VIRTUAL_HE_WORKERS': (('composition', 'workers'), int),
}

# Dotted key -> type the pipeline expects
VALUE_TYPES: Dict[str, type] = {
    'normalization.percentile': float,
    'composition.k': float,
    'composition.workers': int,
    'composition.rounding': str,
}


class Config:
    """Configuration manager.

    Values are resolved from the built-in defaults, then an optional YAML
    file, then ``VIRTUAL_HE_*`` environment variables.
    """

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to YAML config file (optional)

        Raises:
            ValueError: If the config file cannot be parsed, or a file
                value or environment override has the wrong type
        """
        self.config = copy.deepcopy(DEFAULTS)

        if config_file is not None:
            self.load_from_file(Path(config_file))

        self._load_from_env()
        self._validate()

    def load_from_file(self, config_file: Path) -> None:
        """Merge a YAML file over the current values."""
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ValueError(f"Could not load config file {config_file}: {e}") from e

        if file_config is None:
            return
        if not isinstance(file_config, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")
        self._merge_config(self.config, file_config)

    def _merge_config(self, base: Dict, override: Dict) -> None:
        """Recursively merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def _load_from_env(self) -> None:
        for env_var, (config_path, cast) in ENV_MAPPINGS.items():
            value = os.getenv(env_var)
            if not value:
                continue
            try:
                self._set_nested(self.config, config_path, cast(value))
            except ValueError as e:
                raise ValueError(f"Invalid value for {env_var}: {value!r}") from e

    def _validate(self) -> None:
        """Convert typed values in place, naming the key on failure."""
        for key, value_type in VALUE_TYPES.items():
            value = self.get(key)
            if value_type is str:
                valid = isinstance(value, str)
            elif value_type is int:
                valid = (isinstance(value, (int, float)) and not isinstance(value, bool)
                         and float(value).is_integer())
            else:
                valid = isinstance(value, (int, float)) and not isinstance(value, bool)
            if not valid:
                raise ValueError(
                    f"Config value '{key}' must be {value_type.__name__}, got {value!r}"
                )
            self.set(key, value_type(value))

        overview = self.get('output.overview')
        if overview is not None and not isinstance(overview, str):
            raise ValueError(f"Config value 'output.overview' must be a path, got {overview!r}")

    def _set_nested(self, config: Dict, path: tuple, value: Any) -> None:
        for key in path[:-1]:
            config = config.setdefault(key, {})
        config[path[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key, e.g. ``composition.k``."""
        value = self.config
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a value by dotted key."""
        self._set_nested(self.config, tuple(key.split('.')), value)


def load_config(config_file: Optional[Path] = None) -> Config:
    """
    Load configuration.

    Args:
        config_file: Path to config file (optional)

    Returns:
        Config instance
    """
    return Config(config_file)
