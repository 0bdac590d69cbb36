"""
===============================================================================
QUATALG - Configuration and Logging Setup
===============================================================================

Library-wide settings, loaded from YAML and held in one active instance.

    quatalg:
      default_dtype: float64      # scalar type of randn / randn_rotor output
      rotor_max_resamples: 64     # redraw rounds before ResamplingError
      log_level: WARNING          # level applied by setup_logging()

``load_config`` reads the file given explicitly, or the one named by the
QUATALG_CONFIG environment variable, and otherwise returns the defaults.
The library never configures logging on import; applications call
``setup_logging`` if they want quatalg's debug output on the console.
===============================================================================
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml

from .core.constants import RANDOM_DTYPES
from .core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'QUATALG_CONFIG'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass(frozen=True)
class QuatalgConfig:
    """
    Validated library settings.

    Attributes
    ----------
    default_dtype : str
        numpy floating type name used by the random generators when no
        dtype is passed ('float16', 'float32', 'float64' or 'longdouble').
    rotor_max_resamples : int
        Maximum number of rounds randn_rotor redraws near-zero samples.
    log_level : str
        Standard logging level name used by ``setup_logging``.
    """

    default_dtype: str = 'float64'
    rotor_max_resamples: int = 64
    log_level: str = 'WARNING'

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check every field, raising ConfigError on the first violation."""
        try:
            dtype = np.dtype(self.default_dtype).type
        except TypeError as exc:
            raise ConfigError(
                f"default_dtype {self.default_dtype!r} is not a numpy type"
            ) from exc
        if dtype not in RANDOM_DTYPES:
            raise ConfigError(
                f"default_dtype must be one of float16, float32, float64, "
                f"longdouble; got {self.default_dtype!r}"
            )

        if (isinstance(self.rotor_max_resamples, bool)
                or not isinstance(self.rotor_max_resamples, int)
                or self.rotor_max_resamples < 0):
            raise ConfigError(
                f"rotor_max_resamples must be a non-negative integer, "
                f"got {self.rotor_max_resamples!r}"
            )

        if str(self.log_level).upper() not in _LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, "
                f"got {self.log_level!r}"
            )

    @property
    def dtype(self) -> type:
        """``default_dtype`` as a numpy scalar type."""
        return np.dtype(self.default_dtype).type

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'QuatalgConfig':
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**values)


# =============================================================================
# LOADING
# =============================================================================

def load_config(path: Optional[Union[str, Path]] = None) -> QuatalgConfig:
    """
    Load configuration from a YAML file.

    Parameters
    ----------
    path : str or Path, optional
        YAML file with a top-level ``quatalg`` mapping. Defaults to the file
        named by the QUATALG_CONFIG environment variable; without either,
        the defaults are returned.

    Raises
    ------
    ConfigError
        If the file is malformed, has unknown keys or invalid values.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
        if not path:
            return QuatalgConfig()

    logger.info("Loading configuration from: %s", path)
    with open(path, 'r') as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if document is None:
        return QuatalgConfig()
    if not isinstance(document, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    section = document.get('quatalg', {})
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: 'quatalg' must be a mapping")
    return QuatalgConfig.from_dict(section)


# =============================================================================
# ACTIVE CONFIGURATION
# =============================================================================

_active: Optional[QuatalgConfig] = None


def get_config() -> QuatalgConfig:
    """Active configuration, loaded on first use."""
    global _active
    if _active is None:
        _active = load_config()
    return _active


def set_config(config: Optional[QuatalgConfig] = None,
               **overrides: Any) -> QuatalgConfig:
    """
    Replace the active configuration.

    ``set_config()`` with no arguments restores the defaults;
    ``set_config(rotor_max_resamples=8)`` changes one field of the active
    configuration. Returns the new active configuration.
    """
    global _active
    if config is None:
        config = get_config() if overrides else QuatalgConfig()
    if overrides:
        try:
            config = dataclasses.replace(config, **overrides)
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc
    _active = config
    return config


# =============================================================================
# LOGGING
# =============================================================================

def setup_logging(level: Optional[Union[str, int]] = None) -> None:
    """
    Send log records to stderr using the project format.

    Parameters
    ----------
    level : str or int, optional
        Logging level; defaults to the configured ``log_level``.
    """
    if level is None:
        level = get_config().log_level
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger('quatalg').setLevel(level)
