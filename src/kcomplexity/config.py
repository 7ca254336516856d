"""
Run configuration loading.

Builds the immutable ComplexityConfig from command-line values and an
optional YAML file. Values given on the command line override the file.

YAML layout (either flat or with a per-mode section):

    mode: mask
    k: 4
    window_size: 12
    threshold: 0.55

    # equivalent
    k: 4
    mask:
      window_size: 12
      threshold: 0.55
"""

import logging
from pathlib import Path
from typing import Optional, Dict, Any

import yaml

from kcomplexity.core.errors import ConfigurationError
from kcomplexity.core.models import ComplexityConfig, Mode, DEFAULT_K, DEFAULT_MASK_SYMBOL
from kcomplexity.core.result import Result, Ok, Err

logger = logging.getLogger(__name__)

CONFIG_KEYS = {"mode", "k", "window_size", "threshold", "invert", "mask_symbol", "mask", "filter"}

CONFIG_TEMPLATE = f"""\
# kcomplexity configuration
#
# Processing mode: measure | mask | filter (default: measure)
# mode: measure

# k-mer length used for scoring
k: {DEFAULT_K}

# Sliding window length (mask mode only, must be >= k)
# window_size: 12

# Complexity cutoff in [0, 1] (mask and filter modes)
# threshold: 0.55

# Keep records scoring below the threshold instead (filter mode only)
# invert: false

# Replacement symbol for masked bases
mask_symbol: "{DEFAULT_MASK_SYMBOL}"
"""


def resolve_mode(
    mode: Optional[str] = None,
    mask: bool = False,
    filter: bool = False,
) -> Mode:
    """
    Work out the run mode from an explicit mode name and the mask/filter switches.

    Raises:
        ConfigurationError: if both switches are set, or a switch contradicts ``mode``
    """
    if mask and filter:
        raise ConfigurationError("Mask and filter modes cannot both be requested")

    switched = Mode.MASK if mask else Mode.FILTER if filter else None

    explicit = None
    if mode is not None:
        try:
            explicit = Mode(str(mode).lower())
        except ValueError:
            choices = ", ".join(m.value for m in Mode)
            raise ConfigurationError(f"Unknown mode '{mode}' (choose from {choices})") from None

    if explicit is not None and switched is not None and explicit is not switched:
        raise ConfigurationError(
            f"Mode '{explicit.value}' conflicts with the --{switched.value} switch"
        )

    return explicit or switched or Mode.MEASURE


def _as_int(name: str, value: Any) -> Optional[int]:
    """Integer option value; bools and fractional numbers are rejected."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        return int(value)
    if isinstance(value, int):
        return value
    raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _as_float(name: str, value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    return float(value)


def build_config(
    mode: Optional[str] = None,
    mask: bool = False,
    filter: bool = False,
    k: Optional[int] = None,
    window_size: Optional[int] = None,
    threshold: Optional[float] = None,
    invert: bool = False,
    mask_symbol: Optional[str] = None,
) -> Result[ComplexityConfig, str]:
    """
    Validate run options and build the immutable configuration.

    Returns:
        Ok(ComplexityConfig) or Err(message) describing the first problem found
    """
    try:
        config = ComplexityConfig(
            mode=resolve_mode(mode, mask, filter),
            k=DEFAULT_K if k is None else _as_int("k", k),
            window_size=_as_int("window_size", window_size),
            threshold=_as_float("threshold", threshold),
            invert=bool(invert),
            mask_symbol=mask_symbol or DEFAULT_MASK_SYMBOL,
        )
    except (ConfigurationError, TypeError, ValueError) as e:
        return Err(f"Invalid configuration: {e}")

    logger.debug(f"Configuration: {config.describe()}")
    return Ok(config)


def flatten_config(data: Dict[str, Any]) -> Result[Dict[str, Any], str]:
    """
    Normalize a parsed YAML mapping into build_config keyword arguments.

    A ``mask:`` or ``filter:`` key may be a boolean switch or a section
    holding that mode's parameters.
    """
    unknown = set(data) - CONFIG_KEYS
    if unknown:
        return Err(f"Unknown configuration keys: {sorted(unknown)}")

    options: Dict[str, Any] = {k: v for k, v in data.items() if k not in ("mask", "filter")}
    for section in ("mask", "filter"):
        value = data.get(section)
        if value is None or value is False:
            continue
        options[section] = True
        if isinstance(value, dict):
            nested_unknown = set(value) - CONFIG_KEYS
            if nested_unknown:
                return Err(f"Unknown keys in '{section}' section: {sorted(nested_unknown)}")
            options.update(value)
        elif value is not True:
            return Err(f"'{section}' must be true/false or a mapping, got {value!r}")

    return Ok(options)


def load_config(config_path: Path) -> Result[Dict[str, Any], str]:
    """
    Load run options from a YAML file.

    Returns:
        Result containing build_config keyword arguments
    """
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        return Err(f"Failed to load config: {e}")

    if data is None:
        return Ok({})
    if not isinstance(data, dict):
        return Err(f"Config must be a mapping, got {type(data).__name__}")

    return flatten_config(data)


def config_from_options(
    config_path: Optional[Path] = None,
    **cli_options: Any,
) -> Result[ComplexityConfig, str]:
    """
    Merge file and command-line options and build the configuration.

    Command-line values that are None (or False for switches) do not
    override the file.
    """
    options: Dict[str, Any] = {}
    if config_path is not None:
        file_result = load_config(config_path)
        if file_result.is_err():
            return Err(file_result.unwrap_err())
        options.update(file_result.unwrap())
        logger.info(f"Loaded configuration from {config_path}")

    for key, value in cli_options.items():
        if value is None or value is False:
            continue
        options[key] = value

    return build_config(**options)


def write_config_template(path: Path, overwrite: bool = False) -> Result[Path, str]:
    """Write a commented YAML configuration template."""
    if path.exists() and not overwrite:
        return Err(f"Config file already exists: {path}")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(CONFIG_TEMPLATE)
    except OSError as e:
        return Err(f"Failed to write config template: {e}")
    return Ok(path)
