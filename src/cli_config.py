"""Run inputs assembled from CLI flags, action inputs, YAML config and defaults.

Precedence, highest first:
1. CLI flags
2. Action inputs from the environment (INPUT_VLT-VERSION, ...)
3. The ``setup`` section of a YAML config file (--config or default locations)
4. Built-in defaults

A missing or malformed config file is logged and ignored; it never breaks a run.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml

from common.logging_utils import add_file_handler, configure_logging
from constants import Constants

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}


@dataclass(frozen=True)
class SetupInputs:
    """Inputs shared by the run and post phases."""

    vlt_version: str = Constants.LATEST
    vlt_version_file: Optional[str] = None
    registry_url: Optional[str] = None
    no_cache: bool = False
    cache_dir: str = Constants.CACHE_DIR
    state_file: str = Constants.STATE_FILE
    resolver: str = Constants.DEFAULT_RESOLVER
    log_level: str = "INFO"


# field name -> (args attribute, action input name, YAML key)
_FIELDS = {
    "vlt_version": ("VLT_VERSION", "vlt-version", "vlt_version"),
    "vlt_version_file": ("VLT_VERSION_FILE", "vlt-version-file", "vlt_version_file"),
    "registry_url": ("REGISTRY_URL", "registry-url", "registry_url"),
    "no_cache": ("NO_CACHE", "no-cache", "no_cache"),
    "cache_dir": ("CACHE_DIR", "cache-dir", "cache_dir"),
    "state_file": ("STATE_FILE", "state-file", "state_file"),
    "resolver": ("RESOLVER", "resolver", "resolver"),
    "log_level": ("LOG_LEVEL", "log-level", "log_level"),
}


def parse_bool(value: Any) -> bool:
    """Interpret true/false/1/0/yes/no style values."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def get_input(name: str, environ: Mapping[str, str]) -> Optional[str]:
    """Read an action input the way workflow runners export them.

    ``vlt-version`` is looked up as INPUT_VLT-VERSION, then INPUT_VLT_VERSION.
    Empty values count as unset.
    """
    upper = name.upper()
    for env_name in (Constants.ENV_INPUT_PREFIX + upper,
                     Constants.ENV_INPUT_PREFIX + upper.replace("-", "_")):
        value = environ.get(env_name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _load_yaml_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Return the ``setup`` section of the first readable config file."""
    candidates = [path] if path else list(Constants.CONFIG_FILES)
    for candidate in candidates:
        if not candidate:
            continue
        if not os.path.isfile(candidate):
            if path:
                logger.warning("Config file not found: %s", candidate)
            continue
        try:
            with open(candidate, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Failed to load config %s: %s", candidate, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level is not a mapping", candidate)
            return {}
        section = data.get(Constants.CONFIG_SECTION, data)
        return section if isinstance(section, dict) else {}
    return {}


def load_inputs(args: Any = None, environ: Optional[Mapping[str, str]] = None) -> SetupInputs:
    """Merge every input source into a SetupInputs."""
    environ = os.environ if environ is None else environ
    config = _load_yaml_config(getattr(args, "CONFIG", None))
    defaults = SetupInputs()

    values: Dict[str, Any] = {}
    for field_name, (attr, input_name, yaml_key) in _FIELDS.items():
        value = getattr(args, attr, None) if args is not None else None
        if value is None:
            value = get_input(input_name, environ)
        if value is None:
            value = config.get(yaml_key)
        if value is None or (isinstance(value, str) and not value.strip()):
            value = getattr(defaults, field_name)
        values[field_name] = value

    try:
        values["no_cache"] = parse_bool(values["no_cache"])
    except ValueError:
        logger.warning("Ignoring invalid no-cache value %r", values["no_cache"])
        values["no_cache"] = defaults.no_cache

    resolver = str(values["resolver"]).lower()
    if resolver not in Constants.SUPPORTED_RESOLVERS:
        logger.warning("Unsupported resolver %r; using %s", resolver, defaults.resolver)
        resolver = defaults.resolver
    values["resolver"] = resolver

    for field_name in ("vlt_version", "vlt_version_file", "registry_url", "cache_dir",
                       "state_file", "log_level"):
        if values[field_name] is not None:
            values[field_name] = str(values[field_name]).strip()
    values["log_level"] = values["log_level"].upper()

    return SetupInputs(**values)


def setup_logging(args: Any = None, level: Optional[str] = None) -> None:
    """Configure logging from the resolved level and optional --logfile."""
    configure_logging(level)
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        add_file_handler(log_file)
        logger.info("Logging to file: %s", log_file)
