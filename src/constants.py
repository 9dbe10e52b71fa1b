"""Constants used in the project."""

import logging
import os
from enum import Enum
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    PARSE_ERROR = 1
    RESOLUTION_ERROR = 2


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    FLAKE_SCHEME = "flake"
    PARSER_UTIL_BIN_PATH = os.environ.get("FLAKEREF_PARSER_UTIL_BIN", "parser-util")
    PARSER_UTIL_RESOLVE_FLAG = "-r"
    RESOLVE_TIMEOUT = 60  # Timeout in seconds for a single parser-util run
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "FLAKEREF_LOG_LEVEL"
    ENV_CONFIG = "FLAKEREF_CONFIG"
    ENV_PARSER_UTIL_BIN = "FLAKEREF_PARSER_UTIL_BIN"
    ENV_RESOLVE_TIMEOUT = "FLAKEREF_RESOLVE_TIMEOUT"


def _timeout_from_env() -> Optional[int]:
    raw = os.environ.get(Constants.ENV_RESOLVE_TIMEOUT)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", Constants.ENV_RESOLVE_TIMEOUT, raw)
        return None


def _load_yaml_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the optional YAML configuration file.

    The path comes from the argument, falling back to FLAKEREF_CONFIG. A missing
    file yields an empty dict; a file that is not a mapping is ignored.
    """
    path = path or os.environ.get(Constants.ENV_CONFIG)
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        logger.warning("Config file %s does not contain a mapping; ignoring", path)
        return {}
    return data


def apply_config(path: Optional[str] = None) -> None:
    """Apply YAML config and environment overrides onto Constants.

    Precedence (lowest to highest): built-in defaults, YAML ``resolver:``
    section, environment variables. CLI flags are applied afterwards by the
    caller.
    """
    section = _load_yaml_config(path).get("resolver") or {}
    if isinstance(section, dict):
        if section.get("parser_util"):
            Constants.PARSER_UTIL_BIN_PATH = str(section["parser_util"])
        if section.get("timeout") is not None:
            try:
                Constants.RESOLVE_TIMEOUT = int(section["timeout"])
            except (TypeError, ValueError):
                logger.warning("Ignoring non-integer resolver timeout %r in config", section["timeout"])

    env_bin = os.environ.get(Constants.ENV_PARSER_UTIL_BIN)
    if env_bin:
        Constants.PARSER_UTIL_BIN_PATH = env_bin
    env_timeout = _timeout_from_env()
    if env_timeout is not None:
        Constants.RESOLVE_TIMEOUT = env_timeout
