"""Constants used in the project."""

import os
import tempfile
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    SETUP_FAILED = 1
    USAGE_ERROR = 2


class ResolverBackends(Enum):
    """Registry backends used to resolve version ranges.

    Args:
        Enum (string): Registry backends supported by the program.
    """

    NPM = "npm"
    HTTP = "http"


class StateKeys(Enum):
    """Names persisted in the handoff store between the main and post phases."""

    VLT_VERSION = "vlt-version"
    CACHE_HIT = "cache-hit"
    NO_CACHE = "no-cache"


class OutputKeys(Enum):
    """Names of the structured run outputs."""

    VLT_VERSION = "vlt-version"
    VLT_PATH = "vlt-path"
    CACHE_HIT = "cache-hit"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    TOOL_NAME = "vlt"
    PACKAGE_MANAGER = "npm"
    CACHE_KEY_PREFIX = "setup-vlt"
    LATEST = "latest"
    EXACT_VERSION_PATTERN = r"^\d+\.\d+\.\d+(-.*)?$"

    VERSION_FILE = ".vlt-version"
    PACKAGE_JSON_FILE = "package.json"

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    SUPPORTED_RESOLVERS = [
        ResolverBackends.NPM.value,
        ResolverBackends.HTTP.value,
    ]
    DEFAULT_RESOLVER = ResolverBackends.NPM.value

    CACHE_DIR = os.path.join(os.path.expanduser("~"), ".cache", "setup-vlt")
    STATE_FILE_NAME = "setup-vlt-state.json"
    STATE_FILE = os.path.join(
        os.environ.get("RUNNER_TEMP") or tempfile.gettempdir(), STATE_FILE_NAME
    )

    CONFIG_FILES = [
        "setup-vlt.yml",
        "setup-vlt.yaml",
        os.path.join(os.path.expanduser("~"), ".config", "setup-vlt", "config.yml"),
    ]
    CONFIG_SECTION = "setup"

    ENV_LOG_LEVEL = "SETUP_VLT_LOG_LEVEL"
    ENV_GITHUB_OUTPUT = "GITHUB_OUTPUT"
    ENV_GITHUB_PATH = "GITHUB_PATH"
    ENV_GITHUB_STATE = "GITHUB_STATE"
    ENV_STATE_PREFIX = "STATE_"
    ENV_INPUT_PREFIX = "INPUT_"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
