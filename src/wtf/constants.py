"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1
    USAGE = 2


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROGRAM_NAME = "wtf"
    TOOL_NAME = "terraform"

    RELEASES_BASE_URL = "https://releases.hashicorp.com/terraform"
    RELEASE_INDEX_URL = RELEASES_BASE_URL + "/index.json"
    ARCHIVE_NAME_TEMPLATE = "{tool}_{version}_{os}_{arch}.zip"
    CHECKSUMS_NAME_TEMPLATE = "{tool}_{version}_SHA256SUMS"

    REQUEST_TIMEOUT = 300  # Timeout in seconds for all HTTP requests
    USER_AGENT = "wtf-terraform-wrapper"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "WTF_LOG_LEVEL"

    ENV_CONFIG_FILE = "WTF_CONFIG"
    CONFIG_DIR_NAME = "wtf"
    CONFIG_FILE_NAME = "config.yaml"
    STORE_DIR_NAME = "terraform-versions"
    DEFAULT_CONSTRAINT_FILE = ".terraform-version"
    VERSIONS_TF_FILE = "versions.tf"

    WRAPPER_TEMP_PREFIX = "wrapped.terraform."
    WRAPPER_TEMP_SUFFIX = ".wtf"

    BINARY_MODE = 0o700
