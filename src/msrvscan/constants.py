"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1
    USAGE_ERROR = 2
    FILE_ERROR = 3
    CONNECTION_ERROR = 4
    CHECK_ERROR = 5


class ReleaseSources(Enum):
    """Where the index of stable Rust releases is fetched from.

    Args:
        Enum (string): Release sources supported by the program.
    """

    RUST_CHANGELOG = "rust-changelog"
    RUST_DIST = "rust-dist"


class OutputFormats(Enum):
    """Renderers for the event stream.

    Args:
        Enum (string): Output formats supported by the program.
    """

    HUMAN = "human"
    JSON = "json"
    MINIMAL = "minimal"
    NONE = "none"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    RUST_CHANGELOG_URL = "https://raw.githubusercontent.com/rust-lang/rust/master/RELEASES.md"
    RUST_DIST_MANIFESTS_URL = "https://static.rust-lang.org/manifests.txt"
    SUPPORTED_RELEASE_SOURCES = [
        ReleaseSources.RUST_CHANGELOG.value,
        ReleaseSources.RUST_DIST.value,
    ]
    SUPPORTED_OUTPUT_FORMATS = [f.value for f in OutputFormats]
    SEARCH_METHODS = ["bisect", "linear"]

    CARGO_MANIFEST_FILE = "Cargo.toml"
    CARGO_LOCK_FILE = "Cargo.lock"
    CARGO_LOCK_REPLACEMENT = "Cargo.lock-ignored-for-msrvscan"
    CONFIG_FILE = "msrvscan.yml"
    DEFAULT_CHECK_COMMAND = ["cargo", "check"]
    STABLE_CHANNEL = "stable"

    # First stable release supporting each edition.
    EDITIONS = {
        "2015": "1.0.0",
        "2018": "1.31.0",
        "2021": "1.56.0",
        "2024": "1.85.0",
    }

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "MSRVSCAN_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
