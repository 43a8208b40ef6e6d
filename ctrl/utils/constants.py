"""Application-wide default values."""

DEFAULT_SLASH_COMMAND = "/ctrl"
DEFAULT_MANIFEST_PATH = "manifest.yaml"
DEFAULT_CONFIGURED_PROJECT = "amcwb/ctrl"
DEFAULT_GITHUB_BASE_URL = "https://github.com"

# Store retry behaviour for transient file-system errors
DEFAULT_STORE_RETRY_ATTEMPTS = 3
DEFAULT_STORE_RETRY_DELAY = 0.2

MANIFEST_CORRUPT_POLICIES = ("reset", "fail")
