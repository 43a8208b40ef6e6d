"""Custom exceptions for the ctrl Slack bot."""


class CtrlError(Exception):
    """Base exception for the ctrl bot."""


class ConfigurationError(CtrlError):
    """Configuration-related errors."""


class MissingConfigError(ConfigurationError):
    """Required configuration is missing."""


class InvalidConfigError(ConfigurationError):
    """Configuration is invalid."""


class StorageError(CtrlError):
    """Storage-related errors."""


class ManifestIOError(StorageError):
    """Reading or writing the manifest file failed after all retries."""


class ManifestCorruptError(StorageError):
    """The manifest file exists but cannot be parsed."""


class RegistryError(CtrlError):
    """A registry operation was rejected."""


class ProjectNotFoundError(RegistryError):
    """Referenced project does not exist."""

    def __init__(self, project_name: str):
        super().__init__(f"Project {project_name!r} does not exist")
        self.project_name = project_name


class ProjectExistsError(RegistryError):
    """A project with that name already exists."""

    def __init__(self, project_name: str):
        super().__init__(f"Project {project_name!r} already exists")
        self.project_name = project_name


class UnlinkedUserError(RegistryError):
    """The Slack user has not linked a GitHub username."""

    def __init__(self, chat_id: str):
        super().__init__(f"User {chat_id!r} has no linked GitHub username")
        self.chat_id = chat_id


class AlreadyOwnerError(RegistryError):
    """User is already an owner of the project."""

    def __init__(self, project_name: str, username: str):
        super().__init__(f"{username!r} already owns {project_name!r}")
        self.project_name = project_name
        self.username = username


class NotOwnerError(RegistryError):
    """User is not an owner of the project."""

    def __init__(self, project_name: str, username: str):
        super().__init__(f"{username!r} does not own {project_name!r}")
        self.project_name = project_name
        self.username = username


class InvalidCommandError(CtrlError):
    """Command text could not be parsed.

    ``reason`` is ``"unknown"`` for an unrecognised verb and ``"arguments"``
    when the verb is known but required arguments are missing.
    """

    def __init__(self, message: str, reason: str = "unknown"):
        super().__init__(message)
        self.reason = reason
