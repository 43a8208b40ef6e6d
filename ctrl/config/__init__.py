"""Configuration loading."""

from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..exceptions import InvalidConfigError, MissingConfigError
from .settings import Settings

__all__ = ["Settings", "load_config"]


def load_config(config_file: Optional[Path] = None) -> Settings:
    """Build settings from the environment and an optional env file.

    A missing env file raises ``MissingConfigError`` and validation problems
    are re-raised as ``InvalidConfigError``. Both subclass
    ``ConfigurationError``, which the entry point reports without a traceback.
    """
    if config_file is not None and not config_file.is_file():
        raise MissingConfigError(f"Config file does not exist: {config_file}")

    try:
        if config_file is not None:
            return Settings(_env_file=config_file)  # type: ignore[call-arg]
        return Settings()  # type: ignore[call-arg]
    except ValidationError as e:
        raise InvalidConfigError(f"Invalid configuration: {e}") from e
