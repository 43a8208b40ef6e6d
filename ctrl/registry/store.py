"""YAML-backed manifest store.

The whole manifest is read and written as one unit. Writes go to a
temporary file in the same directory, are fsync'd, and then replace the
target, so a reader never sees a half-written manifest. Every
load/mutate/save cycle runs under a single ``asyncio.Lock`` owned by the
store. Reads of a healthy file skip the lock and never write; creating
or recovering the file always happens under the lock.
"""

import asyncio
import os
import tempfile
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import AsyncIterator, Callable, Optional, TypeVar

import structlog
import yaml
from pydantic import ValidationError

from ..config.settings import Settings
from ..exceptions import ManifestCorruptError, ManifestIOError
from ..utils.constants import (
    DEFAULT_CONFIGURED_PROJECT,
    DEFAULT_STORE_RETRY_ATTEMPTS,
    DEFAULT_STORE_RETRY_DELAY,
)
from .models import Manifest

logger = structlog.get_logger()

T = TypeVar("T")


class ManifestStore:
    """Owns the manifest file and serializes every mutation of it."""

    def __init__(
        self,
        path: Path,
        configured_project: str = DEFAULT_CONFIGURED_PROJECT,
        corrupt_policy: str = "reset",
        retry_attempts: int = DEFAULT_STORE_RETRY_ATTEMPTS,
        retry_delay: float = DEFAULT_STORE_RETRY_DELAY,
    ) -> None:
        self.path = Path(path)
        self.configured_project = configured_project
        self.corrupt_policy = corrupt_policy
        self.retry_attempts = max(1, retry_attempts)
        self.retry_delay = retry_delay
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ManifestStore":
        """Build a store from application settings."""
        return cls(
            path=settings.manifest_path,
            configured_project=settings.default_configured_project,
            corrupt_policy=settings.manifest_corrupt_policy,
            retry_attempts=settings.store_retry_attempts,
            retry_delay=settings.store_retry_delay,
        )

    # --- Synchronous file access ---

    def load(self) -> Manifest:
        """Read the manifest, creating or recovering the file when needed.

        This writes to disk on first run and when the policy resets a
        corrupt file, so callers must hold the mutation lock.
        """
        raw = self._with_retries(self._read_bytes, "read")
        if raw is None:
            logger.info("Manifest not found, creating default", path=str(self.path))
            manifest = self._default()
            self.save(manifest)
            return manifest

        try:
            return self._parse(raw)
        except ManifestCorruptError as e:
            return self._recover_corrupt(e, raw)

    def read_existing(self) -> Optional[Manifest]:
        """Parse the manifest without writing anything.

        Returns ``None`` when the file is missing or unreadable.
        """
        raw = self._with_retries(self._read_bytes, "read")
        if raw is None:
            return None
        try:
            return self._parse(raw)
        except ManifestCorruptError:
            return None

    def save(self, manifest: Manifest) -> None:
        """Overwrite the manifest file with ``manifest`` and flush it to disk."""
        data = manifest.model_dump(mode="json", exclude_none=True)
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        self._with_retries(lambda: self._atomic_write(text), "write")
        logger.info(
            "Manifest written",
            path=str(self.path),
            projects=len(manifest.projects),
            profiles=len(manifest.profiles),
        )

    # --- Async facade ---

    async def snapshot(self) -> Manifest:
        """Load a consistent copy of the manifest.

        A readable file is returned without taking the lock. A missing or
        corrupt file is initialised or recovered under the lock, after
        re-reading it in case a mutation already fixed it.
        """
        manifest = await asyncio.to_thread(self.read_existing)
        if manifest is not None:
            return manifest
        async with self._lock:
            return await asyncio.to_thread(self.load)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Manifest]:
        """Hold the mutation lock for a full load, mutate, save cycle.

        The manifest is saved only when the ``async with`` body finishes
        without raising.
        """
        async with self._lock:
            manifest = await asyncio.to_thread(self.load)
            yield manifest
            await asyncio.to_thread(self.save, manifest)

    # --- Internals ---

    def _default(self) -> Manifest:
        return Manifest.default(self.configured_project)

    def _read_bytes(self) -> Optional[bytes]:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None

    def _parse(self, raw: bytes) -> Manifest:
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestCorruptError(f"Manifest is not valid UTF-8: {e}") from e
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ManifestCorruptError(f"Manifest is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ManifestCorruptError("Manifest must contain a mapping")
        try:
            return Manifest.model_validate(data)
        except ValidationError as e:
            raise ManifestCorruptError(f"Manifest has an invalid shape: {e}") from e

    def _recover_corrupt(self, error: ManifestCorruptError, raw: bytes) -> Manifest:
        logger.error(
            "Manifest is corrupt",
            path=str(self.path),
            error=str(error),
            policy=self.corrupt_policy,
        )
        if self.corrupt_policy == "fail":
            raise error

        # Keep the unreadable bytes; the manifest path itself is only ever
        # replaced atomically, so readers never find it missing.
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%f")
        aside = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        self._with_retries(lambda: aside.write_bytes(raw), "copy aside")
        logger.warning(
            "Corrupt manifest copied aside, starting empty",
            path=str(self.path),
            copied_to=str(aside),
        )
        manifest = self._default()
        self.save(manifest)
        return manifest

    def _atomic_write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.tmp.", dir=str(self.path.parent)
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        finally:
            try:
                if tmp_path.exists():
                    tmp_path.unlink()
            except FileNotFoundError:
                pass

    def _with_retries(self, operation: Callable[[], T], action: str) -> T:
        """Run a file operation, retrying transient OS errors."""
        last_error: Optional[OSError] = None
        for attempt in range(1, self.retry_attempts + 1):
            try:
                return operation()
            except OSError as e:
                last_error = e
                if attempt == self.retry_attempts:
                    break
                logger.warning(
                    "Manifest I/O failed, retrying",
                    action=action,
                    attempt=attempt,
                    error=str(e),
                )
                time.sleep(self.retry_delay * attempt)

        logger.error(
            "Manifest I/O failed",
            action=action,
            attempts=self.retry_attempts,
            error=str(last_error),
        )
        raise ManifestIOError(
            f"Could not {action} manifest at {self.path}: {last_error}"
        ) from last_error
