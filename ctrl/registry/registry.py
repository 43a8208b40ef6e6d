"""Project registry operations.

Every mutation is one load, validate, mutate, save cycle inside
``ManifestStore.transaction()``. A rejected mutation raises a
``RegistryError`` subclass before anything is saved.
"""

from typing import Optional

import structlog

from ..exceptions import (
    AlreadyOwnerError,
    NotOwnerError,
    ProjectExistsError,
    ProjectNotFoundError,
    UnlinkedUserError,
)
from .identity import IdentityLinker
from .models import Manifest, Profile, Project
from .store import ManifestStore

logger = structlog.get_logger()


def _require_project(manifest: Manifest, name: str) -> Project:
    project = manifest.get_project(name)
    if project is None:
        raise ProjectNotFoundError(name)
    return project


def _require_username(manifest: Manifest, chat_id: str) -> str:
    username = IdentityLinker(manifest).username_for(chat_id)
    if username is None:
        raise UnlinkedUserError(chat_id)
    return username


class ProjectRegistry:
    """CRUD and lookups over the manifest held by a ``ManifestStore``."""

    def __init__(self, store: ManifestStore) -> None:
        self.store = store

    # --- Reads ---

    async def manifest(self) -> Manifest:
        """Snapshot of the whole registry."""
        return await self.store.snapshot()

    async def get_project(self, name: str) -> Optional[Project]:
        return (await self.store.snapshot()).get_project(name)

    async def find_by_channel(self, channel: str) -> Optional[tuple[str, Project]]:
        return (await self.store.snapshot()).find_project_by_channel(channel)

    async def find_by_repository(
        self, repository: str
    ) -> Optional[tuple[str, Project]]:
        return (await self.store.snapshot()).find_project_by_repository(repository)

    async def find_by_tracker(
        self, tracker_project: str
    ) -> Optional[tuple[str, Project]]:
        return (await self.store.snapshot()).find_project_by_tracker(tracker_project)

    async def get_profile(self, chat_id: str) -> Optional[Profile]:
        return (await self.store.snapshot()).get_profile(chat_id)

    async def find_profile_by_username(
        self, username: str
    ) -> Optional[tuple[str, Profile]]:
        return (await self.store.snapshot()).find_profile_by_username(username)

    # --- Mutations ---

    async def create_project(self, name: str, channel: str) -> Project:
        """Create ``name`` bound to ``channel`` with no owners."""
        async with self.store.transaction() as manifest:
            if name in manifest.projects:
                raise ProjectExistsError(name)
            project = Project(channel=channel)
            manifest.projects[name] = project

        logger.info("Project created", project=name, channel_id=channel)
        return project

    async def delete_project(self, name: str) -> None:
        async with self.store.transaction() as manifest:
            _require_project(manifest, name)
            del manifest.projects[name]

        logger.info("Project deleted", project=name)

    async def add_owner(
        self, name: str, actor_chat_id: str, target_chat_id: str
    ) -> str:
        """Add the target's GitHub username to the project's owners.

        Returns the username that was added.
        """
        async with self.store.transaction() as manifest:
            project = _require_project(manifest, name)
            username = _require_username(manifest, target_chat_id)
            if username in project.owners:
                raise AlreadyOwnerError(name, username)
            project.owners.append(username)

        logger.info(
            "Owner added",
            project=name,
            owner=username,
            user_id=target_chat_id,
            actor_id=actor_chat_id,
        )
        return username

    async def remove_owner(self, name: str, target_chat_id: str) -> str:
        """Remove the target's GitHub username from the project's owners.

        Returns the username that was removed.
        """
        async with self.store.transaction() as manifest:
            project = _require_project(manifest, name)
            username = _require_username(manifest, target_chat_id)
            if username not in project.owners:
                raise NotOwnerError(name, username)
            project.owners.remove(username)

        logger.info(
            "Owner removed", project=name, owner=username, user_id=target_chat_id
        )
        return username

    async def set_repository(self, name: str, repository: str) -> None:
        async with self.store.transaction() as manifest:
            _require_project(manifest, name).repository = repository

        logger.info("Repository set", project=name, repository=repository)

    async def set_tracker_project(self, name: str, tracker_project: str) -> None:
        async with self.store.transaction() as manifest:
            _require_project(manifest, name).tracker_project = tracker_project

        logger.info("Tracker project set", project=name, tracker=tracker_project)

    async def link_identity(self, chat_id: str, username: str) -> None:
        """Link ``chat_id`` to ``username``, replacing any previous link."""
        async with self.store.transaction() as manifest:
            manifest.profiles[chat_id] = Profile(external_username=username)

        logger.info("Identity linked", user_id=chat_id, github_username=username)
