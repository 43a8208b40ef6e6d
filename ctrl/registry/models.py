"""Manifest data model: projects, profiles and their lookups.

The manifest is the whole persisted registry. Lookups here are pure reads
over one in-memory snapshot; nothing in this module touches the disk.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..utils.constants import DEFAULT_CONFIGURED_PROJECT


class Project(BaseModel):
    """A named unit of work bound to a Slack channel."""

    channel: str
    repository: Optional[str] = None
    tracker_project: Optional[str] = None
    owners: List[str] = Field(default_factory=list)

    @field_validator("owners")
    @classmethod
    def dedupe_owners(cls, v: List[str]) -> List[str]:
        """Drop repeated owners, keeping the first occurrence."""
        seen: Dict[str, None] = {}
        for owner in v:
            seen.setdefault(owner, None)
        return list(seen)


class Profile(BaseModel):
    """Link between a Slack user and a GitHub username."""

    external_username: str


class Manifest(BaseModel):
    """Aggregate root for the registry."""

    projects: Dict[str, Project] = Field(default_factory=dict)
    managers: List[str] = Field(default_factory=list)
    configured_project: str = DEFAULT_CONFIGURED_PROJECT
    profiles: Dict[str, Profile] = Field(default_factory=dict)

    @classmethod
    def default(cls, configured_project: str = DEFAULT_CONFIGURED_PROJECT) -> "Manifest":
        """Empty manifest used on first run and after a reset."""
        return cls(configured_project=configured_project)

    # --- Project lookups ---

    def get_project(self, name: str) -> Optional[Project]:
        return self.projects.get(name)

    def find_project_by_channel(self, channel: str) -> Optional[tuple[str, Project]]:
        """First project bound to ``channel``, in insertion order."""
        for name, project in self.projects.items():
            if project.channel == channel:
                return name, project
        return None

    def find_project_by_repository(
        self, repository: str
    ) -> Optional[tuple[str, Project]]:
        for name, project in self.projects.items():
            if project.repository is not None and project.repository == repository:
                return name, project
        return None

    def find_project_by_tracker(
        self, tracker_project: str
    ) -> Optional[tuple[str, Project]]:
        for name, project in self.projects.items():
            if (
                project.tracker_project is not None
                and project.tracker_project == tracker_project
            ):
                return name, project
        return None

    # --- Profile lookups ---

    def get_profile(self, chat_id: str) -> Optional[Profile]:
        return self.profiles.get(chat_id)

    def find_profile_by_username(
        self, username: str
    ) -> Optional[tuple[str, Profile]]:
        """Reverse lookup by GitHub username.

        Usernames are not unique across profiles; the first linked Slack
        user wins.
        """
        for chat_id, profile in self.profiles.items():
            if profile.external_username == username:
                return chat_id, profile
        return None
