"""Project registry: data model, persistence and identity linking."""

from .identity import IdentityLinker, parse_mention
from .models import Manifest, Profile, Project
from .registry import ProjectRegistry
from .store import ManifestStore

__all__ = [
    "IdentityLinker",
    "parse_mention",
    "Manifest",
    "Profile",
    "Project",
    "ProjectRegistry",
    "ManifestStore",
]
