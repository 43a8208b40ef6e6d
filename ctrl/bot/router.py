"""Command routing from parsed ``/ctrl`` commands to registry operations.

The router never raises for user mistakes or storage failures: every
invocation ends in a ``CommandOutcome`` that the formatter turns into a
Slack message.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, get_args

import structlog

from ..exceptions import (
    AlreadyOwnerError,
    InvalidCommandError,
    NotOwnerError,
    ProjectExistsError,
    ProjectNotFoundError,
    RegistryError,
    StorageError,
    UnlinkedUserError,
)
from ..registry.models import Manifest
from ..registry.registry import ProjectRegistry
from .commands import (
    AddOwner,
    Command,
    CreateProject,
    DeleteProject,
    LinkGithub,
    ListProjects,
    RemoveOwner,
    SetRepository,
    SetTracker,
    ShowHelp,
    ShowProject,
    parse_command,
)

logger = structlog.get_logger()


class OutcomeKind(str, Enum):
    """Result codes handed to the formatter."""

    OK = "ok"
    INVALID_COMMAND = "invalid_command"
    MISSING_ARGUMENTS = "missing_arguments"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    UNLINKED = "unlinked"
    ALREADY_OWNER = "already_owner"
    NOT_OWNER = "not_owner"
    STORE_FAILURE = "store_failure"


_ERROR_KINDS: Dict[type, OutcomeKind] = {
    ProjectNotFoundError: OutcomeKind.NOT_FOUND,
    ProjectExistsError: OutcomeKind.ALREADY_EXISTS,
    UnlinkedUserError: OutcomeKind.UNLINKED,
    AlreadyOwnerError: OutcomeKind.ALREADY_OWNER,
    NotOwnerError: OutcomeKind.NOT_OWNER,
}


@dataclass
class CommandOutcome:
    """What happened to one command invocation."""

    kind: OutcomeKind
    command: Optional[Command] = None
    manifest: Optional[Manifest] = None
    username: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK


Handler = Callable[[Any, str, str], Awaitable[CommandOutcome]]


class CommandRouter:
    """Dispatches one command text to the registry and reports the outcome."""

    def __init__(self, registry: ProjectRegistry) -> None:
        self.registry = registry
        self._handlers: Dict[type, Handler] = {
            ShowHelp: self._show_help,
            ListProjects: self._list_projects,
            ShowProject: self._show_project,
            CreateProject: self._create_project,
            DeleteProject: self._delete_project,
            AddOwner: self._add_owner,
            RemoveOwner: self._remove_owner,
            SetRepository: self._set_repository,
            SetTracker: self._set_tracker,
            LinkGithub: self._link_github,
        }
        missing = set(get_args(Command)) - set(self._handlers)
        if missing:
            raise TypeError(f"No handler for commands: {sorted(c.__name__ for c in missing)}")

    async def dispatch(self, text: str, channel_id: str, user_id: str) -> CommandOutcome:
        """Parse ``text`` and run it on behalf of ``user_id`` in ``channel_id``."""
        try:
            command = parse_command(text)
        except InvalidCommandError as e:
            kind = (
                OutcomeKind.MISSING_ARGUMENTS
                if e.reason == "arguments"
                else OutcomeKind.INVALID_COMMAND
            )
            logger.info("Rejected command", text=text, user_id=user_id, reason=e.reason)
            return CommandOutcome(kind, error=str(e))

        handler = self._handlers[type(command)]
        logger.debug(
            "Dispatching command",
            command=type(command).__name__,
            channel_id=channel_id,
            user_id=user_id,
        )

        try:
            return await handler(command, channel_id, user_id)
        except RegistryError as e:
            kind = next(k for t, k in _ERROR_KINDS.items() if isinstance(e, t))
            logger.info(
                "Command refused",
                command=type(command).__name__,
                outcome=kind.value,
                error=str(e),
            )
            return CommandOutcome(kind, command=command, error=str(e))
        except StorageError as e:
            logger.error(
                "Registry storage failed",
                command=type(command).__name__,
                error=str(e),
                error_type=type(e).__name__,
            )
            return CommandOutcome(OutcomeKind.STORE_FAILURE, command=command, error=str(e))

    # --- Handlers ---

    async def _show_help(self, command: ShowHelp, channel_id: str, user_id: str) -> CommandOutcome:
        return CommandOutcome(OutcomeKind.OK, command=command)

    async def _list_projects(
        self, command: ListProjects, channel_id: str, user_id: str
    ) -> CommandOutcome:
        manifest = await self.registry.manifest()
        return CommandOutcome(OutcomeKind.OK, command=command, manifest=manifest)

    async def _show_project(
        self, command: ShowProject, channel_id: str, user_id: str
    ) -> CommandOutcome:
        manifest = await self.registry.manifest()
        if manifest.get_project(command.project_name) is None:
            raise ProjectNotFoundError(command.project_name)
        return CommandOutcome(OutcomeKind.OK, command=command, manifest=manifest)

    async def _create_project(
        self, command: CreateProject, channel_id: str, user_id: str
    ) -> CommandOutcome:
        await self.registry.create_project(command.project_name, channel_id)
        return CommandOutcome(OutcomeKind.OK, command=command)

    async def _delete_project(
        self, command: DeleteProject, channel_id: str, user_id: str
    ) -> CommandOutcome:
        await self.registry.delete_project(command.project_name)
        return CommandOutcome(OutcomeKind.OK, command=command)

    async def _add_owner(self, command: AddOwner, channel_id: str, user_id: str) -> CommandOutcome:
        username = await self.registry.add_owner(
            command.project_name, user_id, command.target_user_id
        )
        return CommandOutcome(OutcomeKind.OK, command=command, username=username)

    async def _remove_owner(
        self, command: RemoveOwner, channel_id: str, user_id: str
    ) -> CommandOutcome:
        username = await self.registry.remove_owner(
            command.project_name, command.target_user_id
        )
        return CommandOutcome(OutcomeKind.OK, command=command, username=username)

    async def _set_repository(
        self, command: SetRepository, channel_id: str, user_id: str
    ) -> CommandOutcome:
        await self.registry.set_repository(command.project_name, command.repository)
        return CommandOutcome(OutcomeKind.OK, command=command)

    async def _set_tracker(
        self, command: SetTracker, channel_id: str, user_id: str
    ) -> CommandOutcome:
        await self.registry.set_tracker_project(
            command.project_name, command.tracker_project
        )
        return CommandOutcome(OutcomeKind.OK, command=command)

    async def _link_github(
        self, command: LinkGithub, channel_id: str, user_id: str
    ) -> CommandOutcome:
        await self.registry.link_identity(user_id, command.github_username)
        return CommandOutcome(
            OutcomeKind.OK, command=command, username=command.github_username
        )
