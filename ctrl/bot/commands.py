"""Parsing of ``/ctrl`` command text into typed commands.

``parse_command`` is the only way to build a command from user input, so
each command object carries arguments that are already present and, for
user mentions, already resolved to a Slack user id.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Union

from ..exceptions import InvalidCommandError
from ..registry.identity import parse_mention


@dataclass(frozen=True)
class ShowHelp:
    pass


@dataclass(frozen=True)
class ListProjects:
    pass


@dataclass(frozen=True)
class ShowProject:
    project_name: str


@dataclass(frozen=True)
class CreateProject:
    project_name: str


@dataclass(frozen=True)
class DeleteProject:
    project_name: str


@dataclass(frozen=True)
class AddOwner:
    project_name: str
    target_user_id: str


@dataclass(frozen=True)
class RemoveOwner:
    project_name: str
    target_user_id: str


@dataclass(frozen=True)
class SetRepository:
    project_name: str
    repository: str


@dataclass(frozen=True)
class SetTracker:
    project_name: str
    tracker_project: str


@dataclass(frozen=True)
class LinkGithub:
    github_username: str


Command = Union[
    ShowHelp,
    ListProjects,
    ShowProject,
    CreateProject,
    DeleteProject,
    AddOwner,
    RemoveOwner,
    SetRepository,
    SetTracker,
    LinkGithub,
]


def _require(verb: str, args: List[str], count: int) -> None:
    if len(args) < count:
        raise InvalidCommandError(
            f"'{verb}' needs {count} argument(s), got {len(args)}",
            reason="arguments",
        )


def _parse_me(args: List[str]) -> Command:
    _require("me", args, 2)
    if args[0] != "github":
        raise InvalidCommandError(f"Unknown 'me' setting: {args[0]!r}")
    return LinkGithub(github_username=args[1])


_PARSERS: Dict[str, tuple[int, Callable[[List[str]], Command]]] = {
    "help": (0, lambda a: ShowHelp()),
    "list": (0, lambda a: ListProjects()),
    "project": (1, lambda a: ShowProject(a[0])),
    "create": (1, lambda a: CreateProject(a[0])),
    "delete": (1, lambda a: DeleteProject(a[0])),
    "add": (2, lambda a: AddOwner(a[0], parse_mention(a[1]))),
    "remove": (2, lambda a: RemoveOwner(a[0], parse_mention(a[1]))),
    "github": (2, lambda a: SetRepository(a[0], a[1])),
    "jira": (2, lambda a: SetTracker(a[0], a[1])),
}


def parse_command(text: str) -> Command:
    """Parse whitespace-separated command text.

    The first token is the verb (case-sensitive); the rest are positional
    arguments. Extra trailing arguments are ignored.
    """
    tokens = (text or "").split()
    if not tokens:
        raise InvalidCommandError("Empty command")

    verb, args = tokens[0], tokens[1:]
    if verb == "me":
        return _parse_me(args)

    if verb not in _PARSERS:
        raise InvalidCommandError(f"Unknown command: {verb!r}")

    count, build = _PARSERS[verb]
    _require(verb, args, count)
    return build(args)
