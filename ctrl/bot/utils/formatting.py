"""Render command outcomes as Slack messages."""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ...config.settings import Settings
from ...registry.identity import IdentityLinker
from ...registry.models import Manifest, Project
from ..commands import (
    AddOwner,
    CreateProject,
    DeleteProject,
    LinkGithub,
    ListProjects,
    RemoveOwner,
    SetRepository,
    SetTracker,
    ShowHelp,
    ShowProject,
)
from ..router import CommandOutcome, OutcomeKind
from .slack_format import channel_link, escape_mrkdwn, url_link, user_mention


@dataclass
class FormattedMessage:
    """Represents a formatted message for Slack.

    ``text`` is always set; it doubles as the notification fallback when
    ``blocks`` carries a Block Kit layout.
    """

    text: str
    blocks: Optional[List[dict]] = field(default=None)

    def __len__(self) -> int:
        """Return length of message text."""
        return len(self.text)


def _code(value: str) -> str:
    return f"`{escape_mrkdwn(value)}`"


class ResponseFormatter:
    """Turns ``CommandOutcome`` values into Slack messages."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.command = settings.slash_command

    def format_outcome(self, outcome: CommandOutcome) -> FormattedMessage:
        if outcome.kind is OutcomeKind.OK:
            return self._format_success(outcome)
        return FormattedMessage(self._failure_text(outcome))

    # --- Failures ---

    def _failure_text(self, outcome: CommandOutcome) -> str:
        command = outcome.command
        name = getattr(command, "project_name", "")
        target = getattr(command, "target_user_id", "")

        if outcome.kind is OutcomeKind.INVALID_COMMAND:
            return f"Invalid command. Use `{self.command} help` for a list of commands."
        if outcome.kind is OutcomeKind.MISSING_ARGUMENTS:
            return f"Not enough arguments. Use `{self.command} help` for a list of commands."
        if outcome.kind is OutcomeKind.NOT_FOUND:
            return (
                f"Project {_code(name)} does not exist. "
                f"Use `{self.command} list` for a list of projects."
            )
        if outcome.kind is OutcomeKind.ALREADY_EXISTS:
            return f"Project {_code(name)} already exists."
        if outcome.kind is OutcomeKind.UNLINKED:
            return (
                f"{user_mention(target)} must link their GitHub account first. "
                f"Use `{self.command} me github <github_username>`."
            )
        if outcome.kind is OutcomeKind.ALREADY_OWNER:
            return f"{user_mention(target)} is already a manager of {_code(name)}."
        if outcome.kind is OutcomeKind.NOT_OWNER:
            return f"{user_mention(target)} is not a manager of {_code(name)}."
        if outcome.kind is OutcomeKind.STORE_FAILURE:
            return (
                ":warning: The project registry could not be read or saved, "
                "so nothing was changed. Please try again."
            )
        return "Something went wrong. Please try again."

    # --- Successes ---

    def _format_success(self, outcome: CommandOutcome) -> FormattedMessage:
        renderers: Dict[type, Callable[[CommandOutcome], FormattedMessage]] = {
            ShowHelp: lambda o: FormattedMessage(self.help_text()),
            ListProjects: self._format_list,
            ShowProject: self._format_project,
            CreateProject: lambda o: FormattedMessage(
                f"Project {_code(o.command.project_name)} created."
            ),
            DeleteProject: lambda o: FormattedMessage(
                f"Project {_code(o.command.project_name)} deleted."
            ),
            AddOwner: lambda o: FormattedMessage(
                f"{user_mention(o.command.target_user_id)} added as a manager of "
                f"{_code(o.command.project_name)}."
            ),
            RemoveOwner: lambda o: FormattedMessage(
                f"{user_mention(o.command.target_user_id)} removed as a manager of "
                f"{_code(o.command.project_name)}."
            ),
            SetRepository: lambda o: FormattedMessage(
                f"GitHub repository {_code(o.command.repository)} set for "
                f"{_code(o.command.project_name)}."
            ),
            SetTracker: lambda o: FormattedMessage(
                f"Jira project {_code(o.command.tracker_project)} set for "
                f"{_code(o.command.project_name)}."
            ),
            LinkGithub: lambda o: FormattedMessage(
                f"GitHub username set to {_code(o.command.github_username)}."
            ),
        }
        return renderers[type(outcome.command)](outcome)

    def help_text(self) -> str:
        c = self.command
        return (
            ":information_source: Here's a simple help guide for all the commands available.\n\n"
            f"- `{c} help`: Show this help guide.\n"
            f"- `{c} list`: List all projects.\n"
            f"- `{c} project <project_name>`: Show information about a project.\n"
            f"- `{c} create <project_name>`: Create a new project assigned to this channel.\n"
            f"- `{c} delete <project_name>`: Delete a project.\n"
            f"- `{c} add <project_name> <@user>`: Add a user as a manager of a project.\n"
            f"- `{c} remove <project_name> <@user>`: Remove a user as a manager of a project.\n"
            f"- `{c} github <project_name> <owner/repo>`: Set the GitHub repository for a project.\n"
            f"- `{c} jira <project_name> <key>`: Set the Jira project key for a project.\n"
            f"- `{c} me github <github_username>`: Set your GitHub username."
        )

    def _repository_url(self, repository: str) -> str:
        return f"{self.settings.github_base_url}/{repository}"

    def _owner_labels(self, manifest: Manifest, project: Project) -> List[str]:
        linker = IdentityLinker(manifest)
        labels = []
        for username in project.owners:
            chat_id = linker.chat_id_for(username)
            if chat_id:
                labels.append(f"{user_mention(chat_id)} ({escape_mrkdwn(username)})")
            else:
                labels.append(escape_mrkdwn(username))
        return labels

    def _format_list(self, outcome: CommandOutcome) -> FormattedMessage:
        manifest = outcome.manifest or Manifest()
        managers = ", ".join(escape_mrkdwn(m) for m in manifest.managers) or "none"
        header = f"Global project managers: {managers}.\nHere's a list of all projects."
        if not manifest.projects:
            header = f"Global project managers: {managers}.\nThere are no projects yet."

        blocks: List[dict] = [
            {"type": "section", "text": {"type": "mrkdwn", "text": header}}
        ]
        lines = [header]

        for name, project in manifest.projects.items():
            owners = ", ".join(self._owner_labels(manifest, project)) or "none"
            text = (
                f"*{escape_mrkdwn(name)}* in {channel_link(project.channel)}.\n"
                f"Project owners: {owners}"
            )
            block: dict = {"type": "section", "text": {"type": "mrkdwn", "text": text}}
            if project.repository:
                block["accessory"] = {
                    "type": "button",
                    "text": {"type": "plain_text", "text": "GitHub"},
                    "action_id": f"github:{name}",
                    "url": self._repository_url(project.repository),
                }
            blocks.append(block)
            lines.append(text)

        return FormattedMessage("\n\n".join(lines), blocks=blocks)

    def _format_project(self, outcome: CommandOutcome) -> FormattedMessage:
        manifest = outcome.manifest or Manifest()
        name = outcome.command.project_name
        project = manifest.projects[name]

        text = f"*Project*: {_code(name)}\n*Channel*: {channel_link(project.channel)}\n"
        if project.repository:
            text += (
                f"*GitHub*: "
                f"{url_link(self._repository_url(project.repository), project.repository)}\n"
            )
        if project.tracker_project:
            text += f"*Jira*: {_code(project.tracker_project)}\n"

        text += "*Managers*:\n"
        owners = self._owner_labels(manifest, project)
        text += "\n".join(owners) if owners else "_none_"

        return FormattedMessage(text)
