"""Tests for Slack message formatting.

Verifies that ResponseFormatter renders every outcome as mrkdwn text,
that list output carries Block Kit sections with repository buttons, and
that failures never read as success.
"""

import pytest

from ctrl.bot.commands import (
    AddOwner,
    CreateProject,
    ListProjects,
    SetRepository,
    ShowHelp,
    ShowProject,
)
from ctrl.bot.router import CommandOutcome, OutcomeKind
from ctrl.bot.utils.formatting import FormattedMessage, ResponseFormatter
from ctrl.bot.utils.slack_format import escape_mrkdwn
from ctrl.registry.models import Manifest, Profile, Project


def _manifest() -> Manifest:
    return Manifest(
        projects={
            "widgets": Project(
                channel="C01",
                repository="acme/widgets",
                tracker_project="WID",
                owners=["bob", "ghost"],
            ),
            "gadgets": Project(channel="C02"),
        },
        managers=["alice"],
        profiles={"U02": Profile(external_username="bob")},
    )


@pytest.fixture
def formatter(settings):
    return ResponseFormatter(settings)


class TestFormattedMessage:
    """Test FormattedMessage dataclass."""

    def test_creation_with_text(self):
        msg = FormattedMessage("hello world")
        assert msg.text == "hello world"
        assert msg.blocks is None

    def test_len_is_text_length(self):
        assert len(FormattedMessage("abc")) == 3


class TestEscape:
    """mrkdwn escaping."""

    def test_escape_special_characters(self):
        assert escape_mrkdwn("a & <b>") == "a &amp; &lt;b&gt;"


class TestSuccessMessages:
    """Rendering of successful outcomes."""

    def test_help_lists_commands(self, formatter):
        text = formatter.format_outcome(CommandOutcome(OutcomeKind.OK, ShowHelp())).text
        for verb in ("list", "create", "delete", "add", "remove", "github", "me github"):
            assert f"/ctrl {verb}" in text

    def test_help_uses_configured_command(self, settings):
        formatter = ResponseFormatter(settings.model_copy(update={"slash_command": "/proj"}))
        assert "`/proj help`" in formatter.help_text()

    def test_created(self, formatter):
        msg = formatter.format_outcome(
            CommandOutcome(OutcomeKind.OK, CreateProject("widgets"))
        )
        assert msg.text == "Project `widgets` created."

    def test_owner_added_mentions_user(self, formatter):
        msg = formatter.format_outcome(
            CommandOutcome(OutcomeKind.OK, AddOwner("widgets", "U02"), username="bob")
        )
        assert "<@U02>" in msg.text
        assert "`widgets`" in msg.text

    def test_repository_set(self, formatter):
        msg = formatter.format_outcome(
            CommandOutcome(OutcomeKind.OK, SetRepository("widgets", "acme/widgets"))
        )
        assert msg.text == "GitHub repository `acme/widgets` set for `widgets`."

    def test_list_blocks(self, formatter):
        msg = formatter.format_outcome(
            CommandOutcome(OutcomeKind.OK, ListProjects(), manifest=_manifest())
        )
        assert len(msg.blocks) == 3
        assert "Global project managers: alice." in msg.blocks[0]["text"]["text"]

        widgets = msg.blocks[1]
        assert "<#C01>" in widgets["text"]["text"]
        assert "<@U02> (bob)" in widgets["text"]["text"]
        assert "ghost" in widgets["text"]["text"]
        assert widgets["accessory"]["url"] == "https://github.com/acme/widgets"

        assert "accessory" not in msg.blocks[2]

    def test_empty_list(self, formatter):
        msg = formatter.format_outcome(
            CommandOutcome(OutcomeKind.OK, ListProjects(), manifest=Manifest())
        )
        assert len(msg.blocks) == 1
        assert "no projects" in msg.text

    def test_project_detail(self, formatter):
        msg = formatter.format_outcome(
            CommandOutcome(OutcomeKind.OK, ShowProject("widgets"), manifest=_manifest())
        )
        assert "*Project*: `widgets`" in msg.text
        assert "<https://github.com/acme/widgets|acme/widgets>" in msg.text
        assert "*Jira*: `WID`" in msg.text
        assert "<@U02> (bob)" in msg.text

    def test_project_names_are_escaped(self, formatter):
        msg = formatter.format_outcome(
            CommandOutcome(OutcomeKind.OK, CreateProject("<evil>"))
        )
        assert "&lt;evil&gt;" in msg.text


class TestFailureMessages:
    """Rendering of rejected commands."""

    def test_invalid_command(self, formatter):
        msg = formatter.format_outcome(CommandOutcome(OutcomeKind.INVALID_COMMAND))
        assert "Invalid command" in msg.text
        assert "`/ctrl help`" in msg.text

    def test_missing_arguments(self, formatter):
        msg = formatter.format_outcome(CommandOutcome(OutcomeKind.MISSING_ARGUMENTS))
        assert "Not enough arguments" in msg.text

    def test_not_found(self, formatter):
        msg = formatter.format_outcome(
            CommandOutcome(OutcomeKind.NOT_FOUND, CreateProject("widgets"))
        )
        assert "`widgets` does not exist" in msg.text

    def test_unlinked(self, formatter):
        msg = formatter.format_outcome(
            CommandOutcome(OutcomeKind.UNLINKED, AddOwner("widgets", "U09"))
        )
        assert "<@U09>" in msg.text
        assert "/ctrl me github" in msg.text

    def test_store_failure_does_not_claim_success(self, formatter):
        msg = formatter.format_outcome(
            CommandOutcome(OutcomeKind.STORE_FAILURE, CreateProject("widgets"))
        )
        assert "created" not in msg.text
        assert "nothing was changed" in msg.text
