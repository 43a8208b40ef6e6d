"""Tests for command text parsing."""

import pytest

from ctrl.bot.commands import (
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
    parse_command,
)
from ctrl.exceptions import InvalidCommandError


class TestParseCommand:
    """Verbs and their arguments."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("help", ShowHelp()),
            ("list", ListProjects()),
            ("project widgets", ShowProject("widgets")),
            ("create widgets", CreateProject("widgets")),
            ("delete widgets", DeleteProject("widgets")),
            ("add widgets <@U012|bob>", AddOwner("widgets", "U012")),
            ("remove widgets <@U012>", RemoveOwner("widgets", "U012")),
            ("github widgets acme/widgets", SetRepository("widgets", "acme/widgets")),
            ("jira widgets WID", SetTracker("widgets", "WID")),
            ("me github octocat", LinkGithub("octocat")),
        ],
    )
    def test_known_verbs(self, text, expected):
        assert parse_command(text) == expected

    def test_whitespace_is_collapsed(self):
        assert parse_command("  create \t widgets  ") == CreateProject("widgets")

    def test_extra_arguments_are_ignored(self):
        assert parse_command("create widgets extra") == CreateProject("widgets")

    @pytest.mark.parametrize("text", ["", "   ", "frobnicate", "Create widgets", "me slack bob"])
    def test_unknown_commands(self, text):
        with pytest.raises(InvalidCommandError) as exc:
            parse_command(text)
        assert exc.value.reason == "unknown"

    @pytest.mark.parametrize(
        "text", ["project", "create", "delete", "add widgets", "github widgets", "me github"]
    )
    def test_missing_arguments(self, text):
        with pytest.raises(InvalidCommandError) as exc:
            parse_command(text)
        assert exc.value.reason == "arguments"

    def test_bad_mention(self):
        with pytest.raises(InvalidCommandError) as exc:
            parse_command("add widgets bob")
        assert exc.value.reason == "mention"
