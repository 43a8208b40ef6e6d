"""ctrl Slack bot.

A Slack bot that keeps a registry of projects, mapping each one to a Slack
channel, a GitHub repository, a Jira key and a list of owners, and lets
members edit it through the ``/ctrl`` slash command.

Features:
- Environment-based configuration with Pydantic validation
- YAML manifest persisted atomically with a single-writer lock
- GitHub identity linking for Slack users
- Socket Mode for simple deployment
"""

__version__ = "0.1.0"
__license__ = "MIT"
