"""Slack mrkdwn formatting utilities.

Only three characters need escaping in regular mrkdwn text: &, <, >.
"""


def escape_mrkdwn(text: str) -> str:
    """Escape the 3 special characters for Slack mrkdwn.

    Slack requires &, <, > to be escaped as HTML entities even inside
    mrkdwn text so they are not interpreted as message formatting
    directives.
    """
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def user_mention(user_id: str) -> str:
    return f"<@{user_id}>"


def channel_link(channel_id: str) -> str:
    return f"<#{channel_id}>"


def url_link(url: str, label: str) -> str:
    return f"<{url}|{escape_mrkdwn(label)}>"
