"""Slash command handler for ``/ctrl``."""

from typing import Any, Callable, Dict, Optional

import structlog
from slack_sdk.errors import SlackApiError

from ..router import CommandRouter
from ..utils.formatting import FormattedMessage, ResponseFormatter

logger = structlog.get_logger()


async def _deliver(
    message: FormattedMessage,
    say: Callable,
    respond: Optional[Callable],
    channel_id: str,
) -> None:
    """Post to the invoking channel, falling back to an ephemeral reply.

    ``say`` fails when the bot is not a member of the channel; ``respond``
    uses the command's response URL and works everywhere.
    """
    kwargs: Dict[str, Any] = {"text": message.text}
    if message.blocks:
        kwargs["blocks"] = message.blocks

    try:
        await say(**kwargs)
    except SlackApiError as e:
        logger.warning(
            "Could not post to channel, replying ephemerally",
            channel_id=channel_id,
            error=e.response.get("error"),
        )
        if respond is None:
            raise
        await respond(**kwargs)


async def ctrl_command(
    ack: Callable,
    say: Callable,
    command: Dict[str, Any],
    context: Dict[str, Any],
    respond: Optional[Callable] = None,
    **kwargs: Any,
) -> None:
    """Handle ``/ctrl <verb> [args...]``."""
    await ack()

    deps = context.get("deps", {})
    router: CommandRouter = deps["router"]
    formatter: ResponseFormatter = deps["formatter"]

    text = command.get("text") or ""
    channel_id = command.get("channel_id", "")
    user_id = command.get("user_id", "")

    logger.info("Command received", text=text, channel_id=channel_id, user_id=user_id)

    outcome = await router.dispatch(text, channel_id, user_id)
    message = formatter.format_outcome(outcome)

    try:
        await _deliver(message, say, respond, channel_id)
    except SlackApiError as e:
        logger.error(
            "Failed to deliver command response",
            channel_id=channel_id,
            outcome=outcome.kind.value,
            error=str(e),
        )
