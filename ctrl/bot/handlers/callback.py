"""Block Kit action handlers."""

from typing import Any, Callable, Dict

import structlog

logger = structlog.get_logger()


async def handle_link_button(
    ack: Callable, body: Dict[str, Any], **kwargs: Any
) -> None:
    """Acknowledge clicks on repository link buttons.

    Slack opens the URL itself but still delivers the action and shows an
    error to the user unless it is acknowledged.
    """
    await ack()
    user_id = (body.get("user") or {}).get("id")
    logger.debug("Link button clicked", user_id=user_id)
