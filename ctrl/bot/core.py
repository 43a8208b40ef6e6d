"""Main Slack bot class.

Features:
- Slack Bolt App with Socket Mode
- Slash command registration
- Dependency injection middleware
- Graceful shutdown
"""

import re
from typing import Any, Dict, Optional

import structlog
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.app.async_app import AsyncApp

from ..config.settings import Settings
from ..exceptions import CtrlError
from .handlers import ctrl_command, handle_link_button

logger = structlog.get_logger()


class CtrlBot:
    """Slack front end for the project registry."""

    def __init__(self, settings: Settings, dependencies: Dict[str, Any]):
        """Initialize bot with settings and dependencies."""
        self.settings = settings
        self.deps = dependencies
        self.app: Optional[AsyncApp] = None
        self.socket_handler: Optional[AsyncSocketModeHandler] = None
        self.is_running = False

    async def initialize(self) -> None:
        """Initialize bot application. Idempotent."""
        if self.app is not None:
            return

        logger.info("Initializing Slack bot")

        self.app = AsyncApp(token=self.settings.slack_bot_token_str)
        self._add_middleware()
        self._register_handlers()

        logger.info("Bot initialization complete")

    def _register_handlers(self) -> None:
        self.app.command(self.settings.slash_command)(ctrl_command)
        self.app.action(re.compile(r"^github:"))(handle_link_button)
        logger.info("Handlers registered", command=self.settings.slash_command)

    def _add_middleware(self) -> None:
        """Expose dependencies and settings to every listener via the context."""
        deps = self.deps
        settings = self.settings

        @self.app.middleware
        async def inject_deps(context, next):
            context["deps"] = deps
            context["settings"] = settings
            await next()

    async def start(self) -> None:
        """Connect over Socket Mode and serve until the handler is closed."""
        if self.is_running:
            logger.warning("Bot is already running")
            return

        await self.initialize()
        self.socket_handler = AsyncSocketModeHandler(
            self.app, self.settings.slack_app_token_str
        )
        self.is_running = True
        logger.info(
            "Listening for slash command",
            command=self.settings.slash_command,
            manifest=str(self.settings.manifest_path),
        )

        try:
            await self.socket_handler.start_async()
        except Exception as e:
            logger.error("Socket Mode connection failed", error=str(e))
            raise CtrlError(f"Failed to start bot: {e}") from e
        finally:
            self.is_running = False

    async def stop(self) -> None:
        """Close the Socket Mode connection. No-op if it was never opened."""
        handler, self.socket_handler = self.socket_handler, None
        self.is_running = False
        if handler is None:
            return

        try:
            await handler.close_async()
        except Exception as e:
            logger.error("Error closing Socket Mode connection", error=str(e))
            raise CtrlError(f"Failed to stop bot: {e}") from e
        logger.info("Bot stopped")
