"""Main entry point for the ctrl Slack bot."""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from ctrl import __version__
from ctrl.bot.core import CtrlBot
from ctrl.bot.router import CommandRouter
from ctrl.bot.utils.formatting import ResponseFormatter
from ctrl.config import load_config
from ctrl.config.settings import Settings
from ctrl.exceptions import ConfigurationError
from ctrl.registry import ManifestStore, ProjectRegistry


def setup_logging(debug: bool = False) -> None:
    """Configure structured logging."""
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if not debug
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="ctrl Slack bot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version", action="version", version=f"ctrl Slack bot {__version__}"
    )

    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    parser.add_argument("--config-file", type=Path, help="Path to a .env style file")

    parser.add_argument(
        "--manifest", type=Path, help="Override the manifest file location"
    )

    return parser.parse_args(argv)


def create_application(config: Settings) -> Dict[str, Any]:
    """Create and wire the application components."""
    logger = structlog.get_logger()
    logger.info("Creating application components")

    store = ManifestStore.from_settings(config)
    registry = ProjectRegistry(store)
    router = CommandRouter(registry)
    formatter = ResponseFormatter(config)

    dependencies = {
        "store": store,
        "registry": registry,
        "router": router,
        "formatter": formatter,
    }

    bot = CtrlBot(config, dependencies)

    logger.info(
        "Application components created successfully",
        manifest=str(config.manifest_path),
    )

    return {"bot": bot, "config": config, **dependencies}


async def run_application(app: Dict[str, Any]) -> None:
    """Run the application with graceful shutdown handling."""
    logger = structlog.get_logger()
    bot: CtrlBot = app["bot"]
    store: ManifestStore = app["store"]

    shutdown_event = asyncio.Event()

    def signal_handler(signum: int, frame: Any) -> None:
        logger.info("Shutdown signal received", signal=signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        logger.info("Starting ctrl Slack bot")

        # Create the manifest up front so a bad path fails before connecting
        manifest = await store.snapshot()
        logger.info(
            "Manifest loaded",
            projects=len(manifest.projects),
            profiles=len(manifest.profiles),
        )

        await bot.initialize()

        bot_task = asyncio.create_task(bot.start(), name="bot")
        shutdown_task = asyncio.create_task(shutdown_event.wait(), name="shutdown")

        done, pending = await asyncio.wait(
            [bot_task, shutdown_task], return_when=asyncio.FIRST_COMPLETED
        )

        for task in done:
            if task.cancelled():
                continue
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "Task failed",
                    task=task.get_name(),
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

        for task in pending:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    except Exception as e:
        logger.error("Application error", error=str(e))
        raise
    finally:
        logger.info("Shutting down application")

        try:
            await bot.stop()
        except Exception as e:
            logger.error("Error during shutdown", error=str(e))

        logger.info("Application shutdown complete")


async def main() -> None:
    """Main application entry point."""
    args = parse_args()
    setup_logging(debug=args.debug)

    logger = structlog.get_logger()
    logger.info("Starting ctrl Slack bot", version=__version__)

    try:
        config = load_config(config_file=args.config_file)
        if args.manifest is not None:
            config = config.model_copy(update={"manifest_path": args.manifest})
        if not args.debug:
            logging.getLogger().setLevel(config.log_level)

        logger.info(
            "Configuration loaded",
            environment="production" if config.is_production else "development",
            manifest=str(config.manifest_path),
            debug=config.debug,
        )

        app = create_application(config)
        await run_application(app)

    except ConfigurationError as e:
        logger.error("Configuration error", error=str(e))
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error", error=str(e))
        sys.exit(1)


def run() -> None:
    """Synchronous entry point for the console script."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nShutdown requested by user")
    sys.exit(0)


if __name__ == "__main__":
    run()
