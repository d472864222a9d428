"""
MyContacts - Contacts framework sample application

Main entry point for the MyContacts application.
"""

import asyncio
import os
import sys
from pathlib import Path

from loguru import logger


def setup_logging(debug: bool = False):
    """Configure logging."""
    log_path = Path("logs")
    log_path.mkdir(exist_ok=True)

    # Remove default handler
    logger.remove()

    # Console handler
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level="DEBUG" if debug else "INFO",
        colorize=True,
    )

    # File handler
    logger.add(
        log_path / "mycontacts.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level="DEBUG",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )


async def main():
    """Main entry point."""
    setup_logging(debug=os.environ.get("MYCONTACTS_DEBUG", "").lower() == "true")

    logger.info("=" * 50)
    logger.info("MyContacts")
    logger.info("=" * 50)

    try:
        from mycontacts.core.app import MyContactsApp

        app = MyContactsApp(os.environ.get("MYCONTACTS_CONFIG"))
        await app.startup()

        await app.run()

    except KeyboardInterrupt:
        logger.info("Shutdown requested via keyboard")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


def run_with_qt():
    """Run with Qt event loop integration using qasync."""
    from PyQt6.QtWidgets import QApplication
    import qasync

    qt_app = QApplication(sys.argv)

    # The qasync loop is the UI context: Qt events and asyncio callbacks share one thread.
    loop = qasync.QEventLoop(qt_app)
    asyncio.set_event_loop(loop)

    with loop:
        loop.run_until_complete(main())


def cli():
    """CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="MyContacts - Contacts framework sample application"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--menu",
        type=str,
        help="Path to the menu configuration (plist, yaml or json)"
    )
    parser.add_argument(
        "--contacts",
        type=str,
        help="Path to the contacts file"
    )
    parser.add_argument(
        "--authorization",
        choices=["not_determined", "authorized", "denied", "restricted"],
        help="Override the starting contacts authorization state"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="MyContacts 0.1.0"
    )

    args = parser.parse_args()

    # Store args for app to use
    if args.debug:
        os.environ["MYCONTACTS_DEBUG"] = "true"
    if args.config:
        os.environ["MYCONTACTS_CONFIG"] = args.config
    if args.menu:
        os.environ["MYCONTACTS_MENU_PATH"] = args.menu
    if args.contacts:
        os.environ["MYCONTACTS_STORE_PATH"] = args.contacts
    if args.authorization:
        os.environ["MYCONTACTS_AUTHORIZATION"] = args.authorization

    run_with_qt()


if __name__ == "__main__":
    cli()
