"""CLI entry point and argument parsing"""

import argparse
import asyncio
import logging
import sys
from typing import Any

from rich.console import Console
from rich.markup import escape

from cli.debug_setup import setup_logging
from cli.status_display import account_json, show_account
from jagex_oauth import (
    ACCOUNT_ADDED_EVENT,
    LOGIN_COMPLETE_EVENT,
    PROGRESS_EVENT,
    AuthError,
    LoginPipeline,
)
from jagex_oauth.browser import nodriver_surface_factory

logger = logging.getLogger(__name__)


class ConsoleEmitter:
    """Prints pipeline events as they arrive"""

    def __init__(self, console: Console, quiet: bool = False):
        self.console = console
        self.quiet = quiet

    def __call__(self, event: str, payload: Any) -> None:
        logger.debug(f"[CLI] Event {event}")
        if self.quiet:
            return
        if event == PROGRESS_EVENT:
            self.console.print(f"[cyan]{payload}[/cyan]")
        elif event == ACCOUNT_ADDED_EVENT:
            self.console.print(f"[green]✓ Account added: {payload.account_name}[/green]")
        elif event == LOGIN_COMPLETE_EVENT:
            self.console.print("[green]✓ Login complete[/green]")


def main():
    """Entry point for the CLI"""
    parser = argparse.ArgumentParser(description="Log in with a Jagex Account and list its characters")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--json", action="store_true", help="Print the account as JSON")
    parser.add_argument(
        "--discovery-url",
        default=None,
        help="Override the OpenID discovery URL (default: from config)"
    )

    args = parser.parse_args()
    console = setup_logging(args.debug)

    pipeline = LoginPipeline(
        nodriver_surface_factory,
        emit=ConsoleEmitter(console, quiet=args.json),
        discovery_url=args.discovery_url,
    )

    try:
        account = asyncio.run(pipeline.login())
    except AuthError as e:
        console.print(f"[red][ERROR][/red] {escape(str(e))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Login cancelled by user[/yellow]")
        sys.exit(130)

    if args.json:
        # Plain print keeps the output machine readable
        print(account_json(account))
    else:
        show_account(account, console)


if __name__ == "__main__":
    main()
