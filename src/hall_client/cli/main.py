"""
Hall CLI — `hall` command.

Commands:
  hall login               Save ship URL, name and +code
  hall send <message>      Send a message (default: own inbox)
  hall listen              Print inbox messages as they arrive
  hall date / number       Urbit-style date and number formatting
"""

import asyncio
import json
import logging
from pathlib import Path

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install urbit-hall-client[cli]")

from hall_client.client import AsyncHallClient
from hall_client.transport.http import DEFAULT_BASE_URL

console = Console()
CONFIG_FILE = Path.home() / ".hall" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_client() -> AsyncHallClient:
    cfg = _load_config()
    if not cfg.get("ship") or not cfg.get("code"):
        console.print("[red]Not logged in. Run `hall login` first.[/red]")
        raise SystemExit(1)
    return AsyncHallClient(
        ship=cfg["ship"],
        code=cfg["code"],
        url=cfg.get("url", DEFAULT_BASE_URL),
        verbose=click.get_current_context().find_root().params.get("verbose", False),
    )


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log channel traffic and decode traces")
def main(verbose: bool):
    """Hall CLI — chat on your ship's hall from the terminal."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")


# Register subcommands from separate modules
from hall_client.cli.auth import login, status, logout
from hall_client.cli.chat import send_cmd, listen_cmd
from hall_client.cli.tools import date_cmd, number_cmd

main.add_command(login)
main.add_command(status)
main.add_command(logout)
main.add_command(send_cmd)
main.add_command(listen_cmd)
main.add_command(date_cmd)
main.add_command(number_cmd)


if __name__ == "__main__":
    main()
