"""CLI: hall login|status|logout"""

from typing import Optional

import click
from rich.console import Console

from hall_client.client import AsyncHallClient
from hall_client.transport.http import DEFAULT_BASE_URL

console = Console()


def _load_config() -> dict:
    from hall_client.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from hall_client.cli.main import _save_config
    _save_config(cfg)


def _run(coro):
    from hall_client.cli.main import _run
    return _run(coro)


@click.command("login")
@click.option("--url", default=None, help="Ship base URL")
@click.option("--ship", default=None, help="Ship name, e.g. zod")
def login(url: Optional[str], ship: Optional[str]):
    """Log in with the ship's +code."""

    async def _login():
        cfg = _load_config()
        base_url = url or cfg.get("url", DEFAULT_BASE_URL)
        name = (ship or click.prompt("Ship", default=cfg.get("ship"))).lstrip("~")
        code = click.prompt("Code (+code in dojo)", hide_input=True)

        client = AsyncHallClient(ship=name, code=code, url=base_url)
        try:
            with console.status("Logging in..."):
                await client.connect()
        finally:
            await client.close()
        console.print(f"[green]Logged in to ~{name}[/green]")

        _save_config({**cfg, "url": base_url, "ship": name, "code": code})
        console.print("[dim]Credentials saved to ~/.hall/config.json[/dim]")

    _run(_login())


@click.command("status")
def status():
    """Show current login status."""
    cfg = _load_config()
    if cfg.get("code"):
        console.print(f"[green]Logged in[/green] to ~{cfg.get('ship')} at {cfg.get('url', DEFAULT_BASE_URL)}")
    else:
        console.print("[yellow]Not logged in. Run `hall login`.[/yellow]")


@click.command("logout")
def logout():
    """Clear saved credentials."""
    _save_config({})
    console.print("[green]Logged out.[/green]")
