"""CLI: hall send, hall listen"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from hall_client.formatting import format_grouped_number
from hall_client.models.message import Message, MessageStyle

console = Console()


def _get_client():
    from hall_client.cli.main import _get_client
    return _get_client()


def _run(coro):
    from hall_client.cli.main import _run
    return _run(coro)


def render(message: Message) -> str:
    """Rich markup for one message, by presentation style."""
    num = format_grouped_number(message.num) if message.num is not None else "?"
    head = f"[dim]{num}[/dim] [cyan]~{escape(message.sender or '?')}[/cyan]"
    text = escape(message.text or " ")
    if message.style == MessageStyle.ACT:
        line = f"{head} [italic]{text}[/italic]"
    elif message.style == MessageStyle.URL:
        line = f"{head} [blue underline]{text}[/blue underline]"
    elif message.style == MessageStyle.CODE:
        line = f"{head} [magenta]#{text}[/magenta]"
    else:
        line = f"{head}: {text}"
    if message.attachment:
        label = f"{escape(message.attachment_label)}: " if message.attachment_label else ""
        line += f"\n[dim]{label}{escape(message.attachment)}[/dim]"
    return line


@click.command("send")
@click.argument("message")
@click.option("-a", "--audience", "audience", multiple=True, help="Target station, e.g. ~zod/inbox")
def send_cmd(message: str, audience: tuple[str, ...]):
    """Send a message. `@text` sends an action, `#expr` an expression."""

    async def _send():
        client = _get_client()
        await client.connect()
        try:
            ok = await client.send_message(message, list(audience) or None)
        finally:
            await client.close()
        if ok:
            console.print("[green]Sent.[/green]")
        else:
            console.print("[red]Send failed.[/red]")
            raise SystemExit(1)

    _run(_send())


@click.command("listen")
@click.option("--from", "start", default=None, help="Start of range (urbit date); default 6 hours ago")
@click.option("--to", "end", default=None, help="End of range (urbit date)")
@click.option("--json-output", "--json", is_flag=True)
def listen_cmd(start: Optional[str], end: Optional[str], json_output: bool):
    """Print inbox messages until the feed ends (Ctrl+C to exit)."""

    def on_messages(wire: str, messages: Optional[list[Message]]) -> None:
        if messages is None:
            if not json_output:
                console.print(f"[yellow]Feed {wire} ended.[/yellow]")
            return
        for m in messages:
            if json_output:
                click.echo(json.dumps(m.to_dict()))
            else:
                console.print(render(m))

    async def _listen():
        client = _get_client()
        await client.connect()
        try:
            await client.subscribe(on_messages, start=start, end=end if start else None)
            await client.wait_closed()
        finally:
            await client.close()

    try:
        _run(_listen())
    except KeyboardInterrupt:
        pass
