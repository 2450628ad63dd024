"""CLI: hall date, hall number"""

from datetime import datetime, timezone
from typing import Optional

import click

from hall_client.formatting import format_grouped_number, format_path_date


@click.command("date")
@click.option("--ms", type=int, default=None, help="Milliseconds since the epoch (default: now)")
def date_cmd(ms: Optional[int]):
    """Print an urbit date, e.g. ~2017.12.27..18.48.00..0000"""
    when = ms if ms is not None else datetime.now(timezone.utc)
    click.echo(format_path_date(when))


@click.command("number")
@click.argument("num", type=int)
def number_cmd(num: int):
    """Print a number with urbit grouping, e.g. 1.024"""
    click.echo(format_grouped_number(num))
