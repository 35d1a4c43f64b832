"""Rich console output for fee quotes and built messages."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .domain import BridgeFee


def format_fee_table(fees: list[BridgeFee], currency: str = "USD") -> None:
    """Print the fee tiers as a table."""
    console = Console()

    table = Table(title="Bridge Fee", expand=False)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Tier", style="cyan")
    table.add_column("Amount", justify="right", style="yellow")
    table.add_column(f"Cost ({currency})", justify="right", style="green")

    for fee in fees:
        table.add_row(
            str(fee.id),
            fee.label,
            f"{fee.amount} {fee.denom.upper()}",
            f"${fee.amount_in_currency}",
        )

    console.print(table)


def format_message_dump(amino_message: dict[str, Any], type_url: str, value: bytes) -> None:
    """Print both encodings of a message side by side."""
    console = Console()
    console.print(
        Panel(
            json.dumps(amino_message, indent=2),
            title="[bold]Amino JSON[/]",
            border_style="blue",
        )
    )
    console.print(
        Panel(
            f"type_url: {type_url}\nvalue: {value.hex()}",
            title="[bold]Protobuf Any[/]",
            border_style="green",
        )
    )
