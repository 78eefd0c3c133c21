"""Output formatters for handler results."""

import io
import json

from rich.console import Console
from rich.table import Table

from clusterprovider.models import IsCompleteResult, OnEventResult

Result = OnEventResult | IsCompleteResult | None


def _as_dict(result: Result) -> dict | None:
    return result.to_dict() if result is not None else None


def format_json(result: Result) -> str:
    """Format a result in the provider framework's response shape."""
    return json.dumps(_as_dict(result), indent=2)


def format_table(result: Result) -> str:
    """Format a result as a two-column table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Field")
    table.add_column("Value")

    if result is None:
        table.add_row("Result", "no changes to physical resource")
    elif isinstance(result, OnEventResult):
        table.add_row("PhysicalResourceId", result.physical_resource_id)
    else:
        style = "green" if result.is_complete else "yellow"
        table.add_row("IsComplete", f"[{style}]{result.is_complete}[/{style}]")
        for key, value in (result.data or {}).items():
            table.add_row(key, "" if value is None else str(value))

    console = Console(record=True, width=120, file=io.StringIO())
    console.print(table)
    return console.export_text()
