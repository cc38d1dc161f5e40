"""Rich table builders used by the CLI."""

from __future__ import annotations

from rich.table import Table


def build_groups_table(groups, limit: int | None = None) -> Table:
    """Build the (Operation, Type, Overloads, Status) table for `list`."""
    table = Table(show_header=True, title="Modifier Groups")
    table.add_column("Operation", style="cyan")
    table.add_column("Type")
    table.add_column("Overloads", justify="right")
    table.add_column("Status")
    shown = groups if limit is None else groups[:limit]
    for group in shown:
        status = "[green]ok[/green]" if group.success else f"[red]{group.error}[/red]"
        table.add_row(
            group.operation_name,
            group.type_name,
            str(group.signature_count),
            status,
        )
    return table


def build_arguments_table(resolution) -> Table:
    """Build the payload table for `resolve`."""
    table = Table(show_header=True)
    table.add_column("Label")
    table.add_column("Parameter")
    table.add_column("Value")
    for parameter, value in resolution.arguments:
        table.add_row(parameter.label or "_", parameter.name, value)
    return table
