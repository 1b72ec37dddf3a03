"""Rich table builders used by the CLI.

Kept separate to keep the command module smaller.
"""

from __future__ import annotations

from rich.table import Table

from lockstep.core.models import InterfaceDocument

# Shown for an empty side of a method signature.
EMPTY = "-"


def declaration_rows(documents: list[InterfaceDocument]) -> list[dict[str, str]]:
    """Flatten documents into one row per declared signature."""
    rows = []
    for document in documents:
        for interface in document.interfaces:
            for signal in interface.signals:
                rows.append(
                    {
                        "interface": interface.name,
                        "kind": "signal",
                        "member": signal.name,
                        "signature": signal.body_signature,
                        "source": document.source,
                    }
                )
            for method in interface.methods:
                in_signature = method.in_signature or EMPTY
                out_signature = method.out_signature or EMPTY
                rows.append(
                    {
                        "interface": interface.name,
                        "kind": "method",
                        "member": method.name,
                        "signature": f"{in_signature} -> {out_signature}",
                        "source": document.source,
                    }
                )
            for prop in interface.properties:
                rows.append(
                    {
                        "interface": interface.name,
                        "kind": "property",
                        "member": prop.name,
                        "signature": prop.type,
                        "source": document.source,
                    }
                )
    return rows


def build_declarations_table(rows: list[dict[str, str]]) -> Table:
    """Build the (Interface, Kind, Member, Signature) table for `list`."""
    table = Table(show_header=True, title="Declarations")
    table.add_column("Interface", style="cyan")
    table.add_column("Kind")
    table.add_column("Member")
    table.add_column("Signature", style="green")
    for row in rows:
        table.add_row(row["interface"], row["kind"], row["member"], row["signature"])
    return table
