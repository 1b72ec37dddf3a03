"""Lockstep CLI - D-Bus signature verification tool.

This module provides the command-line interface for Lockstep, enabling
listing declarations, extracting and comparing signatures, and resolving
record type names against introspection XML.
"""

from __future__ import annotations

import json
import logging
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from lockstep.core.models import DeclarationKind, SignatureKind

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="lockstep",
    help="Check D-Bus type signatures against introspection XML",
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()
err_console = Console(stderr=True)

# Global verbose flag
_verbose: bool = False

XmlOption = Annotated[
    Optional[Path],
    typer.Option(
        "--xml",
        "-x",
        help="XML directory (LOCKSTEP_XML_PATH overrides; defaults to ./xml or ./XML)",
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output machine-readable JSON"),
]


def set_verbose(verbose: bool) -> None:
    """Set global verbose mode."""
    global _verbose
    _verbose = verbose


def print_exception(e: Exception) -> None:
    """Print exception details in verbose mode."""
    if _verbose:
        err_console.print("\n[dim]--- Traceback (verbose mode) ---[/dim]")
        err_console.print(f"[dim]{traceback.format_exc()}[/dim]")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging and full tracebacks"),
    ] = False,
) -> None:
    """Lockstep CLI - D-Bus signature verification."""
    set_verbose(verbose)
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report Lockstep errors on stderr and exit with status 1."""
    from lockstep.core.errors import LockstepError

    try:
        yield
    except LockstepError as e:
        err_console.print(f"[red]Error:[/red] {e.message}")
        if e.details:
            err_console.print(f"  {e.details}")
        print_exception(e)
        raise typer.Exit(1)


def get_client(xml: Path | None):
    """Load the document set into a client."""
    from lockstep.client import LockstepClient

    return LockstepClient(xml_path=xml)


@app.command("list")
def list_declarations(
    xml: XmlOption = None,
    json_output: JsonOption = False,
) -> None:
    """List every declared signal, method and property.

    Example:
        lockstep list --xml ./xml
    """
    from lockstep.cli._tables import build_declarations_table, declaration_rows

    with handle_errors():
        client = get_client(xml)

    rows = declaration_rows(client.documents)
    if json_output:
        typer.echo(json.dumps(rows, ensure_ascii=False, indent=2))
        return

    if not rows:
        console.print("[yellow]No declarations found[/yellow]")
        return
    console.print(build_declarations_table(rows))


@app.command()
def extract(
    interface: Annotated[str, typer.Argument(help="Interface name")],
    member: Annotated[str, typer.Argument(help="Signal, method or property name")],
    kind: Annotated[
        SignatureKind,
        typer.Option("--kind", "-k", help="Which signature to extract"),
    ] = SignatureKind.SIGNAL,
    arg: Annotated[
        Optional[str],
        typer.Option("--arg", "-a", help="Extract a single named argument"),
    ] = None,
    source: Annotated[
        Optional[str],
        typer.Option("--source", "-s", help="Only search the document at this path"),
    ] = None,
    xml: XmlOption = None,
    json_output: JsonOption = False,
) -> None:
    """Print the declared signature of a member.

    Example:
        lockstep extract org.freedesktop.Notifications Notify --kind method-in
    """
    with handle_errors():
        client = get_client(xml)
        signature = client.extract(interface, member, kind, arg, source)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "interface": interface,
                    "member": member,
                    "kind": kind.value,
                    "arg": arg,
                    "signature": signature,
                },
                indent=2,
            )
        )
        return
    typer.echo(signature)


@app.command()
def resolve(
    type_name: Annotated[str, typer.Argument(help="Record type name, e.g. RemoveNodeSignal")],
    interface: Annotated[
        Optional[str],
        typer.Option("--interface", "-i", help="Interface name hint"),
    ] = None,
    member: Annotated[
        Optional[str],
        typer.Option("--member", "-m", help="Member name hint"),
    ] = None,
    kind: Annotated[
        DeclarationKind,
        typer.Option("--kind", "-k", help="Declaration kind to search"),
    ] = DeclarationKind.SIGNAL,
    xml: XmlOption = None,
    json_output: JsonOption = False,
) -> None:
    """Find the declaration a record type corresponds to.

    Example:
        lockstep resolve RemoveNodeSignal --interface org.example.Node
    """
    with handle_errors():
        client = get_client(xml)
        candidate = client.resolve(type_name, interface=interface, member=member, kind=kind)

    if json_output:
        typer.echo(json.dumps(candidate.model_dump(mode="json"), indent=2))
        return
    console.print(f"[green]✓[/green] {type_name} resolves to")
    console.print(f"  Interface: [cyan]{candidate.interface_name}[/cyan]")
    console.print(f"  {kind.value.capitalize()}: {candidate.member_name}")
    console.print(f"  Source: {candidate.source}")


@app.command()
def compare(
    left: Annotated[str, typer.Argument(help="First signature")],
    right: Annotated[str, typer.Argument(help="Second signature")],
    json_output: JsonOption = False,
) -> None:
    """Check whether two signatures denote the same type shape.

    Exits with status 1 when they do not.

    Example:
        lockstep compare "so" "(so)"
    """
    from lockstep.core.equivalence import explain_mismatch, signatures_are_eq

    with handle_errors():
        equivalent = signatures_are_eq(left, right)
        explanation = "" if equivalent else explain_mismatch(left, right)

    if json_output:
        typer.echo(json.dumps({"left": left, "right": right, "equivalent": equivalent}))
    elif equivalent:
        console.print(f"[green]✓[/green] '{left}' and '{right}' are equivalent")
    else:
        console.print(f"[red]✗[/red] '{left}' and '{right}' are not equivalent")
        console.print(explanation, markup=False)

    if not equivalent:
        raise typer.Exit(1)


@app.command()
def check(
    type_name: Annotated[str, typer.Argument(help="Record type name")],
    signature: Annotated[str, typer.Argument(help="Signature the record type reports")],
    kind: Annotated[
        SignatureKind,
        typer.Option("--kind", "-k", help="Which declared signature to compare against"),
    ] = SignatureKind.SIGNAL,
    interface: Annotated[
        Optional[str],
        typer.Option("--interface", "-i", help="Interface name hint"),
    ] = None,
    member: Annotated[
        Optional[str],
        typer.Option("--member", "-m", help="Member name hint"),
    ] = None,
    arg: Annotated[
        Optional[str],
        typer.Option("--arg", "-a", help="Compare against a single named argument"),
    ] = None,
    xml: XmlOption = None,
    json_output: JsonOption = False,
) -> None:
    """Resolve a record type, extract its declared signature and compare.

    Example:
        lockstep check RemoveNodeSignal "(so)"
    """
    with handle_errors():
        client = get_client(xml)
        result = client.verifier.verify(
            type_name,
            signature,
            kind=kind,
            interface=interface,
            member=member,
            arg_name=arg,
        )

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "type_name": result.type_name,
                    "interface": result.candidate.interface_name,
                    "member": result.candidate.member_name,
                    "source": result.candidate.source,
                    "declared": result.declared,
                    "reported": result.reported,
                    "equivalent": result.equivalent,
                },
                indent=2,
            )
        )
    elif result.equivalent:
        console.print(
            f"[green]✓[/green] {type_name} matches {result.candidate.interface_name}."
            f"{result.candidate.member_name}"
        )
        console.print(f"  Declared: {result.declared}")
        console.print(f"  Reported: {result.reported}")
    else:
        err_console.print(
            f"[red]✗[/red] {type_name} does not match {result.candidate.interface_name}."
            f"{result.candidate.member_name}"
        )
        err_console.print(f"  Declared: {result.declared}")
        err_console.print(f"  Reported: {result.reported}")

    if not result.equivalent:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
