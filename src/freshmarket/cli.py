"""Command-line interface for Freshmarket."""

from __future__ import annotations

import json
from typing import Optional

import typer

from freshmarket.db.catalog import seed_catalog as seed_default_catalog
from freshmarket.db.shopping_lists import find_matches
from freshmarket.db.users import approve_vendor as approve_vendor_account
from freshmarket.db.users import create_user as create_user_account
from freshmarket.errors import NotFoundError, ValidationFailure

app = typer.Typer(help="Freshmarket marketplace administration commands.")


@app.command("seed-catalog")
def seed_catalog() -> None:
    """Insert the default fruit and vegetable catalog (idempotent)."""

    added = seed_default_catalog()
    typer.echo(f"Added {added} catalog item(s).")


@app.command("create-user")
def create_user(
    email: str = typer.Argument(..., help="Account email address."),
    role: str = typer.Option("buyer", "--role", help="buyer, vendor or admin."),
    phone: Optional[str] = typer.Option(None, "--phone", help="Phone number for vendor notifications."),
    notify: str = typer.Option("sms", "--notify", help="Notification channel: sms, whatsapp or both."),
) -> None:
    """Create an account and print its id."""

    try:
        user = create_user_account(
            email=email,
            role=role,
            phone_number=phone,
            notification_preference=notify,
        )
    except ValidationFailure as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(user.id)


@app.command("approve-vendor")
def approve_vendor(vendor_id: str = typer.Argument(..., help="Vendor user id.")) -> None:
    """Mark a pending vendor as approved."""

    try:
        vendor = approve_vendor_account(vendor_id)
    except NotFoundError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Vendor {vendor.email} is now {vendor.vendor_status}.")


@app.command()
def matching(
    item_id: str = typer.Argument(..., help="Shopping list item id."),
    buyer_id: Optional[str] = typer.Option(None, "--buyer", help="Restrict to this buyer's items."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Print the ranked vendor offers for a shopping list item."""

    try:
        result = find_matches(item_id, buyer_id)
    except NotFoundError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    payload = result.model_dump(mode="json")
    typer.echo(json.dumps(payload, indent=2 if pretty else None, sort_keys=pretty))


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes."),
) -> None:
    """Run the HTTP API under uvicorn."""

    from freshmarket.server.run import serve as run_server

    run_server(host, port, reload=reload)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the ``freshmarket`` console script."""
    app(prog_name="freshmarket", args=argv)


if __name__ == "__main__":
    main()
