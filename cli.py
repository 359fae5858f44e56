"""CLI commands for wedding guest-list management."""

import asyncio
from uuid import UUID

import typer

from src.config.database import init_db
from src.config.logging import setup_logging
from src.guests.dtos import (
    GuestAlreadyExistsError,
    GuestDTO,
    GuestNotFoundError,
    GuestUpdateDTO,
    InvalidPartnerError,
)
from src.guests.features.manage_guests.write_model import SqlGuestAdminWriteModel
from src.guests.repository.read_models import SqlGuestReadModel, SqlRSVPReadModel

app = typer.Typer(help="CLI commands for wedding guest-list management")


@app.callback()
def main():
    setup_logging()


def _print_guest(guest: GuestDTO) -> None:
    typer.secho(f"  Name: {guest.full_name}", fg=typer.colors.BLUE)
    typer.secho(f"  ID: {guest.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Account: {guest.account_status.value}", fg=typer.colors.MAGENTA)
    typer.secho(f"  Email: {guest.email or 'N/A'}", fg=typer.colors.BLUE)
    if guest.plus_one_allowed:
        typer.secho("  Plus-one allowed", fg=typer.colors.BLUE)
    if guest.is_admin:
        typer.secho("  Admin", fg=typer.colors.YELLOW)
    if guest.partner:
        typer.secho(
            f"  Partner: {guest.partner.first_name} {guest.partner.last_name} ({guest.partner.id})",
            fg=typer.colors.CYAN,
        )


@app.command()
def migrate():
    """Upgrade the database to the latest migration."""
    asyncio.run(init_db())
    typer.secho("Database is up to date", fg=typer.colors.GREEN)


@app.command()
def add_guest(
    first_name: str = typer.Argument(..., help="First name of the guest"),
    last_name: str = typer.Argument(..., help="Last name of the guest"),
    plus_one: bool = typer.Option(
        False,
        "--plus-one",
        help="Allow the guest to bring a plus-one",
    ),
    partner_id: str = typer.Option(
        None,
        "--partner",
        "-p",
        help="UUID of an existing guest to link as partner",
    ),
    notes: str = typer.Option(
        None,
        "--notes",
        "-n",
        help="Admin notes",
    ),
):
    """Add a person to the guest list."""
    try:
        guest = asyncio.run(
            SqlGuestAdminWriteModel().create_guest(
                first_name=first_name,
                last_name=last_name,
                plus_one_allowed=plus_one,
                admin_notes=notes,
                partner_id=UUID(partner_id) if partner_id else None,
            )
        )
    except (GuestAlreadyExistsError, GuestNotFoundError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Guest created!", fg=typer.colors.GREEN)
    _print_guest(guest)


@app.command()
def link_partners(
    guest_id: str = typer.Argument(..., help="Guest UUID"),
    partner_id: str = typer.Argument(..., help="Partner UUID"),
):
    """Link two guests as partners. Previous partners of either are unlinked."""
    try:
        guest = asyncio.run(SqlGuestAdminWriteModel().link_partners(UUID(guest_id), UUID(partner_id)))
    except (GuestNotFoundError, InvalidPartnerError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Partners linked!", fg=typer.colors.GREEN)
    _print_guest(guest)


@app.command()
def show_guest(
    first_name: str = typer.Argument(..., help="First name of the guest"),
    last_name: str = typer.Argument(..., help="Last name of the guest"),
):
    """Look a guest up by name."""
    lookup = asyncio.run(SqlGuestReadModel().lookup_guest(first_name, last_name))
    if lookup is None:
        typer.secho(f"Guest not found: {first_name} {last_name}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Guest Info", fg=typer.colors.GREEN)
    _print_guest(lookup.guest)


@app.command()
def make_admin(
    guest_id: str = typer.Argument(..., help="Guest UUID"),
    revoke: bool = typer.Option(False, "--revoke", help="Remove admin rights instead"),
):
    """Grant or revoke admin rights."""
    try:
        guest = asyncio.run(
            SqlGuestAdminWriteModel().update_guest(UUID(guest_id), GuestUpdateDTO(is_admin=not revoke))
        )
    except GuestNotFoundError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    action = "revoked from" if revoke else "granted to"
    typer.secho(f"Admin rights {action} {guest.full_name}", fg=typer.colors.GREEN)


@app.command()
def rsvp_summary():
    """Print response counts and the household list."""
    summary = asyncio.run(SqlRSVPReadModel().get_rsvp_summary())

    typer.secho("RSVP Summary", fg=typer.colors.GREEN)
    typer.secho(f"  Households: {summary.total_households}", fg=typer.colors.BLUE)
    typer.secho(f"  Guests: {summary.total_guests}", fg=typer.colors.BLUE)
    typer.secho(f"  Responded: {summary.responded}", fg=typer.colors.BLUE)
    typer.secho(f"  Attending: {summary.attending}", fg=typer.colors.GREEN)
    typer.secho(f"  Not attending: {summary.not_attending}", fg=typer.colors.RED)
    typer.secho(f"  Pending: {summary.pending}", fg=typer.colors.YELLOW)

    if summary.households:
        typer.echo()
        for household in summary.households:
            line = f"  - {household.guest.full_name}: {_status(household.rsvp)}"
            if household.partner:
                line += f" / {household.partner.full_name}: {_status(household.partner_rsvp)}"
            typer.echo(line)


def _status(rsvp) -> str:
    return rsvp.response_status.value if rsvp else "pending"


if __name__ == "__main__":
    app()
