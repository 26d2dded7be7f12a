"""CLI commands for event RSVP management."""

import asyncio
from datetime import datetime

import typer

from src.rsvps.dtos import SchemaCreationError
from src.rsvps.features.create_event.dtos import RawCustomFieldDTO
from src.rsvps.features.create_event.write_model import SqlEventCreateWriteModel
from src.rsvps.repository.read_models import SqlEventReadModel

app = typer.Typer(help="CLI commands for event RSVP management")


def parse_field(value: str, required_names: list[str]) -> RawCustomFieldDTO:
    """Parse ``NAME:TYPE`` or ``NAME:dropdown:OPTION|OPTION`` into a raw custom field."""
    parts = value.split(":", 2)
    if len(parts) < 2:
        raise typer.BadParameter(f"Expected NAME:TYPE, got {value!r}", param_hint="--field")

    field_name, field_type = parts[0], parts[1]
    options = "\n".join(parts[2].split("|")) if len(parts) == 3 else None
    return RawCustomFieldDTO(
        field_name=field_name,
        field_type=field_type,
        required=field_name in required_names,
        options=options,
    )


@app.command()
def create_event(
    title: str = typer.Argument(
        ...,
        help="Event title",
    ),
    body: str = typer.Option(
        None,
        "--body",
        "-b",
        help="Event description",
    ),
    date: datetime = typer.Option(
        None,
        "--date",
        "-d",
        help="When the event takes place",
    ),
    fields: list[str] = typer.Option(
        [],
        "--field",
        "-f",
        help="Custom question as NAME:text or NAME:dropdown:OPTION|OPTION, in display order",
    ),
    required: list[str] = typer.Option(
        [],
        "--required",
        "-r",
        help="Name of a custom question guests must answer",
    ),
):
    """Create an event with custom RSVP questions."""
    custom_fields = [parse_field(value, required) for value in fields]

    try:
        created = asyncio.run(
            SqlEventCreateWriteModel().create_event(
                title=title,
                body=body,
                date=date,
                custom_fields=custom_fields,
            )
        )
    except SchemaCreationError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Public ID: {created.public_id}", fg=typer.colors.CYAN)
    typer.secho(f"  Admin token: {created.admin_token}", fg=typer.colors.CYAN)
    typer.secho(f"  Custom questions: {created.custom_field_count}", fg=typer.colors.BLUE)


@app.command()
def show_event(
    public_id: str = typer.Argument(
        ...,
        help="Public id of the event",
    ),
    admin_token: str = typer.Option(
        None,
        "--admin-token",
        "-a",
        help="Admin token, to include every guest's answers",
    ),
):
    """Show an event, its questions and who has responded."""
    read_model = SqlEventReadModel()
    if admin_token:
        page = asyncio.run(read_model.get_admin_summary(public_id, admin_token))
    else:
        page = asyncio.run(read_model.get_event_page(public_id, []))

    if not page:
        typer.secho(f"Event not found: {public_id}", fg=typer.colors.RED)
        raise typer.Exit(1)

    event = page.event
    typer.secho(event.title, fg=typer.colors.GREEN)
    if event.date:
        typer.secho(f"  Date: {event.date:%Y-%m-%d %H:%M}", fg=typer.colors.BLUE)
    if not event.published:
        typer.secho("  (unpublished)", fg=typer.colors.YELLOW)

    typer.echo()
    typer.secho("Questions:", fg=typer.colors.GREEN)
    for custom_field in event.custom_fields:
        required_label = " *" if custom_field.required else ""
        options = f" [{', '.join(custom_field.options)}]" if custom_field.is_dropdown else ""
        typer.secho(
            f"  {custom_field.position}. {custom_field.field_name}{required_label}"
            f" ({custom_field.field_type.value}){options}",
            fg=typer.colors.BLUE,
        )

    typer.echo()
    typer.secho(f"RSVPs ({len(page.rsvps)}):", fg=typer.colors.GREEN)
    for rsvp in page.rsvps:
        typer.secho(f"  - {rsvp.name}: {rsvp.response.value}", fg=typer.colors.BLUE)
        for custom_field in event.custom_fields:
            if custom_field.id in rsvp.answers:
                typer.secho(
                    f"      {custom_field.field_name}: {rsvp.answers[custom_field.id]}",
                    fg=typer.colors.CYAN,
                )


@app.command()
def unpublish_event(
    public_id: str = typer.Argument(
        ...,
        help="Public id of the event",
    ),
):
    """Hide an event from guests. Its RSVPs are kept."""
    if not asyncio.run(SqlEventCreateWriteModel().unpublish_event(public_id)):
        typer.secho(f"Event not found: {public_id}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Event {public_id} is no longer viewable by guests.", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
