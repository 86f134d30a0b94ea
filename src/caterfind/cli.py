"""CaterFind CLI - availability calendar for caterers and clients."""

import asyncio
import json
import logging
import sys
from datetime import date

import click
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .adapters.caterfind_api import CaterfindAPIAdapter
from .availability_store import AvailabilityStore
from .calendar_format import format_month
from .config import CONFIG_FILE, Config, load_config
from .core.calendar_grid import date_key, parse_date_key
from .errors import NetworkError
from .event_store import EventStore
from .views import AvailabilityView, ReadOnlyAvailabilityView


@click.group()
@click.version_option()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """CaterFind - availability calendar."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


def _resolve_owner(owner: int | None, config: Config) -> int:
    """Owner from --owner, falling back to OWNER_ID in the config file."""
    if owner is not None:
        return owner
    if config.owner_id is None:
        click.echo(f"Error: No caterer id. Pass --owner or set OWNER_ID in {CONFIG_FILE}", err=True)
        sys.exit(1)
    return config.owner_id


def _parse_date(value: str) -> date:
    try:
        year, month, day = parse_date_key(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a date (YYYY-MM-DD)")
    return date(year, month + 1, day)


def _parse_month(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        year, month = (int(part) for part in value.split("-"))
        return date(year, month, 1)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a month (YYYY-MM)")


def _build_stores(config: Config) -> tuple[AvailabilityStore, EventStore]:
    adapter = CaterfindAPIAdapter(config)
    return AvailabilityStore(adapter), EventStore(adapter)


def _fail_on_load_error(*stores: AvailabilityStore | EventStore) -> None:
    """Exit when a store could not reach the backend."""
    errors: list[NetworkError] = [s.last_error for s in stores if s.last_error is not None]
    if errors:
        click.echo(f"Error: {errors[0]}", err=True)
        sys.exit(1)


def _fail_on_error(view: AvailabilityView) -> None:
    if view.error:
        click.echo(f"Error: {view.error.text}", err=True)
        sys.exit(1)


def _confirm_delete(view: AvailabilityView, event_id: int) -> bool:
    event = view.events.find(event_id)
    label = event.format_line() if event else f"event #{event_id}"
    return click.confirm(f"Delete {label}?")


owner_option = click.option("--owner", "-o", type=int, default=None, help="Caterer id")


@main.command()
@owner_option
@click.option("--month", "-m", default=None, help="Month to show (YYYY-MM), defaults to this month")
@click.option("--client", is_flag=True, help="Show the read-only client view")
@click.option("--embedded", is_flag=True, help="Client view without the back link")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def calendar(owner: int | None, month: str | None, client: bool, embedded: bool, as_json: bool):
    """Show a month of availability."""
    config = load_config()
    owner_id = _resolve_owner(owner, config)
    initial_month = _parse_month(month)
    availability, events = _build_stores(config)

    if client:
        view = ReadOnlyAvailabilityView(
            owner_id,
            availability,
            embedded=embedded,
            show_back=not embedded,
            initial_month=initial_month,
        )
        asyncio.run(view.load_month())
    else:
        view = AvailabilityView(owner_id, availability, events, initial_month=initial_month)
        asyncio.run(view.open())

    _fail_on_load_error(availability, events)

    cells = view.day_cells()
    if as_json:
        click.echo(
            json.dumps(
                [
                    {"date": c.key, "status": c.kind.value, "events": c.event_count}
                    for c in cells
                    if c is not None
                ],
                indent=2,
            )
        )
        return

    heading = "Availability Calendar (read-only)" if client else "Availability Calendar"
    show_back = client and view.show_back
    click.echo(format_month(view.title, cells, heading=heading, show_back=show_back))


@main.command()
@owner_option
@click.argument("day")
def toggle(owner: int | None, day: str):
    """Cycle a date: open -> available -> busy -> open."""
    config = load_config()
    owner_id = _resolve_owner(owner, config)
    target = _parse_date(day)
    availability, events = _build_stores(config)
    view = AvailabilityView(owner_id, availability, events, initial_month=target)

    async def run():
        await view.load_month()
        if availability.last_error is None:
            await view.click_day(target.day)

    asyncio.run(run())
    _fail_on_load_error(availability)
    _fail_on_error(view)
    click.echo(f"{date_key(target)}: {view.status_for(target.day).value}")


@main.command()
@owner_option
@click.option("--date", "-d", "target_date", default=None, help="Only events on this date (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def events(owner: int | None, target_date: str | None, as_json: bool):
    """List catering events."""
    config = load_config()
    owner_id = _resolve_owner(owner, config)
    _, event_store = _build_stores(config)

    asyncio.run(event_store.load_all(owner_id))
    _fail_on_load_error(event_store)
    listed = event_store.events
    if target_date:
        listed = event_store.for_date(date_key(_parse_date(target_date)))

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": e.id,
                        "eventDate": e.event_date,
                        "eventHostName": e.event_host_name,
                        "managedBy": e.managed_by,
                        "location": e.location,
                    }
                    for e in listed
                ],
                indent=2,
            )
        )
        return

    if not listed:
        click.echo("No events.")
        return

    for event in sorted(listed, key=lambda e: e.event_date):
        click.echo(f"{event.event_date}  #{event.id:<5} {event.format_line()}")


@main.command("add-event")
@owner_option
@click.argument("day")
@click.option("--host", "host_name", default="", help="Event host name (required)")
@click.option("--managed-by", default="", help="Who manages the event")
@click.option("--location", default="", help="Where the event takes place")
def add_event(owner: int | None, day: str, host_name: str, managed_by: str, location: str):
    """Add a catering event to a date."""
    config = load_config()
    owner_id = _resolve_owner(owner, config)
    target = _parse_date(day)
    availability, events = _build_stores(config)
    view = AvailabilityView(owner_id, availability, events, initial_month=target, selected_date=target)
    view.host_name = host_name
    view.managed_by = managed_by
    view.location = location

    created = asyncio.run(view.save_event())
    _fail_on_error(view)
    click.echo(f"{view.success.text}: #{created.id} {created.format_line()}")


@main.command("delete-event")
@owner_option
@click.argument("event_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
def delete_event(owner: int | None, event_id: int, yes: bool):
    """Delete a catering event."""
    config = load_config()
    owner_id = _resolve_owner(owner, config)
    availability, events = _build_stores(config)
    view = AvailabilityView(owner_id, availability, events)

    asyncio.run(view.load_events())
    _fail_on_load_error(events)

    if not yes and not _confirm_delete(view, event_id):
        click.echo("Cancelled.")
        return

    deleted = asyncio.run(view.delete_event(event_id, lambda event: True))
    _fail_on_error(view)
    click.echo(f"Deleted event #{event_id}." if deleted else "Cancelled.")


@main.command()
@owner_option
def edit(owner: int | None):
    """Edit availability and events interactively."""
    config = load_config()
    owner_id = _resolve_owner(owner, config)
    try:
        asyncio.run(_edit_session(owner_id, config))
    except (KeyboardInterrupt, EOFError, click.Abort):
        click.echo("\nBye.")


EDIT_HELP = (
    "Commands: <day> select/toggle, n/p next/prev month, host|by|at <text> fill form,\n"
    "          save, del <id>, x close panel, r refresh, q quit"
)


def _render_edit(view: AvailabilityView) -> None:
    click.clear()
    click.echo(format_month(view.title, view.day_cells(), heading="Availability Calendar"))
    if view.is_panel_open:
        click.echo(f"\n{view.selected_date.strftime('%A, %B %d %Y')}")
        for event in view.events_for_selected_date:
            click.echo(f"  #{event.id:<5} {event.format_line()}")
        click.echo(f"  host: {view.host_name}  by: {view.managed_by}  at: {view.location}")
    if view.error:
        click.secho(view.error.text, fg="red")
    if view.success:
        click.secho(view.success.text, fg="green")
    click.echo(f"\n{EDIT_HELP}")


async def _edit_session(owner_id: int, config: Config) -> None:
    scheduler = AsyncIOScheduler()
    scheduler.start()
    availability, events = _build_stores(config)
    view = AvailabilityView(
        owner_id,
        availability,
        events,
        scheduler=scheduler,
        message_timeout=config.message_timeout,
    )

    try:
        await view.open()
        while True:
            _render_edit(view)
            line = (await asyncio.to_thread(click.prompt, ">", default="", show_default=False)).strip()
            command, _, arg = line.partition(" ")
            match command:
                case "q":
                    return
                case "n":
                    await view.next_month()
                case "p":
                    await view.prev_month()
                case "x":
                    view.close_panel()
                case "r":
                    await view.open()
                case "host":
                    view.host_name = arg
                case "by":
                    view.managed_by = arg
                case "at":
                    view.location = arg
                case "save":
                    await view.save_event()
                case "del" if arg.isdigit():
                    # Blocking prompt, run off the loop
                    if await asyncio.to_thread(_confirm_delete, view, int(arg)):
                        await view.delete_event(int(arg), lambda event: True)
                case _ if command.isdigit() and 1 <= int(command) <= len([d for d in view.days() if d]):
                    await view.click_day(int(command))
    finally:
        scheduler.shutdown(wait=False)


@main.command("config")
def show_config():
    """Show the effective configuration."""
    config = load_config()
    click.echo(f"Config file:     {CONFIG_FILE}{'' if CONFIG_FILE.exists() else ' (not found)'}")
    click.echo(f"API base URL:    {config.api_base_url}")
    click.echo(f"Owner id:        {config.owner_id if config.owner_id is not None else '(not set)'}")
    click.echo(f"Request timeout: {config.request_timeout}s")
    click.echo(f"Message timeout: {config.message_timeout}s")


if __name__ == "__main__":
    main()
