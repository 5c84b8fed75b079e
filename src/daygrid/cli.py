"""daygrid CLI - terminal calendar."""

import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path

import click
import requests

from .adapters.events_api import AuthenticationError
from .config import load_config
from .core.colors import is_valid_css_color, resolve_color
from .core.layout import add_months, first_of_month
from .workflows import (
    compile_day,
    compile_month,
    compute_day,
    compute_window,
    get_repository,
)
from .render import format_window


def _parse_date(ctx, param, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter("expected YYYY-MM-DD")


def _parse_month(ctx, param, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise click.BadParameter("expected YYYY-MM")


def _parse_datetime(ctx, param, value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter("expected YYYY-MM-DDTHH:MM")


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """daygrid - calendar in the terminal."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )


@main.command()
@click.option("--email", default=None, help="Account email (defaults to EMAIL in daygrid.conf)")
@click.password_option(confirmation_prompt=False)
def login(email: str | None, password: str):
    """Sign in to the calendar API."""
    config = load_config()
    email = email or config.email or click.prompt("Email")
    try:
        get_repository(config).login(email, password)
    except (AuthenticationError, requests.RequestException) as e:
        _fail(str(e))
    click.echo("Signed in.")


@main.command()
def logout():
    """Forget the stored session."""
    get_repository(load_config()).logout()
    click.echo("Signed out.")


@main.command()
@click.option("--date", "-d", "target_date", default=None, callback=_parse_date,
              help="Date to view (YYYY-MM-DD), defaults to today")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--offline", is_flag=True, help="Use the cached event snapshot")
def day(target_date: date | None, as_json: bool, offline: bool):
    """Show the events on one day."""
    config = load_config()
    target = target_date or date.today()

    try:
        if as_json:
            cell = compute_day(config, target, offline=offline)
            click.echo(json.dumps(cell.to_dict(), indent=2))
        else:
            click.echo(compile_day(config, target, offline=offline))
    except (AuthenticationError, requests.RequestException) as e:
        _fail(str(e))


@main.command()
@click.option("--month", "-m", "target_month", default=None, callback=_parse_month,
              help="Month to view (YYYY-MM), defaults to this month")
@click.option("--offset", type=int, default=0, help="Months relative to --month")
@click.option("--offline", is_flag=True, help="Use the cached event snapshot")
def month(target_month: date | None, offset: int, offline: bool):
    """Show a month grid."""
    config = load_config()
    target = add_months(first_of_month(target_month or date.today()), offset)

    try:
        click.echo(compile_month(config, target, offline=offline))
    except (AuthenticationError, requests.RequestException) as e:
        _fail(str(e))


@main.command()
@click.argument("scroll_offset", type=float)
@click.option("--viewport", type=float, default=None, help="Viewport height in pixels")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def window(scroll_offset: float, viewport: float | None, as_json: bool):
    """Show which month a scroll offset lands on."""
    config = load_config()
    try:
        result = compute_window(config, scroll_offset, viewport)
    except ValueError as e:
        _fail(f"invalid month window settings: {e}")

    if as_json:
        click.echo(
            json.dumps(
                {
                    "slot_index": result.slot_index,
                    "month_offset": result.month_offset,
                    "month": result.month.isoformat(),
                    "label": result.label,
                    "rendered_slots": list(result.rendered_slots),
                },
                indent=2,
            )
        )
    else:
        click.echo(format_window(result))


@main.command()
@click.argument("title")
@click.option("--start", required=True, callback=_parse_datetime, help="Start (YYYY-MM-DDTHH:MM)")
@click.option("--end", default=None, callback=_parse_datetime, help="End (defaults to 23:59 that day)")
@click.option("--description", default="", help="Event description")
@click.option("--category", default="", help="CSS colour name for the event")
def add(title: str, start: datetime, end: datetime | None, description: str, category: str):
    """Create an event."""
    if end is not None and end < start:
        raise click.BadParameter("end must not be before start", param_hint="--end")
    if category and not is_valid_css_color(category):
        click.echo(f"Warning: '{category}' is not a CSS colour; it will show as dodgerblue.", err=True)

    config = load_config()
    try:
        get_repository(config).create_event(
            {
                "title": title,
                "start": start,
                "end_time": end,
                "description": description,
                "category_id": category,
            }
        )
    except (AuthenticationError, requests.RequestException) as e:
        _fail(str(e))
    click.echo(f"Created '{title}' on {start.strftime('%A, %b %d')}.")


@main.command()
@click.argument("event_id")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
def remove(event_id: str, yes: bool):
    """Delete an event by id."""
    if not yes and not click.confirm(f"Delete event {event_id}?"):
        return

    try:
        get_repository(load_config()).delete_event(event_id)
    except (AuthenticationError, requests.RequestException) as e:
        _fail(str(e))
    click.echo(f"Deleted event {event_id}.")


@main.command()
@click.argument("audio", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--date", "-d", "target_date", default=None, callback=_parse_date,
              help="Date the event belongs to, defaults to today")
def record(audio: Path, target_date: date | None):
    """Create an event from a recorded voice note."""
    target = target_date or date.today()
    try:
        get_repository(load_config()).create_event_from_audio(audio, target)
    except (AuthenticationError, requests.RequestException) as e:
        _fail(str(e))
    click.echo(f"Uploaded {audio.name}; the event will appear on the next refresh.")


@main.command()
@click.argument("category")
def color(category: str):
    """Show how a category colour will be drawn."""
    resolved = resolve_color(category)
    if not is_valid_css_color(category):
        click.echo(f"'{category}' is not a CSS colour; falling back to {resolved.border}.")
    click.echo(f"border:     {resolved.border}")
    click.echo(f"rgb:        {resolved.rgb_string}")
    click.echo(f"background: {resolved.background}")


@main.command()
def watch():
    """Refresh today's events periodically."""
    from .refresher import run_watch

    click.echo("Watching calendar events...")
    click.echo("Press Ctrl+C to stop")
    try:
        run_watch(load_config(), echo=click.echo)
    except ValueError as e:
        _fail(f"Configuration error: {e}")
    except KeyboardInterrupt:
        click.echo("\nStopped.")


if __name__ == "__main__":
    main()
