"""Command-line front end for managing profiles."""

import asyncio
import logging
from datetime import date, datetime

import click

from client.config import ClientSettings
from client.context import AppContext
from client.listing import PAGE_SIZE_OPTIONS, ListQuery, SortField, SortOrder, apply_query
from client.models import FieldError
from client.state import (
    SaveProfileRejected,
    delete_profile,
    fetch_profile,
    fetch_profiles,
    save_profile,
    sync_local_changes,
)
from client.views import render_list_view, render_profile_view
from core.logging import setup_logging
from domain.validation import validate_profile

pass_app = click.make_pass_decorator(AppContext)


def _parse_date(
    ctx: click.Context, param: click.Parameter, value: datetime | None
) -> date | None:
    return value.date() if value else None


@click.group()
@click.option("--api-url", default=None, help="Server root URL (default from PROFILES_API_URL).")
@click.option("--cache-path", default=None, type=click.Path(dir_okay=False), help="Cache file.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.pass_context
def cli(
    ctx: click.Context,
    api_url: str | None,
    cache_path: str | None,
    verbose: bool,
    log_json: bool,
) -> None:
    """Create, list, edit and delete user profiles, with an offline cache."""
    setup_logging(log_json=log_json, verbose=verbose)
    if not verbose:
        logging.getLogger().setLevel(logging.WARNING)
    if isinstance(ctx.obj, AppContext):
        return
    overrides: dict[str, object] = {}
    if api_url:
        overrides["api_url"] = api_url
    if cache_path:
        overrides["cache_path"] = cache_path
    ctx.obj = AppContext(ClientSettings(**overrides))  # type: ignore[arg-type]


@cli.command("list")
@click.option("-s", "--search", default="", help="Match name or email (case-insensitive).")
@click.option("--min-age", type=click.IntRange(1, 120), default=None)
@click.option("--max-age", type=click.IntRange(1, 120), default=None)
@click.option("--from", "created_from", type=click.DateTime(["%Y-%m-%d"]), callback=_parse_date)
@click.option("--to", "created_to", type=click.DateTime(["%Y-%m-%d"]), callback=_parse_date)
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice([f.value for f in SortField]),
    default=SortField.CREATED_AT.value,
    show_default=True,
)
@click.option(
    "--order",
    type=click.Choice([o.value for o in SortOrder]),
    default=SortOrder.DESC.value,
    show_default=True,
)
@click.option("--page", type=click.IntRange(min=1), default=1, show_default=True)
@click.option(
    "--page-size",
    type=click.Choice([str(n) for n in PAGE_SIZE_OPTIONS]),
    default="10",
    show_default=True,
)
@click.option("--view", type=click.Choice(["table", "grid"]), default="table", show_default=True)
@pass_app
def list_command(
    app: AppContext,
    search: str,
    min_age: int | None,
    max_age: int | None,
    created_from: date | None,
    created_to: date | None,
    sort_by: str,
    order: str,
    page: int,
    page_size: str,
    view: str,
) -> None:
    """List profiles with search, filters, sorting and paging."""
    query = ListQuery(
        search=search,
        min_age=min_age,
        max_age=max_age,
        created_from=created_from,
        created_to=created_to,
        sort_by=SortField(sort_by),
        sort_order=SortOrder(order),
        page=page - 1,
        page_size=int(page_size),
    )

    async def run() -> None:
        async with app.session() as session:
            await fetch_profiles(app.store, session.service)

    asyncio.run(run())
    result = apply_query(app.state.profiles, query)
    app.render(render_list_view(app.state, result, query, view))


@cli.command("show")
@click.argument("email")
@pass_app
def show_command(app: AppContext, email: str) -> None:
    """Show one profile by email."""

    async def run() -> None:
        async with app.session() as session:
            await fetch_profile(app.store, session.service, email)

    asyncio.run(run())
    app.render(render_profile_view(app.state))


@cli.command("save")
@click.option("--name", required=True, help="Full name (first and last).")
@click.option("--email", required=True)
@click.option("--age", required=True, help="Whole number of years, 1-120.")
@pass_app
def save_command(app: AppContext, name: str, email: str, age: str) -> None:
    """Create a profile, or update the one with this email."""
    data = {"name": name, "email": email, "age": age}

    errors = validate_profile(data)
    if errors:
        app.store.dispatch(
            SaveProfileRejected(
                "Please fix the highlighted fields",
                tuple(FieldError(field=e.field, message=e.message) for e in errors),
            )
        )
        app.render(render_profile_view(app.state))
        return

    async def run() -> None:
        async with app.session() as session:
            await save_profile(app.store, session.service, data)

    asyncio.run(run())
    app.render(render_profile_view(app.state))


@cli.command("delete")
@click.argument("email")
@click.option("-y", "--yes", is_flag=True, help="Skip the confirmation prompt.")
@pass_app
def delete_command(app: AppContext, email: str, yes: bool) -> None:
    """Delete a profile by email."""
    if not yes:
        click.confirm(f"Delete profile {email}? This cannot be undone.", abort=True)

    async def run() -> None:
        async with app.session() as session:
            await delete_profile(app.store, session.service, email)

    asyncio.run(run())
    app.render(render_profile_view(app.state))


@cli.command("sync")
@pass_app
def sync_command(app: AppContext) -> None:
    """Push changes saved while offline to the server."""

    async def run() -> None:
        async with app.session() as session:
            await sync_local_changes(app.store, session.coordinator)

    asyncio.run(run())
    app.render(render_profile_view(app.state))


@cli.command("watch")
@pass_app
def watch_command(app: AppContext) -> None:
    """Sync now, then again whenever the server comes back online."""

    async def run() -> None:
        async with app.session() as session:
            await session.coordinator.watch(app.settings.sync_interval)

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        click.echo("Stopped watching.")


@cli.command("clear-cache")
@pass_app
def clear_cache_command(app: AppContext) -> None:
    """Forget every cached profile and queued change."""

    async def run() -> None:
        async with app.session() as session:
            session.service.clear_cache()

    asyncio.run(run())
    click.echo("Profile cache cleared")
