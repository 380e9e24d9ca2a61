"""Rich renderables for the profile screens.

Views are pure: they take state (and the list query) and return renderables.
They never dispatch or call the API themselves.
"""

from datetime import datetime
from io import StringIO
from typing import Iterable

from rich.columns import Columns
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from client.listing import ListQuery, Page, SortOrder
from client.models import FieldError, Profile
from client.state import ProfileState

PROFILE_THEME = Theme(
    {
        "pm.ok": "bold green",
        "pm.error": "bold red",
        "pm.warning": "bold yellow",
        "pm.key": "dim",
        "pm.email": "cyan",
        "pm.title": "bold",
        "pm.local": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=PROFILE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def format_date(value: datetime | None) -> str:
    """``Jan 05, 2024`` style date, or ``N/A``."""
    if value is None:
        return "N/A"
    return value.strftime("%b %d, %Y")


def get_initials(name: str) -> str:
    return "".join(part[0] for part in name.split()[:2]).upper()


def _sync_badge(profile: Profile) -> Text:
    if profile.is_local:
        return Text("pending sync", style="pm.local")
    return Text("synced", style="pm.ok")


def render_table(profiles: Iterable[Profile], query: ListQuery) -> Table:
    arrow = "↑" if query.sort_order == SortOrder.ASC else "↓"

    def heading(label: str, field: str) -> str:
        return f"{label} {arrow}" if query.sort_by == field else label

    table = Table(show_lines=False, header_style="pm.title")
    table.add_column(heading("Name", "name"))
    table.add_column(heading("Email", "email"), style="pm.email")
    table.add_column(heading("Age", "age"), justify="right")
    table.add_column(heading("Created", "createdAt"))
    table.add_column("Status")
    for profile in profiles:
        table.add_row(
            profile.name,
            profile.email,
            str(profile.age),
            format_date(profile.created_at),
            _sync_badge(profile),
        )
    return table


def render_card(profile: Profile) -> Panel:
    body = Text()
    body.append(f"{profile.email}\n", style="pm.email")
    body.append(f"Age {profile.age}\n")
    body.append(f"Created: {format_date(profile.created_at)}", style="pm.key")
    return Panel(
        body,
        title=f"[pm.title]{get_initials(profile.name)}[/] {profile.name}",
        subtitle=_sync_badge(profile),
        width=38,
    )


def render_grid(profiles: Iterable[Profile]) -> Columns:
    return Columns([render_card(p) for p in profiles], equal=True)


def render_detail(profile: Profile) -> Panel:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="pm.key")
    table.add_column()
    table.add_row("Name", profile.name)
    table.add_row("Email", Text(profile.email, style="pm.email"))
    table.add_row("Age", f"{profile.age} years")
    table.add_row("Created", format_date(profile.created_at))
    table.add_row("Updated", format_date(profile.updated_at))
    table.add_row("ID", profile.id or "N/A")
    table.add_row("Status", _sync_badge(profile))
    return Panel(table, title=f"[pm.title]{get_initials(profile.name)}[/] Profile details")


def render_summary(page: Page, query: ListQuery) -> Text:
    text = Text(f"Showing {len(page.items)} of {page.total} profiles")
    if query.is_filtered:
        text.append(" (filtered)", style="pm.key")
    if page.total > page.page_size:
        text.append(f"  page {page.page + 1}/{page.page_count}", style="pm.key")
    return text


def render_empty(query: ListQuery) -> Text:
    if query.is_filtered:
        return Text(
            "No profiles match your current filters. Try adjusting your search criteria.",
            style="pm.warning",
        )
    return Text("No profiles yet. Create one with `profiles save`.", style="pm.warning")


def render_field_errors(errors: Iterable[FieldError]) -> Table:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="pm.error")
    table.add_column()
    for error in errors:
        table.add_row(error.field, error.message)
    return table


def render_alerts(state: ProfileState) -> list[RenderableType]:
    alerts: list[RenderableType] = []
    if state.success:
        alerts.append(Text(f"✓ {state.success}", style="pm.ok"))
    if state.error:
        alerts.append(Text(f"✗ {state.error}", style="pm.error"))
        if state.field_errors:
            alerts.append(render_field_errors(state.field_errors))
    return alerts


def render_list_view(state: ProfileState, page: Page, query: ListQuery, mode: str) -> Group:
    """Alerts, then either the empty-state message or the page plus summary."""
    parts: list[RenderableType] = render_alerts(state)
    if page.total == 0:
        parts.append(render_empty(query))
    else:
        parts.append(render_grid(page.items) if mode == "grid" else render_table(page.items, query))
        parts.append(render_summary(page, query))
    return Group(*parts)


def render_profile_view(state: ProfileState) -> Group:
    parts: list[RenderableType] = render_alerts(state)
    if state.profile:
        parts.append(render_detail(state.profile))
    return Group(*parts)
