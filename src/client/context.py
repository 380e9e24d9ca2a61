"""AppContext: shared state for every CLI command.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Holds the store the views read from, and opens the API
client, cache and sync coordinator on demand.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import click
import httpx
from rich.console import RenderableType

from client.api_client import ProfileApiClient
from client.cache import CachedProfileService, ProfileCache
from client.config import ClientSettings
from client.state import ProfileState, Store
from client.storage import JsonFileStore, KeyValueStore
from client.sync import SyncCoordinator
from client.views import create_console, get_output


@dataclass
class Session:
    api: ProfileApiClient
    service: CachedProfileService
    coordinator: SyncCoordinator


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(
        self,
        settings: ClientSettings,
        store: Store | None = None,
        kv_store: KeyValueStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        no_color: bool = False,
    ) -> None:
        self.settings = settings
        self.store = store or Store()
        self.kv_store = kv_store or JsonFileStore(settings.cache_path)
        self._transport = transport
        self._no_color = no_color

    @property
    def state(self) -> ProfileState:
        return self.store.state

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Session]:
        async with ProfileApiClient(
            self.settings.api_url,
            timeout=self.settings.timeout,
            transport=self._transport,
        ) as api:
            service = CachedProfileService(api, ProfileCache(self.kv_store))
            yield Session(api=api, service=service, coordinator=SyncCoordinator(api, service))

    def render(self, renderable: RenderableType) -> None:
        """Render to stdout, or to stderr with exit code 1 if the state holds an error."""
        console = create_console(no_color=self._no_color)
        console.print(renderable)
        output = get_output(console).rstrip("\n")
        if self.state.error:
            click.echo(output, err=True)
            raise SystemExit(1)
        click.echo(output)
