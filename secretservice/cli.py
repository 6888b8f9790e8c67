"""Command line access to the Secret Service."""

import asyncio
import logging
import sys
from contextlib import AbstractAsyncContextManager
from typing import Awaitable, Callable, List, Optional, TypeVar

import orjson
import typer
from jeepney.wrappers import DBusErrorResponse
from pydantic import ValidationError

from secretservice.conf import ALGORITHM_PLAIN
from secretservice.config import SecretServiceConfig
from secretservice.dbus import DBusTransport
from secretservice.exceptions import SecretServiceError
from secretservice.service import Service
from secretservice.transport import Transport

T = TypeVar("T")

logger = logging.getLogger("secretservice")

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Store and retrieve secrets from the desktop keyring.",
)


def connect(config: SecretServiceConfig) -> AbstractAsyncContextManager[Transport]:
    """Open the transport for one command."""
    return DBusTransport.connect(config.bus)


def _parse_attributes(pairs: List[str]) -> dict:
    attributes = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expecting KEY=VALUE, got {pair!r}")
        attributes[key] = value
    return attributes


def _run(
    ctx: typer.Context, command: Callable[[Service], Awaitable[T]]
) -> T:
    """Run ``command`` against a fresh Service. Library errors are fatal."""
    config: SecretServiceConfig = ctx.obj

    async def runner() -> T:
        async with connect(config) as transport:
            return await command(Service(transport, config=config))

    try:
        return asyncio.run(runner())
    except (SecretServiceError, DBusErrorResponse, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _read_secret() -> str:
    stdin = typer.get_text_stream("stdin")
    if stdin.isatty():
        return typer.prompt("Password", hide_input=True)
    value = stdin.read()
    return value[:-1] if value.endswith("\n") else value


@app.callback()
def main(
    ctx: typer.Context,
    plain: bool = typer.Option(
        False, "--plain", help="Use an unencrypted session"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds to wait for a prompt"
    ),
    collection: Optional[str] = typer.Option(
        None, "--collection", help="Collection object path"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Turn on debugging"),
):
    """Configure logging and the client settings shared by every command."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    overrides = {}
    if plain:
        overrides["algorithm"] = ALGORITHM_PLAIN
    if timeout is not None:
        overrides["prompt_timeout"] = timeout
    if collection is not None:
        overrides["collection"] = collection
    try:
        config = SecretServiceConfig.from_env()
        ctx.obj = SecretServiceConfig(**{**config.model_dump(), **overrides})
    except ValidationError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def get(ctx: typer.Context, label: str = typer.Argument(..., help="Item label")):
    """Print the secret of the item called LABEL."""

    async def command(service: Service) -> Optional[bytes]:
        async with await service.open_session() as session:
            for item in await service.default_collection().items():
                logger.debug("Checking item %s", item.path)
                if await item.get_label() != label:
                    continue
                if await item.is_locked():
                    typer.echo(f"item '{label}' locked!", err=True)
                    raise typer.Exit(1)
                return session.decode(await item.get_secret(session))
        return None

    secret = _run(ctx, command)
    if secret is None:
        typer.echo(f"item '{label}' not found", err=True)
        raise typer.Exit(1)
    typer.echo(secret, nl=False)


@app.command()
def lookup(
    ctx: typer.Context,
    attributes: List[str] = typer.Argument(..., help="KEY=VALUE attributes"),
):
    """Print the secret of the first unlocked item matching the attributes."""
    attrs = _parse_attributes(attributes)

    async def command(service: Service) -> Optional[bytes]:
        unlocked, locked = await service.search_items(attrs)
        if not unlocked:
            if locked:
                typer.echo("matching items are locked", err=True)
                raise typer.Exit(1)
            return None
        async with await service.open_session() as session:
            return session.decode(await unlocked[0].get_secret(session))

    secret = _run(ctx, command)
    if secret is None:
        typer.echo("no matching item", err=True)
        raise typer.Exit(1)
    typer.echo(secret, nl=False)


@app.command()
def store(
    ctx: typer.Context,
    attributes: List[str] = typer.Argument(..., help="KEY=VALUE attributes"),
    label: str = typer.Option(..., "--label", "-l", help="Item label"),
):
    """Store a secret read from standard input."""
    attrs = _parse_attributes(attributes)
    value = _read_secret()

    async def command(service: Service) -> str:
        async with await service.open_session() as session:
            item = await service.default_collection().create_item(
                label, attrs, session.encode(value), replace=True
            )
        return item.path

    typer.echo(_run(ctx, command))


@app.command(name="list")
def list_items(ctx: typer.Context):
    """List the items of the collection as JSON."""

    async def command(service: Service) -> list:
        items = []
        for item in await service.default_collection().items():
            items.append({
                "path": item.path,
                "label": await item.get_label(),
                "attributes": await item.get_attributes(),
                "locked": await item.is_locked(),
                "created": await item.created(),
                "modified": await item.modified(),
            })
        return items

    items = _run(ctx, command)
    typer.echo(orjson.dumps(items, option=orjson.OPT_INDENT_2).decode("utf-8"))


@app.command()
def clear(
    ctx: typer.Context,
    attributes: List[str] = typer.Argument(..., help="KEY=VALUE attributes"),
):
    """Delete every item of the collection matching the attributes."""
    attrs = _parse_attributes(attributes)

    async def command(service: Service) -> int:
        items = await service.default_collection().search_items(attrs)
        for item in items:
            await item.delete()
        return len(items)

    count = _run(ctx, command)
    typer.echo(f"deleted {count} item(s)", err=True)


def run():
    app()


if __name__ == "__main__":
    sys.exit(run())
