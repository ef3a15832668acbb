"""Command line access to a local object store.

Commands:
    ls       - List objects and prefixes under a prefix
    put      - Upload a local file as an object
    cat      - Write an object to stdout
    rm       - Delete an object
    presign  - Print a pre-signed URL for an object
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import NoReturn

import aiofiles
import structlog
import typer

from .config import get_settings
from .filesystem import LocalStorageProvider
from .models import ObjectEntry
from .signing import HmacUrlSigner

app = typer.Typer(
    name="local-storage",
    help="Object storage on a local directory tree",
    add_completion=False,
)

# Containers are ignored by the local provider
CONTAINER = ""


def setup_logging(level: str = "INFO", log_format: str = "console") -> None:
    """Send structured logs to stderr so `cat` output stays clean on stdout.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        log_format: "json" or "console"
    """
    logging.basicConfig(
        format="%(message)s", stream=sys.stderr, level=level.upper(), force=True
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


@app.callback()
def main(
    ctx: typer.Context,
    base_path: Path = typer.Option(
        None,
        "--base-path",
        "-b",
        help="Storage root (defaults to LOCAL_STORAGE_BASE_PATH)",
    ),
) -> None:
    """Object storage on a local directory tree."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    signer = HmacUrlSigner(settings.signing_base_url, settings.signing_secret_key)
    ctx.obj = LocalStorageProvider(
        {"base_path": base_path or settings.base_path, "signing_fn": signer}
    )


def _fail(message: str, error: Exception) -> NoReturn:
    structlog.get_logger().warning(message, error=str(error))
    typer.echo(f"{message}: {error}", err=True)
    raise typer.Exit(1) from None


@app.command("ls")
def list_command(
    ctx: typer.Context,
    prefix: str = typer.Argument("", help="Prefix (folder) to list"),
) -> None:
    """List objects and prefixes directly under PREFIX."""
    storage: LocalStorageProvider = ctx.obj
    try:
        entries = asyncio.run(storage.list_objects(CONTAINER, prefix))
    except OSError as e:
        _fail("Cannot list prefix", e)

    for entry in entries:
        if isinstance(entry, ObjectEntry):
            modified = entry.last_modified.strftime("%Y-%m-%d %H:%M:%S")
            typer.echo(f"{entry.size:>12}  {modified}  {entry.path}")
        else:
            typer.echo(f"{'PRE':>12}  {'':19}  {entry.prefix}/")


@app.command()
def put(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Object key"),
    src: Path = typer.Argument(..., help="Local file to upload"),
) -> None:
    """Upload SRC as KEY."""
    storage: LocalStorageProvider = ctx.obj

    async def upload() -> None:
        async with aiofiles.open(src, "rb") as f:
            await storage.put_object(CONTAINER, key, f)

    try:
        asyncio.run(upload())
    except OSError as e:
        _fail("Cannot upload object", e)

    typer.echo(f"Uploaded {src} to {key}")


@app.command()
def cat(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Object key"),
) -> None:
    """Write the contents of KEY to stdout."""
    storage: LocalStorageProvider = ctx.obj
    out = typer.get_binary_stream("stdout")

    async def download() -> None:
        stream = await storage.get_object(CONTAINER, key)
        try:
            while chunk := await stream.read(64 * 1024):
                out.write(chunk)
        finally:
            await stream.close()
        out.flush()

    try:
        asyncio.run(download())
    except OSError as e:
        _fail("Cannot read object", e)


@app.command()
def rm(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Object key"),
) -> None:
    """Delete KEY."""
    storage: LocalStorageProvider = ctx.obj
    try:
        asyncio.run(storage.delete_object(CONTAINER, key))
    except OSError as e:
        _fail("Cannot delete object", e)

    typer.echo(f"Deleted {key}")


@app.command()
def presign(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Object key"),
    put_url: bool = typer.Option(
        False,
        "--put",
        help="Sign an upload URL instead of a download URL",
    ),
    ttl: int = typer.Option(
        None,
        "--ttl",
        help="URL validity in seconds (default: 1 day)",
    ),
) -> None:
    """Print a pre-signed URL for KEY."""
    storage: LocalStorageProvider = ctx.obj
    if put_url:
        url = asyncio.run(storage.presigned_put_url(CONTAINER, key, ttl=ttl))
    else:
        url = asyncio.run(storage.presigned_get_url(CONTAINER, key, ttl=ttl))
    typer.echo(url)


if __name__ == "__main__":
    app()
