#!/usr/bin/env python3
"""Main CLI entry point for PageSnap using Typer.

Provides one-off captures to a local file and a command to run the API
server.
"""

import asyncio
import json
import logging
import sys
from enum import IntEnum
from pathlib import Path
from typing import Optional

import typer
from playwright.async_api import Error as PlaywrightError
from typing_extensions import Annotated

from pagesnap import __version__
from pagesnap.capture import CaptureEngine, InvalidInputError, PageSnapError, get_config
from pagesnap.capture.browser_pool import BrowserPool
from pagesnap.utils import normalize_url


class ExitCode(IntEnum):
    """Process exit codes."""
    SUCCESS = 0
    CAPTURE_FAILED = 1
    INVALID_INPUT = 2


app = typer.Typer(
    name="pagesnap",
    help="PageSnap - render web pages to PNG and extract brand metadata",
    add_completion=False,
)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
):
    """
    PageSnap - render web pages to PNG and extract brand metadata.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command(name="version")
def show_version():
    """Show version information."""
    typer.echo(f"PageSnap CLI v{__version__}")


async def _run_capture(
    url: str,
    output: Path,
    format: Optional[str],
    mobile: bool,
    full_page: bool,
    brand: bool,
    config_path: Optional[Path],
) -> None:
    settings = get_config(config_path).config
    pool = BrowserPool(settings)
    engine = CaptureEngine(settings, pool)
    try:
        if brand:
            snapshot = await engine.brand_snapshot(url)
            output.write_text(json.dumps(snapshot.model_dump(), indent=2), encoding="utf-8")
        else:
            result = await engine.screenshot(url, format=format, mobile=mobile, full_page=full_page)
            output.write_bytes(result.image)
    finally:
        await pool.shutdown()


@app.command()
def capture(
    url: Annotated[str, typer.Argument(help="Page to capture (https:// is added if missing)")],

    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file (.png, or .json with --brand)")
    ] = Path("pagesnap-capture.png"),

    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Presentation format (portrait, vertical, phone, mobile)")
    ] = None,

    mobile: Annotated[
        bool,
        typer.Option("--mobile", help="Use the mobile profile")
    ] = False,

    full_page: Annotated[
        bool,
        typer.Option("--full-page", help="Capture the full scrollable page")
    ] = False,

    brand: Annotated[
        bool,
        typer.Option("--brand", help="Brand snapshot: write screenshot and metadata as JSON")
    ] = False,

    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to capture config YAML")
    ] = None,
):
    """Capture a single page to a file."""
    target_url = normalize_url(url)
    if not target_url:
        typer.echo("Error: No URL provided.", err=True)
        raise typer.Exit(ExitCode.INVALID_INPUT)

    try:
        asyncio.run(_run_capture(target_url, output, format, mobile, full_page, brand, config))
    except InvalidInputError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(ExitCode.INVALID_INPUT)
    except (PageSnapError, PlaywrightError, OSError) as e:
        typer.echo(f"Capture failed: {e}", err=True)
        raise typer.Exit(ExitCode.CAPTURE_FAILED)

    typer.echo(f"Saved {target_url} -> {output}")


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "0.0.0.0",
    port: Annotated[int, typer.Option("--port", "-p", envvar="PORT", help="Listen port")] = 3000,
):
    """Run the PageSnap API server."""
    import uvicorn

    uvicorn.run("pagesnap.api.main:app", host=host, port=port, log_level="info")


if __name__ == "__main__":
    sys.exit(app())
