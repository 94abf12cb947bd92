"""Catalog browser entry point."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import typer
from stario import Stario
from stario.tracing import JsonTracer, RichTracer

from .client import CatalogClient
from .config import load_config
from .handlers import (
    clear_all_filters,
    clear_filter,
    home,
    load_projects,
    refresh_projects,
    set_search_term,
    toggle_filter,
)
from .session import SessionRegistry

logger = logging.getLogger(__name__)


async def main(config_path: Path | None = None, *, local: bool = False) -> None:
    config = load_config(config_path)
    logging.basicConfig(level=config.server.log_level.upper())

    is_dev = local or sys.stdout.isatty()
    tracer = RichTracer() if is_dev else JsonTracer()

    client = CatalogClient(
        base_url=config.backend.base_url,
        timeout=config.backend.timeout,
    )
    registry = SessionRegistry(client, config)

    if not await client.health():
        logger.warning("Catalog backend not reachable at %s", config.backend.base_url)

    try:
        with tracer:
            app = Stario(tracer)

            app.get("/", home(registry))
            app.post("/projects/load", load_projects(registry))
            app.post("/projects/refresh", refresh_projects(registry))
            app.post("/filters/toggle", toggle_filter(registry))
            app.post("/filters/clear", clear_filter(registry))
            app.post("/filters/clear-all", clear_all_filters(registry))
            app.post("/filters/search", set_search_term(registry))

            host, port = config.server.host, config.server.port
            logger.info("Starting catalog browser on http://%s:%s", host, port)
            logger.info("Backend expected at %s", config.backend.base_url)
            await app.serve(host=host, port=port, workers=config.server.workers)
    finally:
        await client.close()


cli_app = typer.Typer(help="Catalog browser web UI", add_completion=False)


@cli_app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", help="Path to catalog-browser.yaml"),
    local: bool = typer.Option(False, "--local", help="Human-readable tracing output"),
) -> None:
    """Serve the catalog browser."""
    asyncio.run(main(config, local=local))


def cli() -> None:
    cli_app()


if __name__ == "__main__":
    cli()
