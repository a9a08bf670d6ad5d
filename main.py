#!/usr/bin/env python3
"""
pinscope - Pinterest image search API

Runs the HTTP service, or queries Pinterest from the command line.
"""
import asyncio
import json

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pinscope import __version__

console = Console()

DEFAULT_SERVER = "http://localhost:3000"


@click.group()
@click.version_option(version=__version__, prog_name="pinscope")
def cli():
    """pinscope - Pinterest image search API"""
    pass


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default: PINSCOPE_HOST or 0.0.0.0)")
@click.option("--port", default=None, type=int, help="Port to bind to (default: PORT or 3000)")
def start(host: str, port: int):
    """Start the pinscope API server"""
    from pinscope.config import settings
    from pinscope.server import run_server

    console.print(Panel.fit(
        "[bold cyan]pinscope[/bold cyan] - Pinterest image search API\n"
        f"[dim]Starting server on http://{host or settings.host}:{port or settings.port}[/dim]",
        border_style="cyan"
    ))
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    run_server(host=host, port=port)


def print_images(images: list, stats: dict):
    table = Table(title=f"{len(images)} images")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Ratio", justify="right")
    table.add_column("Category")
    table.add_column("URL", style="dim", overflow="fold")

    for i, image in enumerate(images, 1):
        dims = image["dimensions"]
        table.add_row(
            str(i),
            f"{dims['width']}x{dims['height']}",
            str(dims["aspectRatio"]),
            dims["category"],
            image["url"],
        )
    console.print(table)

    if stats:
        stats_table = Table(title="Aspect ratio distribution", show_header=False)
        stats_table.add_column("Category")
        stats_table.add_column("Count", justify="right")
        for category, count in sorted(stats.items(), key=lambda item: -item[1]):
            stats_table.add_row(category, str(count))
        console.print(stats_table)


@cli.command()
@click.argument("query")
@click.option("--limit", "-l", default=50, help="Number of images (max 100)")
@click.option("--server", "-s", default=DEFAULT_SERVER, help="pinscope server URL")
def search(query: str, limit: int, server: str):
    """Search through a running pinscope server"""
    import requests

    try:
        resp = requests.get(
            f"{server.rstrip('/')}/api/search",
            params={"q": query, "limit": limit},
            timeout=120,
        )
        data = resp.json()
    except requests.ConnectionError:
        console.print("[red]Error:[/red] Server not running. Start with: pinscope start")
        return

    if not data.get("success"):
        console.print(f"[red]✗[/red] {data.get('error')}")
        if data.get("message"):
            console.print(f"[dim]{data['message']}[/dim]")
        return

    print_images(data["data"], data["aspectRatioStats"])
    console.print(f"[dim]Response time: {data['responseTime']}[/dim]")


@cli.command()
@click.argument("query")
@click.option("--limit", "-l", default=50, type=click.IntRange(1, 100), help="Number of images (max 100)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON instead of a table")
def scrape(query: str, limit: int, as_json: bool):
    """Scrape Pinterest directly, without a server"""
    from pinscope.aspect import aspect_ratio_stats
    from pinscope.browser.manager import browser_manager
    from pinscope.browser.scraper import scrape_pinterest
    from pinscope.logging_config import setup_logging

    setup_logging()

    async def run():
        try:
            return await scrape_pinterest(query, limit)
        finally:
            await browser_manager.close()

    with console.status(f"Searching Pinterest for [bold]{query}[/bold]..."):
        images = asyncio.run(run())

    data = [image.to_dict() for image in images]
    if as_json:
        click.echo(json.dumps(data, indent=2))
    else:
        print_images(data, aspect_ratio_stats(images))


@cli.command()
@click.option("--server", "-s", default=DEFAULT_SERVER, help="pinscope server URL")
def health(server: str):
    """Show the health of a running server"""
    import requests

    try:
        resp = requests.get(f"{server.rstrip('/')}/api/health", timeout=10)
        data = resp.json()
    except requests.ConnectionError:
        console.print("[red]Error:[/red] Server not running")
        return

    if data.get("success") is False:
        console.print(f"[red]✗[/red] {data.get('error')}")
        return

    table = Table(show_header=False, box=None)
    table.add_column("Label", style="dim")
    table.add_column("Value")
    table.add_row("Status", f"[green]{data['status']}[/green]")
    table.add_row("Uptime", f"{data['uptime']:.0f}s")
    table.add_row("Browser", data["browserStatus"])
    table.add_row("Checked", data["timestamp"])
    console.print(table)


@cli.command()
def version():
    """Show version information"""
    console.print(f"[bold cyan]pinscope[/bold cyan] v{__version__}")


if __name__ == "__main__":
    cli()
