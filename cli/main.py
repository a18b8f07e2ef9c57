"""Channel Grouper CLI: servers, one-off searches and MCP configs."""

import asyncio
import json

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from backend.app.config import settings
from backend.app.errors import ChannelGrouperError
from backend.app.models.channel import DisplayPayload

app = typer.Typer(
    help="Slack Channel Grouper - find Slack channels by regex",
    no_args_is_help=True,
)

console = Console()


@app.command()
def start(
    port: int = typer.Option(settings.port, "--port", "-p", help="API server port"),
    host: str = typer.Option(settings.host, "--host", help="Interface to bind"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Start the API server (REST + Slack endpoints + MCP at /mcp)."""
    if not settings.slack_configured:
        typer.secho("Warning: SLACK_BOT_TOKEN is not set", fg=typer.colors.YELLOW)
    if not settings.api_secret_key:
        typer.secho("Warning: API_SECRET_KEY is not set, the REST API will refuse requests", fg=typer.colors.YELLOW)

    typer.echo("")
    typer.secho("Channel Grouper is starting up", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  API:      http://localhost:{port}/api")
    typer.echo(f"  Slack:    http://localhost:{port}/slack/commands")
    typer.echo(f"  MCP:      http://localhost:{port}/mcp")
    typer.echo(f"  API docs: http://localhost:{port}/docs")
    typer.echo("")

    uvicorn.run(
        "backend.app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@app.command()
def mcp() -> None:
    """Run the MCP server over stdio (for AI tools that spawn it directly)."""
    from backend.mcp_server import run_stdio

    run_stdio()


def _print_payload(payload: DisplayPayload) -> None:
    if payload.is_empty:
        typer.secho(payload.summary, fg=typer.colors.YELLOW)
        return

    typer.secho(payload.summary, fg=typer.colors.GREEN, bold=True)
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Channel")
    table.add_column("Visibility")
    table.add_column("Topic / Purpose", overflow="fold")
    for channel in payload.public_channels + payload.private_channels:
        name = f"#{channel.name}" + (" (archived)" if channel.is_archived else "")
        table.add_row(
            name,
            "private" if channel.is_private else "public",
            channel.topic or channel.purpose,
        )
    console.print(table)
    if payload.truncated:
        typer.echo(
            f"Showing first {payload.shown} channels. "
            f"{payload.remaining} more channels match this pattern."
        )


@app.command()
def search(
    pattern: str = typer.Argument(..., help="Regex matched against name, topic and purpose"),
    flags: str = typer.Option("i", "--flags", "-f", help="Regex flags"),
    limit: int = typer.Option(settings.display_limit, "--limit", "-n", min=1, help="Channels to show"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw match result as JSON"),
) -> None:
    """Search the workspace for channels matching PATTERN."""
    from backend.app.log import setup_logging
    from backend.app.services.channel_grouper import build_service

    setup_logging(file_sink=False)
    service = build_service(settings)
    try:
        result = asyncio.run(service.group_by_regex(pattern, flags))
    except ChannelGrouperError as exc:
        typer.secho(f"Error: {exc.message}", fg=typer.colors.RED)
        raise typer.Exit(1) from None

    if as_json:
        typer.echo(result.model_dump_json(by_alias=True, indent=2))
        return
    _print_payload(service.format_for_display(result, limit))


@app.command()
def suggestions() -> None:
    """Show curated example patterns."""
    from backend.app.services.suggestions import get_suggestions

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name")
    table.add_column("Pattern")
    table.add_column("Description")
    for suggestion in get_suggestions():
        table.add_row(suggestion.name, suggestion.pattern, suggestion.description)
    console.print(table)


@app.command(name="mcp-config")
def mcp_config(
    port: int = typer.Option(settings.port, "--port", "-p", help="API server port"),
    stdio: bool = typer.Option(False, "--stdio", help="Spawn the server over stdio instead of HTTP"),
) -> None:
    """Generate MCP server config JSON for connecting an AI tool.

    By default the config points at the HTTP endpoint served by `start`.
    With --stdio the tool spawns `channel-grouper mcp` itself.
    """
    if stdio:
        server = {"command": "channel-grouper", "args": ["mcp"]}
    else:
        server = {"type": "streamable-http", "url": f"http://localhost:{port}/mcp"}

    config = {"mcpServers": {"channel-grouper": server}}
    typer.secho("MCP client config (.mcp.json):", fg=typer.colors.CYAN, bold=True)
    typer.echo(json.dumps(config, indent=2))


@app.command()
def status() -> None:
    """Check if the API server is running."""
    import httpx

    try:
        resp = httpx.get(f"{settings.base_url}/api/health", timeout=3)
        data = resp.json()
        typer.secho("API server: running", fg=typer.colors.GREEN)
        for name, state in data.get("services", {}).items():
            typer.echo(f"  {name}: {state}")
    except (httpx.HTTPError, ValueError):
        typer.secho("API server: not running", fg=typer.colors.RED)


@app.command()
def setup(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing .env file"),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be done without making changes",
    ),
) -> None:
    """Create a .env file and print the Slack app setup steps.

    Generates a random API_SECRET_KEY, checks any Slack credentials already in
    the environment, and walks through creating the Slack app.
    Idempotent: an existing .env is left alone unless --force is given.
    """
    from cli.setup import run_setup

    run_setup(force=force, dry_run=dry_run)


if __name__ == "__main__":
    app()
