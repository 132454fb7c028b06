"""CLI entry point for the Interactive Demo API."""

from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config.settings import settings
from src.api.services.demos import DemoService
from src.api.services.leads import LeadService, leads_to_csv
from src.api.services.mirror import MirrorService
from src.models.demo import DemoStatus
from src.store.client import data_clients
from src.utils.errors import DemoServiceError

console = Console()


@click.group()
@click.version_option(version="0.1.0", prog_name="Interactive Demo API")
def cli():
    """Interactive Demo API.

    Serve the API, and inspect or repair demos, their public copies and
    their leads on behalf of an owner.
    """
    pass


@cli.command()
def config():
    """Show current configuration."""
    table = Table(title="Current Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.model_dump().items():
        # Hide sensitive values
        if "key" in key.lower() or "secret" in key.lower():
            value = "***" if value else "Not set"
        table.add_row(key, str(value))

    console.print(table)


@cli.command()
@click.option("--owner", "-o", required=True, help="Owner (user) id")
@click.option(
    "--status", "-s",
    type=click.Choice([s.value for s in DemoStatus]),
    default=None,
    help="Only show demos with this status",
)
def demos(owner: str, status: str | None):
    """List an owner's demos."""
    service = DemoService(data_clients.for_user(), owner)
    try:
        items = service.list_my_demos(DemoStatus(status) if status else None)
    except DemoServiceError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)

    table = Table(title=f"Demos ({len(items)})", show_header=True, header_style="bold magenta")
    table.add_column("Demo ID", style="cyan")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Updated")
    for demo in items:
        color = "green" if demo.status is DemoStatus.PUBLISHED else "yellow"
        table.add_row(
            demo.demo_id,
            demo.name or "-",
            f"[{color}]{demo.status.value}[/{color}]",
            demo.updated_at or "-",
        )
    console.print(table)


@cli.command()
@click.argument("demo_id")
@click.option("--owner", "-o", required=True, help="Owner (user) id")
def mirror(demo_id: str, owner: str):
    """Re-sync the public copy of a demo."""
    service = MirrorService(data_clients.for_user(), owner)
    try:
        result = service.mirror_demo_to_public(demo_id)
    except DemoServiceError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)

    console.print(Panel.fit(
        f"Metadata: {'[green]mirrored[/green]' if result.metadata_mirrored else '[yellow]missing[/yellow]'}\n"
        f"Steps mirrored: [green]{result.steps_mirrored}[/green]\n"
        f"Steps failed: [red]{result.steps_failed}[/red]",
        title=f"Mirror {demo_id}",
    ))


@cli.command()
@click.argument("demo_id")
@click.option("--owner", "-o", required=True, help="Owner (user) id")
def unpublish(demo_id: str, owner: str):
    """Set a demo back to draft and remove its public copy."""
    service = MirrorService(data_clients.for_user(), owner)
    try:
        service.set_demo_status(demo_id, DemoStatus.DRAFT)
    except DemoServiceError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)
    console.print(f"[green]Demo {demo_id} unpublished.[/green]")


@cli.command()
@click.argument("demo_id")
@click.option("--owner", "-o", required=True, help="Owner (user) id")
@click.option(
    "--csv", "csv_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the leads to this CSV file",
)
def leads(demo_id: str, owner: str, csv_path: Path | None):
    """Show a demo's leads, including leads of a deleted demo."""
    service = LeadService(data_clients.for_user(), owner)
    try:
        result = service.list_lead_submissions_smartly(demo_id)
    except DemoServiceError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)

    title = f"{result.demo_name} ({len(result.leads)} leads)"
    if result.is_demo_deleted:
        title += " - deleted demo"
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Created", style="dim")
    table.add_column("Email", style="cyan")
    table.add_column("Step")
    table.add_column("Source")
    for lead in result.leads:
        table.add_row(
            lead.created_at or "-",
            lead.email or "-",
            "-" if lead.step_index is None else str(lead.step_index),
            lead.source or "-",
        )
    console.print(table)

    if csv_path:
        csv_path.write_text(leads_to_csv(result.leads), encoding="utf-8")
        console.print(f"[green]CSV:[/green] {csv_path}")


@cli.command()
@click.option(
    "--host", "-h",
    default=None,
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port", "-p",
    default=None,
    type=int,
    help="Port to bind to (default: 8000)",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, reload: bool):
    """Start the API server.

    Example:
        demo-api serve
        demo-api serve --host 0.0.0.0 --port 8080 --reload
    """
    import uvicorn

    api_host = host or settings.api_host
    api_port = port or settings.api_port

    console.print(Panel.fit(
        f"[bold blue]Interactive Demo API Server[/bold blue]\n\n"
        f"Host: [green]{api_host}[/green]\n"
        f"Port: [green]{api_port}[/green]\n"
        f"Reload: {'Enabled' if reload else 'Disabled'}\n"
        f"Docs: [cyan]http://{api_host}:{api_port}/docs[/cyan]",
        title="Starting API Server",
    ))

    uvicorn.run(
        "src.api.app:app",
        host=api_host,
        port=api_port,
        reload=reload,
    )


if __name__ == "__main__":
    cli()
