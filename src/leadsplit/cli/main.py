"""Main CLI entry point for the leadsplit command."""

import os
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..core.decoder import detect_format
from ..core.errors import LeadSplitError
from ..storage import AgentDirectory, Database, ListStore
from ..website_api.services.agents import AgentService
from ..website_api.services.upload import UploadService

console = Console()


def get_db(db_path: Optional[str] = None) -> Database:
    """Get database instance."""
    path = db_path or os.getenv("LEADSPLIT_DATABASE_PATH")
    return Database(Path(path) if path else None)


def get_agent_service(db: Database) -> AgentService:
    rounds = int(os.getenv("LEADSPLIT_BCRYPT_ROUNDS", "12"))
    return AgentService(AgentDirectory(db), bcrypt_rounds=rounds)


def _fail(error: LeadSplitError):
    console.print(f"[red]Error:[/red] {error.message}")
    raise SystemExit(1)


@click.group()
@click.version_option(version=__version__, prog_name="leadsplit")
def cli():
    """leadsplit - split lead lists across five agents.

    \b
    Quick Start:
      leadsplit init                                    # Create the database
      leadsplit agents add -n Ana -e ana@x.io -m 555    # Add agents (five needed)
      leadsplit distribute leads.csv                    # Split a file across them
      leadsplit lists                                   # Show who got what
    """
    pass


@cli.command()
@click.option("--db", "db_path", help="Custom database path")
def init(db_path: Optional[str]):
    """Initialize the database."""
    db = get_db(db_path)
    console.print(Panel.fit(
        f"[green]✓ Database initialized![/green]\n\n"
        f"Location: [cyan]{db.db_path}[/cyan]",
        title=f"leadsplit v{__version__}",
    ))


# ============================================================================
# AGENTS
# ============================================================================

@cli.group()
def agents():
    """Manage agents."""
    pass


@agents.command("add")
@click.option("--name", "-n", required=True)
@click.option("--email", "-e", required=True)
@click.option("--mobile", "-m", required=True)
@click.password_option("--password", "-p")
@click.option("--db", "db_path", help="Custom database path")
def add_agent(name: str, email: str, mobile: str, password: str, db_path: Optional[str]):
    """Add an agent."""
    service = get_agent_service(get_db(db_path))
    try:
        agent = service.create_agent(name=name, email=email, mobile=mobile, password=password)
    except LeadSplitError as e:
        _fail(e)
    console.print(f"[green]✓ Created agent[/green] {agent.name} [dim]({agent.id})[/dim]")


@agents.command("list")
@click.option("--db", "db_path", help="Custom database path")
def list_agents(db_path: Optional[str]):
    """List agents in creation order."""
    service = get_agent_service(get_db(db_path))
    rows = service.list_agents()

    if not rows:
        console.print("[yellow]No agents yet[/yellow]")
        return

    table = Table(title=f"Agents ({len(rows)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email")
    table.add_column("Mobile")
    table.add_column("Created")

    for i, agent in enumerate(rows, start=1):
        table.add_row(
            str(i),
            agent.id,
            agent.name,
            agent.email,
            agent.mobile,
            agent.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@agents.command("update")
@click.argument("agent_id")
@click.option("--name", "-n")
@click.option("--email", "-e")
@click.option("--mobile", "-m")
@click.option("--password", "-p")
@click.option("--db", "db_path", help="Custom database path")
def update_agent(agent_id: str, name, email, mobile, password, db_path: Optional[str]):
    """Update an agent's details."""
    service = get_agent_service(get_db(db_path))
    try:
        agent = service.update_agent(agent_id, name=name, email=email, mobile=mobile, password=password)
    except LeadSplitError as e:
        _fail(e)
    console.print(f"[green]✓ Updated agent[/green] {agent.name}")


@agents.command("remove")
@click.argument("agent_id")
@click.option("--db", "db_path", help="Custom database path")
def remove_agent(agent_id: str, db_path: Optional[str]):
    """Delete an agent (its assigned lists are kept)."""
    service = get_agent_service(get_db(db_path))
    try:
        service.delete_agent(agent_id)
    except LeadSplitError as e:
        _fail(e)
    console.print(f"[green]✓ Deleted agent[/green] {agent_id}")


# ============================================================================
# DISTRIBUTION
# ============================================================================

@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--db", "db_path", help="Custom database path")
def distribute(path: str, db_path: Optional[str]):
    """Split a .csv/.xlsx/.xls lead file across the first five agents.

    \b
    Examples:
      leadsplit distribute ./leads.csv
      leadsplit distribute ./march.xlsx --db ./team.db
    """
    db = get_db(db_path)
    service = UploadService(AgentDirectory(db), ListStore(db))

    try:
        summary = service.process_file(Path(path), detect_format(path))
    except LeadSplitError as e:
        _fail(e)

    table = Table(title=f"Distributed {summary.total_records} records")
    table.add_column("Agent", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Records", justify="right", style="bold")
    for allocation in summary.allocations:
        table.add_row(allocation.agent_name, allocation.agent_id, str(allocation.count))

    console.print(table)


@cli.command()
@click.option("--db", "db_path", help="Custom database path")
def lists(db_path: Optional[str]):
    """Show persisted lists grouped by agent."""
    store = ListStore(get_db(db_path))
    groups = store.grouped_by_agent()

    if not groups:
        console.print("[yellow]No lists yet[/yellow]")
        return

    for group in groups:
        title = group.agent.name if group.agent else f"[dim]deleted agent {group.agent_id}[/dim]"
        table = Table(title=f"{title} ({group.count})")
        table.add_column("First Name", style="cyan")
        table.add_column("Phone")
        table.add_column("Notes", max_width=40)
        for entry in group.entries:
            table.add_row(entry.first_name, entry.phone, entry.notes)
        console.print(table)


@cli.command()
@click.option("--host", default=None, help="Bind address")
@click.option("--port", type=int, default=None, help="Port")
def serve(host: Optional[str], port: Optional[int]):
    """Run the HTTP API (needs LEADSPLIT_API_SECRET)."""
    import uvicorn
    from ..website_api.config import Settings
    from ..website_api.main import create_app

    overrides = {}
    if host:
        overrides["host"] = host
    if port:
        overrides["port"] = port
    try:
        settings = Settings.from_env(**overrides)
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    cli()
