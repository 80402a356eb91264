"""ControlGap CLI - Typer-based command line interface."""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from controlgap.catalog import STANDARD_CONTROLS
from controlgap.config import (
    GapAnalysisSettings,
    OrganizationFlags,
    OrganizationInfo,
    OrganizationSettings,
    PartialCoveragePolicy,
)
from controlgap.engine.applicability import filter_applicable
from controlgap.engine.profile import derive_profile
from controlgap.models.profile import MaturityAnswers, parse_profile
from controlgap.models.rules import OrgFlag, dump_rule

app = typer.Typer(
    name="controlgap",
    help="Maturity-driven control applicability, gap detection and to-be control synthesis",
    no_args_is_help=True,
)

console = Console()

_TYPE_STYLES = {
    "preventive": "green",
    "detective": "blue",
    "corrective": "yellow",
}


@app.command()
def init(
    name: Annotated[
        str, typer.Option("--name", "-n", help="Organization name")
    ] = "My Organization",
    output: Annotated[Path, typer.Option("--output", "-o", help="Output file path")] = Path(
        "controlgap.yaml"
    ),
    flag: Annotated[
        list[OrgFlag] | None, typer.Option("--flag", help="Organization-wide flag to assert")
    ] = None,
    partial: Annotated[
        PartialCoveragePolicy,
        typer.Option("--partial", help="How partially covered controls are treated"),
    ] = PartialCoveragePolicy.AS_MISSING,
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite existing file")] = False,
) -> None:
    """Write an organization settings file."""
    if output.exists() and not force:
        console.print(f"[red]Error:[/red] File {output} already exists. Use --force to overwrite.")
        raise typer.Exit(1)

    flags = {f.value: True for f in flag or []}
    settings = OrganizationSettings(
        organization=OrganizationInfo(name=name, flags=OrganizationFlags(**flags)),
        gap_analysis=GapAnalysisSettings(partial_coverage=partial),
    )
    settings.to_yaml(output)

    console.print(f"[green]Created[/green] {output}")
    console.print("\nNext steps:")
    console.print(f"  1. Export CONTROLGAP_ORG_CONFIG={output} before starting the server")
    console.print("  2. Run 'controlgap db init' and 'controlgap db seed'")
    console.print("  3. Run 'controlgap serve'")


@app.command()
def profile(
    automation: Annotated[
        str | None, typer.Option("--automation", "-a", help="manual, erp or automated")
    ] = None,
    structure: Annotated[
        str | None,
        typer.Option("--structure", "-s", help="centralized or decentralized"),
    ] = None,
    impact: Annotated[
        str | None, typer.Option("--impact", "-i", help="Failure impact, e.g. high")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Derive the maturity profile of a set of questionnaire answers."""
    answers = MaturityAnswers(
        automation=automation, process_structure=structure, failure_impact=impact
    )
    tags = derive_profile(answers)

    if json_output:
        print(json.dumps([t.value for t in tags]))
        return

    console.print(f"[blue]Profile:[/blue] {', '.join(tags)}")


@app.command()
def catalog(
    profile_tags: Annotated[
        str | None,
        typer.Option("--profile", "-p", help="Comma-separated profile tags to filter by"),
    ] = None,
    flag: Annotated[
        list[OrgFlag] | None, typer.Option("--flag", help="Organizational flag to assert")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List the seed catalog, optionally only entries applicable to a profile."""
    controls = list(STANDARD_CONTROLS)
    if profile_tags is not None:
        controls = filter_applicable(controls, parse_profile(profile_tags), set(flag or []))

    if json_output:
        print(json.dumps([c.model_dump(mode="json", exclude={"id"}) for c in controls], indent=2))
        return

    table = Table(title=f"Standard Controls ({len(controls)})")
    table.add_column("Domain")
    table.add_column("Control")
    table.add_column("Type")
    table.add_column("Frequency")
    table.add_column("Applies when")

    for control in controls:
        style = _TYPE_STYLES.get(control.control_type.value, "white")
        table.add_row(
            control.domain_tag.value,
            control.control_name,
            f"[{style}]{control.control_type.value}[/{style}]",
            control.typical_frequency or "",
            dump_rule(control.rule),
        )

    console.print(table)


@app.command()
def serve(
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to organization settings")
    ] = None,
    host: Annotated[str, typer.Option("--host", "-h", help="Host to bind to")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port to listen on")] = 8080,
    reload: Annotated[bool, typer.Option("--reload", help="Enable auto-reload")] = False,
) -> None:
    """Start the ControlGap web server."""
    import os

    import uvicorn

    if config is None:
        config_path = Path(os.environ.get("CONTROLGAP_ORG_CONFIG", "controlgap.yaml"))
    else:
        config_path = config

    os.environ["CONTROLGAP_ORG_CONFIG"] = str(config_path.absolute())

    console.print("[green]Starting ControlGap server[/green]")
    console.print(f"  Organization settings: {config_path}")
    console.print(f"  URL: http://{host}:{port}")
    console.print(f"  API Docs: http://{host}:{port}/docs")
    console.print()

    uvicorn.run(
        "controlgap.api.server:app",
        host=host,
        port=port,
        reload=reload,
    )


# Database subcommands
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")


@db_app.command("migrate")
def db_migrate(
    db_path: Annotated[Path | None, typer.Option("--db", "-d", help="Database file path")] = None,
    revision: Annotated[str, typer.Option("--revision", "-r", help="Target revision")] = "head",
) -> None:
    """Run database migrations using Alembic."""
    import os

    if db_path:
        os.environ["CONTROLGAP_DB"] = str(db_path)

    from alembic import command
    from alembic.config import Config

    # Find alembic.ini relative to package
    alembic_ini = Path(__file__).parent.parent.parent / "alembic.ini"
    if not alembic_ini.exists():
        alembic_ini = Path("alembic.ini")

    if not alembic_ini.exists():
        console.print("[red]Error:[/red] alembic.ini not found")
        raise typer.Exit(1)

    alembic_cfg = Config(str(alembic_ini))

    console.print(f"[blue]Running migrations to revision:[/blue] {revision}")
    command.upgrade(alembic_cfg, revision)
    console.print("[green]Migrations applied successfully[/green]")


@db_app.command("init")
def db_init(
    db_path: Annotated[Path | None, typer.Option("--db", "-d", help="Database file path")] = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Drop and recreate tables")] = False,
) -> None:
    """Initialize the database and create all tables."""
    import asyncio
    import os

    from controlgap.db import close_db, init_db
    from controlgap.db.database import get_database_url

    if db_path:
        os.environ["CONTROLGAP_DB"] = str(db_path)

    db_url = get_database_url()
    db_file = db_url.replace("sqlite+aiosqlite:///", "")

    async def _init():
        if force and "sqlite" in db_url and Path(db_file).exists():
            console.print(f"[yellow]Dropping existing database:[/yellow] {db_file}")
            Path(db_file).unlink()

        await init_db(db_url)
        console.print(f"[green]Database initialized:[/green] {db_file}")

        from controlgap.db.models import Base

        tables = list(Base.metadata.tables.keys())
        console.print(f"  Tables: {', '.join(tables)}")

        await close_db()

    asyncio.run(_init())


@db_app.command("seed")
def db_seed(
    db_path: Annotated[Path | None, typer.Option("--db", "-d", help="Database file path")] = None,
) -> None:
    """Load the standard control catalog, skipping controls already present."""
    import asyncio
    import os

    from controlgap.db import close_db, init_db
    from controlgap.db.database import get_database_url, session_scope
    from controlgap.services import seed_catalog

    if db_path:
        os.environ["CONTROLGAP_DB"] = str(db_path)

    async def _seed() -> int:
        await init_db(get_database_url())
        try:
            async with session_scope() as session:
                added = await seed_catalog(session)
        finally:
            await close_db()
        return added

    added = asyncio.run(_seed())
    skipped = len(STANDARD_CONTROLS) - added
    console.print(f"[green]Seeded {added} standard controls[/green] ({skipped} already present)")


@db_app.command("status")
def db_status(
    db_path: Annotated[Path | None, typer.Option("--db", "-d", help="Database file path")] = None,
) -> None:
    """Show database status and statistics."""
    import asyncio
    import os

    from sqlalchemy import text

    from controlgap.db import close_db, init_db
    from controlgap.db.database import get_database_url, get_engine
    from controlgap.db.models import Base

    if db_path:
        os.environ["CONTROLGAP_DB"] = str(db_path)

    db_url = get_database_url()
    is_sqlite = "sqlite" in db_url
    db_file = db_url.replace("sqlite+aiosqlite:///", "")

    if is_sqlite and not Path(db_file).exists():
        console.print(f"[red]Database not found:[/red] {db_file}")
        console.print("Run 'controlgap db init' to create the database.")
        raise typer.Exit(1)

    async def _status():
        await init_db(db_url)

        engine = get_engine()
        async with engine.connect() as conn:
            table = Table(title="Database Status")
            table.add_column("Table")
            table.add_column("Count", justify="right")

            for tbl in Base.metadata.tables:
                result = await conn.execute(text(f"SELECT COUNT(*) FROM {tbl}"))
                table.add_row(tbl, str(result.scalar()))

            console.print(table)

        await close_db()

    console.print(f"[blue]Database:[/blue] {db_file if is_sqlite else db_url.split('@')[-1]}")
    if is_sqlite:
        console.print(f"[blue]Size:[/blue] {Path(db_file).stat().st_size / 1024:.1f} KB")
    console.print()

    asyncio.run(_status())


if __name__ == "__main__":
    app()
