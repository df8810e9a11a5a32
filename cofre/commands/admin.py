"""Admin commands for backup, init and configuration."""

import shutil
import sqlite3
import sys
import tomllib
from datetime import datetime
from pathlib import Path

from cofre.commands.common import console
from cofre.config import create_default_config, get_config_path, load_settings, set_value
from cofre.store.schema import get_db_path, init_database

CONFIG_KEYS = {
    "currency": str,
    "pix_key": str,
    "projection.horizon_occurrences": int,
    "reports.forecast_months": int,
    "reports.forecast_steps": int,
    "reports.dashboard_months": int,
}


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Backup database and configuration files."""
    db_path = get_db_path()
    config_path = get_config_path()

    if not db_path.exists():
        console.print("[red]Database not found. Run 'cofre init' first.[/red]", style="bold")
        sys.exit(1)

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = Path.home() / ".cofre" / "backups"

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    db_backup = backup_dir / f"cofre_{timestamp}.db"
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)


def run_migration(db_path: Path) -> None:
    """Run database migrations on existing database."""
    console.print(f"[cyan]Running migrations on {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Migrations complete")
    console.print("[dim]Database schema is up to date[/dim]")


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database and config."""
    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False, migrate: bool = False) -> None:
    """Initialize cofre database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Migration path: update existing database only
        if migrate:
            if not db_exists:
                console.print("[red]No database found to migrate[/red]", style="bold")
                console.print(f"[dim]Expected location: {db_path}[/dim]")
                sys.exit(1)
            run_migration(db_path)
            return

        # Guard: refuse to overwrite without force flag
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'cofre init --force' to overwrite[/yellow]")
            console.print("[yellow]Or 'cofre init --migrate' to update database schema only[/yellow]")
            sys.exit(1)

        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def config_command(key: str | None = None, value: str | None = None) -> None:
    """Show settings, or set one setting."""
    if key is None:
        try:
            settings = load_settings()
        except tomllib.TOMLDecodeError as e:
            console.print(f"[red]Invalid config file: {e}[/red]")
            sys.exit(1)
        console.print(f"[dim]{get_config_path()}[/dim]")
        console.print(f"  currency = {settings.currency}", markup=False)
        console.print(f"  pix_key = {settings.pix_key or '-'}", markup=False)
        console.print(f"  projection.horizon_occurrences = {settings.horizon_occurrences}")
        console.print(f"  reports.forecast_months = {settings.forecast_months}")
        console.print(f"  reports.forecast_steps = {settings.forecast_steps}")
        console.print(f"  reports.dashboard_months = {settings.dashboard_months}")
        return

    if key not in CONFIG_KEYS:
        console.print(f"[red]Unknown setting '{key}'[/red]")
        console.print(f"[dim]Known settings: {', '.join(CONFIG_KEYS)}[/dim]")
        sys.exit(1)

    if value is None:
        console.print(f"[red]Missing value for '{key}'[/red]")
        sys.exit(1)

    if CONFIG_KEYS[key] is int:
        try:
            parsed: str | int = int(value)
        except ValueError:
            console.print(f"[red]'{key}' must be a whole number[/red]")
            sys.exit(1)
        if parsed <= 0:
            console.print(f"[red]'{key}' must be positive[/red]")
            sys.exit(1)
    else:
        parsed = value

    try:
        set_value(key, parsed)
    except (OSError, tomllib.TOMLDecodeError) as e:
        console.print(f"[red]Could not update config: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓[/green] {key} = {parsed}")
