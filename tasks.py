"""Invoke tasks for CharterBox application management."""

import sys

from invoke import task
from invoke.context import Context


@task
def start(ctx: Context, host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """Start the CharterBox FastAPI server.

    Args:
        ctx: Invoke context
        host: Host to bind to (default: 0.0.0.0)
        port: Port to bind to (default: 8000)
        reload: Enable auto-reload for development
    """
    cmd = f"uv run uvicorn charterbox.main:app --host {host} --port {port}"
    if reload:
        cmd += " --reload"

    try:
        ctx.run(cmd, pty=True)
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)


@task
def test(ctx: Context, verbose: bool = False, coverage: bool = False) -> None:
    """Run the test suite.

    Args:
        ctx: Invoke context
        verbose: Enable verbose output
        coverage: Run with coverage report
    """
    cmd = "uv run pytest"
    if verbose:
        cmd += " -v"
    if coverage:
        cmd += " --cov=charterbox --cov-report=term-missing"
    ctx.run(cmd, pty=True)


@task(name="import")
def import_file(ctx: Context, path: str, source: str = "DEFAULT", dry_run: bool = False) -> None:
    """Import a booking spreadsheet.

    Args:
        ctx: Invoke context
        path: CSV, TSV or XLSX file to import
        source: Import source tag (DEFAULT, MASTER, RUZINN, RAYNA, GYG)
        dry_run: Parse and report only, do not save
    """
    cmd = f"uv run charterbox-import {path} --source {source}"
    if dry_run:
        cmd += " --dry-run"
    ctx.run(cmd, pty=True)


@task(name="init-db")
def init_db(ctx: Context) -> None:
    """Initialize the database and create collection indexes."""
    print("Initializing database...")
    ctx.run(
        "uv run python -c 'import asyncio; from charterbox.database import init_db; asyncio.run(init_db())'"
    )
    print("Database initialized successfully")


@task
def clean(ctx: Context) -> None:
    """Clean up temporary files.

    Args:
        ctx: Invoke context
    """
    # Clean Python cache
    for pattern in ["__pycache__", "*.pyc", "*.pyo", ".pytest_cache"]:
        ctx.run(f"find . -name '{pattern}' -exec rm -rf {{}} + 2>/dev/null || true", warn=True)

    # Clean build artifacts
    for path in ["build", "dist", "*.egg-info", ".eggs"]:
        ctx.run(f"rm -rf {path} 2>/dev/null || true", warn=True)

    print("Cleanup complete")
