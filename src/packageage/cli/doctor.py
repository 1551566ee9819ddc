"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from packageage.adapters.host_settings import is_installed
from packageage.adapters.http_client import build_async_client
from packageage.cli.ui_components import build_settings_table
from packageage.core.config import AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return response.is_success, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or exc.__class__.__name__


@app.command()
def run() -> None:
    """Show the effective configuration and probe the registry."""

    settings = AppSettings()
    table = build_settings_table(settings)

    hook_path = settings.host_settings_path
    if is_installed(hook_path):
        table.add_row("Hook", "OK", f"registered in {hook_path}")
    else:
        table.add_row("Hook", "MISSING", f"run `packageage install` ({hook_path})")

    # Connectivity (best-effort)
    probe_url = settings.registry_url.rstrip("/") + "/left-pad"
    ok_http, detail_http = asyncio.run(_check_http(probe_url, settings))
    table.add_row("Registry connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Without registry access installs are still approved, just without warnings."
        )


@app.command()
def configure() -> None:
    """Interactive threshold setup (stored in the user config .env)."""

    settings = AppSettings()

    stale = typer.prompt("Stale after (days)", default=settings.stale_threshold_days, type=int)
    abandoned = typer.prompt("Abandoned after (days)", default=settings.abandoned_threshold_days, type=int)
    registry_url = typer.prompt("Registry URL", default=settings.registry_url).strip()

    if stale < 0 or abandoned < stale:
        raise typer.BadParameter("thresholds must satisfy 0 <= stale <= abandoned")
    if not registry_url:
        raise typer.BadParameter("registry URL is required")

    env_path = write_user_env_vars(
        {
            "PACKAGEAGE_STALE_THRESHOLD_DAYS": str(stale),
            "PACKAGEAGE_ABANDONED_THRESHOLD_DAYS": str(abandoned),
            "PACKAGEAGE_REGISTRY_URL": registry_url,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
