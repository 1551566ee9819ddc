"""packageage command-line interface.

Without a subcommand the process behaves as the PreToolUse hook: one JSON
event on stdin, one JSON decision on stdout, warnings mirrored on stderr.
"""

from __future__ import annotations

import asyncio
import sys
from typing import NoReturn, TextIO

import typer
from rich.console import Console

from packageage import __version__
from packageage.adapters.hook_io import read_event, write_decision
from packageage.adapters.host_settings import (
    HOOK_NAME,
    install_hook,
    is_installed,
    uninstall_hook,
)
from packageage.adapters.npm_registry import NpmRegistryClient
from packageage.cli import doctor
from packageage.cli.ui_components import render_check_lines
from packageage.core.config import AppSettings
from packageage.core.domain.models import HookDecision
from packageage.core.errors import HostSettingsError, InputMalformedError
from packageage.core.interfaces.registry import MetadataFetcher
from packageage.core.logging_config import get_logger, setup_logging
from packageage.core.services.classifier import RiskThresholds, classify
from packageage.core.services.gate import GateHooks, GateOptions, evaluate

app = typer.Typer(
    help="Warn about stale, abandoned or deprecated packages before they are installed.",
    add_completion=False,
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _mirror_advisory(reason: str) -> None:
    _err_console.print(f"[{HOOK_NAME}] {reason}", markup=False, highlight=False, soft_wrap=True)


def run_hook(
    stdin: TextIO,
    stdout: TextIO,
    *,
    settings: AppSettings | None = None,
    fetcher: MetadataFetcher | None = None,
    verbose: bool = False,
) -> HookDecision:
    """Run one hook cycle. Always writes an approve decision to `stdout`."""

    decision = HookDecision()
    try:
        settings = settings or AppSettings()
        setup_logging(settings.log_level, verbose=verbose)
        fetcher = fetcher or NpmRegistryClient(settings)

        payload: object = None
        try:
            payload = read_event(stdin)
        except InputMalformedError as exc:
            get_logger().debug("ignoring hook input: %s", exc)

        result = asyncio.run(
            evaluate(
                payload,
                fetcher=fetcher,
                options=GateOptions.from_settings(settings),
                hooks=GateHooks(advisory=_mirror_advisory),
            )
        )
        decision = result.decision
    except Exception:
        get_logger().exception("%s failed; approving without advisory", HOOK_NAME)
        decision = HookDecision()

    write_decision(decision, stdout)
    return decision


def _version_callback(value: bool) -> None:
    if value:
        _console.print(f"{HOOK_NAME} {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug diagnostics on stderr."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Run as a hook when no command is given."""

    setup_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        run_hook(sys.stdin, sys.stdout, verbose=verbose)


@app.command()
def check(package: str = typer.Argument(..., help="Package name, e.g. left-pad or @scope/pkg.")) -> None:
    """Manually check a package's age and deprecation status."""

    settings = AppSettings()
    _console.print(f"Checking {package}...", markup=False)

    lookup = asyncio.run(NpmRegistryClient(settings).fetch_metadata(package))
    if lookup.metadata is None:
        if lookup.error == "HTTP 404":
            _err_console.print(f"Package not found: {package}", markup=False)
        else:
            _err_console.print(f"Error checking {package}: {lookup.error}", markup=False)
        raise typer.Exit(code=1)

    classification = classify(lookup.metadata, RiskThresholds.from_settings(settings))
    for line in render_check_lines(lookup.metadata, classification):
        _console.print(line, soft_wrap=True)


def _settings_error(exc: HostSettingsError) -> NoReturn:
    _err_console.print(f"Error: {exc}", markup=False)
    _err_console.print("The settings file was left unchanged. Fix it and run the command again.")
    raise typer.Exit(code=1)


@app.command()
def install() -> None:
    """Register the hook in the host settings."""

    path = AppSettings().host_settings_path
    try:
        added = install_hook(path)
    except HostSettingsError as exc:
        _settings_error(exc)
    if not added:
        _console.print(f"{HOOK_NAME} is already installed")
        return
    _console.print(f"[green]{HOOK_NAME} installed successfully[/green] ({path})")
    _console.print("Hook will check package age before npm/bun/yarn/pnpm install commands")


@app.command()
def uninstall() -> None:
    """Remove the hook from the host settings."""

    path = AppSettings().host_settings_path
    try:
        removed = uninstall_hook(path)
    except HostSettingsError as exc:
        _settings_error(exc)
    if not removed:
        _console.print(f"{HOOK_NAME} is not installed")
        return
    _console.print(f"[green]{HOOK_NAME} uninstalled successfully[/green]")


@app.command()
def status() -> None:
    """Report whether the hook is registered."""

    path = AppSettings().host_settings_path
    state = "installed" if is_installed(path) else "not installed"
    _console.print(f"{HOOK_NAME} is {state}")


def run() -> None:
    app()
