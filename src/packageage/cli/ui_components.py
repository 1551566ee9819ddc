"""CLI UI components (Rich).

Keeps command logic apart from presentation details.
"""

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from packageage.core.config import AppSettings
from packageage.core.domain.models import (
    AgeClassification,
    Classification,
    RegistryMetadata,
)

_STATUS_STYLES: dict[AgeClassification, str] = {
    AgeClassification.ACTIVE: "green",
    AgeClassification.STALE: "yellow",
    AgeClassification.ABANDONED: "bold red",
}


def render_check_lines(metadata: RegistryMetadata, classification: Classification) -> list[Text]:
    """Human-readable lines for `packageage check`."""

    lines: list[Text] = []
    if metadata.latest_version:
        lines.append(Text(f"  Latest version: {metadata.latest_version}"))

    if metadata.last_modified_at is not None:
        status = classification.age
        line = Text(
            f"  Last updated: {metadata.last_modified_at.isoformat()} "
            f"({classification.days_since_update} days ago) - "
        )
        line.append(status.value, style=_STATUS_STYLES[status])
        lines.append(line)
    else:
        lines.append(Text("  Last updated: unknown", style="dim"))

    if classification.deprecated:
        message = classification.deprecation_message or "yes"
        lines.append(Text(f"  DEPRECATED: {message}", style="bold red"))
    return lines


def build_settings_table(settings: AppSettings) -> Table:
    table = Table(title="packageage Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Registry", "OK", settings.registry_url)
    table.add_row("Request timeout", "OK", f"{settings.http_timeout_seconds:g}s per package")
    table.add_row("Fan-out", "OK", f"{settings.max_concurrency} in flight, {settings.total_timeout_seconds:g}s total")
    table.add_row(
        "Thresholds",
        "OK",
        f"stale > {settings.stale_threshold_days}d, abandoned > {settings.abandoned_threshold_days}d",
    )
    table.add_row("Shell tools", "OK", ", ".join(settings.shell_tool_names) or "(none)")
    return table
