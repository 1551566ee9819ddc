"""Hook decision orchestration.

This module owns the whole decision cycle for one PreToolUse event:
parse the event, extract packages, fan out registry lookups, classify and
compose the advisory. The CLI only does stdin/stdout; printing and other
side effects reach it through `GateHooks` callbacks.

The outcome is always an approve decision. Failures anywhere in the cycle
degrade to a missing or partial advisory, never to a block.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Mapping, Sequence

from pydantic import ValidationError

from packageage.core.config import AppSettings
from packageage.core.domain.models import (
    Classification,
    HookDecision,
    InvocationEvent,
    RegistryLookup,
)
from packageage.core.errors import InputMalformedError
from packageage.core.interfaces.registry import MetadataFetcher
from packageage.core.logging_config import get_logger
from packageage.core.services.advisory import compose_advisory
from packageage.core.services.classifier import RiskThresholds, classify
from packageage.core.services.command_parser import parse_install_command


@dataclass
class GateOptions:
    """Policy knobs for one evaluation."""

    thresholds: RiskThresholds = field(default_factory=RiskThresholds)
    max_concurrency: int = 8
    total_timeout_seconds: float = 10.0
    shell_tool_names: frozenset[str] = frozenset({"Bash"})

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "GateOptions":
        return cls(
            thresholds=RiskThresholds.from_settings(settings),
            max_concurrency=settings.max_concurrency,
            total_timeout_seconds=settings.total_timeout_seconds,
            shell_tool_names=frozenset(settings.shell_tool_names),
        )


@dataclass
class GateHooks:
    """Optional callbacks for UI layers."""

    advisory: Callable[[str], None] | None = None


@dataclass
class GateResult:
    """Output of one evaluation."""

    decision: HookDecision = field(default_factory=HookDecision)
    packages: list[str] = field(default_factory=list)
    lookups: list[RegistryLookup] = field(default_factory=list)
    classifications: list[Classification] = field(default_factory=list)


def parse_event(payload: object) -> InvocationEvent:
    """Validate the decoded stdin payload into an `InvocationEvent`."""

    if not isinstance(payload, Mapping):
        raise InputMalformedError("hook input is not a JSON object")
    try:
        return InvocationEvent.model_validate(payload)
    except ValidationError as exc:
        raise InputMalformedError(str(exc)) from exc


async def fetch_all(
    fetcher: MetadataFetcher,
    names: Sequence[str],
    *,
    max_concurrency: int = 8,
    total_timeout_seconds: float = 10.0,
) -> list[RegistryLookup]:
    """Look up every name concurrently, one result slot per name.

    At most `max_concurrency` fetches run at once. Whatever has not settled
    when `total_timeout_seconds` expires is cancelled and reported unknown.
    """

    if not names:
        return []

    logger = get_logger()
    sem = asyncio.Semaphore(max(1, max_concurrency))

    async def fetch_one(name: str) -> RegistryLookup:
        async with sem:
            try:
                return await fetcher.fetch_metadata(name)
            except Exception as exc:
                return RegistryLookup.unknown(name, str(exc) or exc.__class__.__name__)

    tasks = [asyncio.create_task(fetch_one(name)) for name in names]
    _, pending = await asyncio.wait(tasks, timeout=total_timeout_seconds)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)

    lookups: list[RegistryLookup] = []
    for name, task in zip(names, tasks):
        if task in pending or task.cancelled():
            lookups.append(RegistryLookup.unknown(name, "deadline exceeded"))
        else:
            lookups.append(task.result())

    for lookup in lookups:
        if not lookup.ok:
            logger.debug("registry lookup for %s unavailable: %s", lookup.package_name, lookup.error)
    return lookups


async def evaluate(
    payload: object,
    *,
    fetcher: MetadataFetcher,
    options: GateOptions | None = None,
    hooks: GateHooks | None = None,
    now: datetime | None = None,
) -> GateResult:
    """Decide on one hook event. Never raises for bad input or registry failures."""

    options = options or GateOptions()
    hooks = hooks or GateHooks()
    logger = get_logger()

    try:
        event = parse_event(payload)
    except InputMalformedError as exc:
        logger.debug("ignoring malformed hook input: %s", exc)
        return GateResult()

    if event.tool_name not in options.shell_tool_names:
        return GateResult()

    command = event.raw_command
    if not command:
        return GateResult()

    references = parse_install_command(command)
    if not references:
        return GateResult()

    names = list(dict.fromkeys(ref.resolved_name for ref in references))
    lookups = await fetch_all(
        fetcher,
        names,
        max_concurrency=options.max_concurrency,
        total_timeout_seconds=options.total_timeout_seconds,
    )

    classifications = [
        classify(lookup.metadata, options.thresholds, now=now)
        for lookup in lookups
        if lookup.metadata is not None
    ]
    reason = compose_advisory(classifications)
    if reason:
        logger.info("advisory for %s", ", ".join(names))
        if hooks.advisory:
            hooks.advisory(reason)

    return GateResult(
        decision=HookDecision(reason=reason),
        packages=names,
        lookups=lookups,
        classifications=classifications,
    )
