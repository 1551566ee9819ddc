"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation at the edges (hook stdin, registry JSON) without coupling
  the core to I/O libraries.
- Stable JSON serialization for the decision written back to the host.

Note:
- These models describe *what* the information is, not *how* it is obtained.
- Everything here lives for a single hook invocation; nothing is persisted.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class ToolInput(BaseModel):
    """The `tool_input` object sent by the host; only `command` is read."""

    model_config = ConfigDict(extra="allow", frozen=True)

    command: str | None = Field(
        default=None,
        description="Shell command about to be executed.",
    )


class InvocationEvent(BaseModel):
    """One PreToolUse event as read from stdin.

    Consumed once by the gate and discarded.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    session_id: str | None = Field(
        default=None,
        description="Host session identifier.",
    )
    working_directory: str | None = Field(
        default=None,
        alias="cwd",
        description="Working directory of the host session.",
    )
    tool_name: str | None = Field(
        default=None,
        description="Name of the tool being invoked (e.g. 'Bash').",
    )
    tool_input: ToolInput = Field(
        default_factory=ToolInput,
        description="Raw tool arguments.",
    )

    @field_validator("session_id", "working_directory", "tool_name", mode="before")
    @classmethod
    def _as_text(cls, value: object) -> str | None:
        # Identifiers only; `tool_input.command` is the one strictly typed field.
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @property
    def raw_command(self) -> str | None:
        return self.tool_input.command


class PackageReference(BaseModel):
    """A package named on an install command line."""

    model_config = ConfigDict(frozen=True)

    raw_token: str = Field(
        ...,
        min_length=1,
        description="Token as written on the command line (e.g. 'lodash@^4').",
    )
    resolved_name: str = Field(
        ...,
        min_length=1,
        description="Registry name with any trailing version constraint removed.",
    )

    @field_validator("resolved_name")
    @classmethod
    def _not_a_path(cls, value: str) -> str:
        if value.startswith("."):
            raise ValueError("relative paths are not registry packages")
        return value


class RegistryMetadata(BaseModel):
    """Publication metadata for one package, as reported by the registry.

    Missing registry fields stay `None`: an absent `time.modified` never
    defaults to "now".
    """

    model_config = ConfigDict(frozen=True)

    package_name: str = Field(..., min_length=1)
    latest_version: str | None = Field(
        default=None,
        description="Version pointed to by `dist-tags.latest`.",
    )
    last_modified_at: datetime | None = Field(
        default=None,
        description="`time.modified`: most recent publish across all versions.",
    )
    deprecated: bool = Field(
        default=False,
        description="Whether the latest version carries a deprecation marker.",
    )
    deprecation_message: str | None = Field(
        default=None,
        description="Deprecation text when the registry provides one.",
    )


class RegistryLookup(BaseModel):
    """Outcome of one registry fetch: metadata, or an 'unknown' marker."""

    model_config = ConfigDict(frozen=True)

    package_name: str
    metadata: RegistryMetadata | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.metadata is not None

    @classmethod
    def found(cls, metadata: RegistryMetadata) -> "RegistryLookup":
        return cls(package_name=metadata.package_name, metadata=metadata)

    @classmethod
    def unknown(cls, package_name: str, error: str) -> "RegistryLookup":
        return cls(package_name=package_name, error=error)


class AgeClassification(str, Enum):
    """Age bucket derived from days since the last publish."""

    ACTIVE = "ACTIVE"
    STALE = "STALE"
    ABANDONED = "ABANDONED"


class Classification(BaseModel):
    """Risk verdict for one package.

    `deprecated` is independent from `age` and can co-occur with any bucket.
    """

    model_config = ConfigDict(frozen=True)

    package_name: str
    age: AgeClassification = AgeClassification.ACTIVE
    days_since_update: int | None = Field(
        default=None,
        description="Whole days since `last_modified_at`; None when unknown.",
    )
    deprecated: bool = False
    deprecation_message: str | None = None

    @property
    def flagged(self) -> bool:
        return self.deprecated or self.age is not AgeClassification.ACTIVE


class HookDecision(BaseModel):
    """Decision written to stdout. Always 'approve'; `reason` is advisory."""

    decision: Literal["approve"] = "approve"
    reason: str | None = Field(
        default=None,
        description="Advisory text shown to the operator, if any.",
    )
