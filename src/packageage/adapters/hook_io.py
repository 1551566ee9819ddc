"""Hook wire protocol (stdin/stdout JSON).

- Input: one JSON object read once from stdin.
- Output: exactly one JSON object `{"decision": "approve", "reason"?: str}`.
"""

from __future__ import annotations

import json
from typing import Any, TextIO

from packageage.core.domain.models import HookDecision
from packageage.core.errors import InputMalformedError


def read_event(stream: TextIO) -> dict[str, Any]:
    """Read and decode the hook payload; raise `InputMalformedError` when unusable."""

    try:
        raw = stream.read()
    except (OSError, ValueError) as exc:
        raise InputMalformedError(f"cannot read hook input: {exc}") from exc

    text = raw.strip()
    if not text:
        raise InputMalformedError("empty hook input")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputMalformedError(f"hook input is not JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise InputMalformedError("hook input is not a JSON object")
    return payload


def write_decision(decision: HookDecision, stream: TextIO) -> None:
    """Write the decision as a single JSON line; `reason` is omitted when empty."""

    payload = decision.model_dump(mode="json", exclude_none=True)
    stream.write(json.dumps(payload, ensure_ascii=False) + "\n")
    stream.flush()
