"""Install-command recognition.

Turns a raw shell command into the list of registry packages it would
install. Pure functions only: no I/O, same input always gives the same list.
"""

from __future__ import annotations

import re
from typing import Mapping

from packageage.core.domain.models import PackageReference

INSTALL_VERBS: frozenset[str] = frozenset({"install", "add", "i"})

# manager -> verbs that add packages
INSTALL_GRAMMAR: Mapping[str, frozenset[str]] = {
    "npm": INSTALL_VERBS,
    "bun": INSTALL_VERBS,
    "yarn": INSTALL_VERBS,
    "pnpm": INSTALL_VERBS,
}

# `@` followed by a digit or a range operator starts a version constraint.
# A leading scope (`@types/node`) is followed by a letter and is kept.
_VERSION_SUFFIX_RE = re.compile(r"@[\^~><=\d].*$")

# A lone `&` backgrounds a command; `2>&1` and `&>` are redirections.
_SEGMENT_SEPARATOR_RE = re.compile(r"&&|\|\||;|\||\n|(?<![<>])&(?!>)")

# Subshell and group delimiters around a simple command.
_SEGMENT_EDGE_CHARS = " \t\r\n(){}"


def split_segments(command: str) -> list[str]:
    """Split a command line into simple commands.

    Separators are `&&`, `||`, `;`, `|`, a newline and a lone `&`. Each
    segment is trimmed of surrounding whitespace and `(`, `)`, `{`, `}`.
    """

    segments = [part.strip(_SEGMENT_EDGE_CHARS) for part in _SEGMENT_SEPARATOR_RE.split(command)]
    return [segment for segment in segments if segment]


def strip_version(token: str) -> str:
    """Remove a trailing `@<version>` constraint from a package token."""

    return _VERSION_SUFFIX_RE.sub("", token, count=1)


def _install_arguments(segment: str) -> list[str] | None:
    tokens = segment.split()
    if len(tokens) < 2:
        return None
    manager, verb = tokens[0], tokens[1]
    verbs = INSTALL_GRAMMAR.get(manager)
    if verbs is None or verb not in verbs:
        return None
    return tokens[2:]


def is_install_command(command: str) -> bool:
    """True when any simple command in `command` is `<manager> <install verb> ...`."""

    return any(_install_arguments(segment) is not None for segment in split_segments(command))


def parse_install_command(command: str) -> list[PackageReference]:
    """Extract the packages named by install commands, in command-line order.

    Flags are skipped, version constraints stripped and relative paths
    (`./dir`, `../dir`) dropped. Duplicates are kept.
    """

    references: list[PackageReference] = []
    for segment in split_segments(command):
        arguments = _install_arguments(segment)
        if not arguments:
            continue
        for token in arguments:
            if token.startswith("-"):
                continue
            name = strip_version(token)
            if not name or name.startswith("."):
                continue
            references.append(PackageReference(raw_token=token, resolved_name=name))
    return references


def extract_package_names(command: str) -> list[str]:
    return [ref.resolved_name for ref in parse_install_command(command)]
