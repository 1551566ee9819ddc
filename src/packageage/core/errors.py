"""Engine exceptions.

None of the hook-path errors ever reach the host: each one is raised at its
boundary and recovered into an approve decision by the caller.
`HostSettingsError` belongs to the install commands and ends them with exit 1.
"""

from __future__ import annotations


class PackageAgeError(Exception):
    """Base class for packageage errors."""


class InputMalformedError(PackageAgeError):
    """The hook input could not be read or does not have the expected shape."""


class RegistryUnavailableError(PackageAgeError):
    """The registry lookup for one package failed (timeout, HTTP error, bad body)."""

    def __init__(self, package_name: str, reason: str) -> None:
        super().__init__(f"{package_name}: {reason}")
        self.package_name = package_name
        self.reason = reason


class HostSettingsError(PackageAgeError):
    """The host settings file exists but cannot be read as a JSON object."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
