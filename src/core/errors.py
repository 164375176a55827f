"""Snapshot error hierarchy.

Fatal errors abort the whole run and are caught once by the CLI. Per-package
failures never surface as exceptions; the scanner logs them and moves on.
"""

from __future__ import annotations


class SnapshotError(Exception):
    """Base class for every fatal error raised by the snapshot core."""


class DiscoveryError(SnapshotError):
    """The package list could not be produced (index fetch/parse or query)."""


class CredentialError(DiscoveryError):
    """Application-default credentials or project id could not be resolved."""


class ConfigurationError(SnapshotError):
    """Invalid runtime configuration."""


class ProxyConfigurationError(ConfigurationError):
    """A proxy environment variable holds a malformed value."""

    def __init__(self, variable: str, value: str) -> None:
        super().__init__(f"invalid proxy in ${variable}: {value!r}")
        self.variable = variable
        self.value = value
