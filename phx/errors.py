"""Errors raised by the phx core.

Every error is terminal to the operation that raised it. The CLI turns any
``PhxError`` into a one-line message and a non-zero exit status.
"""

from typing import List, Optional


class PhxError(Exception):
    """Base class for expected phx failures."""


class InvalidVersion(PhxError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Invalid version identifier '{version}'")


class ManifestUnavailable(PhxError):
    """Every manifest source failed at the transport level."""

    def __init__(self, failures: List[str]):
        self.failures = failures
        detail = "; ".join(failures) if failures else "no sources configured"
        super().__init__(f"Failed to download versions.json ({detail})")


class ManifestParseError(PhxError):
    def __init__(self, reason: str, source: Optional[str] = None):
        self.reason = reason
        self.source = source
        where = f" from {source}" if source else ""
        super().__init__(f"Failed to parse versions.json{where}: {reason}")


class VersionNotFound(PhxError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Version '{version}' not found in versions.json")


class DownloadFailed(PhxError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download {url}: {reason}")


class ChecksumMismatch(PhxError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch (expected {expected}, got {actual}). Aborting installation."
        )


class CorruptArchive(PhxError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Corrupt archive: {reason}")


class NotInstalled(PhxError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(f"PHP version '{version}' is not installed.")


class VersionInUse(PhxError):
    def __init__(self, version: str, source: str):
        self.version = version
        self.source = source
        super().__init__(f"Cannot uninstall PHP version '{version}': it is active ({source}).")


class ConfigError(PhxError):
    def __init__(self, name: str, value: str, reason: str):
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}={value!r}: {reason}")


class ActivationFailed(PhxError):
    def __init__(self, version: str, reason: str):
        self.version = version
        self.reason = reason
        super().__init__(f"Failed to activate PHP version '{version}': {reason}")
