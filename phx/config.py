"""Runtime configuration for phx."""

import os
from pathlib import Path
from typing import List, Mapping, Optional

from pydantic import BaseModel

from .errors import ConfigError
from .versions.models import ManifestSource

PRIMARY_MANIFEST_URL = "https://cdn.jsdelivr.net/gh/NicolasTeles-Dev/phx-binaries@main/versions.json"
FALLBACK_MANIFEST_URL = "https://api.github.com/repos/NicolasTeles-Dev/phx-binaries/contents/versions.json"
FALLBACK_HEADERS = {
    "User-Agent": "phx-cli",
    "Accept": "application/vnd.github.v3.raw",
}


def default_manifest_sources(
    primary_url: str = PRIMARY_MANIFEST_URL,
    fallback_url: str = FALLBACK_MANIFEST_URL,
) -> List[ManifestSource]:
    return [
        ManifestSource(name="cdn", url=primary_url),
        ManifestSource(name="github-api", url=fallback_url, headers=FALLBACK_HEADERS),
    ]


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError("PHX_HTTP_TIMEOUT", raw, "expected a number of seconds") from None
    if timeout <= 0:
        raise ConfigError("PHX_HTTP_TIMEOUT", raw, "must be greater than zero")
    return timeout


class PhxConfig(BaseModel):
    home: Path
    runtime_binary: str = "php"
    pin_filename: str = ".php_version"
    manifest_sources: List[ManifestSource] = default_manifest_sources()
    http_timeout: float = 300.0
    log_dir: Optional[Path] = None

    @property
    def versions_dir(self) -> Path:
        return self.home / "versions"

    @property
    def current_link(self) -> Path:
        return self.home / "current"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PhxConfig":
        """Build the configuration from ``PHX_*`` environment variables.

        ``PHX_DIR`` moves the whole state directory (default ``~/.phx``);
        ``PHX_MANIFEST_URL`` and ``PHX_MANIFEST_FALLBACK_URL`` replace the two
        manifest endpoints; ``PHX_HTTP_TIMEOUT`` is in seconds.
        """
        env = os.environ if environ is None else environ

        home = Path(env["PHX_DIR"]) if env.get("PHX_DIR") else Path.home() / ".phx"
        sources = default_manifest_sources(
            env.get("PHX_MANIFEST_URL") or PRIMARY_MANIFEST_URL,
            env.get("PHX_MANIFEST_FALLBACK_URL") or FALLBACK_MANIFEST_URL,
        )
        settings = {"home": home.expanduser(), "manifest_sources": sources}
        if env.get("PHX_HTTP_TIMEOUT"):
            settings["http_timeout"] = _parse_timeout(env["PHX_HTTP_TIMEOUT"])
        if env.get("PHX_LOG_DIR"):
            settings["log_dir"] = Path(env["PHX_LOG_DIR"])
        return cls(**settings)
