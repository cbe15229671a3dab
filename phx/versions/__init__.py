"""Version management module."""

from .manifest import ManifestFetcher
from .download_manager import DownloadManager
from .models import Manifest, ManifestSource, VersionRecord
from .store import VersionStore

__all__ = [
    "ManifestFetcher", "DownloadManager", "Manifest", "ManifestSource",
    "VersionRecord", "VersionStore",
]
