"""Filesystem registry of installed PHP versions."""

import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional

from ..errors import ActivationFailed, InvalidVersion, NotInstalled

logger = logging.getLogger(__name__)


class VersionStore:
    """Installed versions under ``<home>/versions`` plus the ``current`` link.

    The store owns every version directory and the global pointer. It does
    not know about directory pins; callers that need the in-use check go
    through ``ActivationResolver.ensure_removable`` first.
    """

    def __init__(self, home: Path, runtime_binary: str = "php"):
        self.home = Path(home)
        self.versions_dir = self.home / "versions"
        self.pointer_path = self.home / "current"
        self.runtime_binary = runtime_binary

    def ensure(self) -> None:
        self.versions_dir.mkdir(parents=True, exist_ok=True)

    def version_path(self, version: str) -> Path:
        if (not version or version.startswith(".") or "/" in version
                or "\\" in version or version != version.strip()):
            raise InvalidVersion(version)
        return self.versions_dir / version

    def binary_path(self, version: str) -> Path:
        return self.version_path(version) / "bin" / self.runtime_binary

    def exists(self, version: str) -> bool:
        return self.version_path(version).is_dir()

    def list(self) -> List[str]:
        if not self.versions_dir.is_dir():
            return []
        return sorted(
            entry.name for entry in self.versions_dir.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        )

    def remove(self, version: str) -> None:
        path = self.version_path(version)
        if not path.is_dir():
            raise NotInstalled(version)
        logger.info("Removing %s", path)
        shutil.rmtree(path)

    def current_global_target(self) -> Optional[str]:
        """Version the ``current`` link points at; None if unset or broken."""
        if not self.pointer_path.is_symlink() or not self.pointer_path.exists():
            return None
        return Path(os.readlink(self.pointer_path)).name

    def is_pointer_dangling(self) -> bool:
        return self.pointer_path.is_symlink() and not self.pointer_path.exists()

    def point_current(self, version: str) -> None:
        """Repoint ``current`` at ``version`` with a single rename."""
        target = self.version_path(version)
        self.home.mkdir(parents=True, exist_ok=True)
        tmp_link = self.home / f".current.{os.getpid()}.tmp"
        if tmp_link.is_symlink() or tmp_link.exists():
            tmp_link.unlink()
        try:
            tmp_link.symlink_to(target, target_is_directory=True)
            os.replace(tmp_link, self.pointer_path)
        except OSError as e:
            if tmp_link.is_symlink():
                tmp_link.unlink()
            raise ActivationFailed(version, f"cannot update {self.pointer_path}: {e.strerror or e}") from e
        logger.info("current -> %s", target)
