"""Global and per-directory activation."""

import logging
import os
import tempfile
from pathlib import Path

from ..errors import NotInstalled
from ..versions.store import VersionStore

logger = logging.getLogger(__name__)


class Activator:
    def __init__(self, store: VersionStore, pin_filename: str = ".php_version"):
        self.store = store
        self.pin_filename = pin_filename

    def activate_global(self, version: str) -> None:
        if not self.store.exists(version):
            raise NotInstalled(version)
        self.store.point_current(version)

    def activate_local(self, working_directory: Path, version: str) -> Path:
        """Write ``version`` into the directory's pin file, replacing it atomically."""
        if not self.store.exists(version):
            raise NotInstalled(version)

        pin_path = Path(working_directory) / self.pin_filename
        fd, tmp_path = tempfile.mkstemp(
            dir=pin_path.parent,
            prefix=f"{self.pin_filename}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(f"{version}\n")
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, pin_path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.info("Pinned %s in %s", version, pin_path)
        return pin_path
