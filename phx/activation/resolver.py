"""Work out which PHP version is active for a directory."""

import logging
from pathlib import Path
from typing import NamedTuple, Optional

from ..errors import VersionInUse
from ..versions.store import VersionStore

logger = logging.getLogger(__name__)

LOCAL = "local"
GLOBAL = "global"


class Resolution(NamedTuple):
    version: str
    source: str


class ActivationResolver:
    """A ``.php_version`` pin in the directory wins over the global ``current`` link.

    Only the given directory is consulted; parents are never searched.
    """

    def __init__(self, store: VersionStore, pin_filename: str = ".php_version"):
        self.store = store
        self.pin_filename = pin_filename

    def pin_path(self, working_directory: Path) -> Path:
        return Path(working_directory) / self.pin_filename

    def read_pin(self, working_directory: Path) -> Optional[str]:
        pin = self.pin_path(working_directory)
        if not pin.is_file():
            return None
        # invalid UTF-8 shows up as U+FFFD instead of raising
        return pin.read_bytes().decode("utf-8", errors="replace").strip()

    def resolve_source(self, working_directory: Path) -> Optional[Resolution]:
        pinned = self.read_pin(working_directory)
        if pinned is not None:
            return Resolution(pinned, LOCAL)
        current = self.store.current_global_target()
        if current is not None:
            return Resolution(current, GLOBAL)
        return None

    def resolve(self, working_directory: Path) -> Optional[str]:
        resolution = self.resolve_source(working_directory)
        return resolution.version if resolution else None

    def ensure_removable(self, version: str, working_directory: Path) -> None:
        """Raise VersionInUse if ``version`` is the global or the local active one.

        Pins in directories other than ``working_directory`` are not checked.
        """
        if self.read_pin(working_directory) == version:
            raise VersionInUse(version, f"set by {self.pin_filename}")
        if self.store.current_global_target() == version:
            raise VersionInUse(version, "global current version")
