"""PHP runtime installer."""

import asyncio
import gzip
import logging
import shutil
import tarfile
import tempfile
import uuid
import zlib
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from ..errors import ChecksumMismatch, CorruptArchive, VersionNotFound
from ..versions.download_manager import DownloadManager
from ..versions.manifest import ManifestFetcher
from ..versions.store import VersionStore

logger = logging.getLogger(__name__)


def _strip_first_component(name: str) -> Optional[str]:
    parts = PurePosixPath(name).parts
    if len(parts) <= 1:
        return None
    return str(PurePosixPath(*parts[1:]))


def extract_stripped(archive_path: Path, dest: Path) -> None:
    """Extract a .tar.gz into ``dest`` dropping the archive's top-level directory.

    Uses tarfile's ``data`` filter, so absolute paths, ``..`` members and
    links pointing outside ``dest`` are rejected.
    """
    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            for member in tar.getmembers():
                if PurePosixPath(member.name).is_absolute() or (
                        member.islnk() and PurePosixPath(member.linkname).is_absolute()):
                    raise CorruptArchive(f"absolute path in archive: {member.name}")
                stripped = _strip_first_component(member.name)
                if stripped is None:
                    continue
                member.name = stripped
                if member.islnk():
                    member.linkname = _strip_first_component(member.linkname) or ""
                tar.extract(member, dest, filter="data")
    except (tarfile.TarError, EOFError, zlib.error, gzip.BadGzipFile) as e:
        raise CorruptArchive(f"extraction failed: {e}") from e


class Installer:
    """Download, verify and unpack PHP builds into a VersionStore."""

    def __init__(self, store: VersionStore, fetcher: ManifestFetcher,
                 timeout: Optional[float] = 300.0, work_dir: Optional[Path] = None):
        self.store = store
        self.fetcher = fetcher
        self.timeout = timeout
        self.work_dir = work_dir

    async def install(self, version: str, progress_callback: Optional[Callable] = None) -> Path:
        """Install ``version`` and return its directory.

        An already installed version is returned as is, without touching the
        network. Nothing is written under the version name until the archive
        has been verified, extracted and found to contain the PHP binary.
        """
        install_dir = self.store.version_path(version)
        if self.store.exists(version):
            logger.info("PHP %s is already installed at %s", version, install_dir)
            return install_dir

        manifest = await self.fetcher.fetch()
        record = self.fetcher.lookup(manifest, version)
        if record is None:
            raise VersionNotFound(version)

        if self.work_dir is not None:
            self.work_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(prefix="phx-", dir=self.work_dir) as tmp:
            tarball_path = Path(tmp) / f"php-{version}-linux-x64.tar.gz"

            async with DownloadManager(timeout=self.timeout) as downloader:
                await downloader.download_file(record.url, tarball_path, progress_callback)

            logger.info("Checking SHA256...")
            actual = await DownloadManager.file_sha256(tarball_path)
            if actual != record.sha256.lower():
                raise ChecksumMismatch(record.sha256, actual)

            self.store.ensure()
            staging_dir = self.store.versions_dir / f".{version}.{uuid.uuid4().hex}.partial"
            try:
                staging_dir.mkdir()
                logger.info("Extracting...")
                loop = asyncio.get_event_loop()
                await loop.run_in_executor(None, extract_stripped, tarball_path, staging_dir)

                binary = staging_dir / "bin" / self.store.runtime_binary
                if not binary.is_file():
                    raise CorruptArchive(
                        f"extraction complete, but {self.store.runtime_binary} binary "
                        f"missing at bin/{self.store.runtime_binary}"
                    )

                try:
                    staging_dir.rename(install_dir)
                except OSError:
                    if not self.store.exists(version):
                        raise
                    logger.warning("PHP %s was installed concurrently; keeping existing copy", version)
            finally:
                if staging_dir.exists():
                    shutil.rmtree(staging_dir, ignore_errors=True)

        logger.info("PHP %s installed successfully", version)
        return install_dir
