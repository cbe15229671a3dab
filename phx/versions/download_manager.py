"""Download manager for runtime tarballs."""

import asyncio
import hashlib
import logging
from pathlib import Path
from typing import Callable, Optional

import aiofiles
import aiohttp

from ..errors import DownloadFailed

logger = logging.getLogger(__name__)


class DownloadManager:
    def __init__(self, timeout: Optional[float] = 300.0):
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.session:
            await self.session.close()

    async def download_file(self, url: str, dest: Path,
                            progress_callback: Optional[Callable] = None) -> Path:
        """Stream ``url`` into ``dest``; raises DownloadFailed on any transport error."""
        if not self.session:
            self.session = aiohttp.ClientSession(timeout=self.timeout)

        logger.info("Downloading %s", url)
        try:
            async with self.session.get(url) as resp:
                resp.raise_for_status()
                total_size = int(resp.headers.get('Content-Length', 0))
                downloaded = 0

                dest.parent.mkdir(parents=True, exist_ok=True)

                async with aiofiles.open(dest, 'wb') as f:
                    async for chunk_data in resp.content.iter_chunked(65536):
                        await f.write(chunk_data)
                        downloaded += len(chunk_data)
                        if progress_callback:
                            await progress_callback(dest.name, downloaded, total_size)
        except aiohttp.ClientResponseError as e:
            raise DownloadFailed(url, f"HTTP {e.status} {e.message}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DownloadFailed(url, str(e) or type(e).__name__) from e
        except OSError as e:
            raise DownloadFailed(url, f"cannot write {dest}: {e.strerror or e}") from e

        logger.debug("Downloaded %d bytes to %s", downloaded, dest)
        return dest

    @staticmethod
    async def file_sha256(file_path: Path) -> str:
        """SHA-256 of a file as lowercase hex."""
        hash_sha256 = hashlib.sha256()
        async with aiofiles.open(file_path, 'rb') as f:
            while chunk := await f.read(65536):
                hash_sha256.update(chunk)
        return hash_sha256.hexdigest()
