"""Versions manifest retrieval."""

import asyncio
import json
import logging
from typing import List, Optional

import aiohttp
from pydantic import ValidationError

from ..errors import ManifestParseError, ManifestUnavailable
from ..utils.async_http import AsyncHTTPClient
from .models import Manifest, ManifestSource, VersionRecord

logger = logging.getLogger(__name__)


class ManifestFetcher:
    """Fetch versions.json from an ordered list of sources.

    Sources are tried in order until one answers with a text body. Transport
    failures move on to the next source; a body that is not a valid manifest
    is reported straight away, since another mirror of the same document
    would not parse any better.
    """

    def __init__(self, sources: List[ManifestSource], timeout: Optional[float] = 60.0):
        self.sources = list(sources)
        self.timeout = timeout

    async def fetch(self) -> Manifest:
        failures = []
        async with AsyncHTTPClient(timeout=self.timeout) as client:
            for source in self.sources:
                logger.info("Fetching version metadata from %s", source.url)
                try:
                    body = await client.get_text(source.url, headers=source.headers)
                except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
                    reason = str(e) or type(e).__name__
                    logger.warning("Manifest source %s failed: %s", source.name, reason)
                    failures.append(f"{source.name}: {reason}")
                    continue
                return self.parse(body, source=source.url)
        raise ManifestUnavailable(failures)

    @staticmethod
    def parse(body: str, source: Optional[str] = None) -> Manifest:
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ManifestParseError(f"invalid JSON ({e.msg})", source) from e
        try:
            return Manifest.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "document"
            raise ManifestParseError(f"{location}: {first['msg']}", source) from e

    @staticmethod
    def lookup(manifest: Manifest, version: str) -> Optional[VersionRecord]:
        """Get the record for a specific version, or None."""
        for record in manifest.versions:
            if record.version == version:
                return record
        return None
