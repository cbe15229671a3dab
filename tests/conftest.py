"""Shared fixtures: a throwaway phx home and a local HTTP server."""

import hashlib
import io
import json
import tarfile

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from phx.versions import ManifestFetcher, ManifestSource, VersionStore


class Remote:
    """Serves registered bodies by path and records every request."""

    def __init__(self):
        self.routes = {}
        self.requests = []
        self.server = None

    def add(self, path, body, status=200):
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.routes[path] = (status, body)

    def add_manifest(self, path, records):
        self.add(path, json.dumps({"versions": records}))

    def url(self, path):
        return str(self.server.make_url(path))

    def hits(self, path):
        return [r for r in self.requests if r["path"] == path]

    async def handle(self, request):
        self.requests.append({"path": request.path, "headers": dict(request.headers)})
        status, body = self.routes.get(request.path, (404, b"not found"))
        return web.Response(status=status, body=body)


@pytest_asyncio.fixture
async def remote():
    fixture = Remote()
    app = web.Application()
    app.router.add_get("/{tail:.*}", fixture.handle)
    async with TestServer(app) as server:
        fixture.server = server
        yield fixture


@pytest.fixture
def make_tarball():
    """Build a .tar.gz in memory; returns (bytes, sha256 hex)."""

    def _make(files=None, top="php-8.1.0"):
        if files is None:
            files = {"bin/php": b"#!/bin/sh\necho php\n", "lib/php.ini": b"; ini\n"}
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode="w:gz") as tar:
            for name, data in files.items():
                info = tarfile.TarInfo(f"{top}/{name}" if top else name)
                info.size = len(data)
                info.mode = 0o755
                tar.addfile(info, io.BytesIO(data))
        data = buf.getvalue()
        return data, hashlib.sha256(data).hexdigest()

    return _make


@pytest.fixture
def store(tmp_path):
    store = VersionStore(tmp_path / "phx")
    store.ensure()
    return store


@pytest.fixture
def install_fake_version(store):
    """Create an installed-looking version directory without going through the installer."""

    def _install(version):
        binary = store.binary_path(version)
        binary.parent.mkdir(parents=True)
        binary.write_text("#!/bin/sh\n")
        return store.version_path(version)

    return _install


@pytest.fixture
def fetcher_for(remote):
    def _fetcher(*paths, headers=None):
        sources = [
            ManifestSource(name=f"source-{i}", url=remote.url(path), headers=headers or {})
            for i, path in enumerate(paths)
        ]
        return ManifestFetcher(sources, timeout=10)

    return _fetcher
