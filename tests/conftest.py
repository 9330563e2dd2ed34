"""Shared fixtures: a fake Modrinth registry served by a local aiohttp app."""

import asyncio
import threading
from typing import Dict, List, Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from modkeeper import ModKeeper
from modkeeper.models import ModKeeperConfig
from modkeeper.services import ModrinthClient


def make_version(
    version_id: str,
    version_number: str,
    game_versions: List[str],
    loaders: List[str],
    filenames: Optional[List[str]] = None,
) -> dict:
    if filenames is None:
        filenames = [f"{version_id}.jar"]
    return {
        "id": version_id,
        "name": version_number,
        "version_number": version_number,
        "game_versions": game_versions,
        "loaders": loaders,
        "files": [{"filename": name, "size": 0, "primary": i == 0} for i, name in enumerate(filenames)],
    }


class FakeRegistry:
    """In-memory registry; file urls are filled in relative to the live server."""

    def __init__(self):
        self.projects: Dict[str, dict] = {}
        self.versions: Dict[str, List[dict]] = {}
        self.files: Dict[str, bytes] = {}
        self.broken_files = set()
        self.broken_endpoints = set()
        self.requests: List[str] = []
        self.base_url = ""

    def add_mod(self, project_id: str, slug: str, title: str, versions: List[dict]):
        self.projects[project_id] = {
            "project_id": project_id,
            "slug": slug,
            "title": title,
            "downloads": 1000,
        }
        self.set_versions(project_id, versions)

    def set_versions(self, project_id: str, versions: List[dict]):
        self.versions[project_id] = versions
        for version in versions:
            for file in version["files"]:
                served = file.get("served_as", file["filename"])
                self.files.setdefault(served, f"jar:{served}".encode())

    def _with_urls(self, request: web.Request, version: dict) -> dict:
        version = dict(version)
        version["files"] = [
            dict(
                file,
                url=f"{request.scheme}://{request.host}/files/{file.get('served_as', file['filename'])}",
            )
            for file in version["files"]
        ]
        return version

    def file_requests(self) -> List[str]:
        return [path for path in self.requests if path.startswith("/files/")]

    async def search(self, request: web.Request):
        self.requests.append(str(request.rel_url))
        if "search" in self.broken_endpoints:
            return web.json_response({"error": "boom"}, status=500)
        query = request.query.get("query", "").lower()
        limit = int(request.query.get("limit", 10))
        hits = [
            p
            for p in self.projects.values()
            if query in p["slug"].lower() or query in p["title"].lower()
        ]
        return web.json_response({"hits": hits[:limit], "limit": limit})

    async def project_versions(self, request: web.Request):
        self.requests.append(str(request.rel_url))
        project_id = request.match_info["project_id"]
        if project_id not in self.versions:
            return web.json_response({"error": "not_found"}, status=404)
        return web.json_response(
            [self._with_urls(request, v) for v in self.versions[project_id]]
        )

    async def version(self, request: web.Request):
        self.requests.append(str(request.rel_url))
        version_id = request.match_info["version_id"]
        for versions in self.versions.values():
            for v in versions:
                if v["id"] == version_id:
                    return web.json_response(self._with_urls(request, v))
        return web.json_response({"error": "not_found"}, status=404)

    async def file(self, request: web.Request):
        self.requests.append(str(request.rel_url))
        name = request.match_info["filename"]
        if name in self.broken_files or name not in self.files:
            return web.Response(status=500, text="broken")
        return web.Response(body=self.files[name])

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/search", self.search)
        app.router.add_get("/project/{project_id}/version", self.project_versions)
        app.router.add_get("/version/{version_id}", self.version)
        app.router.add_get("/files/{filename}", self.file)
        return app


@pytest.fixture
async def registry():
    fake = FakeRegistry()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.base_url = str(server.make_url("")).rstrip("/")
    yield fake
    await server.close()


@pytest.fixture
async def client(registry):
    async with ModrinthClient(base_url=registry.base_url) as api:
        yield api


@pytest.fixture
def config(registry, tmp_path):
    return ModKeeperConfig(
        manifest=str(tmp_path / "mods.json"),
        mods_dir=str(tmp_path / "mods"),
        staging_dir=str(tmp_path / "staging"),
        api_url=registry.base_url,
    )


@pytest.fixture
async def keeper(config):
    async with ModKeeper(config=config) as mk:
        yield mk


def add_create(registry: FakeRegistry) -> FakeRegistry:
    """The `create` mod with a forge 5.1.11 release and a fabric-only build."""
    registry.add_mod(
        "LNytGWDc",
        "create",
        "Create",
        [
            make_version("v5111", "5.1.11", ["1.18.2"], ["forge"], ["create-5.1.11.jar"]),
            make_version("v5110f", "5.1.10-fabric", ["1.18.2"], ["fabric"], ["create-fabric-5.1.10.jar"]),
        ],
    )
    return registry


@pytest.fixture
def create_mod(registry):
    return add_create(registry)


@pytest.fixture
def threaded_registry():
    """A fake registry on its own loop and thread, for sync callers such as CliRunner."""
    fake = FakeRegistry()
    loop = asyncio.new_event_loop()
    runner = web.AppRunner(fake.make_app())
    loop.run_until_complete(runner.setup())
    site = web.TCPSite(runner, "127.0.0.1", 0)
    loop.run_until_complete(site.start())
    port = runner.addresses[0][1]
    fake.base_url = f"http://127.0.0.1:{port}"

    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    yield fake

    asyncio.run_coroutine_threadsafe(runner.cleanup(), loop).result(timeout=10)
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=10)
    loop.close()
