"""Shared fixtures: a fake GitHub contents API and a fake code generator.

The fake API is served through httpx.MockTransport so the real loader code
(URL building, headers, JSON decoding) runs without a network.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
import pytest

from bhombuilder.codegen import GenerationRequest
from bhombuilder.config import BuilderSettings
from bhombuilder.loader import build_client
from bhombuilder.naming import module_path

API_URL = "https://api.github.test"
RAW_URL = "https://raw.github.test"
OWNER = "Org"
REPO = "Schemas"
BRANCH = "main"
TOKEN = "test-token"


# ---------------------------------------------------------------------------
# Fake contents API
# ---------------------------------------------------------------------------

def listing_item(path: str, type_: str = "file") -> dict[str, Any]:
    """Build one contents-API item the way GitHub returns it."""
    name = path.rsplit("/", 1)[-1]
    url = f"{API_URL}/repos/{OWNER}/{REPO}/contents/{path}?ref={BRANCH}"
    download_url = f"{RAW_URL}/{OWNER}/{REPO}/{BRANCH}/{path}" if type_ == "file" else None
    return {
        "name": name,
        "path": path,
        "sha": "0" * 40,
        "size": 0 if type_ == "dir" else 42,
        "url": url,
        "html_url": f"https://github.test/{OWNER}/{REPO}/blob/{BRANCH}/{path}",
        "git_url": f"{API_URL}/repos/{OWNER}/{REPO}/git/blobs/{'0' * 40}",
        "download_url": download_url,
        "type": type_,
        "_links": {"self": url, "git": None, "html": None},
    }


class FakeGitHub:
    """In-memory contents API keyed by repository path ("" is the root)."""

    prefix = f"/repos/{OWNER}/{REPO}/contents"

    def __init__(self, tree: dict[str, list[dict[str, Any]]]) -> None:
        self.tree = tree
        self.requests: list[httpx.Request] = []
        self.failures: dict[str, int] = {}

    def fail(self, path: str, status: int) -> None:
        self.failures[path] = status

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if not path.startswith(self.prefix):
            return httpx.Response(404, json={"message": "Not Found"})
        repo_path = path[len(self.prefix):].lstrip("/")
        if repo_path in self.failures:
            return httpx.Response(self.failures[repo_path], json={"message": "Bad credentials"})
        if repo_path not in self.tree:
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(200, json=self.tree[repo_path])

    def client(self, settings: BuilderSettings) -> httpx.Client:
        return build_client(settings, transport=httpx.MockTransport(self.handler))

    @property
    def listed_paths(self) -> list[str]:
        return [r.url.path[len(self.prefix):].lstrip("/") for r in self.requests]


# ---------------------------------------------------------------------------
# Fake generator
# ---------------------------------------------------------------------------

class FakeGenerator:
    """Records requests and writes a stub module; fails for chosen class names."""

    def __init__(self, fail_for: set[str] | None = None, content: bytes | None = None) -> None:
        self.fail_for = fail_for or set()
        self.content = content
        self.requests: list[GenerationRequest] = []

    def __call__(self, request: GenerationRequest, output_dir: Path) -> Path:
        self.requests.append(request)
        if request.target.class_name in self.fail_for:
            raise ValueError(f"unsupported schema construct in {request.target.class_name}")
        output = module_path(request.target, output_dir)
        output.parent.mkdir(parents=True, exist_ok=True)
        content = self.content or (
            f"class {request.target.class_name}:\n    pass\n".encode("utf-8")
        )
        output.write_bytes(content)
        return output


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path):
    """Settings pointing at the fake API and a temporary output directory."""
    return BuilderSettings(
        token=TOKEN,
        output_dir=tmp_path / "out",
        owner=OWNER,
        repo=REPO,
        branch=BRANCH,
        base_package="xyz.bhom",
        api_url=API_URL,
    )


@pytest.fixture
def item():
    """Factory for contents-API items."""
    return listing_item


@pytest.fixture
def github():
    """Factory for a FakeGitHub serving the given tree."""
    return FakeGitHub


@pytest.fixture
def generator_factory():
    """Factory for FakeGenerator instances."""
    return FakeGenerator
