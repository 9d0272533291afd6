"""List schema files in a GitHub repository.

Talks to the contents API:
  GET <api>/repos/<owner>/<repo>/contents[/<path>]?ref=<branch>
and turns each JSON item into a DirectoryEntry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import httpx

from .config import BuilderSettings

GITHUB_JSON = "application/vnd.github+json"


class BuilderError(Exception):
    """Base class for bhombuilder failures."""


class ListingError(BuilderError):
    """Raised when a directory listing cannot be fetched or decoded."""


@dataclass(frozen=True)
class DirectoryEntry:
    """One item of a contents-API directory listing."""

    name: str
    path: str
    type: str
    listing_url: str
    download_url: str | None = None
    sha: str | None = None
    size: int | None = None

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"

    @classmethod
    def from_json(cls, item: dict[str, Any]) -> "DirectoryEntry":
        """Build an entry from one object of the API response."""
        try:
            return cls(
                name=item["name"],
                path=item["path"],
                type=item["type"],
                listing_url=item["url"],
                download_url=item.get("download_url"),
                sha=item.get("sha"),
                size=item.get("size"),
            )
        except (KeyError, TypeError) as exc:
            raise ListingError(f"Malformed directory entry: {item!r}") from exc


def contents_url(api_url: str, owner: str, repo: str, path: Sequence[str] = ()) -> str:
    """Return the contents endpoint for a repository path."""
    url = f"{api_url.rstrip('/')}/repos/{owner}/{repo}/contents"
    parts = [p for p in path if p]
    if parts:
        url += "/" + "/".join(parts)
    return url


def build_client(settings: BuilderSettings, **kwargs: Any) -> httpx.Client:
    """Create the authenticated client used for every listing call.

    Extra keyword arguments go straight to httpx.Client (tests pass a
    MockTransport this way).
    """
    headers = {
        "Accept": GITHUB_JSON,
        "Authorization": f"Bearer {settings.token}",
    }
    return httpx.Client(
        headers=headers,
        timeout=httpx.Timeout(settings.timeout),
        follow_redirects=True,
        **kwargs,
    )


def get_contents(
    client: httpx.Client, url: str, ref: str | None = None
) -> list[DirectoryEntry]:
    """Fetch and decode one directory listing.

    Any transport, status or decoding problem raises ListingError.
    """
    params = {"ref": ref} if ref else None
    try:
        response = client.get(url, params=params)
        response.raise_for_status()
        body = response.json()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise ListingError(f"Failed to list {url}: {exc}") from exc
    except ValueError as exc:
        raise ListingError(f"Listing at {url} is not JSON") from exc

    # A path pointing at a single file returns one object, not a list
    if isinstance(body, dict):
        body = [body]
    if not isinstance(body, list):
        raise ListingError(f"Unexpected listing payload at {url}: {type(body).__name__}")
    return [DirectoryEntry.from_json(item) for item in body]


def get_root_contents(client: httpx.Client, settings: BuilderSettings) -> list[DirectoryEntry]:
    """List the repository root on the configured branch."""
    url = contents_url(settings.api_url, settings.owner, settings.repo)
    return get_contents(client, url, ref=settings.branch)
