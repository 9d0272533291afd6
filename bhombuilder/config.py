"""Run settings for a schema build."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_OWNER = "BHoM"
DEFAULT_REPO = "BHoM_JSONSchema"
DEFAULT_BRANCH = "develop"
DEFAULT_BASE_PACKAGE = "xyz.bhom"
DEFAULT_TIMEOUT = 30.0

TOKEN_ENV_VAR = "GITHUB_TOKEN"


@dataclass(frozen=True)
class BuilderSettings:
    """Where the schemas live and where generated code goes."""

    token: str
    output_dir: Path
    owner: str = DEFAULT_OWNER
    repo: str = DEFAULT_REPO
    branch: str = DEFAULT_BRANCH
    base_package: str = DEFAULT_BASE_PACKAGE
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    utf8_guard: bool = True

    @classmethod
    def from_env(cls, output_dir: Path, **overrides: Any) -> "BuilderSettings":
        """Build settings, taking the token from GITHUB_TOKEN unless given."""
        token = overrides.pop("token", None) or os.environ.get(TOKEN_ENV_VAR, "")
        return cls(token=token, output_dir=Path(output_dir), **overrides)
