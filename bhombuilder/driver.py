"""Walk the schema repository and generate a module per schema file.

Phases, strictly in order:
1. list the tree and generate every *.json schema (best effort per schema)
2. render package __init__.py files for what was generated
3. normalize the encoding of the whole output tree
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator
from urllib.parse import urlparse

import httpx

from .charset import NormalizationReport, normalize_tree
from .codegen import (
    GenerationConfig,
    GenerationRequest,
    Generator,
    SchemaGenerator,
    write_package_inits,
)
from .config import BuilderSettings
from .loader import DirectoryEntry, build_client, get_contents, get_root_contents
from .logging import get_logger
from .naming import target_for

SCHEMA_EXTENSION = ".json"

logger = get_logger("driver")


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of one generation attempt."""

    request: GenerationRequest
    output: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BuildReport:
    """Everything a build did, in traversal order."""

    outcomes: list[GenerationOutcome] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    normalization: NormalizationReport = field(default_factory=NormalizationReport)

    @property
    def generated(self) -> list[GenerationOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[GenerationOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def summary(self) -> str:
        return (
            f"{len(self.generated)} generated, {len(self.failed)} failed, "
            f"{len(self.skipped)} skipped, "
            f"{len(self.normalization.rewritten)} re-encoded as UTF-8"
        )


def is_schema(entry: DirectoryEntry) -> bool:
    """A file entry whose download URL points at a .json document.

    Only the URL path is checked; private repositories append ?token=...
    """
    if entry.download_url is None:
        return False
    return urlparse(entry.download_url).path.endswith(SCHEMA_EXTENSION)


def walk(
    client: httpx.Client, root: list[DirectoryEntry]
) -> Iterator[DirectoryEntry]:
    """Yield every entry of the tree depth-first, in listing order.

    Uses an explicit stack instead of recursion; children are pushed in
    reverse so they pop in the order the API returned them.
    """
    stack = list(reversed(root))
    while stack:
        entry = stack.pop()
        yield entry
        if entry.is_dir:
            children = get_contents(client, entry.listing_url)
            stack.extend(reversed(children))


def generate_one(
    request: GenerationRequest, output_dir: Path, generator: Generator
) -> GenerationOutcome:
    """Run the generator for one schema, turning any failure into an outcome."""
    logger.info("Schema at %s", request.schema_source_url)
    logger.info("%s", request.target.qualified_name)
    try:
        output = generator(request, output_dir)
    except Exception as exc:
        logger.warning("Failed to generate for %s: %s", request.schema_source_url, exc)
        logger.debug("Generation error", exc_info=True)
        return GenerationOutcome(request=request, error=str(exc) or type(exc).__name__)
    return GenerationOutcome(request=request, output=output)


def generate_tree(
    client: httpx.Client,
    settings: BuilderSettings,
    generator: Generator,
) -> BuildReport:
    """List the repository and generate every schema it contains.

    Listing failures propagate; generation failures are recorded and the
    walk carries on.
    """
    report = BuildReport()
    root = get_root_contents(client, settings)
    for entry in walk(client, root):
        if entry.is_dir:
            continue
        if not is_schema(entry):
            logger.debug("Skipping %s", entry.path)
            report.skipped.append(entry.path)
            continue
        request = GenerationRequest(
            schema_source_url=entry.download_url,
            target=target_for(entry.path, settings.base_package),
        )
        report.outcomes.append(generate_one(request, settings.output_dir, generator))
    return report


def build(
    settings: BuilderSettings,
    *,
    client: httpx.Client | None = None,
    generator: Generator | None = None,
    config: GenerationConfig | None = None,
) -> BuildReport:
    """Generate the whole tree, write package files, then fix encodings.

    A client built here is closed before returning; a caller-supplied
    client is left open.
    """
    output_dir = Path(settings.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    generator = generator or SchemaGenerator(config)

    if client is None:
        with build_client(settings) as owned:
            report = generate_tree(owned, settings, generator)
    else:
        report = generate_tree(client, settings, generator)

    write_package_inits((o.request.target for o in report.generated), output_dir)
    report.normalization = normalize_tree(output_dir, guard=settings.utf8_guard)
    logger.info("Build finished: %s", report.summary())
    return report
