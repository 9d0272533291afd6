"""Rewrite generated files to UTF-8.

Runs once over the whole output tree after generation. Each regular file's
encoding is guessed with charset-normalizer from a bounded prefix; files
that are not UTF-8 are re-read as ISO-8859-1 and written back as UTF-8.

Guessing is heuristic. A genuine UTF-8 file that is misdetected would be
double-encoded by the ISO-8859-1 re-read, so by default a file whose bytes
already decode as UTF-8 is left alone (guard=False disables that check).
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from pathlib import Path

from charset_normalizer import from_bytes

from .logging import get_logger

CANONICAL_ENCODING = "utf-8"
FALLBACK_ENCODING = "iso-8859-1"
SAMPLE_SIZE = 16 * 1024

logger = get_logger("charset")


@dataclass
class NormalizationReport:
    """Files seen by a normalization pass."""

    checked: list[Path] = field(default_factory=list)
    rewritten: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)


def detect_encoding(path: Path, sample_size: int = SAMPLE_SIZE) -> str | None:
    """Guess a file's encoding from its first sample_size bytes."""
    with open(path, "rb") as f:
        sample = f.read(sample_size)
    if not sample:
        return CANONICAL_ENCODING
    best = from_bytes(sample).best()
    return best.encoding if best is not None else None


def is_canonical(encoding: str | None) -> bool:
    """True for UTF-8 and for ASCII, which is a subset of it."""
    if encoding is None:
        return False
    try:
        name = codecs.lookup(encoding).name
    except LookupError:
        return False
    return name in (CANONICAL_ENCODING, "ascii")


def _is_valid_utf8(data: bytes) -> bool:
    try:
        data.decode(CANONICAL_ENCODING)
    except UnicodeDecodeError:
        return False
    return True


def normalize_file(path: Path, *, guard: bool = True) -> bool:
    """Rewrite one file as UTF-8 if it was detected as something else.

    Returns True when the file was rewritten.
    """
    encoding = detect_encoding(path)
    data = path.read_bytes()
    if is_canonical(encoding):
        # Detection only sees a prefix; later bytes may still be ISO-8859-1.
        if _is_valid_utf8(data):
            return False
    elif guard and _is_valid_utf8(data):
        logger.debug("Detected %s for %s but content is valid UTF-8; keeping", encoding, path)
        return False

    logger.info("Rewriting %s (detected %s) as UTF-8", path, encoding or "unknown")
    content = data.decode(FALLBACK_ENCODING)
    path.write_text(content, encoding=CANONICAL_ENCODING)
    return True


def _regular_files(root: Path) -> list[Path]:
    # Symlinks are skipped: the pass only owns files the generator wrote.
    return sorted(p for p in root.rglob("*") if p.is_file() and not p.is_symlink())


def normalize_tree(root: Path, *, guard: bool = True) -> NormalizationReport:
    """Normalize every regular file under root, continuing past per-file errors."""
    report = NormalizationReport()
    root = Path(root)
    if not root.is_dir():
        return report

    for path in _regular_files(root):
        logger.debug("Checking charset of %s", path)
        report.checked.append(path)
        try:
            if normalize_file(path, guard=guard):
                report.rewritten.append(path)
        except (OSError, UnicodeError) as exc:
            logger.error("Could not normalize %s: %s", path, exc)
            report.failed.append(path)

    return report
