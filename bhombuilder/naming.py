"""Map schema repository paths to Python package and class names.

Pattern: <base_package>.<dir>.<dir>...<ClassName>
  - directories are lower-cased
  - a trailing "_om" on a directory is dropped
  - the class name is the file name up to its first "."

Examples (base package xyz.bhom):
  Structural_om/Bar.json              -> xyz.bhom.structural.Bar
  Structural_om/Elements/Bar.json     -> xyz.bhom.structural.elements.Bar
  BHoM/Geometry_oM/Point.json         -> xyz.bhom.bhom.geometry.Point
  Bar.json                            -> xyz.bhom.Bar
  Structural_om/Bar.schema.json       -> xyz.bhom.structural.Bar
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# Suffix BHoM uses for object-model projects, e.g. Structural_oM
_OM_SUFFIX = "_om"


@dataclass(frozen=True)
class GenerationTarget:
    """Package and class a schema file is generated into."""

    package_name: str
    class_name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.package_name}.{self.class_name}"


def _segments(path: str) -> list[str]:
    # Empty segments ("a//b.json") are kept on purpose: they surface as empty
    # package components rather than being silently collapsed.
    return path.split("/")


def _package_segment(segment: str) -> str:
    """Lower-case a directory name and drop a trailing _om."""
    name = segment.lower()
    if name.endswith(_OM_SUFFIX):
        name = name[: -len(_OM_SUFFIX)]
    return name


def class_name(path: str) -> str:
    """Return the class name for a schema path: the file name before its first dot."""
    return _segments(path)[-1].split(".")[0]


def package_name(path: str, base_package: str) -> str:
    """Return the dotted package for a schema path, rooted at base_package."""
    directories = _segments(path)[:-1]
    package = base_package
    for segment in directories:
        package += "." + _package_segment(segment)
    return package


def target_for(path: str, base_package: str) -> GenerationTarget:
    """Build the generation target for a schema path."""
    return GenerationTarget(
        package_name=package_name(path, base_package),
        class_name=class_name(path),
    )


def package_dir(package: str, output_dir: Path) -> Path:
    """Return the directory that holds the modules of a dotted package."""
    return Path(output_dir).joinpath(*package.split("."))


def module_path(target: GenerationTarget, output_dir: Path) -> Path:
    """Return the file a target's generated module is written to."""
    return package_dir(target.package_name, output_dir) / f"{target.class_name}.py"
