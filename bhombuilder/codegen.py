"""Generate Pydantic modules from schemas and write package files.

Each schema becomes <output>/<package dirs>/<ClassName>.py via
datamodel-code-generator. Package __init__.py files are rendered from
templates/package_init.py.j2 once every schema has been processed.
"""

from __future__ import annotations

import keyword
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable
from urllib.parse import urlparse
from urllib.request import url2pathname

import datamodel_code_generator
import jinja2
from datamodel_code_generator import DataModelType, InputFileType, PythonVersion

from .logging import get_logger
from .naming import GenerationTarget, module_path, package_dir

TEMPLATE_DIR = Path(__file__).parent / "templates"

logger = get_logger("codegen")


@dataclass(frozen=True)
class GenerationRequest:
    """A schema to fetch and the target it is generated into."""

    schema_source_url: str
    target: GenerationTarget


@dataclass(frozen=True)
class GenerationConfig:
    """Named options handed to datamodel-code-generator for every schema."""

    output_model_type: str = DataModelType.PydanticV2BaseModel.value
    target_python_version: str = PythonVersion.PY_311.value
    use_schema_description: bool = True
    use_field_description: bool = True
    field_constraints: bool = True
    disable_timestamp: bool = True

    def as_kwargs(self) -> dict[str, Any]:
        """Translate to keyword arguments of datamodel_code_generator.generate."""
        return {
            "output_model_type": DataModelType(self.output_model_type),
            "target_python_version": PythonVersion(self.target_python_version),
            "use_schema_description": self.use_schema_description,
            "use_field_description": self.use_field_description,
            "field_constraints": self.field_constraints,
            "disable_timestamp": self.disable_timestamp,
        }


# (request, output_dir) -> path of the written module
Generator = Callable[[GenerationRequest, Path], Path]


def schema_input(url: str) -> Any:
    """Turn a schema URL into the input datamodel-code-generator expects.

    http(s) URLs are fetched by the generator itself, so relative $refs
    resolve against the remote location. file:// URLs and bare paths are
    read from disk.
    """
    parsed = urlparse(url)
    if parsed.scheme in ("http", "https"):
        return parsed
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    return Path(url)


class SchemaGenerator:
    """Default generator backed by datamodel-code-generator."""

    def __init__(self, config: GenerationConfig | None = None) -> None:
        self.config = config or GenerationConfig()

    def __call__(self, request: GenerationRequest, output_dir: Path) -> Path:
        output = module_path(request.target, output_dir)
        output.parent.mkdir(parents=True, exist_ok=True)
        datamodel_code_generator.generate(
            schema_input(request.schema_source_url),
            input_file_type=InputFileType.JsonSchema,
            output=output,
            class_name=request.target.class_name,
            **self.config.as_kwargs(),
        )
        return output


def _importable(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _package_classes(targets: Iterable[GenerationTarget]) -> dict[str, list[str]]:
    """Group class names by package, including every ancestor package.

    Classes whose module name can't appear in an import statement are left
    out of the re-exports; their modules are still on disk.
    """
    packages: dict[str, set[str]] = {}
    for target in targets:
        parts = target.package_name.split(".")
        bad_parts = [p for p in parts if not _importable(p)]
        if bad_parts:
            logger.warning(
                "Package %s has segments that are not valid identifiers: %s",
                target.package_name, ", ".join(repr(p) for p in bad_parts),
            )
        for depth in range(1, len(parts) + 1):
            packages.setdefault(".".join(parts[:depth]), set())
        if not _importable(target.class_name):
            logger.warning(
                "Not exporting %s: %r is not a valid identifier",
                target.qualified_name, target.class_name,
            )
            continue
        packages[target.package_name].add(target.class_name)
    return {name: sorted(classes) for name, classes in sorted(packages.items())}


def write_package_inits(
    targets: Iterable[GenerationTarget], output_dir: Path
) -> list[Path]:
    """Render an __init__.py for every package that received generated modules."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("package_init.py.j2")

    written: list[Path] = []
    for package, classes in _package_classes(targets).items():
        directory = package_dir(package, output_dir)
        directory.mkdir(parents=True, exist_ok=True)
        init_path = directory / "__init__.py"
        init_path.write_text(template.render(package=package, classes=classes), encoding="utf-8")
        written.append(init_path)

    logger.debug("Wrote %d package __init__.py files", len(written))
    return written
