# code_gen/emitter.py
import logging
from dataclasses import dataclass
from typing import List, Optional, Set

from ..config import TEST_SUFFIX
from ..type_utils import base_file_name, clashing_names, escape_package
from .output import Dependencies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmittedFileKey:
    package_name: str
    file_name: str

    @property
    def qualified_name(self):
        return f"{self.package_name}.{self.file_name}" if self.package_name else self.file_name


def render_file(package_name, fragments) -> str:
    """
    Package line, sorted imports, then each function in selection order.

    Types whose simple names collide within the file are written fully
    qualified and left out of the imports.
    """
    lines = []
    if package_name:
        lines.append(f"package {escape_package(package_name)}")
        lines.append("")

    referenced = set().union(*(f.referenced_names | f.required_imports for f in fragments))
    qualified = clashing_names(referenced)
    if qualified:
        logger.debug(f"Writing clashing names fully qualified: {', '.join(sorted(qualified))}")

    imports = sorted(set().union(*(f.required_imports for f in fragments)) - qualified)
    for name in imports:
        lines.append(f"import {escape_package(name)}")
    if imports:
        lines.append("")

    lines.append("\n\n".join(f.render(qualified) for f in fragments))
    return "\n".join(lines) + "\n"


def _warn_on_clashes(key, fragments):
    seen = set()
    for fragment in fragments:
        signature = (fragment.function_name, fragment.parameter_signature)
        if signature in seen:
            logger.warning(f"{key.qualified_name}: '{fragment.function_name}' is generated twice with the same parameters.")
        seen.add(signature)


class FileEmitter:
    """Writes one generated unit per source file, at most once per run."""

    def __init__(self, code_generator, suffix=TEST_SUFFIX):
        self.code_generator = code_generator
        self.suffix = suffix
        self.generated_files: Set[str] = set()

    def key_for(self, source_file, fragments) -> EmittedFileKey:
        return EmittedFileKey(
            package_name=fragments[0].package_name,
            file_name=f"{base_file_name(source_file.file_name)}{self.suffix}",
        )

    def emit(self, source_file, fragments: List) -> Optional[EmittedFileKey]:
        if not fragments:
            return None

        key = self.key_for(source_file, fragments)
        if key.qualified_name in self.generated_files:
            logger.debug(f"{key.qualified_name} already generated in this run, skipping.")
            return None

        _warn_on_clashes(key, fragments)
        content = render_file(key.package_name, fragments)

        dependencies = Dependencies(aggregating=False, sources=(source_file,))
        with self.code_generator.create_new_file(dependencies, key.package_name, key.file_name) as handle:
            handle.write(content)
        self.generated_files.add(key.qualified_name)

        logger.info(f"Generated {key.qualified_name} with {len(fragments)} screenshot tests.")
        return key
