# code_gen/output.py
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)


class FileAlreadyExistsError(FileExistsError):
    """A generated file was requested twice in one run."""


@dataclass(frozen=True)
class Dependencies:
    """
    Source files a generated file depends on.

    aggregating=False means the output only needs regenerating when one of
    `sources` changes, not when any other file in the module changes.
    """
    aggregating: bool
    sources: Tuple = ()


class CodeGenerator:
    """Creates generated files under one output root and tracks their origins."""

    def __init__(self, output_dir):
        self.output_dir = Path(output_dir)
        self.generated_files: List[Path] = []
        # generated path -> (aggregating, [source paths])
        self.associations: Dict[str, Tuple[bool, List[str]]] = {}

    def path_for(self, package_name, file_name, extension="kt"):
        package_dir = self.output_dir.joinpath(*package_name.split(".")) if package_name else self.output_dir
        return package_dir / f"{file_name}.{extension}"

    def create_new_file(self, dependencies: Dependencies, package_name, file_name, extension="kt"):
        """Opens a new generated file for writing. The caller closes it."""
        path = self.path_for(package_name, file_name, extension)
        key = path.as_posix()
        if key in self.associations:
            raise FileAlreadyExistsError(f"Generated file already created in this run: {key}")

        path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(path, 'w', encoding='utf-8')
        self.generated_files.append(path)
        self.associations[key] = (dependencies.aggregating, [s.file_path for s in dependencies.sources])
        logger.debug(f"Created {key} depending on {self.associations[key][1]}")
        return handle

    def write_manifest(self, manifest_path):
        """Persists generated-file -> source associations for incremental builds."""
        manifest = {
            generated: {"aggregating": aggregating, "sources": sources}
            for generated, (aggregating, sources) in sorted(self.associations.items())
        }
        manifest_path = Path(manifest_path)
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        with open(manifest_path, 'w', encoding='utf-8') as f:
            json.dump(manifest, f, indent=2)
        logger.info(f"Wrote dependency manifest for {len(manifest)} files to {manifest_path}")
        return manifest_path
