"""pip inspector for Python requirements files"""

import re
from pathlib import Path
from typing import List, Optional, Tuple

from manifest_scan.core.errors import ManifestParseError
from manifest_scan.core.models import DepGraph, PkgInfo, SinglePackageResult
from .base import Inspector


# package[extras] followed by an optional version specifier
REQUIREMENT_PATTERN = re.compile(r'^([a-zA-Z0-9_\-\.]+)(\[.*?\])?\s*(.*)$')

# Exact pins only; ranges leave the version unresolved
PINNED_PATTERN = re.compile(r'^===?\s*([^\s,]+)$')

REQUIREMENTS_FILE_PATTERN = re.compile(r'^requirements.*\.txt$')


class PipInspector(Inspector):
    """
    Inspector for pip requirements files

    Produces a dependency graph rooted at the project directory name,
    since requirements files do not name their project.
    """

    def _get_package_manager(self) -> str:
        return 'pip'

    def get_manifest_files(self) -> List[str]:
        return ['requirements.txt']

    def get_lockfile_names(self) -> List[str]:
        return []

    def inspect(self, target_file: str) -> SinglePackageResult:
        path = self._resolve(target_file)
        if not REQUIREMENTS_FILE_PATTERN.match(path.name):
            raise ManifestParseError(str(path), "only requirements*.txt files are supported for pip")

        root_pkg = PkgInfo(name=path.parent.resolve().name)
        pkgs = [root_pkg]
        for name, version in self._read_requirements(path):
            pkg = PkgInfo(name=name, version=version)
            if pkg not in pkgs:
                pkgs.append(pkg)

        graph = DepGraph(
            pkg_manager=self.package_manager,
            root_pkg=root_pkg,
            pkgs=pkgs,
            edges={root_pkg.id: [p.id for p in pkgs[1:]]},
        )
        return SinglePackageResult(plugin=self._plugin_meta(target_file), dependency_graph=graph)

    def _read_requirements(self, path: Path) -> List[Tuple[str, Optional[str]]]:
        """
        Parse a requirements file

        Format:
            package==1.2.3
            package>=1.0,<2.0
            package[extra]==1.2.3
            git+https://...   (skipped)
            -r other.txt      (skipped)

        Returns:
            (name, pinned version or None) pairs in file order
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                lines = f.readlines()
        except UnicodeDecodeError as e:
            raise ManifestParseError(str(path), f"encoding issue ({e})") from e

        requirements = []
        for line in lines:
            # Remove comments, environment markers and whitespace
            line = line.split('#')[0].split(';')[0].strip()
            if not line or line.startswith('-'):
                continue

            if line.startswith(('http://', 'https://', 'git+', 'file://', './', '../')):
                continue

            match = REQUIREMENT_PATTERN.match(line)
            if not match:
                continue

            name = match.group(1).lower()
            spec = match.group(3).strip()
            pinned = PINNED_PATTERN.match(spec)
            version = pinned.group(1) if pinned else None
            requirements.append((name, version))

        return requirements
