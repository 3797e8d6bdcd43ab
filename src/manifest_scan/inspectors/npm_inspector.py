"""npm and yarn inspectors for JavaScript/Node.js projects"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from semantic_version import NpmSpec, Version

from manifest_scan.core.errors import ManifestParseError, MissingTargetFileError, OutOfSyncError
from manifest_scan.core.models import DepTree, SinglePackageResult
from .base import Inspector

logger = logging.getLogger(__name__)


YARN_VERSION_PATTERN = re.compile(r'^\s+version:?\s+"?([^"\s]+)"?')


def read_package_json(file_path: Path) -> Dict[str, Any]:
    """
    Load a package.json file

    Raises:
        MissingTargetFileError: the file does not exist
        ManifestParseError: the file is not a JSON object
    """
    if not file_path.is_file():
        raise MissingTargetFileError(str(file_path))
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ManifestParseError(str(file_path), f"invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ManifestParseError(str(file_path), "expected a JSON object")
    return data


class NpmInspector(Inspector):
    """
    Inspector for npm projects

    Supports:
    - Manifest files: package.json
    - Lock files: package-lock.json (lockfileVersion 1, 2 and 3)
    - Direct dependencies, plus devDependencies when scanning with dev
    """

    lockfile_name = 'package-lock.json'

    def _get_package_manager(self) -> str:
        return 'npm'

    def get_manifest_files(self) -> List[str]:
        return ['package.json']

    def get_lockfile_names(self) -> List[str]:
        return [self.lockfile_name]

    def inspect(self, target_file: str) -> SinglePackageResult:
        """
        Build the dependency tree of the project owning target_file

        Args:
            target_file: package.json or the lockfile next to it

        Returns:
            Single-project result with a dependency tree
        """
        target_path = self._resolve(target_file)
        project_dir = target_path.parent
        lockfile = project_dir / self.lockfile_name

        dep_tree = self.build_dep_tree(
            project_dir / 'package.json',
            lockfile if lockfile.exists() else None,
        )
        return SinglePackageResult(
            plugin=self._plugin_meta(target_file),
            package=dep_tree,
            meta={'lockfile': self._relative(lockfile)} if lockfile.exists() else {},
        )

    def build_dep_tree(self, package_json: Path, lockfile: Optional[Path] = None) -> DepTree:
        """
        Build a dependency tree from a manifest and an optional lockfile

        Args:
            package_json: Path to package.json
            lockfile: Lockfile used to resolve declared ranges

        Returns:
            Tree rooted at the package, with its direct dependencies
        """
        package_data = read_package_json(package_json)
        locked = self.read_lockfile(lockfile) if lockfile else None

        declared: Dict[str, str] = {}
        dep_types = ['dependencies', 'optionalDependencies']
        if self.options.dev:
            dep_types.append('devDependencies')
        for dep_type in dep_types:
            section = package_data.get(dep_type) or {}
            for name, spec in section.items():
                declared.setdefault(name, str(spec))

        dependencies = {}
        for name, spec in declared.items():
            version = self._resolve_version(name, spec, locked, lockfile)
            dependencies[name] = DepTree(name=name, version=version)

        return DepTree(
            name=package_data.get('name'),
            version=package_data.get('version'),
            dependencies=dependencies,
            target_file=self._relative(package_json),
        )

    def read_lockfile(self, lockfile: Path) -> Dict[str, str]:
        """
        Read top-level resolved versions from package-lock.json

        Returns:
            Mapping of package name to locked version
        """
        try:
            with open(lockfile, 'r', encoding='utf-8') as f:
                lock_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestParseError(str(lockfile), f"invalid JSON ({e})") from e

        locked = {}

        # lockfileVersion 2+ (npm v7+) lists installed paths under "packages"
        if 'packages' in lock_data:
            for package_path, package_info in lock_data['packages'].items():
                if not package_path.startswith('node_modules/'):
                    continue
                package_name = package_path[len('node_modules/'):]
                # Nested installs belong to other packages
                if '/node_modules/' in package_name:
                    continue
                version = package_info.get('version')
                if version:
                    locked[package_name] = version

        # lockfileVersion 1
        elif 'dependencies' in lock_data:
            for package_name, package_info in lock_data['dependencies'].items():
                version = package_info.get('version')
                if version:
                    locked[package_name] = version

        return locked

    def _resolve_version(self, name: str, spec: str, locked: Optional[Dict[str, str]],
                         lockfile: Optional[Path]) -> str:
        """Locked version when available, else the declared spec"""
        if locked is None:
            return spec

        version = locked.get(f"{name}@{spec}") or locked.get(name)
        if version is None:
            if self.options.strict_out_of_sync:
                raise OutOfSyncError(name, lockfile.name)
            logger.debug("%s not found in %s, keeping declared %s", name, lockfile, spec)
            return spec

        if self.options.strict_out_of_sync and not self._satisfies(version, spec):
            raise OutOfSyncError(name, lockfile.name, problem=f"is locked at {version}, outside {spec}, in")

        return version

    def _satisfies(self, version: str, spec: str) -> bool:
        """
        Check a locked version against a declared npm range

        Specs that are not semver ranges (git URLs, tags, file: paths)
        cannot be checked and are accepted.
        """
        try:
            npm_spec = NpmSpec(spec)
            locked_version = Version.coerce(version)
        except ValueError:
            return True
        return locked_version in npm_spec


class YarnInspector(NpmInspector):
    """
    Inspector for yarn projects

    Same manifest handling as npm, resolved against yarn.lock (classic
    and berry formats).
    """

    lockfile_name = 'yarn.lock'

    def _get_package_manager(self) -> str:
        return 'yarn'

    def read_lockfile(self, lockfile: Path) -> Dict[str, str]:
        """
        Read resolved versions from yarn.lock

        Yarn lock format:
            package-name@^1.0.0, package-name@^1.2.0:
              version "1.2.3"

        Returns:
            Mapping of "name@spec" and of bare name to locked version
        """
        with open(lockfile, 'r', encoding='utf-8') as f:
            lines = f.read().split('\n')

        locked = {}
        current_keys: List[str] = []

        for line in lines:
            if not line.strip() or line.lstrip().startswith('#'):
                current_keys = []
                continue

            # Entry header: unindented, ends with a colon
            if not line[0].isspace() and line.rstrip().endswith(':'):
                current_keys = self._parse_entry_header(line.rstrip()[:-1])
                continue

            version_match = YARN_VERSION_PATTERN.match(line)
            if version_match and current_keys:
                version = version_match.group(1)
                for name, spec in current_keys:
                    locked[f"{name}@{spec}"] = version
                    locked.setdefault(name, version)
                current_keys = []

        return locked

    def _parse_entry_header(self, header: str):
        """Split 'a@^1, "a@~1.2"' into (name, spec) pairs"""
        keys = []
        for selector in header.split(','):
            selector = selector.strip().strip('"\'')
            if '@' not in selector[1:]:
                continue
            name, spec = selector.rsplit('@', 1)
            if spec.startswith('npm:'):
                spec = spec[len('npm:'):]
            keys.append((name, spec))
        return keys
