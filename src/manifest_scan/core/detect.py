"""Manifest file tables and package manager detection"""

import logging
import re
from pathlib import Path
from typing import Optional

from .errors import UnknownPackageManagerError

logger = logging.getLogger(__name__)


# Order matters: the first file present in a root wins single-project
# detection, so lockfiles come before the manifests they pin.
DETECTABLE_FILES = [
    'yarn.lock',
    'package-lock.json',
    'package.json',
    'Gemfile',
    'Gemfile.lock',
    'pom.xml',
    'build.gradle',
    'build.gradle.kts',
    'build.sbt',
    'Pipfile',
    'requirements.txt',
    'Gopkg.lock',
    'go.mod',
    'vendor/vendor.json',
    'obj/project.assets.json',
    'project.assets.json',
    'packages.config',
    'paket.dependencies',
    'composer.lock',
    'Podfile',
    'Podfile.lock',
    'poetry.lock',
    'mix.exs',
]

# Files looked for when scanning every project under a root
AUTO_DETECTABLE_FILES = [
    'package-lock.json',
    'yarn.lock',
    'package.json',
    'Gemfile',
    'Gemfile.lock',
    'pom.xml',
    'packages.config',
    'paket.dependencies',
    'project.json',
    'project.assets.json',
    'Podfile',
    'Podfile.lock',
    'composer.lock',
    'Gopkg.lock',
    'go.mod',
    'vendor.json',
    'Pipfile',
    'requirements.txt',
    'build.sbt',
    'build.gradle',
    'build.gradle.kts',
    'poetry.lock',
    'mix.exs',
]

# Exact file name -> package manager
DETECTABLE_PACKAGE_MANAGERS = {
    'Gemfile': 'rubygems',
    'Gemfile.lock': 'rubygems',
    '.gemspec': 'rubygems',
    'package-lock.json': 'npm',
    'package.json': 'npm',
    'yarn.lock': 'yarn',
    'pom.xml': 'maven',
    '.jar': 'maven',
    '.war': 'maven',
    'build.gradle': 'gradle',
    'build.gradle.kts': 'gradle',
    'build.sbt': 'sbt',
    'Pipfile': 'pip',
    'setup.py': 'pip',
    'requirements.txt': 'pip',
    'Gopkg.lock': 'golangdep',
    'go.mod': 'gomodules',
    'vendor.json': 'govendor',
    'project.assets.json': 'nuget',
    'packages.config': 'nuget',
    'project.json': 'nuget',
    'paket.dependencies': 'paket',
    'composer.lock': 'composer',
    'Podfile': 'cocoapods',
    'Podfile.lock': 'cocoapods',
    'poetry.lock': 'poetry',
    'mix.exs': 'hex',
}

# File name patterns that collapse onto a key of DETECTABLE_PACKAGE_MANAGERS
_PATTERN_KEYS = [
    (re.compile(r'\.gemspec$'), '.gemspec'),
    (re.compile(r'\.jar$'), '.jar'),
    (re.compile(r'\.war$'), '.war'),
    (re.compile(r'^requirements.*\.txt$'), 'requirements.txt'),
    (re.compile(r'\.(cs|fs|vb)proj$'), 'project.assets.json'),
    (re.compile(r'\.sln$'), 'project.assets.json'),
]


def detect_package_manager_from_file(file: str) -> str:
    """
    Map a manifest path to its package manager

    Args:
        file: Manifest path (only the base name is used)

    Returns:
        Package manager identifier (npm, yarn, maven, pip, ...)

    Raises:
        UnknownPackageManagerError: if the file name is not recognised
    """
    key = Path(file).name
    for pattern, pattern_key in _PATTERN_KEYS:
        if pattern.search(key):
            key = pattern_key
            break

    if key not in DETECTABLE_PACKAGE_MANAGERS:
        raise UnknownPackageManagerError(file)

    return DETECTABLE_PACKAGE_MANAGERS[key]


def detect_package_file(root: str) -> Optional[str]:
    """
    Find the first detectable manifest directly under a root

    Args:
        root: Project root

    Returns:
        Relative file name, or None if nothing was found
    """
    root_path = Path(root)
    for file in DETECTABLE_FILES:
        if (root_path / file).exists():
            logger.debug("found package file %s in %s", file, root)
            return file

    logger.debug("no package file found in %s", root)
    return None
