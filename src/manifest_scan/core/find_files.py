"""Manifest locator: walk a root and collect matching manifest files"""

import logging
import os
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .detect import detect_package_manager_from_file
from .errors import UnknownPackageManagerError
from .models import DEFAULT_DETECTION_DEPTH

logger = logging.getLogger(__name__)


# Always skipped, on top of any user exclusions
ALWAYS_IGNORED = {'node_modules'}

# Package managers sharing a directory compete for one manifest
_FAMILIES = {
    'npm': 'node',
    'yarn': 'node',
}

# When several files of one family sit in a directory only the first
# present is kept
_DEFAULT_MANIFEST_PRIORITY = {
    'node': ['package-lock.json', 'yarn.lock', 'package.json'],
    'rubygems': ['Gemfile.lock', 'Gemfile'],
    'cocoapods': ['Podfile.lock', 'Podfile'],
    'nuget': ['project.assets.json', 'packages.config', 'project.json'],
    'gradle': ['build.gradle', 'build.gradle.kts'],
}


def find(root: str, ignore: Optional[Iterable[str]] = None, filter_files: Optional[Iterable[str]] = None,
         levels_deep: Optional[int] = DEFAULT_DETECTION_DEPTH) -> List[str]:
    """
    Locate manifest files under a root

    Args:
        root: Directory to walk
        ignore: Directory names to skip
        filter_files: File names to collect
        levels_deep: How many directory levels below the root to descend
            (0 = root only, None = unlimited)

    Returns:
        Sorted list of absolute file paths
    """
    root_path = Path(root).resolve()
    ignored = ALWAYS_IGNORED | set(ignore or [])
    wanted = set(filter_files or [])

    if root_path.is_file():
        return [str(root_path)] if not wanted or root_path.name in wanted else []

    found = []
    for dirpath, dirnames, filenames in os.walk(root_path):
        current = Path(dirpath)
        depth = len(current.relative_to(root_path).parts)

        if levels_deep is not None and depth >= levels_deep:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(d for d in dirnames if not _should_skip_directory(d, ignored))

        matches = [name for name in filenames if name in wanted]
        found.extend(str(current / name) for name in _filter_for_default_manifests(matches))

    found.sort()
    logger.debug("found %d manifest file(s) under %s", len(found), root_path)
    return found


def _should_skip_directory(dir_name: str, ignored: set) -> bool:
    """Skip ignored names and hidden directories"""
    return dir_name in ignored or dir_name.startswith('.')


def _filter_for_default_manifests(file_names: List[str]) -> List[str]:
    """
    Keep one manifest per package manager family in a single directory

    Args:
        file_names: Matching file names found in one directory

    Returns:
        File names to keep
    """
    families: Dict[str, List[str]] = defaultdict(list)
    kept = []

    for name in file_names:
        try:
            package_manager = detect_package_manager_from_file(name)
        except UnknownPackageManagerError:
            kept.append(name)
            continue
        family = _FAMILIES.get(package_manager, package_manager)
        families[family].append(name)

    for family, names in families.items():
        priority = _DEFAULT_MANIFEST_PRIORITY.get(family)
        if not priority:
            kept.extend(names)
            continue
        for preferred in priority:
            if preferred in names:
                kept.append(preferred)
                break

    return sorted(kept)
