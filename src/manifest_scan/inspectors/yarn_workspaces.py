"""Yarn workspace inspection"""

import fnmatch
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from manifest_scan.core.errors import NoSupportedManifestsFoundError
from manifest_scan.core.models import MultiProjectResult, PluginMeta, ScannedProject, ScanOptions
from .base import relative_to_root
from .npm_inspector import YarnInspector, read_package_json

logger = logging.getLogger(__name__)

PLUGIN_NAME = 'yarn-workspaces'


def process_yarn_workspaces(root: str, options: ScanOptions, target_files: List[str]) -> MultiProjectResult:
    """
    Inspect yarn workspace roots and their member packages

    A workspace root is a located package.json declaring ``workspaces``
    with a yarn.lock next to it. Each root and each located package.json
    matching one of its workspace globs becomes a project, resolved
    against the root's yarn.lock. Other package.json files are ignored.

    Args:
        root: Scan root
        options: Scan options
        target_files: Located package.json paths

    Returns:
        Multi-project result, projects in target file order

    Raises:
        NoSupportedManifestsFoundError: no workspace root was found
    """
    root_path = Path(root)
    inspector = YarnInspector(root_path, options)
    manifests = [_absolute(root_path, file) for file in target_files]

    workspace_roots: List[Tuple[Path, List[str]]] = []
    for manifest in manifests:
        patterns = _workspace_patterns(read_package_json(manifest))
        if not patterns:
            continue
        if not (manifest.parent / 'yarn.lock').exists():
            logger.debug("workspace root %s has no yarn.lock, skipping", manifest)
            continue
        workspace_roots.append((manifest.parent, patterns))

    if not workspace_roots:
        raise NoSupportedManifestsFoundError([str(root_path)], ['package.json', 'yarn.lock'])

    scanned_projects = []
    for manifest in manifests:
        owner = _find_workspace_root(manifest.parent, workspace_roots)
        if owner is None:
            logger.debug("%s is not part of a workspace, skipping", manifest)
            continue

        dep_tree = inspector.build_dep_tree(manifest, owner / 'yarn.lock')
        scanned_projects.append(ScannedProject.from_dep_tree(
            dep_tree,
            target_file=dep_tree.target_file,
            meta={'workspace_root': relative_to_root(str(owner), root)},
            package_manager='yarn',
        ))

    return MultiProjectResult(
        plugin=PluginMeta(name=PLUGIN_NAME, package_manager='yarn'),
        scanned_projects=scanned_projects,
    )


def _absolute(root_path: Path, file: str) -> Path:
    path = Path(file)
    return path if path.is_absolute() else root_path / path


def _workspace_patterns(package_data: dict) -> List[str]:
    """Workspace globs, from either the list or the {packages: [...]} form"""
    workspaces = package_data.get('workspaces')
    if isinstance(workspaces, dict):
        workspaces = workspaces.get('packages')
    if not isinstance(workspaces, list):
        return []
    patterns = []
    for entry in workspaces:
        pattern = str(entry).strip().rstrip('/')
        if pattern.startswith('./'):
            pattern = pattern[2:]
        if pattern:
            patterns.append(pattern)
    return patterns


def _find_workspace_root(project_dir: Path, workspace_roots: Sequence[Tuple[Path, List[str]]]) -> Optional[Path]:
    """Workspace root owning project_dir, or None"""
    for workspace_dir, patterns in workspace_roots:
        if project_dir == workspace_dir:
            return workspace_dir
        try:
            relative = project_dir.relative_to(workspace_dir)
        except ValueError:
            continue
        if any(_matches_glob(relative.parts, pattern.split('/')) for pattern in patterns):
            return workspace_dir
    return None


def _matches_glob(parts: Sequence[str], pattern: Sequence[str]) -> bool:
    """Match path segments against glob segments; '**' spans any depth"""
    if not pattern:
        return not parts
    if pattern[0] == '**':
        return any(_matches_glob(parts[i:], pattern[1:]) for i in range(len(parts) + 1))
    if not parts:
        return False
    return fnmatch.fnmatchcase(parts[0], pattern[0]) and _matches_glob(parts[1:], pattern[1:])
