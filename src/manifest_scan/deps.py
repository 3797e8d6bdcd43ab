"""Dependency collection: pick a strategy, run inspectors, normalize"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional

from manifest_scan.core.analytics import Analytics
from manifest_scan.core.detect import detect_package_manager_from_file
from manifest_scan.core.errors import NoSupportedManifestsFoundError, UnknownPackageManagerError
from manifest_scan.core.find_files import find
from manifest_scan.core.models import CanonicalMultiResult, InspectResult, ScanOptions
from manifest_scan.core.normalize import to_canonical
from manifest_scan.core.project_names import extract_project_names
from manifest_scan.core.strategy import ScanMode, ScanStrategy, select_strategy
from manifest_scan.inspectors.multi import get_multi_plugin_result
from manifest_scan.inspectors.single import get_single_plugin_result
from manifest_scan.inspectors.yarn_workspaces import process_yarn_workspaces

logger = logging.getLogger(__name__)


Locator = Callable[[str, List[str], List[str], Optional[int]], List[str]]
SingleInspector = Callable[[str, ScanOptions], InspectResult]
MultiInspector = Callable[[str, ScanOptions, List[str]], InspectResult]

MULTI_PROJECT_PROCESSORS: Dict[ScanMode, MultiInspector] = {
    ScanMode.YARN_WORKSPACES: process_yarn_workspaces,
    ScanMode.ALL_PROJECTS: get_multi_plugin_result,
}


@dataclass
class DepsResult:
    """Canonical result plus the display name of each of its projects"""

    result: CanonicalMultiResult
    project_names: List[Optional[str]]
    analytics: Analytics = field(default_factory=Analytics)

    @property
    def scanned_projects(self):
        return self.result.scanned_projects


def get_deps_from_plugin(root: str, options: ScanOptions, *,
                         locator: Locator = find,
                         single_inspector: SingleInspector = get_single_plugin_result,
                         multi_processors: Optional[Dict[ScanMode, MultiInspector]] = None,
                         analytics: Optional[Analytics] = None) -> DepsResult:
    """
    Collect dependencies under a root as a canonical multi-project result

    Options are left untouched while scanning. Once the result and the
    project names are complete, the names are published on
    ``options.project_names`` for later stages that must not see them in
    the result payload.

    Args:
        root: Scan root
        options: Scan options
        locator: Manifest locator (root, ignore, file names, depth)
        single_inspector: Single-project inspector (root, options)
        multi_processors: Multi-project inspector per scan mode
        analytics: Analytics collector for multi-project scans; a fresh
            sink-less one is used when omitted

    Returns:
        DepsResult with the canonical result and aligned project names

    Raises:
        NoSupportedManifestsFoundError: nothing to scan under root
        MalformedInspectionResultError: an inspector returned no tree or graph
    """
    analytics = analytics if analytics is not None else Analytics()
    strategy = select_strategy(root, options)

    if strategy.is_multi_project:
        processors = multi_processors or MULTI_PROJECT_PROCESSORS
        result = _scan_multi_project(root, options, strategy, locator, processors[strategy.mode], analytics)
    else:
        result = _scan_single_project(root, options, strategy, single_inspector)

    project_names = extract_project_names(result.scanned_projects)
    options.project_names = project_names
    return DepsResult(result=result, project_names=project_names, analytics=analytics)


def _scan_multi_project(root: str, options: ScanOptions, strategy: ScanStrategy, locator: Locator,
                        processor: MultiInspector, analytics: Analytics) -> CanonicalMultiResult:
    ignore = list(strategy.ignore)
    target_files = locator(root, ignore, list(strategy.files), strategy.levels_deep)
    logger.debug("auto detect manifest files, found %d: %s", len(target_files), target_files)

    if not target_files:
        raise NoSupportedManifestsFoundError([root], strategy.files)

    inspect_res = processor(root, options, target_files)
    result = to_canonical(inspect_res, origin=strategy.mode.value)

    analytics.add(strategy.mode.value, {
        'scannedProjects': len(result.scanned_projects),
        'targetFiles': list(target_files),
        'packageManagers': [_package_manager_tag(f) for f in target_files],
        'levelsDeep': strategy.levels_deep,
        'ignore': ignore,
    })

    return result


def _scan_single_project(root: str, options: ScanOptions, strategy: ScanStrategy,
                         single_inspector: SingleInspector) -> CanonicalMultiResult:
    single_options = replace(options, file=strategy.target_file, project_names=None)
    inspect_res = single_inspector(root, single_options)

    origin = 'docker' if options.docker else (options.package_manager or inspect_res.plugin.package_manager)
    return to_canonical(inspect_res, options.package_manager, origin=origin)


def _package_manager_tag(file: str) -> Optional[str]:
    try:
        return detect_package_manager_from_file(file)
    except UnknownPackageManagerError:
        return None
