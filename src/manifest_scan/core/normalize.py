"""Conversion of inspection results to the canonical multi-project shape"""

from dataclasses import replace
from typing import Optional

from .errors import MalformedInspectionResultError
from .models import (
    CanonicalMultiResult,
    MultiProjectResult,
    ScannedProject,
    SinglePackageResult,
    is_multi_result,
)


def convert_single_result_to_multi_custom(inspect_res: SinglePackageResult,
                                          package_manager: Optional[str] = None,
                                          origin: Optional[str] = None) -> CanonicalMultiResult:
    """
    Wrap a single-project result as a one-project canonical result

    A dependency graph takes precedence over a dependency tree.

    Args:
        inspect_res: Single-project inspection result
        package_manager: Package manager override (defaults to the plugin's)
        origin: Inspector identity used in error messages

    Returns:
        Canonical result with one project

    Raises:
        MalformedInspectionResultError: neither tree nor graph is present
    """
    plugin = inspect_res.plugin
    package_manager = package_manager or plugin.package_manager

    if inspect_res.dependency_graph is not None:
        project = ScannedProject.from_dep_graph(
            inspect_res.dependency_graph,
            target_file=plugin.target_file,
            meta=dict(inspect_res.meta),
            plugin=plugin,
            package_manager=package_manager,
        )
    elif inspect_res.package is not None:
        dep_tree = inspect_res.package
        if not dep_tree.target_file and plugin.target_file:
            dep_tree = replace(dep_tree, target_file=plugin.target_file)
        project = ScannedProject.from_dep_tree(
            dep_tree,
            target_file=plugin.target_file,
            meta=dict(inspect_res.meta),
            plugin=plugin,
            package_manager=package_manager,
        )
    else:
        raise MalformedInspectionResultError(origin or package_manager)

    return CanonicalMultiResult(plugin=plugin, scanned_projects=[project])


def convert_multi_result_to_multi_custom(inspect_res: MultiProjectResult,
                                         package_manager: Optional[str] = None,
                                         target_file: Optional[str] = None,
                                         origin: Optional[str] = None) -> CanonicalMultiResult:
    """
    Annotate every project of a multi-project result

    Projects keep their order and payload kind; only the plugin, package
    manager and target file annotations are filled in.

    Args:
        inspect_res: Multi-project inspection result
        package_manager: Package manager override (defaults to the plugin's)
        target_file: Target file override for every project
        origin: Inspector identity used in error messages

    Returns:
        Canonical result with the same projects

    Raises:
        MalformedInspectionResultError: the result lists no projects
    """
    if not inspect_res.scanned_projects:
        raise MalformedInspectionResultError(origin or package_manager or inspect_res.plugin.package_manager)

    plugin = inspect_res.plugin
    scanned_projects = [
        replace(
            project,
            plugin=project.plugin or plugin,
            package_manager=package_manager or project.package_manager or plugin.package_manager,
            target_file=target_file or project.target_file,
        )
        for project in inspect_res.scanned_projects
    ]
    return CanonicalMultiResult(plugin=plugin, scanned_projects=scanned_projects)


def to_canonical(inspect_res, package_manager: Optional[str] = None,
                 origin: Optional[str] = None) -> CanonicalMultiResult:
    """Normalize either result variant"""
    if is_multi_result(inspect_res):
        return convert_multi_result_to_multi_custom(inspect_res, package_manager, origin=origin)
    return convert_single_result_to_multi_custom(inspect_res, package_manager, origin=origin)
