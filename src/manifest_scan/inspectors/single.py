"""Single-project inspection"""

import logging
from pathlib import Path

from manifest_scan.core.detect import detect_package_manager_from_file
from manifest_scan.core.errors import UnsupportedPackageManagerError
from manifest_scan.core.models import InspectResult, ScanOptions
from . import get_available_package_managers, get_inspector_class

logger = logging.getLogger(__name__)


def get_single_plugin_result(root: str, options: ScanOptions) -> InspectResult:
    """
    Run the inspector matching the options against one target

    The package manager comes from ``options.package_manager`` or is
    inferred from ``options.file``; docker targets look up the 'docker'
    inspector.

    Args:
        root: Scan root
        options: Scan options; ``file`` is relative to root or absolute

    Returns:
        The inspector's raw result

    Raises:
        UnsupportedPackageManagerError: no inspector for the package manager
    """
    if options.docker:
        package_manager = 'docker'
    elif options.package_manager:
        package_manager = options.package_manager
    elif options.file:
        package_manager = detect_package_manager_from_file(options.file)
    else:
        raise UnsupportedPackageManagerError('<none>', get_available_package_managers())

    inspector_class = get_inspector_class(package_manager)
    if inspector_class is None:
        raise UnsupportedPackageManagerError(package_manager, get_available_package_managers())

    inspector = inspector_class(Path(root), options)
    target_file = options.file or inspector.detect_target_file()

    logger.debug("inspecting %s with %s inspector", target_file, package_manager)
    return inspector.inspect(target_file)
