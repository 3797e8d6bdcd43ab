"""Scan strategy selection"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from .detect import AUTO_DETECTABLE_FILES, DETECTABLE_FILES, detect_package_file
from .errors import NoSupportedManifestsFoundError
from .models import ScanOptions

logger = logging.getLogger(__name__)


class ScanMode(Enum):
    SINGLE_PROJECT = 'singleProject'
    ALL_PROJECTS = 'allProjects'
    YARN_WORKSPACES = 'yarnWorkspaces'


# Manifest names the locator looks for in each multi-project mode
MODE_FILES = {
    ScanMode.ALL_PROJECTS: tuple(AUTO_DETECTABLE_FILES),
    ScanMode.YARN_WORKSPACES: ('package.json',),
}


@dataclass(frozen=True)
class ScanStrategy:
    """How a single invocation scans its root; fixed once selected"""

    mode: ScanMode
    files: Tuple[str, ...] = ()
    levels_deep: Optional[int] = None
    ignore: Tuple[str, ...] = ()
    target_file: Optional[str] = None

    @property
    def is_multi_project(self) -> bool:
        return self.mode is not ScanMode.SINGLE_PROJECT


def select_strategy(root: str, options: ScanOptions) -> ScanStrategy:
    """
    Decide how to scan a root

    Workspace scanning wins over all-projects when both are requested.
    Single-project scans resolve their target file from ``options.file``
    or by detection, except for unmanaged and docker scans.

    Args:
        root: Scan root
        options: Scan options (not modified)

    Returns:
        The selected ScanStrategy

    Raises:
        NoSupportedManifestsFoundError: single-project scan with nothing to scan
    """
    if options.yarn_workspaces or options.all_projects:
        mode = ScanMode.YARN_WORKSPACES if options.yarn_workspaces else ScanMode.ALL_PROJECTS
        logger.debug("selected %s mode for %s", mode.value, root)
        return ScanStrategy(
            mode=mode,
            files=MODE_FILES[mode],
            levels_deep=options.detection_depth,
            ignore=tuple(options.exclude),
        )

    target_file = options.file
    if not (options.scan_all_unmanaged or options.docker):
        target_file = target_file or detect_package_file(root)

    if not options.docker and not (target_file or options.package_manager):
        raise NoSupportedManifestsFoundError([str(Path(root))], DETECTABLE_FILES)

    logger.debug("selected single project mode for %s (file: %s)", root, target_file)
    return ScanStrategy(mode=ScanMode.SINGLE_PROJECT, target_file=target_file)
