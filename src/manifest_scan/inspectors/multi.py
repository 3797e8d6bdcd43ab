"""All-projects inspection: one inspector run per located manifest"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import List, Optional

from manifest_scan.core.detect import detect_package_manager_from_file
from manifest_scan.core.models import MultiProjectResult, PluginMeta, ScannedProject, ScanOptions
from manifest_scan.core.normalize import to_canonical
from .base import ProgressSpinner, relative_to_root
from .single import get_single_plugin_result

logger = logging.getLogger(__name__)

PLUGIN_NAME = 'custom-auto-detect'


def get_multi_plugin_result(root: str, options: ScanOptions, target_files: List[str],
                            spinner: Optional[ProgressSpinner] = None) -> MultiProjectResult:
    """
    Inspect every target file and collect their projects

    Each file is inspected with its own inferred package manager. With
    ``options.max_workers`` above 1 files are inspected concurrently; the
    projects are still returned in target file order. The first failure,
    in target file order, aborts the whole run.

    Args:
        root: Scan root
        options: Scan options shared by every file
        target_files: Located manifest paths
        spinner: Optional progress spinner

    Returns:
        Multi-project result listing the projects of every file
    """
    spinner = spinner or ProgressSpinner(enabled=False)
    total = len(target_files)

    def inspect_file(file: str) -> List[ScannedProject]:
        relative = relative_to_root(file, root)
        package_manager = detect_package_manager_from_file(file)
        file_options = replace(
            options,
            file=relative,
            package_manager=package_manager,
            all_projects=False,
            yarn_workspaces=False,
            project_names=None,
        )
        inspect_res = get_single_plugin_result(root, file_options)
        canonical = to_canonical(inspect_res, package_manager)
        return [
            replace(project, target_file=project.target_file or relative)
            for project in canonical.scanned_projects
        ]

    workers = options.max_workers or 1
    per_file: List[List[ScannedProject]] = []

    try:
        if workers <= 1:
            for idx, file in enumerate(target_files, 1):
                spinner.update(f"[{idx}/{total}] Inspecting {file}")
                per_file.append(inspect_file(file))
        else:
            logger.debug("inspecting %d file(s) with %d workers", total, workers)
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(inspect_file, file) for file in target_files]
                try:
                    for idx, (file, future) in enumerate(zip(target_files, futures), 1):
                        per_file.append(future.result())
                        spinner.update(f"[{idx}/{total}] Inspected {file}")
                except Exception:
                    for future in futures:
                        future.cancel()
                    raise
    finally:
        spinner.clear()

    scanned_projects = [project for projects in per_file for project in projects]
    return MultiProjectResult(
        plugin=PluginMeta(name=PLUGIN_NAME, package_manager=options.package_manager),
        scanned_projects=scanned_projects,
    )

