#!/usr/bin/env python3
"""
Manifest Scanner
Finds dependency manifests and reports the projects they describe

CLI usage:
    manifest-scan --dir /path/to/project
    manifest-scan --all-projects --exclude build,fixtures --detection-depth 3
    manifest-scan --yarn-workspaces
    manifest-scan --file requirements-dev.txt
"""

import json
import logging
import os
import sys
from functools import partial
from pathlib import Path
from typing import Optional

import click

from manifest_scan.core import Analytics, ReportEngine, ScanError, ScanOptions
from manifest_scan.core.models import DEFAULT_DETECTION_DEPTH
from manifest_scan.core.strategy import ScanMode
from manifest_scan.deps import MULTI_PROJECT_PROCESSORS, get_deps_from_plugin
from manifest_scan.inspectors import get_available_package_managers, get_inspector_class
from manifest_scan.inspectors.base import ProgressSpinner
from manifest_scan.inspectors.multi import get_multi_plugin_result

logger = logging.getLogger(__name__)


@click.command(name="manifest-scan", help="Dependency manifest scanner")
@click.option(
    "--dir",
    "scan_dir",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=str),
    default=lambda: os.getcwd(),
    show_default="current working directory",
    help="Root directory to scan",
)
@click.option("--all-projects", is_flag=True, help="Scan every supported manifest under the root")
@click.option("--yarn-workspaces", is_flag=True, help="Scan yarn workspace roots and their packages")
@click.option(
    "--exclude",
    type=str,
    default=None,
    help="Comma-separated directory names to skip (with --all-projects or --yarn-workspaces)",
)
@click.option(
    "--detection-depth",
    type=click.IntRange(min=0),
    default=DEFAULT_DETECTION_DEPTH,
    show_default=True,
    help="How many directory levels below the root to search",
)
@click.option("--file", "target_file", type=str, default=None, help="Manifest to scan, relative to --dir")
@click.option("--package-manager", type=str, default=None, help="Package manager of the target")
@click.option("--docker", is_flag=True, help="Scan a docker target")
@click.option("--scan-all-unmanaged", is_flag=True, help="Scan without resolving a manifest file")
@click.option("--strict-out-of-sync", is_flag=True, help="Fail when a lockfile disagrees with its manifest")
@click.option("--dev", is_flag=True, help="Include development dependencies")
@click.option(
    "--max-workers",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Manifests inspected in parallel with --all-projects",
)
@click.option(
    "--output",
    "output_file",
    type=click.Path(writable=True, dir_okay=False, path_type=str),
    default="manifest_scan_report.json",
    show_default=True,
    help="File to write JSON report",
)
@click.option("--no-save", is_flag=True, help="Do not write JSON report to disk")
@click.option(
    "--output-relative-paths",
    is_flag=True,
    help="Use relative paths in JSON output (useful for Docker)",
)
@click.option("--list-package-managers", is_flag=True, help="List supported package managers and exit")
@click.option("--debug", is_flag=True, help="Print debug logging to stderr")
def cli(
    scan_dir: str,
    all_projects: bool,
    yarn_workspaces: bool,
    exclude: Optional[str],
    detection_depth: int,
    target_file: Optional[str],
    package_manager: Optional[str],
    docker: bool,
    scan_all_unmanaged: bool,
    strict_out_of_sync: bool,
    dev: bool,
    max_workers: int,
    output_file: str,
    no_save: bool,
    output_relative_paths: bool,
    list_package_managers: bool,
    debug: bool,
):
    """Dependency manifest scanner CLI"""

    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    if list_package_managers:
        available = get_available_package_managers()
        click.echo(click.style("🌍 SUPPORTED PACKAGE MANAGERS", fg='cyan', bold=True))
        click.echo(f"\n{len(available)} package manager(s) currently supported:\n")
        for name in available:
            inspector = get_inspector_class(name)(Path.cwd())
            click.echo(f"  • {click.style(name, fg='green', bold=True)}")
            click.echo(f"    Manifests: {', '.join(inspector.get_manifest_files())}")
            lockfiles = inspector.get_lockfile_names()
            if lockfiles:
                click.echo(f"    Lockfiles: {', '.join(lockfiles)}")
        sys.exit(0)

    click.echo(click.style("=" * 80, fg='cyan', bold=True))
    click.echo(click.style("🛡️  Manifest Scanner", fg='cyan', bold=True))
    click.echo(click.style("=" * 80, fg='cyan', bold=True))

    scan_dir = os.path.abspath(scan_dir)
    click.echo(f"\n{click.style('Scan Directory:', bold=True)} {scan_dir}")

    options = ScanOptions(
        all_projects=all_projects,
        yarn_workspaces=yarn_workspaces,
        exclude=[e.strip() for e in exclude.split(',') if e.strip()] if exclude else [],
        detection_depth=detection_depth,
        file=target_file,
        package_manager=package_manager,
        docker=docker,
        scan_all_unmanaged=scan_all_unmanaged,
        strict_out_of_sync=strict_out_of_sync,
        dev=dev,
        max_workers=max_workers,
    )
    analytics = Analytics(sink=lambda key, value: logger.debug("analytics %s: %s", key, json.dumps(value)))
    processors = dict(MULTI_PROJECT_PROCESSORS)
    processors[ScanMode.ALL_PROJECTS] = partial(get_multi_plugin_result, spinner=ProgressSpinner())

    try:
        deps = get_deps_from_plugin(scan_dir, options, analytics=analytics, multi_processors=processors)
    except ScanError as e:
        if e.user_class:
            click.echo(click.style(f"\n✗ Error: {e.user_message}", fg='red', bold=True), err=True)
            sys.exit(2)
        click.echo(click.style(f"\n✗ {e.user_message}", fg='red', bold=True), err=True)
        sys.exit(1)

    report_engine = ReportEngine(scan_dir=scan_dir)
    report_engine.set_result(deps.result, deps.project_names)
    report_engine.print_report()

    if not no_save:
        absolute_output = os.path.abspath(output_file)
        if report_engine.save_report(absolute_output, relative_paths=output_relative_paths):
            click.echo(click.style(
                f"✓ Report saved to: {absolute_output}",
                fg='green', bold=True))

    sys.exit(0)


if __name__ == "__main__":
    cli()
