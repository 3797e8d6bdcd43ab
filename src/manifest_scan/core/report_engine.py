"""Report generation for scanned projects"""

import json
import os
from collections import defaultdict
from pathlib import Path
from typing import List, Optional

import click

from .models import CanonicalMultiResult, ScannedProject


class ReportEngine:
    """
    Renders a canonical scan result

    Supports:
    - Console output with colored formatting
    - JSON export with optional relative paths
    - Per-package-manager grouping
    """

    def __init__(self, scan_dir: Optional[str] = None):
        """
        Initialize report engine

        Args:
            scan_dir: Root directory that was scanned (for path conversion)
        """
        self.scan_dir = Path(scan_dir) if scan_dir else None
        # "." gives relative paths; an absolute path replaces scan_dir
        self.path_prefix = os.environ.get('SCAN_PATH_PREFIX', None)
        self.result: Optional[CanonicalMultiResult] = None
        self.project_names: List[Optional[str]] = []

    def set_result(self, result: CanonicalMultiResult, project_names: List[Optional[str]]):
        """Set the result to report on"""
        self.result = result
        self.project_names = list(project_names)

    @property
    def projects(self) -> List[ScannedProject]:
        return self.result.scanned_projects if self.result else []

    def get_projects_count(self) -> int:
        return len(self.projects)

    def get_package_managers(self) -> List[str]:
        """Get list of package managers with scanned projects"""
        return sorted(set(p.package_manager for p in self.projects if p.package_manager))

    def _format_path(self, path: Optional[str], prefix: Optional[str] = None) -> Optional[str]:
        """
        Format a file path for display using SCAN_PATH_PREFIX environment variable

        If SCAN_PATH_PREFIX is set:
        - "." -> convert to relative paths (./package.json)
        - absolute path -> replace scan_dir with that path (/home/user/project/package.json)
        - not set -> use paths as-is

        Args:
            path: File path to format
            prefix: Overrides SCAN_PATH_PREFIX when given

        Returns:
            Formatted path based on SCAN_PATH_PREFIX setting
        """
        prefix = prefix or self.path_prefix
        if not path or not prefix or not self.scan_dir:
            return path

        abs_path = Path(path)
        scan_dir_abs = self.scan_dir.absolute()
        if not abs_path.is_absolute():
            abs_path = scan_dir_abs / abs_path

        try:
            rel_path = abs_path.relative_to(scan_dir_abs)
        except ValueError:
            # Path is outside scan directory
            return path

        if prefix == ".":
            return f"./{rel_path.as_posix()}"
        return str(Path(prefix) / rel_path)

    def _name_at(self, index: int) -> str:
        if index < len(self.project_names) and self.project_names[index]:
            return self.project_names[index]
        return '<unnamed>'

    def _generate_summary(self) -> dict:
        """
        Generate summary statistics per package manager

        Returns:
            Dictionary mapping package manager names to summary stats
        """
        summary = defaultdict(lambda: {'projects': 0, 'dependencies': 0})
        for project in self.projects:
            stats = summary[project.package_manager or 'unknown']
            stats['projects'] += 1
            stats['dependencies'] += project.count_dependencies()
        return dict(summary)

    def print_report(self):
        """Print formatted console report"""
        click.echo("\n" + click.style("=" * 80, fg='white', bold=True))
        click.echo(click.style("SCAN REPORT", fg='white', bold=True))
        click.echo(click.style("=" * 80, fg='white', bold=True))

        if not self.projects:
            click.echo(click.style("\nNo projects scanned.\n", fg='yellow', bold=True))
            return

        click.echo(click.style(f"\n📦 Scanned {len(self.projects)} project(s)\n", fg='cyan', bold=True))

        for index, project in enumerate(self.projects):
            self._print_project(index, project)

        self._print_summary()

    def _print_project(self, index: int, project: ScannedProject):
        """Print a single project"""
        click.echo(f"\n  Project: " + click.style(self._name_at(index), fg='green', bold=True))
        if project.target_file:
            click.echo(f"  Target File: {self._format_path(project.target_file)}")
        if project.package_manager:
            click.echo(f"  Package Manager: {project.package_manager}")
        click.echo(f"  Kind: {project.kind.value}")
        click.echo(f"  Dependencies: {project.count_dependencies()}")

    def _print_summary(self):
        """Print overall summary"""
        click.echo("\n" + click.style("=" * 80, fg='white', bold=True))
        click.echo(click.style("📊 Summary:", fg='cyan', bold=True))
        for package_manager, stats in sorted(self._generate_summary().items()):
            click.echo(f"   • {package_manager}: " +
                       click.style(f"{stats['projects']} project(s), {stats['dependencies']} dependencies",
                                   fg='magenta', bold=True))
        click.echo()

    def save_report(self, output_file: str, relative_paths: bool = False) -> bool:
        """
        Save the result to a JSON file

        Path conversion is handled automatically via SCAN_PATH_PREFIX environment variable.

        Args:
            output_file: Path to output file
            relative_paths: Write target files relative to the scan directory

        Returns:
            True if saved successfully, False otherwise
        """
        prefix = "." if relative_paths else None
        try:
            projects_data = []
            for index, project in enumerate(self.projects):
                project_dict = project.to_dict()
                project_dict['name'] = self.project_names[index] if index < len(self.project_names) else None
                if 'target_file' in project_dict:
                    project_dict['target_file'] = self._format_path(project_dict['target_file'], prefix)
                projects_data.append(project_dict)

            report = {
                'total_projects': len(self.projects),
                'package_managers': self.get_package_managers(),
                'plugin': self.result.plugin.to_dict() if self.result else None,
                'projects': projects_data,
                'summary': self._generate_summary(),
            }

            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2)

            return True

        except (OSError, TypeError, ValueError) as e:
            click.echo(click.style(f"✗ Error saving report: {e}", fg='red', bold=True), err=True)
            return False
