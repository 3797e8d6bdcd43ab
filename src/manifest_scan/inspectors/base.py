"""Base inspector interface for ecosystem-specific manifest inspection"""

import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import click

from manifest_scan.core.errors import MissingTargetFileError
from manifest_scan.core.models import InspectResult, PluginMeta, ScanOptions


class ProgressSpinner:
    """Simple spinner for showing scan progress that updates in place"""

    def __init__(self, enabled: bool = True):
        self.frames = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
        self.current_frame = 0
        self.is_tty = sys.stdout.isatty()
        self.enabled = enabled
        self.last_line_length = 0

    def update(self, message: str):
        """Update the spinner with a new message"""
        if not self.enabled:
            return

        # In non-TTY mode (piped, CI/CD), print each line separately
        if not self.is_tty:
            click.echo(f"  {message}")
            return

        spinner = self.frames[self.current_frame % len(self.frames)]
        self.current_frame += 1

        max_length = 100
        if len(message) > max_length:
            message = message[:max_length-3] + "..."

        line = f"\r{click.style(spinner, fg='cyan')} {click.style(message, dim=True)}"

        # Pad with spaces to clear any leftover characters
        visible_length = len(spinner) + 1 + len(message)
        if visible_length < self.last_line_length:
            line += " " * (self.last_line_length - visible_length)

        self.last_line_length = visible_length

        sys.stdout.write(line)
        sys.stdout.flush()

    def clear(self):
        """Clear the spinner line"""
        if not self.is_tty or self.last_line_length == 0:
            return

        sys.stdout.write("\r" + " " * self.last_line_length + "\r")
        sys.stdout.flush()
        self.last_line_length = 0


def relative_to_root(file: str, root: str) -> str:
    """
    Path of a located file relative to the scan root, in posix form

    The locator walks the resolved root, so a root reached through a
    symlink is matched in both its given and its resolved form.
    """
    path = Path(file)
    if not path.is_absolute():
        return path.as_posix()
    root_path = Path(os.path.abspath(root))
    for candidate, base in ((path, root_path), (path.resolve(), root_path.resolve())):
        try:
            return candidate.relative_to(base).as_posix()
        except ValueError:
            continue
    return Path(os.path.relpath(file, root)).as_posix()


class Inspector(ABC):
    """
    Base class for ecosystem-specific inspectors

    Each inspector is responsible for:
    1. Reading the manifest it is pointed at
    2. Reading the matching lock file, when there is one
    3. Returning either a single-project result or a multi-project
       result for manifests that embed sub-projects
    """

    def __init__(self, root_dir: Path, options: Optional[ScanOptions] = None):
        """
        Initialize inspector

        Args:
            root_dir: Scan root; target files are resolved against it
            options: Scan options
        """
        self.root_dir = Path(root_dir)
        self.options = options or ScanOptions()
        self.package_manager = self._get_package_manager()

    @abstractmethod
    def _get_package_manager(self) -> str:
        """
        Return package manager identifier

        Returns:
            Package manager name (npm, yarn, maven, pip, etc.)
        """
        pass

    @abstractmethod
    def get_manifest_files(self) -> List[str]:
        """
        Return list of manifest file names this inspector reads

        Returns:
            List of file names (e.g., ['package.json'], ['pom.xml'])
        """
        pass

    @abstractmethod
    def get_lockfile_names(self) -> List[str]:
        """
        Return list of lockfile names this inspector reads

        Returns:
            List of file names (e.g., ['package-lock.json'])
        """
        pass

    @abstractmethod
    def inspect(self, target_file: str) -> InspectResult:
        """
        Inspect one target file

        Args:
            target_file: Manifest or lockfile path, relative to the root
                or absolute

        Returns:
            SinglePackageResult or MultiProjectResult
        """
        pass

    def detect_target_file(self) -> str:
        """
        Pick the target file when only a package manager was given

        Returns:
            First lockfile or manifest present in the root

        Raises:
            MissingTargetFileError: none of them exist
        """
        for name in self.get_lockfile_names() + self.get_manifest_files():
            if (self.root_dir / name).exists():
                return name
        raise MissingTargetFileError(str(self.root_dir / self.get_manifest_files()[0]))

    def _resolve(self, target_file: str) -> Path:
        """Resolve a target file against the root and check it exists"""
        path = self.root_dir / target_file
        if not path.is_file():
            raise MissingTargetFileError(str(path))
        return path

    def _relative(self, path: Path) -> str:
        """Path relative to the root when possible, for display"""
        for candidate, base in ((path, self.root_dir), (path.resolve(), self.root_dir.resolve())):
            try:
                return candidate.relative_to(base).as_posix()
            except ValueError:
                continue
        return str(path)

    def _plugin_meta(self, target_file: str) -> PluginMeta:
        return PluginMeta(
            name=f"manifest-scan-{self.package_manager}",
            package_manager=self.package_manager,
            target_file=target_file,
            runtime=f"python {sys.version_info.major}.{sys.version_info.minor}",
        )
