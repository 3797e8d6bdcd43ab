"""Exception hierarchy for manifest scanning

All exceptions inherit from ScanError (single catch point). Each carries a
``code`` and a ``user_message`` that the CLI prints as-is.
"""

from typing import Iterable, List, Optional


class ScanError(Exception):
    """Base exception for all manifest-scan errors"""

    code = 500
    user_class = False

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class NoSupportedManifestsFoundError(ScanError):
    """No manifest could be located or resolved for the scan root"""

    code = 422
    user_class = True

    def __init__(self, at_locations: Iterable[str], searched_files: Optional[Iterable[str]] = None):
        self.at_locations: List[str] = [str(loc) for loc in at_locations]
        self.searched_files: List[str] = list(searched_files or [])

        locations = ', '.join(self.at_locations) or '<unknown>'
        message = f"Could not detect supported target files in {locations}"
        user_message = message + "."
        if self.searched_files:
            user_message += f"\nSearched for: {', '.join(self.searched_files)}"
        user_message += "\nUse --file to point at a manifest or --package-manager to pick an ecosystem."
        super().__init__(message, user_message)


class MalformedInspectionResultError(ScanError):
    """An inspector returned a single result without a tree or a graph"""

    code = 500

    def __init__(self, origin: Optional[str]):
        self.origin = origin or 'unknown'
        message = (
            f"error getting dependencies from {self.origin} plugin: "
            "neither 'package' nor 'dependency_graph' were found"
        )
        super().__init__(
            message,
            f"An unexpected error occurred: {message}. Please report this as a bug.",
        )


class UnsupportedPackageManagerError(ScanError):
    """No inspector is registered for the requested package manager"""

    code = 422
    user_class = True

    def __init__(self, package_manager: str, supported: Iterable[str] = ()):
        self.package_manager = package_manager
        message = f"Unsupported package manager '{package_manager}'"
        supported = sorted(supported)
        user_message = message + "."
        if supported:
            user_message += f" Supported: {', '.join(supported)}"
        super().__init__(message, user_message)


class UnknownPackageManagerError(ScanError):
    """A manifest file name does not map to any package manager"""

    code = 422
    user_class = True

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__(f"Could not detect package manager for file: {file_path}")


class MissingTargetFileError(ScanError):
    """The manifest an inspector needs does not exist"""

    code = 422
    user_class = True

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__(f"Could not find the manifest file: {file_path}")


class ManifestParseError(ScanError):
    """A manifest exists but could not be parsed"""

    code = 422
    user_class = True

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        super().__init__(f"Failed to parse {file_path}: {reason}")


class OutOfSyncError(ScanError):
    """Declared dependencies and the lockfile disagree"""

    code = 422
    user_class = True

    def __init__(self, dependency_name: str, lockfile: str, problem: str = "was not found in"):
        self.dependency_name = dependency_name
        self.lockfile = lockfile
        super().__init__(
            f"Dependency {dependency_name} {problem} {lockfile}",
            f"Dependency {dependency_name} {problem} {lockfile}. "
            "Your package.json and lockfile are probably out of sync. "
            "Please run the install command and try again.",
        )
