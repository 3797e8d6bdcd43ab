"""Ecosystem-specific manifest inspectors"""

from .base import Inspector
from .maven_inspector import MavenInspector
from .npm_inspector import NpmInspector, YarnInspector
from .pip_inspector import PipInspector

__all__ = [
    'Inspector',
    'NpmInspector',
    'YarnInspector',
    'MavenInspector',
    'PipInspector',
]

# Registry of available inspectors, keyed by package manager
INSPECTOR_REGISTRY = {
    'npm': NpmInspector,
    'yarn': YarnInspector,
    'maven': MavenInspector,
    'pip': PipInspector,
}


def get_inspector_class(package_manager: str):
    """
    Get inspector class for a package manager

    Args:
        package_manager: Package manager name (npm, yarn, maven, pip, etc.)

    Returns:
        Inspector class or None if not found
    """
    return INSPECTOR_REGISTRY.get(package_manager.lower())


def get_available_package_managers():
    """
    Get list of package managers with implemented inspectors

    Returns:
        List of package manager names
    """
    return list(INSPECTOR_REGISTRY.keys())
