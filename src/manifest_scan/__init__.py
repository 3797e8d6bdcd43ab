"""
Manifest Scanner

Finds dependency manifests under a project root, inspects them per
ecosystem and merges the results into one multi-project shape
"""

try:
    from importlib.metadata import version
    __version__ = version("manifest-scan")
except Exception:
    # Fallback for development installs
    __version__ = "0.0.0-dev"

from . import core
from . import inspectors

__all__ = ['core', 'inspectors', '__version__']
