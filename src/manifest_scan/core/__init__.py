"""Core components for manifest discovery and result normalization"""

from .analytics import Analytics
from .errors import (
    MalformedInspectionResultError,
    NoSupportedManifestsFoundError,
    ScanError,
)
from .models import (
    Artifact,
    CanonicalMultiResult,
    DepGraph,
    DepTree,
    MultiProjectResult,
    PkgInfo,
    PluginMeta,
    ProjectKind,
    ScannedProject,
    ScanOptions,
    SinglePackageResult,
)
from .report_engine import ReportEngine

__all__ = [
    'Analytics',
    'Artifact',
    'CanonicalMultiResult',
    'DepGraph',
    'DepTree',
    'MalformedInspectionResultError',
    'MultiProjectResult',
    'NoSupportedManifestsFoundError',
    'PkgInfo',
    'PluginMeta',
    'ProjectKind',
    'ReportEngine',
    'ScanError',
    'ScannedProject',
    'ScanOptions',
    'SinglePackageResult',
]
