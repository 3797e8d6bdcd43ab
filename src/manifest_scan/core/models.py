"""Data models for scan options and inspection results"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


DEFAULT_DETECTION_DEPTH = 4


@dataclass
class ScanOptions:
    """Options controlling what gets scanned and how"""

    all_projects: bool = False
    yarn_workspaces: bool = False
    exclude: List[str] = field(default_factory=list)
    detection_depth: int = DEFAULT_DETECTION_DEPTH
    file: Optional[str] = None
    package_manager: Optional[str] = None
    docker: bool = False
    scan_all_unmanaged: bool = False
    strict_out_of_sync: bool = False
    dev: bool = False
    max_workers: Optional[int] = None

    # Published once per run, after the full result is known.
    # Kept out of the result payload on purpose.
    project_names: Optional[List[Optional[str]]] = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> 'ScanOptions':
        """
        Build options from a camelCase option mapping

        Args:
            options: Mapping such as {'allProjects': True, 'exclude': 'a,b'}

        Returns:
            ScanOptions instance
        """
        exclude = options.get('exclude') or []
        if isinstance(exclude, str):
            exclude = [e.strip() for e in exclude.split(',') if e.strip()]

        depth = options.get('detectionDepth')

        return cls(
            all_projects=bool(options.get('allProjects', False)),
            yarn_workspaces=bool(options.get('yarnWorkspaces', False)),
            exclude=list(exclude),
            detection_depth=int(depth) if depth is not None else DEFAULT_DETECTION_DEPTH,
            file=options.get('file'),
            package_manager=options.get('packageManager'),
            docker=bool(options.get('docker', False)),
            scan_all_unmanaged=bool(options.get('scanAllUnmanaged', False)),
            strict_out_of_sync=bool(options.get('strictOutOfSync', False)),
            dev=bool(options.get('dev', False)),
            max_workers=options.get('maxWorkers'),
        )


@dataclass
class PluginMeta:
    """Identity of the inspector that produced a result"""

    name: str
    package_manager: Optional[str] = None
    target_file: Optional[str] = None
    runtime: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'name': self.name, 'package_manager': self.package_manager}
        if self.target_file:
            result['target_file'] = self.target_file
        if self.runtime:
            result['runtime'] = self.runtime
        return result


@dataclass
class DepTree:
    """Dependency tree node; the root node names the project"""

    name: Optional[str]
    version: Optional[str] = None
    dependencies: Dict[str, 'DepTree'] = field(default_factory=dict)
    target_file: Optional[str] = None

    def count_dependencies(self) -> int:
        """Count every node below this one"""
        return sum(1 + dep.count_dependencies() for dep in self.dependencies.values())

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'name': self.name, 'version': self.version}
        if self.target_file:
            result['target_file'] = self.target_file
        if self.dependencies:
            result['dependencies'] = {
                name: dep.to_dict() for name, dep in self.dependencies.items()
            }
        return result


@dataclass(frozen=True)
class PkgInfo:
    """A package node in a dependency graph"""

    name: str
    version: Optional[str] = None

    @property
    def id(self) -> str:
        return f"{self.name}@{self.version}" if self.version else self.name


@dataclass
class DepGraph:
    """
    Dependency graph

    Unlike DepTree, a package appears once and may be referenced from
    several parents through ``edges`` (package id -> dependency ids).
    """

    pkg_manager: str
    root_pkg: PkgInfo
    pkgs: List[PkgInfo] = field(default_factory=list)
    edges: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.root_pkg.name

    def count_dependencies(self) -> int:
        return sum(1 for pkg in self.pkgs if pkg != self.root_pkg)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pkg_manager': self.pkg_manager,
            'root': self.root_pkg.id,
            'pkgs': [{'name': p.name, 'version': p.version} for p in self.pkgs],
            'edges': {k: list(v) for k, v in self.edges.items()},
        }


@dataclass
class Artifact:
    """Typed payload attached to a scanned project"""

    type: str
    data: Any = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        """Name carried by the payload, if it has one"""
        if self.data is None:
            return None
        if isinstance(self.data, Mapping):
            return self.data.get('name')
        return getattr(self.data, 'name', None)

    def to_dict(self) -> Dict[str, Any]:
        data = self.data.to_dict() if hasattr(self.data, 'to_dict') else self.data
        result = {'type': self.type, 'data': data}
        if self.meta:
            result['meta'] = self.meta
        return result


class ProjectKind(Enum):
    """Discriminant of ScannedProject payloads"""

    DEP_TREE = 'depTree'
    DEP_GRAPH = 'depGraph'
    ARTIFACTS = 'artifacts'


@dataclass
class ScannedProject:
    """
    One project found by an inspector

    Exactly one payload is set and it always matches ``kind``. Build
    instances through the ``from_*`` constructors.
    """

    kind: ProjectKind
    dep_tree: Optional[DepTree] = None
    dep_graph: Optional[DepGraph] = None
    artifacts: Optional[List[Artifact]] = None
    target_file: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    # Annotations added by normalization
    plugin: Optional[PluginMeta] = None
    package_manager: Optional[str] = None

    def __post_init__(self):
        payloads = {
            ProjectKind.DEP_TREE: self.dep_tree,
            ProjectKind.DEP_GRAPH: self.dep_graph,
            ProjectKind.ARTIFACTS: self.artifacts,
        }
        if payloads[self.kind] is None:
            raise ValueError(f"ScannedProject of kind {self.kind.value} has no {self.kind.value} payload")
        extra = [k.value for k, v in payloads.items() if k is not self.kind and v is not None]
        if extra:
            raise ValueError(f"ScannedProject of kind {self.kind.value} also carries {', '.join(extra)}")

    @classmethod
    def from_dep_tree(cls, dep_tree: DepTree, **kwargs) -> 'ScannedProject':
        return cls(kind=ProjectKind.DEP_TREE, dep_tree=dep_tree, **kwargs)

    @classmethod
    def from_dep_graph(cls, dep_graph: DepGraph, **kwargs) -> 'ScannedProject':
        return cls(kind=ProjectKind.DEP_GRAPH, dep_graph=dep_graph, **kwargs)

    @classmethod
    def from_artifacts(cls, artifacts: List[Artifact], **kwargs) -> 'ScannedProject':
        return cls(kind=ProjectKind.ARTIFACTS, artifacts=list(artifacts), **kwargs)

    def find_artifact(self, artifact_type: str) -> Optional[Artifact]:
        """Return the first artifact of the given type"""
        for artifact in self.artifacts or []:
            if artifact.type == artifact_type:
                return artifact
        return None

    def count_dependencies(self) -> int:
        if self.kind is ProjectKind.DEP_TREE:
            return self.dep_tree.count_dependencies()
        if self.kind is ProjectKind.DEP_GRAPH:
            return self.dep_graph.count_dependencies()
        return sum(
            a.data.count_dependencies() for a in self.artifacts
            if hasattr(a.data, 'count_dependencies')
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'kind': self.kind.value}
        if self.kind is ProjectKind.DEP_TREE:
            result['dep_tree'] = self.dep_tree.to_dict()
        elif self.kind is ProjectKind.DEP_GRAPH:
            result['dep_graph'] = self.dep_graph.to_dict()
        else:
            result['artifacts'] = [a.to_dict() for a in self.artifacts]

        if self.target_file:
            result['target_file'] = self.target_file
        if self.package_manager:
            result['package_manager'] = self.package_manager
        if self.plugin:
            result['plugin'] = self.plugin.to_dict()
        if self.meta:
            result['meta'] = self.meta
        return result


@dataclass
class SinglePackageResult:
    """Inspection result for one project"""

    plugin: PluginMeta
    package: Optional[DepTree] = None
    dependency_graph: Optional[DepGraph] = None
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class MultiProjectResult:
    """Inspection result listing several projects"""

    plugin: PluginMeta
    scanned_projects: List[ScannedProject] = field(default_factory=list)


InspectResult = Union[SinglePackageResult, MultiProjectResult]


def is_multi_result(result: InspectResult) -> bool:
    """Check whether an inspection result lists several projects"""
    if isinstance(result, MultiProjectResult):
        return True
    if isinstance(result, SinglePackageResult):
        return False
    raise TypeError(f"Unknown inspection result type: {type(result).__name__}")


@dataclass
class CanonicalMultiResult:
    """
    Normalized result handed to reporting

    Always holds at least one project; every project is annotated with
    the plugin and package manager it came from.
    """

    plugin: PluginMeta
    scanned_projects: List[ScannedProject]

    @property
    def package_manager(self) -> Optional[str]:
        return self.plugin.package_manager

    def to_dict(self) -> Dict[str, Any]:
        return {
            'plugin': self.plugin.to_dict(),
            'scanned_projects': [p.to_dict() for p in self.scanned_projects],
        }
