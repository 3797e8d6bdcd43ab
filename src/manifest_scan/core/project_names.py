"""Project name extraction"""

from typing import List, Optional, Sequence

from .models import ProjectKind, ScannedProject

DEP_TREE_ARTIFACT = 'depTree'


def extract_project_names(scanned_projects: Optional[Sequence[ScannedProject]]) -> List[Optional[str]]:
    """
    Derive one display name per scanned project

    When no project carries artifacts the names come from each project's
    own tree or graph. Otherwise each name comes from the project's
    "depTree" artifact, and projects without one get None so the list
    stays aligned with the projects.

    Args:
        scanned_projects: Projects in result order

    Returns:
        Names (possibly None), one per project, in the same order
    """
    if scanned_projects is None:
        return []

    if all(project.artifacts is None for project in scanned_projects):
        return [_direct_name(project) for project in scanned_projects]

    names = []
    for project in scanned_projects:
        artifact = project.find_artifact(DEP_TREE_ARTIFACT)
        names.append(artifact.name if artifact is not None else None)
    return names


def _direct_name(project: ScannedProject) -> Optional[str]:
    if project.kind is ProjectKind.DEP_TREE:
        return project.dep_tree.name
    if project.kind is ProjectKind.DEP_GRAPH:
        return project.dep_graph.name
    raise ValueError(f"Project of kind {project.kind.value} has no direct dependency structure")
