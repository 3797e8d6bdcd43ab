"""Maven inspector for Java projects"""

import re
from pathlib import Path
from typing import Dict, List, Optional, Set
from xml.etree import ElementTree as ET

import click

from manifest_scan.core.errors import ManifestParseError
from manifest_scan.core.models import (
    Artifact,
    DepTree,
    InspectResult,
    MultiProjectResult,
    ScannedProject,
    SinglePackageResult,
)
from .base import Inspector


PROPERTY_PATTERN = re.compile(r'\$\{([^}]+)\}')

DEP_TREE_ARTIFACT = 'depTree'


class MavenInspector(Inspector):
    """
    Inspector for Maven projects

    Supports:
    - Manifest files: pom.xml, with or without the POM namespace
    - ${property} version references declared in <properties>
    - Versions inherited from <dependencyManagement>
    - Multi-module builds: one artifact-carrying project per module
    """

    def _get_package_manager(self) -> str:
        return 'maven'

    def get_manifest_files(self) -> List[str]:
        return ['pom.xml']

    def get_lockfile_names(self) -> List[str]:
        return []

    def inspect(self, target_file: str) -> InspectResult:
        """
        Inspect a pom.xml

        Args:
            target_file: Path to pom.xml

        Returns:
            SinglePackageResult for a plain pom, MultiProjectResult when
            the pom declares <modules>
        """
        pom_path = self._resolve(target_file)
        root_elem = self._parse(pom_path)
        module_poms = self._collect_module_poms(pom_path, root_elem, seen={pom_path.resolve()})

        if not module_poms:
            return SinglePackageResult(
                plugin=self._plugin_meta(target_file),
                package=self._build_dep_tree(pom_path, root_elem),
            )

        scanned_projects = []
        for path in [pom_path] + module_poms:
            elem = root_elem if path == pom_path else self._parse(path)
            relative = self._relative(path)
            scanned_projects.append(ScannedProject.from_artifacts(
                [Artifact(type=DEP_TREE_ARTIFACT, data=self._build_dep_tree(path, elem),
                          meta={'module': self._relative(path.parent) or '.'})],
                target_file=relative,
            ))

        return MultiProjectResult(plugin=self._plugin_meta(target_file), scanned_projects=scanned_projects)

    def _parse(self, pom_path: Path) -> ET.Element:
        try:
            return ET.parse(pom_path).getroot()
        except ET.ParseError as e:
            raise ManifestParseError(str(pom_path), f"invalid XML ({e})") from e

    def _collect_module_poms(self, pom_path: Path, root_elem: ET.Element, seen: Set[Path]) -> List[Path]:
        """Module poms in declaration order, nested modules following their parent"""
        ns = _namespace(root_elem)
        poms = []

        for module in root_elem.findall(f'{ns}modules/{ns}module'):
            if not module.text:
                continue
            module_pom = pom_path.parent / module.text.strip() / 'pom.xml'
            if not module_pom.is_file():
                click.echo(click.style(
                    f"⚠️  Warning: Module {module.text.strip()} has no pom.xml at {module_pom}, skipping",
                    fg='yellow'), err=True)
                continue
            resolved = module_pom.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)

            poms.append(module_pom)
            poms.extend(self._collect_module_poms(module_pom, self._parse(module_pom), seen))

        return poms

    def _build_dep_tree(self, pom_path: Path, root_elem: ET.Element) -> DepTree:
        """
        Build a dependency tree from one pom

        Dependency names use the Maven artifact format groupId:artifactId.
        """
        ns = _namespace(root_elem)
        parent = root_elem.find(f'{ns}parent')

        group_id = _text(root_elem, f'{ns}groupId') or _text(parent, f'{ns}groupId')
        artifact_id = _text(root_elem, f'{ns}artifactId')
        version = _text(root_elem, f'{ns}version') or _text(parent, f'{ns}version')

        properties = self._read_properties(root_elem, ns)
        properties.setdefault('project.groupId', group_id)
        properties.setdefault('project.version', version)

        managed = {}
        for dep in root_elem.findall(f'{ns}dependencyManagement/{ns}dependencies/{ns}dependency'):
            name = _coordinates(dep, ns)
            if name:
                managed[name] = _text(dep, f'{ns}version')

        dependencies = {}
        for dep in root_elem.findall(f'{ns}dependencies/{ns}dependency'):
            name = _coordinates(dep, ns)
            if not name:
                continue
            scope = _text(dep, f'{ns}scope') or 'compile'
            if scope == 'test' and not self.options.dev:
                continue

            dep_version = _text(dep, f'{ns}version') or managed.get(name)
            dependencies[name] = DepTree(name=name, version=_substitute(dep_version, properties))

        return DepTree(
            name=f"{group_id}:{artifact_id}" if group_id else artifact_id,
            version=_substitute(version, properties),
            dependencies=dependencies,
            target_file=self._relative(pom_path),
        )

    def _read_properties(self, root_elem: ET.Element, ns: str) -> Dict[str, Optional[str]]:
        properties = {}
        props_elem = root_elem.find(f'{ns}properties')
        if props_elem is not None:
            for prop in props_elem:
                key = prop.tag.split('}', 1)[-1]
                properties[key] = prop.text.strip() if prop.text else None
        return properties


def _namespace(elem: ET.Element) -> str:
    """'{uri}' prefix of the root tag, or '' for namespace-less poms"""
    if elem.tag.startswith('{'):
        return elem.tag.split('}', 1)[0] + '}'
    return ''


def _text(elem: Optional[ET.Element], path: str) -> Optional[str]:
    if elem is None:
        return None
    child = elem.find(path)
    if child is None or not child.text:
        return None
    return child.text.strip()


def _coordinates(dep: ET.Element, ns: str) -> Optional[str]:
    group_id = _text(dep, f'{ns}groupId')
    artifact_id = _text(dep, f'{ns}artifactId')
    if group_id is None or artifact_id is None:
        return None
    return f"{group_id}:{artifact_id}"


def _substitute(value: Optional[str], properties: Dict[str, Optional[str]]) -> Optional[str]:
    """Replace ${name} references; unknown properties are left as written"""
    if not value:
        return value

    def replace(match):
        resolved = properties.get(match.group(1))
        return resolved if resolved is not None else match.group(0)

    return PROPERTY_PATTERN.sub(replace, value)
