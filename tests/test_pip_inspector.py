"""Unit tests for PipInspector."""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from manifest_scan.core.errors import ManifestParseError
from manifest_scan.inspectors.pip_inspector import PipInspector


@pytest.fixture
def temp_project_dir():
    """Create a temporary project directory."""
    temp_dir = os.path.join(tempfile.mkdtemp(), 'my-service')
    os.makedirs(temp_dir)
    yield temp_dir
    shutil.rmtree(os.path.dirname(temp_dir), ignore_errors=True)


def write_requirements(project_dir, content, name='requirements.txt'):
    with open(os.path.join(project_dir, name), 'w') as f:
        f.write(content)


def test_inspect_requirements(temp_project_dir):
    """Test building a graph from a requirements file."""
    write_requirements(temp_project_dir, '''# Production deps
requests==2.31.0
Flask>=2.0,<3.0
urllib3[socks]==2.0.7  # pinned
-r base.txt
--index-url https://example.com/simple
git+https://github.com/example/repo.git
pywin32==306 ; sys_platform == "win32"

''')

    result = PipInspector(Path(temp_project_dir)).inspect('requirements.txt')
    graph = result.dependency_graph

    assert result.package is None
    assert graph.name == 'my-service'
    assert graph.pkg_manager == 'pip'
    assert [(p.name, p.version) for p in graph.pkgs[1:]] == [
        ('requests', '2.31.0'),
        ('flask', None),
        ('urllib3', '2.0.7'),
        ('pywin32', '306'),
    ]
    assert graph.edges['my-service'] == ['requests@2.31.0', 'flask', 'urllib3@2.0.7', 'pywin32@306']


def test_inspect_named_requirements_file(temp_project_dir):
    """Test that requirements-*.txt files are accepted."""
    write_requirements(temp_project_dir, 'pytest==8.0.0\n', name='requirements-dev.txt')

    result = PipInspector(Path(temp_project_dir)).inspect('requirements-dev.txt')

    assert result.dependency_graph.count_dependencies() == 1
    assert result.plugin.target_file == 'requirements-dev.txt'


def test_inspect_duplicate_requirements(temp_project_dir):
    """Test that repeated requirements appear once."""
    write_requirements(temp_project_dir, 'requests==2.31.0\nrequests==2.31.0\n')

    result = PipInspector(Path(temp_project_dir)).inspect('requirements.txt')

    assert result.dependency_graph.count_dependencies() == 1


def test_unsupported_pip_manifest(temp_project_dir):
    """Test that non-requirements pip manifests are rejected."""
    write_requirements(temp_project_dir, '[packages]\n', name='Pipfile')

    with pytest.raises(ManifestParseError):
        PipInspector(Path(temp_project_dir)).inspect('Pipfile')
