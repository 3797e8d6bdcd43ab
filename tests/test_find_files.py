"""Unit tests for the manifest locator."""

import os
import shutil
import tempfile

import pytest

from manifest_scan.core.detect import AUTO_DETECTABLE_FILES
from manifest_scan.core.find_files import find


@pytest.fixture
def temp_project_dir():
    """Create a temporary project directory."""
    temp_dir = os.path.realpath(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


def touch(root, relative):
    path = os.path.join(root, relative)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    open(path, 'w').close()
    return path


def relative_results(root, files):
    return [os.path.relpath(f, root).replace(os.sep, '/') for f in files]


def test_find_matching_files(temp_project_dir):
    """Test collecting manifests across directories."""
    touch(temp_project_dir, 'package.json')
    touch(temp_project_dir, 'api/pom.xml')
    touch(temp_project_dir, 'tools/requirements.txt')
    touch(temp_project_dir, 'docs/README.md')

    found = find(temp_project_dir, [], AUTO_DETECTABLE_FILES, 4)

    assert relative_results(temp_project_dir, found) == ['api/pom.xml', 'package.json', 'tools/requirements.txt']


def test_find_respects_depth(temp_project_dir):
    """Test that the walk stops at the detection depth."""
    touch(temp_project_dir, 'package.json')
    touch(temp_project_dir, 'a/package.json')
    touch(temp_project_dir, 'a/b/package.json')

    assert relative_results(temp_project_dir, find(temp_project_dir, [], ['package.json'], 0)) == ['package.json']
    assert relative_results(temp_project_dir, find(temp_project_dir, [], ['package.json'], 1)) == [
        'a/package.json', 'package.json']
    assert len(find(temp_project_dir, [], ['package.json'], None)) == 3


def test_find_skips_ignored_and_hidden(temp_project_dir):
    """Test that exclusions, node_modules and dot directories are skipped."""
    touch(temp_project_dir, 'package.json')
    touch(temp_project_dir, 'node_modules/lodash/package.json')
    touch(temp_project_dir, '.cache/package.json')
    touch(temp_project_dir, 'fixtures/package.json')

    found = find(temp_project_dir, ['fixtures'], ['package.json'], 4)

    assert relative_results(temp_project_dir, found) == ['package.json']


def test_find_keeps_preferred_manifest_per_directory(temp_project_dir):
    """Test that a lockfile replaces its manifest in the same directory."""
    touch(temp_project_dir, 'package.json')
    touch(temp_project_dir, 'package-lock.json')
    touch(temp_project_dir, 'web/package.json')
    touch(temp_project_dir, 'web/yarn.lock')
    touch(temp_project_dir, 'ruby/Gemfile')
    touch(temp_project_dir, 'ruby/Gemfile.lock')

    found = find(temp_project_dir, [], AUTO_DETECTABLE_FILES, 4)

    assert relative_results(temp_project_dir, found) == [
        'package-lock.json',
        'ruby/Gemfile.lock',
        'web/yarn.lock',
    ]


def test_find_keeps_different_ecosystems_side_by_side(temp_project_dir):
    """Test that manifests of different ecosystems in one directory are all kept."""
    touch(temp_project_dir, 'package.json')
    touch(temp_project_dir, 'requirements.txt')
    touch(temp_project_dir, 'pom.xml')

    found = find(temp_project_dir, [], AUTO_DETECTABLE_FILES, 4)

    assert relative_results(temp_project_dir, found) == ['package.json', 'pom.xml', 'requirements.txt']


def test_find_empty(temp_project_dir):
    """Test that a root without manifests gives an empty list."""
    assert find(temp_project_dir, [], AUTO_DETECTABLE_FILES, 4) == []


def test_find_root_is_file(temp_project_dir):
    """Test pointing the locator at a manifest file."""
    path = touch(temp_project_dir, 'package.json')

    assert find(path, [], ['package.json'], 4) == [path]
    assert find(path, [], ['pom.xml'], 4) == []
