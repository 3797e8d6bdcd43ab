"""Tests for dependency collection across scan modes."""

import json
import os
import shutil
import tempfile

import pytest

from manifest_scan.core.analytics import Analytics
from manifest_scan.core.errors import (
    MalformedInspectionResultError,
    NoSupportedManifestsFoundError,
    OutOfSyncError,
)
from manifest_scan.core.models import (
    Artifact,
    DepTree,
    MultiProjectResult,
    PluginMeta,
    ProjectKind,
    ScannedProject,
    ScanOptions,
    SinglePackageResult,
)
from manifest_scan.core.strategy import ScanMode
from manifest_scan.deps import get_deps_from_plugin


@pytest.fixture
def temp_project_dir():
    """Create a temporary project directory."""
    temp_dir = os.path.realpath(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


def write_json(path, data):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f)


class Recorder:
    """Callable collaborator that records its calls"""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)
        if self.error:
            raise self.error
        return self.result


def artifact_project(name):
    return ScannedProject.from_artifacts([Artifact(type='depTree', data=DepTree(name=name))])


def test_single_project_scenario(temp_project_dir):
    """Test a root with only package.json and no multi-project flags."""
    write_json(os.path.join(temp_project_dir, 'package.json'), {'name': 'my-app', 'version': '1.0.0'})
    options = ScanOptions()

    deps = get_deps_from_plugin(temp_project_dir, options)

    assert len(deps.scanned_projects) == 1
    project = deps.scanned_projects[0]
    assert project.kind is ProjectKind.DEP_TREE
    assert project.dep_tree.name == 'my-app'
    assert project.target_file == 'package.json'
    assert deps.project_names == ['my-app']
    assert options.project_names == ['my-app']
    assert options.file is None


def test_single_project_passes_resolved_file(temp_project_dir):
    """Test that the single inspector receives the detected file."""
    write_json(os.path.join(temp_project_dir, 'package.json'), {'name': 'my-app'})
    inspector = Recorder(SinglePackageResult(
        plugin=PluginMeta(name='fake', package_manager='npm'), package=DepTree(name='my-app')))

    get_deps_from_plugin(temp_project_dir, ScanOptions(), single_inspector=inspector)

    root, passed_options = inspector.calls[0]
    assert root == temp_project_dir
    assert passed_options.file == 'package.json'


def test_single_inspector_may_return_multi(temp_project_dir):
    """Test that a single-mode inspector can report several projects."""
    inspector = Recorder(MultiProjectResult(
        plugin=PluginMeta(name='fake', package_manager='maven'),
        scanned_projects=[artifact_project('parent'), artifact_project('child')],
    ))

    deps = get_deps_from_plugin(temp_project_dir, ScanOptions(file='pom.xml'), single_inspector=inspector)

    assert [p.kind for p in deps.scanned_projects] == [ProjectKind.ARTIFACTS, ProjectKind.ARTIFACTS]
    assert deps.project_names == ['parent', 'child']


def test_malformed_single_result_names_package_manager(temp_project_dir):
    """Test an inspector returning neither tree nor graph."""
    inspector = Recorder(SinglePackageResult(plugin=PluginMeta(name='fake', package_manager='pip')))
    options = ScanOptions(file='requirements.txt', package_manager='pip')

    with pytest.raises(MalformedInspectionResultError) as exc_info:
        get_deps_from_plugin(temp_project_dir, options, single_inspector=inspector)

    assert exc_info.value.origin == 'pip'
    assert options.project_names is None


def test_malformed_single_result_names_docker(temp_project_dir):
    """Test that docker scans are named docker in the error."""
    inspector = Recorder(SinglePackageResult(plugin=PluginMeta(name='fake', package_manager='deb')))

    with pytest.raises(MalformedInspectionResultError) as exc_info:
        get_deps_from_plugin(temp_project_dir, ScanOptions(docker=True), single_inspector=inspector)

    assert exc_info.value.origin == 'docker'


def test_single_project_nothing_to_scan(temp_project_dir):
    """Test that no inspector runs when no target can be resolved."""
    inspector = Recorder()

    with pytest.raises(NoSupportedManifestsFoundError):
        get_deps_from_plugin(temp_project_dir, ScanOptions(), single_inspector=inspector)

    assert inspector.calls == []


def test_inspector_errors_propagate(temp_project_dir):
    """Test that inspector failures reach the caller unchanged."""
    error = OutOfSyncError('lodash', 'package-lock.json')
    inspector = Recorder(error=error)

    with pytest.raises(OutOfSyncError) as exc_info:
        get_deps_from_plugin(temp_project_dir, ScanOptions(file='package.json'), single_inspector=inspector)

    assert exc_info.value is error


def test_multi_project_no_manifests(temp_project_dir):
    """Test that an empty locator result fails before any inspection."""
    locator = Recorder([])
    processor = Recorder()
    analytics = Analytics()

    with pytest.raises(NoSupportedManifestsFoundError) as exc_info:
        get_deps_from_plugin(
            temp_project_dir, ScanOptions(all_projects=True),
            locator=locator,
            multi_processors={ScanMode.ALL_PROJECTS: processor},
            analytics=analytics,
        )

    assert exc_info.value.at_locations == [temp_project_dir]
    assert 'package.json' in exc_info.value.user_message
    assert processor.calls == []
    assert analytics.events == []


def test_multi_project_locator_arguments(temp_project_dir):
    """Test that the locator gets root, exclusions, file names and depth."""
    locator = Recorder(['/repo/package.json'])
    processor = Recorder(MultiProjectResult(
        plugin=PluginMeta(name='fake'), scanned_projects=[artifact_project('a')]))
    options = ScanOptions(yarn_workspaces=True, exclude=['fixtures'], detection_depth=2)

    get_deps_from_plugin(temp_project_dir, options, locator=locator,
                         multi_processors={ScanMode.YARN_WORKSPACES: processor})

    assert locator.calls == [(temp_project_dir, ['fixtures'], ['package.json'], 2)]
    assert processor.calls == [(temp_project_dir, options, ['/repo/package.json'])]


def test_all_projects_scenario(temp_project_dir):
    """Test three manifests, each reported as one depTree artifact."""
    files = [os.path.join(temp_project_dir, p) for p in ['a/package.json', 'b/pom.xml', 'c/requirements.txt']]
    processor = Recorder(MultiProjectResult(
        plugin=PluginMeta(name='fake'),
        scanned_projects=[artifact_project('web'), artifact_project('api'), artifact_project('tools')],
    ))
    analytics = Analytics()
    options = ScanOptions(all_projects=True, exclude=['build'], detection_depth=3)

    deps = get_deps_from_plugin(
        temp_project_dir, options,
        locator=Recorder(files),
        multi_processors={ScanMode.ALL_PROJECTS: processor},
        analytics=analytics,
    )

    assert deps.project_names == ['web', 'api', 'tools']
    assert options.project_names == ['web', 'api', 'tools']
    assert len(deps.scanned_projects) == 3
    assert analytics.events == [('allProjects', {
        'scannedProjects': 3,
        'targetFiles': files,
        'packageManagers': ['npm', 'maven', 'pip'],
        'levelsDeep': 3,
        'ignore': ['build'],
    })]


def test_all_projects_end_to_end(temp_project_dir):
    """Test scanning real manifests with the default collaborators."""
    write_json(os.path.join(temp_project_dir, 'web', 'package.json'), {
        'name': 'web', 'version': '1.0.0', 'dependencies': {'left-pad': '^1.3.0'}})
    os.makedirs(os.path.join(temp_project_dir, 'tools'))
    with open(os.path.join(temp_project_dir, 'tools', 'requirements.txt'), 'w') as f:
        f.write("requests==2.31.0\nclick>=8.1\n")
    analytics = Analytics()

    deps = get_deps_from_plugin(temp_project_dir, ScanOptions(all_projects=True), analytics=analytics)

    assert deps.project_names == ['tools', 'web']
    assert [p.kind for p in deps.scanned_projects] == [ProjectKind.DEP_GRAPH, ProjectKind.DEP_TREE]
    assert [p.target_file for p in deps.scanned_projects] == ['tools/requirements.txt', 'web/package.json']
    assert [p.package_manager for p in deps.scanned_projects] == ['pip', 'npm']
    assert analytics.get('allProjects')['packageManagers'] == ['pip', 'npm']


def test_all_projects_end_to_end_no_manifests(temp_project_dir):
    """Test the scenario of an auto-detect scan with nothing to find."""
    analytics = Analytics()

    with pytest.raises(NoSupportedManifestsFoundError) as exc_info:
        get_deps_from_plugin(temp_project_dir, ScanOptions(all_projects=True), analytics=analytics)

    assert temp_project_dir in str(exc_info.value)
    assert analytics.events == []


def test_names_published_after_result(temp_project_dir):
    """Test that names are only published once every project is known."""
    seen = []

    def processor(root, options, files):
        seen.append(options.project_names)
        return MultiProjectResult(plugin=PluginMeta(name='fake'), scanned_projects=[artifact_project('x')])

    options = ScanOptions(all_projects=True)
    get_deps_from_plugin(temp_project_dir, options, locator=Recorder(['package.json']),
                         multi_processors={ScanMode.ALL_PROJECTS: processor})

    assert seen == [None]
    assert options.project_names == ['x']


def test_analytics_sink_failure_is_not_raised(temp_project_dir):
    """Test that a failing analytics sink does not abort the scan."""
    def sink(key, value):
        raise RuntimeError("collector down")

    analytics = Analytics(sink=sink)
    processor = Recorder(MultiProjectResult(plugin=PluginMeta(name='fake'), scanned_projects=[artifact_project('x')]))

    deps = get_deps_from_plugin(temp_project_dir, ScanOptions(all_projects=True),
                                locator=Recorder(['package.json']),
                                multi_processors={ScanMode.ALL_PROJECTS: processor},
                                analytics=analytics)

    assert deps.project_names == ['x']
    assert analytics.get('allProjects')['scannedProjects'] == 1


def test_all_projects_through_symlinked_root(temp_project_dir):
    """Test scanning a root that is reached through a symlink."""
    real_root = os.path.join(temp_project_dir, 'real')
    write_json(os.path.join(real_root, 'web', 'package.json'), {'name': 'web', 'version': '1.0.0'})
    os.makedirs(os.path.join(temp_project_dir, 'a', 'b'))
    link = os.path.join(temp_project_dir, 'a', 'b', 'link')
    os.symlink(real_root, link)

    deps = get_deps_from_plugin(link, ScanOptions(all_projects=True))

    assert deps.project_names == ['web']
    assert [p.target_file for p in deps.scanned_projects] == ['web/package.json']


def test_analytics_recorded_without_injected_collector(temp_project_dir):
    """Test that a default collector still receives the multi-project event."""
    processor = Recorder(MultiProjectResult(plugin=PluginMeta(name='fake'), scanned_projects=[artifact_project('x')]))

    deps = get_deps_from_plugin(temp_project_dir, ScanOptions(all_projects=True),
                                locator=Recorder(['package.json']),
                                multi_processors={ScanMode.ALL_PROJECTS: processor})

    assert deps.analytics.get('allProjects')['targetFiles'] == ['package.json']


def test_analytics_tags_unknown_files_as_none(temp_project_dir):
    """Test that an unmapped file name does not abort a finished scan."""
    analytics = Analytics()
    processor = Recorder(MultiProjectResult(plugin=PluginMeta(name='fake'), scanned_projects=[artifact_project('x')]))

    deps = get_deps_from_plugin(temp_project_dir, ScanOptions(all_projects=True),
                                locator=Recorder(['package.json', 'build.unknown']),
                                multi_processors={ScanMode.ALL_PROJECTS: processor},
                                analytics=analytics)

    assert deps.project_names == ['x']
    assert analytics.get('allProjects')['packageManagers'] == ['npm', None]
