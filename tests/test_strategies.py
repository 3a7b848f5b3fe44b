"""
Tests for the built-in clean strategies against a temporary home directory.
"""

import sys

import pytest

from conftest import FlakyFileSystem, make_tree
from dev_cache_cleaner.core.availability import AvailabilityChecker
from dev_cache_cleaner.core.models import Availability, RunStatus
from dev_cache_cleaner.plugins.builtin import (
    AndroidStudioStrategy,
    CocoaPodsStrategy,
    DockerStrategy,
    GradleStrategy,
    HomebrewStrategy,
    LibraryCacheStrategy,
    NpmStrategy,
    PythonStrategy,
    RubyGemsStrategy,
    VSCodeStrategy,
    XcodeStrategy,
)
from dev_cache_cleaner.utils.filesystem import user_cache_dir

ALWAYS_AVAILABLE = [
    LibraryCacheStrategy,
    XcodeStrategy,
    NpmStrategy,
    CocoaPodsStrategy,
    GradleStrategy,
    AndroidStudioStrategy,
    VSCodeStrategy,
    PythonStrategy,
    RubyGemsStrategy,
]

DOCKER_FILES = (
    "Library/Containers/com.docker.docker/Data/vms/0/data/Docker.raw",
    "Library/Containers/com.docker.docker/Data/vms/hyperkit/state",
    "Library/Group Containers/group.com.docker/buildx-cache/blob",
    "Library/Group Containers/group.com.docker/settings.json",
    ".docker/scan-cache/db",
    ".docker/config.json",
)


def docker_strategy(home, installed=True, running=True):
    app = home.parent / "Applications" / "Docker.app"
    if installed:
        app.mkdir(parents=True)
    return DockerStrategy(
        home,
        app_path=app,
        process_lister=lambda: ["Docker Desktop"] if running else ["launchd"],
    )


# --- Availability Tests ---
@pytest.mark.parametrize("strategy_cls", ALWAYS_AVAILABLE)
def test_strategies_without_dependencies_are_always_available(home, strategy_cls):
    availability = AvailabilityChecker().check_available(strategy_cls(home))
    assert availability == Availability.ok()


@pytest.mark.parametrize("strategy_cls", ALWAYS_AVAILABLE)
def test_clean_twice_is_idempotent(home, run_strategy, strategy_cls):
    make_tree(
        home,
        "Library/Developer/Xcode/DerivedData/App-abc/Build/x.o",
        ".npm/_cacache/index-v5/00/file",
        ".gradle/caches/modules-2/file.jar",
        ".cache/pip/http/blob",
        "project/mod.pyc",
        ".gem/ruby/3.2.0-cache/x.gem",
    )
    strategy = strategy_cls(home)
    first = run_strategy(strategy)
    second = run_strategy(strategy)
    assert first.status == RunStatus.SUCCESS
    assert second.status == RunStatus.SUCCESS
    assert second.entries_removed == 0


# --- Docker Tests ---
def test_docker_not_installed_is_skipped_and_untouched(home, run_strategy):
    make_tree(home, *DOCKER_FILES)
    outcome = run_strategy(docker_strategy(home, installed=False))
    assert outcome.status == RunStatus.SKIPPED
    assert "not installed" in outcome.reason
    for relative in DOCKER_FILES:
        assert (home / relative).exists()


def test_docker_not_running_is_skipped(home, run_strategy):
    make_tree(home, *DOCKER_FILES)
    outcome = run_strategy(docker_strategy(home, running=False))
    assert outcome.status == RunStatus.SKIPPED
    assert outcome.reason == "Docker.app is not running"
    assert (home / DOCKER_FILES[0]).exists()


def test_docker_keeps_hyperkit_and_non_cache_entries(home, run_strategy):
    make_tree(home, *DOCKER_FILES)
    outcome = run_strategy(docker_strategy(home))
    assert outcome.status == RunStatus.SUCCESS
    vms = home / "Library/Containers/com.docker.docker/Data/vms"
    assert [p.name for p in vms.iterdir()] == ["hyperkit"]
    assert not (home / "Library/Group Containers/group.com.docker/buildx-cache").exists()
    assert (home / "Library/Group Containers/group.com.docker/settings.json").exists()
    assert not (home / ".docker/scan-cache").exists()
    assert (home / ".docker/config.json").exists()
    assert outcome.entries_removed == 3


# --- Homebrew Tests ---
def test_homebrew_not_installed_is_skipped(home, tmp_path, run_strategy):
    strategy = HomebrewStrategy(home, roots=[tmp_path / "opt/homebrew", tmp_path / "usr/local/Homebrew"])
    outcome = run_strategy(strategy)
    assert outcome.status == RunStatus.SKIPPED
    assert outcome.reason == "Homebrew is not installed"


def test_homebrew_uses_first_existing_root(home, tmp_path, run_strategy):
    apple, intel = tmp_path / "opt/homebrew", tmp_path / "usr/local/Homebrew"
    make_tree(apple, "Library/Homebrew/Cache/wget.bottle.tar.gz")
    make_tree(apple, "Library/Caches/Homebrew/downloads/x")
    make_tree(intel, "Library/Homebrew/Cache/old.bottle.tar.gz")

    outcome = run_strategy(HomebrewStrategy(home, roots=[apple, intel]))

    assert outcome.status == RunStatus.SUCCESS
    assert list((apple / "Library/Homebrew/Cache").iterdir()) == []
    assert list((apple / "Library/Caches/Homebrew").iterdir()) == []
    assert (intel / "Library/Homebrew/Cache/old.bottle.tar.gz").exists()


def test_homebrew_falls_back_to_second_root(home, tmp_path, run_strategy):
    intel = tmp_path / "usr/local/Homebrew"
    make_tree(intel, "Library/Homebrew/Cache/old.bottle.tar.gz")
    outcome = run_strategy(HomebrewStrategy(home, roots=[tmp_path / "opt/homebrew", intel]))
    assert outcome.status == RunStatus.SUCCESS
    assert list((intel / "Library/Homebrew/Cache").iterdir()) == []


# --- Library Cache Tests ---
def test_library_cache_is_best_effort(home, tmp_path, run_strategy):
    caches = tmp_path / "Caches"
    make_tree(caches, "com.app.one/a", "locked/b", "com.app.two/c")
    fs = FlakyFileSystem(fail_remove={"locked"})
    outcome = run_strategy(LibraryCacheStrategy(home, cache_dir=caches), fs=fs)
    assert outcome.status == RunStatus.SUCCESS
    assert [p.name for p in caches.iterdir()] == ["locked"]
    assert len(outcome.suppressed_errors) == 1


def test_library_cache_defaults_to_user_cache_dir(home, run_strategy):
    caches = user_cache_dir(home)
    make_tree(caches, "some-app/blob")
    outcome = run_strategy(LibraryCacheStrategy(home))
    assert outcome.status == RunStatus.SUCCESS
    assert caches.is_dir()
    assert list(caches.iterdir()) == []


def test_library_cache_unreadable_dir_fails(home, tmp_path, run_strategy):
    caches = tmp_path / "Caches"
    make_tree(caches, "a/b")
    outcome = run_strategy(
        LibraryCacheStrategy(home, cache_dir=caches), fs=FlakyFileSystem(fail_list={"Caches"})
    )
    assert outcome.status == RunStatus.FAILED
    assert "Permission denied" in outcome.reason


# --- Xcode Tests ---
def test_xcode_removes_derived_data_and_archives(home, run_strategy):
    derived = home / "Library/Developer/Xcode/DerivedData"
    archives = home / "Library/Developer/Xcode/Archives"
    make_tree(derived, "a.txt")
    make_tree(archives, "b.txt")

    outcome = run_strategy(XcodeStrategy(home))

    assert outcome.status == RunStatus.SUCCESS
    assert not (derived / "a.txt").exists()
    assert not (archives / "b.txt").exists()
    assert derived.is_dir() and archives.is_dir()
    assert outcome.entries_removed == 2


def test_xcode_strict_failure_fails_target(home, run_strategy):
    make_tree(home / "Library/Developer/Xcode/DerivedData", "App-locked/x", "App-ok/y")
    outcome = run_strategy(XcodeStrategy(home), fs=FlakyFileSystem(fail_remove={"App-locked"}))
    assert outcome.status == RunStatus.FAILED
    assert "App-locked" in outcome.reason


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
@pytest.mark.parametrize(
    "strategy_cls, link",
    [
        (XcodeStrategy, "Library/Developer/Xcode/DerivedData"),
        (CocoaPodsStrategy, "Library/Caches/CocoaPods"),
    ],
)
def test_cache_dir_linked_to_home_fails_untouched(home, run_strategy, strategy_cls, link):
    make_tree(home, "Documents/thesis.txt")
    (home / link).parent.mkdir(parents=True)
    (home / link).symlink_to(home, target_is_directory=True)

    outcome = run_strategy(strategy_cls(home))

    assert outcome.status == RunStatus.FAILED
    assert outcome.entries_removed == 0
    assert (home / "Documents/thesis.txt").exists()
    assert (home / link).is_symlink()


# --- Package Cache Tests ---
def test_npm_gradle_and_cocoapods_empty_their_caches(home, run_strategy):
    make_tree(
        home,
        ".npm/_cacache/content-v2/sha512/aa",
        ".npm/_logs/debug.log",
        ".gradle/caches/modules-2/file.jar",
        ".gradle/gradle.properties",
        "Library/Caches/CocoaPods/Pods/Release/x",
    )
    for strategy in (NpmStrategy(home), GradleStrategy(home), CocoaPodsStrategy(home)):
        assert run_strategy(strategy).status == RunStatus.SUCCESS

    assert list((home / ".npm/_cacache").iterdir()) == []
    assert (home / ".npm/_logs/debug.log").exists()
    assert list((home / ".gradle/caches").iterdir()) == []
    assert (home / ".gradle/gradle.properties").exists()
    assert list((home / "Library/Caches/CocoaPods").iterdir()) == []


def test_rubygems_removes_only_cache_entries(home, run_strategy):
    make_tree(home, ".gem/ruby/foo-cache/x", ".gem/ruby/bar/y")
    outcome = run_strategy(RubyGemsStrategy(home))
    assert outcome.status == RunStatus.SUCCESS
    assert not (home / ".gem/ruby/foo-cache").exists()
    assert (home / ".gem/ruby/bar/y").exists()


def test_missing_cache_dirs_are_not_an_error(home, run_strategy):
    for strategy in (NpmStrategy(home), RubyGemsStrategy(home), VSCodeStrategy(home)):
        outcome = run_strategy(strategy)
        assert outcome.status == RunStatus.SUCCESS
        assert outcome.entries_removed == 0
    assert list(home.iterdir()) == []


# --- IDE Tests ---
def test_android_studio_scan_removes_matches_best_effort(home, run_strategy):
    make_tree(
        home,
        "Library/Application Support/Google/AndroidStudio2023.1/caches/index",
        "Library/Application Support/Google/AndroidStudio2023.1/options/ui.xml",
        "Library/Application Support/Google/AndroidStudio2022.3/caches/index",
        "Documents/notes.txt",
        "AndroidStudioProjects/App/build/cache/keep.bin",
    )
    fs = FlakyFileSystem(fail_remove=set())
    outcome = run_strategy(AndroidStudioStrategy(home), fs=fs)

    support = home / "Library/Application Support/Google"
    assert outcome.status == RunStatus.SUCCESS
    assert not (support / "AndroidStudio2023.1/caches").exists()
    assert not (support / "AndroidStudio2022.3/caches").exists()
    assert (support / "AndroidStudio2023.1/options/ui.xml").exists()
    assert (home / "AndroidStudioProjects/App/build/cache/keep.bin").exists()
    assert (home / "Documents/notes.txt").exists()
    assert len(fs.removed) == 2


def test_vscode_cleans_every_existing_path(home, run_strategy):
    code = home / "Library/Application Support/Code"
    make_tree(code, "Cache/a", "CachedData/b", "User/settings.json")
    make_tree(home, ".vscode/extensions/ms-python.python/package.json")

    outcome = run_strategy(VSCodeStrategy(home))

    assert outcome.status == RunStatus.SUCCESS
    assert list((code / "Cache").iterdir()) == []
    assert list((code / "CachedData").iterdir()) == []
    assert (code / "User/settings.json").exists()
    assert list((home / ".vscode/extensions").iterdir()) == []


# --- Python Tests ---
def test_python_cleans_pip_and_pyc_files(home, run_strategy):
    make_tree(
        home,
        "Library/Caches/pip/http/a",
        ".cache/pip/wheels/b",
        "project/pkg/__pycache__/mod.cpython-311.pyc",
        "project/pkg/mod.py",
        "legacy.pyc",
    )
    outcome = run_strategy(PythonStrategy(home))

    assert outcome.status == RunStatus.SUCCESS
    assert list((home / "Library/Caches/pip").iterdir()) == []
    assert list((home / ".cache/pip").iterdir()) == []
    assert not (home / "project/pkg/__pycache__/mod.cpython-311.pyc").exists()
    assert not (home / "legacy.pyc").exists()
    assert (home / "project/pkg/mod.py").exists()


def test_python_pyc_failures_are_suppressed(home, run_strategy):
    make_tree(home, "a/locked.pyc", "b/free.pyc")
    outcome = run_strategy(PythonStrategy(home), fs=FlakyFileSystem(fail_remove={"locked.pyc"}))
    assert outcome.status == RunStatus.SUCCESS
    assert (home / "a/locked.pyc").exists()
    assert not (home / "b/free.pyc").exists()
    assert outcome.suppressed_errors
