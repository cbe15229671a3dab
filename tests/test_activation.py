"""Tests for version resolution and activation."""

import pytest

from phx.activation import ActivationResolver, Activator
from phx.activation.resolver import GLOBAL, LOCAL
from phx.errors import NotInstalled, VersionInUse


@pytest.fixture
def resolver(store):
    return ActivationResolver(store)


@pytest.fixture
def activator(store):
    return Activator(store)


@pytest.fixture
def project(tmp_path):
    path = tmp_path / "project"
    path.mkdir()
    return path


def test_nothing_active(resolver, project):
    assert resolver.resolve(project) is None
    assert resolver.resolve_source(project) is None


def test_global_pointer(resolver, activator, install_fake_version, project):
    install_fake_version("8.2.0")
    activator.activate_global("8.2.0")

    assert resolver.resolve_source(project) == ("8.2.0", GLOBAL)


def test_local_pin_beats_global(resolver, activator, install_fake_version, project):
    install_fake_version("8.1.0")
    install_fake_version("8.2.0")
    activator.activate_global("8.2.0")
    activator.activate_local(project, "8.1.0")

    assert resolver.resolve(project) == "8.1.0"
    assert resolver.resolve_source(project).source == LOCAL


def test_pin_is_not_inherited_by_subdirectories(resolver, activator, install_fake_version, project):
    install_fake_version("8.1.0")
    install_fake_version("8.2.0")
    activator.activate_global("8.2.0")
    activator.activate_local(project, "8.1.0")
    nested = project / "src"
    nested.mkdir()

    assert resolver.resolve(nested) == "8.2.0"


def test_pin_is_trimmed_and_not_validated(resolver, project):
    (project / ".php_version").write_text("  7.4.0 \n\n")

    assert resolver.resolve(project) == "7.4.0"


def test_activate_local_writes_pin(activator, install_fake_version, project):
    install_fake_version("8.1.0")
    install_fake_version("8.2.0")
    (project / ".php_version").write_text("8.1.0\n")

    pin = activator.activate_local(project, "8.2.0")

    assert pin == project / ".php_version"
    assert pin.read_text() == "8.2.0\n"
    assert [p.name for p in project.iterdir()] == [".php_version"]


def test_activation_requires_installed_version(activator, project, store):
    with pytest.raises(NotInstalled):
        activator.activate_global("8.1.0")
    with pytest.raises(NotInstalled):
        activator.activate_local(project, "8.1.0")

    assert not store.pointer_path.exists()
    assert not (project / ".php_version").exists()


def test_activate_global_repoints(activator, install_fake_version, store):
    install_fake_version("8.1.0")
    install_fake_version("8.2.0")
    activator.activate_global("8.1.0")
    activator.activate_global("8.2.0")

    assert store.current_global_target() == "8.2.0"


def test_ensure_removable_blocks_global(resolver, activator, install_fake_version, project):
    install_fake_version("8.1.0")
    activator.activate_global("8.1.0")

    with pytest.raises(VersionInUse):
        resolver.ensure_removable("8.1.0", project)


def test_ensure_removable_blocks_local_pin(resolver, activator, install_fake_version, project):
    install_fake_version("8.1.0")
    activator.activate_local(project, "8.1.0")

    with pytest.raises(VersionInUse):
        resolver.ensure_removable("8.1.0", project)


def test_ensure_removable_only_checks_given_directory(resolver, activator, install_fake_version,
                                                      project, tmp_path, store):
    install_fake_version("8.1.0")
    activator.activate_local(project, "8.1.0")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()

    resolver.ensure_removable("8.1.0", elsewhere)
    store.remove("8.1.0")

    assert not store.exists("8.1.0")
