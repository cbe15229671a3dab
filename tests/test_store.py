"""Tests for the installed-version store."""

import pytest

from phx.errors import ActivationFailed, InvalidVersion, NotInstalled


def test_empty_store(store):
    assert store.list() == []
    assert not store.exists("8.1.0")
    assert store.current_global_target() is None
    assert not store.is_pointer_dangling()


def test_list_is_sorted_and_skips_staging(store, install_fake_version):
    install_fake_version("8.2.0")
    install_fake_version("7.4.33")
    (store.versions_dir / ".8.3.0.abc.partial").mkdir()
    (store.versions_dir / "notes.txt").write_text("x")

    assert store.list() == ["7.4.33", "8.2.0"]


def test_exists_checks_directory_only(store):
    (store.versions_dir / "8.1.0").mkdir()
    assert store.exists("8.1.0")


def test_remove(store, install_fake_version):
    path = install_fake_version("8.1.0")
    store.remove("8.1.0")
    assert not path.exists()


def test_remove_missing(store):
    with pytest.raises(NotInstalled):
        store.remove("8.1.0")


def test_point_current_repoints(store, install_fake_version):
    install_fake_version("8.1.0")
    install_fake_version("8.2.0")

    store.point_current("8.1.0")
    assert store.current_global_target() == "8.1.0"

    store.point_current("8.2.0")
    assert store.current_global_target() == "8.2.0"
    assert store.pointer_path.is_symlink()
    assert [p.name for p in store.home.iterdir() if p.name.startswith(".current")] == []


def test_dangling_pointer_is_reported_not_followed(store, install_fake_version):
    install_fake_version("8.1.0")
    store.point_current("8.1.0")
    store.remove("8.1.0")

    assert store.current_global_target() is None
    assert store.is_pointer_dangling()
    assert store.pointer_path.is_symlink()


@pytest.mark.parametrize("version", ["", ".", "..", "../etc", "8.1/0", ".hidden", " 8.1.0"])
def test_invalid_identifiers(store, version):
    with pytest.raises(InvalidVersion):
        store.exists(version)


def test_point_current_over_real_directory(store, install_fake_version):
    install_fake_version("8.1.0")
    (store.pointer_path / "stray").mkdir(parents=True)

    with pytest.raises(ActivationFailed):
        store.point_current("8.1.0")

    assert [p.name for p in store.home.iterdir() if p.name.startswith(".current")] == []
