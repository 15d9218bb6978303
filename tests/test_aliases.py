"""Tests for alias storage."""

import pytest
import yaml

from panetap.aliases import AliasStore, normalize_alias_name
from panetap.config import reset_config_manager
from panetap.errors import AliasError


def test_normalize_alias_name():
    assert normalize_alias_name(" @Build ") == "build"
    assert normalize_alias_name("api-v2.test_1") == "api-v2.test_1"


@pytest.mark.parametrize("name", [None, "", "@", "current", "@Active", "bad name", "x/y"])
def test_normalize_alias_name_rejects(name):
    with pytest.raises(AliasError) as exc_info:
        normalize_alias_name(name)
    assert exc_info.value.code == "ERR_INVALID_ALIAS"


def test_missing_file_is_empty(tmp_path):
    store = AliasStore(tmp_path / "none.yaml")
    assert store.all() == {}
    assert store.get("api") is None


def test_set_persists(tmp_path):
    path = tmp_path / "nested" / "aliases.yaml"
    store = AliasStore(path)

    assert store.set("@API", "dev:0.1") == "api"
    store.set("build", "dev:1.0")

    assert yaml.safe_load(path.read_text()) == {"api": "dev:0.1", "build": "dev:1.0"}
    reloaded = AliasStore(path)
    assert reloaded.get("@api") == "dev:0.1"
    assert list(reloaded.all()) == ["api", "build"]


def test_remove(tmp_path):
    path = tmp_path / "aliases.yaml"
    store = AliasStore(path)
    store.set("api", "dev:0.1")

    assert store.remove("api") is True
    assert store.remove("api") is False
    assert AliasStore(path).all() == {}


def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "aliases.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(AliasError):
        AliasStore(path)


def test_default_path_from_environment(tmp_path, monkeypatch):
    target = tmp_path / "custom.yaml"
    monkeypatch.setenv("PANETAP_ALIASES", str(target))
    reset_config_manager()

    assert AliasStore().path == target


def test_default_path_under_xdg(tmp_path):
    assert AliasStore().path == tmp_path / "xdg" / "panetap" / "aliases.yaml"
