"""Tests for project settings and graph models."""

import base64
import json
import os
import stat

import pytest
from pydantic import ValidationError

from wg_topology.errors import InvalidSeed
from wg_topology.models import ProjectSettings, generate_seed, load_settings, save_settings
from wg_topology.topology import build_topology


def test_default_settings():
    """Defaults match a usable three-client project."""
    settings = ProjectSettings()
    assert settings.interface == "wg0"
    assert settings.number_of_clients == 3
    assert settings.subnet == "10.0.0.0/24"
    assert settings.endpoint == "remote.endpoint.net:51820"
    assert settings.listen_port == 51820
    assert settings.allowed_ips == "0.0.0.0/0, ::/0"
    assert not settings.use_last_address
    assert not settings.use_preshared_keys
    assert len(settings.seed_bytes()) == 256


def test_generate_seed():
    """Seeds are base64 of the requested size and differ between calls."""
    seed = generate_seed(128)
    assert len(base64.b64decode(seed)) == 16
    assert generate_seed() != generate_seed()

    with pytest.raises(ValueError):
        generate_seed(0)
    with pytest.raises(ValueError):
        generate_seed(100)


def test_to_request():
    """Settings map onto the engine request."""
    settings = ProjectSettings(number_of_clients=5, dns="1.1.1.1", use_preshared_keys=True)
    request = settings.to_request()

    assert request.seed == settings.seed_bytes()
    assert request.peer_count == 5
    assert request.dns == "1.1.1.1"
    assert request.use_preshared_keys

    graph = build_topology(request)
    assert len(graph.clients) == 5


def test_bad_base64_seed():
    """A seed that is not base64 is an InvalidSeed."""
    settings = ProjectSettings(seed="not base64!!")
    with pytest.raises(InvalidSeed):
        settings.to_request()


def test_settings_are_immutable():
    """Edits go through copies."""
    settings = ProjectSettings()
    with pytest.raises(ValidationError):
        settings.subnet = "10.1.0.0/24"


def test_with_new_seed():
    """Regenerating the seed changes the keys and nothing else."""
    settings = ProjectSettings()
    updated = settings.with_new_seed()

    assert updated.seed != settings.seed
    assert settings.changed_fields(updated) == ["seed"]

    old_graph = build_topology(settings.to_request())
    new_graph = build_topology(updated.to_request())
    assert old_graph.server.keys != new_graph.server.keys
    assert old_graph.server.address == new_graph.server.address


def test_changed_fields():
    """Structural comparison lists the fields that differ."""
    settings = ProjectSettings()
    same = ProjectSettings(**settings.model_dump())
    assert settings.changed_fields(same) == []
    assert settings == same

    edited = settings.model_copy(update={"subnet": "10.9.0.0/24", "listen_port": 1234})
    assert settings.changed_fields(edited) == ["subnet", "listen_port"]


def test_save_and_load(tmp_path):
    """Settings survive a save/load cycle and the file is private."""
    settings = ProjectSettings(number_of_clients=7, post_up="echo hi")
    path = save_settings(settings, tmp_path / "project" / "project.json")

    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert json.loads(path.read_text())["number_of_clients"] == 7
    assert load_settings(path) == settings


def test_load_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.json")


def test_load_invalid(tmp_path):
    """Wrongly typed values are rejected."""
    path = tmp_path / "project.json"
    path.write_text(json.dumps({"number_of_clients": "many"}))
    with pytest.raises(ValidationError):
        load_settings(path)


def test_repr_hides_seed():
    settings = ProjectSettings()
    assert settings.seed not in repr(settings)


def test_save_settings_private_from_creation(tmp_path, monkeypatch):
    """The seed file is opened with mode 0600 and existing files are tightened."""
    modes = []
    real_open = os.open

    def recording_open(path, flags, mode=0o777, *args, **kwargs):
        modes.append(mode)
        return real_open(path, flags, mode, *args, **kwargs)

    existing = tmp_path / "existing.json"
    existing.write_text("{}")
    existing.chmod(0o644)

    old_umask = os.umask(0)
    try:
        monkeypatch.setattr(os, "open", recording_open)
        fresh = save_settings(ProjectSettings(), tmp_path / "fresh.json")
        save_settings(ProjectSettings(), existing)
    finally:
        os.umask(old_umask)

    assert modes == [0o600, 0o600]
    assert stat.S_IMODE(fresh.stat().st_mode) == 0o600
    assert stat.S_IMODE(existing.stat().st_mode) == 0o600
