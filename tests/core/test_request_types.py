"""Request Types - descriptor factories and outcome properties."""

import dataclasses

import pytest

from trilingo_access.core.domain_types import ChannelName, HttpMethod, TransportFailure
from trilingo_access.core.request_types import (
    AttemptOutcome, ChannelConfig, RequestDescriptor, UploadFile, is_pure_public_path,
)


def test_pure_public_paths():
    assert is_pure_public_path("/auth/login")
    assert is_pure_public_path("/auth/register")
    assert not is_pure_public_path("/auth/logout")
    assert not is_pure_public_path("/auth/me")


def test_write_rejects_get():
    with pytest.raises(ValueError):
        RequestDescriptor.write(HttpMethod.GET, "/Levels")


def test_write_pure_public_override():
    descriptor = RequestDescriptor.write(
        HttpMethod.POST, "/auth/login", {}, pure_public=False,
    )
    assert not descriptor.pure_public


def test_descriptor_is_frozen():
    descriptor = RequestDescriptor.read("/Levels")
    with pytest.raises(dataclasses.FrozenInstanceError):
        descriptor.path = "/Stages"  # type: ignore[misc]


def test_upload_flag():
    upload = UploadFile("file", "a.png", b"x", "image/png")
    descriptor = RequestDescriptor.write(HttpMethod.POST, "/up", files=(upload,))
    assert descriptor.is_upload
    assert not RequestDescriptor.read("/Levels").is_upload


def test_channel_url_for_joins_single_slash():
    config = ChannelConfig(ChannelName.PUBLIC, "http://api.test/api/", 30.0)
    assert config.url_for("/Levels") == "http://api.test/api/Levels"
    assert config.url_for("Levels") == "http://api.test/api/Levels"
    assert not config.authenticated


def test_outcome_properties():
    ok = AttemptOutcome(ChannelName.PUBLIC, status_code=204)
    denied = AttemptOutcome(ChannelName.PUBLIC, status_code=403)
    failed = AttemptOutcome(ChannelName.PUBLIC, failure=TransportFailure.DNS)
    assert ok.ok and ok.responded
    assert denied.is_permission_denied and not denied.ok
    assert not failed.responded and not failed.ok
