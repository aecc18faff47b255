"""Domain Types - verifies enum members and their serialized values.

Tests:
    - GET is the only read verb
    - ErrorKind is the closed five-member taxonomy
    - str Enums serialize to their values
"""

import json

from trilingo_access.core.domain_types import (
    Credential, ChannelName, DispatchState, ErrorKind, HttpMethod,
    TransportFailure, UserAction,
)


def test_credential_wraps_str():
    assert Credential("abc") == "abc"


def test_only_get_is_read():
    assert HttpMethod.GET.is_read
    assert not any(m.is_read for m in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.DELETE))


def test_two_channels():
    assert {c.value for c in ChannelName} == {"public", "authenticated"}


def test_dispatch_states():
    assert set(DispatchState) == {
        DispatchState.TRY_PUBLIC, DispatchState.TRY_AUTHENTICATED, DispatchState.DONE,
    }


def test_error_kind_has_five_members():
    assert {k.value for k in ErrorKind} == {
        "permission_denied", "transient", "timeout", "validation", "unknown",
    }


def test_enums_serialize_to_json():
    assert json.dumps({"f": TransportFailure.DNS}) == '{"f": "dns"}'
    assert json.dumps([UserAction.OFFER_RETRY]) == '["offer_retry"]'
