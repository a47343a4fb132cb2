"""App Router — tests for the composed procedure catalog.

Tests cover:
    - Every application procedure is registered with the right mode
    - Mutations list the queries they make stale
    - me is the only procedure behind the auth gate
"""

from relay.core.domain_types import ProcedureMode
from relay.services.app_router import (
    build_app_registry, build_greeting_group, build_profile_group,
)


def test_catalog_names_and_modes():
    modes = {s.name: s.mode for s in build_app_registry().catalog()}
    assert modes == {
        "hello": ProcedureMode.QUERY,
        "getRandomNumber": ProcedureMode.QUERY,
        "getProfiles": ProcedureMode.QUERY,
        "getProfile": ProcedureMode.QUERY,
        "createProfile": ProcedureMode.MUTATION,
        "updateProfile": ProcedureMode.MUTATION,
        "me": ProcedureMode.QUERY,
    }


def test_mutations_invalidate_profile_queries():
    specs = {s.name: s for s in build_profile_group().catalog()}
    assert set(specs["createProfile"].invalidates) == {"getProfiles", "getProfile", "me"}
    assert set(specs["updateProfile"].invalidates) == {"getProfiles", "getProfile", "me"}


def test_only_me_requires_auth():
    registry = build_app_registry()
    gated = [name for name in registry.names() if registry.resolve(name).requires_auth]
    assert gated == ["me"]


def test_registries_are_fresh_per_call():
    assert build_greeting_group() is not build_greeting_group()
    assert len(build_app_registry()) == 7
