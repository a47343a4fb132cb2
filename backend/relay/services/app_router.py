"""App Router — the procedure catalog, composed from per-area groups.

Invariants:
    - Every procedure name -> handler mapping is written out here; adding a
      procedure requires editing one of the group builders
    - Groups merge into one flat namespace; a name clash fails at startup
    - build_app_registry() returns a fresh registry on every call

Design Decisions:
    - One builder per area (greeting, profiles) mirroring one handler class per area
    - createProfile/updateProfile list the queries they make stale so client
      caches can drop them eagerly
"""

from relay.core.procedure import mutation, query
from relay.schemas.greeting import HelloInput, RandomNumberInput
from relay.schemas.profile import ProfileCreate, ProfileLookup, ProfileUpdate
from relay.services.handle_greeting import GreetingHandlers
from relay.services.handle_profiles import ProfileHandlers
from relay.services.procedure_registry import ProcedureRegistry


def build_greeting_group(handlers: GreetingHandlers | None = None) -> ProcedureRegistry:
    greeting = handlers or GreetingHandlers()
    return ProcedureRegistry({
        "hello": query(greeting.hello, HelloInput),
        "getRandomNumber": query(greeting.get_random_number, RandomNumberInput),
    })


def build_profile_group(handlers: ProfileHandlers | None = None) -> ProcedureRegistry:
    profiles = handlers or ProfileHandlers()
    return ProcedureRegistry({
        "getProfiles": query(profiles.get_profiles),
        "getProfile": query(profiles.get_profile, ProfileLookup),
        "createProfile": mutation(
            profiles.create_profile, ProfileCreate,
            invalidates=("getProfiles", "getProfile", "me"),
        ),
        "updateProfile": mutation(
            profiles.update_profile, ProfileUpdate,
            invalidates=("getProfiles", "getProfile", "me"),
        ),
        "me": query(profiles.me, requires_auth=True),
    })


def build_app_registry(
    greeting: GreetingHandlers | None = None,
    profiles: ProfileHandlers | None = None,
) -> ProcedureRegistry:
    """Compose all groups into the application registry."""
    registry = ProcedureRegistry()
    registry.include(build_greeting_group(greeting))
    registry.include(build_profile_group(profiles))
    return registry
