"""Role capabilities.

Views ask "can this role do X" instead of branching on role names.
"""

from __future__ import annotations

from enum import Enum

from domain.models import Profile, Role


class Capability(str, Enum):
    APPLY = "apply"
    MANAGE_CATALOG = "manage_catalog"
    PROCESS_APPLICATIONS = "process_applications"
    REGISTER_STAFF = "register_staff"
    VIEW_STAFF_ACTIVITY = "view_staff_activity"


ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.CITIZEN: frozenset({Capability.APPLY}),
    Role.STAFF: frozenset({Capability.PROCESS_APPLICATIONS}),
    Role.ADMIN: frozenset(
        {
            Capability.MANAGE_CATALOG,
            Capability.PROCESS_APPLICATIONS,
            Capability.REGISTER_STAFF,
            Capability.VIEW_STAFF_ACTIVITY,
        }
    ),
}


def has_capability(profile: Profile | None, capability: Capability) -> bool:
    if profile is None:
        return False
    return capability in ROLE_CAPABILITIES.get(profile.role, frozenset())
