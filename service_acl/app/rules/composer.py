"""
Identity composer: builds the observer role for one identity.
"""

from typing import Iterable

from .models import Identity, Role

OBSERVER_ROLE_IDENTIFIER = 0


def holds_role(identity: Identity, role: Role) -> bool:
    """True when every bit of the role identifier is set in the identity mask."""
    return (identity.role_mask & role.identifier) == role.identifier


def compose_observer_role(identity: Identity, registry: Iterable[Role]) -> Role:
    """Synthesize the composite role inheriting every role the identity holds.

    Parents keep registry order. The composite role owns no privileges.
    """
    inherited = tuple(role for role in registry if holds_role(identity, role))
    return Role(
        identifier=OBSERVER_ROLE_IDENTIFIER,
        role_name=f"user_role_{identity.id}",
        inherited_roles=inherited,
    )
