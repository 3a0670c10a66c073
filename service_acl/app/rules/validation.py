"""
Eager validation of a role set before it is compiled.

Catches the configuration mistakes that would otherwise surface as
wrong decisions or non-terminating inheritance walks.
"""

from typing import Dict, List, Sequence

from shared.errors import ConfigurationError
from shared.logging import get_logger

from .compiler import WILDCARD
from .models import Role

logger = get_logger("acl.validation")

_VISITING = 1
_DONE = 2


def validate_roles(roles: Sequence[Role]) -> None:
    """Raise ConfigurationError if ``roles`` cannot be evaluated reliably."""
    by_identifier: Dict[int, Role] = {}
    by_name: Dict[str, Role] = {}

    for role in roles:
        if isinstance(role.identifier, bool) or not isinstance(role.identifier, int) or role.identifier <= 0:
            raise ConfigurationError(
                f"Role '{role.role_name}' must have a positive integer identifier",
                details={"role": role.role_name, "identifier": role.identifier}
            )

        if role.identifier in by_identifier:
            raise ConfigurationError(
                f"Roles '{by_identifier[role.identifier].role_name}' and '{role.role_name}' share identifier {role.identifier}",
                details={"identifier": role.identifier}
            )
        by_identifier[role.identifier] = role

        if role.role_name in by_name:
            raise ConfigurationError(
                f"Role name '{role.role_name}' is declared twice",
                details={"role": role.role_name}
            )
        by_name[role.role_name] = role

    state: Dict[int, int] = {}
    for role in roles:
        _check_hierarchy(role, by_name, state, [])

    logger.debug("Role set validated", role_count=len(roles))


def _check_hierarchy(role: Role, by_name: Dict[str, Role], state: Dict[int, int], path: List[str]):
    marker = state.get(id(role))
    if marker == _DONE:
        return
    if marker == _VISITING:
        cycle = path[path.index(role.role_name):] + [role.role_name]
        raise ConfigurationError(
            f"Inheritance cycle: {' -> '.join(cycle)}",
            details={"cycle": cycle}
        )

    registered = by_name.get(role.role_name)
    if registered is not None and registered is not role:
        raise ConfigurationError(
            f"Parent role '{role.role_name}' conflicts with the registered role of the same name",
            details={"role": role.role_name}
        )

    _check_names(role)

    state[id(role)] = _VISITING
    path.append(role.role_name)
    for parent in role.inherited_roles:
        _check_hierarchy(parent, by_name, state, path)
    path.pop()
    state[id(role)] = _DONE


def _check_names(role: Role):
    if "/" in role.role_name:
        raise ConfigurationError(
            f"Role name '{role.role_name}' must not contain '/'",
            details={"role": role.role_name}
        )

    for resource, privilege_map in role.privileges.items():
        if "/" in resource.name:
            raise ConfigurationError(
                f"Resource name '{resource.name}' must not contain '/'",
                details={"role": role.role_name, "resource": resource.name}
            )
        for privilege in privilege_map:
            if "/" in privilege.name or privilege.name == WILDCARD:
                raise ConfigurationError(
                    f"Privilege name '{privilege.name}' is reserved or contains '/'",
                    details={"role": role.role_name, "resource": resource.name, "privilege": privilege.name}
                )


def validate_observer_role(observer: Role, roles: Sequence[Role]) -> None:
    """Raise ConfigurationError if a registered role shares the observer role's name.

    Rules are keyed by role name, so such a role would lend its grants to
    the observer without the identity holding its bit.
    """
    for role in roles:
        if role.role_name == observer.role_name:
            raise ConfigurationError(
                f"Role name '{role.role_name}' is reserved for the identity's observer role",
                details={"role": role.role_name, "identifier": role.identifier}
            )
