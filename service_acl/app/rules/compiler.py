"""
Rule compiler: flattens role privilege tables into a lookup table.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple

from shared.logging import get_logger

from .models import Assertion, Privilege, Resource, Role

WILDCARD = "*"

CompiledRules = Mapping[str, Tuple[Assertion, ...]]

logger = get_logger("acl.compiler")


def rule_key(role: Role, resource: Resource, privilege: Privilege) -> str:
    """Key for a role/resource/privilege triple: ``role/resource/privilege``."""
    return f"{role.role_name}/{resource.name}/{privilege.name}"


def wildcard_key(role: Role, resource: Resource) -> str:
    """Key granting every privilege of a resource: ``role/resource/*``."""
    return f"{role.role_name}/{resource.name}/{WILDCARD}"


def compile_rules(roles: Iterable[Role]) -> CompiledRules:
    """Flatten the privilege tables of ``roles`` into one read-only mapping.

    A resource declared with an empty privilege map compiles to a single
    wildcard entry with no assertions. Duplicate keys overwrite earlier
    ones.
    """
    rules: Dict[str, Tuple[Assertion, ...]] = {}
    wildcards = 0

    for role in roles:
        for resource, privilege_map in role.privileges.items():
            if not privilege_map:
                rules[wildcard_key(role, resource)] = ()
                wildcards += 1
                continue

            for privilege, assertions in privilege_map.items():
                rules[rule_key(role, resource, privilege)] = tuple(assertions)

    logger.debug("Rules compiled", rule_count=len(rules), wildcard_count=wildcards)
    return MappingProxyType(rules)
