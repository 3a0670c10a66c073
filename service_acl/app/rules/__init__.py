"""
Rules package.

Role model, rule compiler, identity composer and the recursive
evaluator.

Modules of interest:
- models: Resource, Privilege, Role and Identity value types.
- compiler: Flattens privilege tables into ``role/resource/privilege`` keys.
- composer: Builds the observer role for an identity bitmask.
- validation: Eager checks for malformed role sets.
- engine: ``Acl`` evaluator.
- definitions: YAML/JSON/dict role descriptions.
"""

from .compiler import WILDCARD, compile_rules, rule_key, wildcard_key
from .composer import compose_observer_role, holds_role
from .definitions import AclDefinition, RoleDefinition, build_roles, load_definition, roles_from_settings
from .engine import Acl
from .models import AclObject, Assertion, Identity, Privilege, Resource, Role
from .validation import validate_roles

__all__ = [
    "Acl",
    "AclDefinition",
    "AclObject",
    "Assertion",
    "Identity",
    "Privilege",
    "Resource",
    "Role",
    "RoleDefinition",
    "WILDCARD",
    "build_roles",
    "compile_rules",
    "compose_observer_role",
    "holds_role",
    "load_definition",
    "roles_from_settings",
    "rule_key",
    "validate_roles",
    "wildcard_key",
]
