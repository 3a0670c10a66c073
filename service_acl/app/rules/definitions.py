"""
Declarative role definitions.

Roles can be described as data (YAML, JSON or plain dicts) and turned
into ``Role`` objects. Assertions are referenced by name and resolved
against a registry of callables supplied by the host application::

    roles:
      - identifier: 1
        name: guest
        resources:
          main: {read: []}
      - identifier: 2
        name: registered
        parents: [guest]
        resources:
          profile: {edit: [is_owner]}
      - identifier: 4
        name: admin
        resources:
          admin: {}          # every privilege
"""

import json
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from shared.config import AclSettings
from shared.errors import ConfigurationError
from shared.logging import get_logger

from .models import Assertion, Privilege, Resource, Role

logger = get_logger("acl.definitions")


class RoleDefinition(BaseModel):
    """Data description of one role."""
    identifier: int = Field(..., gt=0, description="Role bit value")
    name: str = Field(..., min_length=1, description="Unique role name")
    parents: List[str] = Field(default_factory=list, description="Names of inherited roles")
    resources: Dict[str, Optional[Dict[str, List[str]]]] = Field(
        default_factory=dict,
        description="Resource -> privilege -> assertion names; empty or null allows every privilege"
    )


class AclDefinition(BaseModel):
    """Data description of a complete role set."""
    roles: List[RoleDefinition] = Field(default_factory=list)


def load_definition(path: Union[str, Path]) -> AclDefinition:
    """Load a role set from a YAML or JSON file."""
    path = Path(path)
    try:
        with open(path, "r") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Cannot read role definitions from {path}",
            details={"path": str(path), "error": str(e)}
        ) from e

    try:
        definition = AclDefinition.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid role definitions in {path}",
            details={"path": str(path), "errors": e.errors(include_url=False)}
        ) from e

    logger.info("Role definitions loaded", path=str(path), role_count=len(definition.roles))
    return definition


def build_roles(definition: AclDefinition,
                assertions: Optional[Mapping[str, Assertion]] = None) -> List[Role]:
    """Turn a definition into roles, in definition order.

    Parents may be declared in any order. Unknown parent or assertion
    names and parent cycles raise ConfigurationError.
    """
    assertions = assertions or {}
    definitions = {}
    for role_def in definition.roles:
        if role_def.name in definitions:
            raise ConfigurationError(
                f"Role name '{role_def.name}' is declared twice",
                details={"role": role_def.name}
            )
        definitions[role_def.name] = role_def

    built: Dict[str, Role] = {}
    for role_def in definition.roles:
        _build_role(role_def.name, definitions, assertions, built, [])

    return [built[role_def.name] for role_def in definition.roles]


def _build_role(name: str, definitions: Dict[str, RoleDefinition],
                assertions: Mapping[str, Assertion], built: Dict[str, Role],
                path: List[str]) -> Role:
    if name in built:
        return built[name]
    if name in path:
        cycle = path[path.index(name):] + [name]
        raise ConfigurationError(
            f"Inheritance cycle: {' -> '.join(cycle)}",
            details={"cycle": cycle}
        )

    role_def = definitions.get(name)
    if role_def is None:
        raise ConfigurationError(
            f"Unknown parent role '{name}'",
            details={"role": path[-1] if path else None, "parent": name}
        )

    path.append(name)
    parents = tuple(
        _build_role(parent, definitions, assertions, built, path)
        for parent in role_def.parents
    )
    path.pop()

    role = Role(
        identifier=role_def.identifier,
        role_name=role_def.name,
        inherited_roles=parents,
        privileges=_resolve_privileges(role_def, assertions),
    )
    built[name] = role
    return role


def _resolve_privileges(role_def: RoleDefinition, assertions: Mapping[str, Assertion]):
    privileges = {}
    for resource_name, privilege_map in role_def.resources.items():
        resolved = {}
        for privilege_name, assertion_names in (privilege_map or {}).items():
            missing = [n for n in assertion_names if n not in assertions]
            if missing:
                raise ConfigurationError(
                    f"Unknown assertion(s) {missing} on {role_def.name}/{resource_name}/{privilege_name}",
                    details={"role": role_def.name, "assertions": missing}
                )
            resolved[Privilege(privilege_name)] = [assertions[n] for n in assertion_names]
        privileges[Resource(resource_name)] = resolved
    return privileges


def roles_from_settings(settings: AclSettings,
                        assertions: Optional[Mapping[str, Assertion]] = None) -> List[Role]:
    """Build roles from the definitions file named in settings."""
    if not settings.definitions_file:
        raise ConfigurationError("No role definitions file configured (ACL_DEFINITIONS_FILE)")
    return build_roles(load_definition(settings.definitions_file), assertions)
