"""
Role hierarchy data models for the ACL evaluator.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple


# Domain object handed to assertions; None when the check is not object scoped
AclObject = Any

Assertion = Callable[[Optional[AclObject]], bool]

PrivilegeTable = Mapping["Resource", Mapping["Privilege", Sequence[Assertion]]]


@dataclass(frozen=True)
class Resource:
    """Named category of protected entities."""
    name: str


@dataclass(frozen=True)
class Privilege:
    """Named action performable on a resource."""
    name: str


def _freeze_privileges(privileges: Optional[PrivilegeTable]) -> PrivilegeTable:
    frozen = {}
    for resource, privilege_map in (privileges or {}).items():
        frozen[resource] = MappingProxyType({
            privilege: tuple(assertions)
            for privilege, assertions in (privilege_map or {}).items()
        })
    return MappingProxyType(frozen)


@dataclass(frozen=True, eq=False)
class Role:
    """Bit-identified permission bundle with optional parent roles.

    An empty privilege map under a resource allows every privilege of
    that resource. An empty assertion list allows the privilege
    unconditionally. Roles compare by identity.
    """
    identifier: int
    role_name: str
    inherited_roles: Tuple["Role", ...] = ()
    privileges: PrivilegeTable = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "inherited_roles", tuple(self.inherited_roles))
        object.__setattr__(self, "privileges", _freeze_privileges(self.privileges))

    def __repr__(self) -> str:
        parents = [parent.role_name for parent in self.inherited_roles]
        return f"Role({self.role_name!r}, identifier={self.identifier}, inherits={parents})"


@dataclass(frozen=True)
class Identity:
    """Principal being authorized, holding a role bitmask."""
    id: int
    role_mask: int

    @classmethod
    def from_roles(cls, id: int, roles: Iterable[Role]) -> "Identity":
        """Build an identity holding exactly the given roles."""
        mask = 0
        for role in roles:
            mask |= role.identifier
        return cls(id=id, role_mask=mask)
