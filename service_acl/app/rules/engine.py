"""
ACL evaluation engine.

An ``Acl`` is built for one identity snapshot and a fixed role set. It
compiles the rule table and the identity's observer role once, then
answers allow/deny queries by key lookup plus a recursive walk over the
inheritance graph. Permission is the union over a role and all of its
ancestors: there is no deny rule, absence of a key is the only denial,
and assertions can only turn a matched grant into a denial.
"""

from typing import Optional, Sequence

from shared.config import AclSettings
from shared.logging import get_logger
from shared.metrics import AclMetrics, get_metrics

from .compiler import CompiledRules, compile_rules, rule_key, wildcard_key
from .composer import compose_observer_role
from .models import AclObject, Identity, Privilege, Resource, Role
from .validation import validate_observer_role, validate_roles


class Acl:
    """Role/resource/privilege evaluator for a single identity."""

    def __init__(self, roles: Sequence[Role], identity: Identity,
                 settings: Optional[AclSettings] = None,
                 metrics: Optional[AclMetrics] = None):
        self.logger = get_logger("acl.engine")
        self.settings = settings or AclSettings()
        self.metrics = metrics
        if self.metrics is None and self.settings.metrics_enabled:
            self.metrics = get_metrics()

        self.roles = tuple(roles)
        self.identity = identity

        if self.settings.validate_roles:
            validate_roles(self.roles)

        self.rules: CompiledRules = compile_rules(self.roles)
        self.observer_role: Role = compose_observer_role(identity, self.roles)
        validate_observer_role(self.observer_role, self.roles)

        if self.metrics is not None:
            self.metrics.record_evaluator_built()

        self.logger.info(
            "ACL built",
            identity_id=identity.id,
            role_count=len(self.roles),
            rule_count=len(self.rules),
            observer_roles=[role.role_name for role in self.observer_role.inherited_roles]
        )

    @property
    def observer_entity(self) -> Identity:
        """The identity this evaluator was built for."""
        return self.identity

    def has_roles(self) -> bool:
        """True when the identity holds at least one registered role."""
        return bool(self.observer_role.inherited_roles)

    def is_allowed(self, resource: Resource, privilege: Privilege,
                   obj: Optional[AclObject] = None) -> bool:
        """Check whether the identity may perform ``privilege`` on ``resource``.

        ``obj`` is passed to every assertion on a matched rule. Exceptions
        raised by assertions propagate to the caller.
        """
        result = self.allowed(self.observer_role, resource, privilege, obj)

        if self.metrics is not None:
            self.metrics.record_decision(result)

        self.logger.debug(
            "ACL decision",
            identity_id=self.identity.id,
            resource=resource.name,
            privilege=privilege.name,
            allowed=result
        )
        return result

    def allowed(self, role: Role, resource: Resource, privilege: Privilege,
                obj: Optional[AclObject] = None) -> bool:
        """Recursive check for ``role`` and its ancestors.

        1. resource allowed for every privilege (wildcard entry)
        2. resource allowed for the given privilege, all assertions true
        3. any inherited role allowed
        """
        if wildcard_key(role, resource) in self.rules:
            return True

        if self._check_role(role, resource, privilege, obj):
            return True

        return any(
            self.allowed(parent, resource, privilege, obj)
            for parent in role.inherited_roles
        )

    def _check_role(self, role: Role, resource: Resource, privilege: Privilege,
                    obj: Optional[AclObject]) -> bool:
        assertions = self.rules.get(rule_key(role, resource, privilege))
        if assertions is None:
            return False
        return all(assertion(obj) for assertion in assertions)
