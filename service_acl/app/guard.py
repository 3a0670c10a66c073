"""
Boundary between the evaluator and request-handling code.

The guard separates "no identity / no roles" (authentication) from
"identity lacks this permission" (authorization) so host code can
dispatch 401 and 403 differently.
"""

from typing import Callable, Optional

from fastapi import HTTPException, Request

from shared.errors import AuthenticationError, AuthorizationError
from shared.logging import get_logger, set_identity_context

from .rules.engine import Acl
from .rules.models import AclObject, Privilege, Resource


class AccessGuard:
    """Raise-on-failure wrapper around an ``Acl``."""

    def __init__(self, acl: Optional[Acl]):
        self.acl = acl
        self.logger = get_logger("acl.guard")

    def authenticate(self) -> Acl:
        """Ensure an identity holding at least one registered role is present."""
        if self.acl is None:
            raise AuthenticationError("No identity present")

        if not self.acl.has_roles():
            self.logger.warning("Identity holds no registered role", identity_id=self.acl.identity.id)
            raise AuthenticationError(
                "Identity holds no registered role",
                details={"identity_id": self.acl.identity.id}
            )

        set_identity_context(self.acl.identity.id)
        return self.acl

    def authorize(self, resource: Resource, privilege: Privilege,
                  obj: Optional[AclObject] = None) -> Acl:
        """Ensure the identity may perform ``privilege`` on ``resource``."""
        acl = self.authenticate()

        if not acl.is_allowed(resource, privilege, obj):
            self.logger.warning(
                "Authorization failed",
                identity_id=acl.identity.id,
                resource=resource.name,
                privilege=privilege.name
            )
            raise AuthorizationError(
                f"Not allowed to {privilege.name} {resource.name}",
                details={"resource": resource.name, "privilege": privilege.name}
            )

        return acl


def require(resource: Resource, privilege: Privilege) -> Callable[[Request], Acl]:
    """FastAPI dependency enforcing a permission.

    Expects the request-scoped evaluator on ``request.state.acl``.
    """

    def dependency(request: Request) -> Acl:
        guard = AccessGuard(getattr(request.state, "acl", None))
        try:
            return guard.authorize(resource, privilege)
        except AuthenticationError as e:
            raise HTTPException(status_code=401, detail=e.to_response().model_dump())
        except AuthorizationError as e:
            raise HTTPException(status_code=403, detail=e.to_response().model_dump())

    return dependency
