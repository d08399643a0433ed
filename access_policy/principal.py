"""
Principal adapter: authorize a host "current user" through its roles.
"""

from typing import Any, Callable, List, Optional, Protocol, Sequence, Union, runtime_checkable

from shared.logging import get_logger, principal_context
from shared.errors import InvalidPrincipal
from .configuration import Configuration
from .engine import PolicyEngine, get_engine
from .rules.models import ANY


@runtime_checkable
class RoleSource(Protocol):
    """Anything that can list the role names it holds."""

    def roles(self) -> Sequence[str]:
        ...


def _principal_label(principal: Any) -> str:
    for attribute in ("id", "user_id", "username", "name"):
        value = getattr(principal, attribute, None)
        if value is not None and not callable(value):
            return str(value)
    return type(principal).__name__


class PrincipalAuthorizer:
    """Answers queries for a principal: allowed if any of its roles allows."""

    def __init__(self, source: Union[PolicyEngine, Configuration, None] = None):
        self.source = source
        self.logger = get_logger("policy.principal")

    def _query(self) -> Callable[..., bool]:
        source = self.source if self.source is not None else get_engine()
        return source.can

    def roles_of(self, principal: Any) -> List[str]:
        """The principal's roles, validated."""
        roles_method = getattr(principal, "roles", None)
        if not callable(roles_method):
            raise InvalidPrincipal(
                f"{type(principal).__name__} should have a roles() method returning a list of role names"
            )

        roles = roles_method()
        if not isinstance(roles, (list, tuple)):
            raise InvalidPrincipal(
                f"{type(principal).__name__}.roles() should return a list of role names",
                {"type": type(roles).__name__}
            )

        return list(roles)

    def can(self, principal: Any, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> bool:
        """True iff any of the principal's roles may perform the action."""
        roles = self.roles_of(principal)
        if not roles:
            return False

        query = self._query()
        with principal_context(_principal_label(principal)):
            for role in roles:
                if query(role, resource=resource, scope=scope, action=action):
                    self.logger.debug("Principal authorized", role=str(role))
                    return True

            self.logger.debug("Principal denied", roles=[str(role) for role in roles])
            return False


def principal_can(
    principal: Any,
    resource: Any = ANY,
    scope: Any = ANY,
    action: Any = ANY,
    source: Optional[Union[PolicyEngine, Configuration]] = None
) -> bool:
    """Authorize ``principal`` against ``source`` (the default engine if omitted)."""
    return PrincipalAuthorizer(source).can(principal, resource=resource, scope=scope, action=action)
