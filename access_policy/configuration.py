"""
Policy configuration: the role registry, its construction and querying.
"""

from typing import Any, Callable, Dict, Optional

from shared.config import PolicySettings, get_settings
from shared.logging import get_logger
from shared.errors import BadConfiguration, BadMatch, NotConfigured, RoleNotFound
from .definitions.role import Role
from .rules.models import ANY, Decision, is_wildcard, name_of


WILDCARD_POLICIES = ("evaluate", "reject")


class Configuration:
    """All roles of a policy, linked and resolved by ``construct()``."""

    def __init__(
        self,
        settings: Optional[PolicySettings] = None,
        max_depth: Optional[int] = None,
        wildcard_policy: Optional[str] = None
    ):
        self.settings = settings or get_settings()
        self.max_depth = max_depth if max_depth is not None else self.settings.max_inheritance_depth
        self.wildcard_policy = wildcard_policy or self.settings.wildcard_query_policy
        self.roles: Dict[str, Role] = {}
        self.constructed = False
        self.logger = get_logger("policy.configuration")

        if self.max_depth < 1:
            raise BadConfiguration("Maximum inheritance depth must be at least 1", {"max_depth": self.max_depth})

        if self.wildcard_policy not in WILDCARD_POLICIES:
            raise BadConfiguration(
                f"Unknown wildcard query policy {self.wildcard_policy}",
                {"allowed": list(WILDCARD_POLICIES)}
            )

    def add_role(self, role: Role) -> Role:
        """Register a role; names are unique."""
        if self.constructed:
            raise BadConfiguration("Configuration is already constructed", {"role": role.name})

        if role.name in self.roles:
            raise BadConfiguration(f"Role {role.name} already defined", {"role": role.name})

        self.roles[role.name] = role
        return role

    def find_role(self, role: Any) -> Role:
        """Look up a role by name (or by anything carrying a ``name``)."""
        name = name_of(role)
        found = self.roles.get(name)
        if found is None:
            raise RoleNotFound(name)
        return found

    def construct(self) -> "Configuration":
        """Link parents, resolve inheritance and freeze every role."""
        if self.constructed:
            return self

        # pass 1: parent names -> roles
        for role in self.roles.values():
            role.link_parents(self.roles)

        # pass 2: inheritance, order-independent; each ancestor is resolved once
        resolved = {}
        for role in self.roles.values():
            role.inherit(self.max_depth, resolved)

        for role in self.roles.values():
            role.freeze()

        self.constructed = True

        self.logger.info(
            "Configuration constructed",
            roles=len(self.roles),
            rules=self.rule_count(),
            max_depth=self.max_depth
        )

        return self

    def can(self, role: Any, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> bool:
        """Whether ``role`` may perform ``action`` on ``resource`` within ``scope``."""
        return self.explain(role, resource=resource, scope=scope, action=action).allowed

    def explain(self, role: Any, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> Decision:
        """Decide a query and report the winning rule."""
        if not self.constructed:
            raise NotConfigured("Configuration has not been constructed")

        if self.wildcard_policy == "reject" and is_wildcard(resource) and is_wildcard(scope):
            raise BadMatch(
                "Queries must name a resource or a scope",
                {"role": name_of(role), "action": name_of(action)}
            )

        return self.find_role(role).explain(resource=resource, scope=scope, action=action)

    def rule_count(self) -> int:
        return sum(len(role.rules) for role in self.roles.values())

    def stats(self) -> Dict[str, Any]:
        """Get configuration statistics."""
        return {
            "total_roles": len(self.roles),
            "total_rules": self.rule_count(),
            "constructed": self.constructed,
            "max_depth": self.max_depth,
            "wildcard_policy": self.wildcard_policy,
            "rules_per_role": {name: len(role.rules) for name, role in self.roles.items()}
        }


class Builder:
    """Authoring front-end: declare roles, then build a constructed configuration.

    Used as a context manager, a clean exit builds the configuration::

        with Builder() as policy:
            with policy.role("admin") as admin:
                admin.can("administrate")
    """

    def __init__(
        self,
        settings: Optional[PolicySettings] = None,
        on_build: Optional[Callable[[Configuration], Configuration]] = None,
        **options
    ):
        self.configuration = Configuration(settings=settings, **options)
        self._on_build = on_build

    def role(self, name: str, inherits_from: Any = None, **options) -> Role:
        """Declare a role, optionally inheriting from one or more parents."""
        if options:
            raise BadConfiguration("Invalid options", {"role": name, "options": sorted(options)})

        if name in self.configuration.roles:
            raise BadConfiguration(f"Role {name} already defined", {"role": name})

        return self.configuration.add_role(Role(name, parents=inherits_from))

    def build(self) -> Configuration:
        """Construct the configuration (or hand it to ``on_build``)."""
        if self._on_build is not None:
            return self._on_build(self.configuration)
        return self.configuration.construct()

    def __enter__(self) -> "Builder":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.build()
        return False
