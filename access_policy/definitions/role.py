"""
Role definitions and multi-parent inheritance resolution.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from shared.logging import get_logger
from shared.errors import BadConfiguration
from ..rules.book import RuleBook
from ..rules.models import ANY, Decision, Rule, validate_name
from .base import RuleAuthoring
from .resource import Resource
from .scope import Scope


DEFAULT_MAX_DEPTH = 10


def _parent_names(parents: Any) -> Tuple[str, ...]:
    if parents is None:
        return ()
    if isinstance(parents, str):
        return (parents,)
    if isinstance(parents, (list, tuple)) and all(isinstance(parent, str) for parent in parents):
        return tuple(parents)
    raise BadConfiguration(
        "Parents must be a role name or a list of role names",
        {"parents": repr(parents)}
    )


class Role(RuleAuthoring):
    """A named bundle of rules, optionally inheriting from parent roles.

    Authoring calls (``can``, ``cannot``, ``resource``, ``scope``) fill the
    role's own rules. ``inherit()`` then merges the resolved rules of every
    ancestor into the rule book, after which the role is frozen by its
    configuration.
    """

    def __init__(self, name: str, parents: Any = None):
        self.name = validate_name(name, "Role")
        self.parents: Tuple[str, ...] = _parent_names(parents)
        self.parent_roles: List["Role"] = []
        self.rules = RuleBook(self)
        self.resources: Dict[str, Resource] = {}
        self.scopes: Dict[str, Scope] = {}
        self.logger = get_logger("policy.role")
        self._own_rules: List[Rule] = []
        self._frozen = False

        super().__init__(role=self, resource=ANY, scope=ANY)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def own_rules(self) -> List[Rule]:
        """Rules authored directly on this role, in authoring order."""
        return list(self._own_rules)

    def keys(self) -> List[str]:
        return self.rules.keys()

    def add_rule(self, rule: Rule) -> Rule:
        """Register an authored rule in this role's own book."""
        self._ensure_editable()
        stored = self.rules.add(rule)
        self._own_rules.append(stored)
        return stored

    def resource(self, name: str, **options) -> Resource:
        """Declare a resource in the wildcard scope."""
        self._ensure_editable()
        if name in self.resources:
            raise BadConfiguration(f"Resource {name} already defined", {"role": self.name, "resource": name})

        resource = Resource(name, role=self, options=options)
        self.resources[resource.name] = resource
        return resource

    def scope(self, name: str) -> Scope:
        """Declare a scope."""
        self._ensure_editable()
        if name in self.scopes:
            raise BadConfiguration(f"Scope {name} already defined", {"role": self.name, "scope": name})

        scope = Scope(name, role=self)
        self.scopes[scope.name] = scope
        return scope

    def link_parents(self, roles: Mapping[str, "Role"]):
        """Resolve declared parent names to live roles."""
        self._ensure_editable()
        linked = []
        for parent in self.parents:
            found = roles.get(parent)
            if found is None:
                raise BadConfiguration(f"Role {parent} not found", {"role": self.name, "parent": parent})
            linked.append(found)
        self.parent_roles = linked

    def inherit(self, max_depth: int = DEFAULT_MAX_DEPTH, resolved: Optional[Dict[str, Tuple[List[Rule], int]]] = None):
        """Merge every ancestor's rules into this role's rule book.

        ``resolved`` may be shared across the roles of one configuration so
        that each ancestor is walked once.
        """
        if not self.parents:
            return

        if len(self.parent_roles) != len(self.parents):
            raise BadConfiguration(f"Parents of role {self.name} are not linked", {"role": self.name})

        gathered = self.resolve_rules(max_depth, resolved=resolved)

        self.rules.clear()
        for rule in gathered:
            self.rules.add(rule)

        self.logger.debug(
            "Role inherited",
            role=self.name,
            parents=list(self.parents),
            gathered=len(gathered),
            rules=len(self.rules)
        )

    def resolve_rules(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        path: Tuple[str, ...] = (),
        resolved: Optional[Dict[str, Tuple[List[Rule], int]]] = None
    ) -> List[Rule]:
        """Own rules followed by each parent's resolved rules, in declaration order.

        ``path`` holds the role names on the current traversal path, so a
        role reached twice through different parents (a diamond) is fine
        while a role reached from itself is a cycle. A rule reached through
        several parents is listed once.
        """
        if resolved is None:
            resolved = {}
        return list(self._resolve(max_depth, path, resolved)[0])

    def _resolve(
        self,
        max_depth: int,
        path: Tuple[str, ...],
        resolved: Dict[str, Tuple[List[Rule], int]]
    ) -> Tuple[List[Rule], int]:
        # returns the rules and the height of this role's ancestry
        if self.name in path:
            cycle = " -> ".join(path[path.index(self.name):] + (self.name,))
            raise BadConfiguration(
                f"Circular dependency detected: {cycle}",
                {"role": self.name, "path": list(path) + [self.name]}
            )

        cached = resolved.get(self.name)
        height = cached[1] if cached is not None else 0
        path = path + (self.name,)
        if len(path) - 1 + height > max_depth:
            self._depth_exceeded(max_depth, path)

        if cached is not None:
            return cached

        rules = list(self._own_rules)
        seen = {id(rule) for rule in rules}
        for parent in self.parent_roles:
            parent_rules, parent_height = parent._resolve(max_depth, path, resolved)
            height = max(height, parent_height + 1)
            for rule in parent_rules:
                if id(rule) not in seen:
                    seen.add(id(rule))
                    rules.append(rule)

        resolved[self.name] = (rules, height)
        return rules, height

    @staticmethod
    def _depth_exceeded(max_depth: int, path: Tuple[str, ...]):
        raise BadConfiguration(
            f"Inheritance depth for role {path[0]} exceeds {max_depth}",
            {"role": path[0], "max_depth": max_depth, "path": list(path)}
        )

    def freeze(self):
        """Close the role for authoring; the rule book becomes read-only."""
        self._frozen = True
        self.rules.freeze()

    def _ensure_editable(self):
        if self._frozen:
            raise BadConfiguration(f"Role {self.name} is frozen", {"role": self.name})

    def allows(self, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> bool:
        """Whether this role may perform ``action`` on ``resource`` within ``scope``."""
        return self.rules.can(resource=resource, scope=scope, action=action)

    def explain(self, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> Decision:
        return self.rules.evaluate(resource=resource, scope=scope, action=action)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Role({self.name!r}, parents={list(self.parents)!r})"
