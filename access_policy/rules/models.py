"""
Rule data models for the access policy engine.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

from shared.errors import BadConfiguration


WILDCARD = "*"

DEFAULT_ACTIONS: Tuple[str, ...] = ("create", "show", "update", "delete", "index", "new", "edit")

# Weights of the specificity score; each dimension contributes 0 or 1.
SCOPE_WEIGHT = 100
RESOURCE_WEIGHT = 10
OUTCOME_WEIGHT = 1


class Outcome(str, Enum):
    """Rule outcomes."""
    ALLOW = "allow"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is Outcome.ALLOW

    @property
    def denied(self) -> bool:
        return self is Outcome.DENY

    def __str__(self) -> str:
        return self.value


ALLOW = Outcome.ALLOW
DENY = Outcome.DENY


class Wildcard:
    """Universal matcher usable in place of a role, resource, scope or action."""

    _instance: Optional["Wildcard"] = None

    name = WILDCARD

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def match(self, other: Any) -> bool:
        return True

    def __eq__(self, other: Any) -> bool:
        return other is self or name_of(other) == WILDCARD

    def __hash__(self) -> int:
        return hash(WILDCARD)

    def __str__(self) -> str:
        return WILDCARD

    def __repr__(self) -> str:
        return "ANY"


ANY = Wildcard()


def name_of(value: Any) -> str:
    """Name of a role, resource, scope or action; None and ANY map to '*'."""
    if value is None or value is ANY:
        return WILDCARD
    return str(getattr(value, "name", value))


def is_wildcard(value: Any) -> bool:
    """Check whether a dimension value stands for 'anything'."""
    return name_of(value) == WILDCARD


def validate_name(name: Any, kind: str) -> str:
    """Normalize an authoring name, rejecting empty and wildcard names."""
    if not isinstance(name, str) or not name.strip():
        raise BadConfiguration(f"{kind} name must be a non-empty string", {"name": repr(name)})
    if name == WILDCARD:
        raise BadConfiguration(f"{kind} name cannot be the wildcard '{WILDCARD}'")
    return name


def normalize_action(action: Any):
    """Normalize an action to its name, or ANY."""
    if is_wildcard(action):
        return ANY
    name = name_of(action)
    if not name.strip():
        raise BadConfiguration("Action name must be non-empty")
    return name


class NamedDimension:
    """Mixin for named, wildcard-aware authoring dimensions."""

    name: str

    def match(self, other: Any) -> bool:
        return is_wildcard(other) or self.name == name_of(other)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class SelectorKind(str, Enum):
    """Action selection modes for a resource."""
    ALL = "all"
    ONLY = "only"
    EXCEPT = "except"


@dataclass(frozen=True)
class ActionSelector:
    """Which default actions a resource grants, fixed at construction."""
    kind: SelectorKind = SelectorKind.ALL
    names: Tuple[str, ...] = ()

    OPTION_KEYS = ("only", "except")

    @classmethod
    def from_options(cls, options: Dict[str, Any]) -> "ActionSelector":
        """Validate resource options and build the matching selector."""
        options = dict(options)
        # `except` is a keyword, so callers may spell it `except_`
        if "except_" in options:
            if "except" in options:
                raise BadConfiguration("Specify :except only once")
            options["except"] = options.pop("except_")

        unknown = [key for key in options if key not in cls.OPTION_KEYS]
        if unknown:
            raise BadConfiguration("Invalid options", {"options": sorted(unknown)})

        only = options.get("only")
        excluded = options.get("except")

        if only is not None and excluded is not None:
            raise BadConfiguration("You can't specify both :only and :except options")

        if only is not None:
            return cls(SelectorKind.ONLY, cls._names(only, "only"))
        if excluded is not None:
            return cls(SelectorKind.EXCEPT, cls._names(excluded, "except"))
        return cls()

    @staticmethod
    def _names(values: Any, option: str) -> Tuple[str, ...]:
        if not isinstance(values, (list, tuple)):
            raise BadConfiguration(f"The :{option} option must be a list", {"type": type(values).__name__})
        return tuple(name_of(value) for value in values)

    @property
    def actions(self) -> Tuple[str, ...]:
        if self.kind is SelectorKind.ONLY:
            return self.names
        if self.kind is SelectorKind.EXCEPT:
            return tuple(action for action in DEFAULT_ACTIONS if action not in self.names)
        return DEFAULT_ACTIONS


@dataclass(frozen=True, eq=False)
class Rule:
    """One access statement owned by a role.

    Equality is identity: two rules with the same key are still distinct
    statements, possibly owned by different roles.
    """
    role: Any
    resource: Any
    scope: Any
    action: Any
    outcome: Outcome

    @property
    def role_name(self) -> Optional[str]:
        return None if self.role is None else name_of(self.role)

    @property
    def key(self) -> str:
        return f"{name_of(self.scope)}:/{name_of(self.resource)}/{name_of(self.action)}"

    @property
    def specificity(self) -> int:
        """Precedence score: explicit scope, then explicit resource, then deny."""
        scope_value = 0 if is_wildcard(self.scope) else 1
        resource_value = 0 if is_wildcard(self.resource) else 1
        outcome_value = 1 if self.outcome.denied else 0

        return scope_value * SCOPE_WEIGHT + resource_value * RESOURCE_WEIGHT + outcome_value * OUTCOME_WEIGHT

    def match(self, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> bool:
        """Check whether this rule applies to a query."""
        if not (self._match_dimension(self.resource, resource) and self._match_dimension(self.scope, scope)):
            return False

        return is_wildcard(self.action) or name_of(self.action) == name_of(action)

    @staticmethod
    def _match_dimension(own: Any, queried: Any) -> bool:
        if is_wildcard(own):
            return True
        if hasattr(own, "match"):
            return own.match(queried)
        return is_wildcard(queried) or name_of(own) == name_of(queried)

    def conflicts_with(self, other: "Rule") -> bool:
        """Same scope, resource and action but a different outcome."""
        if other is self:
            return False

        return (
            name_of(self.scope) == name_of(other.scope)
            and name_of(self.resource) == name_of(other.resource)
            and name_of(self.action) == name_of(other.action)
            and self.outcome is not other.outcome
        )

    @staticmethod
    def rank(rules: Iterable["Rule"]) -> List["Rule"]:
        """Order rules by descending specificity, ties by ascending key."""
        return sorted(rules, key=lambda rule: (-rule.specificity, rule.key))

    def __str__(self) -> str:
        return f"{self.key}->{self.outcome}"

    def __repr__(self) -> str:
        return f"Rule({self}, role={self.role_name!r})"


@dataclass
class Decision:
    """Result of a rule book evaluation."""
    allowed: bool
    reason: Optional[str] = None
    rule: Optional[str] = None
    matched_rules: List[str] = field(default_factory=list)
    evaluation_time_ms: float = 0.0
