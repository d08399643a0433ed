"""
Access policy engine.

An embeddable authorization engine. Hosts declare named roles, each owning
allow/deny rules over (scope, resource, action) triples; roles may inherit
from one or more parents. The engine answers "may this role perform action
A on resource R within scope S?" with a deterministic decision:

- access_policy.rules: Rule model, wildcard, precedence and RuleBook.
- access_policy.definitions: Role, Scope and Resource authoring objects,
  plus multi-parent inheritance resolution.
- access_policy.configuration: Role registry, Builder and construction.
- access_policy.engine: PolicyEngine and the module-level helpers.
- access_policy.principal: Authorize a host principal through its roles.

Guidelines:
- Author everything first, then construct; constructed policies are frozen.
- Decisions are default-deny; the most specific matching rule wins.
"""

from shared.errors import (
    BadConfiguration, BadMatch, InvalidPrincipal, NotConfigured, PolicyException, RoleNotFound,
)
from .rules import ALLOW, ANY, DENY, DEFAULT_ACTIONS, ActionSelector, Decision, Outcome, Rule, RuleBook
from .definitions import Resource, Role, Scope
from .configuration import Builder, Configuration
from .engine import PolicyEngine, can, clear, configure, current_configuration, define, explain, get_engine
from .principal import PrincipalAuthorizer, RoleSource, principal_can

__version__ = "1.0.0"

__all__ = [
    "ALLOW", "ANY", "DENY", "DEFAULT_ACTIONS",
    "ActionSelector", "Decision", "Outcome", "Rule", "RuleBook",
    "Resource", "Role", "Scope",
    "Builder", "Configuration", "PolicyEngine", "PrincipalAuthorizer", "RoleSource",
    "BadConfiguration", "BadMatch", "InvalidPrincipal", "NotConfigured", "PolicyException", "RoleNotFound",
    "can", "clear", "configure", "current_configuration", "define", "explain", "get_engine", "principal_can",
]
