"""
Shared authoring behaviour for roles, scopes and resources.
"""

from typing import Any

from ..rules.models import ALLOW, DENY, Outcome, Rule, normalize_action


class RuleAuthoring:
    """Creates rules bound to a fixed (role, resource, scope) triple."""

    def __init__(self, role: Any, resource: Any, scope: Any):
        self.owner = role
        self.bound_resource = resource
        self.bound_scope = scope

    def can(self, action: Any) -> Rule:
        """Allow an action on the bound resource and scope."""
        return self._author(action, ALLOW)

    def cannot(self, action: Any) -> Rule:
        """Deny an action on the bound resource and scope."""
        return self._author(action, DENY)

    def _author(self, action: Any, outcome: Outcome) -> Rule:
        rule = Rule(
            role=self.owner,
            resource=self.bound_resource,
            scope=self.bound_scope,
            action=normalize_action(action),
            outcome=outcome
        )
        return self.owner.add_rule(rule)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False
