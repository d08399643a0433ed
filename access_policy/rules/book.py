"""
Per-role rule book: keyed rule storage and precedence-based decisions.
"""

import time
from typing import Any, Dict, Iterator, List, Optional

from shared.logging import get_logger
from shared.errors import BadConfiguration
from .models import ANY, Rule, Decision, name_of


class RuleBook:
    """Ordered, keyed collection of rules owned by one role."""

    def __init__(self, role: Any = None):
        self.role = role
        self.logger = get_logger("policy.rule_book")
        self._rules: Dict[str, Rule] = {}
        self._frozen = False

    @property
    def role_name(self) -> Optional[str]:
        return None if self.role is None else name_of(self.role)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def rules(self) -> Dict[str, Rule]:
        """Copy of the key -> rule mapping, in insertion order."""
        return dict(self._rules)

    def add(self, rule: Rule) -> Rule:
        """Add a rule, absorbing identical inherited duplicates."""
        if self._frozen:
            raise BadConfiguration(
                f"Rule book for role {self.role_name} is frozen",
                {"role": self.role_name, "rule": rule.key}
            )

        if rule.role is None:
            raise BadConfiguration(f"Rule {rule.key} has no owning role", {"rule": rule.key})

        existing = self._rules.get(rule.key)
        if existing is not None:
            if existing.outcome is not rule.outcome:
                raise BadConfiguration(
                    f"Rule {rule} conflicts with {existing}",
                    {"role": self.role_name, "rule": rule.key, "existing_role": existing.role_name}
                )

            if self._inherited(existing) or self._inherited(rule):
                self.logger.debug(
                    "Inherited duplicate absorbed",
                    role=self.role_name,
                    rule=rule.key,
                    from_role=rule.role_name
                )
                return existing

            raise BadConfiguration(
                f"Rule {rule.key} already defined",
                {"role": self.role_name, "rule": rule.key}
            )

        self._rules[rule.key] = rule
        return rule

    def _inherited(self, rule: Rule) -> bool:
        return rule.role is not self.role

    def match_all(self, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> List[Rule]:
        """All rules matching a query, in insertion order."""
        return [
            rule for rule in self._rules.values()
            if rule.match(resource=resource, scope=scope, action=action)
        ]

    def evaluate(self, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> Decision:
        """Decide a query and explain which rule won."""
        start_time = time.time()

        matches = self.match_all(resource=resource, scope=scope, action=action)

        if not matches:
            # No rules found - default deny
            return Decision(
                allowed=False,
                reason="No rules matched",
                evaluation_time_ms=(time.time() - start_time) * 1000
            )

        ranked = Rule.rank(matches)
        winner = ranked[0]

        decision = Decision(
            allowed=winner.outcome.allowed,
            reason=f"Rule '{winner}' matched",
            rule=winner.key,
            matched_rules=[rule.key for rule in ranked],
            evaluation_time_ms=(time.time() - start_time) * 1000
        )

        self.logger.debug(
            "Rule book decision",
            role=self.role_name,
            rule=winner.key,
            allowed=decision.allowed,
            candidates=len(ranked)
        )

        return decision

    def can(self, resource: Any = ANY, scope: Any = ANY, action: Any = ANY) -> bool:
        """Default-deny decision for a query."""
        return self.evaluate(resource=resource, scope=scope, action=action).allowed

    def sort(self) -> List[Rule]:
        """Rules in precedence order, leaving the book untouched."""
        return Rule.rank(self._rules.values())

    def sort_in_place(self) -> List[Rule]:
        """Reorder the book itself into precedence order."""
        ordered = self.sort()
        self._rules = {rule.key: rule for rule in ordered}
        return ordered

    def clear(self):
        """Remove every rule."""
        if self._frozen:
            raise BadConfiguration(f"Rule book for role {self.role_name} is frozen", {"role": self.role_name})
        self._rules.clear()

    def freeze(self):
        """Refuse any further mutation."""
        self._frozen = True

    def keys(self) -> List[str]:
        return list(self._rules.keys())

    def get(self, key: str) -> Optional[Rule]:
        return self._rules.get(key)

    def __getitem__(self, key: str) -> Rule:
        return self._rules[key]

    def __contains__(self, key: object) -> bool:
        return key in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)

    def __str__(self) -> str:
        return "\n".join(str(rule) for rule in self._rules.values())

    def __repr__(self) -> str:
        return f"RuleBook(role={self.role_name!r}, rules={len(self._rules)})"
