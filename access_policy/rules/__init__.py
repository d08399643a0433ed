"""
Rules package.

Defines the rule model and the per-role rule book used by the policy
engine. A rule book answers queries deterministically: every matching
rule is ranked by specificity (explicit scope, then explicit resource,
then deny over allow) with the canonical key as the final tie-break.

Modules of interest:
- models: Outcome, the ANY wildcard, ActionSelector, Rule and Decision.
- book: RuleBook with duplicate/conflict detection and precedence.
"""

from .models import (
    ALLOW, ANY, DENY, DEFAULT_ACTIONS, WILDCARD,
    ActionSelector, Decision, Outcome, Rule, SelectorKind, Wildcard,
    is_wildcard, name_of,
)
from .book import RuleBook

__all__ = [
    "ALLOW", "ANY", "DENY", "DEFAULT_ACTIONS", "WILDCARD",
    "ActionSelector", "Decision", "Outcome", "Rule", "RuleBook", "SelectorKind", "Wildcard",
    "is_wildcard", "name_of",
]
