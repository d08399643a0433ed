"""
Resource definitions: named object types with default action sets.
"""

from typing import Any, Dict, Optional, Tuple

from ..rules.models import ALLOW, ANY, ActionSelector, NamedDimension, validate_name
from .base import RuleAuthoring


class Resource(NamedDimension, RuleAuthoring):
    """A named resource; grants its selected actions when declared.

    ``only`` or ``except`` (spelled ``except_`` as a keyword argument)
    narrow the default action list. Every selected action becomes an
    ALLOW rule in the owning role.
    """

    def __init__(self, name: str, role: Any, scope: Any = ANY, options: Optional[Dict[str, Any]] = None):
        self.name = validate_name(name, "Resource")
        self.selector = ActionSelector.from_options(options or {})

        RuleAuthoring.__init__(self, role=role, resource=self, scope=scope)

        for action in self.selector.actions:
            self._author(action, ALLOW)

    @property
    def selected_actions(self) -> Tuple[str, ...]:
        return self.selector.actions
