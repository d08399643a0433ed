"""
Scope definitions: named context partitions owning nested resources.
"""

from typing import Any, Dict

from shared.errors import BadConfiguration
from ..rules.models import ANY, NamedDimension, validate_name
from .base import RuleAuthoring
from .resource import Resource


class Scope(NamedDimension, RuleAuthoring):
    """A named scope, e.g. ``api`` vs ``ui``."""

    def __init__(self, name: str, role: Any):
        self.name = validate_name(name, "Scope")
        self.resources: Dict[str, Resource] = {}

        RuleAuthoring.__init__(self, role=role, resource=ANY, scope=self)

    def resource(self, name: str, **options) -> Resource:
        """Declare a resource bound to this scope."""
        if name in self.resources:
            raise BadConfiguration(
                f"Resource {name} already defined in scope {self.name}",
                {"role": self.owner.name, "scope": self.name, "resource": name}
            )

        resource = Resource(name, role=self.owner, scope=self, options=options)
        self.resources[resource.name] = resource
        return resource
