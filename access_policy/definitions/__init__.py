"""
Authoring definitions: roles, scopes and resources.
"""

from .base import RuleAuthoring
from .resource import Resource
from .scope import Scope
from .role import Role

__all__ = ["RuleAuthoring", "Resource", "Scope", "Role"]
