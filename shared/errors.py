"""
Shared error handling for the access policy engine.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class PolicyException(Exception):
    """Base exception for the policy engine."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class BadConfiguration(PolicyException):
    """Structural errors raised while authoring or constructing a policy."""

    def __init__(self, message: str = "Bad configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("BAD_CONFIGURATION", message, details)


class NotConfigured(PolicyException):
    """A query was issued before any configuration was installed."""

    def __init__(self, message: str = "Policy is not configured", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_CONFIGURED", message, details)


class BadMatch(PolicyException):
    """A query the configuration refuses to evaluate."""

    def __init__(self, message: str = "Bad match", details: Optional[Dict[str, Any]] = None):
        super().__init__("BAD_MATCH", message, details)


class RoleNotFound(BadMatch):
    """Query against a role the configuration does not define."""

    def __init__(self, role: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Role {role} not found", {"role": role, **(details or {})})
        self.role = role


class InvalidPrincipal(PolicyException):
    """The principal handed to the adapter does not expose its roles properly."""

    def __init__(self, message: str = "Invalid principal", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_PRINCIPAL", message, details)
