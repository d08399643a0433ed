"""
Shared utilities for the access policy engine.

This package aggregates the ambient building blocks consumed by the engine:

- config: Engine settings via pydantic-settings
- logging: Structured logging with correlation context
- metrics: Prometheus decision and configuration metrics
- errors: Canonical error types and responses

Do not import from access_policy into shared/.
"""
