"""
Shared utilities for the ACL evaluator.

This package aggregates common building blocks consumed by the ACL
packages:

- config: Evaluator settings via pydantic-settings
- logging: Structured logging with correlation context
- metrics: Prometheus decision counters
- errors: Canonical error types and responses

Do not import from service_* packages into shared/.
"""
