"""
Shared utilities for the light HTTP request layer.

This package aggregates the ambient building blocks used by ``light_http``:

- config: Settings via pydantic-settings
- logging: Structured logging with trace correlation
- errors: Canonical error types
"""
