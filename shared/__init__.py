"""
Shared utilities for the access guard services.

This package aggregates common building blocks consumed by all services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus counters for caches and remote calls
- errors: Canonical error types and responses
- cache: Key-value cache interface with Redis and in-memory backends
- cache_keys: Deterministic cache keys and canonical JSON

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into shared/.
"""
