"""
Core application utilities.

This package provides:
- Application-level settings (separate from DB settings)
- Logging configuration with request context
- The domain error taxonomy, roles and caller context
- The role gate applied to every user operation
- Dependency helpers (caller extraction, request-scoped operation context)
"""
