"""
Roster API: role-gated user administration over request-scoped batched lookups.
"""

__version__ = "0.1.0"
