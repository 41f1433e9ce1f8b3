"""
Service layer: role-gated user operations and the response boundary.
"""
