"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries over a request's AsyncSession.
"""
