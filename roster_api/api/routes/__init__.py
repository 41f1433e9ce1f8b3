"""
API route modules.

- Users: user queries and administration mutations

Routers are included from roster_api.api.main (under the /api/v1 prefix).
"""
