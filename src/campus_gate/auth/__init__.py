"""
campus_gate.auth

Authentication/authorization package.

Responsibilities:
- The closed role set and its named subsets.
- Session-token helpers and the server-side identity provider.
- The Role Store boundary (protocol + SQL implementation).
- FastAPI auth dependencies backed by live role reads.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package reads the client-side role cache; server decisions
# always derive from the Role Store.
