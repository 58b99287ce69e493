"""
campus_gate.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models for roles, memberships, trainers and profiles.
- Engine/session setup and thin read repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only `auth.store.SqlRoleStore` and the health probe talk to this package directly.
