"""
campus_gate.db.repositories

Repository package.

Responsibilities:
- Group the read repositories backing the Role Store.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories return ORM rows or plain values; mapping to auth models happens in
# `auth.store`.
