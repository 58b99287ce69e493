"""
campus_gate.api

API package for the campus gate service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: every access decision is made by `gate` and `auth`.
