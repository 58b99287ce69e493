"""
campus_gate.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation (request id, path, principal) for log enrichment.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The edge gate logs every redirect decision; those lines carry the request context
# bound here.
