"""
campus_gate.gate

Edge request gate.

Responsibilities:
- The literal route-prefix rule table.
- The per-request allow/redirect decision procedure.
- The Starlette middleware that enforces decisions before any route runs.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# `decision.AccessGate` has no HTTP dependency; `middleware` is the only place that
# turns a decision into a response.
