"""
campus_gate.client

Client-side role resolution.

Responsibilities:
- The advisory, principal-bound role cache and its storage backends.
- The retrying role resolver and the effective-role arbiter.
- `AuthSession`, the injected object a UI layer reads auth state from.
- HTTP collaborators that reach the service from a client process.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here is trusted by the server: the edge gate re-reads the Role Store on
# every request.
