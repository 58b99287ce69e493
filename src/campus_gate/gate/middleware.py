"""
campus_gate.gate.middleware

Starlette middleware enforcing the edge gate on every request.

Responsibilities:
- Evaluate the gate before the route handler runs.
- Turn denials into redirects (never error pages).
- Copy rotated session cookies onto every outgoing response.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.status import HTTP_307_TEMPORARY_REDIRECT
from starlette.types import ASGIApp

from campus_gate.auth.identity import SessionCookie
from campus_gate.gate.decision import AccessGate
from campus_gate.observability.logging import bind_principal, get_logger

log = get_logger(__name__)

GateProvider = Callable[[Request], AccessGate]


def gate_from_app_state(request: Request) -> AccessGate:
    # Built in the app lifespan (see `campus_gate.api.app.create_app`).
    return request.app.state.access_gate


def apply_session_cookies(response: Response, cookies: Iterable[SessionCookie]) -> None:
    for cookie in cookies:
        if cookie.is_deletion:
            response.delete_cookie(
                cookie.name, path="/", secure=cookie.secure, httponly=True, samesite="lax"
            )
        else:
            response.set_cookie(
                cookie.name,
                cookie.value,
                max_age=cookie.max_age,
                path="/",
                secure=cookie.secure,
                httponly=True,
                samesite="lax",
            )


class EdgeGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, gate_provider: GateProvider = gate_from_app_state) -> None:
        super().__init__(app)
        self._gate_provider = gate_provider

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        gate = self._gate_provider(request)
        decision = await gate.evaluate(request.url.path, request.cookies)

        principal = decision.principal
        bind_principal(principal.id if principal is not None else None)
        # Route handlers reuse the refreshed identity instead of decoding the cookie again.
        request.state.principal = principal
        request.state.gate_decision = decision

        if decision.allowed:
            response = await call_next(request)
        else:
            log.info(
                "gate_redirect",
                outcome=decision.outcome.value,
                reason=decision.reason,
                location=decision.location,
                role=decision.role.value if decision.role is not None else None,
            )
            response = RedirectResponse(
                decision.location or "/", status_code=HTTP_307_TEMPORARY_REDIRECT
            )

        # A handler that set the session cookie itself (sign-in, sign-out) wins over rotation.
        already_set = {
            header.split("=", 1)[0].strip() for header in response.headers.getlist("set-cookie")
        }
        apply_session_cookies(
            response, [cookie for cookie in decision.cookies if cookie.name not in already_set]
        )
        return response


# --- Module Notes -----------------------------------------------------------
# The gate re-reads the Role Store per request; it never sees the client role cache
# or any simulated role.
