"""
campus_gate.api.routers.session

Session endpoints consumed by client processes (`client.http.HttpIdentityClient`).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from starlette.status import HTTP_204_NO_CONTENT

from campus_gate.auth.deps import get_principal, identity_from_app
from campus_gate.auth.identity import SessionIdentityProvider
from campus_gate.auth.models import Principal
from campus_gate.auth.schemas import SessionOut
from campus_gate.gate.middleware import apply_session_cookies
from campus_gate.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/v1/auth", tags=["auth"])


@router.get("/session", response_model=SessionOut)
async def current_session(principal: Principal = Depends(get_principal)) -> SessionOut:
    return SessionOut.from_domain(principal)


@router.post("/sign-out", status_code=HTTP_204_NO_CONTENT)
async def sign_out(
    request: Request,
    identity: SessionIdentityProvider = Depends(identity_from_app),
) -> Response:
    principal: Principal | None = getattr(request.state, "principal", None)
    response = Response(status_code=HTTP_204_NO_CONTENT)
    apply_session_cookies(response, [identity.clear_session()])
    log.info("signed_out", principal_id=principal.id if principal is not None else None)
    return response
