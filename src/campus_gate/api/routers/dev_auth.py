from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from starlette.status import HTTP_404_NOT_FOUND

from campus_gate.api.deps import settings_from_app
from campus_gate.auth.deps import identity_from_app
from campus_gate.auth.identity import SessionIdentityProvider
from campus_gate.auth.models import Principal
from campus_gate.auth.schemas import SessionOut
from campus_gate.gate.middleware import apply_session_cookies
from campus_gate.settings import Settings

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevSessionRequest(BaseModel):
    subject: str = Field(min_length=1, max_length=64)
    email: str | None = Field(default=None, max_length=256)


@router.post("/session", response_model=SessionOut)
async def mint_dev_session(
    body: DevSessionRequest,
    response: Response,
    settings: Settings = Depends(settings_from_app),
    identity: SessionIdentityProvider = Depends(identity_from_app),
) -> SessionOut:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    principal = Principal(id=body.subject, email=body.email)
    apply_session_cookies(response, [identity.issue_session(principal)])
    return SessionOut.from_domain(principal)
