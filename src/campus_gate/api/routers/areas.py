"""
campus_gate.api.routers.areas

Landing endpoints for the gated back-office and trainer areas.

Responsibilities:
- Give `/admin/*` and `/formateur/*` a concrete handler behind the edge gate.
- Re-check access with live-role dependencies inside the handler.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from campus_gate.auth.deps import get_principal, require_active_trainer, require_roles
from campus_gate.auth.models import Principal
from campus_gate.auth.roles import ADMIN_CLASS_ROLES, Role

router = APIRouter(tags=["areas"])

_require_admin_class = require_roles(*ADMIN_CLASS_ROLES)


@router.get("/admin")
@router.get("/admin/{section:path}")
async def admin_area(
    section: str = "",
    principal: Principal = Depends(get_principal),
    role: Role = Depends(_require_admin_class),
) -> dict[str, Any]:
    return {"area": "admin", "section": section, "principal_id": principal.id, "role": role.value}


@router.get("/formateur")
@router.get("/formateur/{section:path}")
async def trainer_area(
    section: str = "",
    principal: Principal = Depends(require_active_trainer),
) -> dict[str, Any]:
    return {"area": "formateur", "section": section, "principal_id": principal.id}
