"""Roles API router.

Every response uses the ``{"error": ..., "respuesta": ...}`` envelope; errors
raised here are rendered by the application's exception handler.
"""

import enum
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from rbac_admin.core.envelope import (
    decode_list,
    decode_record,
    read_envelope,
    success,
    tagged,
    tagged_list,
)
from rbac_admin.core.security import Identity, validate_token
from rbac_admin.db.session import get_db
from rbac_admin.schemas.schemas import (
    Envelope,
    PermissionKey,
    PermissionOut,
    RoleCreate,
    RoleKey,
    RoleOut,
    RoleUpdate,
)
from rbac_admin.services.role_service import role_service

router = APIRouter(prefix="/roles", tags=["roles"])


class AuthPolicy(str, enum.Enum):
    PUBLIC = "public"
    TOKEN = "token"


# Reads are open; every mutation needs a valid token.
ROUTE_POLICIES = {
    "dame": AuthPolicy.PUBLIC,
    "listar": AuthPolicy.PUBLIC,
    "listar_permisos": AuthPolicy.PUBLIC,
    "crear": AuthPolicy.TOKEN,
    "borrar": AuthPolicy.TOKEN,
    "modificar": AuthPolicy.TOKEN,
    "asignar_permisos": AuthPolicy.TOKEN,
}


def actor_for(operation: str):
    """Build the actor dependency for an operation from ``ROUTE_POLICIES``."""
    policy = ROUTE_POLICIES[operation]

    async def dependency(authorization: Optional[str] = Header(None)) -> Optional[Identity]:
        if policy is AuthPolicy.PUBLIC:
            return None
        return validate_token(authorization)

    return dependency


@router.post("/dame", response_model=Envelope)
async def dame(
    envelope: Dict[str, Any] = Depends(read_envelope),
    actor: Optional[Identity] = Depends(actor_for("dame")),
    db: Session = Depends(get_db),
):
    """Return one role by id."""
    key = decode_record(envelope, "Roles", RoleKey)
    role = role_service.get(db, key.id)
    return success(tagged("Roles", RoleOut.model_validate(role)))


@router.post("/crear", response_model=Envelope)
async def crear(
    envelope: Dict[str, Any] = Depends(read_envelope),
    actor: Optional[Identity] = Depends(actor_for("crear")),
    db: Session = Depends(get_db),
):
    """Create a role."""
    body = decode_record(envelope, "Roles", RoleCreate)
    role = role_service.create(db, body.name, actor, description=body.description)
    return success(tagged("Roles", RoleOut.model_validate(role)))


@router.get("", response_model=Envelope)
async def listar(
    actor: Optional[Identity] = Depends(actor_for("listar")),
    db: Session = Depends(get_db),
):
    """List every role."""
    roles = role_service.list_roles(db)
    return success(tagged_list("Roles", [RoleOut.model_validate(r) for r in roles]))


@router.post("/borrar", response_model=Envelope)
async def borrar(
    envelope: Dict[str, Any] = Depends(read_envelope),
    actor: Optional[Identity] = Depends(actor_for("borrar")),
    db: Session = Depends(get_db),
):
    """Delete a role by id."""
    key = decode_record(envelope, "Roles", RoleKey)
    role_service.delete(db, key.id, actor)
    return success()


@router.post("/modificar", response_model=Envelope)
async def modificar(
    envelope: Dict[str, Any] = Depends(read_envelope),
    actor: Optional[Identity] = Depends(actor_for("modificar")),
    db: Session = Depends(get_db),
):
    """Change a role's name and/or description."""
    body = decode_record(envelope, "Roles", RoleUpdate)
    role = role_service.modify(db, body.id, actor, **body.changes())
    return success(tagged("Roles", RoleOut.model_validate(role)))


@router.post("/listarPermisos", response_model=Envelope)
async def listar_permisos(
    envelope: Dict[str, Any] = Depends(read_envelope),
    actor: Optional[Identity] = Depends(actor_for("listar_permisos")),
    db: Session = Depends(get_db),
):
    """List the permissions granted to a role."""
    key = decode_record(envelope, "Roles", RoleKey)
    permissions = role_service.list_permissions(db, key.id)
    return success(
        tagged_list("Permisos", [PermissionOut.model_validate(p) for p in permissions])
    )


@router.post("/asignarPermisos", response_model=Envelope)
async def asignar_permisos(
    envelope: Dict[str, Any] = Depends(read_envelope),
    actor: Optional[Identity] = Depends(actor_for("asignar_permisos")),
    db: Session = Depends(get_db),
):
    """Grant permissions to a role."""
    key = decode_record(envelope, "Roles", RoleKey)
    permissions = decode_list(envelope, "Permisos", PermissionKey)
    role_service.assign_permissions(db, key.id, [p.id for p in permissions], actor)
    return success()
