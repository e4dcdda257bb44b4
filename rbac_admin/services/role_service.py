"""Role service — role CRUD and permission grants."""

import logging
from typing import Optional, List, Dict, Any, Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rbac_admin.core.exceptions import (
    DuplicateRoleNameError,
    PermissionNotFoundError,
    RoleNotFoundError,
)
from rbac_admin.core.security import Identity
from rbac_admin.models.permission import Permission
from rbac_admin.models.role import Role, RolePermission
from rbac_admin.services.audit_service import audit_service

logger = logging.getLogger("rbac_admin")


def _snapshot(role: Role) -> Dict[str, Any]:
    return {"IdRol": role.id, "Rol": role.name, "Descripcion": role.description}


class RoleService:
    """Manages roles and the permissions granted to them."""

    @staticmethod
    def get(db: Session, role_id: int) -> Role:
        """Get a role by id."""
        role = db.query(Role).filter(Role.id == role_id).first()
        if not role:
            raise RoleNotFoundError()
        return role

    @staticmethod
    def list_roles(db: Session) -> List[Role]:
        """List all roles in creation order."""
        return db.query(Role).order_by(Role.id).all()

    @staticmethod
    def create(
        db: Session,
        name: str,
        actor: Identity,
        description: Optional[str] = None,
    ) -> Role:
        """Create a new role.

        Raises:
            DuplicateRoleNameError: If a role with this name already exists.
        """
        existing = db.query(Role).filter(Role.name == name).first()
        if existing:
            raise DuplicateRoleNameError()

        role = Role(name=name, description=description or "")
        db.add(role)
        try:
            db.flush()
            audit_service.log(
                db, actor, "role.created", "role",
                resource_id=role.id, new_value=_snapshot(role),
            )
            db.commit()
        except IntegrityError:
            # Lost a race against a concurrent create with the same name
            db.rollback()
            raise DuplicateRoleNameError()
        db.refresh(role)

        logger.info("Role %s (%r) created by user %s", role.id, role.name, actor.user_id)
        return role

    @staticmethod
    def delete(db: Session, role_id: int, actor: Identity) -> None:
        """Hard-delete a role and its permission grants."""
        role = RoleService.get(db, role_id)
        old = _snapshot(role)
        db.delete(role)
        audit_service.log(
            db, actor, "role.deleted", "role", resource_id=role_id, old_value=old,
        )
        db.commit()

        logger.info("Role %s deleted by user %s", role_id, actor.user_id)

    @staticmethod
    def modify(
        db: Session,
        role_id: int,
        actor: Identity,
        **changes,
    ) -> Role:
        """Update a role's name and/or description.

        Only ``name`` and ``description`` are accepted; the id and creation
        timestamp never change.

        Raises:
            RoleNotFoundError: If the role does not exist.
            DuplicateRoleNameError: If another role already has the new name.
        """
        role = RoleService.get(db, role_id)
        old = _snapshot(role)

        name = changes.get("name")
        if name is not None and name != role.name:
            clash = (
                db.query(Role)
                .filter(Role.name == name, Role.id != role.id)
                .first()
            )
            if clash:
                raise DuplicateRoleNameError()
            role.name = name
        if "description" in changes:
            role.description = changes["description"] or ""

        try:
            db.flush()
            audit_service.log(
                db, actor, "role.modified", "role",
                resource_id=role.id, old_value=old, new_value=_snapshot(role),
            )
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateRoleNameError()
        db.refresh(role)

        logger.info("Role %s modified by user %s", role.id, actor.user_id)
        return role

    @staticmethod
    def list_permissions(db: Session, role_id: int) -> List[Permission]:
        """List the permissions granted to a role, ordered by id."""
        RoleService.get(db, role_id)
        return (
            db.query(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .filter(RolePermission.role_id == role_id)
            .order_by(Permission.id)
            .all()
        )

    @staticmethod
    def assign_permissions(
        db: Session,
        role_id: int,
        permission_ids: Iterable[int],
        actor: Identity,
    ) -> None:
        """Grant permissions to a role, in addition to those it already has.

        The role and every permission are checked before anything is written,
        so either all grants are applied or none is.

        Raises:
            RoleNotFoundError: If the role does not exist.
            PermissionNotFoundError: If any permission id does not exist.
        """
        role = RoleService.get(db, role_id)
        wanted = list(dict.fromkeys(permission_ids))
        if not wanted:
            return

        found = {
            p.id for p in db.query(Permission).filter(Permission.id.in_(wanted)).all()
        }
        missing = [pid for pid in wanted if pid not in found]
        if missing:
            raise PermissionNotFoundError(missing)

        granted = {g.permission_id for g in role.grants}
        added = [pid for pid in wanted if pid not in granted]
        for pid in added:
            role.grants.append(RolePermission(permission_id=pid, granted_by=actor.user_id))

        audit_service.log(
            db, actor, "role.permissions_assigned", "role",
            resource_id=role.id, new_value={"Permisos": added},
        )
        db.commit()

        logger.info(
            "Permissions %s granted to role %s by user %s", added, role.id, actor.user_id
        )


role_service = RoleService()
