"""Tests for RoleService against an in-memory database."""

import pytest

from rbac_admin.core.exceptions import (
    DuplicateRoleNameError,
    PermissionNotFoundError,
    RoleNotFoundError,
)
from rbac_admin.models.audit_log import AuditLog
from rbac_admin.models.role import Role
from rbac_admin.services.audit_service import audit_service
from rbac_admin.services.role_service import role_service


class TestCreateAndGet:
    """Tests for create/get/list."""

    def test_round_trip(self, db, actor):
        created = role_service.create(db, "X", actor)
        fetched = role_service.get(db, created.id)
        assert fetched.name == "X"
        assert fetched.created_at is not None
        assert fetched.description == ""

    def test_duplicate_name_does_not_mutate(self, db, actor):
        role_service.create(db, "Encargados", actor, description="uno")
        roles_before = db.query(Role).count()
        audits_before = db.query(AuditLog).count()

        with pytest.raises(DuplicateRoleNameError):
            role_service.create(db, "Encargados", actor, description="dos")

        assert db.query(Role).count() == roles_before
        assert db.query(AuditLog).count() == audits_before
        assert role_service.list_roles(db)[0].description == "uno"

    def test_get_missing(self, db):
        with pytest.raises(RoleNotFoundError):
            role_service.get(db, 42)

    def test_list_in_creation_order(self, db, actor):
        for name in ("B", "A", "C"):
            role_service.create(db, name, actor)
        assert [r.name for r in role_service.list_roles(db)] == ["B", "A", "C"]


class TestModify:
    """Tests for modify."""

    def test_description_only_preserves_identity(self, db, actor):
        role = role_service.create(db, "Vendedores", actor)
        role_id, created_at = role.id, role.created_at

        updated = role_service.modify(db, role_id, actor, description="Nueva descripcion")

        assert updated.id == role_id
        assert updated.name == "Vendedores"
        assert updated.created_at == created_at
        assert updated.description == "Nueva descripcion"

    def test_rename_to_existing_name(self, db, actor):
        role_service.create(db, "A", actor)
        b = role_service.create(db, "B", actor)
        with pytest.raises(DuplicateRoleNameError):
            role_service.modify(db, b.id, actor, name="A")
        assert role_service.get(db, b.id).name == "B"

    def test_keep_own_name(self, db, actor):
        a = role_service.create(db, "A", actor)
        updated = role_service.modify(db, a.id, actor, name="A", description="d")
        assert updated.name == "A"

    def test_missing_role(self, db, actor):
        with pytest.raises(RoleNotFoundError):
            role_service.modify(db, 9, actor, name="Z")


class TestDelete:
    """Tests for delete."""

    def test_delete(self, db, actor, permissions):
        role_id = role_service.create(db, "A", actor).id
        role_service.assign_permissions(db, role_id, permissions, actor)
        role_service.delete(db, role_id, actor)
        with pytest.raises(RoleNotFoundError):
            role_service.get(db, role_id)

    def test_delete_missing(self, db, actor):
        with pytest.raises(RoleNotFoundError):
            role_service.delete(db, 9, actor)


class TestPermissions:
    """Tests for list_permissions/assign_permissions."""

    def test_no_grants_is_empty(self, db, actor):
        role = role_service.create(db, "A", actor)
        assert role_service.list_permissions(db, role.id) == []

    def test_list_for_missing_role(self, db):
        with pytest.raises(RoleNotFoundError):
            role_service.list_permissions(db, 9)

    def test_assign_is_additive(self, db, actor, permissions):
        role = role_service.create(db, "A", actor)
        role_service.assign_permissions(db, role.id, [permissions[0]], actor)
        role_service.assign_permissions(db, role.id, [permissions[1], permissions[0]], actor)
        granted = role_service.list_permissions(db, role.id)
        assert [p.id for p in granted] == [permissions[0], permissions[1]]

    def test_assign_duplicates_in_request(self, db, actor, permissions):
        role = role_service.create(db, "A", actor)
        role_service.assign_permissions(db, role.id, [permissions[2], permissions[2]], actor)
        assert [p.id for p in role_service.list_permissions(db, role.id)] == [permissions[2]]

    def test_assign_is_all_or_nothing(self, db, actor, permissions):
        role = role_service.create(db, "A", actor)
        with pytest.raises(PermissionNotFoundError) as exc_info:
            role_service.assign_permissions(db, role.id, [permissions[0], 999], actor)
        assert exc_info.value.missing_ids == [999]
        assert "999" in exc_info.value.message
        assert role_service.list_permissions(db, role.id) == []

    def test_assign_to_missing_role(self, db, actor, permissions):
        with pytest.raises(RoleNotFoundError):
            role_service.assign_permissions(db, 9, permissions, actor)

    def test_grant_is_attributed(self, db, actor, permissions):
        role = role_service.create(db, "A", actor)
        role_service.assign_permissions(db, role.id, [permissions[0]], actor)
        db.refresh(role)
        assert [g.granted_by for g in role.grants] == [actor.user_id]


class TestAudit:
    """Every mutation is attributed to its actor."""

    def test_mutations_are_audited(self, db, actor, permissions):
        role_id = role_service.create(db, "A", actor).id
        role_service.modify(db, role_id, actor, description="d")
        role_service.assign_permissions(db, role_id, [permissions[0]], actor)
        role_service.delete(db, role_id, actor)

        logs = audit_service.query_logs(db, resource_type="role", resource_id=role_id)
        assert [log.action for log in logs] == [
            "role.deleted",
            "role.permissions_assigned",
            "role.modified",
            "role.created",
        ]
        assert {log.actor_id for log in logs} == {actor.user_id}
        assert {log.actor_email for log in logs} == {actor.email}
