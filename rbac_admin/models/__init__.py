"""Models package — import all models so metadata.create_all can discover them."""

from rbac_admin.models.role import Role, RolePermission
from rbac_admin.models.permission import Permission
from rbac_admin.models.audit_log import AuditLog

__all__ = ["Role", "RolePermission", "Permission", "AuditLog"]
