"""Seed the permission catalogue and default roles into the database."""

from sqlalchemy.orm import Session
from rbac_admin.models.permission import Permission
from rbac_admin.models.role import Role, RolePermission

PERMISSIONS = [
    "Crear rol",
    "Borrar rol",
    "Modificar rol",
    "Listar roles",
    "Listar permisos",
    "Asignar permisos",
]

DEFAULT_ROLES = [
    {
        "name": "Administradores",
        "description": "Acceso total a la administración de roles",
        "permissions": PERMISSIONS,
    },
    {
        "name": "Vendedores",
        "description": "Este rol es para los vendedores",
        "permissions": ["Listar roles"],
    },
]


def seed_permissions(db: Session) -> None:
    """Insert the permission catalogue if it isn't already there."""
    for name in PERMISSIONS:
        existing = db.query(Permission).filter(Permission.name == name).first()
        if not existing:
            db.add(Permission(name=name))

    db.commit()
    print(f"Seeded {len(PERMISSIONS)} permissions")


def seed_roles(db: Session) -> None:
    """Insert default roles and their grants if they don't already exist."""
    for role_data in DEFAULT_ROLES:
        if db.query(Role).filter(Role.name == role_data["name"]).first():
            continue
        role = Role(name=role_data["name"], description=role_data["description"])
        permissions = (
            db.query(Permission)
            .filter(Permission.name.in_(role_data["permissions"]))
            .all()
        )
        role.grants = [RolePermission(permission_id=p.id) for p in permissions]
        db.add(role)

    db.commit()
    print(f"Seeded {len(DEFAULT_ROLES)} roles")
