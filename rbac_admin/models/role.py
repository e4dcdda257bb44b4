"""Role model and its permission grants."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from rbac_admin.db.base import Base


class Role(Base):
    """Named bundle of permissions."""
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    grants = relationship(
        "RolePermission",
        back_populates="role",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class RolePermission(Base):
    """Association between roles and permissions, attributed to the granting actor."""
    __tablename__ = "role_permissions"

    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    permission_id = Column(
        Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True
    )
    granted_by = Column(Integer, nullable=True)
    granted_at = Column(DateTime, server_default=func.now(), nullable=False)

    role = relationship("Role", back_populates="grants")
    permission = relationship("Permission", lazy="joined")
