"""Permission model."""

from sqlalchemy import Column, Integer, String
from rbac_admin.db.base import Base


class Permission(Base):
    """Atomic grantable capability. Populated by the seed command."""
    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
