"""Pydantic schemas for API request/response serialization.

Field names on the wire follow the envelope convention (``IdRol``, ``Rol``,
``Descripcion``...); Python attributes use the ORM column names.
"""

from pydantic import BaseModel, Field, field_serializer, field_validator
from typing import Optional, Any, Dict
from datetime import datetime

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

# Ids are MySQL INT columns
MAX_ID = 2**31 - 1


# ---- Request records ----
class RoleKey(BaseModel):
    """`{"IdRol": int}`, used by dame, borrar, listarPermisos and asignarPermisos."""
    id: int = Field(..., alias="IdRol", le=MAX_ID)

    class Config:
        populate_by_name = True


class RoleCreate(BaseModel):
    name: str = Field(..., alias="Rol", min_length=1, max_length=50)
    description: Optional[str] = Field(None, alias="Descripcion", max_length=255)

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


class RoleUpdate(BaseModel):
    """Partial update. Only keys present in the request are applied."""
    id: int = Field(..., alias="IdRol", le=MAX_ID)
    name: Optional[str] = Field(None, alias="Rol", min_length=1, max_length=50)
    description: Optional[str] = Field(None, alias="Descripcion", max_length=255)

    class Config:
        populate_by_name = True
        str_strip_whitespace = True

    def changes(self) -> Dict[str, Any]:
        """Return the present fields, keyed by attribute name."""
        changes = {}
        if "name" in self.model_fields_set and self.name is not None:
            changes["name"] = self.name
        if "description" in self.model_fields_set:
            changes["description"] = self.description
        return changes


class PermissionKey(BaseModel):
    id: int = Field(..., alias="IdPermiso", le=MAX_ID)

    class Config:
        populate_by_name = True


# ---- Response records ----
class RoleOut(BaseModel):
    id: int = Field(..., serialization_alias="IdRol")
    name: str = Field(..., serialization_alias="Rol")
    created_at: Optional[datetime] = Field(None, serialization_alias="FechaAlta")
    description: str = Field("", serialization_alias="Descripcion")

    class Config:
        from_attributes = True

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_serializer("created_at")
    def _format_created_at(self, value: Optional[datetime]):
        return value.strftime(TIMESTAMP_FORMAT) if value else None


class PermissionOut(BaseModel):
    id: int = Field(..., serialization_alias="IdPermiso")
    name: str = Field(..., serialization_alias="Permiso")

    class Config:
        from_attributes = True


# ---- Envelope ----
class ErrorOut(BaseModel):
    codigo: str
    mensaje: str


class Envelope(BaseModel):
    """Every response: exactly one of ``error`` or ``respuesta`` carries data."""
    error: Optional[ErrorOut] = None
    respuesta: Optional[Any] = None
