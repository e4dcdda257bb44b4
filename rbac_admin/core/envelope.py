"""Request envelope decoding and response envelope encoding.

Requests carry named sub-objects (``{"Roles": {...}, "Permisos": [...]}``)
and responses always have the shape ``{"error": ..., "respuesta": ...}``.
"""

import json
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from rbac_admin.core.exceptions import (
    FieldDecodeError,
    MalformedRequestError,
    RBACAdminError,
)

T = TypeVar("T", bound=BaseModel)


def parse_body(body: bytes) -> Dict[str, Any]:
    """Parse a raw request body into a top-level mapping."""
    if not body or not body.strip():
        raise MalformedRequestError("El cuerpo de la petición está vacío.")
    try:
        data = json.loads(body)
    except (UnicodeDecodeError, ValueError, RecursionError):
        raise MalformedRequestError()
    if not isinstance(data, dict):
        raise MalformedRequestError()
    return data


async def read_envelope(request: Request) -> Dict[str, Any]:
    """FastAPI dependency returning the decoded request mapping."""
    return parse_body(await request.body())


def _describe(exc: ValidationError, prefix: str) -> str:
    fields = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in (prefix, *err["loc"]))
        if loc not in fields:
            fields.append(loc)
    return f"Campos inválidos: {', '.join(fields)}."


def decode_record(envelope: Dict[str, Any], key: str, model: Type[T]) -> T:
    """Project ``envelope[key]`` into a typed record.

    An absent sub-object decodes as an empty one, so a record with only
    optional fields still validates.

    Raises:
        FieldDecodeError: the sub-object is not a mapping, a field cannot be
            coerced, or a required field is missing.
    """
    raw = envelope.get(key)
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise FieldDecodeError(f"El campo {key} debe ser un objeto.")
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise FieldDecodeError(_describe(e, key))


def decode_list(envelope: Dict[str, Any], key: str, model: Type[T]) -> List[T]:
    """Project ``envelope[key]`` (a JSON array of objects) into typed records."""
    raw = envelope.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise FieldDecodeError(f"El campo {key} debe ser una lista.")

    records = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise FieldDecodeError(f"El elemento {key}.{i} debe ser un objeto.")
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            raise FieldDecodeError(_describe(e, f"{key}.{i}"))
    return records


def tagged(name: str, record: BaseModel) -> Dict[str, Any]:
    """Wrap a record as ``{name: {...}}``."""
    return {name: record.model_dump(by_alias=True)}


def tagged_list(name: str, records: Sequence[BaseModel]) -> List[Dict[str, Any]]:
    return [tagged(name, r) for r in records]


def success(payload: Optional[Any] = None) -> Dict[str, Any]:
    return {"error": None, "respuesta": payload}


def failure(exc: RBACAdminError) -> Dict[str, Any]:
    return {
        "error": {"codigo": exc.code, "mensaje": exc.message},
        "respuesta": None,
    }
