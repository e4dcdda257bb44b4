"""Application exceptions and their envelope error codes."""

import enum
from typing import Iterable, Optional


class ErrorKind(str, enum.Enum):
    MALFORMED_REQUEST = "MALFORMED_REQUEST"
    FIELD_DECODE_ERROR = "FIELD_DECODE_ERROR"
    INVALID_OR_MISSING_TOKEN = "INVALID_OR_MISSING_TOKEN"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_ROLE_NAME = "DUPLICATE_ROLE_NAME"
    DEFAULT = "DEFAULT"


class RBACAdminError(Exception):
    """Base exception for the role administration API.

    Each subclass fixes the envelope ``codigo``, a default ``mensaje`` and the
    HTTP status the handler answers with.
    """

    kind: ErrorKind = ErrorKind.DEFAULT
    code: str = "ERROR_DEFAULT"
    message: str = "Ha ocurrido un error mientras se procesaba su petición."
    status_code: int = 400

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MalformedRequestError(RBACAdminError):
    """Raised when the request body is not a JSON object."""
    kind = ErrorKind.MALFORMED_REQUEST
    code = "ERROR_PETICION_MALFORMADA"
    message = "El cuerpo de la petición no es un objeto JSON válido."
    status_code = 422


class FieldDecodeError(RBACAdminError):
    """Raised when a field of the envelope cannot be decoded."""
    kind = ErrorKind.FIELD_DECODE_ERROR
    code = "ERROR_CAMPO_INVALIDO"
    message = "Uno o más campos de la petición son inválidos."
    status_code = 422


class InvalidTokenError(RBACAdminError):
    """Raised when the Authorization header is missing or invalid."""
    kind = ErrorKind.INVALID_OR_MISSING_TOKEN
    code = "ERROR_TOKEN_INVALIDO"
    message = "El token de autorización es inválido o no fue enviado."
    status_code = 422


class RoleNotFoundError(RBACAdminError):
    kind = ErrorKind.NOT_FOUND
    code = "ERROR_NOEXISTE_ROL"
    message = "No existe el rol."


class PermissionNotFoundError(RBACAdminError):
    kind = ErrorKind.NOT_FOUND
    code = "ERROR_NOEXISTE_PERMISO"
    message = "No existe el permiso."

    def __init__(self, missing_ids: Iterable[int] = ()):
        self.missing_ids = sorted(missing_ids)
        message = None
        if self.missing_ids:
            ids = ", ".join(str(i) for i in self.missing_ids)
            message = f"No existe el permiso: {ids}."
        super().__init__(message)


class DuplicateRoleNameError(RBACAdminError):
    kind = ErrorKind.DUPLICATE_ROLE_NAME
    code = "ERROR_EXISTE_NOMBREROL"
    message = "El nombre de rol ya existe."
