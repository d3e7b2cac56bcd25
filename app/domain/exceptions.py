"""Domain exceptions for the coworking application.

A small closed set of tagged error variants. Repositories and services raise
them; the presentation layer maps error_code to an HTTP status in
app.core.exception_handlers and never inspects message text.
"""

from typing import Any


class CoworkingException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description (Spanish, shown to clients).
        error_code: Machine-readable error tag.
        details: Additional error context (e.g. resource_id, estado).
        field: Offending field, when the error is about one input field.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        field: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
            field: Optional name of the offending input field.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.field = field
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body: {message, details, field?}."""
        body: dict[str, Any] = {"message": self.message, "details": self.details}
        if self.field:
            body["field"] = self.field
        return body


class ValidationException(CoworkingException):
    """Raised when input fails a rule the request schema cannot express."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, "VALIDATION_ERROR", details, field)


class ResourceNotFoundException(CoworkingException):
    """Raised when a by-id lookup or mutation target does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Entity name (e.g. 'edificio', 'reserva').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"No se ha encontrado {resource_type} con id: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(CoworkingException):
    """Raised on business-rule conflicts: duplicates, double booking, capacity."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, "CONFLICT", details, field)


class DuplicateValueException(ConflictException):
    """Raised when a unique field (codigo, username, email) is already taken."""

    def __init__(self, resource_type: str, field: str, value: Any) -> None:
        super().__init__(
            f"Ya existe {resource_type} con {field} '{value}'",
            {"resource_type": resource_type, "value": value},
            field=field,
        )


class InvalidStateException(CoworkingException):
    """Raised when a status transition is not allowed from the current state."""

    def __init__(
        self,
        resource_type: str,
        current: str,
        requested: str,
        allowed: list[str] | None = None,
    ) -> None:
        super().__init__(
            f"Transición no permitida para {resource_type}: {current} -> {requested}",
            "INVALID_STATE",
            {
                "resource_type": resource_type,
                "estado_actual": current,
                "estado_solicitado": requested,
                "transiciones_permitidas": allowed or [],
            },
            field="estado",
        )


class InvalidIdentifierException(CoworkingException):
    """Raised when the store rejects an id that is not in its id format."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            "Identificador inválido",
            "INVALID_IDENTIFIER",
            {"id": identifier, "reason": f"El formato del ID '{identifier}' no es válido"},
            field="id",
        )


class AuthenticationException(CoworkingException):
    """Raised when the bearer token is missing or invalid, or login fails."""

    def __init__(self, message: str = "No autorizado - token inválido") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(CoworkingException):
    """Raised when the principal may not act on the resource (ownership, role)."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permiso denegado",
    ) -> None:
        if resource and action:
            message = f"Permiso denegado: {action} sobre {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class InfrastructureException(CoworkingException):
    """Raised when a backing service (store) fails in an unexpected way."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "INFRASTRUCTURE_ERROR", details)


class StoreNotConfiguredException(InfrastructureException):
    """Raised when a request needs the document store but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            "El almacén de documentos no está configurado",
            {
                "hint": "Defina FIREBASE_SERVICE_ACCOUNT_KEY o FIREBASE_SERVICE_ACCOUNT_PATH",
            },
        )
