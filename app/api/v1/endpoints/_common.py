"""Small helpers shared by the endpoint modules."""

from typing import Any, TypeVar

from fastapi.encoders import jsonable_encoder

from app.domain.exceptions import ResourceNotFoundException, ValidationException

T = TypeVar("T")


def found(value: T | None, resource: str, resource_id: str) -> T:
    """Return value, or raise 404 for resource/resource_id when it is None."""
    if value is None:
        raise ResourceNotFoundException(resource, resource_id)
    return value


def with_message(message: str, **payload: Any) -> dict[str, Any]:
    """Write-endpoint body: {"message": ..., <entity>: record, ...}."""
    return {"message": message, **payload}


def check_range(minimum: Any, maximum: Any, field: str) -> None:
    """Reject an inverted [minimum, maximum] query range with 400."""
    if minimum is not None and maximum is not None and minimum > maximum:
        raise ValidationException(
            "El valor mínimo no puede ser mayor que el máximo",
            field=field,
            details=jsonable_encoder({"min": minimum, "max": maximum}),
        )
