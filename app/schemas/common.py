"""Shared schema building blocks: sanitizing base models and common field types."""

from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from app.shared.utils.sanitization import sanitize_input

# HH:MM, 24h
HOUR_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"
Hour = Annotated[str, Field(pattern=HOUR_PATTERN)]
Identifier = Annotated[str, Field(min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_-]+$")]

DayOfWeek = Literal["lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"]


class SanitizedModel(BaseModel):
    """Request body base: every string (nested too) is HTML-stripped before validation.

    Fields named in raw_fields (e.g. password) are passed through untouched.
    """

    model_config = ConfigDict(extra="ignore")

    raw_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def _sanitize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            key: value if key in cls.raw_fields else sanitize_input(value)
            for key, value in data.items()
        }

    def to_document(self) -> dict[str, Any]:
        """JSON-native dict for the store (dates as ISO strings, None fields omitted)."""
        return self.model_dump(mode="json", exclude_none=True)


class UpdateModel(SanitizedModel):
    """Partial update body: all fields optional, at least one required.

    An explicit null clears a field only when the field is listed in nullable;
    every other field answers 400 on null.
    """

    nullable: ClassVar[frozenset[str]] = frozenset()

    @field_validator("*")
    @classmethod
    def _reject_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name not in cls.nullable:
            raise ValueError("El campo no puede ser nulo")
        return value

    @model_validator(mode="after")
    def _not_empty(self) -> "UpdateModel":
        if not self.model_fields_set:
            raise ValueError("Debe proporcionar al menos un campo para actualizar")
        return self

    def to_document(self) -> dict[str, Any]:
        """Only the fields the client sent (a null clears a nullable field)."""
        return self.model_dump(mode="json", exclude_unset=True)


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class EntityRef(SanitizedModel):
    """Reference to another record: {tipo, id}."""

    tipo: str = Field(..., min_length=1)
    id: Identifier



class RecordResponse(BaseModel):
    """A stored record as the API returns it.

    Subclasses declare the fields every record of the entity carries; optional
    and expanded fields (e.g. cliente summaries) pass through unchanged.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    createdAt: str
    updatedAt: str


class MessageResponse(BaseModel):
    """Write-endpoint body: {"message": ..., <entity>: record}; deletes carry only the message."""

    model_config = ConfigDict(extra="allow")

    message: str
