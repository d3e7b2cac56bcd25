"""Building (edificio) API schemas."""

from pydantic import BaseModel, Field, HttpUrl

from app.schemas.common import (
    Coordinates,
    DayOfWeek,
    Hour,
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class Address(BaseModel):
    calle: str = Field(..., min_length=1)
    numero: str = Field(..., min_length=1)
    ciudad: str = Field(..., min_length=1)
    departamento: str = Field(..., min_length=1)
    codigoPostal: str = Field(..., min_length=1)
    pais: str = Field(..., min_length=1)
    coordenadas: Coordinates


class Amenity(SanitizedModel):
    tipo: str = Field(..., min_length=1)
    descripcion: str | None = None
    horario: str | None = None


class Schedule(SanitizedModel):
    apertura: Hour = "09:00"
    cierre: Hour = "18:00"
    diasOperacion: list[DayOfWeek] = Field(default_factory=list)


class BuildingCreate(SanitizedModel):
    """Request body for POST /edificios."""

    nombre: str = Field(..., min_length=1, max_length=200)
    direccion: Address
    usuarioId: Identifier
    empresaInmobiliariaId: Identifier | None = None
    descripcion: str | None = None
    imagenes: list[HttpUrl] = Field(default_factory=list, max_length=15)
    amenidades: list[Amenity] = Field(default_factory=list)
    horario: Schedule | None = None
    accesibilidad: bool = False
    estacionamiento: bool = False
    activo: bool = True


class BuildingUpdate(UpdateModel):
    """Request body for PUT /edificios/{id} (partial; nested objects replace wholesale)."""

    nullable = frozenset({"empresaInmobiliariaId", "descripcion", "horario"})

    nombre: str | None = Field(default=None, min_length=1, max_length=200)
    direccion: Address | None = None
    usuarioId: Identifier | None = None
    empresaInmobiliariaId: Identifier | None = None
    descripcion: str | None = None
    imagenes: list[HttpUrl] | None = Field(default=None, max_length=15)
    amenidades: list[Amenity] | None = None
    horario: Schedule | None = None
    accesibilidad: bool | None = None
    estacionamiento: bool | None = None
    activo: bool | None = None


class RatingUpdate(SanitizedModel):
    """Request body for PUT .../{id}/calificacion."""

    calificacionPromedio: float = Field(..., ge=0, le=5)
    totalResenas: int = Field(..., ge=0)


class BuildingResponse(RecordResponse):
    nombre: str
    direccion: dict
    usuarioId: str
    amenidades: list[dict]
    calificacionPromedio: float
    totalResenas: int
    activo: bool


class BuildingMessage(MessageResponse):
    edificio: BuildingResponse
