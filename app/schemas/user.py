"""User (usuario) API schemas."""

from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from app.domain.enums import UserRole, UserType
from app.schemas.common import MessageResponse, RecordResponse, SanitizedModel, UpdateModel

CARD_EXPIRY_PATTERN = r"^(0[1-9]|1[0-2])/\d{2}$"


class PaymentMethodIn(BaseModel):
    """One stored payment method; only the last four digits are kept."""

    id: str | None = None
    predeterminado: bool = False
    tipo: Literal["tarjeta", "paypal", "cuenta_bancaria"]
    ultimosDigitos: str = Field(..., pattern=r"^\d{4}$")
    fechaExpiracion: str | None = Field(default=None, pattern=CARD_EXPIRY_PATTERN)
    nombreTitular: str | None = Field(default=None, min_length=2, max_length=100)
    marca: Literal["visa", "mastercard", "american express", "amex", "discover", "otros"] = "otros"


def _check_payment_methods(methods: list[PaymentMethodIn]) -> list[PaymentMethodIn]:
    if sum(1 for m in methods if m.predeterminado) > 1:
        raise ValueError("Solo puede haber un método de pago predeterminado")
    seen = set()
    for method in methods:
        if method.tipo == "tarjeta" and not method.fechaExpiracion:
            raise ValueError("La fecha de expiración es requerida para tarjetas")
        combo = (method.tipo, method.ultimosDigitos)
        if combo in seen:
            raise ValueError("Método de pago duplicado")
        seen.add(combo)
    return methods


PaymentMethods = Annotated[list[PaymentMethodIn], AfterValidator(_check_payment_methods)]


class Address(BaseModel):
    calle: str | None = None
    ciudad: str | None = None
    departamento: str | None = None
    codigoPostal: str | None = None
    pais: str | None = None


class Preferences(BaseModel):
    idiomaPreferido: str = "es"
    monedaPreferida: str = "USD"
    notificaciones: bool = True


class UserCreate(SanitizedModel):
    """Request body for POST /usuarios. username and email must be unique."""

    raw_fields = frozenset({"password"})

    tipoUsuario: UserType = UserType.USUARIO
    username: str = Field(..., min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    nombre: str = Field(..., min_length=1, max_length=100)
    apellidos: str | None = Field(default=None, max_length=100)
    imagen: str | None = None
    datosPersonales: dict | None = None
    direccion: Address | None = None
    datosEmpresa: dict | None = None
    preferencias: Preferences = Field(default_factory=Preferences)
    metodoPago: PaymentMethods = Field(default_factory=list)
    activo: bool = True
    verificado: bool = False


class UserUpdate(UpdateModel):
    """Role changes go through PUT /usuarios/{id}/rol; membership through /membresias."""

    raw_fields = frozenset({"password"})
    nullable = frozenset(
        {"apellidos", "imagen", "datosPersonales", "direccion", "datosEmpresa"}
    )

    tipoUsuario: UserType | None = None
    username: str | None = Field(
        default=None, min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_.-]+$"
    )
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8, max_length=128)
    nombre: str | None = Field(default=None, min_length=1, max_length=100)
    apellidos: str | None = Field(default=None, max_length=100)
    imagen: str | None = None
    datosPersonales: dict | None = None
    direccion: Address | None = None
    datosEmpresa: dict | None = None
    preferencias: Preferences | None = None
    activo: bool | None = None
    verificado: bool | None = None


class PaymentMethodsReplace(SanitizedModel):
    """Request body for PUT /usuarios/{id}/metodos-pago."""

    metodoPago: PaymentMethods


class RoleChange(SanitizedModel):
    rol: UserRole


class UserResponse(RecordResponse):
    """Public user record (never carries the password hash)."""

    username: str
    email: str
    nombre: str
    tipoUsuario: UserType
    rol: UserRole
    metodoPago: list[dict]
    membresia: dict | None
    activo: bool
    verificado: bool


class UserMessage(MessageResponse):
    usuario: UserResponse


class UserMembershipSnapshot(BaseModel):
    usuarioId: str
    membresia: dict | None
