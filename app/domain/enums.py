"""Domain enumerations for the coworking application.

Enums represent fixed sets of domain values (types, statuses, units).
Values are the Spanish strings stored in documents and exposed by the API.
"""

from enum import Enum


class ValuesMixin:
    """Adds values() to str enums (used for validation and error details)."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class SpaceType(ValuesMixin, str, Enum):
    OFICINA_PRIVADA = "oficina_privada"
    SALA_REUNION = "sala_reunion"
    ESCRITORIO_FLEXIBLE = "escritorio_flexible"
    AREA_COMUN = "area_comun"


class SpaceStatus(ValuesMixin, str, Enum):
    DISPONIBLE = "disponible"
    OCUPADO = "ocupado"
    MANTENIMIENTO = "mantenimiento"
    RESERVADO = "reservado"


class OfficeType(ValuesMixin, str, Enum):
    INDIVIDUAL = "individual"
    EQUIPO = "equipo"
    PRIVADA = "privada"
    COWORKING = "coworking"


class OfficeStatus(ValuesMixin, str, Enum):
    DISPONIBLE = "disponible"
    OCUPADA = "ocupada"
    MANTENIMIENTO = "mantenimiento"
    RESERVADA = "reservada"


class ReservableEntityType(ValuesMixin, str, Enum):
    """What a reservation points at (entidadReservada.tipo)."""

    OFICINA = "oficina"
    ESPACIO = "espacio"
    SALA_REUNION = "sala_reunion"
    ESCRITORIO_FLEXIBLE = "escritorio_flexible"


class ReservationStatus(ValuesMixin, str, Enum):
    PENDIENTE = "pendiente"
    CONFIRMADA = "confirmada"
    CANCELADA = "cancelada"
    COMPLETADA = "completada"
    NO_ASISTIO = "no_asistio"


class ReservationKind(ValuesMixin, str, Enum):
    """Billing granularity of a reservation (tipoReserva)."""

    HORA = "hora"
    DIA = "dia"
    SEMANA = "semana"
    MES = "mes"


class ServiceType(ValuesMixin, str, Enum):
    CATERING = "catering"
    LIMPIEZA = "limpieza"
    RECEPCION = "recepcion"
    PARKING = "parking"
    IMPRESION = "impresion"
    OTRO = "otro"


class PriceUnit(ValuesMixin, str, Enum):
    POR_USO = "por_uso"
    POR_HORA = "por_hora"
    POR_PERSONA = "por_persona"
    POR_DIA = "por_dia"


class ServiceReservationStatus(ValuesMixin, str, Enum):
    PENDIENTE = "pendiente"
    CONFIRMADO = "confirmado"
    CANCELADO = "cancelado"
    COMPLETADO = "completado"


class MembershipType(ValuesMixin, str, Enum):
    BASICO = "basico"
    ESTANDAR = "estandar"
    PREMIUM = "premium"
    EMPRESARIAL = "empresarial"


class Periodicity(ValuesMixin, str, Enum):
    MENSUAL = "mensual"
    TRIMESTRAL = "trimestral"
    ANUAL = "anual"


class PaymentMethod(ValuesMixin, str, Enum):
    TARJETA = "tarjeta"
    PAYPAL = "paypal"
    TRANSFERENCIA = "transferencia"
    EFECTIVO = "efectivo"


class PaymentStatus(ValuesMixin, str, Enum):
    PENDIENTE = "pendiente"
    COMPLETADO = "completado"
    FALLIDO = "fallido"
    REEMBOLSADO = "reembolsado"


class PaymentConcept(ValuesMixin, str, Enum):
    RESERVA = "reserva"
    MEMBRESIA = "membresia"
    SERVICIO = "servicio"
    OTRO = "otro"


class InvoiceStatus(ValuesMixin, str, Enum):
    PENDIENTE = "pendiente"
    PAGADA = "pagada"
    VENCIDA = "vencida"
    CANCELADA = "cancelada"


class InvoiceIssuerType(ValuesMixin, str, Enum):
    PLATAFORMA = "plataforma"
    INMOBILIARIA = "inmobiliaria"
    PROVEEDOR = "proveedor"


class SlotEntityType(ValuesMixin, str, Enum):
    """Entities with a day-by-day slot calendar."""

    OFICINA = "oficina"
    SALA_REUNION = "sala_reunion"
    ESCRITORIO_FLEXIBLE = "escritorio_flexible"


class ReviewedEntityType(ValuesMixin, str, Enum):
    """Entities that carry an aggregate rating."""

    EDIFICIO = "edificio"
    OFICINA = "oficina"
    ESPACIO = "espacio"


class ReviewStatus(ValuesMixin, str, Enum):
    PENDIENTE = "pendiente"
    APROBADA = "aprobada"
    RECHAZADA = "rechazada"


class PromotionType(ValuesMixin, str, Enum):
    PORCENTAJE = "porcentaje"
    MONTO_FIJO = "monto_fijo"
    GRATUITO = "gratuito"


class PromotionTarget(ValuesMixin, str, Enum):
    """Entity kind a promotion applies to (aplicableA.entidad)."""

    OFICINA = "oficina"
    ESPACIO = "espacio"
    SALA_REUNION = "sala_reunion"
    ESCRITORIO_FLEXIBLE = "escritorio_flexible"
    MEMBRESIA = "membresia"
    SERVICIO = "servicio"


class NotificationType(ValuesMixin, str, Enum):
    RESERVA = "reserva"
    PAGO = "pago"
    MEMBRESIA = "membresia"
    PROMOCION = "promocion"
    SISTEMA = "sistema"


class NotificationPriority(ValuesMixin, str, Enum):
    BAJA = "baja"
    MEDIA = "media"
    ALTA = "alta"


class UserType(ValuesMixin, str, Enum):
    USUARIO = "usuario"
    PROVEEDOR = "proveedor"
    CLIENTE = "cliente"
    ADMINISTRADOR = "administrador"


class UserRole(ValuesMixin, str, Enum):
    USUARIO = "usuario"
    EDITOR = "editor"
    ADMINISTRADOR = "administrador"
    SUPERADMIN = "superadmin"

    @classmethod
    def admin_roles(cls) -> frozenset[str]:
        """Roles allowed to moderate, change roles and act on other users."""
        return frozenset({cls.ADMINISTRADOR.value, cls.SUPERADMIN.value})
