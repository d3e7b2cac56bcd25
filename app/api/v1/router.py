"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Everything but
health and auth requires a bearer token (router-level dependency).
"""

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_current_principal
from app.api.v1.endpoints import (
    additional_services,
    auth,
    availability,
    buildings,
    health,
    invoices,
    memberships,
    notifications,
    offices,
    payments,
    promotions,
    reservations,
    reviews,
    service_reservations,
    spaces,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

_protected = [Depends(get_current_principal)]

api_router.include_router(
    buildings.router, prefix="/edificios", tags=["edificios"], dependencies=_protected
)
api_router.include_router(
    spaces.router, prefix="/espacios", tags=["espacios"], dependencies=_protected
)
api_router.include_router(
    offices.router, prefix="/oficinas", tags=["oficinas"], dependencies=_protected
)
api_router.include_router(
    reservations.router, prefix="/reservas", tags=["reservas"], dependencies=_protected
)
api_router.include_router(
    additional_services.router,
    prefix="/servicios-adicionales",
    tags=["servicios-adicionales"],
    dependencies=_protected,
)
api_router.include_router(
    service_reservations.router,
    prefix="/reservas-servicio",
    tags=["reservas-servicio"],
    dependencies=_protected,
)
api_router.include_router(
    memberships.router, prefix="/membresias", tags=["membresias"], dependencies=_protected
)
api_router.include_router(
    payments.router, prefix="/pagos", tags=["pagos"], dependencies=_protected
)
api_router.include_router(
    reviews.router, prefix="/resenas", tags=["resenas"], dependencies=_protected
)
api_router.include_router(
    promotions.router, prefix="/promociones", tags=["promociones"], dependencies=_protected
)
api_router.include_router(
    notifications.router,
    prefix="/notificaciones",
    tags=["notificaciones"],
    dependencies=_protected,
)
api_router.include_router(
    users.router, prefix="/usuarios", tags=["usuarios"], dependencies=_protected
)
api_router.include_router(
    availability.router,
    prefix="/disponibilidades",
    tags=["disponibilidades"],
    dependencies=_protected,
)
api_router.include_router(
    invoices.router, prefix="/facturas", tags=["facturas"], dependencies=_protected
)
