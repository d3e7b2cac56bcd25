"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.additional_service_repo import (
    AdditionalServiceRepository,
)
from app.infrastructure.persistence.repositories.availability_repo import (
    AvailabilityRepository,
)
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository
from app.infrastructure.persistence.repositories.building_repo import BuildingRepository
from app.infrastructure.persistence.repositories.invoice_repo import InvoiceRepository
from app.infrastructure.persistence.repositories.membership_repo import MembershipRepository
from app.infrastructure.persistence.repositories.notification_repo import (
    NotificationRepository,
)
from app.infrastructure.persistence.repositories.office_repo import OfficeRepository
from app.infrastructure.persistence.repositories.payment_repo import PaymentRepository
from app.infrastructure.persistence.repositories.promotion_repo import PromotionRepository
from app.infrastructure.persistence.repositories.reservation_repo import (
    ReservationRepository,
)
from app.infrastructure.persistence.repositories.review_repo import ReviewRepository
from app.infrastructure.persistence.repositories.service_reservation_repo import (
    ServiceReservationRepository,
)
from app.infrastructure.persistence.repositories.space_repo import SpaceRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "AdditionalServiceRepository",
    "AvailabilityRepository",
    "Axis",
    "BuildingRepository",
    "CachedRepository",
    "InvoiceRepository",
    "MembershipRepository",
    "NotificationRepository",
    "OfficeRepository",
    "PaymentRepository",
    "PromotionRepository",
    "ReservationRepository",
    "ReviewRepository",
    "ServiceReservationRepository",
    "SpaceRepository",
    "UserRepository",
]
