"""Repository container: every repository built once over the shared store and cache handles.

Built in the lifespan and stored on app.state.repositories; tests build one
over in-memory doubles and assign it the same way.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from app.application.interfaces.document_store import DocumentStoreProtocol
from app.application.interfaces.repositories import IRatedEntityRepository
from app.core.config import Settings, get_settings
from app.domain.enums import ReviewedEntityType
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.persistence.repositories import (
    AdditionalServiceRepository,
    AvailabilityRepository,
    BuildingRepository,
    CachedRepository,
    InvoiceRepository,
    MembershipRepository,
    NotificationRepository,
    OfficeRepository,
    PaymentRepository,
    PromotionRepository,
    ReservationRepository,
    ReviewRepository,
    ServiceReservationRepository,
    SpaceRepository,
    UserRepository,
)


@dataclass
class Repositories:
    """All entity repositories plus the reviewed-entity rating registry."""

    buildings: BuildingRepository
    spaces: SpaceRepository
    offices: OfficeRepository
    reservations: ReservationRepository
    additional_services: AdditionalServiceRepository
    service_reservations: ServiceReservationRepository
    memberships: MembershipRepository
    payments: PaymentRepository
    reviews: ReviewRepository
    promotions: PromotionRepository
    notifications: NotificationRepository
    users: UserRepository
    availability: AvailabilityRepository
    invoices: InvoiceRepository
    rated: dict[str, IRatedEntityRepository] = field(default_factory=dict)


def _build(
    repo_cls: type[CachedRepository],
    store: DocumentStoreProtocol,
    cache: CacheProtocol | None,
    settings: Settings,
) -> CachedRepository:
    return repo_cls(store, cache, cache_ttl=settings.cache_ttl_for(repo_cls.collection))


def build_repositories(
    store: DocumentStoreProtocol,
    cache: CacheProtocol | None = None,
    settings: Settings | None = None,
) -> Repositories:
    """Construct every repository over the same store/cache handles."""
    settings = settings or get_settings()
    repos = Repositories(
        buildings=_build(BuildingRepository, store, cache, settings),
        spaces=_build(SpaceRepository, store, cache, settings),
        offices=_build(OfficeRepository, store, cache, settings),
        reservations=_build(ReservationRepository, store, cache, settings),
        additional_services=_build(AdditionalServiceRepository, store, cache, settings),
        service_reservations=_build(ServiceReservationRepository, store, cache, settings),
        memberships=_build(MembershipRepository, store, cache, settings),
        payments=_build(PaymentRepository, store, cache, settings),
        reviews=_build(ReviewRepository, store, cache, settings),
        promotions=_build(PromotionRepository, store, cache, settings),
        notifications=_build(NotificationRepository, store, cache, settings),
        users=_build(UserRepository, store, cache, settings),
        availability=_build(AvailabilityRepository, store, cache, settings),
        invoices=_build(InvoiceRepository, store, cache, settings),
    )
    repos.rated = {
        ReviewedEntityType.EDIFICIO.value: repos.buildings,
        ReviewedEntityType.OFICINA.value: repos.offices,
        ReviewedEntityType.ESPACIO.value: repos.spaces,
    }
    return repos
