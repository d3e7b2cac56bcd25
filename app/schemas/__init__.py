"""Pydantic request/response schemas for the API."""

from app.schemas.additional_service import (
    AdditionalServiceCreate,
    AdditionalServiceMessage,
    AdditionalServiceResponse,
    AdditionalServiceUpdate,
)
from app.schemas.auth import LoginRequest, MeResponse, TokenResponse
from app.schemas.availability import (
    AvailabilityCreate,
    AvailabilityMessage,
    AvailabilityResponse,
    AvailabilityUpdate,
    DailyAvailabilityCreate,
    DailyAvailabilityResult,
    SlotBlock,
    SlotRelease,
    SlotReservation,
    SlotWindow,
)
from app.schemas.building import (
    BuildingCreate,
    BuildingMessage,
    BuildingResponse,
    BuildingUpdate,
    RatingUpdate,
)
from app.schemas.common import MessageResponse, RecordResponse
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.invoice import (
    InvoiceCancellation,
    InvoiceCreate,
    InvoiceMessage,
    InvoicePayment,
    InvoicePdf,
    InvoiceResponse,
    InvoiceStatistics,
    InvoiceStatusChange,
    InvoiceUpdate,
)
from app.schemas.membership import (
    CancelSubscriptionRequest,
    MembershipCreate,
    MembershipMessage,
    MembershipResponse,
    MembershipUpdate,
    SubscribeRequest,
    UserMembership,
)
from app.schemas.notification import (
    MarkAllReadResponse,
    NotificationCreate,
    NotificationMessage,
    NotificationResponse,
    NotificationUpdate,
)
from app.schemas.office import OfficeCreate, OfficeMessage, OfficeResponse, OfficeUpdate
from app.schemas.payment import PaymentCreate, PaymentMessage, PaymentResponse, PaymentUpdate
from app.schemas.promotion import (
    PromotionCreate,
    PromotionMessage,
    PromotionResponse,
    PromotionUpdate,
    PromotionValidation,
    ValidatePromotionRequest,
)
from app.schemas.reservation import (
    ClientStatistics,
    ReservationCreate,
    ReservationMessage,
    ReservationResponse,
    ReservationUpdate,
)
from app.schemas.review import (
    ModerationRequest,
    RatingSummary,
    ReviewCreate,
    ReviewMessage,
    ReviewResponse,
    ReviewUpdate,
)
from app.schemas.service_reservation import (
    ServiceReservationCreate,
    ServiceReservationMessage,
    ServiceReservationResponse,
    ServiceReservationUpdate,
)
from app.schemas.space import SpaceCreate, SpaceMessage, SpaceResponse, SpaceUpdate
from app.schemas.user import (
    UserCreate,
    UserMembershipSnapshot,
    UserMessage,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "AdditionalServiceCreate",
    "AdditionalServiceMessage",
    "AdditionalServiceResponse",
    "AdditionalServiceUpdate",
    "AvailabilityCreate",
    "AvailabilityMessage",
    "AvailabilityResponse",
    "AvailabilityUpdate",
    "BuildingCreate",
    "BuildingMessage",
    "BuildingResponse",
    "BuildingUpdate",
    "CancelSubscriptionRequest",
    "ClientStatistics",
    "DailyAvailabilityCreate",
    "DailyAvailabilityResult",
    "HealthResponse",
    "InvoiceCancellation",
    "InvoiceCreate",
    "InvoiceMessage",
    "InvoicePayment",
    "InvoicePdf",
    "InvoiceResponse",
    "InvoiceStatistics",
    "InvoiceStatusChange",
    "InvoiceUpdate",
    "LoginRequest",
    "MarkAllReadResponse",
    "MeResponse",
    "MembershipCreate",
    "MembershipMessage",
    "MembershipResponse",
    "MembershipUpdate",
    "MessageResponse",
    "ModerationRequest",
    "NotificationCreate",
    "NotificationMessage",
    "NotificationResponse",
    "NotificationUpdate",
    "OfficeCreate",
    "OfficeMessage",
    "OfficeResponse",
    "OfficeUpdate",
    "PaymentCreate",
    "PaymentMessage",
    "PaymentResponse",
    "PaymentUpdate",
    "PromotionCreate",
    "PromotionMessage",
    "PromotionResponse",
    "PromotionUpdate",
    "PromotionValidation",
    "RatingSummary",
    "RatingUpdate",
    "ReadinessResponse",
    "RecordResponse",
    "ReservationCreate",
    "ReservationMessage",
    "ReservationResponse",
    "ReservationUpdate",
    "ReviewCreate",
    "ReviewMessage",
    "ReviewResponse",
    "ReviewUpdate",
    "ServiceReservationCreate",
    "ServiceReservationMessage",
    "ServiceReservationResponse",
    "ServiceReservationUpdate",
    "SlotBlock",
    "SlotRelease",
    "SlotReservation",
    "SlotWindow",
    "SpaceCreate",
    "SpaceMessage",
    "SpaceResponse",
    "SpaceUpdate",
    "SubscribeRequest",
    "TokenResponse",
    "UserCreate",
    "UserMembership",
    "UserMembershipSnapshot",
    "UserMessage",
    "UserResponse",
    "UserUpdate",
    "ValidatePromotionRequest",
]
