"""Application services: auth, reviews (rating hook), memberships, promotions."""

from app.application.services.auth_service import AuthService
from app.application.services.membership_service import MembershipService
from app.application.services.promotion_service import PromotionService
from app.application.services.review_service import ReviewService

__all__ = [
    "AuthService",
    "MembershipService",
    "PromotionService",
    "ReviewService",
]
