"""Service layer entrypoints for domain logic."""

from .assignment_service import AssignmentResult, AssignmentService
from .availability_service import AvailabilityResult, AvailabilityService
from .background import Defer, run_inline
from .pricing_service import PricingService, StayQuote
from .projection_service import ProjectionService, update_projection
from .prompt_service import PricingPromptService, refresh_pricing_block
from .reservation_service import ReservationService
from .tools_service import ToolService

__all__ = [
    "AssignmentResult",
    "AssignmentService",
    "AvailabilityResult",
    "AvailabilityService",
    "Defer",
    "PricingPromptService",
    "PricingService",
    "ProjectionService",
    "ReservationService",
    "StayQuote",
    "ToolService",
    "refresh_pricing_block",
    "run_inline",
    "update_projection",
]
