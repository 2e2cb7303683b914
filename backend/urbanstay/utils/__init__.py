"""Utils package initialization."""

from urbanstay.utils.logging import AuditLogger, get_logger, setup_logging
from urbanstay.utils.security import (
    create_access_token,
    decode_access_token,
    ensure_owner_or_admin,
    get_current_user,
    get_password_hash,
    require_admin,
    require_role,
    require_seller,
    verify_password,
)
from urbanstay.utils.transitions import (
    BOOKING_TRANSITIONS,
    INQUIRY_TRANSITIONS,
    PROPERTY_TRANSITIONS,
    REVIEW_TRANSITIONS,
    can_transition,
    ensure_transition,
)

__all__ = [
    # Security
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "require_role",
    "require_admin",
    "require_seller",
    "ensure_owner_or_admin",
    # Transitions
    "INQUIRY_TRANSITIONS",
    "BOOKING_TRANSITIONS",
    "PROPERTY_TRANSITIONS",
    "REVIEW_TRANSITIONS",
    "can_transition",
    "ensure_transition",
    # Logging
    "get_logger",
    "setup_logging",
    "AuditLogger",
]
