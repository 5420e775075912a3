"""Data models for the CleanConnect marketplace."""

# Import SQLAlchemy ORM models to register them with Base.metadata
# This ensures all tables are known when create_tables() is called
from cleanconnect.models.booking import (  # noqa: F401
    BookingDB,
    BookingStatus,
    BookingView,
    PaymentMethod,
    PaymentStatus,
    Receipt,
    ReviewDB,
    ReviewView,
)
from cleanconnect.models.chat import ChatDB, ChatView, MessageDB, MessageView  # noqa: F401
from cleanconnect.models.job import JobApplicationDB, JobDB, JobStatus, JobView  # noqa: F401
from cleanconnect.models.support import (  # noqa: F401
    SupportTicketDB,
    TicketCategory,
    TicketStatus,
    TicketView,
)
from cleanconnect.models.user import (  # noqa: F401
    AdminRole,
    CleanerCard,
    SubscriptionTier,
    UserDB,
    UserProfile,
    UserRole,
)

__all__ = [
    # Users
    "UserDB",
    "UserRole",
    "AdminRole",
    "SubscriptionTier",
    "UserProfile",
    "CleanerCard",
    # Bookings and reviews
    "BookingDB",
    "BookingStatus",
    "BookingView",
    "PaymentMethod",
    "PaymentStatus",
    "Receipt",
    "ReviewDB",
    "ReviewView",
    # Chat
    "ChatDB",
    "ChatView",
    "MessageDB",
    "MessageView",
    # Job board
    "JobDB",
    "JobApplicationDB",
    "JobStatus",
    "JobView",
    # Support
    "SupportTicketDB",
    "TicketCategory",
    "TicketStatus",
    "TicketView",
]
