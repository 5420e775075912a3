"""Business logic services for the CleanConnect marketplace."""

from cleanconnect.services.admin_service import AdminService
from cleanconnect.services.booking_service import BookingService
from cleanconnect.services.chat_service import ChatService
from cleanconnect.services.cleaner_service import CleanerService
from cleanconnect.services.database import DatabaseManager, get_db_session
from cleanconnect.services.job_service import JobService
from cleanconnect.services.support_service import SupportService
from cleanconnect.services.user_service import UserService

__all__ = [
    "AdminService",
    "BookingService",
    "ChatService",
    "CleanerService",
    "DatabaseManager",
    "JobService",
    "SupportService",
    "UserService",
    "get_db_session",
]
