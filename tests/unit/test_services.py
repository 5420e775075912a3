"""Unit tests for service-layer rules with a mocked database session."""

import uuid
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.errors import AccessDenied, Conflict, NotFound, ValidationFailed
from cleanconnect.models.booking import BookingDB, ReviewRequest
from cleanconnect.models.user import ProfileUpdate, SearchCriteria, UserDB
from cleanconnect.services.admin_service import AdminService
from cleanconnect.services.booking_service import BookingService
from cleanconnect.services.chat_service import ChatService
from cleanconnect.services.cleaner_service import build_card, matches_criteria, matches_filters
from cleanconnect.services.user_service import apply_partial_update


@pytest.fixture
def mock_db_session() -> AsyncSession:
    """Provide a mocked database session for testing."""
    session = MagicMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.get = AsyncMock()
    return session


def make_cleaner(**fields) -> UserDB:
    defaults = {
        "id": uuid.uuid4(),
        "email": "cleaner@test.ng",
        "role": "cleaner",
        "full_name": "Ada Cleaner",
        "state": "Lagos",
        "city": "Ikeja",
        "other_city": None,
        "services": ["Deep Cleaning", "Laundry"],
        "charge_hourly": 5000.0,
        "charge_daily": 30000.0,
        "subscription_tier": "Free",
        "business_reg_doc": None,
    }
    defaults.update(fields)
    return UserDB(**defaults)


def make_booking(client_id: uuid.UUID, cleaner_id: uuid.UUID, **fields) -> BookingDB:
    defaults = {
        "id": uuid.uuid4(),
        "client_id": client_id,
        "cleaner_id": cleaner_id,
        "service": "Deep Cleaning",
        "amount": 10000.0,
        "status": "Upcoming",
        "payment_method": "Escrow",
        "payment_status": "Pending Payment",
        "job_approved_by_client": False,
        "review_submitted": False,
    }
    defaults.update(fields)
    return BookingDB(**defaults)


@pytest.mark.unit
class TestCleanerFilters:
    """Unit tests for directory filters and search matching."""

    def test_city_matches_other_city(self) -> None:
        cleaner = make_cleaner(city="Ikeja", other_city="Lekki")

        assert matches_filters(cleaner, city="lekki")
        assert matches_filters(cleaner, state="LAGOS", city="Ikeja")
        assert not matches_filters(cleaner, city="Yaba")

    def test_service_filter(self) -> None:
        cleaner = make_cleaner()

        assert matches_filters(cleaner, service="laundry")
        assert not matches_filters(cleaner, service="Fumigation")

    def test_search_location_is_substring_of_any_place(self) -> None:
        cleaner = make_cleaner(state="Federal Capital Territory", city="Abuja")

        assert matches_criteria(cleaner, SearchCriteria(location="capital"))
        assert not matches_criteria(cleaner, SearchCriteria(location="Kano"))

    def test_search_max_price_against_hourly_or_daily(self) -> None:
        cleaner = make_cleaner(charge_hourly=None, charge_daily=20000.0)

        assert matches_criteria(cleaner, SearchCriteria(max_price=25000))
        assert not matches_criteria(cleaner, SearchCriteria(max_price=10000))

    def test_card_defaults_without_reviews(self) -> None:
        """Test that an unreviewed cleaner is shown with 5.0 stars."""
        card = build_card(make_cleaner(services=None), [], 0, None)

        assert card.rating == 5.0
        assert card.reviews == 0
        assert card.service_types == []
        assert card.is_verified is False

    def test_card_rounds_average(self) -> None:
        card = build_card(make_cleaner(business_reg_doc="doc"), [], 3, 4.333333)

        assert card.rating == 4.3
        assert card.reviews == 3
        assert card.is_verified is True


@pytest.mark.unit
class TestPartialUpdate:
    """Unit tests for COALESCE-style profile updates."""

    def test_only_provided_fields_change(self) -> None:
        user = make_cleaner(bio="Old bio", phone_number="0800")

        changed = apply_partial_update(user, ProfileUpdate(bio="New bio", phone_number=None))

        assert changed == ["bio"]
        assert user.bio == "New bio"
        assert user.phone_number == "0800"

    def test_camel_case_input_is_accepted(self) -> None:
        user = make_cleaner()

        apply_partial_update(user, ProfileUpdate.model_validate({"chargeHourly": 7500, "otherCity": "Yaba"}))

        assert user.charge_hourly == 7500
        assert user.other_city == "Yaba"


@pytest.mark.unit
class TestBookingRules:
    """Unit tests for booking ownership and state transitions."""

    @pytest.mark.asyncio
    async def test_missing_booking_is_not_found(self, mock_db_session: AsyncSession) -> None:
        mock_db_session.get.return_value = None

        with pytest.raises(NotFound):
            await BookingService(mock_db_session).cancel_booking(uuid.uuid4(), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_stranger_cannot_cancel(self, mock_db_session: AsyncSession) -> None:
        """Test that only the client or cleaner may cancel."""
        mock_db_session.get.return_value = make_booking(uuid.uuid4(), uuid.uuid4())

        with pytest.raises(AccessDenied):
            await BookingService(mock_db_session).cancel_booking(uuid.uuid4(), uuid.uuid4())

        mock_db_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_cleaner_can_cancel(self, mock_db_session: AsyncSession) -> None:
        cleaner_id = uuid.uuid4()
        booking = make_booking(uuid.uuid4(), cleaner_id)
        mock_db_session.get.return_value = booking

        view = await BookingService(mock_db_session).cancel_booking(booking.id, cleaner_id)

        assert view.status == "Cancelled"
        mock_db_session.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_cleaner_cannot_complete(self, mock_db_session: AsyncSession) -> None:
        """Test that completion is reserved for the booking's client."""
        cleaner_id = uuid.uuid4()
        mock_db_session.get.return_value = make_booking(uuid.uuid4(), cleaner_id)

        with pytest.raises(AccessDenied):
            await BookingService(mock_db_session).complete_booking(uuid.uuid4(), cleaner_id)

    @pytest.mark.asyncio
    async def test_complete_confirmed_escrow_moves_to_payout(self, mock_db_session: AsyncSession) -> None:
        client_id = uuid.uuid4()
        booking = make_booking(client_id, uuid.uuid4(), payment_status="Confirmed")
        mock_db_session.get.return_value = booking

        view = await BookingService(mock_db_session).complete_booking(booking.id, client_id)

        assert view.status == "Completed"
        assert view.job_approved_by_client is True
        assert view.payment_status == "Pending Payout"

    @pytest.mark.asyncio
    async def test_complete_direct_booking_keeps_payment_status(self, mock_db_session: AsyncSession) -> None:
        client_id = uuid.uuid4()
        booking = make_booking(
            client_id, uuid.uuid4(), payment_method="Direct", payment_status="Not Applicable"
        )
        mock_db_session.get.return_value = booking

        view = await BookingService(mock_db_session).complete_booking(booking.id, client_id)

        assert view.payment_status == "Not Applicable"

    @pytest.mark.asyncio
    async def test_second_review_is_rejected(self, mock_db_session: AsyncSession) -> None:
        client_id = uuid.uuid4()
        booking = make_booking(client_id, uuid.uuid4(), review_submitted=True)
        mock_db_session.get.return_value = booking

        with pytest.raises(Conflict):
            await BookingService(mock_db_session).submit_review(
                booking.id, client_id, ReviewRequest(rating=4)
            )

        mock_db_session.add.assert_not_called()


@pytest.mark.unit
class TestAdminRules:
    """Unit tests for admin-only account rules."""

    @pytest.mark.asyncio
    async def test_super_admin_cannot_be_deleted(self, mock_db_session: AsyncSession) -> None:
        mock_db_session.get.return_value = UserDB(
            id=uuid.uuid4(), email="super@cleanconnect.ng", role="admin", is_admin=True, admin_role="Super"
        )

        with pytest.raises(AccessDenied):
            await AdminService(mock_db_session).delete_user(uuid.uuid4())

        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_approve_without_pending_plan(self, mock_db_session: AsyncSession) -> None:
        mock_db_session.get.return_value = make_cleaner(pending_subscription=None)

        with pytest.raises(ValidationFailed, match="No pending subscription"):
            await AdminService(mock_db_session).approve_subscription(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_approve_sets_tier_and_thirty_day_term(self, mock_db_session: AsyncSession) -> None:
        cleaner = make_cleaner(pending_subscription="Pro", subscription_receipt={"name": "r.png"})
        mock_db_session.get.return_value = cleaner
        service = AdminService(mock_db_session)
        service.users.get_profile = AsyncMock()

        await service.approve_subscription(cleaner.id, today=date(2026, 10, 19))

        assert cleaner.subscription_tier == "Pro"
        assert cleaner.pending_subscription is None
        assert cleaner.subscription_receipt is None
        assert cleaner.subscription_end_date == date(2026, 11, 18)


@pytest.mark.unit
class TestChatRules:
    """Unit tests for chat preconditions."""

    @pytest.mark.asyncio
    async def test_cannot_chat_with_self(self, mock_db_session: AsyncSession) -> None:
        user_id = uuid.uuid4()

        with pytest.raises(ValidationFailed):
            await ChatService(mock_db_session).open_chat(user_id, user_id)

    @pytest.mark.asyncio
    async def test_unknown_participant(self, mock_db_session: AsyncSession) -> None:
        mock_db_session.get.return_value = None

        with pytest.raises(NotFound):
            await ChatService(mock_db_session).open_chat(uuid.uuid4(), uuid.uuid4())
