"""Public cleaner directory: listings, profile pages and AI-assisted search."""

import uuid
from collections import defaultdict

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.errors import NotFound
from cleanconnect.models.booking import ReviewDB, ReviewView
from cleanconnect.models.user import TIER_RANK, CleanerCard, SearchCriteria, UserDB, UserRole

logger = structlog.get_logger(__name__)

DEFAULT_RATING = 5.0
RECENT_REVIEW_LIMIT = 3


def build_card(cleaner: UserDB, reviews: list[ReviewDB], review_count: int, average: float | None) -> CleanerCard:
    """Assemble the public card for a cleaner.

    Args:
        cleaner: Cleaner row
        reviews: Reviews to embed, newest first
        review_count: Total number of reviews received
        average: Mean rating, or None when there are no reviews
    """
    rating = round(average, 1) if average is not None else DEFAULT_RATING
    return CleanerCard(
        id=cleaner.id,
        name=cleaner.full_name,
        photo_url=cleaner.profile_photo,
        rating=rating,
        reviews=review_count,
        service_types=cleaner.services or [],
        state=cleaner.state,
        city=cleaner.city,
        other_city=cleaner.other_city,
        experience=cleaner.experience,
        bio=cleaner.bio,
        is_verified=bool(cleaner.business_reg_doc),
        charge_hourly=cleaner.charge_hourly,
        charge_daily=cleaner.charge_daily,
        charge_per_contract=cleaner.charge_per_contract,
        charge_per_contract_negotiable=cleaner.charge_per_contract_negotiable,
        subscription_tier=cleaner.subscription_tier,
        cleaner_type=cleaner.cleaner_type,
        reviews_data=[ReviewView.model_validate(r) for r in reviews],
    )


def _matches(value: str | None, needle: str) -> bool:
    return bool(value) and needle in value.lower()


def matches_filters(
    cleaner: UserDB,
    state: str | None = None,
    city: str | None = None,
    service: str | None = None,
) -> bool:
    """Directory filters: exact state, city against city or other city, service name."""
    if state and (cleaner.state or "").lower() != state.lower():
        return False
    if city:
        wanted = city.lower()
        if (cleaner.city or "").lower() != wanted and (cleaner.other_city or "").lower() != wanted:
            return False
    if service:
        wanted = service.lower()
        if not any(wanted in s.lower() for s in cleaner.services or []):
            return False
    return True


def matches_criteria(cleaner: UserDB, criteria: SearchCriteria) -> bool:
    """Looser substring matching used for free-text search results."""
    if criteria.location:
        needle = criteria.location.lower()
        if not any(_matches(v, needle) for v in (cleaner.city, cleaner.state, cleaner.other_city)):
            return False
    if criteria.service:
        needle = criteria.service.lower()
        if not any(needle in s.lower() for s in cleaner.services or []):
            return False
    if criteria.max_price:
        charges = [c for c in (cleaner.charge_hourly, cleaner.charge_daily) if c is not None]
        if not any(c <= criteria.max_price for c in charges):
            return False
    return True


class CleanerService:
    """Read-only queries over cleaner accounts and their reviews."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def _active_cleaners(self) -> list[UserDB]:
        query = select(UserDB).where(
            UserDB.role == UserRole.CLEANER.value,
            UserDB.is_suspended.is_(False),
        )
        result = await self.db_session.execute(query)
        return list(result.scalars().all())

    async def _rating_stats(self, cleaner_ids: list[uuid.UUID]) -> dict[uuid.UUID, tuple[int, float]]:
        """Review count and average rating per cleaner."""
        if not cleaner_ids:
            return {}
        query = (
            select(ReviewDB.cleaner_id, func.count(ReviewDB.id), func.avg(ReviewDB.rating))
            .where(ReviewDB.cleaner_id.in_(cleaner_ids))
            .group_by(ReviewDB.cleaner_id)
        )
        result = await self.db_session.execute(query)
        return {row[0]: (int(row[1]), float(row[2])) for row in result.all()}

    async def _reviews_by_cleaner(self, cleaner_ids: list[uuid.UUID]) -> dict[uuid.UUID, list[ReviewDB]]:
        grouped: dict[uuid.UUID, list[ReviewDB]] = defaultdict(list)
        if not cleaner_ids:
            return grouped
        query = (
            select(ReviewDB)
            .where(ReviewDB.cleaner_id.in_(cleaner_ids))
            .order_by(ReviewDB.created_at.desc())
        )
        result = await self.db_session.execute(query)
        for review in result.scalars().all():
            grouped[review.cleaner_id].append(review)
        return grouped

    async def list_cleaners(
        self,
        state: str | None = None,
        city: str | None = None,
        service: str | None = None,
    ) -> list[CleanerCard]:
        """List non-suspended cleaners, best tier and rating first.

        Args:
            state: Only cleaners in this state
            city: Only cleaners whose city or other city matches
            service: Only cleaners offering this service

        Returns:
            Cleaner cards with the three most recent reviews each
        """
        cleaners = [
            c for c in await self._active_cleaners() if matches_filters(c, state, city, service)
        ]
        ids = [c.id for c in cleaners]
        stats = await self._rating_stats(ids)
        reviews = await self._reviews_by_cleaner(ids)

        cards = []
        for cleaner in cleaners:
            count, average = stats.get(cleaner.id, (0, None))
            cards.append(
                build_card(cleaner, reviews[cleaner.id][:RECENT_REVIEW_LIMIT], count, average)
            )

        cards.sort(
            key=lambda card: (TIER_RANK.get(card.subscription_tier, 0), card.rating),
            reverse=True,
        )
        return cards

    async def get_cleaner(self, cleaner_id: uuid.UUID) -> CleanerCard:
        """Get one cleaner with every review they have received.

        Raises:
            NotFound: If the id does not belong to a cleaner
        """
        cleaner = await self.db_session.get(UserDB, cleaner_id)
        if cleaner is None or cleaner.role != UserRole.CLEANER.value:
            raise NotFound("Cleaner not found")

        stats = await self._rating_stats([cleaner.id])
        reviews = await self._reviews_by_cleaner([cleaner.id])
        count, average = stats.get(cleaner.id, (0, None))
        return build_card(cleaner, reviews[cleaner.id], count, average)

    async def search(self, criteria: SearchCriteria) -> list[uuid.UUID]:
        """Ids of non-suspended cleaners matching extracted search criteria."""
        matching = [c.id for c in await self._active_cleaners() if matches_criteria(c, criteria)]
        logger.info("cleaner_search_completed", matches=len(matching))
        return matching
