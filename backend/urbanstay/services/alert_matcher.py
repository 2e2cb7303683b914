"""Evaluate saved alerts against live inventory."""

import json
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from urbanstay.config import settings
from urbanstay.models.alert import Alert
from urbanstay.models.property import Property, PropertyStatus
from urbanstay.services.filters import PropertyCriteria, SortKey, criteria_from_storage
from urbanstay.services.property_search import build_conditions, order_clauses
from urbanstay.utils.logging import get_logger

logger = get_logger("services.alert_matcher")


def alert_criteria(alert: Alert) -> PropertyCriteria:
    return criteria_from_storage(json.loads(alert.criteria) if alert.criteria else {})


async def find_matching_properties(
    db: AsyncSession,
    alert: Alert,
    limit: Optional[int] = None,
) -> List[Property]:
    """Available properties matching ``alert``, newest first.

    Uses the same condition builder as the public search so an alert and
    a search with the same criteria return the same listings.
    """
    limit = limit or settings.alert_match_limit
    criteria = alert_criteria(alert)

    conditions = build_conditions(criteria)
    conditions.append(Property.status == PropertyStatus.AVAILABLE.value)

    query = (
        select(Property)
        .options(selectinload(Property.owner))
        .where(and_(*conditions))
        .order_by(*order_clauses(SortKey.NEWEST))
        .limit(limit)
    )
    result = await db.execute(query)
    properties = list(result.scalars().all())

    alert.last_matched_at = datetime.now(timezone.utc)

    logger.info(
        "alert_matched",
        alert_id=alert.id,
        user_id=alert.user_id,
        matches=len(properties),
    )
    return properties
