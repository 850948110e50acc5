from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.exceptions import InvalidInputError
from academic_reporting.core.models import Venue

from .schemas import VenueCreate, VenueResponse


async def list_venues(db: AsyncSession) -> List[VenueResponse]:
    result = await db.execute(select(Venue).order_by(Venue.name))
    return [VenueResponse.model_validate(v) for v in result.scalars().all()]


async def create_venue(db: AsyncSession, current_user: CurrentUser, payload: VenueCreate) -> VenueResponse:
    async with audit_trail(db, current_user.id, "Create Venue", "Failed to create venue"):
        if not payload.name or len(payload.name) > 100:
            raise InvalidInputError(
                "Venue name is required and must be 100 characters or less",
                audit_details="Invalid or missing name",
            )
        venue = Venue(name=payload.name, capacity=payload.capacity)
        db.add(venue)
        await db.commit()
        response = VenueResponse.model_validate(venue)

    await log_action(db, current_user.id, "Create Venue", f"Venue created: {payload.name}")
    return response
