"""Standard control catalog administration and profile filtering."""

import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from controlgap.catalog import STANDARD_CONTROLS
from controlgap.db.models import StandardControlDB
from controlgap.db.repositories import StandardControlRepository
from controlgap.engine.applicability import applies
from controlgap.models.controls import StandardControlSpec
from controlgap.models.profile import ProfileTag
from controlgap.models.rules import OrgFlag
from controlgap.services.base import storage_errors

logger = logging.getLogger(__name__)


@storage_errors
async def list_catalog(
    session: AsyncSession,
    domain_tag: str | None = None,
) -> list[StandardControlDB]:
    """List the full catalog."""
    return await StandardControlRepository(session).list_all(domain_tag)


@storage_errors
async def list_applicable(
    session: AsyncSession,
    profile: Iterable[ProfileTag],
    org_flags: Iterable[OrgFlag] = (),
) -> list[StandardControlDB]:
    """List catalog entries whose applicability rule matches the profile and flags."""
    profile = set(profile)
    org_flags = set(org_flags)
    controls = await StandardControlRepository(session).list_all()
    return [c for c in controls if applies(c.to_spec().rule, profile, org_flags)]


@storage_errors
async def create_standard_control(
    session: AsyncSession,
    spec: StandardControlSpec,
) -> StandardControlDB:
    """Add an entry to the catalog."""
    control = await StandardControlRepository(session).create(spec)
    logger.info("Added standard control %s (%s)", control.control_name, control.id)
    return control


@storage_errors
async def seed_catalog(
    session: AsyncSession,
    controls: Iterable[StandardControlSpec] = STANDARD_CONTROLS,
) -> int:
    """Load catalog entries, skipping names already present.

    Returns:
        Number of entries added.
    """
    repo = StandardControlRepository(session)
    added = 0
    for spec in controls:
        if await repo.get_by_name(spec.control_name) is None:
            await repo.create(spec)
            added += 1
    logger.info("Seeded %d standard controls", added)
    return added
