"""
Post-run checks on the target store.

Verifies that every child row points at a row that exists and that slugs are
unique per entity type.
"""
from typing import Dict, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rubhub.models import (
    Category,
    Contact,
    Coupon,
    Event,
    Location,
    Photo,
    Provider,
    ProviderCategory,
    ProviderSpecialty,
    Review,
    Service,
    Specialty,
)

# (label, child column, parent id column)
REFERENCES = (
    ("contacts.provider_id", Contact.provider_id, Provider.id),
    ("locations.provider_id", Location.provider_id, Provider.id),
    ("services.provider_id", Service.provider_id, Provider.id),
    ("photos.provider_id", Photo.provider_id, Provider.id),
    ("events.provider_id", Event.provider_id, Provider.id),
    ("coupons.provider_id", Coupon.provider_id, Provider.id),
    ("reviews.provider_id", Review.provider_id, Provider.id),
    ("provider_categories.provider_id", ProviderCategory.provider_id, Provider.id),
    ("provider_categories.category_id", ProviderCategory.category_id, Category.id),
    ("provider_specialties.provider_id", ProviderSpecialty.provider_id, Provider.id),
    ("provider_specialties.specialty_id", ProviderSpecialty.specialty_id, Specialty.id),
)

SLUGGED = (Category, Specialty, Provider)


async def count_orphans(session: AsyncSession) -> Dict[str, int]:
    """Rows per reference whose parent does not exist"""
    orphans = {}
    for label, child_column, parent_column in REFERENCES:
        result = await session.execute(
            select(func.count())
            .select_from(child_column.table)
            .outerjoin(parent_column.table, child_column == parent_column)
            .where(parent_column.is_(None))
        )
        orphans[label] = result.scalar()
    return orphans


async def find_duplicate_slugs(session: AsyncSession) -> Dict[str, List[str]]:
    """Slugs used more than once, per table"""
    duplicates = {}
    for model in SLUGGED:
        result = await session.execute(
            select(model.slug)
            .group_by(model.slug)
            .having(func.count(model.id) > 1)
        )
        slugs = [row[0] for row in result.all()]
        if slugs:
            duplicates[model.__tablename__] = slugs
    return duplicates


async def validate(session: AsyncSession) -> List[str]:
    """Human-readable problems; empty when the target store is sound"""
    problems = []

    for label, count in (await count_orphans(session)).items():
        if count:
            problems.append(f"{count} rows in {label} point at missing rows")

    for table, slugs in (await find_duplicate_slugs(session)).items():
        problems.append(f"{table} has duplicate slugs: {', '.join(slugs)}")

    return problems
