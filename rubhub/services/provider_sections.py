"""
Provider profile reads and per-section writes used by the live application.

Each section editor saves the whole list: the provider's existing rows for
that section are deleted and the submitted rows inserted in one transaction.
Services and coupons are renumbered from their list position on save.
"""
from datetime import datetime
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rubhub.migration.transforms import clean_text
from rubhub.models import (
    Contact,
    Coupon,
    Event,
    Location,
    Provider,
    ProviderCategory,
    ProviderSpecialty,
    Service,
)


# --- Pydantic Schemas ---

class ContactIn(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    is_public: bool = True


class LocationIn(BaseModel):
    name: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    hidden: bool = False


class ServiceIn(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    is_special: bool = False


class EventIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    city: Optional[str] = None
    state: Optional[str] = None
    hidden: bool = False


class CouponIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    small_print: Optional[str] = None
    promo_code: Optional[str] = None
    expiration_date: Optional[datetime] = None
    first_time_only: bool = False
    appointment_only: bool = False
    hidden: bool = False


def _validate(schema, items: Iterable[Any]) -> List[BaseModel]:
    return [item if isinstance(item, schema) else schema.model_validate(item) for item in items]


def _text(value: Optional[str]) -> str:
    return (value or "").strip()


# --- Reads ---

async def get_provider_profile(session: AsyncSession, slug: str) -> Optional[Provider]:
    """Provider with every profile section loaded"""
    result = await session.execute(
        select(Provider)
        .where(Provider.slug == slug)
        .options(
            selectinload(Provider.contacts),
            selectinload(Provider.locations),
            selectinload(Provider.services),
            selectinload(Provider.photos),
            selectinload(Provider.events),
            selectinload(Provider.coupons),
            selectinload(Provider.reviews),
            selectinload(Provider.categories).selectinload(ProviderCategory.category),
            selectinload(Provider.specialties).selectinload(ProviderSpecialty.specialty),
        )
    )
    return result.scalar_one_or_none()


async def get_provider_for_user(session: AsyncSession, user_id: int) -> Optional[Provider]:
    result = await session.execute(select(Provider).where(Provider.user_id == user_id))
    return result.scalar_one_or_none()


# --- Writes ---

async def update_bio(
    session: AsyncSession, provider_id: int, name: Optional[str], bio: Optional[str]
) -> Provider:
    """Update the provider's display name and bio"""
    name = clean_text(name)
    if not name:
        raise ValueError("Name is required.")

    provider = await session.get(Provider, provider_id)
    if provider is None:
        raise LookupError(f"No provider profile found for id {provider_id}")

    provider.name = name
    provider.bio = clean_text(bio)
    await session.commit()
    return provider


async def _replace_section(session: AsyncSession, provider_id: int, model, records: List[Any]) -> int:
    try:
        await session.execute(delete(model).where(model.provider_id == provider_id))
        session.add_all(records)
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    return len(records)


async def replace_contacts(session: AsyncSession, provider_id: int, items: Iterable[Any]) -> int:
    contacts = _validate(ContactIn, items)
    records = [
        Contact(
            provider_id=provider_id,
            first_name=_text(c.first_name),
            last_name=_text(c.last_name),
            email=clean_text(c.email),
            phone=clean_text(c.phone),
            is_public=c.is_public,
        )
        for c in contacts
    ]
    return await _replace_section(session, provider_id, Contact, records)


async def replace_locations(session: AsyncSession, provider_id: int, items: Iterable[Any]) -> int:
    locations = _validate(LocationIn, items)
    records = [
        Location(
            provider_id=provider_id,
            name=clean_text(loc.name),
            address1=_text(loc.address1),
            address2=clean_text(loc.address2),
            city=_text(loc.city),
            state=_text(loc.state),
            zip=_text(loc.zip),
            country=clean_text(loc.country) or "US",
            hidden=loc.hidden,
        )
        for loc in locations
    ]
    return await _replace_section(session, provider_id, Location, records)


async def replace_services(session: AsyncSession, provider_id: int, items: Iterable[Any]) -> int:
    services = _validate(ServiceIn, items)
    records = [
        Service(
            provider_id=provider_id,
            name=_text(s.name),
            type=clean_text(s.type),
            price=s.price,
            description=clean_text(s.description),
            is_special=s.is_special,
            sort_order=position,
        )
        for position, s in enumerate(services)
    ]
    return await _replace_section(session, provider_id, Service, records)


async def replace_events(session: AsyncSession, provider_id: int, items: Iterable[Any]) -> int:
    events = _validate(EventIn, items)
    records = [
        Event(
            provider_id=provider_id,
            name=_text(e.name),
            description=clean_text(e.description),
            start_date=e.start_date,
            end_date=e.end_date,
            city=clean_text(e.city),
            state=clean_text(e.state),
            hidden=e.hidden,
        )
        for e in events
    ]
    return await _replace_section(session, provider_id, Event, records)


async def replace_coupons(session: AsyncSession, provider_id: int, items: Iterable[Any]) -> int:
    coupons = _validate(CouponIn, items)
    records = [
        Coupon(
            provider_id=provider_id,
            name=_text(c.name),
            description=clean_text(c.description),
            small_print=clean_text(c.small_print),
            promo_code=clean_text(c.promo_code),
            expiration_date=c.expiration_date,
            first_time_only=c.first_time_only,
            appointment_only=c.appointment_only,
            hidden=c.hidden,
            sort_order=position,
        )
        for position, c in enumerate(coupons)
    ]
    return await _replace_section(session, provider_id, Coupon, records)
