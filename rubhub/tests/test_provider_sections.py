"""
Provider section editor tests - whole-list saves and profile reads
"""
from datetime import datetime

import pytest
import pytest_asyncio
from pydantic import ValidationError
from sqlalchemy import func, select

from rubhub.models import Category, Contact, Provider, ProviderCategory, Service, User
from rubhub.services.provider_sections import (
    ServiceIn,
    get_provider_for_user,
    get_provider_profile,
    replace_contacts,
    replace_coupons,
    replace_events,
    replace_locations,
    replace_services,
    update_bio,
)


@pytest_asyncio.fixture()
async def providers(session_factory):
    """Two providers; the second one is only there to prove isolation"""
    async with session_factory() as session:
        user = User(email="jane@example.com", password_hash="x")
        session.add(user)
        await session.flush()

        jane = Provider(slug="jane", name="Jane", user_id=user.id)
        other = Provider(slug="other", name="Other")
        category = Category(name="Swedish", slug="swedish")
        session.add_all([jane, other, category])
        await session.flush()

        session.add(ProviderCategory(provider_id=jane.id, category_id=category.id))
        session.add(Service(provider_id=other.id, name="Untouched", sort_order=0))
        session.add(Contact(provider_id=jane.id, first_name="Old", last_name="Contact"))
        await session.commit()
        return jane.id, other.id, user.id


async def test_replace_services_renumbers_by_position(providers, session_factory):
    jane_id, other_id, _ = providers

    async with session_factory() as session:
        saved = await replace_services(session, jane_id, [
            {"name": " Hot Stone ", "price": 90, "is_special": True},
            ServiceIn(name="Chair Massage", description="  "),
            {"name": "Deep Tissue", "price": "75.5"},
        ])
    assert saved == 3

    async with session_factory() as session:
        profile = await get_provider_profile(session, "jane")
        other_services = (await session.execute(
            select(Service).where(Service.provider_id == other_id)
        )).scalars().all()

    assert [(s.name, s.sort_order) for s in profile.services] == [
        ("Hot Stone", 0), ("Chair Massage", 1), ("Deep Tissue", 2),
    ]
    assert profile.services[0].is_special is True
    assert profile.services[1].description is None
    assert profile.services[2].price == pytest.approx(75.5)
    assert [s.name for s in other_services] == ["Untouched"]


async def test_replace_replaces_whole_section(providers, session_factory):
    jane_id, _, _ = providers

    async with session_factory() as session:
        await replace_contacts(session, jane_id, [
            {"first_name": "Jane", "last_name": "Doe", "email": " jane@example.com ", "is_public": False},
        ])

    async with session_factory() as session:
        contacts = (await session.execute(
            select(Contact).where(Contact.provider_id == jane_id)
        )).scalars().all()

    assert [(c.first_name, c.last_name, c.email, c.is_public) for c in contacts] == [
        ("Jane", "Doe", "jane@example.com", False),
    ]


async def test_empty_list_clears_section(providers, session_factory):
    jane_id, _, _ = providers

    async with session_factory() as session:
        assert await replace_contacts(session, jane_id, []) == 0

    async with session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(Contact).where(Contact.provider_id == jane_id)
        )
        assert result.scalar() == 0


async def test_invalid_item_keeps_existing_rows(providers, session_factory):
    jane_id, _, _ = providers

    async with session_factory() as session:
        with pytest.raises(ValidationError):
            await replace_events(session, jane_id, [{"name": "No start date"}])
        with pytest.raises(ValidationError):
            await replace_contacts(session, jane_id, [{"first_name": "A", "is_public": "maybe"}])

    async with session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(Contact).where(Contact.provider_id == jane_id)
        )
        assert result.scalar() == 1


async def test_replace_locations_events_coupons(providers, session_factory):
    jane_id, _, _ = providers

    async with session_factory() as session:
        await replace_locations(session, jane_id, [
            {"address1": "1 Main St", "city": "Eureka", "state": "CA", "zip": "95501"},
        ])
        await replace_events(session, jane_id, [
            {"name": "Late", "start_date": "2022-03-01T10:00:00"},
            {"name": "Early", "start_date": datetime(2022, 1, 1)},
        ])
        await replace_coupons(session, jane_id, [
            {"name": "First", "promo_code": " NEW "},
            {"name": "Second", "first_time_only": True},
        ])

    async with session_factory() as session:
        profile = await get_provider_profile(session, "jane")

    assert profile.locations[0].country == "US"
    assert [e.name for e in profile.events] == ["Early", "Late"]
    assert [(c.name, c.sort_order) for c in profile.coupons] == [("First", 0), ("Second", 1)]
    assert profile.coupons[0].promo_code == "NEW"
    assert [link.category.slug for link in profile.categories] == ["swedish"]


async def test_update_bio(providers, session_factory):
    jane_id, _, _ = providers

    async with session_factory() as session:
        await update_bio(session, jane_id, " Jane Doe, LMT ", "  ")

    async with session_factory() as session:
        provider = await session.get(Provider, jane_id)

    assert provider.name == "Jane Doe, LMT"
    assert provider.bio is None


async def test_update_bio_errors(providers, session_factory):
    jane_id, _, _ = providers

    async with session_factory() as session:
        with pytest.raises(ValueError, match="Name is required"):
            await update_bio(session, jane_id, "   ", "bio")
        with pytest.raises(LookupError):
            await update_bio(session, 12345, "Someone", None)


async def test_lookups(providers, session_factory):
    jane_id, _, user_id = providers

    async with session_factory() as session:
        assert (await get_provider_for_user(session, user_id)).id == jane_id
        assert await get_provider_for_user(session, 999) is None
        assert await get_provider_profile(session, "missing") is None
