"""
Post-run validation tests
"""
from rubhub.migration.validation import count_orphans, find_duplicate_slugs, validate
from rubhub.models import Category, Contact, Provider, ProviderCategory


async def test_clean_store_has_no_problems(db_session):
    provider = Provider(slug="jane", name="Jane")
    category = Category(name="Swedish", slug="swedish")
    db_session.add_all([provider, category])
    await db_session.flush()
    db_session.add(ProviderCategory(provider_id=provider.id, category_id=category.id))
    db_session.add(Contact(provider_id=provider.id, first_name="Jane"))
    await db_session.commit()

    assert await validate(db_session) == []


async def test_orphan_rows_are_reported(db_session):
    # SQLite leaves foreign keys unenforced on a fresh connection
    db_session.add(Contact(provider_id=999, first_name="Nobody"))
    db_session.add(ProviderCategory(provider_id=999, category_id=998))
    await db_session.commit()

    orphans = await count_orphans(db_session)
    assert orphans["contacts.provider_id"] == 1
    assert orphans["provider_categories.provider_id"] == 1
    assert orphans["provider_categories.category_id"] == 1
    assert orphans["locations.provider_id"] == 0

    problems = await validate(db_session)
    assert "1 rows in contacts.provider_id point at missing rows" in problems
    assert len(problems) == 3


async def test_unique_slugs_report_nothing(db_session):
    db_session.add_all([Category(name="A", slug="a"), Category(name="B", slug="b")])
    await db_session.commit()

    assert await find_duplicate_slugs(db_session) == {}
