"""
Legacy Migration: Rub Hub legacy listing schema -> provider directory schema

Migrates the legacy directory into the application database:
- Categories and specialties (taxonomies)
- Providers, plus a user account for every listing with an email
- Provider <-> category / specialty links
- Contacts, locations (with a fallback from the listing address),
  services, photos, events, coupons and reviews

The target tables are wiped first, so re-running gives the same result.
Rows that cannot be migrated are skipped and reported; only connection and
configuration problems stop the run.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from rubhub.database import Base, make_session_factory
from rubhub.migration.context import RunContext
from rubhub.migration.errors import DuplicateRecordError, RecordInsertError
from rubhub.migration.legacy_reader import LegacyReader, Row
from rubhub.migration.report import print_summary
from rubhub.migration.transforms import (
    SlugRegistry,
    clean_text,
    parse_price,
    strip_html,
    to_datetime,
    yes_no_to_bool,
)
from rubhub.migration.writer import RowWriter
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
    User,
)
from rubhub.utils.db_compat import set_foreign_key_checks
from rubhub.utils.logger import get_logger

logger = get_logger(__name__)

# Children and junctions first, roots last
WIPE_ORDER = (
    ProviderCategory,
    ProviderSpecialty,
    Review,
    Coupon,
    Event,
    Photo,
    Service,
    Location,
    Contact,
    Provider,
    User,
    Category,
    Specialty,
)

PRIVACY_FLAGS = ("email_private", "phone_private", "first_name_private", "last_name_private")


@dataclass(frozen=True)
class Stage:
    """One ordered unit of migration work and the run tables it touches"""
    number: int
    title: str
    handler: str
    reads: FrozenSet[str] = frozenset()
    produces: FrozenSet[str] = frozenset()


STAGES = (
    Stage(1, "Clearing existing data", "wipe_target"),
    Stage(2, "Building lookup maps", "build_lookups",
          produces=frozenset({"states", "countries"})),
    Stage(3, "Migrating categories", "migrate_categories",
          produces=frozenset({"categories"})),
    Stage(4, "Migrating specialties", "migrate_specialties",
          produces=frozenset({"specialties"})),
    Stage(5, "Migrating providers (and users where applicable)", "migrate_providers",
          produces=frozenset({"providers", "listing_addresses"})),
    Stage(6, "Migrating provider-category links", "migrate_provider_categories",
          reads=frozenset({"providers", "categories"})),
    Stage(7, "Migrating provider-specialty links", "migrate_provider_specialties",
          reads=frozenset({"providers", "specialties"})),
    Stage(8, "Migrating contacts", "migrate_contacts",
          reads=frozenset({"providers"})),
    Stage(9, "Migrating locations", "migrate_locations",
          reads=frozenset({"providers", "states", "countries", "listing_addresses"}),
          produces=frozenset({"located_providers"})),
    Stage(10, "Migrating services", "migrate_services",
          reads=frozenset({"providers"})),
    Stage(11, "Migrating photos", "migrate_photos",
          reads=frozenset({"providers"})),
    Stage(12, "Migrating events", "migrate_events",
          reads=frozenset({"providers", "states", "countries"})),
    Stage(13, "Migrating coupons", "migrate_coupons",
          reads=frozenset({"providers"})),
    Stage(14, "Migrating reviews", "migrate_reviews",
          reads=frozenset({"providers"})),
)


def check_stage_order(stages: Iterable[Stage]) -> None:
    """Raise ValueError if a stage reads a table no earlier stage produces"""
    available = set()
    for stage in stages:
        missing = stage.reads - available
        if missing:
            raise ValueError(
                f"Stage {stage.number} ({stage.title}) reads {sorted(missing)} "
                f"before any earlier stage produces it"
            )
        available |= stage.produces


def contact_is_public(row: Row) -> bool:
    """A contact is public only if none of its fields is marked private"""
    return not any(yes_no_to_bool(row.get(flag)) for flag in PRIVACY_FLAGS)


def _coordinate(value: Any) -> Optional[float]:
    """Legacy lat/lng as a float; blank or garbage values become None"""
    if not value:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _sort_order(value: Any) -> int:
    """Legacy sequence as an int; blank or garbage values sort first"""
    if not value:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class LegacyMigration:
    """Runs the ordered migration stages against one legacy/target pair"""

    def __init__(self, reader: LegacyReader, engine: AsyncEngine, stages=STAGES):
        self.reader = reader
        self.engine = engine
        self.session_factory = make_session_factory(engine)
        self.stages = tuple(stages)
        self.ctx = RunContext()

    async def create_tables(self):
        """Create the application tables if they do not exist yet"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def run(self) -> RunContext:
        """Run every stage in order and print the summary"""
        print("=" * 60)
        print("LEGACY MIGRATION: Rub Hub listings -> provider directory")
        print("=" * 60)

        check_stage_order(self.stages)
        await self.create_tables()

        for stage in self.stages:
            print(f"\n{stage.number}. {stage.title}...")
            handler = getattr(self, stage.handler)
            async with self.session_factory() as session:
                await handler(session)

        print_summary(self.ctx)
        return self.ctx

    # Failure bookkeeping

    def _row_failed(self, error: RecordInsertError):
        logger.warning(f"Skipped {error}")
        self.ctx.failures.append(str(error))

    def _warn(self, message: str):
        logger.warning(message)
        self.ctx.warnings.append(message)

    # Stage 1

    async def wipe_target(self, session: AsyncSession):
        """Delete every target row, children before parents"""
        # FOREIGN_KEY_CHECKS is per connection; the target pool holds one connection
        await set_foreign_key_checks(session, False)
        try:
            for model in WIPE_ORDER:
                await session.execute(delete(model))
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await set_foreign_key_checks(session, True)
            await session.commit()
        print(f"   Cleared {len(WIPE_ORDER)} tables")

    # Stage 2

    async def build_lookups(self, session: AsyncSession):
        for row in self.reader.states():
            self.ctx.states[row["id"]] = row["short_name"] or ""
        for row in self.reader.countries():
            self.ctx.countries[row["id"]] = row["short_name"] or "US"
        print(f"   Loaded {len(self.ctx.states)} states, {len(self.ctx.countries)} countries")

    # Stages 3 and 4

    async def migrate_categories(self, session: AsyncSession):
        await self._migrate_taxonomy(
            session, self.reader.categories(), Category,
            self.ctx.category_slugs, self.ctx.categories, "category",
        )
        print(f"   Migrated {self.ctx.stats['categories']} categories")

    async def migrate_specialties(self, session: AsyncSession):
        await self._migrate_taxonomy(
            session, self.reader.specialties(), Specialty,
            self.ctx.specialty_slugs, self.ctx.specialties, "specialty",
        )
        print(f"   Migrated {self.ctx.stats['specialties']} specialties")

    async def _migrate_taxonomy(
        self,
        session: AsyncSession,
        rows: List[Row],
        model,
        slugs: SlugRegistry,
        id_map: Dict[int, int],
        label: str,
    ):
        writer = RowWriter(session)
        counter = "categories" if model is Category else "specialties"

        for row in rows:
            name = clean_text(row["name"])
            if not name:
                continue
            slug = slugs.assign(name, row["id"])

            try:
                created = await writer.insert(
                    model(name=name, slug=slug),
                    context=f"{label} {row['id']} ({name})",
                )
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            id_map[row["id"]] = created.id
            self.ctx.stats[counter] += 1

    # Stage 5

    async def migrate_providers(self, session: AsyncSession):
        writer = RowWriter(session)

        for listing in self.reader.listings():
            legacy_id = listing["id"]
            slug = self.ctx.provider_slugs.assign(
                listing.get("short_url_string") or listing.get("name"), legacy_id
            )
            user_id = await self._user_for_listing(session, writer, listing)

            created_at = to_datetime(listing.get("created")) or datetime.utcnow()
            updated_at = to_datetime(listing.get("updated")) or created_at

            provider = Provider(
                slug=slug,
                name=clean_text(listing.get("name")) or "Unknown Provider",
                bio=strip_html(listing.get("html_data")),
                status="active",
                created_at=created_at,
                updated_at=updated_at,
                user_id=user_id,
            )
            try:
                await writer.insert(provider, context=f"listing {legacy_id} ({provider.name})")
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            self.ctx.providers[legacy_id] = provider.id
            self.ctx.stats["providers"] += 1

            # Kept for the fallback location pass in stage 9
            if listing.get("address1") or listing.get("city"):
                self.ctx.listing_addresses[provider.id] = {
                    "address1": (listing.get("address1") or "").strip(),
                    "address2": clean_text(listing.get("address2")),
                    "city": (listing.get("city") or "").strip(),
                    "state_id": listing.get("state_id"),
                    "country_id": listing.get("country_id"),
                    "zip": (listing.get("zip") or "").strip(),
                }

        print(f"   Created {self.ctx.stats['users']} users")
        print(f"   Migrated {self.ctx.stats['providers']} providers")

    async def _user_for_listing(
        self, session: AsyncSession, writer: RowWriter, listing: Row
    ) -> Optional[int]:
        """Create (or reuse) the user account a listing's email points to"""
        email = clean_text(listing.get("email"))
        if not email:
            return None

        user = User(
            email=email,
            password_hash=listing.get("password") or "no-password",
            first_name=listing.get("name") or "Provider",
            last_name="",
            role="provider",
        )
        try:
            await writer.insert(user, context=f"user {email} (listing {listing['id']})")
        except DuplicateRecordError:
            return await self._claim_existing_user(session, email, listing["id"])
        except RecordInsertError as e:
            self._row_failed(e)
            return None

        self.ctx.stats["users"] += 1
        return user.id

    async def _claim_existing_user(
        self, session: AsyncSession, email: str, legacy_id: int
    ) -> Optional[int]:
        """Reuse an existing user only if no provider has claimed it yet"""
        result = await session.execute(select(User.id).where(User.email == email))
        user_id = result.scalar_one_or_none()
        if user_id is None:
            return None

        result = await session.execute(select(Provider.id).where(Provider.user_id == user_id))
        if result.first() is None:
            return user_id

        self._warn(
            f"listing {legacy_id}: user {email} already linked to another provider, skipping link"
        )
        return None

    # Stages 6 and 7

    async def migrate_provider_categories(self, session: AsyncSession):
        await self._migrate_links(
            session, self.reader.listing_categories(), "listing_subcategory_id",
            self.ctx.categories, ProviderCategory, "category_id", "provider_categories",
        )
        print(f"   Migrated {self.ctx.stats['provider_categories']} provider-category links")

    async def migrate_provider_specialties(self, session: AsyncSession):
        await self._migrate_links(
            session, self.reader.listing_specialties(), "ailment_subcategory_id",
            self.ctx.specialties, ProviderSpecialty, "specialty_id", "provider_specialties",
        )
        print(f"   Migrated {self.ctx.stats['provider_specialties']} provider-specialty links")

    async def _migrate_links(
        self,
        session: AsyncSession,
        rows: List[Row],
        legacy_key: str,
        id_map: Dict[int, int],
        model,
        target_key: str,
        counter: str,
    ):
        writer = RowWriter(session)

        for row in rows:
            provider_id = self.ctx.providers.get(row["listing_id"])
            target_id = id_map.get(row[legacy_key])
            if not provider_id or not target_id:
                continue

            try:
                await writer.insert(
                    model(provider_id=provider_id, **{target_key: target_id}),
                    context=f"{counter} listing {row['listing_id']} -> {row[legacy_key]}",
                )
            except DuplicateRecordError:
                # Legacy junctions repeat pairs
                continue
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            self.ctx.stats[counter] += 1

    # Stage 8

    async def migrate_contacts(self, session: AsyncSession):
        writer = RowWriter(session)

        for row in self.reader.contacts():
            provider_id = self.ctx.providers.get(row["listing_id"])
            if not provider_id:
                continue

            first_name = (row.get("first_name") or "").strip()
            last_name = (row.get("last_name") or "").strip()
            if not first_name and not last_name:
                continue

            contact = Contact(
                provider_id=provider_id,
                first_name=first_name or "Unknown",
                last_name=last_name,
                email=clean_text(row.get("email")),
                phone=clean_text(row.get("phone")),
                is_public=contact_is_public(row),
            )
            try:
                await writer.insert(contact, context=f"contact {row['id']}")
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            self.ctx.stats["contacts"] += 1

        print(f"   Migrated {self.ctx.stats['contacts']} contacts")

    # Stage 9

    async def migrate_locations(self, session: AsyncSession):
        writer = RowWriter(session)

        for row in self.reader.locations():
            provider_id = self.ctx.providers.get(row["listing_id"])
            if not provider_id:
                continue

            address1 = (row.get("address1") or "").strip()
            city = (row.get("city") or "").strip()
            if not address1 and not city:
                continue

            location = self._build_location(
                provider_id,
                address1=address1,
                address2=clean_text(row.get("address2")),
                city=city,
                state_id=row.get("state_id"),
                zip_code=(row.get("zip") or "").strip(),
                country_id=row.get("country_id"),
            )
            location.name = clean_text(row.get("name"))
            location.lat = _coordinate(row.get("lat"))
            location.lng = _coordinate(row.get("lng"))

            try:
                await writer.insert(location, context=f"location {row['id']}")
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            self.ctx.located_providers.add(provider_id)
            self.ctx.stats["locations"] += 1

        # Fallback: providers with no dedicated location get their listing address
        for provider_id, data in self.ctx.listing_addresses.items():
            if provider_id in self.ctx.located_providers:
                continue
            if not data["address1"] and not data["city"]:
                continue

            location = self._build_location(
                provider_id,
                address1=data["address1"],
                address2=data["address2"],
                city=data["city"],
                state_id=data["state_id"],
                zip_code=data["zip"],
                country_id=data["country_id"],
            )
            try:
                await writer.insert(location, context=f"fallback location for provider {provider_id}")
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            self.ctx.stats["fallback_locations"] += 1
            self.ctx.stats["locations"] += 1

        if self.ctx.stats["fallback_locations"]:
            print(f"   ({self.ctx.stats['fallback_locations']} from listing-level address data)")
        print(f"   Migrated {self.ctx.stats['locations']} locations total")

    def _build_location(
        self,
        provider_id: int,
        address1: str,
        address2: Optional[str],
        city: str,
        state_id: Any,
        zip_code: str,
        country_id: Any,
    ) -> Location:
        return Location(
            provider_id=provider_id,
            address1=address1 or "No address",
            address2=address2,
            city=city or "Unknown",
            state=self.ctx.state_name(state_id) or "NA",
            zip=zip_code or "00000",
            country=self.ctx.country_name(country_id),
            hidden=False,
        )

    # Stage 10

    async def migrate_services(self, session: AsyncSession):
        writer = RowWriter(session)

        for item in self.reader.menu_items():
            provider_id = self.ctx.providers.get(item["listing_id"])
            if not provider_id:
                continue

            name = (item.get("name") or "").strip()
            if not name:
                continue

            service = Service(
                provider_id=provider_id,
                name=name,
                type=item.get("type") or None,
                price=parse_price(item.get("price")),
                description=strip_html(item.get("html_data")),
                is_special=yes_no_to_bool(item.get("special")),
                sort_order=_sort_order(item.get("sequence")),
            )
            try:
                await writer.insert(service, context=f"menu item {item['id']}")
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            self.ctx.stats["services"] += 1

        print(f"   Migrated {self.ctx.stats['services']} services")

    # Stage 11

    async def migrate_photos(self, session: AsyncSession):
        writer = RowWriter(session)

        for row in self.reader.photos():
            provider_id = self.ctx.providers.get(row["listing_id"])
            if not provider_id:
                continue

            url = (row.get("full_image") or "").strip()
            if not url:
                continue

            photo = Photo(
                provider_id=provider_id,
                name=clean_text(row.get("name")),
                caption=clean_text(row.get("caption")),
                url=url,
                thumb_url=clean_text(row.get("thumb_image")),
                sort_order=_sort_order(row.get("sequence")),
                hidden=False,
            )
            try:
                await writer.insert(photo, context=f"photo {row['id']}")
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            self.ctx.stats["photos"] += 1

        print(f"   Migrated {self.ctx.stats['photos']} photos")

    # Stage 12

    async def migrate_events(self, session: AsyncSession):
        writer = RowWriter(session)

        for row in self.reader.events():
            provider_id = self.ctx.providers.get(row["listing_id"])
            if not provider_id:
                continue

            name = (row.get("name") or "").strip()
            if not name:
                continue

            start_date = to_datetime(row.get("start_date"))
            if start_date is None:
                continue

            if row.get("html_data"):
                description = strip_html(row["html_data"])
            else:
                description = clean_text(row.get("description"))

            event = Event(
                provider_id=provider_id,
                name=name,
                description=description,
                start_date=start_date,
                end_date=to_datetime(row.get("end_date")),
                city=clean_text(row.get("city")),
                state=self.ctx.state_name(row.get("state_id")) or None,
                country=self.ctx.country_name(row.get("country_id")),
                zip=clean_text(row.get("zip")),
                hidden=False,
            )
            try:
                await writer.insert(event, context=f"event {row['id']}")
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            self.ctx.stats["events"] += 1

        print(f"   Migrated {self.ctx.stats['events']} events")

    # Stage 13

    async def migrate_coupons(self, session: AsyncSession):
        writer = RowWriter(session)

        for row in self.reader.coupons():
            provider_id = self.ctx.providers.get(row["listing_id"])
            if not provider_id:
                continue

            name = (row.get("name") or "").strip()
            if not name:
                continue

            coupon = Coupon(
                provider_id=provider_id,
                name=name,
                description=strip_html(row.get("html_data")),
                small_print=strip_html(row.get("small_print_data")),
                promo_code=clean_text(row.get("promo_code")),
                expiration_date=to_datetime(row.get("expiration_date")),
                first_time_only=yes_no_to_bool(row.get("first_time_only")),
                appointment_only=yes_no_to_bool(row.get("appointment_only")),
                hidden=False,
                sort_order=_sort_order(row.get("sequence")),
            )
            try:
                await writer.insert(coupon, context=f"coupon {row['id']}")
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            self.ctx.stats["coupons"] += 1

        print(f"   Migrated {self.ctx.stats['coupons']} coupons")

    # Stage 14

    async def migrate_reviews(self, session: AsyncSession):
        writer = RowWriter(session)

        for row in self.reader.comments():
            provider_id = self.ctx.providers.get(row["tableid"])
            if not provider_id:
                continue

            content = (row.get("comment") or "").strip()
            if not content:
                continue

            review = Review(
                provider_id=provider_id,
                content=content,
                status="active",
                created_at=to_datetime(row.get("_datetime")) or datetime.utcnow(),
            )
            try:
                await writer.insert(review, context=f"comment {row['id']}")
            except RecordInsertError as e:
                self._row_failed(e)
                continue

            self.ctx.stats["reviews"] += 1

        print(f"   Migrated {self.ctx.stats['reviews']} reviews")
