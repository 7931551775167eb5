"""
Test fixtures - in-memory SQLite target store + in-memory legacy database
"""
import sqlite3

import pytest
import pytest_asyncio

import rubhub.models  # noqa: F401 - registers every table on Base
from rubhub.database import Base, create_engine, make_session_factory
from rubhub.migration.legacy_reader import LegacyReader
from rubhub.migration.loader import LegacyMigration

# Mirrors the legacy MySQL tables the migration reads
LEGACY_SCHEMA = """
CREATE TABLE state (id INTEGER PRIMARY KEY, short_name TEXT);
CREATE TABLE country (id INTEGER PRIMARY KEY, short_name TEXT);

CREATE TABLE listing_subcategory (
    id INTEGER PRIMARY KEY, name TEXT, hidden TEXT DEFAULT 'No'
);
CREATE TABLE ailment_subcategory (
    id INTEGER PRIMARY KEY, name TEXT, hidden TEXT DEFAULT 'No'
);

CREATE TABLE listing (
    id INTEGER PRIMARY KEY,
    short_url_string TEXT, name TEXT, html_data TEXT,
    username TEXT, password TEXT, email TEXT, url TEXT, phone TEXT, fax TEXT,
    address1 TEXT, address2 TEXT, city TEXT, state_id INTEGER, country_id INTEGER, zip TEXT,
    status TEXT DEFAULT 'active', hidden TEXT DEFAULT 'No',
    created TEXT, updated TEXT
);

CREATE TABLE `listing~listing_subcategory` (listing_id INTEGER, listing_subcategory_id INTEGER);
CREATE TABLE `listing~ailment_subcategory` (listing_id INTEGER, ailment_subcategory_id INTEGER);

CREATE TABLE `listing~contact` (
    id INTEGER PRIMARY KEY, listing_id INTEGER,
    first_name TEXT, last_name TEXT, email TEXT, phone TEXT,
    email_private TEXT, phone_private TEXT, first_name_private TEXT, last_name_private TEXT,
    hidden TEXT
);

CREATE TABLE `listing~location` (
    id INTEGER PRIMARY KEY, listing_id INTEGER, name TEXT,
    address1 TEXT, address2 TEXT, city TEXT, state_id INTEGER, zip TEXT, country_id INTEGER,
    lat REAL, lng REAL, hidden TEXT
);

CREATE TABLE `listing~menu` (
    id INTEGER PRIMARY KEY, listing_id INTEGER, name TEXT, type TEXT, price TEXT,
    html_data TEXT, special TEXT, sequence INTEGER, hidden TEXT
);

CREATE TABLE photo (
    id INTEGER PRIMARY KEY, listing_id INTEGER, name TEXT, caption TEXT,
    full_image TEXT, thumb_image TEXT, sequence INTEGER, hidden TEXT
);

CREATE TABLE listing_event (
    id INTEGER PRIMARY KEY, listing_id INTEGER, name TEXT, description TEXT, html_data TEXT,
    start_date TEXT, end_date TEXT, city TEXT, state_id INTEGER, country_id INTEGER, zip TEXT,
    hidden TEXT
);

CREATE TABLE coupon (
    id INTEGER PRIMARY KEY, listing_id INTEGER, name TEXT, html_data TEXT, small_print_data TEXT,
    expiration_date TEXT, promo_code TEXT, first_time_only TEXT, appointment_only TEXT,
    sequence INTEGER, hidden TEXT
);

CREATE TABLE comment (
    id INTEGER PRIMARY KEY, tablename_use TEXT, tableid INTEGER, comment TEXT,
    status TEXT, hidden TEXT, _datetime TEXT
);
"""


class LegacyDB:
    """Small helper for filling the legacy tables"""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def insert(self, table: str, **values):
        columns = ", ".join(values)
        marks = ", ".join("?" for _ in values)
        self.conn.execute(
            f"INSERT INTO `{table}` ({columns}) VALUES ({marks})", tuple(values.values())
        )
        self.conn.commit()

    def listing(self, id: int, **values):
        values.setdefault("name", f"Provider {id}")
        self.insert("listing", id=id, **values)


@pytest.fixture()
def legacy_conn():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.executescript(LEGACY_SCHEMA)
    yield conn
    conn.close()


@pytest.fixture()
def legacy(legacy_conn):
    db = LegacyDB(legacy_conn)
    db.insert("state", id=1, short_name="CA")
    db.insert("state", id=2, short_name="OR")
    db.insert("state", id=3, short_name=None)
    db.insert("country", id=1, short_name="US")
    db.insert("country", id=2, short_name="CA")
    db.insert("country", id=3, short_name=None)
    return db


@pytest_asyncio.fixture()
async def engine():
    """Fresh in-memory SQLite target store for each test"""
    engine = create_engine("sqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return make_session_factory(engine)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def migration(legacy_conn, engine):
    return LegacyMigration(LegacyReader(legacy_conn), engine)
