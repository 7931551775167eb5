"""
Read-only queries against the legacy directory schema.

Each method loads the complete filtered result set for one stage and returns
plain dicts, whatever cursor type the connection uses.
"""
from typing import Any, Dict, List

from rubhub.utils.logger import get_logger

logger = get_logger(__name__)

Row = Dict[str, Any]

NOT_HIDDEN = "(hidden != 'Yes' OR hidden IS NULL)"


class LegacyReader:
    """Query definitions for the legacy store"""

    def __init__(self, conn):
        self.conn = conn

    def _fetch(self, sql: str) -> List[Row]:
        # Blocking read; stages run one at a time so nothing else waits on the loop
        cursor = self.conn.cursor()
        try:
            cursor.execute(sql)
            rows = cursor.fetchall()
        finally:
            cursor.close()
        logger.debug("Fetched %d legacy rows", len(rows))
        return [dict(row) for row in rows]

    # Lookups

    def states(self) -> List[Row]:
        return self._fetch("SELECT id, short_name FROM state")

    def countries(self) -> List[Row]:
        return self._fetch("SELECT id, short_name FROM country")

    # Taxonomies

    def categories(self) -> List[Row]:
        return self._fetch("""
            SELECT id, name
            FROM listing_subcategory
            WHERE (hidden = 'No' OR hidden IS NULL)
              AND name IS NOT NULL AND name != ''
        """)

    def specialties(self) -> List[Row]:
        return self._fetch("""
            SELECT id, name
            FROM ailment_subcategory
            WHERE (hidden = 'No' OR hidden IS NULL)
              AND name IS NOT NULL AND name != ''
        """)

    # Providers

    def listings(self) -> List[Row]:
        return self._fetch("""
            SELECT id, short_url_string, name, html_data, username, password, email,
                   url, phone, fax, address1, address2, city, state_id, country_id, zip,
                   status, created, updated
            FROM listing
            WHERE status = 'active' AND hidden = 'No'
        """)

    def listing_categories(self) -> List[Row]:
        return self._fetch(
            "SELECT listing_id, listing_subcategory_id FROM `listing~listing_subcategory`"
        )

    def listing_specialties(self) -> List[Row]:
        return self._fetch(
            "SELECT listing_id, ailment_subcategory_id FROM `listing~ailment_subcategory`"
        )

    # Provider children

    def contacts(self) -> List[Row]:
        return self._fetch(f"""
            SELECT id, listing_id, first_name, last_name, email, phone,
                   email_private, phone_private, first_name_private, last_name_private
            FROM `listing~contact`
            WHERE {NOT_HIDDEN}
        """)

    def locations(self) -> List[Row]:
        return self._fetch(f"""
            SELECT id, listing_id, name, address1, address2, city, state_id, zip,
                   country_id, lat, lng
            FROM `listing~location`
            WHERE {NOT_HIDDEN}
        """)

    def menu_items(self) -> List[Row]:
        return self._fetch(f"""
            SELECT id, listing_id, name, type, price, html_data, special, sequence
            FROM `listing~menu`
            WHERE {NOT_HIDDEN}
        """)

    def photos(self) -> List[Row]:
        return self._fetch(f"""
            SELECT id, listing_id, name, caption, full_image, thumb_image, sequence
            FROM photo
            WHERE {NOT_HIDDEN}
        """)

    def events(self) -> List[Row]:
        return self._fetch(f"""
            SELECT id, listing_id, name, description, html_data, start_date, end_date,
                   city, state_id, country_id, zip
            FROM listing_event
            WHERE {NOT_HIDDEN}
        """)

    def coupons(self) -> List[Row]:
        return self._fetch(f"""
            SELECT id, listing_id, name, html_data, small_print_data, expiration_date,
                   promo_code, first_time_only, appointment_only, sequence
            FROM coupon
            WHERE {NOT_HIDDEN}
        """)

    def comments(self) -> List[Row]:
        # comment rows are polymorphic; only listing comments are reviews
        return self._fetch(f"""
            SELECT id, tableid, comment, status, _datetime
            FROM comment
            WHERE {NOT_HIDDEN} AND status = 'active'
              AND tablename_use = 'listing' AND tableid IS NOT NULL
        """)
