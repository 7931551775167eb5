"""
State threaded through one migration run
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from rubhub.migration.transforms import SlugRegistry

# Reported in the final summary, in this order
COUNTERS = (
    "categories",
    "specialties",
    "providers",
    "provider_categories",
    "provider_specialties",
    "contacts",
    "locations",
    "services",
    "photos",
    "events",
    "coupons",
    "reviews",
)

EXTRA_COUNTERS = ("users", "fallback_locations")


def _empty_stats() -> Dict[str, int]:
    return dict.fromkeys(COUNTERS + EXTRA_COUNTERS, 0)


@dataclass
class RunContext:
    """
    ID-remapping and lookup tables for one run.

    Every table is filled by exactly one stage and only read afterwards.
    """

    # Lookups: legacy id -> short name
    states: Dict[int, str] = field(default_factory=dict)
    countries: Dict[int, str] = field(default_factory=dict)

    # Legacy id -> new id
    categories: Dict[int, int] = field(default_factory=dict)
    specialties: Dict[int, int] = field(default_factory=dict)
    providers: Dict[int, int] = field(default_factory=dict)

    # New provider id -> inline address carried on the listing row
    listing_addresses: Dict[int, Dict[str, Any]] = field(default_factory=dict)
    # New provider ids that got a dedicated location row
    located_providers: Set[int] = field(default_factory=set)

    category_slugs: SlugRegistry = field(default_factory=lambda: SlugRegistry("category"))
    specialty_slugs: SlugRegistry = field(default_factory=lambda: SlugRegistry("specialty"))
    provider_slugs: SlugRegistry = field(default_factory=lambda: SlugRegistry("provider"))

    stats: Dict[str, int] = field(default_factory=_empty_stats)
    failures: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def state_name(self, state_id: Any) -> str:
        return self.states.get(state_id, "")

    def country_name(self, country_id: Any) -> str:
        return self.countries.get(country_id) or "US"
