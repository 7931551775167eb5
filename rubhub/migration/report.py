"""
Migration summary report
"""
from typing import List

from rubhub.migration.context import COUNTERS

LABELS = {
    "categories": "Categories",
    "specialties": "Specialties",
    "providers": "Providers",
    "provider_categories": "Provider-Categories",
    "provider_specialties": "Provider-Specialties",
    "contacts": "Contacts",
    "locations": "Locations",
    "services": "Services",
    "photos": "Photos",
    "events": "Events",
    "coupons": "Coupons",
    "reviews": "Reviews",
}


def format_summary(ctx) -> List[str]:
    """Lines of the final report, one per migrated-count total"""
    lines = ["=" * 60, "MIGRATION SUMMARY", "=" * 60]
    for key in COUNTERS:
        lines.append(f"{LABELS[key] + ':':<22}{ctx.stats[key]}")

    lines.append("")
    lines.append(f"{'Fallback locations:':<22}{ctx.stats['fallback_locations']}")
    lines.append(f"{'Users created:':<22}{ctx.stats['users']}")
    lines.append(f"{'Warnings:':<22}{len(ctx.warnings)}")
    lines.append(f"{'Failed rows:':<22}{len(ctx.failures)}")
    lines.append("=" * 60)
    return lines


def print_summary(ctx):
    """Print migration summary"""
    print()
    for line in format_summary(ctx):
        print(line)
    print()
