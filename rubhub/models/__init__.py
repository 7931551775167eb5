from rubhub.models.taxonomy import Category, Specialty
from rubhub.models.user import User
from rubhub.models.provider import Provider, ProviderCategory, ProviderSpecialty
from rubhub.models.contact import Contact
from rubhub.models.location import Location
from rubhub.models.service import Service
from rubhub.models.photo import Photo
from rubhub.models.event import Event
from rubhub.models.coupon import Coupon
from rubhub.models.review import Review

__all__ = [
    "Category",
    "Specialty",
    "User",
    "Provider",
    "ProviderCategory",
    "ProviderSpecialty",
    "Contact",
    "Location",
    "Service",
    "Photo",
    "Event",
    "Coupon",
    "Review",
]
