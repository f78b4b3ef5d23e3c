"""Database models."""

from app.models.admin import AuditLog
from app.models.booking import Booking
from app.models.favorite import Favorite
from app.models.package import Package
from app.models.profile import Profile
from app.models.review import Review

__all__ = [
    # Identity
    "Profile",
    # Catalog
    "Package",
    # User relations
    "Favorite",
    "Booking",
    "Review",
    # Admin
    "AuditLog",
]
