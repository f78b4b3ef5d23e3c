"""Builders for test data."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

from app.core.security import create_access_token
from app.models.package import Package
from app.models.profile import Profile


def future_date(days: int = 30):
    return datetime.now(UTC).date() + timedelta(days=days)


def make_package(**overrides) -> Package:
    fields = {
        "title": "Bali Escape",
        "location": "Bali, Indonesia",
        "description": "Five days of beaches, rice terraces and temples.",
        "price": Decimal("1299.00"),
        "duration": "5 days / 4 nights",
        "image_url": "https://images.example.com/bali.jpg",
    }
    fields.update(overrides)
    return Package(**fields)


def package_fields(**overrides) -> dict:
    """Request-shaped package fields, as an admin form would send them."""
    fields = {
        "title": "Kyoto Temples",
        "location": "Kyoto, Japan",
        "description": "Shrines, gardens and a tea ceremony.",
        "price": "899.50",
        "duration": "4 days / 3 nights",
        "image_url": "",
    }
    fields.update(overrides)
    return fields


def bearer(profile: Profile, **claims) -> dict[str, str]:
    token = create_access_token({"sub": str(profile.id), "email": profile.email, **claims})
    return {"Authorization": f"Bearer {token}"}
