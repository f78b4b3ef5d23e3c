"""Validator tests."""

from decimal import Decimal

import pytest

from app.core.exceptions import ValidationError
from app.utils.validators import (
    normalize_comment,
    normalize_image_url,
    parse_price,
    validate_package_fields,
    validate_rating,
)


class TestRating:
    @pytest.mark.parametrize("rating", [1, 2, 3, 4, 5])
    def test_valid(self, rating):
        assert validate_rating(rating) == rating

    @pytest.mark.parametrize("rating", [0, 6, 100, -3, False, True, 3.0, None, "4"])
    def test_invalid(self, rating):
        with pytest.raises(ValidationError):
            validate_rating(rating)


class TestComment:
    def test_trims(self):
        assert normalize_comment("  Great trip \n") == "Great trip"

    @pytest.mark.parametrize("comment", [None, "", "    ", "\t\n"])
    def test_blank(self, comment):
        with pytest.raises(ValidationError) as exc_info:
            normalize_comment(comment)
        assert exc_info.value.status_code == 422


class TestPrice:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1299", Decimal("1299.00")),
            ("12.345", Decimal("12.35")),
            (0, Decimal("0.00")),
            (19.99, Decimal("19.99")),
            (Decimal("7.5"), Decimal("7.50")),
        ],
    )
    def test_parses(self, value, expected):
        assert parse_price(value) == expected

    @pytest.mark.parametrize("value", [None, "", "  ", "free", "-1", -0.01, True, "Infinity", "1e9"])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            parse_price(value)


class TestImageUrl:
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_none(self, value):
        assert normalize_image_url(value) is None

    def test_valid_url_kept(self):
        url = "https://images.example.com/bali.jpg"
        assert normalize_image_url(f" {url} ") == url

    @pytest.mark.parametrize("value", ["bali.jpg", "ftp://example.com/a.jpg", "https://"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            normalize_image_url(value)


class TestPackageFields:
    def test_missing_everything(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_package_fields({})

        fields = [error["field"] for error in exc_info.value.errors]
        assert fields == ["title", "location", "description", "duration", "price"]
        assert exc_info.value.detail == (
            "Invalid package fields: title, location, description, duration, price"
        )

    def test_clean(self):
        cleaned = validate_package_fields(
            {
                "title": " Bali Escape ",
                "location": "Bali",
                "description": "Beaches",
                "duration": "5 days",
                "price": "10",
                "image_url": "",
            }
        )

        assert cleaned == {
            "title": "Bali Escape",
            "location": "Bali",
            "description": "Beaches",
            "duration": "5 days",
            "price": Decimal("10.00"),
            "image_url": None,
        }
