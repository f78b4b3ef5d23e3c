"""Custom validation utilities."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError

MIN_RATING = 1
MAX_RATING = 5

# Numeric(10, 2)
MAX_PRICE = Decimal("99999999.99")
CENTS = Decimal("0.01")

PACKAGE_TEXT_FIELDS = ("title", "location", "description", "duration")

_http_url = TypeAdapter(AnyHttpUrl)


def validate_rating(rating: Any) -> int:
    """Validate a review rating.

    Args:
        rating: Value supplied by the caller

    Returns:
        int: The rating, unchanged

    Raises:
        ValidationError: If the value is not an integer from 1 to 5
    """
    # bool is an int subclass; True must not pass as a 1-star rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError.for_field("rating", "Rating must be a whole number")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError.for_field(
            "rating", f"Rating must be between {MIN_RATING} and {MAX_RATING}"
        )
    return rating


def normalize_comment(comment: str | None) -> str:
    """Trim a review comment, rejecting empty or whitespace-only text."""
    text = (comment or "").strip()
    if not text:
        raise ValidationError.for_field("comment", "Comment cannot be empty")
    return text


def parse_price(value: Any) -> Decimal:
    """Parse a price from a number or numeric string.

    Returns:
        Decimal: Non-negative amount rounded to cents

    Raises:
        ValueError: With a human-readable reason
    """
    if value is None or isinstance(value, bool):
        raise ValueError("Price is required")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("Price is required")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError("Price must be a number")
    if not amount.is_finite():
        raise ValueError("Price must be a number")
    if amount < 0:
        raise ValueError("Price cannot be negative")
    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount > MAX_PRICE:
        raise ValueError(f"Price cannot exceed {MAX_PRICE}")
    return amount


def normalize_image_url(value: str | None) -> str | None:
    """Return a validated absolute http(s) URL, or None when blank.

    Raises:
        ValueError: If a non-blank value is not a valid URL
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        _http_url.validate_python(text)
    except PydanticValidationError:
        raise ValueError("Image URL must be a valid http(s) URL")
    return text


def validate_package_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate and normalize the full set of package fields.

    Every offending field is reported in a single ValidationError.

    Args:
        fields: title, location, description, price, duration, image_url

    Returns:
        dict: Cleaned values ready to persist
    """
    errors: list[dict[str, str]] = []
    cleaned: dict[str, Any] = {}

    for name in PACKAGE_TEXT_FIELDS:
        text = (fields.get(name) or "").strip()
        if not text:
            errors.append({"field": name, "message": f"{name.capitalize()} is required"})
        cleaned[name] = text

    try:
        cleaned["price"] = parse_price(fields.get("price"))
    except ValueError as e:
        errors.append({"field": "price", "message": str(e)})

    try:
        cleaned["image_url"] = normalize_image_url(fields.get("image_url"))
    except ValueError as e:
        errors.append({"field": "image_url", "message": str(e)})

    if errors:
        names = ", ".join(error["field"] for error in errors)
        raise ValidationError(f"Invalid package fields: {names}", errors=errors)
    return cleaned
