import re

from rentacar.utils.exceptions import ValidationError

_WHITESPACE = re.compile(r"\s+")
_PLATE_PATTERN = re.compile(r"^[A-ZÄÖÜ0-9](?:[A-ZÄÖÜ0-9 \-]{0,13}[A-ZÄÖÜ0-9])?$")


def normalize_license_plate(raw: str) -> str:
    """Normalize a plate for storage and lookup.

    Upper-cases, trims and collapses inner whitespace, so "  b-ab 123 " and
    "B-AB 123" are the same plate.
    """
    plate = _WHITESPACE.sub(" ", (raw or "").strip()).upper()
    if not plate:
        raise ValidationError("License plate must not be empty", field="license_plate")
    if not _PLATE_PATTERN.match(plate):
        raise ValidationError(
            "License plate may only contain letters, digits, spaces and hyphens",
            field="license_plate",
            details={"provided": raw},
        )
    return plate
