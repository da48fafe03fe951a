# app/services/validation.py
"""
Declarative field validation for product forms.

A rule table maps each field to an ordered tuple of rules. A rule is a
callable ``rule(field, value, ctx) -> str | None`` returning an error
message, or None when the value passes. ``validate`` walks the table in
declaration order and returns ``{field: [messages]}``; an empty dict
means the input is valid.

Semantics follow the classic form validator most storefront clients
were written against:

  - empty strings count as missing
  - a missing value only fails ``required``; every other rule is skipped
  - evaluation of a field stops at its first failing rule
"""
import math
from collections.abc import Callable, Mapping
from typing import Any

from app.core.config import get_settings
from app.schemas.product import ProductPayload, UploadedFile

ValidationErrors = dict[str, list[str]]


class ValidationContext:
    """
    Per-request collaborators needed by rules that look outside the
    submitted values (currently only uniqueness).

    `is_taken(field, value)` must return True when another record already
    uses `value` for `field`.
    """

    def __init__(self, is_taken: Callable[[str, Any], bool] | None = None):
        self._is_taken = is_taken

    def is_taken(self, field: str, value: Any) -> bool:
        if self._is_taken is None:
            return False
        return self._is_taken(field, value)


Rule = Callable[[str, Any, ValidationContext], "str | None"]


def _label(field: str) -> str:
    return field.replace("_", " ")


# ----- Image sniffing -----

_IMAGE_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\xff\xd8\xff", "jpg"),
    (b"\x89PNG\r\n\x1a\n", "png"),
    (b"GIF87a", "gif"),
    (b"GIF89a", "gif"),
    (b"BM", "bmp"),
)


def guess_image_type(content: bytes) -> str | None:
    """
    Identify an image by its leading bytes.

    Returns the canonical extension ("jpg", "png", "gif", "bmp", "webp")
    or None when the bytes are not a recognised image.
    """
    for signature, ext in _IMAGE_SIGNATURES:
        if content.startswith(signature):
            return ext
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "webp"
    return None


IMAGE_CONTENT_TYPES: dict[str, str] = {
    "jpg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
}


# ----- Rules -----

def required(field: str, value: Any, ctx: ValidationContext) -> str | None:
    if is_missing(value):
        return f"The {_label(field)} field is required."
    return None


def nullable(field: str, value: Any, ctx: ValidationContext) -> str | None:
    # Marker only: missing values never reach non-required rules.
    return None


def string(field: str, value: Any, ctx: ValidationContext) -> str | None:
    if not isinstance(value, str):
        return f"The {_label(field)} must be a string."
    return None


def max_length(limit: int) -> Rule:
    def rule(field: str, value: Any, ctx: ValidationContext) -> str | None:
        if len(value) > limit:
            return f"The {_label(field)} must not be greater than {limit} characters."
        return None

    return rule


def numeric(field: str, value: Any, ctx: ValidationContext) -> str | None:
    if parse_number(value) is None:
        return f"The {_label(field)} must be a number."
    return None


def boolean(field: str, value: Any, ctx: ValidationContext) -> str | None:
    if parse_bool(value) is None:
        return f"The {_label(field)} field must be true or false."
    return None


def unique(field: str, value: Any, ctx: ValidationContext) -> str | None:
    if ctx.is_taken(field, value):
        return f"The {_label(field)} has already been taken."
    return None


def image(field: str, value: Any, ctx: ValidationContext) -> str | None:
    if not isinstance(value, UploadedFile) or guess_image_type(value.content) is None:
        return f"The {_label(field)} must be an image."
    return None


def mimes(*extensions: str) -> Rule:
    allowed = set(extensions)
    if "jpg" in allowed:
        allowed.add("jpeg")

    def rule(field: str, value: Any, ctx: ValidationContext) -> str | None:
        content = value.content if isinstance(value, UploadedFile) else b""
        if guess_image_type(content) not in allowed:
            return f"The {_label(field)} must be a file of type: {', '.join(extensions)}."
        return None

    return rule


def max_kilobytes(limit: int) -> Rule:
    def rule(field: str, value: Any, ctx: ValidationContext) -> str | None:
        if value.size > limit * 1024:
            return f"The {_label(field)} must not be greater than {limit} kilobytes."
        return None

    return rule


# ----- Value helpers -----

def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, UploadedFile) and not value.filename and not value.content:
        return True
    return False


_TRUE_VALUES = {"1", "true"}
_FALSE_VALUES = {"0", "false"}


def parse_bool(value: Any) -> bool | None:
    """
    Accepts true/false, 1/0 and their string forms ("1", "0", "true",
    "false", case-insensitive). Anything else yields None.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return None


def parse_number(value: Any) -> float | None:
    """Finite ints, floats and numeric strings; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if "_" in value:
            return None
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


# ----- Rule tables -----

_settings = get_settings()

CREATE_RULES: dict[str, tuple[Rule, ...]] = {
    "name": (required, string, max_length(191), unique),
    "description": (required, string),
    "price": (required, numeric),
    "status": (required, boolean),
    "image": (required, image, mimes("jpg", "png"), max_kilobytes(_settings.MAX_IMAGE_KB)),
}

UPDATE_RULES: dict[str, tuple[Rule, ...]] = {
    **CREATE_RULES,
    "image": (nullable, image, mimes("jpg", "png"), max_kilobytes(_settings.MAX_IMAGE_KB)),
}


def validate(
    fields: Mapping[str, Any],
    rules: Mapping[str, tuple[Rule, ...]],
    ctx: ValidationContext | None = None,
) -> ValidationErrors:
    ctx = ctx or ValidationContext()
    errors: ValidationErrors = {}

    for field, field_rules in rules.items():
        value = fields.get(field)
        if isinstance(value, str):
            value = value.strip()

        if is_missing(value):
            if required in field_rules:
                errors[field] = [required(field, value, ctx)]
            continue

        for rule in field_rules:
            message = rule(field, value, ctx)
            if message:
                errors.setdefault(field, []).append(message)
                break

    return errors


def first_error(errors: ValidationErrors) -> str:
    for messages in errors.values():
        if messages:
            return messages[0]
    return "The given data was invalid."


def to_payload(fields: Mapping[str, Any]) -> ProductPayload:
    """
    Coerce already-validated form values into the typed payload.
    """
    return ProductPayload(
        name=fields["name"].strip(),
        description=fields["description"].strip(),
        price=parse_number(fields["price"]),
        status=parse_bool(fields["status"]),
    )
