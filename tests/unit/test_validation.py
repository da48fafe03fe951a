"""Unit tests for the product form rule tables."""

import pytest

from app.schemas.product import UploadedFile
from app.services.validation import (
    CREATE_RULES,
    UPDATE_RULES,
    ValidationContext,
    first_error,
    guess_image_type,
    parse_bool,
    parse_number,
    to_payload,
    validate,
)
from tests.fixtures.core import GIF_BYTES, JPEG_BYTES, PNG_BYTES


class TestCreateRules:
    """Rules applied when creating a product."""

    def test_valid_fields_pass(self, product_fields):
        assert validate(product_fields(), CREATE_RULES) == {}

    @pytest.mark.parametrize("field", ["name", "description", "price", "status", "image"])
    def test_missing_field_is_required(self, product_fields, field):
        fields = product_fields()
        del fields[field]

        errors = validate(fields, CREATE_RULES)

        assert errors == {field: [f"The {field} field is required."]}

    def test_empty_string_counts_as_missing(self, product_fields):
        errors = validate(product_fields(name="   "), CREATE_RULES)
        assert errors["name"] == ["The name field is required."]

    def test_name_too_long(self, product_fields):
        errors = validate(product_fields(name="x" * 192), CREATE_RULES)
        assert errors["name"] == ["The name must not be greater than 191 characters."]

    def test_name_at_limit_passes(self, product_fields):
        assert validate(product_fields(name="x" * 191), CREATE_RULES) == {}

    def test_name_must_be_string(self, product_fields):
        errors = validate(product_fields(name=123), CREATE_RULES)
        assert errors["name"] == ["The name must be a string."]

    def test_duplicate_name_rejected(self, product_fields):
        ctx = ValidationContext(lambda field, value: value == "Widget")

        errors = validate(product_fields(), CREATE_RULES, ctx)

        assert errors == {"name": ["The name has already been taken."]}

    def test_price_must_be_numeric(self, product_fields):
        errors = validate(product_fields(price="cheap"), CREATE_RULES)
        assert errors["price"] == ["The price must be a number."]

    def test_status_must_be_boolean(self, product_fields):
        errors = validate(product_fields(status="yes"), CREATE_RULES)
        assert errors["status"] == ["The status field must be true or false."]

    def test_image_must_be_an_image(self, product_fields):
        upload = UploadedFile("notes.txt", "text/plain", b"hello world")
        errors = validate(product_fields(image=upload), CREATE_RULES)
        assert errors["image"] == ["The image must be an image."]

    def test_image_type_restricted_to_jpg_png(self, product_fields):
        upload = UploadedFile("anim.gif", "image/gif", GIF_BYTES)
        errors = validate(product_fields(image=upload), CREATE_RULES)
        assert errors["image"] == ["The image must be a file of type: jpg, png."]

    def test_image_type_is_read_from_content_not_filename(self, product_fields):
        upload = UploadedFile("photo.png", "image/png", GIF_BYTES)
        errors = validate(product_fields(image=upload), CREATE_RULES)
        assert "image" in errors

    def test_jpeg_accepted(self, product_fields, jpeg_upload):
        assert validate(product_fields(image=jpeg_upload), CREATE_RULES) == {}

    def test_image_size_limit(self, product_fields):
        big = UploadedFile("big.png", "image/png", PNG_BYTES + b"\x00" * (5120 * 1024))
        errors = validate(product_fields(image=big), CREATE_RULES)
        assert errors["image"] == ["The image must not be greater than 5120 kilobytes."]

    def test_errors_are_reported_in_field_order(self):
        errors = validate({"price": "abc"}, CREATE_RULES)

        assert list(errors) == ["name", "description", "price", "status", "image"]
        assert first_error(errors) == "The name field is required."

    def test_one_message_per_field(self, product_fields):
        ctx = ValidationContext(lambda field, value: True)
        errors = validate(product_fields(name="x" * 300), CREATE_RULES, ctx)
        assert len(errors["name"]) == 1


class TestUpdateRules:
    """Rules applied when updating a product."""

    def test_image_is_optional(self, product_fields):
        fields = product_fields()
        del fields["image"]
        assert validate(fields, UPDATE_RULES) == {}

    def test_submitted_image_still_checked(self, product_fields):
        upload = UploadedFile("anim.gif", "image/gif", GIF_BYTES)
        errors = validate(product_fields(image=upload), UPDATE_RULES)
        assert errors["image"] == ["The image must be a file of type: jpg, png."]

    def test_empty_file_part_counts_as_absent(self, product_fields):
        errors = validate(product_fields(image=UploadedFile("", "application/octet-stream", b"")), UPDATE_RULES)
        assert errors == {}

    def test_other_fields_still_required(self, product_fields):
        fields = product_fields()
        del fields["status"]
        assert validate(fields, UPDATE_RULES) == {"status": ["The status field is required."]}


class TestValueHelpers:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (True, True),
            (False, False),
            (1, True),
            (0, False),
            ("1", True),
            ("0", False),
            ("true", True),
            ("FALSE", False),
            ("yes", None),
            (2, None),
            (None, None),
        ],
    )
    def test_parse_bool(self, raw, expected):
        assert parse_bool(raw) is expected

    @pytest.mark.parametrize(
        "raw, expected",
        [("9.99", 9.99), ("10", 10.0), (3, 3.0), ("1e2", 100.0), ("abc", None), ("nan", None), ("1_000", None), (True, None)],
    )
    def test_parse_number(self, raw, expected):
        assert parse_number(raw) == expected

    def test_guess_image_type(self):
        assert guess_image_type(PNG_BYTES) == "png"
        assert guess_image_type(JPEG_BYTES) == "jpg"
        assert guess_image_type(GIF_BYTES) == "gif"
        assert guess_image_type(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "webp"
        assert guess_image_type(b"plain text") is None

    def test_to_payload_coerces_types(self, product_fields):
        payload = to_payload(product_fields(name=" Widget ", status="0"))

        assert payload.name == "Widget"
        assert payload.price == 9.99
        assert payload.status is False
