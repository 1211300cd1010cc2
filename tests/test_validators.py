"""
Tests for product form validation.
"""

import pytest

from shopstore.domain.entities import ImageAttachment, ProductStatus
from shopstore.domain.exceptions import ProductValidationError
from shopstore.validators import validate_product


class TestValidProduct:
    """Test accepted input."""

    def test_sanitizes_values(self, valid_form):
        form = dict(valid_form, name="  Wireless Mouse  ", sku=" mouse-01 ")

        result = validate_product(form)

        assert result.ok
        draft = result.unwrap()
        assert draft.name == "Wireless Mouse"
        assert draft.sku == "MOUSE-01"
        assert draft.price == 19.99
        assert draft.quantity == 3
        assert draft.status == ProductStatus.AVAILABLE
        assert draft.rating == 4.0
        assert draft.in_stock is True

    def test_numeric_values(self, valid_form):
        result = validate_product(dict(valid_form, price=5, quantity=0))

        assert result.ok
        assert result.product.quantity == 0

    def test_name_allows_hyphens_and_apostrophes(self, valid_form):
        result = validate_product(dict(valid_form, name="Kid's Multi-Tool 2"))

        assert result.ok

    def test_explicit_rating(self, valid_form):
        result = validate_product(valid_form, rating=3.5)

        assert result.product.rating == 3.5

    def test_image_attachment(self, valid_form):
        image = ImageAttachment("photo.png", "image/png", b"\x89PNG")

        result = validate_product(dict(valid_form, image_file=image))

        assert result.ok
        assert result.product.image_file is image


class TestInvalidProduct:
    """Test rejected input."""

    def test_negative_price(self, valid_form, repository):
        result = validate_product(dict(valid_form, price=-5))

        assert not result.ok
        assert result.errors == {"price": "Price must be positive"}
        assert len(repository) == 0

    def test_unwrap_raises(self, valid_form):
        result = validate_product(dict(valid_form, price=-5))

        with pytest.raises(ProductValidationError) as exc_info:
            result.unwrap()

        assert exc_info.value.errors == {"price": "Price must be positive"}

    def test_empty_form_reports_every_required_field(self):
        result = validate_product({})

        assert result.errors == {
            "name": "Name is required",
            "price": "Price must be a number",
            "quantity": "Quantity must be a whole number",
            "sku": "SKU is required",
            "category": "Category is required",
            "brand": "Brand is required",
            "color": "Color is required",
        }

    @pytest.mark.parametrize(
        "name,message",
        [
            ("   ", "Name is required"),
            ("x" * 101, "Name must be less than 100 characters"),
            ("Mouse <script>", "Name can only contain letters, numbers, spaces, hyphens, and apostrophes"),
        ],
    )
    def test_name_rules(self, valid_form, name, message):
        result = validate_product(dict(valid_form, name=name))

        assert result.errors == {"name": message}

    def test_name_at_limit_is_accepted(self, valid_form):
        assert validate_product(dict(valid_form, name="x" * 100)).ok

    @pytest.mark.parametrize(
        "price,message",
        [
            ("abc", "Price must be a number"),
            ("", "Price must be a number"),
            (None, "Price must be a number"),
            ("nan", "Price must be a number"),
            (0, "Price must be positive"),
            ("-0.01", "Price must be positive"),
        ],
    )
    def test_price_rules(self, valid_form, price, message):
        result = validate_product(dict(valid_form, price=price))

        assert result.errors == {"price": message}

    @pytest.mark.parametrize(
        "quantity,message",
        [
            ("1.5", "Quantity must be a whole number"),
            (2.5, "Quantity must be a whole number"),
            ("", "Quantity must be a whole number"),
            ("-1", "Quantity must be a non-negative integer"),
            (-3, "Quantity must be a non-negative integer"),
        ],
    )
    def test_quantity_rules(self, valid_form, quantity, message):
        result = validate_product(dict(valid_form, quantity=quantity))

        assert result.errors == {"quantity": message}

    @pytest.mark.parametrize(
        "field,message",
        [
            ("sku", "SKU is required"),
            ("category", "Category is required"),
            ("brand", "Brand is required"),
            ("color", "Color is required"),
        ],
    )
    def test_required_text(self, valid_form, field, message):
        result = validate_product(dict(valid_form, **{field: "  "}))

        assert result.errors == {field: message}

    def test_unknown_status(self, valid_form):
        result = validate_product(dict(valid_form, status="Discontinued"))

        assert result.errors == {
            "status": "Status must be one of: Available, Out of Stock, Coming Soon"
        }

    def test_non_image_attachment(self, valid_form):
        document = ImageAttachment("notes.pdf", "application/pdf", b"%PDF")

        result = validate_product(dict(valid_form, image_file=document))

        assert result.errors == {"image_file": "Only image files are allowed."}

    def test_oversized_image(self, valid_form):
        image = ImageAttachment("big.png", "image/png", b"x" * 11)

        result = validate_product(dict(valid_form, image_file=image), max_image_bytes=10)

        assert result.errors == {"image_file": "Image size must be less than 5MB."}

    def test_multiple_fields(self, valid_form):
        result = validate_product(dict(valid_form, price=-1, quantity=-1, sku=""))

        assert set(result.errors) == {"price", "quantity", "sku"}
