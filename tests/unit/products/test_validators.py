"""Unit tests for the Product field validators.

Covers:
- validate_full: allow-list, missing and unknown fields, value types.
- validate_partial: subset merges, id matching, unknown fields.
- require_product_id.
"""

from __future__ import annotations

import pytest

from modules.core.exceptions import InvalidArgument
from modules.products.dtos import PRODUCT_FIELDS
from modules.products.exceptions import MissingField, UnknownField
from modules.products.validators import (
    require_product_id,
    validate_full,
    validate_partial,
)

pytestmark = pytest.mark.unit


class TestAllowList:
    def test_has_exactly_ten_wire_names(self):
        assert PRODUCT_FIELDS == {
            "productId",
            "name",
            "image_closed",
            "image_open",
            "description",
            "story",
            "sourcing_values",
            "ingredients",
            "allergy_info",
            "dietary_certifications",
        }


# ===========================================================================
# validate_full
# ===========================================================================


class TestValidateFull:
    def test_accepts_exactly_the_ten_fields_with_empty_values(self, product_payload):
        product = validate_full(product_payload("001", name=""))
        assert product.product_id == "001"
        assert product.name == ""
        assert product.sourcing_values == []

    def test_accepts_empty_product_id(self, product_payload):
        # Empty ids are rejected by the caller, not the validator.
        product = validate_full(product_payload(""))
        assert product.product_id == ""

    @pytest.mark.parametrize("field", sorted(PRODUCT_FIELDS))
    def test_rejects_each_missing_field(self, product_payload, field):
        payload = product_payload()
        del payload[field]
        with pytest.raises(MissingField) as excinfo:
            validate_full(payload)
        assert excinfo.value.field == field

    def test_rejects_unknown_field(self, product_payload):
        payload = product_payload()
        payload["price"] = "3.50"
        with pytest.raises(UnknownField) as excinfo:
            validate_full(payload)
        assert excinfo.value.field == "price"

    def test_rejects_attribute_name_instead_of_wire_name(self, product_payload):
        payload = product_payload()
        payload["product_id"] = payload.pop("productId")
        with pytest.raises(UnknownField):
            validate_full(payload)

    def test_unknown_and_missing_errors_are_invalid_argument(self, product_payload):
        payload = product_payload()
        del payload["story"]
        with pytest.raises(InvalidArgument):
            validate_full(payload)

    def test_rejects_wrong_value_type(self, product_payload):
        payload = product_payload()
        payload["ingredients"] = "milk, sugar"
        with pytest.raises(InvalidArgument) as excinfo:
            validate_full(payload)
        assert "ingredients" in excinfo.value.message

    def test_rejects_number_for_string_field(self, product_payload):
        payload = product_payload()
        payload["name"] = 42
        with pytest.raises(InvalidArgument):
            validate_full(payload)

    def test_rejects_null_value(self, product_payload):
        payload = product_payload()
        payload["story"] = None
        with pytest.raises(InvalidArgument):
            validate_full(payload)

    def test_rejects_non_mapping(self):
        with pytest.raises(InvalidArgument):
            validate_full(["productId", "001"])

    def test_operation_is_reported(self, product_payload):
        payload = product_payload()
        del payload["name"]
        with pytest.raises(MissingField) as excinfo:
            validate_full(payload, operation="create")
        assert excinfo.value.operation == "create"

    def test_does_not_mutate_input(self, product_payload):
        payload = product_payload()
        snapshot = dict(payload)
        validate_full(payload)
        assert payload == snapshot


# ===========================================================================
# validate_partial
# ===========================================================================


class TestValidatePartial:
    def test_returns_attribute_keyed_changes(self):
        changes = validate_partial("001", {"name": "X", "ingredients": ["milk"]})
        assert changes == {"name": "X", "ingredients": ["milk"]}

    def test_empty_changes_allowed(self):
        assert validate_partial("001", {}) == {}

    def test_matching_product_id_is_dropped(self):
        changes = validate_partial("001", {"productId": "001", "story": "s"})
        assert changes == {"story": "s"}

    def test_mismatched_product_id_rejected(self):
        with pytest.raises(InvalidArgument):
            validate_partial("001", {"productId": "002"})

    def test_empty_id_rejected(self):
        with pytest.raises(InvalidArgument):
            validate_partial("", {"name": "X"})

    def test_unknown_field_rejected(self):
        with pytest.raises(UnknownField):
            validate_partial("001", {"flavour": "mint"})

    def test_bad_value_shape_rejected(self):
        with pytest.raises(InvalidArgument) as excinfo:
            validate_partial("001", {"sourcing_values": "organic"})
        assert "sourcing_values" in excinfo.value.message

    def test_non_string_list_items_rejected(self):
        with pytest.raises(InvalidArgument):
            validate_partial("001", {"ingredients": [{"name": "milk"}]})

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidArgument):
            validate_partial("001", "name=X")


class TestRequireProductId:
    def test_accepts_non_empty(self):
        require_product_id("read", "001")

    @pytest.mark.parametrize("value", ["", None])
    def test_rejects_empty(self, value):
        with pytest.raises(InvalidArgument) as excinfo:
            require_product_id("read", value)
        assert excinfo.value.operation == "read"
