"""Field validation for Product payloads.

The allow-list is exactly the ten Product wire names.  Full-replacement
requests (create, put) must carry all of them, empty values included;
partial updates may carry any subset.  Unknown keys are always rejected.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from modules.core.exceptions import InvalidArgument
from modules.products.dtos import ATTR_TO_WIRE, PRODUCT_FIELDS, WIRE_TO_ATTR, Product
from modules.products.exceptions import MissingField, UnknownField

_FIELD_ADAPTERS: Dict[str, TypeAdapter] = {
    ATTR_TO_WIRE[name]: TypeAdapter(field.annotation)
    for name, field in Product.model_fields.items()
}


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(item) for item in error["loc"]) or "value"
        parts.append(f"{loc}: {error['msg']}")
    return "; ".join(parts)


def require_product_id(operation: str, product_id: str) -> None:
    """Raise ``InvalidArgument`` when ``product_id`` is empty."""
    if not isinstance(product_id, str) or not product_id:
        raise InvalidArgument(operation, "productId must not be empty")


def _require_mapping(operation: str, payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise InvalidArgument(operation, "payload must be a JSON object")
    return payload


def validate_full(payload: Any, operation: str = "validate") -> Product:
    """Check ``payload`` against the allow-list and build a ``Product``.

    Raises:
        UnknownField: a key outside the allow-list is present.
        MissingField: an allow-listed key is absent.
        InvalidArgument: the payload is not a mapping or a value has the
            wrong type.
    """
    data = _require_mapping(operation, payload)

    for key in data:
        if key not in PRODUCT_FIELDS:
            raise UnknownField(operation, key)
    for key in sorted(PRODUCT_FIELDS):
        if key not in data:
            raise MissingField(operation, key)

    try:
        return Product.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise InvalidArgument(operation, _describe(exc)) from exc


def validate_partial(
    product_id: str, kvs: Any, operation: str = "update_partial"
) -> Dict[str, Any]:
    """Validate a partial update and return the merge set.

    The result is keyed by attribute name and never contains
    ``product_id``: the business key is immutable, so a matching
    ``productId`` in ``kvs`` is accepted and dropped.
    """
    require_product_id(operation, product_id)
    data = _require_mapping(operation, kvs)

    changes: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in PRODUCT_FIELDS:
            raise UnknownField(operation, key)
        try:
            checked = _FIELD_ADAPTERS[key].validate_python(value)
        except PydanticValidationError as exc:
            raise InvalidArgument(operation, f"{key}: {_describe(exc)}") from exc
        attr = WIRE_TO_ATTR[key]
        if attr == "product_id":
            if checked != product_id:
                raise InvalidArgument(operation, "productId does not match")
            continue
        changes[attr] = checked
    return changes
