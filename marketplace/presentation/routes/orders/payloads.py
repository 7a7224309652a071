"""
Request body helpers for the order endpoints

Clients may send camelCase keys or their snake_case equivalents.
"""

from flask import request
from marketplace.business.orders.errors import InvalidPayload
from marketplace.business.orders.order_context import UNSET

# snake_case field -> accepted keys
FIELD_ALIASES = {
    'listing_id': ('listingId', 'listing_id'),
    'quantity': ('quantity',),
    'status': ('status',),
    'notes': ('notes',),
    'transaction_id': ('transactionId', 'transaction_id'),
}

UPDATE_FIELDS = ('status', 'notes', 'transaction_id')


def read_json_body() -> dict:
    """Parse the request body as a JSON object"""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidPayload("Request body must be a JSON object")
    return body


def pick(body: dict, field: str, default=UNSET):
    """Return the value sent for ``field`` under any accepted key"""
    for key in FIELD_ALIASES[field]:
        if key in body:
            return body[key]
    return default


def update_changes(body: dict) -> dict:
    """
    Collect the fields present in an order update body.

    Absent fields are left out so they are not touched; unknown keys are
    rejected.
    """
    known = {key for field in UPDATE_FIELDS for key in FIELD_ALIASES[field]}
    unknown = sorted(set(body) - known)
    if unknown:
        raise InvalidPayload(f"Unknown field(s): {', '.join(unknown)}")

    changes = {}
    for field in UPDATE_FIELDS:
        value = pick(body, field)
        if value is not UNSET:
            changes[field] = value
    return changes
