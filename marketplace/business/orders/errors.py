"""
Domain exceptions for order and inventory business logic

Every exception carries an HTTP-analogous ``code`` and a stable machine-readable
``reason``; the presentation layer turns them into the API response envelope.
"""


class OrderDomainError(Exception):
    """Base exception for all order domain errors"""

    code = 400
    reason = 'order_error'

    def __init__(self, message, reason=None, details=None):
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason
        self.details = details


class NotFoundError(OrderDomainError):
    """Raised when an entity is absent or not visible to the caller"""
    code = 404
    reason = 'not_found'


class ListingNotFound(NotFoundError):
    reason = 'listing_not_found'


class OrderNotFound(NotFoundError):
    reason = 'order_not_found'


class VendorNotFound(NotFoundError):
    reason = 'vendor_not_found'


class UnauthorizedError(OrderDomainError):
    """Raised when no authenticated principal is present"""
    code = 401
    reason = 'unauthorized'


class ForbiddenError(OrderDomainError):
    """Raised when the principal lacks the required role or membership"""
    code = 403
    reason = 'forbidden'


class VendorAccessDenied(ForbiddenError):
    reason = 'no_vendor_access'


class BuyerStatusForbidden(ForbiddenError):
    """Raised when a buyer tries to set any status other than CANCELLED"""
    reason = 'invalid_status_change'


class AdminRequired(ForbiddenError):
    reason = 'admin_required'


class ValidationError(OrderDomainError):
    """Raised for malformed input"""
    reason = 'validation_error'


class InvalidQuantity(ValidationError):
    reason = 'invalid_quantity'


class InvalidListingId(ValidationError):
    reason = 'invalid_listing_id'


class InvalidStatus(ValidationError):
    reason = 'invalid_status'


class InvalidPayload(ValidationError):
    reason = 'invalid_payload'


class OrderPolicyViolation(OrderDomainError):
    """Raised when a listing cannot be ordered"""
    pass


class ListingUnavailable(OrderPolicyViolation):
    reason = 'listing_unavailable'


class MissingPrice(OrderPolicyViolation):
    reason = 'no_price'


class InsufficientStock(OrderDomainError):
    """Raised when the conditional stock decrement matched no row"""
    reason = 'insufficient_quantity'

    def __init__(self, message, available_qty=None, requested=None):
        super().__init__(message, details={'availableQty': available_qty, 'requested': requested})
        self.available_qty = available_qty
        self.requested = requested


class InvalidTransition(OrderDomainError):
    """Raised when a status transition is invalid or not allowed"""
    reason = 'invalid_status_transition'
