# phonedeals/domain/errors.py
"""
Error kinds raised by the services.

Each kind carries the HTTP status it maps to and derives from the builtin
that matches its meaning, so callers may catch either.
"""


class DomainError(Exception):
    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# validation (400)
class InvalidAddress(DomainError, ValueError):
    default_message = "Address is required"


class EmptyCart(DomainError, ValueError):
    default_message = "Cart is empty"


class InvalidQuantity(DomainError, ValueError):
    default_message = "Quantity must be at least 1"


class InvalidPhoneId(DomainError, ValueError):
    default_message = "Invalid phone ID"


class InvalidOrderQuery(DomainError, ValueError):
    default_message = "Invalid query"


# not found (404)
class NotFound(DomainError, LookupError):
    status_code = 404
    default_message = "Not found"


class ListingNotFound(NotFound):
    default_message = "Phone not found"

    def __init__(self, listing_id=None):
        self.listing_id = listing_id
        super().__init__(
            f"Phone not found: {listing_id}" if listing_id is not None else None
        )


class CartLineNotFound(NotFound):
    default_message = "Item not found in cart"


class OrderNotFound(NotFound):
    default_message = "Order not found"


class WishlistItemNotFound(NotFound):
    default_message = "Item not found in wishlist"


# conflicts (409)
class Conflict(DomainError):
    status_code = 409
    default_message = "Conflict"


class InsufficientStock(Conflict):
    default_message = "Insufficient stock"

    def __init__(self, listing_id=None):
        self.listing_id = listing_id
        super().__init__(
            f"Insufficient stock for phone {listing_id}" if listing_id is not None else None
        )


class ConcurrencyConflict(Conflict):
    default_message = "Cart was modified by another request"


class StockLocked(Conflict):
    default_message = "Phone is being purchased by another user, please retry"


class AlreadyInWishlist(Conflict):
    default_message = "Item already in wishlist"


# auth
class Unauthorized(DomainError, PermissionError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(DomainError, PermissionError):
    status_code = 403
    default_message = "Forbidden"
