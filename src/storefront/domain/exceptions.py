"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly and turn them into typed
error results.  Each subclass carries a stable ``kind`` string that crosses
the boundary unchanged.

``StoreUnavailableError`` is deliberately *not* a DomainException: it reports
a persistence fault, not a rule violation.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "DomainError"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = "ValidationError"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "NotFound"


class ForbiddenError(DomainException):
    """The caller may not access another user's resource."""

    kind = "Forbidden"


class EmptyCartError(DomainException):
    """Checkout was attempted with no items in the cart."""

    kind = "EmptyCart"


class ProductUnavailableError(DomainException):
    """A cart line refers to a product that no longer exists."""

    kind = "ProductUnavailable"


class InsufficientStockError(DomainException):
    """Requested quantity exceeds the product's stock."""

    kind = "InsufficientStock"


class InvalidTransitionError(DomainException):
    """The order status graph forbids the requested change."""

    kind = "InvalidTransition"


class DuplicateReviewError(DomainException):
    """The user has already reviewed this product."""

    kind = "DuplicateReview"


class StoreUnavailableError(Exception):
    """The underlying data store failed; the operation changed nothing."""

    kind = "StoreUnavailable"
