"""
Custom exception hierarchy for SellerFees.

All application-specific exceptions inherit from SellerFeesError,
enabling catch-all handling at the API layer while allowing
fine-grained handling in business logic.

Unreachable pricing targets are not errors: solvers report them
through a status field on the result.
"""

from decimal import Decimal


class SellerFeesError(Exception):
    """Base exception for all SellerFees application errors."""

    def __init__(self, message: str = "", details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# ─── Rule Configuration Errors ────────────────────────────────


class RuleConfigurationError(SellerFeesError):
    """The commission rule set is malformed. Never retried."""

    pass


class BracketNotFoundError(RuleConfigurationError):
    """No price bracket covers the given price."""

    def __init__(self, price: Decimal, **kwargs):
        self.price = price
        message = f"No price bracket covers price {price}"
        super().__init__(message=message, **kwargs)


class InvalidRulesError(RuleConfigurationError):
    """The bracket table or interpolation curves violate their invariants."""

    pass


class UnsupportedPolicyError(RuleConfigurationError):
    """Raised when an unregistered rule policy is requested."""

    pass


# ─── Input Errors ─────────────────────────────────────────────


class PlanInputError(SellerFeesError):
    """A batch planning input file could not be read or parsed."""

    pass
