"""
Errors raised by the virtual account.

Validation happens before any state is mutated, so a raised error never
leaves an account half-updated.
"""


class VirtualTradeError(Exception):
    """Base class for errors raised by vtrade_core."""


class ValidationError(VirtualTradeError, ValueError):
    """Order parameters (pair, side, units, type or options) are invalid."""


class NotFoundError(VirtualTradeError, LookupError):
    """No pending order with the requested id."""
