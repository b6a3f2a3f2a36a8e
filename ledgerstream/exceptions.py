"""Exception types raised by ledgerstream."""


class LedgerStreamError(Exception):
    """Base exception for ledgerstream."""
    pass


class InvalidArgumentError(LedgerStreamError, ValueError):
    """An operation received an argument it cannot work with.

    Raised for a negative ``n``, a missing key selector or predicate,
    or an unknown field name.
    """
    pass
