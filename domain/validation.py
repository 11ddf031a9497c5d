"""
Business-rule checks applied before any cache read or network call.

Each check returns the error it found (or None) instead of raising, so the
calling provider decides when to stop and the check itself stays pure.
"""
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from domain.exceptions.currency import InvalidRequestError


def normalize_currency(code: str | None) -> str:
    return (code or "").strip().upper()


def check_currency_pair(
    from_currency: str, to_currency: str, bad_currencies: Iterable[str]
) -> InvalidRequestError | None:
    denied = {normalize_currency(code) for code in bad_currencies} - {""}
    for code in (from_currency, to_currency):
        if normalize_currency(code) in denied:
            return InvalidRequestError(
                f"Bad currency detected: {from_currency} to {to_currency}"
            )
    return None


def check_amount(amount: Decimal) -> InvalidRequestError | None:
    if not amount.is_finite() or amount <= 0:
        return InvalidRequestError("Amount must be greater than zero.")
    return None


def check_date_range(start: date, end: date) -> InvalidRequestError | None:
    if start > end:
        return InvalidRequestError("From date must be earlier than to date.")
    return None
