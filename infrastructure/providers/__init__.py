from .base import CurrencyProvider, convert_amount
from .european_central_bank import EuropeanCentralBankProvider
from .frankfurter import FrankfurterProvider

__all__ = ['CurrencyProvider', 'convert_amount', 'EuropeanCentralBankProvider', 'FrankfurterProvider']
