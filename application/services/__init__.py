from .conversion_service import ConversionService
from .provider_registry import ProviderRegistry
from .rate_service import RateService

__all__ = ['ConversionService', 'ProviderRegistry', 'RateService']
