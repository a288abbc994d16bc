"""Factory mapping provider identifiers to adapter instances."""

from seedreamstudio.config import ApiConfig, ProviderConfig, ProviderType, get_provider_config
from seedreamstudio.models.errors import UnsupportedProvider
from seedreamstudio.providers.base import ImageProvider
from seedreamstudio.providers.fal_provider import FalProvider
from seedreamstudio.providers.replicate_provider import ReplicateProvider
from seedreamstudio.providers.wavespeed_provider import WavespeedProvider

# Order matters: the first entry is the default provider
PROVIDER_REGISTRY: dict[ProviderType, type[ImageProvider]] = {
    ProviderType.FAL: FalProvider,
    ProviderType.WAVESPEED: WavespeedProvider,
    ProviderType.REPLICATE: ReplicateProvider,
}


class ApiProviderFactory:
    """Stateless factory for provider adapters."""

    @staticmethod
    def create(provider_type: ProviderType | str, config: ApiConfig) -> ImageProvider:
        """
        Construct the adapter registered for a provider type.

        Args:
            provider_type: A ProviderType or its string value
            config: API configuration passed to the adapter

        Raises:
            UnsupportedProvider: If no adapter is registered for the type
        """
        available = [p.value for p in PROVIDER_REGISTRY]
        try:
            provider_class = PROVIDER_REGISTRY[ProviderType(provider_type)]
        except (ValueError, KeyError):
            raise UnsupportedProvider(provider_type, available)
        return provider_class(config)

    @staticmethod
    def get_available_providers() -> list[ProviderType]:
        return list(PROVIDER_REGISTRY)

    @staticmethod
    def get_default_provider() -> ProviderType:
        return next(iter(PROVIDER_REGISTRY))

    @staticmethod
    def get_provider_config(provider_type: ProviderType | str) -> ProviderConfig:
        return get_provider_config(provider_type)
