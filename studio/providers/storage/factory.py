"""
Storage provider factory.
"""
from typing import Literal

from .base import BaseStorageProvider
from .supabase import SupabaseStorageProvider
from .passthrough import PassthroughStorageProvider


ProviderType = Literal["auto", "supabase", "passthrough"]


class StorageProviderFactory:
    """Factory for creating storage providers with automatic fallback."""

    _providers = {
        "supabase": SupabaseStorageProvider,
        "passthrough": PassthroughStorageProvider,
    }

    @classmethod
    def create(cls, provider: ProviderType = "auto") -> BaseStorageProvider:
        if provider == "auto":
            return cls._create_auto()
        if provider not in cls._providers:
            return PassthroughStorageProvider()
        return cls._providers[provider]()

    @classmethod
    def _create_auto(cls) -> BaseStorageProvider:
        p = SupabaseStorageProvider()
        if p.is_available:
            return p
        return PassthroughStorageProvider()


def get_storage_provider(provider: ProviderType = "auto") -> BaseStorageProvider:
    """Get a storage provider, falling back to passthrough."""
    return StorageProviderFactory.create(provider)
