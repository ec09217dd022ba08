"""
Durable storage providers.
"""
from .base import BaseStorageProvider
from .supabase import SupabaseStorageProvider
from .passthrough import PassthroughStorageProvider
from .factory import StorageProviderFactory, get_storage_provider

__all__ = [
    "BaseStorageProvider",
    "SupabaseStorageProvider",
    "PassthroughStorageProvider",
    "StorageProviderFactory",
    "get_storage_provider",
]
