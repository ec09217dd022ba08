"""
Assembly/render providers.
"""
from .base import BaseAssemblyProvider
from .shotstack import ShotstackAssemblyProvider, build_shotstack_edit, SHOTSTACK_STATUS_MAP
from .factory import get_assembly_provider

__all__ = [
    "BaseAssemblyProvider",
    "ShotstackAssemblyProvider",
    "build_shotstack_edit",
    "SHOTSTACK_STATUS_MAP",
    "get_assembly_provider",
]
