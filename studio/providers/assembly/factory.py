"""
Assembly provider selection.
"""
from .base import BaseAssemblyProvider
from .shotstack import ShotstackAssemblyProvider


def get_assembly_provider() -> BaseAssemblyProvider:
    """Get the configured render provider; check ``is_available`` before use."""
    return ShotstackAssemblyProvider()
