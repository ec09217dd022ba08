"""
Studio - production orchestration for generated video.
"""

__version__ = "1.0.0"
