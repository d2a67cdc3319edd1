"""
SDK for Image Dashboard.

Provides programmatic image requests with usage tracking.
"""

from .openai_client import GuardedImageClient

__all__ = ["GuardedImageClient"]
