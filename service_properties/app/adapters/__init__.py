"""
Adapters package for the properties service.

Contains HTTP client wrappers for upstream dependencies. These adapters
encapsulate:

- Base URLs and request shapes
- Timeouts
- Error handling that maps to shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .sanity_client import SanityClient

__all__ = ["SanityClient"]
