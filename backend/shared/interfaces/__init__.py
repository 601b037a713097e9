"""
Capability interfaces for Sortly services
"""

from .capabilities import KeyValueStore, TextCompressor

__all__ = ["KeyValueStore", "TextCompressor"]
