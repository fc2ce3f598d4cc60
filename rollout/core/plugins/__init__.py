"""
Plugin system for extensibility.
Lets store and cache backends be selected by name from settings.
"""

from .registry import PluginRegistry, store_backends, cache_backends

__all__ = [
    "PluginRegistry",
    "store_backends",
    "cache_backends",
]
