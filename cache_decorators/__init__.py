"""
Cache decorators package.

Composable wrappers around a key-value cache store: single-flight blocking
population and weakly held values with a bounded recency buffer.
"""

from .__version__ import __version__

__all__ = ["__version__"]
