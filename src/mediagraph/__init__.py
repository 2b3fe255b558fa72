"""
mediagraph
Typed queries over a remote music search API and a static book catalog
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
