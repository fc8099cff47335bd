"""fsh - interactive shell over the local filesystem"""

from .version import __version__

__all__ = ["__version__"]
