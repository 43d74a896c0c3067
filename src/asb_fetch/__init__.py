"""Top-level package for asb-fetch.

License: GPL-3.0
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("asb-fetch")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
