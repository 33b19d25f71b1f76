"""Version information for tfm-deploy package"""

__version__ = "1.0.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))
__author__ = "Daniel Sinclair"
__license__ = "MIT"
