"""Utility functions for tfm-deploy"""

from .async_utils import run_async

__all__ = ["run_async"]
