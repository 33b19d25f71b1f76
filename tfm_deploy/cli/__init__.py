# tfm_deploy/cli/__init__.py
"""Command line interface for tfm-deploy"""

from .main import cli, main

__all__ = ["cli", "main"]
