# tfm_deploy/cli/decorators/__init__.py
"""CLI decorators"""

from .module import module_options, handle_errors

__all__ = [
    'module_options',
    'handle_errors',
]
