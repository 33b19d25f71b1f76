"""CLI utility functions"""

from .output import (
    console,
    format_deploy_result,
    format_delete_result,
    format_descriptor,
    format_json,
    print_result_json,
    print_error,
    print_warning,
    print_success,
)

__all__ = [
    'console',
    'format_deploy_result',
    'format_delete_result',
    'format_descriptor',
    'format_json',
    'print_result_json',
    'print_error',
    'print_warning',
    'print_success',
]
