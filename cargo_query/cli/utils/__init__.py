"""CLI Utilities Module"""

from .console import print_cancelled, print_error, print_result

__all__ = ["print_cancelled", "print_error", "print_result"]
