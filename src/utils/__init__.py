"""
Utility helpers used by the codec.

This subpackage exposes the structured error/success reporter.
"""

from .errors import ERRORS, ErrorReporter

__all__ = ["ERRORS", "ErrorReporter"]
