"""
gup CLI module.

This module provides the command-line interface for gup.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
