"""
rzup CLI module.

This module provides the command-line interface for rzup.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
