"""
Mock implementations for testing rzup components.

This package provides mock implementations of external dependencies and
system interactions to enable isolated, deterministic testing.
"""

from .network import MockResponse, MockSession
from .rustup import FakeRustup

__all__ = [
    "MockResponse",
    "MockSession",
    "FakeRustup",
]
