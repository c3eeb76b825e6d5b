"""
rzup - RISC Zero toolchain installer.

Downloads pre-built RISC Zero Rust and C++ toolchains from GitHub releases
and activates them for the build tools that use them.
"""

__version__ = "0.1.0"
