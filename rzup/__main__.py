"""
Entry point for running rzup as a module.

Usage: python -m rzup [command] [options]
"""

from rzup.cli.parser import main

if __name__ == "__main__":
    main()
