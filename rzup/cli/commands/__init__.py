"""
rzup CLI commands.

Each module exposes ``run(args) -> int``; the ``toolchain`` module exposes
one ``run_<sub-command>(args) -> int`` per sub-command instead.
"""
