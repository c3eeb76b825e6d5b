"""
In-memory rustup for testing.

``FakeRustup`` is installed as the ``side_effect`` of a patched
``subprocess.run`` and answers the ``toolchain list/remove/link`` commands
from a dict, so tests can inspect which toolchains rustup would know about.
"""

import subprocess
from pathlib import Path
from typing import Dict, List, Optional


class FakeRustup:
    """Simulated rustup toolchain registry."""

    def __init__(self, toolchains: Optional[Dict[str, Path]] = None, default: str = ""):
        self.toolchains: Dict[str, Path] = dict(toolchains or {})
        self.default = default
        self.calls: List[List[str]] = []
        self.fail_link = False

    def _result(self, cmd, returncode=0, stdout="", stderr=""):
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    def __call__(self, cmd, **kwargs):
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        args = cmd[1:]

        if args[:2] == ["toolchain", "list"]:
            lines = []
            for name, path in self.toolchains.items():
                marker = " (default)" if name == self.default else ""
                lines.append(f"{name}{marker} {path}")
            return self._result(cmd, stdout="\n".join(lines) + "\n")

        if args[:2] == ["toolchain", "remove"]:
            name = args[2]
            if name not in self.toolchains:
                return self._result(
                    cmd, 1, stderr=f"error: toolchain '{name}' is not installed"
                )
            del self.toolchains[name]
            return self._result(cmd, stdout=f"info: toolchain '{name}' uninstalled")

        if args[:2] == ["toolchain", "link"]:
            name, path = args[2], Path(args[3])
            if self.fail_link:
                return self._result(cmd, 1, stderr="error: invalid toolchain")
            if name in self.toolchains:
                return self._result(
                    cmd, 1, stderr=f"error: toolchain '{name}' already exists"
                )
            self.toolchains[name] = path
            return self._result(cmd)

        return self._result(cmd, 1, stderr=f"error: unexpected command {args}")

    def commands(self) -> List[List[str]]:
        """Recorded invocations without the executable."""
        return [c[1:] for c in self.calls]
