"""
Cross-process install lock for rzup.

A single exclusive file lock inside the rzup home serializes every install
invocation, so two rzup processes never extract into or link the same
toolchain at the same time.

Usage:
    from rzup.core.locking import InstallLock

    with InstallLock(home / "rzup.lock", timeout=30):
        # resolve, fetch, extract, link
        pass
"""

import logging
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from .exceptions import LockUnavailable

logger = logging.getLogger(__name__)


class InstallLock:
    """
    Exclusive advisory lock over one lock file.

    Uses the `filelock` library, so the lock is released when the ``with``
    block exits, including on exceptions, and by the OS if the process dies.

    Attributes:
        lock_path: Lock file location
        timeout: Seconds to wait; -1 blocks indefinitely, 0 fails at once
    """

    def __init__(self, lock_path: Path, timeout: float = -1):
        self.lock_path = Path(lock_path)
        self.timeout = timeout
        self._lock = FileLock(self.lock_path, timeout=timeout)

    @property
    def is_locked(self) -> bool:
        return self._lock.is_locked

    def acquire(self) -> "InstallLock":
        """
        Acquire the lock, creating its parent directory if needed.

        Raises:
            LockUnavailable: If the lock is not free within the timeout
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._lock.acquire()
        except LockTimeout as e:
            logger.error(
                f"Could not acquire install lock after {self.timeout}s. "
                "Another rzup process may be running."
            )
            raise LockUnavailable(self.lock_path, self.timeout) from e
        logger.debug(f"Acquired install lock: {self.lock_path}")
        return self

    def release(self) -> None:
        if self._lock.is_locked:
            self._lock.release()
            logger.debug(f"Released install lock: {self.lock_path}")

    def __enter__(self) -> "InstallLock":
        return self.acquire()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()


__all__ = ["InstallLock", "LockTimeout"]
